"""Create the schema and repair denormalized vote counters."""
from __future__ import annotations

import argparse
import sys

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from cookbook.core.settings import settings
from cookbook.db.session import (
    SessionLocal,
    create_tables,
    drop_tables,
    unit_of_work,
)
from cookbook.models import Recipe
from cookbook.services.votes import VoteAggregator


def recount_all_votes() -> int:
    """Rebuild vote counters of every recipe from the ledger; return the recipe count."""
    aggregator = VoteAggregator()
    with SessionLocal() as session, unit_of_work(session):
        recipe_ids = list(session.scalars(select(Recipe.id)))
        for recipe_id in recipe_ids:
            aggregator.recount(session, recipe_id)
    return len(recipe_ids)


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize the configured database")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop every table before creating the schema.",
    )
    parser.add_argument(
        "--recount-votes",
        action="store_true",
        help="Recompute upvotes/downvotes/score of every recipe from recipe_votes.",
    )
    args = parser.parse_args()

    try:
        if args.drop_tables:
            drop_tables()
            print("[init_db] dropped all tables")
        create_tables()
        print(f"[init_db] schema ready at {settings.effective_database_url}")
        if args.recount_votes:
            count = recount_all_votes()
            print(f"[init_db] recounted votes for {count} recipes")
    except SQLAlchemyError as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
