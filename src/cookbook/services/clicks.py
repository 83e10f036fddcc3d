"""Per-recipe click counting with a best-effort audit log."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cookbook.core.errors import NotFoundError
from cookbook.db.dialects import upsert_insert
from cookbook.models import Recipe, RecipeClickLog, RecipeClicks

logger = logging.getLogger(__name__)


class ClickCounter:
    """Increment click totals; the counter row is authoritative, the log is not."""

    def record_click(self, session: Session, recipe_id: str, actor_id: str | None = None) -> int:
        """Add one click to the recipe and return the new total.

        Raises:
            NotFoundError: If the recipe does not exist. Nothing is written.
        """
        if session.scalar(select(Recipe.id).where(Recipe.id == recipe_id)) is None:
            raise NotFoundError("Recipe not found", missing=[recipe_id])

        stmt = upsert_insert(session, RecipeClicks).values(recipe_id=recipe_id, clicks=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[RecipeClicks.recipe_id],
            set_={"clicks": RecipeClicks.clicks + 1},
        ).returning(RecipeClicks.clicks)
        clicks = int(session.scalar(stmt))

        if actor_id is not None:
            self._append_log(session, recipe_id, actor_id)
        return clicks

    def _append_log(self, session: Session, recipe_id: str, actor_id: str) -> None:
        try:
            with session.begin_nested():
                session.add(RecipeClickLog(recipe_id=recipe_id, user_id=actor_id))
                session.flush()
        except SQLAlchemyError as exc:
            logger.warning("Failed to log click on %s by %s: %s", recipe_id, actor_id, exc)

    def get_clicks(self, session: Session, recipe_id: str) -> int:
        """Return the recipe's click total (0 before the first click)."""
        clicks = session.scalar(
            select(RecipeClicks.clicks).where(RecipeClicks.recipe_id == recipe_id)
        )
        return int(clicks or 0)
