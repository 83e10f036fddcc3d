"""Similarity-ranked fallback for names the exact resolver could not map.

Similarity is an optional database capability (``pg_trgm`` on PostgreSQL).
When it is missing the matcher reports "no match" instead of failing.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from cookbook.core.settings import settings
from cookbook.services.entity_tables import EntityKind

logger = logging.getLogger(__name__)


class SimilarityCapability(Protocol):
    """Ranks existing entity names against a query name."""

    def best_match(
        self,
        session: Session,
        kind: EntityKind,
        name: str,
        threshold: float,
    ) -> int | None:
        """Return the id of the most similar name above ``threshold``, if any."""
        ...


class TrigramSimilarity:
    """Similarity through the SQL ``similarity(text, text)`` function.

    The query runs in a savepoint: on PostgreSQL a missing function aborts
    the transaction, and only the savepoint is discarded.
    """

    def best_match(
        self,
        session: Session,
        kind: EntityKind,
        name: str,
        threshold: float,
    ) -> int | None:
        model = kind.table.model
        sim = func.similarity(model.name, name)
        stmt = (
            select(model.id, sim.label("sim"))
            .where(sim > threshold)
            .order_by(sim.desc(), model.id)
            .limit(1)
        )
        try:
            with session.begin_nested():
                row = session.execute(stmt).first()
        except DBAPIError as exc:
            logger.debug("Similarity search unavailable for %s: %s", kind.table.label, exc)
            return None
        return int(row.id) if row is not None else None


class FuzzyMatcher:
    """Second resolution tier: exact case-insensitive, then similarity."""

    def __init__(
        self,
        capability: SimilarityCapability | None = None,
        threshold: float | None = None,
        enabled: bool | None = None,
    ) -> None:
        self.capability = capability
        self.threshold = settings.fuzzy_match_threshold if threshold is None else threshold
        self.enabled = settings.fuzzy_match_enabled if enabled is None else enabled

    def match(self, session: Session, kind: EntityKind, normalized_name: str) -> int | None:
        """Return the id of an entity matching ``normalized_name``, or None."""
        model = kind.table.model
        exact = session.scalar(
            select(model.id).where(func.lower(model.name) == normalized_name).limit(1)
        )
        if exact is not None:
            return int(exact)

        if not self.enabled or self.capability is None:
            return None

        match_id = self.capability.best_match(session, kind, normalized_name, self.threshold)
        if match_id is not None:
            logger.debug(
                "Fuzzy-matched %s %r to id %s", kind.table.label, normalized_name, match_id
            )
        return match_id


def get_fuzzy_matcher() -> FuzzyMatcher:
    """Return a matcher backed by the database trigram capability."""
    return FuzzyMatcher(capability=TrigramSimilarity())
