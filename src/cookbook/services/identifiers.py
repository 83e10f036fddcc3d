"""Collision-checked identifier allocation for string-keyed tables."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cookbook.core.errors import GenerationExhaustedError
from cookbook.core.settings import settings

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


def _uuid4_str() -> str:
    return str(uuid.uuid4())


class IdentifierGenerator:
    """Allocate random primary keys, retrying on collision.

    The existence check does not reserve anything. Two allocators can still
    pick the same id, so :meth:`insert_with_fresh_id` treats a primary-key
    violation on insert as another collision rather than as success.
    """

    def __init__(
        self,
        max_attempts: int | None = None,
        id_factory: Callable[[], str] = _uuid4_str,
    ) -> None:
        self.max_attempts = max_attempts or settings.id_allocation_attempts
        self._id_factory = id_factory

    def _id_taken(self, session: Session, model: Any, candidate: str) -> bool:
        return bool(session.scalar(select(exists().where(model.id == candidate))))

    def allocate(self, session: Session, model: Any) -> str:
        """Return an id not currently present in ``model``'s table.

        Raises:
            GenerationExhaustedError: If every attempt collided.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self._id_factory()
            if not self._id_taken(session, model, candidate):
                return candidate
            logger.warning(
                "Identifier collision on %s (attempt %d/%d)",
                model.__tablename__,
                attempt,
                self.max_attempts,
            )
        raise GenerationExhaustedError(
            f"Failed to generate a unique id for {model.__tablename__} "
            f"after {self.max_attempts} attempts"
        )

    def insert_with_fresh_id(
        self,
        session: Session,
        model: Any,
        factory: Callable[[str], RowT],
    ) -> RowT:
        """Insert ``factory(new_id)`` and return the persisted row.

        Candidates come from :meth:`allocate`. Each insert runs in a savepoint
        so a losing insert leaves the enclosing transaction usable, and an id
        taken by a concurrent writer in the meantime is allocated again.

        Raises:
            GenerationExhaustedError: If allocation or every insert attempt collided.
            IntegrityError: If the insert failed for a reason other than the id.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.allocate(session, model)
            row = factory(candidate)
            try:
                with session.begin_nested():
                    session.add(row)
                    session.flush()
            except IntegrityError:
                if not self._id_taken(session, model, candidate):
                    raise
                logger.warning(
                    "Identifier %s on %s was taken concurrently (attempt %d/%d)",
                    candidate,
                    model.__tablename__,
                    attempt,
                    self.max_attempts,
                )
                continue
            return row

        raise GenerationExhaustedError(
            f"Failed to insert {model.__tablename__} under a unique id "
            f"after {self.max_attempts} attempts"
        )
