"""Name suggestions for the ingredient and category pickers."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from cookbook.core.settings import settings
from cookbook.schemas.recipe import EntitySuggestion
from cookbook.services.entity_tables import EntityKind


def list_entities(
    session: Session,
    kind: EntityKind,
    query: str | None = None,
    limit: int | None = None,
) -> list[EntitySuggestion]:
    """Return entities whose name contains ``query`` (case-insensitive), ordered by name."""
    model = kind.table.model
    limit = limit or settings.suggestion_limit_default
    limit = max(1, min(limit, settings.suggestion_limit_max))

    stmt = select(model.id, model.name)
    needle = (query or "").strip()
    if needle:
        stmt = stmt.where(model.name.icontains(needle, autoescape=True))
    stmt = stmt.order_by(model.name).limit(limit)
    return [EntitySuggestion(id=row.id, name=row.name) for row in session.execute(stmt)]
