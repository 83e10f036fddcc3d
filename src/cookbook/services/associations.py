"""Bulk writes of recipe to attribute entity links."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from cookbook.core.errors import ValidationError
from cookbook.db.dialects import upsert_insert
from cookbook.schemas.recipe import LinkedEntity
from cookbook.services.entity_tables import EntityKind


@dataclass(frozen=True)
class AssociationRow:
    """One link to write: the entity id plus any per-link attributes."""

    entity_id: int
    attributes: Mapping[str, Any] = field(default_factory=dict)


class AssociationWriter:
    """Write join rows for one recipe and one attribute kind.

    Inserts ignore ``(recipe_id, entity_id)`` conflicts, so re-linking an
    entity is a no-op. Atomicity across several calls comes from the
    caller's transaction.
    """

    def _build_values(
        self,
        recipe_id: str,
        kind: EntityKind,
        rows: Sequence[AssociationRow],
    ) -> list[dict[str, Any]]:
        table = kind.table
        allowed = set(table.link_attributes)
        values: dict[int, dict[str, Any]] = {}
        for row in rows:
            unknown = set(row.attributes) - allowed
            if unknown:
                raise ValidationError(
                    f"Unsupported {table.label} link attribute(s): {', '.join(sorted(unknown))}"
                )
            if row.entity_id in values:
                continue
            value = {"recipe_id": recipe_id, table.link_column: row.entity_id}
            for name in table.link_attributes:
                value[name] = row.attributes.get(name)
            values[row.entity_id] = value
        return list(values.values())

    def link_all(
        self,
        session: Session,
        recipe_id: str,
        kind: EntityKind,
        rows: Sequence[AssociationRow],
    ) -> int:
        """Insert all links in one statement and return how many were attempted."""
        values = self._build_values(recipe_id, kind, rows)
        if not values:
            return 0
        stmt = (
            upsert_insert(session, kind.table.link_model)
            .values(values)
            .on_conflict_do_nothing()
        )
        session.execute(stmt)
        return len(values)

    def unlink_all(self, session: Session, recipe_id: str, kind: EntityKind) -> None:
        """Remove every link of ``kind`` from the recipe."""
        link_model = kind.table.link_model
        session.execute(delete(link_model).where(link_model.recipe_id == recipe_id))

    def replace_all(
        self,
        session: Session,
        recipe_id: str,
        kind: EntityKind,
        rows: Sequence[AssociationRow],
    ) -> int:
        """Swap the recipe's links of ``kind`` for ``rows``.

        Must run inside the caller's transaction so readers never observe
        the recipe without links.
        """
        self.unlink_all(session, recipe_id, kind)
        return self.link_all(session, recipe_id, kind, rows)

    def list_links(self, session: Session, recipe_id: str, kind: EntityKind) -> list[LinkedEntity]:
        """Return the linked entities ordered by name."""
        table = kind.table
        model, link_model = table.model, table.link_model
        columns = [model.id, model.name]
        columns.extend(getattr(link_model, name) for name in table.link_attributes)
        stmt = (
            select(*columns)
            .join(link_model, table.entity_id_column == model.id)
            .where(link_model.recipe_id == recipe_id)
            .order_by(model.name)
        )
        return [LinkedEntity(**row._asdict()) for row in session.execute(stmt)]
