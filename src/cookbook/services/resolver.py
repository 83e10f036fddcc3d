"""Resolve mixed id/name references into canonical attribute entity ids."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from cookbook.core.errors import NotFoundError, ValidationError
from cookbook.db.dialects import upsert_insert
from cookbook.services.entity_tables import EntityKind, normalize_name
from cookbook.services.fuzzy import FuzzyMatcher, get_fuzzy_matcher

logger = logging.getLogger(__name__)


class Reference(Protocol):
    """Anything carrying an optional entity id and an optional free-text name."""

    id: Any
    name: str | None


@dataclass(frozen=True)
class ResolvedReference:
    """An input reference paired with the entity id it resolved to."""

    reference: Any
    entity_id: int


def _parse_id(raw: Any, label: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid {label}_id: {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError) as err:
        raise ValidationError(f"Invalid {label}_id: {raw!r}") from err
    if value <= 0 or (isinstance(raw, float) and not raw.is_integer()):
        raise ValidationError(f"Invalid {label}_id: {raw!r}")
    return value


def _has_id(ref: Reference) -> bool:
    return ref.id is not None and ref.id != ""


class NameResolver:
    """Map references to entity ids, creating missing names exactly once.

    Creation is a single ``INSERT .. ON CONFLICT DO NOTHING`` backed by the
    unique ``lower(name)`` index, so a concurrent resolver inserting the same
    name makes ours a no-op instead of a duplicate row. Ids are always read
    back afterwards; the insert result is never taken as proof of creation.
    """

    def __init__(self, fuzzy: FuzzyMatcher | None = None) -> None:
        self.fuzzy = fuzzy if fuzzy is not None else get_fuzzy_matcher()

    def resolve(
        self,
        session: Session,
        kind: EntityKind,
        references: Sequence[Reference],
    ) -> list[ResolvedReference]:
        """Return one :class:`ResolvedReference` per input, in input order.

        Raises:
            ValidationError: On an empty name or a malformed id.
            NotFoundError: If provided ids are missing or a name stays unresolved.
        """
        label = kind.table.label
        provided_ids: list[int] = []
        names: list[str] = []
        keys: list[tuple[str, int | str]] = []

        for ref in references:
            if _has_id(ref):
                entity_id = _parse_id(ref.id, label)
                provided_ids.append(entity_id)
                keys.append(("id", entity_id))
                continue
            normalized = normalize_name(ref.name)
            if not normalized:
                raise ValidationError(f"{label.capitalize()} name cannot be empty")
            if normalized not in names:
                names.append(normalized)
            keys.append(("name", normalized))

        self.validate_ids(session, kind, provided_ids)
        name_map = self.ensure_names(session, kind, names)

        unresolved = [name for name in names if name not in name_map]
        for name in unresolved:
            match_id = self.fuzzy.match(session, kind, name)
            if match_id is not None:
                name_map[name] = match_id

        missing = [name for name in names if name not in name_map]
        if missing:
            raise NotFoundError(
                f"Could not resolve {label} id for: {', '.join(missing)}",
                missing=missing,
            )

        resolved = []
        for ref, (key_type, key) in zip(references, keys, strict=True):
            entity_id = key if key_type == "id" else name_map[str(key)]
            resolved.append(ResolvedReference(reference=ref, entity_id=int(entity_id)))

        logger.debug(
            "Resolved %d %s references (%d ids, %d names)",
            len(resolved),
            label,
            len(provided_ids),
            len(names),
        )
        return resolved

    def validate_ids(self, session: Session, kind: EntityKind, entity_ids: Iterable[int]) -> None:
        """Fail with every missing id at once if any of ``entity_ids`` is unknown."""
        wanted = list(dict.fromkeys(entity_ids))
        if not wanted:
            return
        model = kind.table.model
        found = set(session.scalars(select(model.id).where(model.id.in_(wanted))))
        missing = [entity_id for entity_id in wanted if entity_id not in found]
        if missing:
            label = kind.table.label
            raise NotFoundError(
                f"Provided {label}_id(s) not found: {', '.join(str(m) for m in missing)}",
                missing=missing,
            )

    def ensure_names(
        self,
        session: Session,
        kind: EntityKind,
        normalized_names: Sequence[str],
    ) -> dict[str, int]:
        """Create any absent names and return ``{normalized_name: id}``."""
        if not normalized_names:
            return {}
        model = kind.table.model
        stmt = (
            upsert_insert(session, model)
            .values([{"name": name} for name in normalized_names])
            .on_conflict_do_nothing()
        )
        session.execute(stmt)
        return self.fetch_ids(session, kind, normalized_names)

    def fetch_ids(
        self,
        session: Session,
        kind: EntityKind,
        normalized_names: Sequence[str],
    ) -> dict[str, int]:
        """Return ids for the names that currently exist."""
        if not normalized_names:
            return {}
        model = kind.table.model
        rows = session.execute(
            select(model.id, model.name).where(func.lower(model.name).in_(list(normalized_names)))
        )
        return {normalize_name(row.name): int(row.id) for row in rows}
