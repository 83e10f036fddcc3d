"""Dialect-specific statement builders."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

_INSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def upsert_insert(session: Session, target: Any) -> Any:
    """Return an INSERT construct supporting ``ON CONFLICT`` for the session's database.

    Raises:
        NotImplementedError: If the bound dialect has no ``ON CONFLICT`` support.
    """
    dialect = session.get_bind().dialect.name
    builder = _INSERT_BUILDERS.get(dialect)
    if builder is None:
        raise NotImplementedError(f"ON CONFLICT inserts are not supported on {dialect}")
    return builder(target)
