# src/cookbook/models/user.py
"""SQLAlchemy model for accounts owned by the auth service."""

from __future__ import annotations

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.db.session import Base


class User(Base):
    """Account that authors recipes and casts votes."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def is_elevated(self) -> bool:
        """Return True if the account may edit content it does not own."""
        return bool(self.is_admin)
