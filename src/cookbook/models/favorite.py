# src/cookbook/models/favorite.py
"""Recipes a user has bookmarked."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.db.session import Base


class Favorite(Base):
    """One bookmark per (user, recipe); deleting either side removes it."""

    __tablename__ = "favorites"
    __table_args__ = (Index("ix_favorites_recipe_id", "recipe_id"),)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
