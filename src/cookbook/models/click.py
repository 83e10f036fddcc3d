# src/cookbook/models/click.py
"""Click counter and its append-only audit log."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.db.session import Base


class RecipeClicks(Base):
    """Running click total for a recipe; the row is created on first click."""

    __tablename__ = "recipe_clicks"

    recipe_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    clicks: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class RecipeClickLog(Base):
    """One row per authenticated click."""

    __tablename__ = "recipe_click_logs"
    __table_args__ = (Index("ix_recipe_click_logs_recipe_id", "recipe_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
