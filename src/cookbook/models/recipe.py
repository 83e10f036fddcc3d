# src/cookbook/models/recipe.py
"""SQLAlchemy model for recipes and their denormalized vote counters."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.db.session import Base


class Recipe(Base):
    """Primary content record authored by a user.

    ``upvotes``, ``downvotes`` and ``vote_score`` cache the aggregates of
    ``recipe_votes`` and are only ever changed by relative updates.
    """

    __tablename__ = "recipes"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_recipes_upvotes_non_negative"),
        CheckConstraint("downvotes >= 0", name="ck_recipes_downvotes_non_negative"),
        Index("ix_recipes_author_id", "author_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    upvotes: Mapped[int] = mapped_column(default=0, server_default="0", nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, server_default="0", nullable=False)
    vote_score: Mapped[int] = mapped_column(default=0, server_default="0", nullable=False)
