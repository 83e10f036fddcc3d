# src/cookbook/models/vote.py
"""Models capturing voting interactions on recipes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.db.session import Base


class RecipeVote(Base):
    """Per-user vote on a recipe; the source of truth for vote counters."""

    __tablename__ = "recipe_votes"
    __table_args__ = (
        CheckConstraint("vote IN (1, -1)", name="ck_recipe_votes_vote"),
        Index("ix_recipe_votes_recipe_id", "recipe_id"),
    )

    # Composite primary key prevents duplicate votes from the same user.
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

    # 1 = upvote, -1 = downvote. Removing a vote deletes the row.
    vote: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
