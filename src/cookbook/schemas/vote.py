# src/cookbook/schemas/vote.py
"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCast(BaseModel):
    """Schema for casting, changing or removing a vote."""

    vote: Literal[-1, 0, 1] = Field(..., description="1 upvote, -1 downvote, 0 removes the vote")


class VoteState(BaseModel):
    """Aggregates for a recipe plus the requesting user's own vote."""

    recipe_id: str
    my_vote: int = 0
    upvotes: int = 0
    downvotes: int = 0
    score: int = 0
