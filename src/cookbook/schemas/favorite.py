# src/cookbook/schemas/favorite.py
"""Favorite-related Pydantic schemas."""

from pydantic import BaseModel


class FavoriteState(BaseModel):
    """Whether the caller has the recipe in their favorites after the request."""

    recipe_id: str
    favorited: bool
    changed: bool
