# src/cookbook/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    activity_router,
    categories_router,
    favorites_router,
    ingredients_router,
    recipes_router,
)

__all__ = [
    "activity_router",
    "categories_router",
    "favorites_router",
    "ingredients_router",
    "recipes_router",
]
