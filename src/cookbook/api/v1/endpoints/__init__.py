# src/cookbook/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .activity import router as activity_router
from .favorites import router as favorites_router
from .lookups import categories_router, ingredients_router
from .recipes import router as recipes_router

__all__ = [
    "activity_router",
    "categories_router",
    "favorites_router",
    "ingredients_router",
    "recipes_router",
]
