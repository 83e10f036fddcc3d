# src/cookbook/models/__init__.py
"""SQLAlchemy models for the Cookbook application."""

from .click import RecipeClickLog, RecipeClicks
from .favorite import Favorite
from .recipe import Recipe
from .taxonomy import Category, Ingredient, RecipeCategory, RecipeIngredient
from .user import User
from .vote import RecipeVote

__all__ = [
    "Category", "Ingredient", "RecipeCategory", "RecipeIngredient",
    "Favorite",
    "Recipe",
    "RecipeClickLog", "RecipeClicks",
    "RecipeVote",
    "User",
]
