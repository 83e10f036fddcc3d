"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .click import ClickRecorded
from .favorite import FavoriteState
from .recipe import (
    CategoryReference,
    EntityReference,
    EntitySuggestion,
    IngredientReference,
    LinkedEntity,
    RecipeCreate,
    RecipeCreated,
    RecipeDetail,
    RecipeSummary,
    RecipeUpdate,
)
from .vote import VoteCast, VoteState

__all__ = [
    "ClickRecorded",
    "FavoriteState",
    "CategoryReference", "EntityReference", "EntitySuggestion", "IngredientReference",
    "LinkedEntity",
    "RecipeCreate", "RecipeCreated", "RecipeDetail", "RecipeSummary", "RecipeUpdate",
    "VoteCast", "VoteState",
]
