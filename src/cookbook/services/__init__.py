# src/cookbook/services/__init__.py
"""Business logic services for the Cookbook application."""

from .associations import AssociationRow, AssociationWriter
from .clicks import ClickCounter
from .entity_tables import EntityKind
from .favorites import FavoriteBook
from .fuzzy import FuzzyMatcher, TrigramSimilarity
from .identifiers import IdentifierGenerator
from .recipe_service import RecipeService, get_recipe_service
from .resolver import NameResolver, ResolvedReference
from .votes import VoteAggregator

__all__ = [
    "AssociationRow", "AssociationWriter",
    "ClickCounter",
    "EntityKind",
    "FavoriteBook",
    "FuzzyMatcher", "TrigramSimilarity",
    "IdentifierGenerator",
    "NameResolver", "ResolvedReference",
    "RecipeService", "get_recipe_service",
    "VoteAggregator",
]
