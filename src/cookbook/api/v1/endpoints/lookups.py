# src/cookbook/api/v1/endpoints/lookups.py
"""Ingredient and category suggestion endpoints."""

from fastapi import APIRouter, Query

from cookbook.schemas.recipe import EntitySuggestion
from cookbook.services.entity_tables import EntityKind
from cookbook.services.lookups import list_entities

from ..dependencies import SessionDep

ingredients_router = APIRouter(prefix="/ingredients", tags=["ingredients"])
categories_router = APIRouter(prefix="/categories", tags=["categories"])


@ingredients_router.get("/", response_model=list[EntitySuggestion])
def suggest_ingredients(
    db: SessionDep,
    q: str | None = Query(None, max_length=200, description="Case-insensitive name fragment"),
    limit: int = Query(20, ge=1, le=100),
) -> list[EntitySuggestion]:
    """List ingredients, optionally filtered by a name fragment."""
    return list_entities(db, EntityKind.INGREDIENT, q, limit)


@categories_router.get("/suggest", response_model=list[EntitySuggestion])
def suggest_categories(
    db: SessionDep,
    q: str | None = Query(None, max_length=200, description="Case-insensitive name fragment"),
    limit: int = Query(100, ge=1, le=100),
) -> list[EntitySuggestion]:
    """List categories, optionally filtered by a name fragment."""
    return list_entities(db, EntityKind.CATEGORY, q, limit)
