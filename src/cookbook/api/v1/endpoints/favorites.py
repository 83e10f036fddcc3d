"""Favorite (bookmark) endpoints for the authenticated user."""

from fastapi import APIRouter

from cookbook.schemas.favorite import FavoriteState
from cookbook.schemas.recipe import RecipeSummary

from ..dependencies import CurrentActorDep, RecipeServiceDep, SessionDep

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/", response_model=list[RecipeSummary])
def list_favorites(
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> list[RecipeSummary]:
    """List the caller's favorite recipes, newest first."""
    return service.list_favorites(db, actor)


@router.post("/{recipe_id}", response_model=FavoriteState)
def add_favorite(
    recipe_id: str,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> FavoriteState:
    """Add a recipe to the caller's favorites."""
    return service.add_favorite(db, actor, recipe_id)


@router.delete("/{recipe_id}", response_model=FavoriteState)
def remove_favorite(
    recipe_id: str,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> FavoriteState:
    """Remove a recipe from the caller's favorites; a no-op if absent."""
    return service.remove_favorite(db, actor, recipe_id)
