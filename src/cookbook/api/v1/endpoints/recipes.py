# src/cookbook/api/v1/endpoints/recipes.py
"""Recipe endpoints for the Cookbook API."""

from fastapi import APIRouter, status

from cookbook.schemas.recipe import RecipeCreate, RecipeCreated, RecipeDetail, RecipeUpdate

from ..dependencies import CurrentActorDep, RecipeServiceDep, SessionDep

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=RecipeCreated)
def create_recipe(
    payload: RecipeCreate,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> RecipeCreated:
    """Create a recipe, resolving ingredient and category references."""
    recipe_id = service.create_recipe(db, actor, payload)
    return RecipeCreated(recipe_id=recipe_id)


@router.get("/{recipe_id}", response_model=RecipeDetail)
def get_recipe(
    recipe_id: str,
    db: SessionDep,
    service: RecipeServiceDep,
) -> RecipeDetail:
    """Get a recipe with its ingredients, categories and counters."""
    return service.get_recipe(db, recipe_id)


@router.patch("/{recipe_id}")
def update_recipe(
    recipe_id: str,
    payload: RecipeUpdate,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> dict[str, str]:
    """Replace the supplied fields and link lists of a recipe.

    Only the author or an admin may update a recipe.
    """
    service.update_recipe(db, actor, recipe_id, payload)
    return {"status": "success"}


@router.delete("/{recipe_id}")
def delete_recipe(
    recipe_id: str,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> dict[str, str]:
    """Delete a recipe along with its links, votes and clicks."""
    service.delete_recipe(db, actor, recipe_id)
    return {"status": "success"}
