# src/cookbook/schemas/recipe.py
"""Recipe-related Pydantic schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class EntityReference(BaseModel):
    """Reference to an attribute entity by existing id or by free-text name."""

    id: int | None = Field(None, description="Existing entity id; wins over name")
    name: str | None = Field(None, max_length=200, description="Free-text entity name")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _require_id_or_name(self) -> "EntityReference":
        if self.id is None and (self.name is None or not self.name.strip()):
            raise ValueError("Each reference must include a name or an id")
        return self


class IngredientReference(EntityReference):
    """Ingredient reference carrying an optional per-recipe quantity."""

    id: int | None = Field(
        None,
        validation_alias=AliasChoices("id", "ingredient_id"),
        description="Existing ingredient id",
    )
    quantity: str | None = Field(None, max_length=200, description="Free-text quantity")


class CategoryReference(EntityReference):
    """Category reference."""

    id: int | None = Field(
        None,
        validation_alias=AliasChoices("id", "category_id"),
        description="Existing category id",
    )


class RecipeCreate(BaseModel):
    """Schema for creating a new recipe."""

    title: str = Field(..., min_length=1, max_length=300)
    instructions: str = Field(..., min_length=1, max_length=20000)
    image_url: str | None = Field(None, max_length=2000)
    ingredients: list[IngredientReference] = Field(default_factory=list)
    categories: list[CategoryReference] = Field(default_factory=list)


class RecipeUpdate(BaseModel):
    """Partial update; only fields present in the request body are replaced.

    An empty ``ingredients`` or ``categories`` list clears that kind of link,
    while leaving the key out keeps the existing links.
    """

    title: str | None = Field(None, min_length=1, max_length=300)
    instructions: str | None = Field(None, min_length=1, max_length=20000)
    image_url: str | None = Field(None, max_length=2000)
    ingredients: list[IngredientReference] | None = None
    categories: list[CategoryReference] | None = None


class RecipeCreated(BaseModel):
    """Identifier returned after a successful create."""

    message: str = "Recipe created"
    recipe_id: str


class LinkedEntity(BaseModel):
    """Attribute entity as linked to one recipe."""

    id: int
    name: str
    quantity: str | None = None


class EntitySuggestion(BaseModel):
    """Lookup row returned by the suggestion endpoints."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class RecipeDetail(BaseModel):
    """Full recipe view including links and counters."""

    id: str
    title: str
    instructions: str
    image_url: str | None
    author_id: str
    created_at: datetime | None
    upvotes: int
    downvotes: int
    score: int
    clicks: int
    ingredients: list[LinkedEntity]
    categories: list[LinkedEntity]


class RecipeSummary(BaseModel):
    """Recipe row without links, as listed in a user's favorites."""

    id: str
    title: str
    image_url: str | None
    author_id: str
    created_at: datetime | None
    upvotes: int
    downvotes: int
    score: int = Field(validation_alias=AliasChoices("score", "vote_score"))

    model_config = ConfigDict(from_attributes=True)
