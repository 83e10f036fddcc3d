"""Closed registry of the attribute tables the resolver may touch.

Services select tables through :class:`EntityKind` only; no table or column
name is ever derived from request data.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from cookbook.models import Category, Ingredient, RecipeCategory, RecipeIngredient


@dataclass(frozen=True)
class EntityTable:
    """Static description of one attribute table and its recipe join table."""

    model: Any
    link_model: Any
    link_column: str
    link_attributes: tuple[str, ...]
    label: str

    @property
    def entity_id_column(self) -> Any:
        """Return the join table column holding the entity id."""
        return getattr(self.link_model, self.link_column)


class EntityKind(enum.Enum):
    """Attribute kinds a recipe can reference."""

    INGREDIENT = EntityTable(
        model=Ingredient,
        link_model=RecipeIngredient,
        link_column="ingredient_id",
        link_attributes=("quantity",),
        label="ingredient",
    )
    CATEGORY = EntityTable(
        model=Category,
        link_model=RecipeCategory,
        link_column="category_id",
        link_attributes=(),
        label="category",
    )

    @property
    def table(self) -> EntityTable:
        return self.value


def normalize_name(raw: str | None) -> str:
    """Return the normalization key for a free-text name (trimmed, lower-cased)."""
    return (raw or "").strip().lower()
