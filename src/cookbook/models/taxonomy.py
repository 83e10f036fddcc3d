# src/cookbook/models/taxonomy.py
"""Shared attribute entities (ingredients, categories) and their recipe links."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from cookbook.db.session import Base


class Ingredient(Base):
    """Named ingredient shared by many recipes.

    Names are stored normalized (trimmed, lower-cased); the functional unique
    index below is what makes concurrent lazy creation safe.
    """

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)


class Category(Base):
    """Named category shared by many recipes."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)


Index("uq_ingredients_name_lower", func.lower(Ingredient.name), unique=True)
Index("uq_categories_name_lower", func.lower(Category.name), unique=True)


class RecipeIngredient(Base):
    """Join row linking a recipe to an ingredient with an optional quantity."""

    __tablename__ = "recipe_ingredients"
    __table_args__ = (Index("ix_recipe_ingredients_ingredient_id", "ingredient_id"),)

    # Composite primary key turns repeated links into conflicts.
    recipe_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    ingredient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ingredients.id"),
        primary_key=True,
    )
    quantity: Mapped[str | None] = mapped_column(Text, nullable=True)


class RecipeCategory(Base):
    """Join row linking a recipe to a category."""

    __tablename__ = "recipe_categories"
    __table_args__ = (Index("ix_recipe_categories_category_id", "category_id"),)

    recipe_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        primary_key=True,
    )
