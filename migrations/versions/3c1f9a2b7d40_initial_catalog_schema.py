"""initial catalog schema

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-19 10:12:44.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _enable_trigram_extension() -> None:
    """Install pg_trgm when the server offers it; similarity matching is optional."""
    op.execute(
        """
        DO $$
        BEGIN
          IF EXISTS (SELECT 1 FROM pg_available_extensions WHERE name = 'pg_trgm') THEN
            CREATE EXTENSION IF NOT EXISTS pg_trgm;
          END IF;
        END
        $$;
        """
    )


def upgrade() -> None:
    """Create users, recipes, attribute tables, links, votes and clicks."""
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        _enable_trigram_extension()

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "recipes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("author_id", sa.String(length=36), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("vote_score", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("upvotes >= 0", name="ck_recipes_upvotes_non_negative"),
        sa.CheckConstraint("downvotes >= 0", name="ck_recipes_downvotes_non_negative"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recipes_author_id", "recipes", ["author_id"])

    for table in ("ingredients", "categories"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("name", sa.Text(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            f"uq_{table}_name_lower",
            table,
            [sa.text("lower(name)")],
            unique=True,
        )

    op.create_table(
        "recipe_ingredients",
        sa.Column("recipe_id", sa.String(length=36), nullable=False),
        sa.Column("ingredient_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["ingredient_id"], ["ingredients.id"]),
        sa.PrimaryKeyConstraint("recipe_id", "ingredient_id"),
    )
    op.create_index(
        "ix_recipe_ingredients_ingredient_id", "recipe_ingredients", ["ingredient_id"]
    )
    op.create_table(
        "recipe_categories",
        sa.Column("recipe_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"]),
        sa.PrimaryKeyConstraint("recipe_id", "category_id"),
    )
    op.create_index(
        "ix_recipe_categories_category_id", "recipe_categories", ["category_id"]
    )

    op.create_table(
        "recipe_votes",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("recipe_id", sa.String(length=36), nullable=False),
        sa.Column("vote", sa.SmallInteger(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("vote IN (1, -1)", name="ck_recipe_votes_vote"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "recipe_id"),
    )
    op.create_index("ix_recipe_votes_recipe_id", "recipe_votes", ["recipe_id"])

    op.create_table(
        "recipe_clicks",
        sa.Column("recipe_id", sa.String(length=36), nullable=False),
        sa.Column("clicks", sa.BigInteger(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("recipe_id"),
    )
    op.create_table(
        "recipe_click_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("recipe_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recipe_click_logs_recipe_id", "recipe_click_logs", ["recipe_id"])


def downgrade() -> None:
    """Drop the catalog schema."""
    op.drop_index("ix_recipe_click_logs_recipe_id", table_name="recipe_click_logs")
    op.drop_table("recipe_click_logs")
    op.drop_table("recipe_clicks")
    op.drop_index("ix_recipe_votes_recipe_id", table_name="recipe_votes")
    op.drop_table("recipe_votes")
    op.drop_index("ix_recipe_categories_category_id", table_name="recipe_categories")
    op.drop_table("recipe_categories")
    op.drop_index("ix_recipe_ingredients_ingredient_id", table_name="recipe_ingredients")
    op.drop_table("recipe_ingredients")
    for table in ("categories", "ingredients"):
        op.drop_index(f"uq_{table}_name_lower", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_recipes_author_id", table_name="recipes")
    op.drop_table("recipes")
    op.drop_table("users")
