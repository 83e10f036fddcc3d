"""Per-user recipe bookmarks."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from cookbook.core.errors import NotFoundError
from cookbook.db.dialects import upsert_insert
from cookbook.models import Favorite, Recipe
from cookbook.schemas.favorite import FavoriteState
from cookbook.schemas.recipe import RecipeSummary

logger = logging.getLogger(__name__)


class FavoriteBook:
    """Add, remove and list favorites; adding twice or removing an absent one is a no-op."""

    def add(self, session: Session, actor_id: str, recipe_id: str) -> FavoriteState:
        """Bookmark the recipe for the actor.

        Raises:
            NotFoundError: If the recipe does not exist. Nothing is written.
        """
        if session.scalar(select(Recipe.id).where(Recipe.id == recipe_id)) is None:
            raise NotFoundError("Recipe not found", missing=[recipe_id])

        inserted = session.scalar(
            upsert_insert(session, Favorite)
            .values(user_id=actor_id, recipe_id=recipe_id)
            .on_conflict_do_nothing()
            .returning(Favorite.recipe_id)
        )
        if inserted is not None:
            logger.debug("Recipe %s favorited by %s", recipe_id, actor_id)
        return FavoriteState(recipe_id=recipe_id, favorited=True, changed=inserted is not None)

    def remove(self, session: Session, actor_id: str, recipe_id: str) -> FavoriteState:
        """Drop the bookmark if present."""
        removed = session.scalar(
            delete(Favorite)
            .where(Favorite.user_id == actor_id, Favorite.recipe_id == recipe_id)
            .returning(Favorite.recipe_id)
            .execution_options(synchronize_session=False)
        )
        return FavoriteState(recipe_id=recipe_id, favorited=False, changed=removed is not None)

    def list_for(self, session: Session, actor_id: str) -> list[RecipeSummary]:
        """Return the actor's favorite recipes, most recently added first."""
        stmt = (
            select(Recipe)
            .join(Favorite, Favorite.recipe_id == Recipe.id)
            .where(Favorite.user_id == actor_id)
            .order_by(Favorite.created_at.desc(), Recipe.title, Recipe.id)
        )
        return [
            RecipeSummary(
                id=recipe.id,
                title=recipe.title,
                image_url=recipe.image_url,
                author_id=recipe.author_id,
                created_at=recipe.created_at,
                upvotes=recipe.upvotes,
                downvotes=recipe.downvotes,
                score=recipe.vote_score,
            )
            for recipe in session.scalars(stmt)
        ]
