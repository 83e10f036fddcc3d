"""Transactional recipe operations composed from the resolution services."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cookbook.core.errors import (
    ConflictError,
    CookbookError,
    NotFoundError,
    PermissionDeniedError,
    TransactionAbortError,
)
from cookbook.core.security import Actor
from cookbook.db.session import unit_of_work
from cookbook.models import Recipe
from cookbook.schemas.favorite import FavoriteState
from cookbook.schemas.recipe import RecipeCreate, RecipeDetail, RecipeSummary, RecipeUpdate
from cookbook.schemas.vote import VoteState
from cookbook.services.associations import AssociationRow, AssociationWriter
from cookbook.services.clicks import ClickCounter
from cookbook.services.entity_tables import EntityKind
from cookbook.services.favorites import FavoriteBook
from cookbook.services.identifiers import IdentifierGenerator
from cookbook.services.resolver import NameResolver
from cookbook.services.votes import VoteAggregator

logger = logging.getLogger(__name__)

# Attribute kinds in the order they are resolved, with the payload field carrying them.
_LINKED_KINDS: tuple[tuple[EntityKind, str], ...] = (
    (EntityKind.INGREDIENT, "ingredients"),
    (EntityKind.CATEGORY, "categories"),
)
_REQUIRED_FIELDS = ("title", "instructions")


class RecipeService:
    """Run each recipe request as one all-or-nothing unit of work.

    Components below this layer only receive the session; this class alone
    commits or rolls back. Typed errors keep their kind after rollback,
    uniqueness violations become :class:`ConflictError` and any other
    failure becomes :class:`TransactionAbortError`.
    """

    def __init__(
        self,
        identifiers: IdentifierGenerator | None = None,
        resolver: NameResolver | None = None,
        associations: AssociationWriter | None = None,
        votes: VoteAggregator | None = None,
        clicks: ClickCounter | None = None,
        favorites: FavoriteBook | None = None,
    ) -> None:
        self.identifiers = identifiers or IdentifierGenerator()
        self.resolver = resolver or NameResolver()
        self.associations = associations or AssociationWriter()
        self.votes = votes or VoteAggregator()
        self.clicks = clicks or ClickCounter()
        self.favorites = favorites or FavoriteBook()

    @contextmanager
    def _atomic(self, session: Session, action: str) -> Iterator[None]:
        try:
            with unit_of_work(session):
                yield
        except CookbookError:
            raise
        except IntegrityError as exc:
            logger.warning("%s rejected by a constraint: %s", action, exc.orig)
            raise ConflictError(f"{action} conflicts with existing data") from exc
        except SQLAlchemyError as exc:
            logger.exception("%s aborted", action)
            raise TransactionAbortError(f"{action} failed", cause=exc) from exc
        except Exception as exc:
            logger.exception("%s aborted by an unexpected error", action)
            raise TransactionAbortError(f"{action} failed", cause=exc) from exc

    def _link(
        self,
        session: Session,
        recipe_id: str,
        kind: EntityKind,
        references: Sequence[Any],
        *,
        replace: bool,
    ) -> None:
        resolved = self.resolver.resolve(session, kind, references)
        attributes = kind.table.link_attributes
        rows = [
            AssociationRow(
                entity_id=item.entity_id,
                attributes={name: getattr(item.reference, name, None) for name in attributes},
            )
            for item in resolved
        ]
        if replace:
            self.associations.replace_all(session, recipe_id, kind, rows)
        else:
            self.associations.link_all(session, recipe_id, kind, rows)

    def _load_for_write(self, session: Session, actor: Actor, recipe_id: str) -> Recipe:
        recipe = session.scalar(select(Recipe).where(Recipe.id == recipe_id).with_for_update())
        if recipe is None:
            raise NotFoundError("Recipe not found", missing=[recipe_id])
        if not actor.can_edit(recipe.author_id):
            raise PermissionDeniedError("Only the author or an admin can modify this recipe")
        return recipe

    def create_recipe(self, session: Session, actor: Actor, payload: RecipeCreate) -> str:
        """Create a recipe with its ingredient and category links.

        Returns:
            The new recipe id.
        """
        with self._atomic(session, "create recipe"):
            recipe = self.identifiers.insert_with_fresh_id(
                session,
                Recipe,
                lambda new_id: Recipe(
                    id=new_id,
                    title=payload.title,
                    instructions=payload.instructions,
                    image_url=payload.image_url,
                    author_id=actor.id,
                ),
            )
            recipe_id = recipe.id
            for kind, field_name in _LINKED_KINDS:
                self._link(session, recipe_id, kind, getattr(payload, field_name), replace=False)

        logger.info("Recipe %s created by %s", recipe_id, actor.id)
        return recipe_id

    def update_recipe(
        self,
        session: Session,
        actor: Actor,
        recipe_id: str,
        payload: RecipeUpdate,
    ) -> None:
        """Replace the fields and link lists present in ``payload``.

        A link list sent as ``[]`` clears that kind; one left out (or sent as
        ``null``) keeps the current links.
        """
        provided = payload.model_fields_set
        with self._atomic(session, "update recipe"):
            recipe = self._load_for_write(session, actor, recipe_id)
            for name in _REQUIRED_FIELDS:
                value = getattr(payload, name)
                if name in provided and value is not None:
                    setattr(recipe, name, value)
            if "image_url" in provided:
                recipe.image_url = payload.image_url
            session.flush()

            for kind, field_name in _LINKED_KINDS:
                references = getattr(payload, field_name)
                if field_name in provided and references is not None:
                    self._link(session, recipe_id, kind, references, replace=True)

        logger.info("Recipe %s updated by %s", recipe_id, actor.id)

    def delete_recipe(self, session: Session, actor: Actor, recipe_id: str) -> None:
        """Delete a recipe; links, votes and click data go with it."""
        with self._atomic(session, "delete recipe"):
            recipe = self._load_for_write(session, actor, recipe_id)
            session.delete(recipe)
        logger.info("Recipe %s deleted by %s", recipe_id, actor.id)

    def get_recipe(self, session: Session, recipe_id: str) -> RecipeDetail:
        """Return the recipe with its links, vote counters and click total."""
        recipe = session.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found", missing=[recipe_id])
        return RecipeDetail(
            id=recipe.id,
            title=recipe.title,
            instructions=recipe.instructions,
            image_url=recipe.image_url,
            author_id=recipe.author_id,
            created_at=recipe.created_at,
            upvotes=recipe.upvotes,
            downvotes=recipe.downvotes,
            score=recipe.vote_score,
            clicks=self.clicks.get_clicks(session, recipe_id),
            ingredients=self.associations.list_links(session, recipe_id, EntityKind.INGREDIENT),
            categories=self.associations.list_links(session, recipe_id, EntityKind.CATEGORY),
        )

    def cast_vote(self, session: Session, actor: Actor, recipe_id: str, vote: int) -> VoteState:
        """Set, change or remove (``vote == 0``) the actor's vote."""
        with self._atomic(session, "cast vote"):
            state = self.votes.cast_vote(session, actor.id, recipe_id, vote)
        return state

    def get_vote_state(
        self,
        session: Session,
        recipe_id: str,
        actor_id: str | None = None,
    ) -> VoteState:
        """Return vote counters plus ``actor_id``'s own vote."""
        return self.votes.get_state(session, recipe_id, actor_id)

    def record_click(self, session: Session, recipe_id: str, actor_id: str | None = None) -> int:
        """Count one click on the recipe and return the new total."""
        with self._atomic(session, "record click"):
            clicks = self.clicks.record_click(session, recipe_id, actor_id)
        return clicks

    def add_favorite(self, session: Session, actor: Actor, recipe_id: str) -> FavoriteState:
        """Bookmark a recipe for the actor; repeating the call changes nothing."""
        with self._atomic(session, "add favorite"):
            state = self.favorites.add(session, actor.id, recipe_id)
        return state

    def remove_favorite(self, session: Session, actor: Actor, recipe_id: str) -> FavoriteState:
        with self._atomic(session, "remove favorite"):
            state = self.favorites.remove(session, actor.id, recipe_id)
        return state

    def list_favorites(self, session: Session, actor: Actor) -> list[RecipeSummary]:
        return self.favorites.list_for(session, actor.id)


def get_recipe_service() -> RecipeService:
    """Return a new recipe service instance."""
    return RecipeService()
