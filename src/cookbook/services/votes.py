"""Vote ledger and denormalized vote counters for recipes."""

from __future__ import annotations

import logging

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.orm import Session

from cookbook.core.errors import NotFoundError, ValidationError
from cookbook.db.dialects import upsert_insert
from cookbook.models import Recipe, RecipeVote
from cookbook.schemas.vote import VoteState

logger = logging.getLogger(__name__)

VALID_VOTES = (-1, 0, 1)


def _clamped(column, delta: int):  # type: ignore[no-untyped-def]
    return case((column + delta < 0, 0), else_=column + delta)


def _bucket_deltas(vote: int, sign: int) -> tuple[int, int]:
    """Return (upvote delta, downvote delta) for adding (+1) or removing (-1) ``vote``."""
    return (sign if vote == 1 else 0, sign if vote == -1 else 0)


class VoteAggregator:
    """Apply vote transitions to the ledger and the recipe counters.

    Each ledger statement decides the prior state itself (``RETURNING`` on
    insert, conditional update and delete), and the counters only ever
    receive relative updates. Concurrent voters on one recipe therefore
    cannot overwrite each other's increments.
    """

    def _require_recipe(self, session: Session, recipe_id: str) -> None:
        if session.scalar(select(Recipe.id).where(Recipe.id == recipe_id)) is None:
            raise NotFoundError("Recipe not found", missing=[recipe_id])

    def _ledger_filter(self, actor_id: str, recipe_id: str):  # type: ignore[no-untyped-def]
        return (RecipeVote.user_id == actor_id, RecipeVote.recipe_id == recipe_id)

    def _apply_delta(
        self,
        session: Session,
        recipe_id: str,
        up: int,
        down: int,
        score: int,
    ) -> None:
        session.execute(
            update(Recipe)
            .where(Recipe.id == recipe_id)
            .values(
                upvotes=_clamped(Recipe.upvotes, up),
                downvotes=_clamped(Recipe.downvotes, down),
                vote_score=Recipe.vote_score + score,
            )
            .execution_options(synchronize_session=False)
        )

    def cast_vote(self, session: Session, actor_id: str, recipe_id: str, vote: int) -> VoteState:
        """Move the actor's vote on the recipe to ``vote`` (0 removes it).

        Raises:
            ValidationError: If ``vote`` is not -1, 0 or 1.
            NotFoundError: If the recipe does not exist.
        """
        if isinstance(vote, bool) or vote not in VALID_VOTES:
            raise ValidationError("vote must be 1, -1 or 0")
        self._require_recipe(session, recipe_id)

        if vote == 0:
            self._remove(session, actor_id, recipe_id)
        elif not self._insert(session, actor_id, recipe_id, vote):
            if not self._flip(session, actor_id, recipe_id, vote) and not self._has_vote(
                session, actor_id, recipe_id
            ):
                # A concurrent remove deleted the row after our insert conflicted.
                self._insert(session, actor_id, recipe_id, vote)

        return self.get_state(session, recipe_id, actor_id)

    def _remove(self, session: Session, actor_id: str, recipe_id: str) -> None:
        prior = session.scalar(
            delete(RecipeVote)
            .where(*self._ledger_filter(actor_id, recipe_id))
            .returning(RecipeVote.vote)
            .execution_options(synchronize_session=False)
        )
        if prior is None:
            return
        up, down = _bucket_deltas(prior, -1)
        self._apply_delta(session, recipe_id, up, down, -prior)
        logger.debug("Removed vote %d by %s on %s", prior, actor_id, recipe_id)

    def _insert(self, session: Session, actor_id: str, recipe_id: str, vote: int) -> bool:
        inserted = session.scalar(
            upsert_insert(session, RecipeVote)
            .values(user_id=actor_id, recipe_id=recipe_id, vote=vote)
            .on_conflict_do_nothing()
            .returning(RecipeVote.vote)
        )
        if inserted is None:
            return False
        up, down = _bucket_deltas(vote, 1)
        self._apply_delta(session, recipe_id, up, down, vote)
        return True

    def _has_vote(self, session: Session, actor_id: str, recipe_id: str) -> bool:
        return (
            session.scalar(select(RecipeVote.vote).where(*self._ledger_filter(actor_id, recipe_id)))
            is not None
        )

    def _flip(self, session: Session, actor_id: str, recipe_id: str, vote: int) -> bool:
        flipped = session.scalar(
            update(RecipeVote)
            .where(*self._ledger_filter(actor_id, recipe_id), RecipeVote.vote != vote)
            .values(vote=vote, updated_at=func.now())
            .returning(RecipeVote.vote)
            .execution_options(synchronize_session=False)
        )
        if flipped is None:
            return False
        prior = -vote
        new_up, new_down = _bucket_deltas(vote, 1)
        old_up, old_down = _bucket_deltas(prior, -1)
        self._apply_delta(session, recipe_id, new_up + old_up, new_down + old_down, vote - prior)
        return True

    def get_state(self, session: Session, recipe_id: str, actor_id: str | None = None) -> VoteState:
        """Return the recipe's counters and the actor's own vote (0 if none).

        Raises:
            NotFoundError: If the recipe does not exist.
        """
        row = session.execute(
            select(Recipe.upvotes, Recipe.downvotes, Recipe.vote_score).where(
                Recipe.id == recipe_id
            )
        ).first()
        if row is None:
            raise NotFoundError("Recipe not found", missing=[recipe_id])

        my_vote = 0
        if actor_id is not None:
            my_vote = session.scalar(
                select(RecipeVote.vote).where(*self._ledger_filter(actor_id, recipe_id))
            ) or 0

        return VoteState(
            recipe_id=recipe_id,
            my_vote=int(my_vote),
            upvotes=int(row.upvotes),
            downvotes=int(row.downvotes),
            score=int(row.vote_score),
        )

    def recount(self, session: Session, recipe_id: str) -> VoteState:
        """Rebuild the recipe's counters from the ledger."""
        self._require_recipe(session, recipe_id)
        totals = session.execute(
            select(
                func.coalesce(func.sum(case((RecipeVote.vote == 1, 1), else_=0)), 0).label("up"),
                func.coalesce(func.sum(case((RecipeVote.vote == -1, 1), else_=0)), 0).label("down"),
            ).where(RecipeVote.recipe_id == recipe_id)
        ).one()
        up, down = int(totals.up), int(totals.down)
        session.execute(
            update(Recipe)
            .where(Recipe.id == recipe_id)
            .values(upvotes=up, downvotes=down, vote_score=up - down)
            .execution_options(synchronize_session=False)
        )
        logger.info("Recounted votes for recipe %s: +%d/-%d", recipe_id, up, down)
        return self.get_state(session, recipe_id)
