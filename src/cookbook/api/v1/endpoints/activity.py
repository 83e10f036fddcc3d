# src/cookbook/api/v1/endpoints/activity.py
"""Vote and click endpoints for recipes."""

from fastapi import APIRouter

from cookbook.schemas.click import ClickRecorded
from cookbook.schemas.vote import VoteCast, VoteState

from ..dependencies import CurrentActorDep, OptionalActorDep, RecipeServiceDep, SessionDep

router = APIRouter(prefix="/recipes", tags=["recipe-activity"])


@router.post("/{recipe_id}/vote", response_model=VoteState)
def cast_vote(
    recipe_id: str,
    vote_data: VoteCast,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> VoteState:
    """Upvote, downvote or (with ``vote: 0``) clear the caller's vote."""
    return service.cast_vote(db, actor, recipe_id, vote_data.vote)


@router.get("/{recipe_id}/vote", response_model=VoteState)
def get_vote_state(
    recipe_id: str,
    actor: OptionalActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> VoteState:
    """Return vote counters and, when authenticated, the caller's vote."""
    return service.get_vote_state(db, recipe_id, actor.id if actor else None)


@router.delete("/{recipe_id}/vote", response_model=VoteState)
def remove_vote(
    recipe_id: str,
    actor: CurrentActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> VoteState:
    """Remove the caller's vote; a no-op if there is none."""
    return service.cast_vote(db, actor, recipe_id, 0)


@router.post("/{recipe_id}/click", response_model=ClickRecorded)
def record_click(
    recipe_id: str,
    actor: OptionalActorDep,
    db: SessionDep,
    service: RecipeServiceDep,
) -> ClickRecorded:
    """Count a click; authenticated clicks are also logged."""
    clicks = service.record_click(db, recipe_id, actor.id if actor else None)
    return ClickRecorded(recipe_id=recipe_id, clicks=clicks)
