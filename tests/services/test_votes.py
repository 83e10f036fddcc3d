# mypy: ignore-errors
"""Tests for the vote ledger and its denormalized counters."""

import itertools

import pytest
from sqlalchemy import func, select, update

from cookbook.core.errors import NotFoundError, ValidationError
from cookbook.models import Recipe, RecipeVote
from cookbook.services.votes import VoteAggregator


@pytest.fixture()
def votes() -> VoteAggregator:
    return VoteAggregator()


def _ledger(session, recipe_id):
    return dict(
        session.execute(
            select(RecipeVote.user_id, RecipeVote.vote).where(RecipeVote.recipe_id == recipe_id)
        ).all()
    )


def _assert_consistent(session, votes, recipe_id) -> None:
    state = votes.get_state(session, recipe_id)
    ledger = list(_ledger(session, recipe_id).values())
    assert state.upvotes == ledger.count(1)
    assert state.downvotes == ledger.count(-1)
    assert state.score == state.upvotes - state.downvotes


def test_first_upvote(db_session, votes, test_recipe, test_user) -> None:
    state = votes.cast_vote(db_session, test_user.id, test_recipe, 1)

    assert (state.my_vote, state.upvotes, state.downvotes, state.score) == (1, 1, 0, 1)


def test_repeated_vote_is_noop(db_session, votes, test_recipe, test_user) -> None:
    """Casting the same vote twice changes nothing."""
    votes.cast_vote(db_session, test_user.id, test_recipe, -1)
    state = votes.cast_vote(db_session, test_user.id, test_recipe, -1)

    assert (state.my_vote, state.upvotes, state.downvotes, state.score) == (-1, 0, 1, -1)


def test_flip_moves_vote_between_buckets(db_session, votes, test_recipe, test_user) -> None:
    """Switching from up to down moves score by two."""
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)
    state = votes.cast_vote(db_session, test_user.id, test_recipe, -1)

    assert (state.my_vote, state.upvotes, state.downvotes, state.score) == (-1, 0, 1, -1)
    assert _ledger(db_session, test_recipe) == {test_user.id: -1}


def test_zero_removes_vote(db_session, votes, test_recipe, test_user) -> None:
    """Voting 0 deletes the ledger row and reverses its contribution."""
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)
    state = votes.cast_vote(db_session, test_user.id, test_recipe, 0)

    assert (state.my_vote, state.upvotes, state.downvotes, state.score) == (0, 0, 0, 0)
    assert _ledger(db_session, test_recipe) == {}


def test_removing_absent_vote_is_noop(db_session, votes, test_recipe, test_user) -> None:
    state = votes.cast_vote(db_session, test_user.id, test_recipe, 0)

    assert (state.my_vote, state.upvotes, state.downvotes, state.score) == (0, 0, 0, 0)


def test_votes_from_several_users_accumulate(
    db_session, votes, test_recipe, test_user, other_user, admin_user
) -> None:
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)
    votes.cast_vote(db_session, other_user.id, test_recipe, 1)
    state = votes.cast_vote(db_session, admin_user.id, test_recipe, -1)

    assert (state.upvotes, state.downvotes, state.score) == (2, 1, 1)
    assert votes.get_state(db_session, test_recipe, other_user.id).my_vote == 1


@pytest.mark.parametrize("sequence", list(itertools.product((1, 0, -1), repeat=3)))
def test_counters_follow_ledger_for_any_sequence(
    db_session, votes, test_recipe, test_user, other_user, sequence
) -> None:
    """Counters always equal the ledger aggregates, whatever order votes arrive in."""
    for index, vote in enumerate(sequence):
        voter = test_user if index % 2 == 0 else other_user
        votes.cast_vote(db_session, voter.id, test_recipe, vote)
        _assert_consistent(db_session, votes, test_recipe)

    assert votes.get_state(db_session, test_recipe, test_user.id).my_vote == sequence[2]


@pytest.mark.parametrize("bad_vote", [2, -2, True, "1"])
def test_invalid_vote_values(db_session, votes, test_recipe, test_user, bad_vote) -> None:
    with pytest.raises(ValidationError):
        votes.cast_vote(db_session, test_user.id, test_recipe, bad_vote)


def test_vote_on_missing_recipe(db_session, votes, test_user) -> None:
    with pytest.raises(NotFoundError):
        votes.cast_vote(db_session, test_user.id, "missing-recipe", 1)
    assert db_session.scalar(select(func.count()).select_from(RecipeVote)) == 0


def test_get_state_for_anonymous_caller(db_session, votes, test_recipe, test_user) -> None:
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)

    state = votes.get_state(db_session, test_recipe)
    assert state.my_vote == 0
    assert state.upvotes == 1


def test_get_state_missing_recipe(db_session, votes) -> None:
    with pytest.raises(NotFoundError):
        votes.get_state(db_session, "missing-recipe")


def test_recount_repairs_drifted_counters(db_session, votes, test_recipe, test_user, other_user) -> None:
    """Recount rebuilds counters from the ledger."""
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)
    votes.cast_vote(db_session, other_user.id, test_recipe, -1)
    db_session.execute(
        update(Recipe).where(Recipe.id == test_recipe).values(upvotes=7, downvotes=0, vote_score=7)
    )

    state = votes.recount(db_session, test_recipe)

    assert (state.upvotes, state.downvotes, state.score) == (1, 1, 0)


def test_counters_never_go_negative(db_session, votes, test_recipe, test_user) -> None:
    """Removing a vote from counters that drifted to zero clamps at zero."""
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)
    db_session.execute(
        update(Recipe).where(Recipe.id == test_recipe).values(upvotes=0, vote_score=0)
    )

    state = votes.cast_vote(db_session, test_user.id, test_recipe, 0)

    assert state.upvotes == 0
    assert state.downvotes == 0


def test_vote_lands_when_row_removed_before_flip(db_session, votes, test_recipe, test_user, monkeypatch) -> None:
    """A remove slipping between the conflicting insert and the flip does not drop the new vote."""
    votes.cast_vote(db_session, test_user.id, test_recipe, 1)
    real_flip = votes._flip

    def _flip_after_concurrent_remove(session, actor_id, recipe_id, vote):
        votes._remove(session, actor_id, recipe_id)
        return real_flip(session, actor_id, recipe_id, vote)

    monkeypatch.setattr(votes, "_flip", _flip_after_concurrent_remove)
    state = votes.cast_vote(db_session, test_user.id, test_recipe, -1)

    assert (state.my_vote, state.upvotes, state.downvotes, state.score) == (-1, 0, 1, -1)
    _assert_consistent(db_session, votes, test_recipe)
