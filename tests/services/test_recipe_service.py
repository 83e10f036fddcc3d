# mypy: ignore-errors
"""Tests for the transactional recipe operations."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from cookbook.core.errors import (
    ConflictError,
    GenerationExhaustedError,
    NotFoundError,
    PermissionDeniedError,
    TransactionAbortError,
    ValidationError,
)
from cookbook.core.security import Actor
from cookbook.models import (
    Category,
    Ingredient,
    Recipe,
    RecipeCategory,
    RecipeClicks,
    RecipeIngredient,
    RecipeVote,
)
from cookbook.schemas.recipe import RecipeCreate, RecipeUpdate
from cookbook.services.identifiers import IdentifierGenerator
from cookbook.services.recipe_service import RecipeService


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


def _payload(**overrides) -> RecipeCreate:
    data = {"title": "Pesto", "instructions": "Blend everything."}
    data.update(overrides)
    return RecipeCreate(**data)


def _category_names(service, session, recipe_id) -> list[str]:
    return [link.name for link in service.get_recipe(session, recipe_id).categories]


def test_create_recipe_links_entities(db_session, service, actor) -> None:
    """Names become shared entities and are linked with their quantities."""
    recipe_id = service.create_recipe(
        db_session,
        actor,
        _payload(
            ingredients=[{"name": "Basil", "quantity": "1 bunch"}, {"name": "Pine nuts"}],
            categories=[{"name": "Sauce"}],
        ),
    )

    detail = service.get_recipe(db_session, recipe_id)
    assert detail.author_id == actor.id
    assert [(i.name, i.quantity) for i in detail.ingredients] == [
        ("basil", "1 bunch"),
        ("pine nuts", None),
    ]
    assert [c.name for c in detail.categories] == ["sauce"]
    assert (detail.upvotes, detail.downvotes, detail.score, detail.clicks) == (0, 0, 0, 0)


def test_create_recipe_collapses_duplicate_names(db_session, service, actor) -> None:
    """'Tomato' and 'tomato' in one request give one entity and one link."""
    recipe_id = service.create_recipe(
        db_session,
        actor,
        _payload(ingredients=[{"name": "Tomato"}, {"name": "tomato"}]),
    )

    assert _count(db_session, Ingredient) == 1
    assert len(service.get_recipe(db_session, recipe_id).ingredients) == 1


def test_recipes_share_entities(db_session, service, actor) -> None:
    first = service.create_recipe(db_session, actor, _payload(categories=[{"name": "Vegan"}]))
    second = service.create_recipe(db_session, actor, _payload(categories=[{"name": "VEGAN"}]))

    assert _count(db_session, Category) == 1
    assert _category_names(service, db_session, first) == _category_names(service, db_session, second)


def test_create_recipe_accepts_existing_ids(db_session, service, actor) -> None:
    category = Category(name="quick")
    db_session.add(category)
    db_session.commit()

    recipe_id = service.create_recipe(
        db_session, actor, _payload(categories=[{"category_id": category.id}])
    )

    assert _category_names(service, db_session, recipe_id) == ["quick"]


def test_create_recipe_rolls_back_on_missing_id(db_session, service, actor) -> None:
    """A bad id anywhere in the request leaves no trace of the recipe or its new names."""
    with pytest.raises(NotFoundError) as exc_info:
        service.create_recipe(
            db_session,
            actor,
            _payload(ingredients=[{"name": "Salt"}], categories=[{"id": 999}]),
        )

    assert exc_info.value.missing == [999]
    assert _count(db_session, Recipe) == 0
    assert _count(db_session, Ingredient) == 0
    assert _count(db_session, RecipeIngredient) == 0


def test_create_recipe_rolls_back_on_exhausted_ids(db_session, actor, test_recipe) -> None:
    service = RecipeService(
        identifiers=IdentifierGenerator(max_attempts=2, id_factory=lambda: test_recipe)
    )

    with pytest.raises(GenerationExhaustedError):
        service.create_recipe(db_session, actor, _payload(ingredients=[{"name": "Thyme"}]))

    assert _count(db_session, Recipe) == 1
    assert db_session.scalar(select(Ingredient.id).where(Ingredient.name == "thyme")) is None


def test_create_recipe_with_unknown_author_is_conflict(db_session, service) -> None:
    """Constraint violations surface as ConflictError after rollback."""
    with pytest.raises(ConflictError) as exc_info:
        service.create_recipe(db_session, Actor(id="ghost"), _payload())

    assert exc_info.value.status_code == 409
    assert _count(db_session, Recipe) == 0


def test_database_failure_becomes_transaction_abort(db_session, actor) -> None:
    """Unexpected database errors are wrapped and the transaction is rolled back."""

    class BrokenResolver:
        def resolve(self, session, kind, references):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    service = RecipeService(resolver=BrokenResolver())
    with pytest.raises(TransactionAbortError) as exc_info:
        service.create_recipe(db_session, actor, _payload())

    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.cause, OperationalError)
    assert _count(db_session, Recipe) == 0


def test_unexpected_failure_becomes_transaction_abort(db_session, actor) -> None:
    """Non-database errors inside a unit of work are wrapped after rollback."""

    class FaultyAssociations:
        def link_all(self, session, recipe_id, kind, rows):
            raise RuntimeError("link writer crashed")

    service = RecipeService(associations=FaultyAssociations())
    with pytest.raises(TransactionAbortError) as exc_info:
        service.create_recipe(db_session, actor, _payload(categories=[{"name": "Lunch"}]))

    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert _count(db_session, Recipe) == 0
    assert _count(db_session, Category) == 0


def test_update_replaces_links(db_session, service, actor) -> None:
    """Updating categories [A, B] to [B, C] leaves exactly {B, C}."""
    recipe_id = service.create_recipe(
        db_session, actor, _payload(categories=[{"name": "A"}, {"name": "B"}])
    )

    service.update_recipe(
        db_session, actor, recipe_id, RecipeUpdate(categories=[{"name": "B"}, {"name": "C"}])
    )

    assert _category_names(service, db_session, recipe_id) == ["b", "c"]
    assert _count(db_session, Category) == 3


def test_update_omitted_list_keeps_links(db_session, service, actor, test_recipe) -> None:
    service.update_recipe(db_session, actor, test_recipe, RecipeUpdate(title="Tomato bisque"))

    detail = service.get_recipe(db_session, test_recipe)
    assert detail.title == "Tomato bisque"
    assert detail.instructions == "Simmer the tomatoes and blend."
    assert [i.name for i in detail.ingredients] == ["salt", "tomato"]
    assert [c.name for c in detail.categories] == ["soup"]


def test_update_empty_list_clears_links(db_session, service, actor, test_recipe) -> None:
    service.update_recipe(db_session, actor, test_recipe, RecipeUpdate(categories=[]))

    detail = service.get_recipe(db_session, test_recipe)
    assert detail.categories == []
    assert len(detail.ingredients) == 2
    # The entity itself survives.
    assert _count(db_session, Category) == 1


def test_update_null_list_keeps_links(db_session, service, actor, test_recipe) -> None:
    service.update_recipe(db_session, actor, test_recipe, RecipeUpdate(ingredients=None))

    assert len(service.get_recipe(db_session, test_recipe).ingredients) == 2


def test_update_can_clear_image(db_session, service, actor) -> None:
    recipe_id = service.create_recipe(db_session, actor, _payload(image_url="http://img/1.png"))

    service.update_recipe(db_session, actor, recipe_id, RecipeUpdate(image_url=None))

    assert service.get_recipe(db_session, recipe_id).image_url is None


def test_update_rolls_back_on_missing_id(db_session, service, actor, test_recipe) -> None:
    """A failed update keeps the old fields and links."""
    with pytest.raises(NotFoundError):
        service.update_recipe(
            db_session,
            actor,
            test_recipe,
            RecipeUpdate(title="Changed", ingredients=[{"id": 31337}]),
        )

    detail = service.get_recipe(db_session, test_recipe)
    assert detail.title == "Tomato soup"
    assert len(detail.ingredients) == 2


def test_update_requires_author(db_session, service, other_actor, test_recipe) -> None:
    with pytest.raises(PermissionDeniedError):
        service.update_recipe(db_session, other_actor, test_recipe, RecipeUpdate(title="Mine now"))

    assert service.get_recipe(db_session, test_recipe).title == "Tomato soup"


def test_admin_may_update_any_recipe(db_session, service, admin_actor, test_recipe) -> None:
    service.update_recipe(db_session, admin_actor, test_recipe, RecipeUpdate(title="Moderated"))

    assert service.get_recipe(db_session, test_recipe).title == "Moderated"


def test_update_missing_recipe(db_session, service, actor) -> None:
    with pytest.raises(NotFoundError):
        service.update_recipe(db_session, actor, "missing-recipe", RecipeUpdate(title="x"))


def test_delete_removes_dependent_rows(db_session, service, actor, other_actor, test_recipe) -> None:
    """Links, votes and clicks go with the recipe; shared entities stay."""
    service.cast_vote(db_session, other_actor, test_recipe, 1)
    service.record_click(db_session, test_recipe)

    service.delete_recipe(db_session, actor, test_recipe)

    assert _count(db_session, Recipe) == 0
    assert _count(db_session, RecipeIngredient) == 0
    assert _count(db_session, RecipeCategory) == 0
    assert _count(db_session, RecipeVote) == 0
    assert _count(db_session, RecipeClicks) == 0
    assert _count(db_session, Ingredient) == 2


def test_delete_requires_author(db_session, service, other_actor, test_recipe) -> None:
    with pytest.raises(PermissionDeniedError):
        service.delete_recipe(db_session, other_actor, test_recipe)
    assert _count(db_session, Recipe) == 1


def test_get_missing_recipe(db_session, service) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        service.get_recipe(db_session, "missing-recipe")
    assert exc_info.value.to_dict() == {"detail": "Recipe not found", "missing": ["missing-recipe"]}


def test_cast_vote_commits(db_session, service, other_actor, test_recipe) -> None:
    state = service.cast_vote(db_session, other_actor, test_recipe, 1)
    db_session.rollback()

    assert state.score == 1
    assert service.get_vote_state(db_session, test_recipe, other_actor.id).my_vote == 1


def test_cast_invalid_vote(db_session, service, actor, test_recipe) -> None:
    with pytest.raises(ValidationError):
        service.cast_vote(db_session, actor, test_recipe, 5)


def test_record_click_commits(db_session, service, actor, test_recipe) -> None:
    assert service.record_click(db_session, test_recipe, actor.id) == 1
    db_session.rollback()
    assert service.get_recipe(db_session, test_recipe).clicks == 1
