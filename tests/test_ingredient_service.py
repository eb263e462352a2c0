"""Tests for the ingredient service."""

from datetime import date

import pytest

from pantry_shopping.domain.errors import NotFoundError, ValidationError
from pantry_shopping.domain.ingredients import IngredientDraft, StockStatus
from pantry_shopping.services.ingredients import IngredientService
from tests.conftest import (
    InMemoryIngredientRepository,
    default_reference_data,
    make_ingredient,
)


def _service() -> tuple[IngredientService, InMemoryIngredientRepository]:
    repository = InMemoryIngredientRepository()
    return IngredientService(repository, default_reference_data()), repository


def test_create_ingredient_mints_prefixed_id() -> None:
    service, repository = _service()

    created = service.create_ingredient(
        "u1",
        IngredientDraft(
            name="  Carrot ",
            category_id="cat_veg",
            unit_id="unt_g",
            quantity=300,
            threshold=100,
            best_before_date=date(2030, 1, 1),
            memo="   ",
        ),
    )

    assert created.id.value.startswith("ing_")
    assert created.name.value == "Carrot"
    assert created.memo is None
    assert created.stock_status is StockStatus.IN_STOCK
    assert repository.ingredients[created.id] == created


def test_create_ingredient_requires_known_category_and_unit() -> None:
    service, repository = _service()

    with pytest.raises(NotFoundError) as excinfo:
        service.create_ingredient(
            "u1",
            IngredientDraft(
                name="Carrot", category_id="cat_none", unit_id="unt_g", quantity=1
            ),
        )
    assert excinfo.value.entity == "Category"

    with pytest.raises(NotFoundError) as excinfo:
        service.create_ingredient(
            "u1",
            IngredientDraft(
                name="Carrot", category_id="cat_veg", unit_id="unt_none", quantity=1
            ),
        )
    assert excinfo.value.entity == "Unit"
    assert repository.ingredients == {}


def test_create_ingredient_validates_fields() -> None:
    service, _repository = _service()

    with pytest.raises(ValidationError) as excinfo:
        service.create_ingredient(
            "u1",
            IngredientDraft(
                name="x" * 51, category_id="cat_veg", unit_id="unt_g", quantity=1
            ),
        )
    assert excinfo.value.field == "ingredientName"

    with pytest.raises(ValidationError) as excinfo:
        service.create_ingredient(
            "u1",
            IngredientDraft(
                name="Carrot", category_id="cat_veg", unit_id="unt_g", quantity=-1
            ),
        )
    assert excinfo.value.field == "quantity"


def test_get_ingredient_hides_foreign_ingredients() -> None:
    service, repository = _service()
    repository.add(make_ingredient(user_id="u2"))

    with pytest.raises(NotFoundError):
        service.get_ingredient("u1", "ing1")
    assert service.get_ingredient("u2", "ing1").user_id == "u2"


def test_list_ingredients_sorted_and_filtered() -> None:
    service, repository = _service()
    repository.add(make_ingredient("ing1", name="milk"))
    repository.add(make_ingredient("ing2", name="Butter"))
    repository.add(make_ingredient("ing3", name="Apple", category_id="cat_veg"))

    names = [item.name.value for item in service.list_ingredients("u1")]
    dairy = service.list_ingredients("u1", "cat_dairy")

    assert names == ["Apple", "Butter", "milk"]
    assert [item.id.value for item in dairy] == ["ing2", "ing1"]


def test_update_quantity() -> None:
    service, repository = _service()
    repository.add(make_ingredient(quantity=2, threshold=1))

    updated = service.update_quantity("u1", "ing1", 0)

    assert updated.quantity.value == 0
    assert updated.stock_status is StockStatus.OUT_OF_STOCK
    with pytest.raises(ValidationError):
        service.update_quantity("u1", "ing1", float("nan"))
    with pytest.raises(NotFoundError):
        service.update_quantity("u2", "ing1", 1)


def test_update_ingredient_applies_only_given_fields() -> None:
    service, repository = _service()
    original = repository.add(make_ingredient(memo=None))

    updated = service.update_ingredient(
        "u1",
        "ing1",
        {
            "name": " Oat milk ",
            "category_id": "cat_veg",
            "use_by_date": date(2030, 1, 2),
            "memo": "barista edition",
        },
    )

    assert updated.name.value == "Oat milk"
    assert updated.category_id.value == "cat_veg"
    assert updated.use_by_date == date(2030, 1, 2)
    assert updated.memo is not None
    assert updated.memo.value == "barista edition"
    assert updated.quantity == original.quantity
    assert updated.unit_id == original.unit_id
    assert updated.created_at == original.created_at
    assert updated.updated_at >= original.updated_at
    assert repository.ingredients[original.id] == updated


def test_update_ingredient_clears_nullable_fields() -> None:
    service, repository = _service()
    repository.add(make_ingredient(quantity=1, threshold=2))

    updated = service.update_ingredient(
        "u1", "ing1", {"threshold": None, "memo": "  ", "quantity": 0}
    )

    assert updated.threshold is None
    assert updated.memo is None
    assert updated.stock_status is StockStatus.OUT_OF_STOCK


def test_update_ingredient_without_changes_returns_current() -> None:
    service, repository = _service()
    original = repository.add(make_ingredient())

    assert service.update_ingredient("u1", "ing1", {}) == original


def test_update_ingredient_validates_values_and_references() -> None:
    service, repository = _service()
    repository.add(make_ingredient())

    with pytest.raises(ValidationError) as excinfo:
        service.update_ingredient("u1", "ing1", {"name": ""})
    assert excinfo.value.field == "ingredientName"

    with pytest.raises(ValidationError):
        service.update_ingredient("u1", "ing1", {"quantity": -1})

    with pytest.raises(NotFoundError) as excinfo:
        service.update_ingredient("u1", "ing1", {"unit_id": "unt_none"})
    assert excinfo.value.entity == "Unit"

    with pytest.raises(NotFoundError):
        service.update_ingredient("u2", "ing1", {"name": "Stolen"})
    assert repository.ingredients[make_ingredient().id].name.value == "Milk"
