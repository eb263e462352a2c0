"""Tests for value objects."""

import math

import pytest

from pantry_shopping.domain.errors import ValidationError
from pantry_shopping.domain.value_objects import (
    CategoryName,
    DisplayOrder,
    IngredientId,
    IngredientName,
    Memo,
    Quantity,
    ShoppingLocation,
    ShoppingSessionId,
)


def test_category_name_is_trimmed() -> None:
    assert CategoryName("  肉類  ").value == "肉類"


def test_category_name_length_boundary() -> None:
    assert CategoryName("a" * 20).value == "a" * 20

    with pytest.raises(ValidationError) as excinfo:
        CategoryName("a" * 21)

    assert excinfo.value.field == "categoryName"
    assert excinfo.value.rule == "too_long"


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_text_is_required(raw) -> None:
    with pytest.raises(ValidationError) as excinfo:
        IngredientName(raw)
    assert excinfo.value.rule == "required"


def test_length_is_checked_after_trimming() -> None:
    assert Memo(" " + "m" * 200 + " ").value == "m" * 200


def test_value_objects_compare_by_value() -> None:
    assert CategoryName("Dairy") == CategoryName(" Dairy ")
    assert hash(CategoryName("Dairy")) == hash(CategoryName("Dairy"))
    assert CategoryName("Dairy") != CategoryName("Meat")


def test_session_id_requires_prefix() -> None:
    generated = ShoppingSessionId.generate()
    assert generated.value.startswith("ses_")
    assert len(generated.value) == len("ses_") + 24

    with pytest.raises(ValidationError) as excinfo:
        ShoppingSessionId("abc123")
    assert excinfo.value.rule == "invalid_format"


def test_ingredient_id_accepts_any_well_formed_value() -> None:
    assert IngredientId("ing1").value == "ing1"

    with pytest.raises(ValidationError) as excinfo:
        IngredientId("ing 1")
    assert excinfo.value.field == "ingredientId"


@pytest.mark.parametrize("raw", [-1, math.inf, math.nan, 1_000_000])
def test_quantity_rejects_out_of_range(raw) -> None:
    with pytest.raises(ValidationError) as excinfo:
        Quantity(raw)
    assert excinfo.value.rule == "out_of_range"


def test_quantity_rejects_booleans() -> None:
    with pytest.raises(ValidationError) as excinfo:
        Quantity(True)
    assert excinfo.value.rule == "invalid_format"


def test_display_order_defaults_to_zero() -> None:
    assert DisplayOrder().value == 0
    with pytest.raises(ValidationError):
        DisplayOrder(-1)


def test_location_bounds() -> None:
    location = ShoppingLocation.create(35.6, 139.7, "  Market  ")
    assert location.name is not None
    assert location.name.value == "Market"
    assert ShoppingLocation.create(0, 0, "   ").name is None

    with pytest.raises(ValidationError) as excinfo:
        ShoppingLocation.create(91, 0)
    assert excinfo.value.field == "latitude"

    with pytest.raises(ValidationError) as excinfo:
        ShoppingLocation.create(0, -181)
    assert excinfo.value.field == "longitude"
