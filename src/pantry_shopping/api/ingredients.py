"""Ingredient, category and unit endpoints."""

from datetime import UTC, date, datetime
from typing import Annotated

from fastapi import APIRouter, Query, Request, status

from pantry_shopping.api.dependencies import CurrentUser, get_container
from pantry_shopping.api.models import (
    CategoryResponse,
    CreateIngredientRequest,
    IngredientResponse,
    UnitResponse,
    UpdateIngredientRequest,
    UpdateStockRequest,
    envelope,
)
from pantry_shopping.domain.ingredients import IngredientDraft
from pantry_shopping.services.queries import GetCategoriesQuery, GetUnitsQuery

router = APIRouter(prefix="/api/v1", tags=["ingredients"])


def _today() -> date:
    return datetime.now(tz=UTC).date()


@router.post("/ingredients", status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    payload: CreateIngredientRequest, request: Request, user_id: CurrentUser
) -> dict[str, object]:
    """Register an ingredient for the caller."""
    draft = IngredientDraft(
        name=payload.name,
        category_id=payload.category_id,
        unit_id=payload.unit_id,
        quantity=payload.quantity,
        threshold=payload.threshold,
        best_before_date=payload.best_before_date,
        use_by_date=payload.use_by_date,
        memo=payload.memo,
    )
    ingredient = get_container(request).ingredient_service.create_ingredient(
        user_id, draft
    )
    return envelope(IngredientResponse.from_domain(ingredient, _today()))


@router.get("/ingredients")
async def list_ingredients(
    request: Request,
    user_id: CurrentUser,
    category_id: Annotated[str | None, Query(alias="categoryId")] = None,
) -> dict[str, object]:
    """List the caller's ingredients."""
    ingredients = get_container(request).ingredient_service.list_ingredients(
        user_id, category_id
    )
    today = _today()
    return envelope(
        [IngredientResponse.from_domain(item, today) for item in ingredients]
    )


@router.get("/ingredients/{ingredient_id}")
async def get_ingredient(
    ingredient_id: str, request: Request, user_id: CurrentUser
) -> dict[str, object]:
    """Return one of the caller's ingredients."""
    ingredient = get_container(request).ingredient_service.get_ingredient(
        user_id, ingredient_id
    )
    return envelope(IngredientResponse.from_domain(ingredient, _today()))


@router.put("/ingredients/{ingredient_id}")
async def update_ingredient(
    ingredient_id: str,
    payload: UpdateIngredientRequest,
    request: Request,
    user_id: CurrentUser,
) -> dict[str, object]:
    """Update any subset of an ingredient's editable fields."""
    ingredient = get_container(request).ingredient_service.update_ingredient(
        user_id, ingredient_id, payload.model_dump(exclude_unset=True)
    )
    return envelope(IngredientResponse.from_domain(ingredient, _today()))


@router.put("/ingredients/{ingredient_id}/stock")
async def update_stock(
    ingredient_id: str,
    payload: UpdateStockRequest,
    request: Request,
    user_id: CurrentUser,
) -> dict[str, object]:
    """Set the stock quantity of one of the caller's ingredients."""
    ingredient = get_container(request).ingredient_service.update_quantity(
        user_id, ingredient_id, payload.quantity
    )
    return envelope(IngredientResponse.from_domain(ingredient, _today()))


@router.get("/categories")
async def get_categories(
    request: Request,
    _user_id: CurrentUser,
    sort_by: Annotated[str, Query(alias="sortBy")] = "displayOrder",
) -> dict[str, object]:
    """List categories."""
    query = GetCategoriesQuery(sort_by=sort_by)
    categories = get_container(request).reference_data_service.get_categories(query)
    return envelope([CategoryResponse.from_domain(item) for item in categories])


@router.get("/units")
async def get_units(
    request: Request,
    _user_id: CurrentUser,
    sort_by: Annotated[str, Query(alias="sortBy")] = "displayOrder",
) -> dict[str, object]:
    """List units."""
    query = GetUnitsQuery(sort_by=sort_by)
    units = get_container(request).reference_data_service.get_units(query)
    return envelope([UnitResponse.from_domain(item) for item in units])
