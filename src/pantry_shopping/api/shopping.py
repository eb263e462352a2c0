"""Shopping session, quick-access and statistics endpoints."""

from datetime import datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Body, Query, Request, status

from pantry_shopping.api.dependencies import CurrentUser, get_container
from pantry_shopping.api.models import (
    CheckRecordResponse,
    IngredientCheckStatisticsResponse,
    QuickAccessResponse,
    SessionResponse,
    SessionSummaryResponse,
    StartSessionRequest,
    StatisticsResponse,
    envelope,
    paged,
)
from pantry_shopping.domain.sessions import DeviceType
from pantry_shopping.domain.value_objects import ShoppingLocation
from pantry_shopping.services.queries import (
    GetIngredientCheckStatisticsQuery,
    GetQuickAccessIngredientsQuery,
    GetRecentSessionsQuery,
    GetSessionHistoryQuery,
    GetShoppingStatisticsQuery,
)

router = APIRouter(prefix="/api/v1", tags=["shopping"])


@router.post("/shopping-sessions", status_code=status.HTTP_201_CREATED)
async def start_session(
    request: Request,
    user_id: CurrentUser,
    payload: Annotated[StartSessionRequest | None, Body()] = None,
) -> dict[str, object]:
    """Start a shopping session for the caller."""
    device_type = None
    location = None
    if payload is not None:
        if payload.device_type:
            device_type = DeviceType.from_value(payload.device_type)
        if payload.location is not None:
            location = ShoppingLocation.create(
                latitude=payload.location.latitude,
                longitude=payload.location.longitude,
                name=payload.location.name,
            )
    session = get_container(request).shopping_session_service.start_session(
        user_id, device_type=device_type, location=location
    )
    return envelope(SessionResponse.from_domain(session))


@router.get("/shopping-sessions/active")
async def get_active_session(
    request: Request, user_id: CurrentUser
) -> dict[str, object]:
    """Return the caller's active session, or ``null``."""
    summary = get_container(request).shopping_session_service.get_active_session(
        user_id
    )
    return envelope(SessionSummaryResponse.from_summary(summary) if summary else None)


@router.get("/shopping-sessions/recent")
async def get_recent_sessions(
    request: Request, user_id: CurrentUser, limit: int = 10, page: int = 1
) -> dict[str, object]:
    """Return a page of the caller's most recent sessions."""
    query = GetRecentSessionsQuery(user_id=user_id, page=page, limit=limit)
    result = get_container(request).shopping_session_service.get_recent_sessions(
        query
    )
    return paged(result)


@router.get("/shopping-sessions/history")
async def get_session_history(  # noqa: PLR0913
    request: Request,
    user_id: CurrentUser,
    page: int = 1,
    limit: int = 20,
    started_from: Annotated[datetime | None, Query(alias="from")] = None,
    started_to: Annotated[datetime | None, Query(alias="to")] = None,
    session_status: Annotated[
        Literal["COMPLETED", "ABANDONED"] | None, Query(alias="status")
    ] = None,
) -> dict[str, object]:
    """Return a filtered page of the caller's finished sessions."""
    query = GetSessionHistoryQuery(
        user_id=user_id,
        page=page,
        limit=limit,
        started_from=started_from,
        started_to=started_to,
        status=session_status,
    )
    result = get_container(request).shopping_session_service.get_session_history(
        query
    )
    return paged(result)


@router.get("/shopping-sessions/ingredient-check-statistics")
async def get_ingredient_check_statistics(
    request: Request,
    user_id: CurrentUser,
    ingredient_id: Annotated[str | None, Query(alias="ingredientId")] = None,
) -> dict[str, object]:
    """Return per-ingredient check history for the caller."""
    query = GetIngredientCheckStatisticsQuery(
        user_id=user_id, ingredient_id=ingredient_id
    )
    service = get_container(request).shopping_stats_service
    stats = service.get_ingredient_check_statistics(query)
    return envelope(
        [IngredientCheckStatisticsResponse.from_domain(item) for item in stats]
    )


@router.post("/shopping-sessions/{session_id}/check/{ingredient_id}")
async def check_ingredient(
    session_id: str, ingredient_id: str, request: Request, user_id: CurrentUser
) -> dict[str, object]:
    """Record that the caller checked an ingredient during the session."""
    record = get_container(request).shopping_session_service.check_ingredient(
        session_id, ingredient_id, user_id
    )
    return envelope(CheckRecordResponse.from_domain(record))


@router.put("/shopping-sessions/{session_id}/complete")
async def complete_session(
    session_id: str, request: Request, user_id: CurrentUser
) -> dict[str, object]:
    """Complete the caller's session."""
    summary = get_container(request).shopping_session_service.complete_session(
        session_id, user_id
    )
    return envelope(SessionSummaryResponse.from_summary(summary))


@router.put("/shopping-sessions/{session_id}/abandon")
async def abandon_session(
    session_id: str, request: Request, user_id: CurrentUser
) -> dict[str, object]:
    """Abandon the caller's session."""
    summary = get_container(request).shopping_session_service.abandon_session(
        session_id, user_id
    )
    return envelope(SessionSummaryResponse.from_summary(summary))


@router.get("/shopping/quick-access")
async def get_quick_access(
    request: Request, user_id: CurrentUser, limit: int = 10
) -> dict[str, object]:
    """Return the ingredients the caller checks most often."""
    query = GetQuickAccessIngredientsQuery(user_id=user_id, limit=limit)
    items = get_container(request).shopping_stats_service.get_quick_access_ingredients(
        query
    )
    return envelope([QuickAccessResponse.from_domain(item) for item in items])


@router.get("/shopping/statistics")
async def get_statistics(
    request: Request,
    user_id: CurrentUser,
    period_days: Annotated[int, Query(alias="periodDays")] = 30,
) -> dict[str, object]:
    """Summarize the caller's shopping over the last ``periodDays`` days."""
    query = GetShoppingStatisticsQuery(user_id=user_id, period_days=period_days)
    stats = get_container(request).shopping_stats_service.get_statistics(query)
    return envelope(StatisticsResponse.from_domain(stats))
