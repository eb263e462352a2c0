"""Pydantic models for request bodies and response payloads."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pantry_shopping.domain.ingredients import (
    ExpiryStatus,
    IngredientRecord,
    StockStatus,
)
from pantry_shopping.domain.reference import Category, Unit
from pantry_shopping.domain.sessions import (
    IngredientCheckRecord,
    SessionPage,
    SessionStatus,
    ShoppingSession,
    ShoppingSessionSummary,
)
from pantry_shopping.domain.stats import (
    IngredientCheckStatistics,
    QuickAccessIngredient,
    ShoppingStatistics,
    TopCheckedIngredient,
)
from pantry_shopping.domain.value_objects import ShoppingLocation


class ApiModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def envelope(payload: ApiModel | list[ApiModel] | None) -> dict[str, object]:
    """Wrap a response payload as ``{"data": ...}``."""
    if payload is None:
        return {"data": None}
    if isinstance(payload, list):
        return {
            "data": [item.model_dump(by_alias=True, mode="json") for item in payload]
        }
    return {"data": payload.model_dump(by_alias=True, mode="json")}


class LocationPayload(ApiModel):
    """Where the user is shopping."""

    latitude: float
    longitude: float
    name: str | None = None


class StartSessionRequest(ApiModel):
    """Body for starting a shopping session."""

    device_type: str | None = None
    location: LocationPayload | None = None


class CreateIngredientRequest(ApiModel):
    """Body for registering an ingredient."""

    name: str
    category_id: str
    unit_id: str
    quantity: float
    threshold: float | None = None
    best_before_date: date | None = None
    use_by_date: date | None = None
    memo: str | None = None


class UpdateStockRequest(ApiModel):
    """Body for changing an ingredient's stock quantity."""

    quantity: float


class UpdateIngredientRequest(ApiModel):
    """Body for a partial ingredient update; omitted fields stay unchanged."""

    name: str | None = None
    category_id: str | None = None
    unit_id: str | None = None
    quantity: float | None = None
    threshold: float | None = None
    best_before_date: date | None = None
    use_by_date: date | None = None
    memo: str | None = None


class LocationResponse(ApiModel):
    latitude: float
    longitude: float
    name: str | None = None

    @classmethod
    def from_domain(cls, location: ShoppingLocation) -> "LocationResponse":
        return cls(
            latitude=location.latitude,
            longitude=location.longitude,
            name=location.name.value if location.name else None,
        )


class CheckRecordResponse(ApiModel):
    id: str
    session_id: str
    ingredient_id: str
    ingredient_name: str
    stock_status: StockStatus
    expiry_status: ExpiryStatus
    needs_attention: bool
    priority: int
    checked_at: datetime

    @classmethod
    def from_domain(cls, record: IngredientCheckRecord) -> "CheckRecordResponse":
        return cls(
            id=record.id.value,
            session_id=record.session_id.value,
            ingredient_id=record.ingredient_id.value,
            ingredient_name=record.ingredient_name.value,
            stock_status=record.stock_status,
            expiry_status=record.expiry_status,
            needs_attention=record.needs_attention,
            priority=record.priority,
            checked_at=record.checked_at,
        )


class SessionResponse(ApiModel):
    id: str
    user_id: str
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None
    abandoned_at: datetime | None = None
    device_type: str | None = None
    location: LocationResponse | None = None

    @classmethod
    def fields_from(cls, session: ShoppingSession) -> dict[str, object]:
        return {
            "id": session.id.value,
            "user_id": session.user_id,
            "status": session.status,
            "started_at": session.started_at,
            "completed_at": session.completed_at,
            "abandoned_at": session.abandoned_at,
            "device_type": session.device_type.value if session.device_type else None,
            "location": LocationResponse.from_domain(session.location)
            if session.location
            else None,
        }

    @classmethod
    def from_domain(cls, session: ShoppingSession) -> "SessionResponse":
        return cls(**cls.fields_from(session))


class SessionSummaryResponse(SessionResponse):
    duration_seconds: int
    checked_items_count: int
    checked_ingredients_count: int
    last_activity_at: datetime
    checks: list[CheckRecordResponse]

    @classmethod
    def from_summary(
        cls, summary: ShoppingSessionSummary
    ) -> "SessionSummaryResponse":
        return cls(
            **cls.fields_from(summary.session),
            duration_seconds=summary.duration_seconds,
            checked_items_count=summary.checked_items_count,
            checked_ingredients_count=summary.checked_ingredients_count,
            last_activity_at=summary.last_activity_at,
            checks=[CheckRecordResponse.from_domain(check) for check in summary.checks],
        )


class IngredientResponse(ApiModel):
    id: str
    name: str
    category_id: str
    unit_id: str
    quantity: float
    threshold: float | None = None
    best_before_date: date | None = None
    use_by_date: date | None = None
    memo: str | None = None
    stock_status: StockStatus
    expiry_status: ExpiryStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(
        cls, ingredient: IngredientRecord, today: date
    ) -> "IngredientResponse":
        return cls(
            id=ingredient.id.value,
            name=ingredient.name.value,
            category_id=ingredient.category_id.value,
            unit_id=ingredient.unit_id.value,
            quantity=ingredient.quantity.value,
            threshold=ingredient.threshold.value if ingredient.threshold else None,
            best_before_date=ingredient.best_before_date,
            use_by_date=ingredient.use_by_date,
            memo=ingredient.memo.value if ingredient.memo else None,
            stock_status=ingredient.stock_status,
            expiry_status=ingredient.expiry_status(today),
            created_at=ingredient.created_at,
            updated_at=ingredient.updated_at,
        )


class CategoryResponse(ApiModel):
    id: str
    name: str
    description: str | None = None
    display_order: int

    @classmethod
    def from_domain(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id.value,
            name=category.name.value,
            description=category.description.value if category.description else None,
            display_order=category.display_order.value,
        )


class UnitResponse(ApiModel):
    id: str
    name: str
    symbol: str
    display_order: int

    @classmethod
    def from_domain(cls, unit: Unit) -> "UnitResponse":
        return cls(
            id=unit.id.value,
            name=unit.name.value,
            symbol=unit.symbol.value,
            display_order=unit.display_order.value,
        )


class QuickAccessResponse(ApiModel):
    ingredient_id: str
    ingredient_name: str
    check_count: int
    last_checked_at: datetime
    current_stock_status: StockStatus
    current_expiry_status: ExpiryStatus

    @classmethod
    def from_domain(cls, item: QuickAccessIngredient) -> "QuickAccessResponse":
        return cls(
            ingredient_id=item.ingredient_id,
            ingredient_name=item.ingredient_name,
            check_count=item.check_count,
            last_checked_at=item.last_checked_at,
            current_stock_status=item.current_stock_status,
            current_expiry_status=item.current_expiry_status,
        )


class TopCheckedResponse(ApiModel):
    ingredient_id: str
    ingredient_name: str
    check_count: int
    check_rate_percentage: int

    @classmethod
    def from_domain(cls, item: TopCheckedIngredient) -> "TopCheckedResponse":
        return cls(
            ingredient_id=item.ingredient_id,
            ingredient_name=item.ingredient_name,
            check_count=item.check_count,
            check_rate_percentage=item.check_rate_percentage,
        )


class StatisticsResponse(ApiModel):
    period_days: int
    total_sessions: int
    completed_sessions: int
    abandoned_sessions: int
    total_checked_ingredients: int
    average_session_duration_minutes: float
    top_checked_ingredients: list[TopCheckedResponse]

    @classmethod
    def from_domain(cls, stats: ShoppingStatistics) -> "StatisticsResponse":
        return cls(
            period_days=stats.period_days,
            total_sessions=stats.total_sessions,
            completed_sessions=stats.completed_sessions,
            abandoned_sessions=stats.abandoned_sessions,
            total_checked_ingredients=stats.total_checked_ingredients,
            average_session_duration_minutes=stats.average_session_duration_minutes,
            top_checked_ingredients=[
                TopCheckedResponse.from_domain(item)
                for item in stats.top_checked_ingredients
            ],
        )


class PaginationResponse(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def paged(page: SessionPage) -> dict[str, object]:
    """Wrap a page of sessions as ``{"data": [...], "pagination": {...}}``."""
    body = envelope([SessionSummaryResponse.from_summary(item) for item in page.items])
    body["pagination"] = PaginationResponse(
        page=page.page,
        limit=page.limit,
        total=page.total,
        total_pages=page.total_pages,
        has_next=page.has_next,
        has_prev=page.has_prev,
    ).model_dump(by_alias=True)
    return body


class MonthlyCheckCountResponse(ApiModel):
    year_month: str
    check_count: int


class StockStatusBreakdownResponse(ApiModel):
    in_stock_checks: int
    low_stock_checks: int
    out_of_stock_checks: int


class IngredientCheckStatisticsResponse(ApiModel):
    ingredient_id: str
    ingredient_name: str
    total_check_count: int
    first_checked_at: datetime
    last_checked_at: datetime
    monthly_check_counts: list[MonthlyCheckCountResponse]
    stock_status_breakdown: StockStatusBreakdownResponse

    @classmethod
    def from_domain(
        cls, item: IngredientCheckStatistics
    ) -> "IngredientCheckStatisticsResponse":
        breakdown = item.stock_status_breakdown
        return cls(
            ingredient_id=item.ingredient_id,
            ingredient_name=item.ingredient_name,
            total_check_count=item.total_check_count,
            first_checked_at=item.first_checked_at,
            last_checked_at=item.last_checked_at,
            monthly_check_counts=[
                MonthlyCheckCountResponse(
                    year_month=month.year_month, check_count=month.check_count
                )
                for month in item.monthly_check_counts
            ],
            stock_status_breakdown=StockStatusBreakdownResponse(
                in_stock_checks=breakdown.in_stock_checks,
                low_stock_checks=breakdown.low_stock_checks,
                out_of_stock_checks=breakdown.out_of_stock_checks,
            ),
        )
