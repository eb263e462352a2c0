"""Domain models for shopping statistics."""

from dataclasses import dataclass
from datetime import datetime

from pantry_shopping.domain.ingredients import ExpiryStatus, StockStatus


@dataclass(frozen=True)
class QuickAccessIngredient:
    """Frequently checked ingredient with its current status."""

    ingredient_id: str
    ingredient_name: str
    check_count: int
    last_checked_at: datetime
    current_stock_status: StockStatus
    current_expiry_status: ExpiryStatus


@dataclass(frozen=True)
class TopCheckedIngredient:
    """Ingredient ranked by how often it was checked in a period."""

    ingredient_id: str
    ingredient_name: str
    check_count: int
    check_rate_percentage: int


@dataclass(frozen=True)
class ShoppingStatistics:
    """Aggregated shopping activity for a period."""

    period_days: int
    total_sessions: int
    completed_sessions: int
    abandoned_sessions: int
    total_checked_ingredients: int
    average_session_duration_minutes: float
    top_checked_ingredients: list[TopCheckedIngredient]


@dataclass(frozen=True)
class MonthlyCheckCount:
    """Number of checks in one calendar month (``YYYY-MM``, UTC)."""

    year_month: str
    check_count: int


@dataclass(frozen=True)
class StockStatusBreakdown:
    """Checks grouped by the stock status recorded at check time."""

    in_stock_checks: int
    low_stock_checks: int
    out_of_stock_checks: int


@dataclass(frozen=True)
class IngredientCheckStatistics:
    """Full check history summary for one ingredient."""

    ingredient_id: str
    ingredient_name: str
    total_check_count: int
    first_checked_at: datetime
    last_checked_at: datetime
    monthly_check_counts: list[MonthlyCheckCount]
    stock_status_breakdown: StockStatusBreakdown
