"""Statistics over a user's shopping sessions and ingredient checks."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from pantry_shopping.domain.ingredients import StockStatus
from pantry_shopping.domain.sessions import IngredientCheckRecord, SessionStatus
from pantry_shopping.domain.stats import (
    IngredientCheckStatistics,
    MonthlyCheckCount,
    QuickAccessIngredient,
    ShoppingStatistics,
    StockStatusBreakdown,
    TopCheckedIngredient,
)
from pantry_shopping.domain.value_objects import IngredientId
from pantry_shopping.services.ingredients import IngredientRepository
from pantry_shopping.services.queries import (
    GetIngredientCheckStatisticsQuery,
    GetQuickAccessIngredientsQuery,
    GetShoppingStatisticsQuery,
)
from pantry_shopping.services.shopping import ShoppingSessionRepository

TOP_CHECKED_LIMIT = 5


@dataclass
class ShoppingStatsService:
    """Service for quick-access lists and shopping statistics."""

    session_repository: ShoppingSessionRepository
    ingredient_repository: IngredientRepository

    def get_quick_access_ingredients(
        self, query: GetQuickAccessIngredientsQuery
    ) -> list[QuickAccessIngredient]:
        """Return the user's most frequently checked ingredients."""
        checks = self.session_repository.list_user_check_records(query.user_id)
        grouped = _group_by_ingredient(checks)
        if not grouped:
            return []

        ingredients = {
            ingredient.id: ingredient
            for ingredient in self.ingredient_repository.get_ingredients(
                query.user_id, list(grouped)
            )
        }
        ranked = sorted(
            (
                (ingredient_id, records)
                for ingredient_id, records in grouped.items()
                if ingredient_id in ingredients
            ),
            key=lambda entry: (
                len(entry[1]),
                max(record.checked_at for record in entry[1]),
            ),
            reverse=True,
        )

        today = datetime.now(tz=UTC).date()
        results = []
        for ingredient_id, records in ranked[: query.limit]:
            ingredient = ingredients[ingredient_id]
            results.append(
                QuickAccessIngredient(
                    ingredient_id=ingredient_id.value,
                    ingredient_name=ingredient.name.value,
                    check_count=len(records),
                    last_checked_at=max(record.checked_at for record in records),
                    current_stock_status=ingredient.stock_status,
                    current_expiry_status=ingredient.expiry_status(today),
                )
            )
        return results

    def get_statistics(self, query: GetShoppingStatisticsQuery) -> ShoppingStatistics:
        """Summarize sessions started within the query period."""
        now = datetime.now(tz=UTC)
        since = now - timedelta(days=query.period_days)
        sessions = self.session_repository.list_sessions_since(query.user_id, since)
        session_ids = {session.id for session in sessions}
        checks = [
            check
            for check in self.session_repository.list_user_check_records(
                query.user_id, since
            )
            if check.session_id in session_ids
        ]

        durations = [
            session.duration_seconds(now) for session in sessions if session.finished_at
        ]
        average_minutes = (
            round(sum(durations) / len(durations) / 60, 1) if durations else 0.0
        )
        total_sessions = len(sessions)

        return ShoppingStatistics(
            period_days=query.period_days,
            total_sessions=total_sessions,
            completed_sessions=sum(
                1 for session in sessions if session.status is SessionStatus.COMPLETED
            ),
            abandoned_sessions=sum(
                1 for session in sessions if session.status is SessionStatus.ABANDONED
            ),
            total_checked_ingredients=len(checks),
            average_session_duration_minutes=average_minutes,
            top_checked_ingredients=_top_checked(checks, total_sessions),
        )

    def get_ingredient_check_statistics(
        self, query: GetIngredientCheckStatisticsQuery
    ) -> list[IngredientCheckStatistics]:
        """Summarize the check history of each ingredient the user has checked.

        Results are ordered by total checks, most checked first. An ingredient
        that was never checked yields no entry.
        """
        ingredient_id = (
            IngredientId(query.ingredient_id) if query.ingredient_id else None
        )
        checks = self.session_repository.list_user_check_records(
            query.user_id, ingredient_id=ingredient_id
        )
        grouped = _group_by_ingredient(checks)
        ranked = sorted(
            grouped.items(), key=lambda entry: (-len(entry[1]), entry[0].value)
        )
        return [_check_statistics(item_id, records) for item_id, records in ranked]


def _group_by_ingredient(
    checks: list[IngredientCheckRecord],
) -> dict[IngredientId, list[IngredientCheckRecord]]:
    grouped: dict[IngredientId, list[IngredientCheckRecord]] = defaultdict(list)
    for check in checks:
        grouped[check.ingredient_id].append(check)
    return dict(grouped)


def _top_checked(
    checks: list[IngredientCheckRecord], total_sessions: int
) -> list[TopCheckedIngredient]:
    """Rank ingredients by check count; the rate counts sessions, not checks."""
    ranked = sorted(
        _group_by_ingredient(checks).items(),
        key=lambda entry: (len(entry[1]), entry[0].value),
        reverse=True,
    )
    top = []
    for ingredient_id, records in ranked[:TOP_CHECKED_LIMIT]:
        sessions_with_check = len({record.session_id for record in records})
        latest = max(records, key=lambda record: record.checked_at)
        top.append(
            TopCheckedIngredient(
                ingredient_id=ingredient_id.value,
                ingredient_name=latest.ingredient_name.value,
                check_count=len(records),
                check_rate_percentage=round(sessions_with_check / total_sessions * 100)
                if total_sessions
                else 0,
            )
        )
    return top


def _check_statistics(
    ingredient_id: IngredientId, records: list[IngredientCheckRecord]
) -> IngredientCheckStatistics:
    ordered = sorted(records, key=lambda record: record.checked_at)
    monthly: dict[str, int] = defaultdict(int)
    by_stock: dict[StockStatus, int] = defaultdict(int)
    for record in ordered:
        monthly[record.checked_at.astimezone(UTC).strftime("%Y-%m")] += 1
        by_stock[record.stock_status] += 1
    return IngredientCheckStatistics(
        ingredient_id=ingredient_id.value,
        ingredient_name=ordered[-1].ingredient_name.value,
        total_check_count=len(ordered),
        first_checked_at=ordered[0].checked_at,
        last_checked_at=ordered[-1].checked_at,
        monthly_check_counts=[
            MonthlyCheckCount(year_month=month, check_count=count)
            for month, count in sorted(monthly.items())
        ],
        stock_status_breakdown=StockStatusBreakdown(
            in_stock_checks=by_stock[StockStatus.IN_STOCK],
            low_stock_checks=by_stock[StockStatus.LOW_STOCK],
            out_of_stock_checks=by_stock[StockStatus.OUT_OF_STOCK],
        ),
    )
