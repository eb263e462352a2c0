"""Tests for the session status state machine and ingredient classification."""

from datetime import date

import pytest

from pantry_shopping.domain.errors import ValidationError
from pantry_shopping.domain.ingredients import ExpiryStatus, StockStatus
from pantry_shopping.domain.sessions import DeviceType, SessionStatus
from tests.conftest import make_ingredient

ALLOWED = {
    (SessionStatus.ACTIVE, SessionStatus.COMPLETED),
    (SessionStatus.ACTIVE, SessionStatus.ABANDONED),
}


@pytest.mark.parametrize("current", list(SessionStatus))
@pytest.mark.parametrize("target", list(SessionStatus))
def test_can_transition_to(current: SessionStatus, target: SessionStatus) -> None:
    assert current.can_transition_to(target) is ((current, target) in ALLOWED)


def test_finished_states() -> None:
    assert not SessionStatus.ACTIVE.is_finished()
    assert SessionStatus.COMPLETED.is_finished()
    assert SessionStatus.ABANDONED.is_finished()
    assert SessionStatus.ACTIVE.is_active()


def test_from_value_rejects_unknown_status() -> None:
    assert SessionStatus.from_value("COMPLETED") is SessionStatus.COMPLETED
    with pytest.raises(ValidationError):
        SessionStatus.from_value("PAUSED")


def test_device_type_is_case_insensitive() -> None:
    assert DeviceType.from_value("mobile") is DeviceType.MOBILE
    with pytest.raises(ValidationError):
        DeviceType.from_value("watch")


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (None, ExpiryStatus.FRESH),
        (-2, ExpiryStatus.EXPIRED),
        (0, ExpiryStatus.EXPIRED),
        (1, ExpiryStatus.CRITICAL),
        (3, ExpiryStatus.EXPIRING_SOON),
        (7, ExpiryStatus.NEAR_EXPIRY),
        (8, ExpiryStatus.FRESH),
    ],
)
def test_expiry_status_from_days(days, expected) -> None:
    assert ExpiryStatus.from_days_until_expiry(days) is expected


def test_stock_status() -> None:
    assert make_ingredient(quantity=0).stock_status is StockStatus.OUT_OF_STOCK
    assert make_ingredient(quantity=1, threshold=1).stock_status is (
        StockStatus.LOW_STOCK
    )
    assert make_ingredient(quantity=5, threshold=None).stock_status is (
        StockStatus.IN_STOCK
    )


def test_use_by_date_wins_over_best_before() -> None:
    today = date(2024, 5, 10)
    ingredient = make_ingredient(
        best_before_date=date(2024, 6, 1), use_by_date=date(2024, 5, 11)
    )
    assert ingredient.expiry_status(today) is ExpiryStatus.CRITICAL
