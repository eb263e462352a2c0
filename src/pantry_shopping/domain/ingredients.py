"""Domain models for ingredients and their stock/expiry classification."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pantry_shopping.domain.errors import ValidationError
from pantry_shopping.domain.value_objects import (
    CategoryId,
    IngredientId,
    IngredientName,
    Memo,
    Quantity,
    Threshold,
    UnitId,
)

NEAR_EXPIRY_DAYS = 7
EXPIRING_SOON_DAYS = 3
CRITICAL_DAYS = 1


class StockStatus(str, Enum):
    """How much of an ingredient is left relative to its threshold."""

    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"

    @classmethod
    def from_value(cls, raw: str) -> "StockStatus":
        try:
            return cls(raw)
        except ValueError as exc:
            raise ValidationError(
                "stockStatus", "invalid_format", f"Invalid stock status: {raw}"
            ) from exc

    def needs_replenishment(self) -> bool:
        return self is not StockStatus.IN_STOCK

    @property
    def priority(self) -> int:
        return _STOCK_PRIORITY[self]


_STOCK_PRIORITY = {
    StockStatus.IN_STOCK: 1,
    StockStatus.LOW_STOCK: 2,
    StockStatus.OUT_OF_STOCK: 3,
}


class ExpiryStatus(str, Enum):
    """How close an ingredient is to its governing expiry date."""

    FRESH = "FRESH"
    NEAR_EXPIRY = "NEAR_EXPIRY"
    EXPIRING_SOON = "EXPIRING_SOON"
    CRITICAL = "CRITICAL"
    EXPIRED = "EXPIRED"

    @classmethod
    def from_value(cls, raw: str) -> "ExpiryStatus":
        try:
            return cls(raw)
        except ValueError as exc:
            raise ValidationError(
                "expiryStatus", "invalid_format", f"Invalid expiry status: {raw}"
            ) from exc

    @classmethod
    def from_days_until_expiry(cls, days: int | None) -> "ExpiryStatus":
        """Classify by whole days left; ``None`` means the item never expires."""
        if days is None:
            return cls.FRESH
        if days <= 0:
            return cls.EXPIRED
        if days <= CRITICAL_DAYS:
            return cls.CRITICAL
        if days <= EXPIRING_SOON_DAYS:
            return cls.EXPIRING_SOON
        if days <= NEAR_EXPIRY_DAYS:
            return cls.NEAR_EXPIRY
        return cls.FRESH

    def needs_attention(self) -> bool:
        return self is not ExpiryStatus.FRESH

    @property
    def priority(self) -> int:
        return _EXPIRY_PRIORITY[self]


_EXPIRY_PRIORITY = {
    ExpiryStatus.FRESH: 1,
    ExpiryStatus.NEAR_EXPIRY: 2,
    ExpiryStatus.EXPIRING_SOON: 3,
    ExpiryStatus.CRITICAL: 4,
    ExpiryStatus.EXPIRED: 5,
}


@dataclass(frozen=True)
class IngredientRecord:
    """An ingredient registered by a user."""

    id: IngredientId
    user_id: str
    name: IngredientName
    category_id: CategoryId
    unit_id: UnitId
    quantity: Quantity
    threshold: Threshold | None
    best_before_date: date | None
    use_by_date: date | None
    memo: Memo | None
    created_at: datetime
    updated_at: datetime

    @property
    def stock_status(self) -> StockStatus:
        if self.quantity.value <= 0:
            return StockStatus.OUT_OF_STOCK
        if self.threshold is not None and self.quantity.value <= self.threshold.value:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def expiry_status(self, today: date) -> ExpiryStatus:
        """Classify expiry against ``today``; use-by wins over best-before."""
        governing = self.use_by_date or self.best_before_date
        if governing is None:
            return ExpiryStatus.FRESH
        return ExpiryStatus.from_days_until_expiry((governing - today).days)


@dataclass(frozen=True)
class IngredientDraft:
    """Raw input for registering an ingredient."""

    name: str
    category_id: str
    unit_id: str
    quantity: float
    threshold: float | None = None
    best_before_date: date | None = None
    use_by_date: date | None = None
    memo: str | None = None
