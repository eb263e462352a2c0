"""Domain models for shopping sessions."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from pantry_shopping.domain.errors import ValidationError
from pantry_shopping.domain.ingredients import ExpiryStatus, StockStatus
from pantry_shopping.domain.value_objects import (
    CheckRecordId,
    IngredientId,
    IngredientName,
    ShoppingLocation,
    ShoppingSessionId,
)


class SessionStatus(str, Enum):
    """Lifecycle state of a shopping session.

    ``ACTIVE`` is the only state with outgoing transitions; ``COMPLETED`` and
    ``ABANDONED`` are terminal.
    """

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"

    @classmethod
    def from_value(cls, raw: str) -> "SessionStatus":
        try:
            return cls(raw)
        except ValueError as exc:
            raise ValidationError(
                "status", "invalid_format", f"Invalid session status: {raw}"
            ) from exc

    def is_active(self) -> bool:
        return self is SessionStatus.ACTIVE

    def is_finished(self) -> bool:
        return self in _TERMINAL

    def can_transition_to(self, target: "SessionStatus") -> bool:
        return target in _TRANSITIONS[self]


_TERMINAL = frozenset({SessionStatus.COMPLETED, SessionStatus.ABANDONED})

_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.ACTIVE: _TERMINAL,
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ABANDONED: frozenset(),
}


class DeviceType(str, Enum):
    """Device a session was started from."""

    MOBILE = "MOBILE"
    TABLET = "TABLET"
    DESKTOP = "DESKTOP"

    @classmethod
    def from_value(cls, raw: str) -> "DeviceType":
        try:
            return cls(raw.strip().upper())
        except (AttributeError, ValueError) as exc:
            raise ValidationError(
                "deviceType", "invalid_format", f"Invalid device type: {raw}"
            ) from exc


@dataclass(frozen=True)
class ShoppingSession:
    """Represents a persisted shopping session."""

    id: ShoppingSessionId
    user_id: str
    status: SessionStatus
    started_at: datetime
    completed_at: datetime | None = None
    abandoned_at: datetime | None = None
    device_type: DeviceType | None = None
    location: ShoppingLocation | None = None

    def is_active(self) -> bool:
        return self.status.is_active()

    @property
    def finished_at(self) -> datetime | None:
        return self.completed_at or self.abandoned_at

    def duration_seconds(self, now: datetime | None = None) -> int:
        """Whole seconds from start to finish, or to ``now`` while active."""
        end = self.finished_at or now or datetime.now(tz=UTC)
        return max(int((end - self.started_at).total_seconds()), 0)


@dataclass(frozen=True)
class IngredientCheckRecord:
    """Snapshot of an ingredient's state taken when it was checked."""

    id: CheckRecordId
    session_id: ShoppingSessionId
    ingredient_id: IngredientId
    user_id: str
    ingredient_name: IngredientName
    stock_status: StockStatus
    expiry_status: ExpiryStatus
    checked_at: datetime

    @property
    def needs_attention(self) -> bool:
        return (
            self.stock_status.needs_replenishment()
            or self.expiry_status.needs_attention()
        )

    @property
    def priority(self) -> int:
        return self.stock_status.priority + self.expiry_status.priority


@dataclass(frozen=True)
class ShoppingSessionSummary:
    """Session plus the checks recorded in it."""

    session: ShoppingSession
    checks: list[IngredientCheckRecord]
    duration_seconds: int

    @property
    def checked_items_count(self) -> int:
        return len(self.checks)

    @property
    def checked_ingredients_count(self) -> int:
        return len({check.ingredient_id for check in self.checks})

    @property
    def last_activity_at(self) -> datetime:
        if not self.checks:
            return self.session.started_at
        return max(check.checked_at for check in self.checks)


@dataclass(frozen=True)
class SessionPage:
    """One page of session summaries out of ``total`` matching sessions."""

    items: list[ShoppingSessionSummary]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1
