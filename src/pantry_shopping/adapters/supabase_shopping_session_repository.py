"""Supabase-backed shopping session repository."""

from dataclasses import dataclass
from datetime import datetime

from postgrest.exceptions import APIError
from supabase import Client

from pantry_shopping.domain.errors import ACTIVE_SESSION_EXISTS, BusinessRuleViolation
from pantry_shopping.domain.ingredients import ExpiryStatus, StockStatus
from pantry_shopping.domain.sessions import (
    DeviceType,
    IngredientCheckRecord,
    SessionStatus,
    ShoppingSession,
)
from pantry_shopping.domain.value_objects import (
    CheckRecordId,
    IngredientId,
    IngredientName,
    ShoppingLocation,
    ShoppingSessionId,
)
from pantry_shopping.services.shopping import ShoppingSessionRepository

UNIQUE_VIOLATION = "23505"

_SESSION_COLUMNS = (
    "id, user_id, status, started_at, completed_at, abandoned_at, "
    "device_type, location_name, location_lat, location_lng"
)
_CHECK_COLUMNS = (
    "id, session_id, ingredient_id, user_id, ingredient_name, "
    "stock_status, expiry_status, checked_at"
)
_TIMESTAMP_COLUMNS = {
    SessionStatus.COMPLETED: "completed_at",
    SessionStatus.ABANDONED: "abandoned_at",
}


@dataclass
class SupabaseShoppingSessionRepository(ShoppingSessionRepository):
    """Supabase implementation for shopping sessions.

    The ``shopping_sessions`` table carries a partial unique index on
    ``user_id`` where ``status = 'ACTIVE'``; an insert that trips it is reported
    as ``ACTIVE_SESSION_EXISTS``. Status changes are conditional on the row
    still being ``ACTIVE``.
    """

    client: Client

    def find_active_session_by_user(self, user_id: str) -> ShoppingSession | None:
        """Return the user's active session, if any."""
        response = (
            self.client.table("shopping_sessions")
            .select(_SESSION_COLUMNS)
            .eq("user_id", user_id)
            .eq("status", SessionStatus.ACTIVE.value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def create_session(self, session: ShoppingSession) -> ShoppingSession:
        """Insert a session row and return it."""
        location = session.location
        try:
            response = (
                self.client.table("shopping_sessions")
                .insert(
                    {
                        "id": session.id.value,
                        "user_id": session.user_id,
                        "status": session.status.value,
                        "started_at": session.started_at.isoformat(),
                        "device_type": session.device_type.value
                        if session.device_type
                        else None,
                        "location_name": location.name.value
                        if location and location.name
                        else None,
                        "location_lat": location.latitude if location else None,
                        "location_lng": location.longitude if location else None,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise BusinessRuleViolation(
                    ACTIVE_SESSION_EXISTS,
                    "An active shopping session already exists",
                    {"userId": session.user_id},
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create shopping session")
        return _parse_session(response.data[0])

    def update_session_status(
        self, session_id: ShoppingSessionId, status: SessionStatus, timestamp: datetime
    ) -> ShoppingSession | None:
        """Move the session to ``status`` only while it is still active."""
        response = (
            self.client.table("shopping_sessions")
            .update(
                {
                    "status": status.value,
                    _TIMESTAMP_COLUMNS[status]: timestamp.isoformat(),
                }
            )
            .eq("id", session_id.value)
            .eq("status", SessionStatus.ACTIVE.value)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def append_check_record(
        self, record: IngredientCheckRecord
    ) -> IngredientCheckRecord:
        """Insert a check record row and return it."""
        response = (
            self.client.table("shopping_session_items")
            .insert(
                {
                    "id": record.id.value,
                    "session_id": record.session_id.value,
                    "ingredient_id": record.ingredient_id.value,
                    "user_id": record.user_id,
                    "ingredient_name": record.ingredient_name.value,
                    "stock_status": record.stock_status.value,
                    "expiry_status": record.expiry_status.value,
                    "checked_at": record.checked_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record ingredient check")
        return _parse_check(response.data[0])

    def find_session_by_id(
        self, session_id: ShoppingSessionId
    ) -> ShoppingSession | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("shopping_sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", session_id.value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def find_sessions(  # noqa: PLR0913
        self,
        user_id: str,
        offset: int,
        limit: int,
        statuses: tuple[SessionStatus, ...] | None = None,
        started_from: datetime | None = None,
        started_to: datetime | None = None,
    ) -> tuple[list[ShoppingSession], int]:
        """Return one page of the user's sessions, newest first, and the total."""
        query = (
            self.client.table("shopping_sessions")
            .select(_SESSION_COLUMNS, count="exact")
            .eq("user_id", user_id)
        )
        if statuses:
            query = query.in_("status", [status.value for status in statuses])
        if started_from is not None:
            query = query.gte("started_at", started_from.isoformat())
        if started_to is not None:
            query = query.lte("started_at", started_to.isoformat())
        response = (
            query.order("started_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        rows = response.data or []
        total = response.count if response.count is not None else len(rows)
        return [_parse_session(row) for row in rows], total

    def list_check_records(
        self, session_id: ShoppingSessionId
    ) -> list[IngredientCheckRecord]:
        """Return a session's check records, oldest first."""
        response = (
            self.client.table("shopping_session_items")
            .select(_CHECK_COLUMNS)
            .eq("session_id", session_id.value)
            .order("checked_at")
            .execute()
        )
        return [_parse_check(row) for row in response.data or []]

    def list_user_check_records(
        self,
        user_id: str,
        since: datetime | None = None,
        ingredient_id: IngredientId | None = None,
    ) -> list[IngredientCheckRecord]:
        """Return check records made by a user, oldest first."""
        query = (
            self.client.table("shopping_session_items")
            .select(_CHECK_COLUMNS)
            .eq("user_id", user_id)
        )
        if since is not None:
            query = query.gte("checked_at", since.isoformat())
        if ingredient_id is not None:
            query = query.eq("ingredient_id", ingredient_id.value)
        response = query.order("checked_at").execute()
        return [_parse_check(row) for row in response.data or []]

    def list_sessions_since(
        self, user_id: str, since: datetime
    ) -> list[ShoppingSession]:
        """Return sessions started at or after ``since``."""
        response = (
            self.client.table("shopping_sessions")
            .select(_SESSION_COLUMNS)
            .eq("user_id", user_id)
            .gte("started_at", since.isoformat())
            .order("started_at", desc=True)
            .execute()
        )
        return [_parse_session(row) for row in response.data or []]


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_session(row: dict[str, object]) -> ShoppingSession:
    """Parse a shopping session row into a domain model."""
    latitude = row.get("location_lat")
    longitude = row.get("location_lng")
    location = None
    if latitude is not None and longitude is not None:
        location = ShoppingLocation.create(
            latitude=float(latitude),
            longitude=float(longitude),
            name=row.get("location_name"),
        )
    device_type = row.get("device_type")
    return ShoppingSession(
        id=ShoppingSessionId(str(row["id"])),
        user_id=str(row["user_id"]),
        status=SessionStatus.from_value(str(row["status"])),
        started_at=datetime.fromisoformat(str(row["started_at"])),
        completed_at=_parse_timestamp(row.get("completed_at")),
        abandoned_at=_parse_timestamp(row.get("abandoned_at")),
        device_type=DeviceType.from_value(device_type) if device_type else None,
        location=location,
    )


def _parse_check(row: dict[str, object]) -> IngredientCheckRecord:
    """Parse a check record row into a domain model."""
    return IngredientCheckRecord(
        id=CheckRecordId(str(row["id"])),
        session_id=ShoppingSessionId(str(row["session_id"])),
        ingredient_id=IngredientId(str(row["ingredient_id"])),
        user_id=str(row["user_id"]),
        ingredient_name=IngredientName(str(row["ingredient_name"])),
        stock_status=StockStatus.from_value(str(row["stock_status"])),
        expiry_status=ExpiryStatus.from_value(
            str(row.get("expiry_status") or ExpiryStatus.FRESH.value)
        ),
        checked_at=datetime.fromisoformat(str(row["checked_at"])),
    )
