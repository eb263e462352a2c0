"""Shopping session use cases: start, check, complete, abandon, and reads."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from pantry_shopping.domain.errors import (
    ACTIVE_SESSION_EXISTS,
    SESSION_ACCESS_DENIED,
    SESSION_ALREADY_ABANDONED,
    SESSION_ALREADY_COMPLETED,
    SESSION_NOT_ACTIVE,
    BusinessRuleViolation,
    NotFoundError,
    ValidationError,
)
from pantry_shopping.domain.sessions import (
    DeviceType,
    IngredientCheckRecord,
    SessionStatus,
    SessionPage,
    ShoppingSession,
    ShoppingSessionSummary,
)
from pantry_shopping.domain.value_objects import (
    CheckRecordId,
    IngredientId,
    ShoppingLocation,
    ShoppingSessionId,
)
from pantry_shopping.services.ingredients import IngredientRepository
from pantry_shopping.services.queries import (
    GetRecentSessionsQuery,
    GetSessionHistoryQuery,
)

logger = logging.getLogger(__name__)

FINISHED_STATUSES = (SessionStatus.COMPLETED, SessionStatus.ABANDONED)


class ShoppingSessionRepository(Protocol):
    """Persistence interface for shopping sessions and their check records."""

    def find_active_session_by_user(self, user_id: str) -> ShoppingSession | None:
        """Return the user's active session, if any."""

    def create_session(self, session: ShoppingSession) -> ShoppingSession:
        """Insert a session and return it.

        Raises ``BusinessRuleViolation(ACTIVE_SESSION_EXISTS)`` when the store
        already holds an active session for the same user.
        """

    def update_session_status(
        self, session_id: ShoppingSessionId, status: SessionStatus, timestamp: datetime
    ) -> ShoppingSession | None:
        """Move an active session to ``status``.

        Returns ``None`` when the session was no longer active.
        """

    def append_check_record(
        self, record: IngredientCheckRecord
    ) -> IngredientCheckRecord:
        """Insert a check record and return it."""

    def find_session_by_id(
        self, session_id: ShoppingSessionId
    ) -> ShoppingSession | None:
        """Return a session by id, if present."""

    def find_sessions(  # noqa: PLR0913
        self,
        user_id: str,
        offset: int,
        limit: int,
        statuses: tuple[SessionStatus, ...] | None = None,
        started_from: datetime | None = None,
        started_to: datetime | None = None,
    ) -> tuple[list[ShoppingSession], int]:
        """Return one page of the user's sessions, newest first, and the total.

        ``statuses`` and the ``started_*`` bounds (inclusive) narrow both the
        page and the total.
        """

    def list_check_records(
        self, session_id: ShoppingSessionId
    ) -> list[IngredientCheckRecord]:
        """Return a session's check records in the order they were made."""

    def list_user_check_records(
        self,
        user_id: str,
        since: datetime | None = None,
        ingredient_id: IngredientId | None = None,
    ) -> list[IngredientCheckRecord]:
        """Return a user's check records, oldest first.

        Optionally only those made since a time or for one ingredient.
        """

    def list_sessions_since(
        self, user_id: str, since: datetime
    ) -> list[ShoppingSession]:
        """Return the user's sessions started at or after ``since``."""


@dataclass
class ShoppingSessionService:
    """Runs the shopping session state machine."""

    session_repository: ShoppingSessionRepository
    ingredient_repository: IngredientRepository

    def start_session(
        self,
        user_id: str,
        device_type: DeviceType | None = None,
        location: ShoppingLocation | None = None,
    ) -> ShoppingSession:
        """Open a new active session for the user."""
        _require_user(user_id)
        existing = self.session_repository.find_active_session_by_user(user_id)
        if existing is not None:
            logger.warning(
                "User %s tried to start a session while %s is active",
                user_id,
                existing.id,
            )
            raise _active_session_exists(existing.id)

        session = ShoppingSession(
            id=ShoppingSessionId.generate(),
            user_id=user_id,
            status=SessionStatus.ACTIVE,
            started_at=datetime.now(tz=UTC),
            device_type=device_type,
            location=location,
        )
        created = self.session_repository.create_session(session)
        logger.info("Started shopping session %s for user %s", created.id, user_id)
        return created

    def check_ingredient(
        self, session_id: str, ingredient_id: str, user_id: str
    ) -> IngredientCheckRecord:
        """Record a snapshot of an ingredient's status within an active session."""
        _require_user(user_id)
        parsed_session_id = ShoppingSessionId(session_id)
        parsed_ingredient_id = IngredientId(ingredient_id)

        session = self.session_repository.find_session_by_id(parsed_session_id)
        if session is None:
            raise NotFoundError("ShoppingSession", parsed_session_id.value)
        if session.user_id != user_id:
            raise BusinessRuleViolation(
                SESSION_ACCESS_DENIED,
                "You are not allowed to check ingredients in this session",
                {"sessionId": session.id.value},
            )
        if not session.is_active():
            logger.warning(
                "Rejected check of %s in %s session %s",
                parsed_ingredient_id,
                session.status.value,
                session.id,
            )
            raise BusinessRuleViolation(
                SESSION_NOT_ACTIVE,
                "Ingredients can only be checked in an active session",
                {"sessionId": session.id.value, "status": session.status.value},
            )

        ingredient = self.ingredient_repository.get_ingredient(
            user_id, parsed_ingredient_id
        )
        if ingredient is None or ingredient.user_id != user_id:
            raise NotFoundError("Ingredient", parsed_ingredient_id.value)

        now = datetime.now(tz=UTC)
        record = IngredientCheckRecord(
            id=CheckRecordId.generate(),
            session_id=session.id,
            ingredient_id=ingredient.id,
            user_id=user_id,
            ingredient_name=ingredient.name,
            stock_status=ingredient.stock_status,
            expiry_status=ingredient.expiry_status(now.date()),
            checked_at=now,
        )
        saved = self.session_repository.append_check_record(record)
        logger.info(
            "Checked ingredient %s in session %s (%s, %s)",
            saved.ingredient_id,
            saved.session_id,
            saved.stock_status.value,
            saved.expiry_status.value,
        )
        return saved

    def complete_session(self, session_id: str, user_id: str) -> ShoppingSessionSummary:
        """Finish the session successfully."""
        return self._finish(session_id, user_id, SessionStatus.COMPLETED)

    def abandon_session(self, session_id: str, user_id: str) -> ShoppingSessionSummary:
        """Finish the session without completing it."""
        return self._finish(session_id, user_id, SessionStatus.ABANDONED)

    def get_active_session(self, user_id: str) -> ShoppingSessionSummary | None:
        """Return the user's active session with its checks, if any."""
        _require_user(user_id)
        session = self.session_repository.find_active_session_by_user(user_id)
        if session is None:
            return None
        return self._summarize(session)

    def get_recent_sessions(self, query: GetRecentSessionsQuery) -> SessionPage:
        """Return a page of the user's sessions in any status, newest first."""
        return self._page(query.user_id, query.page, query.limit)

    def get_session_history(self, query: GetSessionHistoryQuery) -> SessionPage:
        """Return a filtered page of the user's finished sessions."""
        statuses = (
            (SessionStatus.from_value(query.status),)
            if query.status
            else FINISHED_STATUSES
        )
        return self._page(
            query.user_id,
            query.page,
            query.limit,
            statuses=statuses,
            started_from=query.started_from,
            started_to=query.started_to,
        )

    def _page(
        self, user_id: str, page: int, limit: int, **filters: object
    ) -> SessionPage:
        sessions, total = self.session_repository.find_sessions(
            user_id, (page - 1) * limit, limit, **filters
        )
        return SessionPage(
            items=[self._summarize(session) for session in sessions],
            page=page,
            limit=limit,
            total=total,
        )

    def _finish(
        self, session_id: str, user_id: str, target: SessionStatus
    ) -> ShoppingSessionSummary:
        _require_user(user_id)
        parsed_id = ShoppingSessionId(session_id)
        session = self.session_repository.find_session_by_id(parsed_id)
        if session is None or session.user_id != user_id:
            raise NotFoundError("ShoppingSession", parsed_id.value)
        if not session.status.can_transition_to(target):
            logger.warning(
                "Rejected %s -> %s for session %s",
                session.status.value,
                target.value,
                session.id,
            )
            raise _terminal_conflict(session)

        updated = self.session_repository.update_session_status(
            parsed_id, target, datetime.now(tz=UTC)
        )
        if updated is None:
            # Another request finished the session between the read and the write.
            current = self.session_repository.find_session_by_id(parsed_id)
            raise _terminal_conflict(current or session)

        logger.info("Session %s is now %s", updated.id, updated.status.value)
        return self._summarize(updated)

    def _summarize(self, session: ShoppingSession) -> ShoppingSessionSummary:
        checks = self.session_repository.list_check_records(session.id)
        return ShoppingSessionSummary(
            session=session,
            checks=checks,
            duration_seconds=session.duration_seconds(),
        )


def _require_user(user_id: str) -> None:
    if not user_id or not user_id.strip():
        raise ValidationError("userId", "required", "userId is required")


def _active_session_exists(session_id: ShoppingSessionId) -> BusinessRuleViolation:
    return BusinessRuleViolation(
        ACTIVE_SESSION_EXISTS,
        "An active shopping session already exists",
        {"activeSessionId": session_id.value},
    )


def _terminal_conflict(session: ShoppingSession) -> BusinessRuleViolation:
    details = {"sessionId": session.id.value, "status": session.status.value}
    if session.status is SessionStatus.COMPLETED:
        return BusinessRuleViolation(
            SESSION_ALREADY_COMPLETED,
            "The shopping session is already completed",
            details,
        )
    if session.status is SessionStatus.ABANDONED:
        return BusinessRuleViolation(
            SESSION_ALREADY_ABANDONED,
            "The shopping session is already abandoned",
            details,
        )
    return BusinessRuleViolation(
        SESSION_NOT_ACTIVE, "The shopping session is not active", details
    )
