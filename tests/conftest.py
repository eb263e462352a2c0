"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from pantry_shopping.config import Settings
from pantry_shopping.containers import AppContainer
from pantry_shopping.domain.errors import ACTIVE_SESSION_EXISTS, BusinessRuleViolation
from pantry_shopping.domain.ingredients import IngredientRecord
from pantry_shopping.domain.reference import Category, Unit
from pantry_shopping.domain.sessions import (
    IngredientCheckRecord,
    SessionStatus,
    ShoppingSession,
)
from pantry_shopping.domain.value_objects import (
    CategoryId,
    CategoryName,
    DisplayOrder,
    IngredientId,
    IngredientName,
    Quantity,
    ShoppingSessionId,
    Threshold,
    UnitId,
    UnitName,
    UnitSymbol,
)
from pantry_shopping.services.ingredients import (
    IngredientRepository,
    IngredientService,
)
from pantry_shopping.services.reference import (
    ReferenceDataRepository,
    ReferenceDataService,
)
from pantry_shopping.services.shopping import (
    ShoppingSessionRepository,
    ShoppingSessionService,
)
from pantry_shopping.services.stats import ShoppingStatsService


@dataclass
class InMemoryShoppingSessionRepository(ShoppingSessionRepository):
    """In-memory session repository for tests.

    Mirrors the store: one active session per user, conditional status updates.
    """

    sessions: dict[ShoppingSessionId, ShoppingSession] = field(default_factory=dict)
    checks: list[IngredientCheckRecord] = field(default_factory=list)

    def find_active_session_by_user(self, user_id: str) -> ShoppingSession | None:
        for session in self.sessions.values():
            if session.user_id == user_id and session.is_active():
                return session
        return None

    def create_session(self, session: ShoppingSession) -> ShoppingSession:
        if session.is_active() and any(
            other.user_id == session.user_id and other.is_active()
            for other in self.sessions.values()
        ):
            raise BusinessRuleViolation(
                ACTIVE_SESSION_EXISTS, "An active shopping session already exists"
            )
        self.sessions[session.id] = session
        return session

    def update_session_status(
        self, session_id: ShoppingSessionId, status: SessionStatus, timestamp: datetime
    ) -> ShoppingSession | None:
        current = self.sessions.get(session_id)
        if current is None or not current.is_active():
            return None
        if status is SessionStatus.COMPLETED:
            updated = replace(current, status=status, completed_at=timestamp)
        else:
            updated = replace(current, status=status, abandoned_at=timestamp)
        self.sessions[session_id] = updated
        return updated

    def append_check_record(
        self, record: IngredientCheckRecord
    ) -> IngredientCheckRecord:
        self.checks.append(record)
        return record

    def find_session_by_id(
        self, session_id: ShoppingSessionId
    ) -> ShoppingSession | None:
        return self.sessions.get(session_id)

    def find_sessions(  # noqa: PLR0913
        self,
        user_id: str,
        offset: int,
        limit: int,
        statuses: tuple[SessionStatus, ...] | None = None,
        started_from: datetime | None = None,
        started_to: datetime | None = None,
    ) -> tuple[list[ShoppingSession], int]:
        matching = [
            s
            for s in self.sessions.values()
            if s.user_id == user_id
            and (not statuses or s.status in statuses)
            and (started_from is None or s.started_at >= started_from)
            and (started_to is None or s.started_at <= started_to)
        ]
        matching.sort(key=lambda s: s.started_at, reverse=True)
        return matching[offset : offset + limit], len(matching)

    def list_check_records(
        self, session_id: ShoppingSessionId
    ) -> list[IngredientCheckRecord]:
        return [check for check in self.checks if check.session_id == session_id]

    def list_user_check_records(
        self,
        user_id: str,
        since: datetime | None = None,
        ingredient_id: IngredientId | None = None,
    ) -> list[IngredientCheckRecord]:
        return [
            check
            for check in self.checks
            if check.user_id == user_id
            and (since is None or check.checked_at >= since)
            and (ingredient_id is None or check.ingredient_id == ingredient_id)
        ]

    def list_sessions_since(
        self, user_id: str, since: datetime
    ) -> list[ShoppingSession]:
        return [
            s
            for s in self.sessions.values()
            if s.user_id == user_id and s.started_at >= since
        ]


@dataclass
class InMemoryIngredientRepository(IngredientRepository):
    """In-memory ingredient repository for tests."""

    ingredients: dict[IngredientId, IngredientRecord] = field(default_factory=dict)

    def add(self, ingredient: IngredientRecord) -> IngredientRecord:
        self.ingredients[ingredient.id] = ingredient
        return ingredient

    def create_ingredient(self, ingredient: IngredientRecord) -> IngredientRecord:
        return self.add(ingredient)

    def get_ingredient(
        self, user_id: str, ingredient_id: IngredientId
    ) -> IngredientRecord | None:
        ingredient = self.ingredients.get(ingredient_id)
        if ingredient is None or ingredient.user_id != user_id:
            return None
        return ingredient

    def list_ingredients(
        self, user_id: str, category_id: CategoryId | None = None
    ) -> list[IngredientRecord]:
        return [
            item
            for item in self.ingredients.values()
            if item.user_id == user_id
            and (category_id is None or item.category_id == category_id)
        ]

    def get_ingredients(
        self, user_id: str, ingredient_ids: list[IngredientId]
    ) -> list[IngredientRecord]:
        return [
            item
            for item in self.ingredients.values()
            if item.user_id == user_id and item.id in ingredient_ids
        ]

    def update_quantity(
        self, ingredient_id: IngredientId, quantity: Quantity, updated_at: datetime
    ) -> IngredientRecord | None:
        current = self.ingredients.get(ingredient_id)
        if current is None:
            return None
        updated = replace(current, quantity=quantity, updated_at=updated_at)
        self.ingredients[ingredient_id] = updated
        return updated

    def update_ingredient(
        self, ingredient: IngredientRecord
    ) -> IngredientRecord | None:
        if ingredient.id not in self.ingredients:
            return None
        self.ingredients[ingredient.id] = ingredient
        return ingredient


@dataclass
class InMemoryReferenceDataRepository(ReferenceDataRepository):
    """In-memory reference data repository for tests."""

    categories: list[Category] = field(default_factory=list)
    units: list[Unit] = field(default_factory=list)

    def list_categories(self) -> list[Category]:
        return list(self.categories)

    def get_category(self, category_id: CategoryId) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)

    def list_units(self) -> list[Unit]:
        return list(self.units)

    def get_unit(self, unit_id: UnitId) -> Unit | None:
        return next((u for u in self.units if u.id == unit_id), None)


def make_ingredient(  # noqa: PLR0913
    ingredient_id: str = "ing1",
    user_id: str = "u1",
    name: str = "Milk",
    quantity: float = 2.0,
    threshold: float | None = 1.0,
    category_id: str = "cat_dairy",
    unit_id: str = "unt_l",
    **overrides: object,
) -> IngredientRecord:
    now = datetime.now(tz=UTC)
    ingredient = IngredientRecord(
        id=IngredientId(ingredient_id),
        user_id=user_id,
        name=IngredientName(name),
        category_id=CategoryId(category_id),
        unit_id=UnitId(unit_id),
        quantity=Quantity(quantity),
        threshold=Threshold(threshold) if threshold is not None else None,
        best_before_date=None,
        use_by_date=None,
        memo=None,
        created_at=now,
        updated_at=now,
    )
    return replace(ingredient, **overrides) if overrides else ingredient


def default_reference_data() -> InMemoryReferenceDataRepository:
    return InMemoryReferenceDataRepository(
        categories=[
            Category(
                id=CategoryId("cat_veg"),
                name=CategoryName("Vegetables"),
                display_order=DisplayOrder(2),
            ),
            Category(
                id=CategoryId("cat_dairy"),
                name=CategoryName("Dairy"),
                display_order=DisplayOrder(1),
            ),
        ],
        units=[
            Unit(
                id=UnitId("unt_g"),
                name=UnitName("gram"),
                symbol=UnitSymbol("g"),
                display_order=DisplayOrder(2),
            ),
            Unit(
                id=UnitId("unt_l"),
                name=UnitName("liter"),
                symbol=UnitSymbol("L"),
                display_order=DisplayOrder(1),
            ),
        ],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def session_repository() -> InMemoryShoppingSessionRepository:
    return InMemoryShoppingSessionRepository()


@pytest.fixture
def ingredient_repository() -> InMemoryIngredientRepository:
    repository = InMemoryIngredientRepository()
    repository.add(make_ingredient())
    return repository


@pytest.fixture
def reference_repository() -> InMemoryReferenceDataRepository:
    return default_reference_data()


@pytest.fixture
def shopping_service(
    session_repository: InMemoryShoppingSessionRepository,
    ingredient_repository: InMemoryIngredientRepository,
) -> ShoppingSessionService:
    return ShoppingSessionService(session_repository, ingredient_repository)


@pytest.fixture
def container(
    settings: Settings,
    session_repository: InMemoryShoppingSessionRepository,
    ingredient_repository: InMemoryIngredientRepository,
    reference_repository: InMemoryReferenceDataRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        shopping_session_service=ShoppingSessionService(
            session_repository, ingredient_repository
        ),
        shopping_stats_service=ShoppingStatsService(
            session_repository, ingredient_repository
        ),
        ingredient_service=IngredientService(
            ingredient_repository, reference_repository
        ),
        reference_data_service=ReferenceDataService(reference_repository),
        close_resources=close_resources,
    )
