"""Services for registering ingredients and tracking their stock."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from pantry_shopping.domain.errors import NotFoundError, ValidationError
from pantry_shopping.domain.ingredients import IngredientDraft, IngredientRecord
from pantry_shopping.domain.value_objects import (
    CategoryId,
    IngredientId,
    IngredientName,
    Memo,
    Quantity,
    Threshold,
    UnitId,
)
from pantry_shopping.services.reference import ReferenceDataRepository

logger = logging.getLogger(__name__)


class IngredientRepository(Protocol):
    """Persistence interface for user ingredients."""

    def create_ingredient(self, ingredient: IngredientRecord) -> IngredientRecord:
        """Insert an ingredient and return it."""

    def get_ingredient(
        self, user_id: str, ingredient_id: IngredientId
    ) -> IngredientRecord | None:
        """Return a user's ingredient by id, if present."""

    def list_ingredients(
        self, user_id: str, category_id: CategoryId | None = None
    ) -> list[IngredientRecord]:
        """Return a user's ingredients, optionally filtered by category."""

    def get_ingredients(
        self, user_id: str, ingredient_ids: list[IngredientId]
    ) -> list[IngredientRecord]:
        """Return the user's ingredients among the given ids."""

    def update_quantity(
        self, ingredient_id: IngredientId, quantity: Quantity, updated_at: datetime
    ) -> IngredientRecord | None:
        """Set the stock quantity and return the updated ingredient."""

    def update_ingredient(
        self, ingredient: IngredientRecord
    ) -> IngredientRecord | None:
        """Persist every editable field of ``ingredient`` and return the row."""


@dataclass
class IngredientService:
    """Application service for ingredient registration and stock updates."""

    repository: IngredientRepository
    reference_repository: ReferenceDataRepository

    def create_ingredient(
        self, user_id: str, draft: IngredientDraft
    ) -> IngredientRecord:
        """Validate a draft and register it for the user."""
        category_id = CategoryId(draft.category_id)
        unit_id = UnitId(draft.unit_id)
        now = datetime.now(tz=UTC)
        ingredient = IngredientRecord(
            id=IngredientId.generate(),
            user_id=user_id,
            name=IngredientName(draft.name),
            category_id=category_id,
            unit_id=unit_id,
            quantity=Quantity(draft.quantity),
            threshold=Threshold(draft.threshold)
            if draft.threshold is not None
            else None,
            best_before_date=draft.best_before_date,
            use_by_date=draft.use_by_date,
            memo=Memo(draft.memo) if draft.memo and draft.memo.strip() else None,
            created_at=now,
            updated_at=now,
        )
        if self.reference_repository.get_category(category_id) is None:
            raise NotFoundError("Category", category_id.value)
        if self.reference_repository.get_unit(unit_id) is None:
            raise NotFoundError("Unit", unit_id.value)
        created = self.repository.create_ingredient(ingredient)
        logger.info("Registered ingredient %s for user %s", created.id, user_id)
        return created

    def get_ingredient(self, user_id: str, ingredient_id: str) -> IngredientRecord:
        """Return the user's ingredient or raise ``NotFoundError``."""
        parsed_id = IngredientId(ingredient_id)
        ingredient = self.repository.get_ingredient(user_id, parsed_id)
        if ingredient is None or ingredient.user_id != user_id:
            raise NotFoundError("Ingredient", parsed_id.value)
        return ingredient

    def list_ingredients(
        self, user_id: str, category_id: str | None = None
    ) -> list[IngredientRecord]:
        """Return the user's ingredients sorted by name."""
        parsed_category = CategoryId(category_id) if category_id else None
        ingredients = self.repository.list_ingredients(user_id, parsed_category)
        return sorted(ingredients, key=lambda item: item.name.value.casefold())

    def update_quantity(
        self, user_id: str, ingredient_id: str, quantity: float
    ) -> IngredientRecord:
        """Record a new stock quantity for the user's ingredient."""
        new_quantity = Quantity(quantity)
        current = self.get_ingredient(user_id, ingredient_id)
        updated = self.repository.update_quantity(
            current.id, new_quantity, datetime.now(tz=UTC)
        )
        if updated is None:
            raise NotFoundError("Ingredient", current.id.value)
        logger.info(
            "Stock of ingredient %s changed from %s to %s",
            current.id,
            current.quantity.value,
            new_quantity.value,
        )
        return updated

    def update_ingredient(
        self, user_id: str, ingredient_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Apply a partial update to the user's ingredient.

        ``payload`` holds only the fields being changed. ``None`` clears the
        nullable fields (threshold, dates, memo). A new category or unit must
        exist.
        """
        current = self.get_ingredient(user_id, ingredient_id)
        changes = _parse_changes(payload)
        category_id = changes.get("category_id")
        if (
            isinstance(category_id, CategoryId)
            and self.reference_repository.get_category(category_id) is None
        ):
            raise NotFoundError("Category", category_id.value)
        unit_id = changes.get("unit_id")
        if (
            isinstance(unit_id, UnitId)
            and self.reference_repository.get_unit(unit_id) is None
        ):
            raise NotFoundError("Unit", unit_id.value)

        if not changes:
            return current
        updated = self.repository.update_ingredient(
            replace(current, **changes, updated_at=datetime.now(tz=UTC))
        )
        if updated is None:
            raise NotFoundError("Ingredient", current.id.value)
        logger.info(
            "Updated ingredient %s (%s)", current.id, ", ".join(sorted(changes))
        )
        return updated


_PARSERS = {
    "name": IngredientName,
    "category_id": CategoryId,
    "unit_id": UnitId,
    "quantity": Quantity,
    "threshold": lambda raw: Threshold(raw) if raw is not None else None,
    "best_before_date": lambda raw: raw,
    "use_by_date": lambda raw: raw,
    "memo": lambda raw: Memo(raw) if isinstance(raw, str) and raw.strip() else None,
}
EDITABLE_FIELDS = frozenset(_PARSERS)


def _parse_changes(payload: dict[str, object]) -> dict[str, object]:
    """Validate a partial update into value objects keyed by record field."""
    unknown = set(payload) - EDITABLE_FIELDS
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationError(field, "invalid_format", f"{field} is not editable")
    return {key: _PARSERS[key](value) for key, value in payload.items()}
