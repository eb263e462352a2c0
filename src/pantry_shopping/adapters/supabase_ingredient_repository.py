"""Supabase implementation for user ingredients."""

from dataclasses import dataclass
from datetime import date, datetime

from supabase import Client

from pantry_shopping.domain.ingredients import IngredientRecord
from pantry_shopping.domain.value_objects import (
    CategoryId,
    IngredientId,
    IngredientName,
    Memo,
    Quantity,
    Threshold,
    UnitId,
)
from pantry_shopping.services.ingredients import IngredientRepository


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase-backed repository for ingredients."""

    client: Client

    def create_ingredient(self, ingredient: IngredientRecord) -> IngredientRecord:
        """Insert an ingredient row and return it."""
        response = (
            self.client.table("ingredients")
            .insert(_serialize_ingredient(ingredient))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create ingredient")
        return _parse_ingredient(response.data[0])

    def get_ingredient(
        self, user_id: str, ingredient_id: IngredientId
    ) -> IngredientRecord | None:
        """Return a user's ingredient by id, if present."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("id", ingredient_id.value)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def list_ingredients(
        self, user_id: str, category_id: CategoryId | None = None
    ) -> list[IngredientRecord]:
        """Return the user's ingredients."""
        query = self.client.table("ingredients").select("*").eq("user_id", user_id)
        if category_id is not None:
            query = query.eq("category_id", category_id.value)
        response = query.order("name").execute()
        return [_parse_ingredient(row) for row in response.data or []]

    def get_ingredients(
        self, user_id: str, ingredient_ids: list[IngredientId]
    ) -> list[IngredientRecord]:
        """Return the user's ingredients among the given ids."""
        if not ingredient_ids:
            return []
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("user_id", user_id)
            .in_("id", [ingredient_id.value for ingredient_id in ingredient_ids])
            .execute()
        )
        return [_parse_ingredient(row) for row in response.data or []]

    def update_quantity(
        self, ingredient_id: IngredientId, quantity: Quantity, updated_at: datetime
    ) -> IngredientRecord | None:
        """Set the stock quantity and return the updated row."""
        response = (
            self.client.table("ingredients")
            .update(
                {
                    "quantity": quantity.value,
                    "updated_at": updated_at.isoformat(),
                }
            )
            .eq("id", ingredient_id.value)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def update_ingredient(
        self, ingredient: IngredientRecord
    ) -> IngredientRecord | None:
        """Write the editable columns of ``ingredient`` and return the row."""
        payload = _serialize_ingredient(ingredient)
        for column in ("id", "user_id", "created_at"):
            payload.pop(column)
        response = (
            self.client.table("ingredients")
            .update(payload)
            .eq("id", ingredient.id.value)
            .eq("user_id", ingredient.user_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])


def _serialize_ingredient(ingredient: IngredientRecord) -> dict[str, object]:
    return {
        "id": ingredient.id.value,
        "user_id": ingredient.user_id,
        "name": ingredient.name.value,
        "category_id": ingredient.category_id.value,
        "unit_id": ingredient.unit_id.value,
        "quantity": ingredient.quantity.value,
        "threshold": ingredient.threshold.value if ingredient.threshold else None,
        "best_before_date": ingredient.best_before_date.isoformat()
        if ingredient.best_before_date
        else None,
        "use_by_date": ingredient.use_by_date.isoformat()
        if ingredient.use_by_date
        else None,
        "memo": ingredient.memo.value if ingredient.memo else None,
        "created_at": ingredient.created_at.isoformat(),
        "updated_at": ingredient.updated_at.isoformat(),
    }


def _parse_date(raw: object) -> date | None:
    if isinstance(raw, str) and raw:
        return date.fromisoformat(raw[:10])
    return None


def _parse_ingredient(row: dict[str, object]) -> IngredientRecord:
    """Parse an ingredient row into a domain model."""
    threshold = row.get("threshold")
    memo = row.get("memo")
    return IngredientRecord(
        id=IngredientId(str(row["id"])),
        user_id=str(row["user_id"]),
        name=IngredientName(str(row["name"])),
        category_id=CategoryId(str(row["category_id"])),
        unit_id=UnitId(str(row["unit_id"])),
        quantity=Quantity(float(row.get("quantity", 0.0))),
        threshold=Threshold(float(threshold)) if threshold is not None else None,
        best_before_date=_parse_date(row.get("best_before_date")),
        use_by_date=_parse_date(row.get("use_by_date")),
        memo=Memo(memo) if isinstance(memo, str) and memo.strip() else None,
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )
