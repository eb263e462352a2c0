"""Supabase implementation for categories and units."""

from dataclasses import dataclass

from supabase import Client

from pantry_shopping.domain.reference import Category, Unit
from pantry_shopping.domain.value_objects import (
    CategoryDescription,
    CategoryId,
    CategoryName,
    DisplayOrder,
    UnitId,
    UnitName,
    UnitSymbol,
)
from pantry_shopping.services.reference import ReferenceDataRepository


@dataclass
class SupabaseReferenceDataRepository(ReferenceDataRepository):
    """Supabase-backed repository for reference data."""

    client: Client

    def list_categories(self) -> list[Category]:
        """Return active categories."""
        response = (
            self.client.table("categories")
            .select("id, name, description, display_order")
            .eq("is_active", True)
            .order("display_order")
            .execute()
        )
        return [_parse_category(row) for row in response.data or []]

    def get_category(self, category_id: CategoryId) -> Category | None:
        """Return an active category by id, if present."""
        response = (
            self.client.table("categories")
            .select("id, name, description, display_order")
            .eq("id", category_id.value)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_category(response.data[0])

    def list_units(self) -> list[Unit]:
        """Return active units."""
        response = (
            self.client.table("units")
            .select("id, name, symbol, display_order")
            .eq("is_active", True)
            .order("display_order")
            .execute()
        )
        return [_parse_unit(row) for row in response.data or []]

    def get_unit(self, unit_id: UnitId) -> Unit | None:
        """Return an active unit by id, if present."""
        response = (
            self.client.table("units")
            .select("id, name, symbol, display_order")
            .eq("id", unit_id.value)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_unit(response.data[0])


def _parse_category(row: dict[str, object]) -> Category:
    description = row.get("description")
    return Category(
        id=CategoryId(str(row["id"])),
        name=CategoryName(str(row["name"])),
        display_order=DisplayOrder(int(row.get("display_order") or 0)),
        description=CategoryDescription(description)
        if isinstance(description, str) and description.strip()
        else None,
    )


def _parse_unit(row: dict[str, object]) -> Unit:
    return Unit(
        id=UnitId(str(row["id"])),
        name=UnitName(str(row["name"])),
        symbol=UnitSymbol(str(row["symbol"])),
        display_order=DisplayOrder(int(row.get("display_order") or 0)),
    )
