"""Read-only services for categories and units."""

from dataclasses import dataclass
from typing import Protocol

from pantry_shopping.domain.reference import Category, Unit
from pantry_shopping.domain.value_objects import CategoryId, UnitId
from pantry_shopping.services.queries import GetCategoriesQuery, GetUnitsQuery


class ReferenceDataRepository(Protocol):
    """Persistence interface for category and unit reference data."""

    def list_categories(self) -> list[Category]:
        """Return all active categories."""

    def get_category(self, category_id: CategoryId) -> Category | None:
        """Return a category by id, if present."""

    def list_units(self) -> list[Unit]:
        """Return all active units."""

    def get_unit(self, unit_id: UnitId) -> Unit | None:
        """Return a unit by id, if present."""


@dataclass
class ReferenceDataService:
    """Application service for browsing categories and units."""

    repository: ReferenceDataRepository

    def get_categories(self, query: GetCategoriesQuery) -> list[Category]:
        """Return categories in the order the query asks for."""
        categories = self.repository.list_categories()
        if query.sort_by == "name":
            return sorted(categories, key=lambda item: item.name.value.casefold())
        return sorted(
            categories,
            key=lambda item: (item.display_order.value, item.name.value.casefold()),
        )

    def get_units(self, query: GetUnitsQuery) -> list[Unit]:
        """Return units in the order the query asks for."""
        units = self.repository.list_units()
        if query.sort_by == "name":
            return sorted(units, key=lambda item: item.name.value.casefold())
        if query.sort_by == "symbol":
            return sorted(units, key=lambda item: item.symbol.value.casefold())
        return sorted(
            units,
            key=lambda item: (item.display_order.value, item.name.value.casefold()),
        )
