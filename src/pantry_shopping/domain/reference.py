"""Domain models for categories and units."""

from dataclasses import dataclass, field

from pantry_shopping.domain.value_objects import (
    CategoryDescription,
    CategoryId,
    CategoryName,
    DisplayOrder,
    UnitId,
    UnitName,
    UnitSymbol,
)


@dataclass(frozen=True)
class Category:
    """Ingredient category reference data."""

    id: CategoryId
    name: CategoryName
    display_order: DisplayOrder = field(default_factory=DisplayOrder)
    description: CategoryDescription | None = None


@dataclass(frozen=True)
class Unit:
    """Unit of measure reference data."""

    id: UnitId
    name: UnitName
    symbol: UnitSymbol
    display_order: DisplayOrder = field(default_factory=DisplayOrder)
