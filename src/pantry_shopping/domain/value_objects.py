"""Self-validating value objects shared by every entity.

Each value object is a frozen dataclass that validates in ``__post_init__`` and
raises :class:`ValidationError` naming the field and the violated rule. String
values are trimmed before any length check, so ``CategoryName("  meat ")``
holds ``"meat"``. Equality and hashing are by value (and type).
"""

import math
import re
from dataclasses import dataclass
from typing import ClassVar
from uuid import uuid4

from pantry_shopping.domain.errors import ValidationError

REQUIRED = "required"
TOO_LONG = "too_long"
INVALID_FORMAT = "invalid_format"
OUT_OF_RANGE = "out_of_range"

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _required_text(field_name: str, raw: object) -> str:
    if raw is None:
        raise ValidationError(field_name, REQUIRED, f"{field_name} is required")
    if not isinstance(raw, str):
        raise ValidationError(
            field_name, INVALID_FORMAT, f"{field_name} must be a string"
        )
    trimmed = raw.strip()
    if not trimmed:
        raise ValidationError(field_name, REQUIRED, f"{field_name} is required")
    return trimmed


@dataclass(frozen=True)
class BoundedText:
    """Non-empty trimmed string with a maximum length."""

    value: str

    field_name: ClassVar[str] = "value"
    max_length: ClassVar[int] = 255

    def __post_init__(self) -> None:
        trimmed = _required_text(self.field_name, self.value)
        if len(trimmed) > self.max_length:
            raise ValidationError(
                self.field_name,
                TOO_LONG,
                f"{self.field_name} must be at most {self.max_length} characters",
            )
        object.__setattr__(self, "value", trimmed)

    def __str__(self) -> str:
        return self.value


class CategoryName(BoundedText):
    field_name = "categoryName"
    max_length = 20


class CategoryDescription(BoundedText):
    field_name = "description"
    max_length = 100


class IngredientName(BoundedText):
    field_name = "ingredientName"
    max_length = 50


class Memo(BoundedText):
    field_name = "memo"
    max_length = 200


class UnitName(BoundedText):
    field_name = "unitName"
    max_length = 30


class UnitSymbol(BoundedText):
    field_name = "unitSymbol"
    max_length = 10


class LocationName(BoundedText):
    field_name = "locationName"
    max_length = 100


@dataclass(frozen=True)
class EntityId:
    """Opaque identifier: trimmed, bounded, restricted to ``[A-Za-z0-9_-]``.

    Subclasses set ``prefix`` for identifiers minted by this service. When
    ``strict_prefix`` is set, parsing also rejects values without the prefix.
    """

    value: str

    field_name: ClassVar[str] = "id"
    prefix: ClassVar[str] = ""
    strict_prefix: ClassVar[bool] = False
    max_length: ClassVar[int] = 64

    def __post_init__(self) -> None:
        trimmed = _required_text(self.field_name, self.value)
        if len(trimmed) > self.max_length:
            raise ValidationError(
                self.field_name,
                TOO_LONG,
                f"{self.field_name} must be at most {self.max_length} characters",
            )
        if not _ID_PATTERN.match(trimmed) or (
            self.strict_prefix and not trimmed.startswith(self.prefix)
        ):
            raise ValidationError(
                self.field_name,
                INVALID_FORMAT,
                f"{self.field_name} has an invalid format: {trimmed}",
            )
        object.__setattr__(self, "value", trimmed)

    @classmethod
    def generate(cls) -> "EntityId":
        """Mint a fresh identifier carrying the class prefix."""
        return cls(f"{cls.prefix}{uuid4().hex[:24]}")

    def __str__(self) -> str:
        return self.value


class ShoppingSessionId(EntityId):
    field_name = "sessionId"
    prefix = "ses_"
    strict_prefix = True


class CheckRecordId(EntityId):
    field_name = "checkRecordId"
    prefix = "chk_"


class IngredientId(EntityId):
    field_name = "ingredientId"
    prefix = "ing_"


class CategoryId(EntityId):
    field_name = "categoryId"
    prefix = "cat_"


class UnitId(EntityId):
    field_name = "unitId"
    prefix = "unt_"


@dataclass(frozen=True)
class Quantity:
    """Finite, non-negative amount of stock."""

    value: float

    field_name: ClassVar[str] = "quantity"
    max_value: ClassVar[float] = 999_999.0

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValidationError(
                self.field_name, REQUIRED, f"{self.field_name} is required"
            )
        if isinstance(self.value, bool) or not isinstance(self.value, int | float):
            raise ValidationError(
                self.field_name, INVALID_FORMAT, f"{self.field_name} must be a number"
            )
        if not math.isfinite(self.value) or not 0 <= self.value <= self.max_value:
            raise ValidationError(
                self.field_name,
                OUT_OF_RANGE,
                f"{self.field_name} must be between 0 and {self.max_value:g}",
            )
        object.__setattr__(self, "value", float(self.value))


class Threshold(Quantity):
    field_name = "threshold"


@dataclass(frozen=True)
class DisplayOrder:
    """Non-negative sort position for reference data."""

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                "displayOrder", INVALID_FORMAT, "displayOrder must be an integer"
            )
        if self.value < 0:
            raise ValidationError(
                "displayOrder", OUT_OF_RANGE, "displayOrder must be 0 or greater"
            )


@dataclass(frozen=True)
class ShoppingLocation:
    """Where a shopping session takes place."""

    latitude: float
    longitude: float
    name: LocationName | None = None

    def __post_init__(self) -> None:
        _check_coordinate("latitude", self.latitude, 90)
        _check_coordinate("longitude", self.longitude, 180)
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))

    @classmethod
    def create(
        cls, latitude: float, longitude: float, name: str | None = None
    ) -> "ShoppingLocation":
        """Build a location, treating a blank name as absent."""
        location_name = LocationName(name) if name and name.strip() else None
        return cls(latitude=latitude, longitude=longitude, name=location_name)


def _check_coordinate(field_name: str, value: object, bound: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(
            field_name, INVALID_FORMAT, f"{field_name} must be a number"
        )
    if not math.isfinite(value) or not -bound <= value <= bound:
        raise ValidationError(
            field_name,
            OUT_OF_RANGE,
            f"{field_name} must be between -{bound} and {bound}",
        )
