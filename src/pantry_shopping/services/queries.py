"""Query objects for read-only use cases.

Queries are immutable pydantic models serialized with camelCase aliases, so a
query survives ``Query(**query.model_dump(by_alias=True))`` unchanged.
Constructing a query with invalid values raises the domain
:class:`ValidationError` rather than pydantic's own error. The reported field
is always the camelCase alias, whichever key the caller used.
"""

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from pantry_shopping.domain.errors import ValidationError

UserIdField = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

PYDANTIC_RULES = {
    "missing": "required",
    "string_too_short": "required",
    "greater_than_equal": "out_of_range",
    "less_than_equal": "out_of_range",
    "greater_than": "out_of_range",
    "less_than": "out_of_range",
}


def wire_name(model: type[BaseModel], key: str) -> str:
    """Return the alias for ``key`` whether it is a field name or an alias."""
    field = model.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key


def to_validation_error(
    exc: PydanticValidationError, model: type[BaseModel]
) -> ValidationError:
    """Convert the first pydantic error into a domain validation error."""
    error = exc.errors()[0]
    loc = [str(part) for part in error["loc"]]
    if loc:
        loc[0] = wire_name(model, loc[0])
    field = ".".join(loc) or "query"
    rule = PYDANTIC_RULES.get(error["type"], "invalid_format")
    return ValidationError(field, rule, f"{field}: {error['msg']}")


class QueryModel(BaseModel):
    """Base class for query objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    def __init__(self, **data: object) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise to_validation_error(exc, type(self)) from exc

    def to_payload(self) -> dict[str, object]:
        """Serialize using camelCase keys."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_payload(cls, payload: dict[str, object]):  # noqa: ANN206
        """Deserialize from camelCase (or snake_case) keys."""
        return cls(**payload)


class GetRecentSessionsQuery(QueryModel):
    """A page of a user's sessions, newest first."""

    user_id: UserIdField
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=50)


class GetSessionHistoryQuery(QueryModel):
    """A filtered page of a user's finished sessions."""

    user_id: UserIdField
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    started_from: datetime | None = None
    started_to: datetime | None = None
    status: Literal["COMPLETED", "ABANDONED"] | None = None

    @field_validator("started_from", "started_to")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def __init__(self, **data: object) -> None:
        super().__init__(**data)
        if (
            self.started_from is not None
            and self.started_to is not None
            and self.started_to < self.started_from
        ):
            raise ValidationError(
                "startedTo", "out_of_range", "startedTo must not precede startedFrom"
            )


class GetQuickAccessIngredientsQuery(QueryModel):
    """Ingredients a user checks most often."""

    user_id: UserIdField
    limit: int = Field(default=10, ge=1, le=100)


class GetShoppingStatisticsQuery(QueryModel):
    """Shopping activity summary over the last ``period_days`` days."""

    user_id: UserIdField
    period_days: int = Field(default=30, ge=1, le=365)


class GetIngredientCheckStatisticsQuery(QueryModel):
    """Check history per ingredient, optionally for a single ingredient."""

    user_id: UserIdField
    ingredient_id: str | None = None


class GetCategoriesQuery(QueryModel):
    sort_by: Literal["displayOrder", "name"] = "displayOrder"


class GetUnitsQuery(QueryModel):
    sort_by: Literal["displayOrder", "name", "symbol"] = "displayOrder"
