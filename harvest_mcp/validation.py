"""Argument validation shared by every tool.

Tool inputs are pydantic models; the JSON Schema advertised to MCP clients is
generated from the same models, so what a client sees is what gets enforced.
Numbers and flags are strict: ``true`` is not an id and ``"7"`` is not a count.
"""

import logging
from datetime import date
from typing import Annotated, Any, Dict, Iterable, Optional, Type, TypeVar

from pydantic import (
    AfterValidator,
    AnyUrl,
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from harvest_mcp.errors import ToolInputError

logger = logging.getLogger("harvest-mcp.validation")

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_PER_PAGE = 2000

_aware_datetime = TypeAdapter(AwareDatetime)
_url = TypeAdapter(AnyUrl)


def _check_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("must be a valid date in YYYY-MM-DD format") from None
    return value


def _check_datetime(value: str) -> str:
    try:
        _aware_datetime.validate_python(value)
    except ValidationError:
        raise ValueError("must be an ISO 8601 date-time with a UTC offset, e.g. 2024-01-31T09:00:00Z") from None
    return value


def _check_url(value: str) -> str:
    # validated only; Harvest receives the text as given
    try:
        _url.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid URL") from None
    return value


PositiveId = Annotated[StrictInt, Field(gt=0)]
IsoDate = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}-\d{2}$"), AfterValidator(_check_date)]
IsoDateTime = Annotated[str, AfterValidator(_check_datetime)]
ClockTime = Annotated[str, StringConstraints(pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")]
Currency = Annotated[str, StringConstraints(min_length=3, max_length=3)]
Percentage = Annotated[StrictFloat, Field(ge=0, le=100)]
Amount = Annotated[StrictFloat, Field(ge=0)]
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
Url = Annotated[str, AfterValidator(_check_url)]


class ToolInput(BaseModel):
    """Base class for tool arguments; unknown arguments are rejected."""

    model_config = ConfigDict(extra="forbid")

    def to_params(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """Dump the provided fields (and defaults) as JSON-ready values, dropping None.

        Fields are emitted under their alias, so ``from_`` goes out as ``from``.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=set(exclude))


class EmptyInput(ToolInput):
    pass


class PaginatedQuery(ToolInput):
    page: Optional[PositiveId] = Field(None, description="Page number for pagination")
    per_page: StrictInt = Field(
        MAX_PER_PAGE,
        ge=1,
        le=MAX_PER_PAGE,
        description=f"Number of records per page (max {MAX_PER_PAGE})",
    )


def format_errors(error: ValidationError) -> list:
    errors = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "input"
        errors.append(f"{location}: {item['msg']}")
    return errors


def validate_input(model: Type[ModelT], arguments: Any, context: str) -> ModelT:
    """Parse tool arguments into ``model``.

    Raises:
        ToolInputError: With every failing field listed in the message
    """
    try:
        return model.model_validate(arguments if arguments is not None else {})
    except ValidationError as e:
        errors = format_errors(e)
        logger.error(f"Validation failed for {context}: {errors}")
        raise ToolInputError(f"Invalid parameters: {', '.join(errors)}", errors) from e


def _strip_titles(node: Any) -> Any:
    if isinstance(node, dict):
        return {k: _strip_titles(v) for k, v in node.items() if not (k == "title" and isinstance(v, str))}
    if isinstance(node, list):
        return [_strip_titles(v) for v in node]
    return node


def input_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON Schema for a tool's input model, as published in tools/list."""
    schema = _strip_titles(model.model_json_schema())
    schema.setdefault("properties", {})
    return schema
