"""Base model for fleetmap dataset records.

Every raw dataset model inherits from :class:`FleetBaseModel` which
provides:

* a frozen, ``extra="ignore"`` pydantic config so unknown keys sent by
  the data source never break parsing;
* a ``raw`` dict that captures the original payload;
* shared coercers for identifiers and ISO-8601 timestamps.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from fleetmap.ingestion.normalize import parse_iso_timestamp, safe_float, safe_str

IsoTimestamp = Annotated[datetime | None, BeforeValidator(parse_iso_timestamp)]
"""Annotated type that coerces ISO-8601 strings to UTC datetimes (``None`` if unparseable)."""

Identifier = Annotated[str, BeforeValidator(safe_str)]
"""Annotated type for required identifiers; numbers are stringified, blanks rejected."""

OptionalIdentifier = Annotated[str | None, BeforeValidator(safe_str)]


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


Text = Annotated[str, BeforeValidator(_to_text)]
"""Annotated type for free text; ``None`` becomes ``""`` and scalars are stringified."""

Coordinate = Annotated[float | None, BeforeValidator(safe_float)]
"""Annotated type for coordinates; missing, non-numeric and non-finite values become ``None``."""


class FleetBaseModel(BaseModel):
    """Base for records parsed from the dataset resources."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        return merged
