"""Normalized telemetry samples and query results."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class PositionSample(BaseModel):
    """A valid position observation.

    ``latitude`` and ``longitude`` are always finite; entries that fail
    this are dropped by :func:`fleetmap.ingestion.positions.normalize_positions`.
    """

    model_config = ConfigDict(frozen=True)

    equipment_id: str
    latitude: float
    longitude: float
    timestamp: datetime | None = None


class StateSample(BaseModel):
    """A state observation with its catalog name resolved.

    ``resolved`` is ``False`` when ``state_id`` had no catalog match, in
    which case ``state_name`` holds the unknown-state sentinel.
    """

    model_config = ConfigDict(frozen=True)

    equipment_id: str
    state_name: str
    timestamp: datetime | None = None
    state_id: str | None = None
    resolved: bool = True


class NameSource(StrEnum):
    RESOLVED = "resolved"
    FALLBACK = "fallback"


class DisplayName(BaseModel):
    """Result of an equipment name lookup.

    ``source`` tells whether ``text`` came from the equipment list or is
    the raw identifier used as a fallback.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source: NameSource

    @property
    def is_fallback(self) -> bool:
        return self.source == NameSource.FALLBACK

    def __str__(self) -> str:
        return self.text
