"""Data models for fleetmap datasets and telemetry samples."""

from fleetmap.models._base import FleetBaseModel, IsoTimestamp
from fleetmap.models.equipment import Equipment, StateDefinition
from fleetmap.models.records import (
    FleetDataset,
    PositionHistoryRecord,
    RawPosition,
    RawStateEntry,
    StateHistoryRecord,
)
from fleetmap.models.samples import DisplayName, NameSource, PositionSample, StateSample

__all__ = [
    "DisplayName",
    "Equipment",
    "FleetBaseModel",
    "FleetDataset",
    "IsoTimestamp",
    "NameSource",
    "PositionHistoryRecord",
    "PositionSample",
    "RawPosition",
    "RawStateEntry",
    "StateDefinition",
    "StateHistoryRecord",
    "StateSample",
]
