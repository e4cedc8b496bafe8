"""Raw time-series records as delivered by the dataset resources.

Both history resources are nested: one record per equipment holding a
list of timestamped entries.  Entries are kept as loosely-typed as the
source delivers them; filtering and resolution happen in
:mod:`fleetmap.ingestion`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from fleetmap.models._base import Coordinate, FleetBaseModel, Identifier, IsoTimestamp, OptionalIdentifier
from fleetmap.models.equipment import Equipment, StateDefinition


class RawPosition(FleetBaseModel):
    """A single ``{date, lat, lon}`` entry."""

    date: IsoTimestamp = None
    lat: Coordinate = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lon: Coordinate = Field(default=None, validation_alias=AliasChoices("lon", "lng", "longitude"))

    @property
    def has_valid_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None


class PositionHistoryRecord(FleetBaseModel):
    """Position history for one equipment."""

    equipment_id: Identifier = Field(validation_alias=AliasChoices("equipmentId", "equipment_id"))
    positions: list[RawPosition] = Field(default_factory=list)

    @field_validator("positions", mode="before")
    @classmethod
    def _keep_mapping_entries(cls, value: Any) -> list[Any]:
        # Entries that are not objects carry no coordinates and are dropped.
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


class RawStateEntry(FleetBaseModel):
    """A single ``{date, equipmentStateId}`` entry."""

    date: IsoTimestamp = None
    equipment_state_id: OptionalIdentifier = Field(
        default=None,
        validation_alias=AliasChoices("equipmentStateId", "stateId", "equipment_state_id"),
    )


class StateHistoryRecord(FleetBaseModel):
    """State transition history for one equipment."""

    equipment_id: Identifier = Field(validation_alias=AliasChoices("equipmentId", "equipment_id"))
    states: list[RawStateEntry] = Field(default_factory=list)

    @field_validator("states", mode="before")
    @classmethod
    def _keep_every_entry(cls, value: Any) -> list[Any]:
        # State entries are never dropped; a non-object entry becomes an empty one.
        if not isinstance(value, list):
            return []
        return [item if isinstance(item, dict) else {} for item in value]


class FleetDataset(BaseModel):
    """The four collections fetched by one load cycle."""

    model_config = ConfigDict(frozen=True)

    equipment: tuple[Equipment, ...] = ()
    positions: tuple[PositionHistoryRecord, ...] = ()
    state_catalog: tuple[StateDefinition, ...] = ()
    state_history: tuple[StateHistoryRecord, ...] = ()
    fetched_at: datetime | None = None
