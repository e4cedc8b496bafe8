"""fleetmap - Async loader and telemetry index for equipment fleet maps."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetmap")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetmap._constants import NO_STATE_NAME, UNKNOWN_STATE_NAME
from fleetmap.client import FleetMapClient
from fleetmap.config import FleetMapConfig
from fleetmap.exceptions import (
    FleetMapConfigError,
    FleetMapDatasetError,
    FleetMapError,
    FleetMapLoadError,
    FleetMapNotLoadedError,
    FleetMapTransportError,
)
from fleetmap.ingestion.positions import normalize_positions
from fleetmap.ingestion.states import resolve_states
from fleetmap.models import (
    DisplayName,
    Equipment,
    FleetDataset,
    NameSource,
    PositionHistoryRecord,
    PositionSample,
    StateDefinition,
    StateHistoryRecord,
    StateSample,
)
from fleetmap.state.index import TelemetryIndex
from fleetmap.state.selection import Selection

__all__ = [
    "__version__",
    "DisplayName",
    "Equipment",
    "FleetDataset",
    "FleetMapClient",
    "FleetMapConfig",
    "FleetMapConfigError",
    "FleetMapDatasetError",
    "FleetMapError",
    "FleetMapLoadError",
    "FleetMapNotLoadedError",
    "FleetMapTransportError",
    "NO_STATE_NAME",
    "NameSource",
    "PositionHistoryRecord",
    "PositionSample",
    "Selection",
    "StateDefinition",
    "StateHistoryRecord",
    "StateSample",
    "TelemetryIndex",
    "UNKNOWN_STATE_NAME",
    "normalize_positions",
    "resolve_states",
]
