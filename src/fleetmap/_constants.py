"""Constants for the fleetmap library."""

from __future__ import annotations

#: State name used when a history entry references an id missing from the catalog.
UNKNOWN_STATE_NAME: str = "Desconhecido"

#: State name returned when an equipment has no state history at all.
NO_STATE_NAME: str = "Sem estado"

# Default resource names, relative to the configured base URL or data directory.
DEFAULT_EQUIPMENT_PATH: str = "equipment.json"
DEFAULT_POSITIONS_PATH: str = "equipmentPositionHistory.json"
DEFAULT_STATE_CATALOG_PATH: str = "equipmentState.json"
DEFAULT_STATE_HISTORY_PATH: str = "equipmentStateHistory.json"

DEFAULT_REQUEST_TIMEOUT: float = 30.0

DEFAULT_MAP_CENTER: tuple[float, float] = (-22.9, -43.2)
DEFAULT_MAP_ZOOM: int = 5

USER_AGENT: str = "fleetmap/1 (+aiohttp)"
