"""Client configuration for fleetmap."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from fleetmap._constants import (
    DEFAULT_EQUIPMENT_PATH,
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_ZOOM,
    DEFAULT_POSITIONS_PATH,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_STATE_CATALOG_PATH,
    DEFAULT_STATE_HISTORY_PATH,
)
from fleetmap.exceptions import FleetMapConfigError


def _parse_center(value: str) -> tuple[float, float]:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 2:
        raise FleetMapConfigError(f"map center must be 'lat,lon', got {value!r}")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise FleetMapConfigError(f"map center must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FleetMapConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str or None
        HTTP location the four dataset resources are served from
        (e.g. ``"https://example.org/data"``).
    data_dir : Path or None
        Local directory holding the four dataset files.  Exactly one of
        ``base_url`` and ``data_dir`` must be set.
    equipment_path : str
        Resource name of the equipment list.
    positions_path : str
        Resource name of the position history.
    state_catalog_path : str
        Resource name of the state catalog.
    state_history_path : str
        Resource name of the state history.
    request_timeout : float
        Total timeout in seconds for each HTTP fetch.
    map_center : tuple of float
        Initial map center as ``(latitude, longitude)``.
    map_zoom : int
        Initial map zoom level.
    """

    base_url: str | None = None
    data_dir: Path | None = None
    equipment_path: str = DEFAULT_EQUIPMENT_PATH
    positions_path: str = DEFAULT_POSITIONS_PATH
    state_catalog_path: str = DEFAULT_STATE_CATALOG_PATH
    state_history_path: str = DEFAULT_STATE_HISTORY_PATH
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    map_center: tuple[float, float] = DEFAULT_MAP_CENTER
    map_zoom: int = DEFAULT_MAP_ZOOM

    def __post_init__(self) -> None:
        if self.base_url is None and self.data_dir is None:
            raise FleetMapConfigError("either base_url or data_dir must be set")
        if self.base_url is not None and self.data_dir is not None:
            raise FleetMapConfigError("base_url and data_dir are mutually exclusive")
        if self.data_dir is not None and not isinstance(self.data_dir, Path):
            object.__setattr__(self, "data_dir", Path(self.data_dir))
        if self.base_url is not None:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.request_timeout <= 0:
            raise FleetMapConfigError("request_timeout must be > 0")

    @property
    def resource_paths(self) -> dict[str, str]:
        """Mapping of dataset name to configured resource path."""
        return {
            "equipment": self.equipment_path,
            "positions": self.positions_path,
            "state_catalog": self.state_catalog_path,
            "state_history": self.state_history_path,
        }

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetMapConfig:
        """Create configuration from environment variables.

        Reads ``FLEETMAP_BASE_URL`` or ``FLEETMAP_DATA_DIR`` plus the
        optional ``FLEETMAP_*`` variables.  Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetMapConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETMAP_BASE_URL": "base_url",
            "FLEETMAP_EQUIPMENT_PATH": "equipment_path",
            "FLEETMAP_POSITIONS_PATH": "positions_path",
            "FLEETMAP_STATE_CATALOG_PATH": "state_catalog_path",
            "FLEETMAP_STATE_HISTORY_PATH": "state_history_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        data_dir_env = env.get("FLEETMAP_DATA_DIR")
        if data_dir_env is not None:
            config_kwargs["data_dir"] = Path(data_dir_env)

        # An explicit source in the overrides replaces both env sources.
        if "base_url" in overrides or "data_dir" in overrides:
            config_kwargs.pop("base_url", None)
            config_kwargs.pop("data_dir", None)

        timeout_env = env.get("FLEETMAP_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        center_env = env.get("FLEETMAP_MAP_CENTER")
        if center_env is not None and "map_center" not in overrides:
            config_kwargs["map_center"] = _parse_center(center_env)

        zoom_env = env.get("FLEETMAP_MAP_ZOOM")
        if zoom_env is not None and "map_zoom" not in overrides:
            config_kwargs["map_zoom"] = int(zoom_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
