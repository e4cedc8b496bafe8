"""Custom exception hierarchy for fleetmap."""

from __future__ import annotations


class FleetMapError(Exception):
    """Base exception for all fleetmap errors."""


class FleetMapConfigError(FleetMapError):
    """Invalid or missing configuration."""


class FleetMapTransportError(FleetMapError):
    """Dataset fetch failure (network, non-200, missing file, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        resource: str = "",
    ) -> None:
        self.status_code = status_code
        self.resource = resource
        super().__init__(message)


class FleetMapDatasetError(FleetMapError):
    """A dataset payload does not have the expected top-level shape."""

    def __init__(self, message: str, *, resource: str = "") -> None:
        self.resource = resource
        super().__init__(message)


class FleetMapLoadError(FleetMapError):
    """A load cycle failed and no index was built from it.

    Always chained from the underlying :class:`FleetMapTransportError` or
    :class:`FleetMapDatasetError`.  Any index built by an earlier
    successful load is left in place.
    """

    def __init__(self, message: str, *, resource: str = "") -> None:
        self.resource = resource
        super().__init__(message)


class FleetMapNotLoadedError(FleetMapError):
    """The telemetry index was requested before any successful load."""
