"""High-level async client that loads fleet telemetry and serves the index."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from fleetmap._transport import DatasetTransport, FileDatasetTransport, HttpDatasetTransport
from fleetmap.config import FleetMapConfig
from fleetmap.exceptions import (
    FleetMapDatasetError,
    FleetMapLoadError,
    FleetMapNotLoadedError,
    FleetMapTransportError,
)
from fleetmap.ingestion.datasets import fetch_dataset
from fleetmap.models.records import FleetDataset
from fleetmap.state.index import TelemetryIndex

_logger = logging.getLogger(__name__)


class FleetMapClient:
    """Async client for the fleet telemetry datasets.

    Usage::

        async with FleetMapClient(config) as client:
            index = await client.load()
            index.latest_position("E1")

    Each :meth:`load` either replaces the current index with one built
    from a complete, freshly fetched dataset, or raises and leaves the
    current index untouched.
    """

    def __init__(
        self,
        config: FleetMapConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: DatasetTransport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        self._index: TelemetryIndex | None = None
        self._dataset: FleetDataset | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetMapClient:
        if self._transport is None:
            self._transport = self._build_transport()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    def _build_transport(self) -> DatasetTransport:
        if self._config.data_dir is not None:
            return FileDatasetTransport(self._config.data_dir)
        assert self._config.base_url is not None
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return HttpDatasetTransport(
            self._config.base_url,
            self._http_session,
            timeout=self._config.request_timeout,
        )

    def _require_transport(self) -> DatasetTransport:
        if self._transport is None:
            raise RuntimeError("Client not initialized. Use 'async with FleetMapClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> TelemetryIndex:
        """Fetch all datasets concurrently and rebuild the index.

        Raises
        ------
        FleetMapLoadError
            When any resource fails to fetch or has the wrong shape.
            The previously loaded index, if any, is kept.
        """
        transport = self._require_transport()
        try:
            dataset = await fetch_dataset(self._config, transport)
        except (FleetMapTransportError, FleetMapDatasetError) as exc:
            _logger.warning("Fleet dataset load failed: %s", exc)
            raise FleetMapLoadError(f"Dataset load failed: {exc}", resource=exc.resource) from exc

        index = TelemetryIndex.from_dataset(dataset)

        self._dataset = dataset
        self._index = index
        _logger.info(
            "Loaded %d equipment, %d with known position, %d catalog states (fetched at %s)",
            len(dataset.equipment),
            len(index),
            len(dataset.state_catalog),
            dataset.fetched_at.isoformat() if dataset.fetched_at else "-",
        )
        return index

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> FleetMapConfig:
        return self._config

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> TelemetryIndex:
        """Index from the last successful load."""
        if self._index is None:
            raise FleetMapNotLoadedError("No dataset has been loaded yet; call load() first")
        return self._index

    @property
    def dataset(self) -> FleetDataset | None:
        """Raw dataset from the last successful load."""
        return self._dataset
