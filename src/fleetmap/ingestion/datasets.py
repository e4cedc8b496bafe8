"""Dataset ingestion + parsing.

Fetches the four dataset resources through a :class:`DatasetTransport`
and parses them into typed records.  A resource whose top-level payload
is not a JSON array fails the whole load; individual records that cannot
be parsed are skipped.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fleetmap._transport import DatasetTransport
from fleetmap.config import FleetMapConfig
from fleetmap.exceptions import FleetMapDatasetError
from fleetmap.ingestion.normalize import truncate_for_log
from fleetmap.models.equipment import Equipment, StateDefinition
from fleetmap.models.records import FleetDataset, PositionHistoryRecord, StateHistoryRecord

_logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


def parse_collection(payload: Any, model: type[TModel], *, resource: str) -> tuple[TModel, ...]:
    """Validate every record of a top-level JSON array against *model*."""
    if not isinstance(payload, list):
        raise FleetMapDatasetError(
            f"{resource} must be a JSON array, got {type(payload).__name__}",
            resource=resource,
        )

    parsed: list[TModel] = []
    for position, item in enumerate(payload):
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as exc:
            _logger.warning(
                "Skipping record %d of %s: %s (%s)",
                position,
                resource,
                exc.errors(include_url=False)[0]["msg"],
                truncate_for_log(item),
            )
    return tuple(parsed)


async def fetch_equipment(transport: DatasetTransport, resource: str) -> tuple[Equipment, ...]:
    return parse_collection(await transport.fetch_json(resource), Equipment, resource=resource)


async def fetch_position_history(transport: DatasetTransport, resource: str) -> tuple[PositionHistoryRecord, ...]:
    return parse_collection(await transport.fetch_json(resource), PositionHistoryRecord, resource=resource)


async def fetch_state_catalog(transport: DatasetTransport, resource: str) -> tuple[StateDefinition, ...]:
    return parse_collection(await transport.fetch_json(resource), StateDefinition, resource=resource)


async def fetch_state_history(transport: DatasetTransport, resource: str) -> tuple[StateHistoryRecord, ...]:
    return parse_collection(await transport.fetch_json(resource), StateHistoryRecord, resource=resource)


async def fetch_dataset(config: FleetMapConfig, transport: DatasetTransport) -> FleetDataset:
    """Fetch all four resources concurrently and bundle them.

    Raises the first :class:`~fleetmap.exceptions.FleetMapTransportError`
    or :class:`~fleetmap.exceptions.FleetMapDatasetError` encountered; the
    remaining fetches are cancelled.
    """
    tasks = [
        asyncio.ensure_future(fetch_equipment(transport, config.equipment_path)),
        asyncio.ensure_future(fetch_position_history(transport, config.positions_path)),
        asyncio.ensure_future(fetch_state_catalog(transport, config.state_catalog_path)),
        asyncio.ensure_future(fetch_state_history(transport, config.state_history_path)),
    ]
    try:
        equipment, positions, catalog, history = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise

    return FleetDataset(
        equipment=equipment,
        positions=positions,
        state_catalog=catalog,
        state_history=history,
        fetched_at=datetime.now(UTC),
    )
