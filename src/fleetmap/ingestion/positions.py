"""Position history normalization."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fleetmap.models.records import PositionHistoryRecord
from fleetmap.models.samples import PositionSample

_logger = logging.getLogger(__name__)


def normalize_positions(
    records: Iterable[PositionHistoryRecord | Mapping[str, Any]],
) -> tuple[PositionSample, ...]:
    """Flatten per-equipment position records into valid samples.

    Output order is record order, then entry order within a record.
    Entries with a missing or non-finite latitude or longitude are
    excluded; nothing is raised for them.
    """
    samples: list[PositionSample] = []
    dropped = 0
    for record in records:
        if not isinstance(record, PositionHistoryRecord):
            record = PositionHistoryRecord.model_validate(record)
        for entry in record.positions:
            if not entry.has_valid_coordinates:
                dropped += 1
                continue
            samples.append(
                PositionSample(
                    equipment_id=record.equipment_id,
                    latitude=entry.lat,
                    longitude=entry.lon,
                    timestamp=entry.date,
                )
            )

    if dropped:
        _logger.debug("Dropped %d position entries with invalid coordinates", dropped)
    return tuple(samples)
