"""State history resolution against the state catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fleetmap._constants import UNKNOWN_STATE_NAME
from fleetmap.models.equipment import StateDefinition
from fleetmap.models.records import StateHistoryRecord
from fleetmap.models.samples import StateSample

_logger = logging.getLogger(__name__)


def build_state_lookup(catalog: Iterable[StateDefinition]) -> dict[str, StateDefinition]:
    """Map state id to definition, keeping the first entry for a repeated id."""
    lookup: dict[str, StateDefinition] = {}
    for definition in catalog:
        if definition.id in lookup:
            _logger.warning("Duplicate state id %r in catalog; keeping the first entry", definition.id)
            continue
        lookup[definition.id] = definition
    return lookup


def resolve_states(
    records: Iterable[StateHistoryRecord | Mapping[str, Any]],
    catalog: Iterable[StateDefinition] | Mapping[str, StateDefinition],
) -> tuple[StateSample, ...]:
    """Flatten per-equipment state records into named state samples.

    Every entry yields exactly one sample.  A state id with no catalog
    match gets :data:`~fleetmap._constants.UNKNOWN_STATE_NAME` and
    ``resolved=False``.
    """
    lookup = catalog if isinstance(catalog, Mapping) else build_state_lookup(catalog)

    samples: list[StateSample] = []
    unresolved = 0
    for record in records:
        if not isinstance(record, StateHistoryRecord):
            record = StateHistoryRecord.model_validate(record)
        for entry in record.states:
            definition = lookup.get(entry.equipment_state_id) if entry.equipment_state_id is not None else None
            if definition is None:
                unresolved += 1
            samples.append(
                StateSample(
                    equipment_id=record.equipment_id,
                    state_name=definition.name if definition is not None else UNKNOWN_STATE_NAME,
                    timestamp=entry.date,
                    state_id=entry.equipment_state_id,
                    resolved=definition is not None,
                )
            )

    if unresolved:
        _logger.debug("%d state entries reference unknown state ids", unresolved)
    return tuple(samples)
