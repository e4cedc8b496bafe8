"""Read-only telemetry index over normalized samples.

The index is built once per load from the normalizer/resolver output and
is never mutated afterwards.  Samples are grouped by equipment id at build
time and each group tracks its latest sample with a running maximum, so
every query is a dict lookup.

"Latest" means the maximum timestamp; on equal timestamps the sample that
came first in input order wins.  Samples without a timestamp rank below
every timestamped sample.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime

from fleetmap._constants import NO_STATE_NAME
from fleetmap.ingestion.positions import normalize_positions
from fleetmap.ingestion.states import build_state_lookup, resolve_states
from fleetmap.models.equipment import Equipment, StateDefinition
from fleetmap.models.records import FleetDataset
from fleetmap.models.samples import DisplayName, NameSource, PositionSample, StateSample

_logger = logging.getLogger(__name__)


def is_newer(candidate: datetime | None, current: datetime | None) -> bool:
    """Whether *candidate* strictly outranks *current*.

    Strict comparison keeps the earlier sample on ties.  An undated sample
    never outranks anything and any dated sample outranks an undated one.
    A plain comparison that treats an unparseable date as never greater
    would let an undated first sample hold the latest slot forever; here
    undated samples always rank below dated ones instead.
    """
    if candidate is None:
        return False
    if current is None:
        return True
    return candidate > current


@dataclass(slots=True)
class _Group:
    """Per-equipment samples collected during build."""

    positions: list[PositionSample] = field(default_factory=list)
    states: list[StateSample] = field(default_factory=list)
    latest_position: PositionSample | None = None
    latest_state: StateSample | None = None

    def add_position(self, sample: PositionSample) -> None:
        self.positions.append(sample)
        if self.latest_position is None or is_newer(sample.timestamp, self.latest_position.timestamp):
            self.latest_position = sample

    def add_state(self, sample: StateSample) -> None:
        self.states.append(sample)
        if self.latest_state is None or is_newer(sample.timestamp, self.latest_state.timestamp):
            self.latest_state = sample


@dataclass(frozen=True, slots=True)
class EquipmentTelemetry:
    """Immutable view of one equipment's samples."""

    positions: tuple[PositionSample, ...] = ()
    states: tuple[StateSample, ...] = ()
    latest_position: PositionSample | None = None
    latest_state: StateSample | None = None


_EMPTY = EquipmentTelemetry()


class TelemetryIndex:
    """Query engine over one load cycle's telemetry.

    Usage::

        index = TelemetryIndex.build(positions, states, equipment, catalog)
        for equipment_id in index.ordered_equipment_ids():
            index.latest_position(equipment_id)
    """

    def __init__(
        self,
        groups: dict[str, EquipmentTelemetry],
        *,
        equipment: dict[str, Equipment],
        catalog: dict[str, StateDefinition],
        position_order: tuple[str, ...],
    ) -> None:
        self._groups = groups
        self._equipment = equipment
        self._catalog = catalog
        self._position_order = position_order
        self._known_ids = frozenset(position_order)

    @classmethod
    def build(
        cls,
        positions: Iterable[PositionSample],
        states: Iterable[StateSample],
        equipment: Iterable[Equipment] = (),
        catalog: Iterable[StateDefinition] = (),
    ) -> TelemetryIndex:
        """Group samples by equipment id and freeze them into an index."""
        groups: dict[str, _Group] = {}
        position_order: dict[str, None] = {}

        position_count = 0
        for sample in positions:
            groups.setdefault(sample.equipment_id, _Group()).add_position(sample)
            position_order.setdefault(sample.equipment_id, None)
            position_count += 1

        state_count = 0
        for state in states:
            groups.setdefault(state.equipment_id, _Group()).add_state(state)
            state_count += 1

        # First occurrence wins for repeated ids, as in the state resolver.
        equipment_by_id: dict[str, Equipment] = {}
        for item in equipment:
            equipment_by_id.setdefault(item.id, item)
        catalog_by_id: dict[str, StateDefinition] = {}
        for definition in catalog:
            catalog_by_id.setdefault(definition.id, definition)

        frozen = {
            equipment_id: EquipmentTelemetry(
                positions=tuple(group.positions),
                states=tuple(group.states),
                latest_position=group.latest_position,
                latest_state=group.latest_state,
            )
            for equipment_id, group in groups.items()
        }
        _logger.debug(
            "Indexed %d position and %d state samples across %d equipment",
            position_count,
            state_count,
            len(frozen),
        )
        return cls(
            frozen,
            equipment=equipment_by_id,
            catalog=catalog_by_id,
            position_order=tuple(position_order),
        )

    @classmethod
    def from_dataset(cls, dataset: FleetDataset) -> TelemetryIndex:
        """Normalize, resolve and index a fetched dataset in one step."""
        lookup = build_state_lookup(dataset.state_catalog)
        return cls.build(
            normalize_positions(dataset.positions),
            resolve_states(dataset.state_history, lookup),
            dataset.equipment,
            lookup.values(),
        )

    def _group(self, equipment_id: str) -> EquipmentTelemetry:
        return self._groups.get(equipment_id, _EMPTY)

    # ------------------------------------------------------------------
    # Core queries
    # ------------------------------------------------------------------

    def latest_position(self, equipment_id: str) -> PositionSample | None:
        """Most recent position, or ``None`` when the equipment has none."""
        return self._group(equipment_id).latest_position

    def latest_state(self, equipment_id: str) -> str:
        """Name of the most recent state, or :data:`NO_STATE_NAME`."""
        sample = self._group(equipment_id).latest_state
        return sample.state_name if sample is not None else NO_STATE_NAME

    def state_history(self, equipment_id: str) -> tuple[StateSample, ...]:
        """All state samples in resolver order (not sorted by time)."""
        return self._group(equipment_id).states

    def known_equipment_ids(self) -> frozenset[str]:
        """Equipment ids with at least one valid position."""
        return self._known_ids

    def display_name(self, equipment_id: str) -> DisplayName:
        """Equipment name, falling back to the raw id.

        An equipment entry with an empty name also falls back.
        """
        item = self._equipment.get(equipment_id)
        if item is not None and item.name:
            return DisplayName(text=item.name, source=NameSource.RESOLVED)
        return DisplayName(text=equipment_id, source=NameSource.FALLBACK)

    # ------------------------------------------------------------------
    # Supplementary queries
    # ------------------------------------------------------------------

    def latest_state_sample(self, equipment_id: str) -> StateSample | None:
        return self._group(equipment_id).latest_state

    def position_history(self, equipment_id: str) -> tuple[PositionSample, ...]:
        return self._group(equipment_id).positions

    def equipment(self, equipment_id: str) -> Equipment | None:
        return self._equipment.get(equipment_id)

    def state_definition(self, state_id: str) -> StateDefinition | None:
        return self._catalog.get(state_id)

    def state_color(self, equipment_id: str) -> str | None:
        """Catalog color of the latest state, if it resolved and has one."""
        sample = self._group(equipment_id).latest_state
        if sample is None or not sample.resolved or sample.state_id is None:
            return None
        definition = self._catalog.get(sample.state_id)
        if definition is None or not definition.color:
            return None
        return definition.color

    def ordered_equipment_ids(self) -> tuple[str, ...]:
        """Known equipment ids in order of their first position sample."""
        return self._position_order

    def __len__(self) -> int:
        return len(self._known_ids)

    def __contains__(self, equipment_id: object) -> bool:
        return equipment_id in self._known_ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._position_order)
