"""Map view models built from telemetry index queries.

Nothing here renders markup.  The builders turn index query results into
plain frozen values that a mapping widget can place as markers, tooltips,
popups and a detail panel.
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

from pydantic import BaseModel, ConfigDict

from fleetmap.config import FleetMapConfig
from fleetmap.exceptions import FleetMapError
from fleetmap.models.samples import NameSource
from fleetmap.state.index import TelemetryIndex
from fleetmap.state.selection import Selection

_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
_MISSING_TIMESTAMP = "-"


def format_timestamp(value: datetime | None, tz: tzinfo | None = None) -> str:
    """Format a sample timestamp for display (``"-"`` when absent)."""
    if value is None:
        return _MISSING_TIMESTAMP
    return value.astimezone(tz or UTC).strftime(_TIMESTAMP_FORMAT)


class _View(BaseModel):
    model_config = ConfigDict(frozen=True)


class ViewLabels(_View):
    """User-facing label text."""

    state: str = "Estado"
    name: str = "Nome"
    identifier: str = "ID"
    last_state: str = "Último Estado"
    last_update: str = "Última Atualização"
    history_title: str = "Histórico de Estados"
    show_history: str = "Ver histórico"
    close: str = "Fechar"


DEFAULT_LABELS = ViewLabels()


class MapViewport(_View):
    center_lat: float
    center_lon: float
    zoom: int

    @classmethod
    def from_config(cls, config: FleetMapConfig) -> MapViewport:
        lat, lon = config.map_center
        return cls(center_lat=lat, center_lon=lon, zoom=config.map_zoom)


class MarkerView(_View):
    """One map marker for an equipment with a known position."""

    equipment_id: str
    name: str
    name_source: NameSource
    latitude: float
    longitude: float
    state: str
    state_color: str | None = None
    last_update: datetime | None = None
    tooltip: str


class PopupRow(_View):
    label: str
    value: str


class PopupView(_View):
    equipment_id: str
    rows: tuple[PopupRow, ...]
    action_label: str


class HistoryEntryView(_View):
    timestamp: datetime | None
    text: str


class DetailPanel(_View):
    """State history panel for the selected equipment."""

    equipment_id: str
    title: str
    entries: tuple[HistoryEntryView, ...]
    close_label: str


class MapView(_View):
    """Everything needed for one render, or the load failure that prevented it."""

    viewport: MapViewport
    markers: tuple[MarkerView, ...] = ()
    panel: DetailPanel | None = None
    error: str | None = None

    @property
    def load_failed(self) -> bool:
        return self.error is not None

    @classmethod
    def failed(cls, error: FleetMapError | str, viewport: MapViewport) -> MapView:
        return cls(viewport=viewport, error=str(error))


def build_markers(
    index: TelemetryIndex,
    *,
    labels: ViewLabels = DEFAULT_LABELS,
) -> tuple[MarkerView, ...]:
    markers: list[MarkerView] = []
    for equipment_id in index.ordered_equipment_ids():
        position = index.latest_position(equipment_id)
        if position is None:
            continue
        name = index.display_name(equipment_id)
        state = index.latest_state(equipment_id)
        markers.append(
            MarkerView(
                equipment_id=equipment_id,
                name=name.text,
                name_source=name.source,
                latitude=position.latitude,
                longitude=position.longitude,
                state=state,
                state_color=index.state_color(equipment_id),
                last_update=position.timestamp,
                tooltip=f"{name.text} - {labels.state}: {state}",
            )
        )
    return tuple(markers)


def build_popup(
    marker: MarkerView,
    *,
    labels: ViewLabels = DEFAULT_LABELS,
    tz: tzinfo | None = None,
) -> PopupView:
    return PopupView(
        equipment_id=marker.equipment_id,
        rows=(
            PopupRow(label=labels.name, value=marker.name),
            PopupRow(label=labels.identifier, value=marker.equipment_id),
            PopupRow(label=labels.last_state, value=marker.state),
            PopupRow(label=labels.last_update, value=format_timestamp(marker.last_update, tz)),
        ),
        action_label=labels.show_history,
    )


def build_detail_panel(
    index: TelemetryIndex,
    selection: Selection,
    *,
    labels: ViewLabels = DEFAULT_LABELS,
    tz: tzinfo | None = None,
) -> DetailPanel | None:
    """Build the history panel for the selection.

    Entries keep the order returned by ``state_history``.
    """
    equipment_id = selection.equipment_id
    if equipment_id is None:
        return None
    name = index.display_name(equipment_id)
    entries = tuple(
        HistoryEntryView(
            timestamp=sample.timestamp,
            text=f"{format_timestamp(sample.timestamp, tz)} - {labels.state}: {sample.state_name}",
        )
        for sample in index.state_history(equipment_id)
    )
    return DetailPanel(
        equipment_id=equipment_id,
        title=f"{labels.history_title} - {name.text}",
        entries=entries,
        close_label=labels.close,
    )


def build_map_view(
    index: TelemetryIndex,
    selection: Selection,
    viewport: MapViewport,
    *,
    labels: ViewLabels = DEFAULT_LABELS,
    tz: tzinfo | None = None,
) -> MapView:
    return MapView(
        viewport=viewport,
        markers=build_markers(index, labels=labels),
        panel=build_detail_panel(index, selection, labels=labels, tz=tz),
    )
