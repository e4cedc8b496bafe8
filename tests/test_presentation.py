"""Tests for map view models and selection handling."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from fleetmap._constants import NO_STATE_NAME, UNKNOWN_STATE_NAME
from fleetmap.config import FleetMapConfig
from fleetmap.exceptions import FleetMapLoadError
from fleetmap.ingestion.positions import normalize_positions
from fleetmap.ingestion.states import resolve_states
from fleetmap.models.equipment import Equipment, StateDefinition
from fleetmap.models.samples import NameSource
from fleetmap.presentation import (
    MapView,
    MapViewport,
    ViewLabels,
    build_detail_panel,
    build_map_view,
    build_markers,
    build_popup,
    format_timestamp,
)
from fleetmap.state.index import TelemetryIndex
from fleetmap.state.selection import Selection

CATALOG = [
    StateDefinition(id="S1", name="Operando", color="#2ecc71"),
    StateDefinition(id="S2", name="Parado", color="#f1c40f"),
]


@pytest.fixture
def index() -> TelemetryIndex:
    positions = normalize_positions(
        [
            {
                "equipmentId": "E1",
                "positions": [
                    {"date": "2024-01-01T00:00:00Z", "lat": 10, "lon": 20},
                    {"date": "2024-01-02T00:00:00Z", "lat": 11, "lon": 21},
                ],
            },
            {"equipmentId": "E7", "positions": [{"date": "2024-01-03T12:00:00Z", "lat": -22.9, "lon": -43.2}]},
        ]
    )
    states = resolve_states(
        [
            {
                "equipmentId": "E1",
                "states": [
                    {"date": "2024-01-02T00:00:00Z", "equipmentStateId": "S2"},
                    {"date": "2024-01-01T00:00:00Z", "equipmentStateId": "S1"},
                    {"date": "2024-01-01T06:00:00Z", "equipmentStateId": "S9"},
                ],
            },
            {"equipmentId": "E3", "states": [{"date": "2024-01-01T00:00:00Z", "equipmentStateId": "S1"}]},
        ],
        CATALOG,
    )
    equipment = [
        Equipment(id="E1", name="Caminhão 01", model_id="M1"),
        Equipment(id="E3", name="Guindaste 03", model_id="M2"),
    ]
    return TelemetryIndex.build(positions, states, equipment, CATALOG)


def test_format_timestamp() -> None:
    value = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    assert format_timestamp(value) == "02/01/2024 03:04:05"
    assert format_timestamp(value, timezone(timedelta(hours=-3))) == "02/01/2024 00:04:05"
    assert format_timestamp(None) == "-"


class TestMarkers:
    def test_one_marker_per_known_equipment(self, index: TelemetryIndex) -> None:
        markers = build_markers(index)

        assert [m.equipment_id for m in markers] == ["E1", "E7"]

    def test_marker_content(self, index: TelemetryIndex) -> None:
        marker = build_markers(index)[0]

        assert (marker.latitude, marker.longitude) == (11.0, 21.0)
        assert marker.name == "Caminhão 01"
        assert marker.name_source == NameSource.RESOLVED
        assert marker.state == "Parado"
        assert marker.state_color == "#f1c40f"
        assert marker.last_update == datetime(2024, 1, 2, tzinfo=UTC)
        assert marker.tooltip == "Caminhão 01 - Estado: Parado"

    def test_marker_without_metadata_or_state(self, index: TelemetryIndex) -> None:
        marker = build_markers(index)[1]

        assert marker.name == "E7"
        assert marker.name_source == NameSource.FALLBACK
        assert marker.state == NO_STATE_NAME
        assert marker.state_color is None

    def test_custom_labels(self, index: TelemetryIndex) -> None:
        marker = build_markers(index, labels=ViewLabels(state="State"))[0]

        assert marker.tooltip == "Caminhão 01 - State: Parado"

    def test_popup_rows(self, index: TelemetryIndex) -> None:
        popup = build_popup(build_markers(index)[0])

        assert [(row.label, row.value) for row in popup.rows] == [
            ("Nome", "Caminhão 01"),
            ("ID", "E1"),
            ("Último Estado", "Parado"),
            ("Última Atualização", "02/01/2024 00:00:00"),
        ]
        assert popup.action_label == "Ver histórico"


class TestDetailPanel:
    def test_no_panel_without_selection(self, index: TelemetryIndex) -> None:
        assert build_detail_panel(index, Selection.none()) is None

    def test_panel_keeps_history_order(self, index: TelemetryIndex) -> None:
        panel = build_detail_panel(index, Selection.none().select("E1"))

        assert panel is not None
        assert panel.title == "Histórico de Estados - Caminhão 01"
        assert [entry.text for entry in panel.entries] == [
            "02/01/2024 00:00:00 - Estado: Parado",
            "01/01/2024 00:00:00 - Estado: Operando",
            f"01/01/2024 06:00:00 - Estado: {UNKNOWN_STATE_NAME}",
        ]
        assert panel.close_label == "Fechar"

    def test_panel_for_equipment_without_position(self, index: TelemetryIndex) -> None:
        panel = build_detail_panel(index, Selection(equipment_id="E3"))

        assert panel is not None
        assert panel.title.endswith("Guindaste 03")
        assert len(panel.entries) == 1

    def test_panel_for_unknown_equipment(self, index: TelemetryIndex) -> None:
        panel = build_detail_panel(index, Selection(equipment_id="E404"))

        assert panel is not None
        assert panel.title == "Histórico de Estados - E404"
        assert panel.entries == ()


class TestSelection:
    def test_select_and_clear_return_new_values(self) -> None:
        empty = Selection.none()
        selected = empty.select("E1")
        cleared = selected.clear()

        assert empty.equipment_id is None
        assert selected.equipment_id == "E1"
        assert selected.is_active
        assert cleared.equipment_id is None
        assert not cleared.is_active

    def test_select_replaces_previous(self) -> None:
        assert Selection.none().select("E1").select("E2").equipment_id == "E2"

    def test_blank_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Selection(equipment_id="  ")

    def test_frozen(self) -> None:
        selection = Selection.none()
        with pytest.raises(ValidationError):
            selection.equipment_id = "E1"  # type: ignore[misc]


class TestMapView:
    def test_build_map_view(self, index: TelemetryIndex) -> None:
        viewport = MapViewport.from_config(FleetMapConfig(base_url="https://example.org"))

        view = build_map_view(index, Selection.none().select("E1"), viewport)

        assert view.viewport.center_lat == -22.9
        assert view.viewport.zoom == 5
        assert len(view.markers) == 2
        assert view.panel is not None
        assert not view.load_failed

    def test_failed_view(self) -> None:
        viewport = MapViewport(center_lat=0.0, center_lon=0.0, zoom=2)

        view = MapView.failed(FleetMapLoadError("Dataset load failed: HTTP 503"), viewport)

        assert view.load_failed
        assert view.error == "Dataset load failed: HTTP 503"
        assert view.markers == ()
        assert view.panel is None
