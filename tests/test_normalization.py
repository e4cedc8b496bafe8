from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from fleetmap._constants import UNKNOWN_STATE_NAME
from fleetmap.ingestion.normalize import parse_iso_timestamp, safe_float, safe_str, truncate_for_log
from fleetmap.ingestion.positions import normalize_positions
from fleetmap.ingestion.states import build_state_lookup, resolve_states
from fleetmap.models.equipment import StateDefinition
from fleetmap.models.records import PositionHistoryRecord, StateHistoryRecord


def _catalog() -> list[StateDefinition]:
    return [
        StateDefinition(id="S1", name="Operando", color="#2ecc71"),
        StateDefinition(id="S2", name="Parado", color="#f1c40f"),
        StateDefinition(id="S3", name="Manutenção", color="#e74c3c"),
    ]


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (10, 10.0),
        ("-22.5", -22.5),
        (None, None),
        ("", None),
        ("abc", None),
        (float("nan"), None),
        (float("inf"), None),
        (float("-inf"), None),
        (True, None),
        ([1], None),
    ],
)
def test_safe_float(value, expected) -> None:
    assert safe_float(value) == expected


def test_safe_str_strips_and_rejects_blank() -> None:
    assert safe_str(" E1 ") == "E1"
    assert safe_str(42) == "42"
    assert safe_str("   ") is None
    assert safe_str(None) is None


def test_parse_iso_timestamp_accepts_z_suffix() -> None:
    assert parse_iso_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=UTC)


def test_parse_iso_timestamp_converts_offsets_to_utc() -> None:
    parsed = parse_iso_timestamp("2024-01-01T03:00:00+03:00")
    assert parsed == datetime(2024, 1, 1, tzinfo=UTC)
    assert parsed is not None and parsed.utcoffset() == timedelta(0)


def test_parse_iso_timestamp_naive_is_utc() -> None:
    assert parse_iso_timestamp("2024-01-01T12:30:00") == datetime(2024, 1, 1, 12, 30, tzinfo=UTC)


def test_parse_iso_timestamp_keeps_aware_datetime() -> None:
    value = datetime(2024, 1, 1, 1, tzinfo=timezone(timedelta(hours=1)))
    assert parse_iso_timestamp(value) == datetime(2024, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize("value", [None, "", "not a date", 1704067200, {"date": "x"}])
def test_parse_iso_timestamp_rejects_garbage(value) -> None:
    assert parse_iso_timestamp(value) is None


def test_truncate_for_log_shortens_long_values() -> None:
    text = truncate_for_log("x" * 1000, max_string=20)
    assert text.endswith("<truncated>")
    assert len(text) < 40


# ------------------------------------------------------------------
# Position normalizer
# ------------------------------------------------------------------


class TestNormalizePositions:
    def test_flattens_in_input_order(self) -> None:
        samples = normalize_positions(
            [
                {
                    "equipmentId": "E1",
                    "positions": [
                        {"date": "2024-01-01T00:00:00Z", "lat": 10, "lon": 20},
                        {"date": "2024-01-02T00:00:00Z", "lat": 11, "lon": 21},
                    ],
                },
                {"equipmentId": "E2", "positions": [{"date": "2024-01-01T00:00:00Z", "lat": -5.5, "lon": 7}]},
            ]
        )

        assert [(s.equipment_id, s.latitude, s.longitude) for s in samples] == [
            ("E1", 10.0, 20.0),
            ("E1", 11.0, 21.0),
            ("E2", -5.5, 7.0),
        ]
        assert samples[1].timestamp == datetime(2024, 1, 2, tzinfo=UTC)

    def test_drops_missing_and_non_finite_coordinates(self) -> None:
        samples = normalize_positions(
            [
                {
                    "equipmentId": "E5",
                    "positions": [
                        {"date": "2024-01-01T00:00:00Z", "lat": float("nan"), "lon": 20},
                        {"date": "2024-01-01T00:00:00Z", "lat": 10, "lon": float("inf")},
                        {"date": "2024-01-01T00:00:00Z", "lon": 20},
                        {"date": "2024-01-01T00:00:00Z", "lat": 10},
                        {"date": "2024-01-01T00:00:00Z", "lat": "north", "lon": 20},
                        {"date": "2024-01-01T00:00:00Z", "lat": None, "lon": None},
                    ],
                }
            ]
        )

        assert samples == ()

    def test_valid_entries_appear_exactly_once(self) -> None:
        samples = normalize_positions(
            [
                {
                    "equipmentId": "E1",
                    "positions": [
                        {"date": "2024-01-01T00:00:00Z", "lat": float("nan"), "lon": 20},
                        {"date": "2024-01-01T00:00:00Z", "lat": 1, "lon": 2},
                        {"date": "2024-01-01T00:00:00Z", "lat": 1, "lon": 2},
                    ],
                }
            ]
        )

        assert len(samples) == 2
        assert all(math.isfinite(s.latitude) and math.isfinite(s.longitude) for s in samples)

    def test_numeric_strings_are_accepted(self) -> None:
        samples = normalize_positions([{"equipmentId": "E1", "positions": [{"date": "", "lat": "-22.9", "lon": "-43.2"}]}])

        assert samples[0].latitude == pytest.approx(-22.9)
        assert samples[0].timestamp is None

    def test_non_object_entries_and_bad_position_lists_are_ignored(self) -> None:
        samples = normalize_positions(
            [
                {"equipmentId": "E1", "positions": ["junk", 3, {"date": "2024-01-01T00:00:00Z", "lat": 1, "lon": 1}]},
                {"equipmentId": "E2", "positions": "not-a-list"},
                {"equipmentId": "E3"},
            ]
        )

        assert [s.equipment_id for s in samples] == ["E1"]

    def test_accepts_parsed_records(self) -> None:
        record = PositionHistoryRecord.model_validate(
            {"equipmentId": "E1", "positions": [{"date": "2024-01-01T00:00:00Z", "lat": 1, "lon": 2}]}
        )

        assert normalize_positions([record])[0].equipment_id == "E1"


# ------------------------------------------------------------------
# State resolver
# ------------------------------------------------------------------


class TestResolveStates:
    def test_resolves_names_from_catalog(self) -> None:
        samples = resolve_states(
            [
                {
                    "equipmentId": "E1",
                    "states": [
                        {"date": "2024-01-01T00:00:00Z", "equipmentStateId": "S1"},
                        {"date": "2024-01-01T08:00:00Z", "equipmentStateId": "S2"},
                    ],
                }
            ],
            _catalog(),
        )

        assert [s.state_name for s in samples] == ["Operando", "Parado"]
        assert all(s.resolved for s in samples)
        assert samples[0].state_id == "S1"

    def test_unknown_state_id_gets_sentinel(self) -> None:
        samples = resolve_states(
            [{"equipmentId": "E2", "states": [{"date": "2024-01-01T00:00:00Z", "equipmentStateId": "S9"}]}],
            _catalog(),
        )

        assert len(samples) == 1
        assert samples[0].state_name == UNKNOWN_STATE_NAME
        assert samples[0].resolved is False
        assert samples[0].state_id == "S9"

    def test_entries_are_never_dropped(self) -> None:
        samples = resolve_states(
            [
                {
                    "equipmentId": "E1",
                    "states": [
                        {"date": "garbage", "equipmentStateId": "S1"},
                        {"date": "2024-01-01T00:00:00Z"},
                        "not-an-object",
                        {},
                    ],
                }
            ],
            _catalog(),
        )

        assert len(samples) == 4
        assert samples[0].state_name == "Operando"
        assert samples[0].timestamp is None
        assert [s.state_name for s in samples[1:]] == [UNKNOWN_STATE_NAME] * 3

    def test_empty_catalog_resolves_everything_to_unknown(self) -> None:
        samples = resolve_states(
            [{"equipmentId": "E1", "states": [{"date": "2024-01-01T00:00:00Z", "equipmentStateId": "S1"}]}],
            [],
        )

        assert samples[0].state_name == UNKNOWN_STATE_NAME

    def test_duplicate_catalog_ids_first_match_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        catalog = [
            StateDefinition(id="S1", name="First", color="#000"),
            StateDefinition(id="S1", name="Second", color="#fff"),
        ]

        with caplog.at_level("WARNING", logger="fleetmap.ingestion.states"):
            lookup = build_state_lookup(catalog)
        samples = resolve_states(
            [{"equipmentId": "E1", "states": [{"date": "2024-01-01T00:00:00Z", "equipmentStateId": "S1"}]}],
            catalog,
        )

        assert lookup["S1"].name == "First"
        assert samples[0].state_name == "First"
        assert "Duplicate state id" in caplog.text

    def test_numeric_state_ids_match_string_catalog_ids(self) -> None:
        catalog = [StateDefinition.model_validate({"id": 7, "name": "Operando", "color": "#0f0"})]
        samples = resolve_states(
            [StateHistoryRecord.model_validate({"equipmentId": "E1", "states": [{"date": None, "equipmentStateId": 7}]})],
            catalog,
        )

        assert samples[0].state_name == "Operando"
