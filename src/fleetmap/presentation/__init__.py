"""Presentation layer: view models for the fleet map."""

from fleetmap.presentation.view import (
    DEFAULT_LABELS,
    DetailPanel,
    HistoryEntryView,
    MapView,
    MapViewport,
    MarkerView,
    PopupRow,
    PopupView,
    ViewLabels,
    build_detail_panel,
    build_map_view,
    build_markers,
    build_popup,
    format_timestamp,
)

__all__ = [
    "DEFAULT_LABELS",
    "DetailPanel",
    "HistoryEntryView",
    "MapView",
    "MapViewport",
    "MarkerView",
    "PopupRow",
    "PopupView",
    "ViewLabels",
    "build_detail_panel",
    "build_map_view",
    "build_markers",
    "build_popup",
    "format_timestamp",
]
