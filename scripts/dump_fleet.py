#!/usr/bin/env python3
"""Dump the fleet map as fleetmap sees it.

This script loads the four dataset resources once, builds the telemetry
index, and prints one line per marker plus, optionally, the state
history of a single equipment.

Usage
-----
From a local directory::

    python scripts/dump_fleet.py --data-dir public/data

From an HTTP location::

    python scripts/dump_fleet.py --base-url https://example.org/data

Options::

    --equipment ID       Also print the state history panel for ID
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetmap import FleetMapClient, FleetMapConfig, FleetMapLoadError, Selection  # noqa: E402
from fleetmap.presentation import MapView, MapViewport, build_map_view, build_popup  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _render_text(view: MapView) -> list[str]:
    out: list[str] = []
    out.append(_section("MARKERS"))
    if not view.markers:
        out.append("  (no equipment with a known position)")
    for marker in view.markers:
        out.append(f"  {marker.tooltip}")
        for row in build_popup(marker).rows:
            out.append(f"      {row.label}: {row.value}")
        out.append(f"      @ {marker.latitude:.6f}, {marker.longitude:.6f}")

    if view.panel is not None:
        out.append(_section(view.panel.title))
        if not view.panel.entries:
            out.append("  (no state history)")
        for entry in view.panel.entries:
            out.append(f"  - {entry.text}")
    return out


# ── main ─────────────────────────────────────────────────────


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Load fleet datasets and dump markers / state history.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--data-dir", help="Directory holding the dataset JSON files")
    source.add_argument("--base-url", help="HTTP location serving the dataset JSON files")
    parser.add_argument("--equipment", help="Also dump the state history of this equipment id")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.data_dir:
        overrides["data_dir"] = Path(args.data_dir)
    if args.base_url:
        overrides["base_url"] = args.base_url
    config = FleetMapConfig.from_env(**overrides)

    viewport = MapViewport.from_config(config)
    selection = Selection.none()
    if args.equipment:
        selection = selection.select(args.equipment)

    fetched_at: datetime | None = None
    async with FleetMapClient(config) as client:
        try:
            index = await client.load()
        except FleetMapLoadError as exc:
            view = MapView.failed(exc, viewport)
        else:
            view = build_map_view(index, selection, viewport)
            if client.dataset is not None:
                fetched_at = client.dataset.fetched_at

    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "fetched_at": fetched_at.isoformat() if fetched_at else None,
        "view": view.model_dump(mode="json"),
    }

    if args.json_mode:
        payload = json.dumps(result, indent=2, ensure_ascii=False)
    elif view.load_failed:
        payload = f"Load failed: {view.error}"
    else:
        out = [
            _section("fleetmap dump_fleet"),
            f"  time      : {result['timestamp']}",
            f"  fetched   : {result['fetched_at'] or '-'}",
        ]
        out.extend(_render_text(view))
        payload = "\n".join(out)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)

    return 1 if view.load_failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
