#!/usr/bin/env python3
"""Replay recorded vehicle updates against a fleet snapshot.

Loads a fleet (the bundled demo fleet, or a JSON file holding a vehicle
list), feeds it a file of update payloads (one JSON object per line), and
prints the derived dashboard views after the replay. Useful for checking
how a captured push stream reconciles without a backend.

Usage
-----
::

    python scripts/replay_updates.py updates.jsonl
    python scripts/replay_updates.py updates.jsonl --fleet fleet.json --json
    echo '{"id": "VH-002", "speed": 40}' | python scripts/replay_updates.py -

Options::

    --fleet FILE      Vehicle list to load (default: bundled demo fleet)
    --search QUERY    Also print vehicles matching QUERY
    --json            Output machine-readable JSON
    --verbose, -v     Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleettrack import (  # noqa: E402
    FleetStore,
    FleetValidationError,
    UpdateIngest,
    count_by_status,
    filter_by_search,
    fleet_summary,
    fuel_histogram,
    speed_histogram,
)
from fleettrack.demo import demo_vehicle_records  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _read_updates(source: str) -> list[str]:
    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    return [line for line in text.splitlines() if line.strip()]


def _read_fleet(path: str | None) -> list[Any]:
    if path is None:
        return demo_vehicle_records()
    decoded = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(decoded, dict):
        decoded = decoded.get("vehicles") or decoded.get("data") or []
    return decoded if isinstance(decoded, list) else []


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay vehicle update payloads against a fleet snapshot.")
    parser.add_argument("updates", help="File with one JSON update per line ('-' for stdin)")
    parser.add_argument("--fleet", help="JSON vehicle list to load (default: bundled demo fleet)")
    parser.add_argument("--search", help="Also list vehicles matching this query")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    store = FleetStore()
    ingest = UpdateIngest(store)
    try:
        ingest.load(_read_fleet(args.fleet))
    except FleetValidationError as exc:
        print(f"Fleet load failed: {exc}", file=sys.stderr)
        return 1

    applied = 0
    dropped: list[dict[str, str]] = []
    for lineno, line in enumerate(_read_updates(args.updates), start=1):
        result = ingest.ingest(line)
        if result.ok:
            applied += 1
        else:
            dropped.append({"line": str(lineno), "error": type(result.error).__name__, "detail": str(result.error)})

    vehicles = store.list_vehicles()
    summary = fleet_summary(vehicles)
    report: dict[str, Any] = {
        "applied": applied,
        "dropped": dropped,
        "summary": {
            "total": summary.total,
            "active": summary.active,
            "idle": summary.idle,
            "alert": summary.alert,
            "average_fuel_level": summary.average_fuel_level,
        },
        "status": {status.value: count for status, count in count_by_status(vehicles).items()},
        "fuel": dict(fuel_histogram(vehicles)),
        "speed": dict(speed_histogram(vehicles)),
        "vehicles": [vehicle.to_api() for vehicle in vehicles],
    }
    if args.search is not None:
        report["search"] = [vehicle.id for vehicle in filter_by_search(vehicles, args.search)]

    if args.json_mode:
        print(json.dumps(report, indent=2, ensure_ascii=False))
        return 0

    out: list[str] = [_section("replay")]
    out.append(f"  applied   : {applied}")
    out.append(f"  dropped   : {len(dropped)}")
    for entry in dropped:
        out.append(f"    line {entry['line']}: {entry['error']} {entry['detail']}")
    out.append(_section("status"))
    out.extend(f"  {name:<12}: {count}" for name, count in report["status"].items())
    out.append(_section("fuel"))
    out.extend(f"  {name:<12}: {count}" for name, count in report["fuel"].items())
    out.append(_section("speed"))
    out.extend(f"  {name:<12}: {count}" for name, count in report["speed"].items())
    out.append(_section("vehicles"))
    for vehicle in vehicles:
        out.append(
            f"  {vehicle.id:<8} {vehicle.kind:<8} {vehicle.status.value:<7} "
            f"{vehicle.speed:>6.1f} km/h  fuel {vehicle.fuel_level:>5.1f}%  {vehicle.last_update_label}"
        )
    if args.search is not None:
        out.append(_section(f"search {args.search!r}"))
        out.append("  " + (", ".join(report["search"]) or "(no matches)"))
    print("\n".join(out))
    return 0


if __name__ == "__main__":
    sys.exit(main())
