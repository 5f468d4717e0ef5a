#!/usr/bin/env python3
"""Run one synchronization pass against the power API and print the result.

Usage
-----
::

    export POWERDASH_API_BASE="http://localhost:8080"
    python scripts/dump_dashboard.py --device iot --metric volts

Options::

    --base-url URL      Override POWERDASH_API_BASE
    --device ID         Device identifier (default: iot)
    --metric NAME       Series metric (default: volts)
    --timeout SECONDS   Per-request timeout (default: none)
    --json              Output machine-readable JSON
    --verbose, -v       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pypowerdash import DashboardSnapshot, FilterState, Metric, PowerDashboard, PowerDashConfig  # noqa: E402


def _fmt_num(value: float | None, digits: int = 6) -> str:
    if value is None or value != value:
        return "-"
    return f"{value:.{digits}f}"


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _render_text(snapshot: DashboardSnapshot, errors: dict[Any, str]) -> str:
    out: list[str] = []
    out.append(_section("pypowerdash"))
    out.append(f"  device    : {snapshot.filters.device_id}")
    out.append(f"  metric    : {snapshot.filters.metric}")
    for message in errors.values():
        out.append(f"  error     : {message}")

    out.append(_section(f"LATEST ({len(snapshot.latest)} metrics)"))
    for metric in Metric:
        reading = snapshot.latest_by_metric.get(metric)
        when = reading.time.isoformat() if reading is not None and reading.time is not None else "-"
        value = _fmt_num(reading.value if reading is not None else None)
        out.append(f"  {metric:<18} {value:>18}  {when}")

    out.append(_section(f"TIME SERIES {snapshot.filters.metric} ({len(snapshot.series)} points)"))
    for point in snapshot.series:
        when = point.time.isoformat() if point.time is not None else "-"
        out.append(f"  {when:<32} {_fmt_num(point.value):>18}")

    out.append(_section(f"DAILY USAGE ({len(snapshot.daily)} days)"))
    out.append(f"  total (30d): {_fmt_num(snapshot.total_usage_kwh)} kWh")
    for entry in snapshot.daily:
        day = entry.day.isoformat() if entry.day is not None else "-"
        out.append(f"  {day:<12} {_fmt_num(entry.usage_kwh):>18}")
    return "\n".join(out)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch and print the power dashboard once.")
    parser.add_argument("--base-url", help="API base URL (default: POWERDASH_API_BASE or http://localhost:8080)")
    parser.add_argument("--device", default=FilterState().device_id, help="Device identifier")
    parser.add_argument("--metric", default=str(Metric.VOLTS), choices=[str(m) for m in Metric], help="Series metric")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    config = PowerDashConfig.from_env(**overrides)
    filters = FilterState(device_id=args.device, metric=args.metric)

    async with PowerDashboard(config, filters=filters) as dashboard:
        await dashboard.wait_idle()
        snapshot = dashboard.snapshot()
        errors = dashboard.errors

    if args.json_mode:
        print(snapshot.model_dump_json(indent=2))
    else:
        print(_render_text(snapshot, errors))
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
