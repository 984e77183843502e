"""Run artifact helpers: harvest JSON output and run reports."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

from extraction.models import Harvest


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)


def write_harvest(harvest: Harvest, output_file: str) -> str:
    """Serialize a harvest to JSON and return the written path."""
    _ensure_parent_dir(output_file)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(harvest.to_dict(), f, indent=2, ensure_ascii=False)
    return output_file


def write_run_report(
    report: dict[str, Any],
    scan_id: str,
    output_dir: str = "output/run_reports",
) -> str:
    """Write a JSON report of one harvest run, named after its scan ID."""
    path = os.path.join(output_dir, f"harvest-{scan_id}.json")
    _ensure_parent_dir(path)
    payload = dict(report)
    payload.setdefault("scan_id", scan_id)
    payload.setdefault("finished_utc", datetime.now(timezone.utc).isoformat())
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
