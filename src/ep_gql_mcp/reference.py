"""Pre-generated schema and reference data.

The production endpoint has introspection disabled, so the schema and the
league/country lists are generated offline into JSON files:

    {EP_GENERATED_DIR}/
        queries.json          ← [{name, description, args, returnType}, ...]
        types.json            ← [{name, kind, fields, ...}, ...]
        enums.json            ← [{name, values}, ...]
        reference-data.json   ← {leagues, countries, positions, seasonFormat, currentSeason}

Missing or unreadable files fall back to empty data.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any

log = logging.getLogger("ep-gql-mcp")

_DEFAULT_GENERATED_DIR = Path(__file__).parent / "generated"

DEFAULT_POSITIONS = ["C", "LW", "RW", "D", "G"]
SEASON_FORMAT = "YYYY-YYYY (e.g., 2023-2024)"


def _generated_dir() -> Path:
    return Path(os.environ.get("EP_GENERATED_DIR", str(_DEFAULT_GENERATED_DIR)))


def _load_json(name: str, default: Any) -> Any:
    path = _generated_dir() / name
    if not path.exists():
        log.debug("Generated file %s not found; using defaults", path)
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        log.warning("Failed to load generated file %s", path, exc_info=True)
        return default


def load_queries() -> list[dict[str, Any]]:
    """Schema root queries (``name``, ``description``, ``args``, ``returnType``)."""
    return _load_json("queries.json", [])


def load_types() -> list[dict[str, Any]]:
    return _load_json("types.json", [])


def load_enums() -> list[dict[str, Any]]:
    return _load_json("enums.json", [])


def load_reference_data() -> dict[str, Any]:
    """Leagues, countries, positions and season metadata, with defaults filled in."""
    data = _load_json("reference-data.json", {})
    if not isinstance(data, dict):
        data = {}
    return {
        "leagues": data.get("leagues") or [],
        "countries": data.get("countries") or [],
        "positions": data.get("positions") or list(DEFAULT_POSITIONS),
        "seasonFormat": data.get("seasonFormat") or SEASON_FORMAT,
        "currentSeason": data.get("currentSeason") or season_for(date.today()),
    }


def season_for(day: date) -> str:
    """Hockey season containing *day*; a new season starts in September."""
    start = day.year if day.month >= 9 else day.year - 1
    return f"{start}-{start + 1}"
