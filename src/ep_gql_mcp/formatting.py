"""JSON rendering of tool results: size capping, pagination, entity URLs."""

from __future__ import annotations

import json
import os
from typing import Any

_DEFAULT_MAX_CHARS = 50_000
_SITE_URL = "https://www.eliteprospects.com"


def _max_chars() -> int:
    return int(os.environ.get("EP_MAX_RESPONSE_LENGTH", str(_DEFAULT_MAX_CHARS)))


def _dumps(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def truncate_response(data: Any, max_length: int | None = None) -> tuple[Any, str | None]:
    """Shrink *data* until its JSON fits in *max_length* characters.

    Lists are cut to a prefix; for an object, its longest list field is cut.
    Returns the (possibly shortened) data and a note when anything was cut.
    """
    limit = max_length if max_length is not None else _max_chars()
    text = _dumps(data)
    if len(text) <= limit:
        return data, None

    if isinstance(data, list) and data:
        kept = _fit_prefix(data, lambda items: items, limit)
        return kept, (
            f"Response truncated. Showing {len(kept)} of {len(data)} items. "
            "Use a lower limit or narrower filters to see the rest."
        )

    if isinstance(data, dict):
        lists = [(k, v) for k, v in data.items() if isinstance(v, list) and v]
        if lists:
            key, items = max(lists, key=lambda kv: len(_dumps(kv[1])))
            kept = _fit_prefix(items, lambda part: {**data, key: part}, limit)
            return {**data, key: kept}, (
                f"Response truncated. Showing {len(kept)} of {len(items)} {key}. "
                "Use a lower limit or narrower filters to see the rest."
            )

    return text[: max(limit - 100, 0)] + "...", (
        f"Response truncated due to size. Original response was {len(text)} characters."
    )


def _fit_prefix(items: list[Any], wrap: Any, limit: int) -> list[Any]:
    # Largest prefix whose wrapped JSON fits; reserves room for the note
    budget = max(limit - 200, 0)
    lo, hi = 0, len(items)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if len(_dumps(wrap(items[:mid]))) <= budget:
            lo = mid
        else:
            hi = mid - 1
    return items[:lo]


def pagination(
    items: list[Any],
    total: int | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> dict[str, Any]:
    """Pagination metadata for a page of *items*."""
    has_more = None
    if total is not None and limit is not None and offset is not None:
        has_more = offset + len(items) < total
    return {"total": total, "limit": limit, "offset": offset, "hasMore": has_more}


def entity_url(kind: str, entity_id: str | int, slug: str | None = None) -> str:
    """Public eliteprospects.com page for a player, team, league or staff member."""
    if slug:
        return f"{_SITE_URL}/{kind}/{entity_id}/{slug}"
    return f"{_SITE_URL}/{kind}/{entity_id}"


def format_response(data: Any, max_length: int | None = None) -> str:
    """Render a tool result as JSON, truncating it if it is too large."""
    shown, note = truncate_response(data, max_length)
    if note is None:
        return _dumps(shown)
    if isinstance(shown, dict):
        return _dumps({**shown, "truncated": True, "note": note})
    return _dumps({"data": shown, "truncated": True, "note": note})
