"""Multi-key fanout and grouped aggregation.

``fanout`` runs one query per key concurrently and merges the branches into
a single globally-ordered, limited list. ``aggregate_by_group`` sums a
per-record value into declared groups, keeping "no data" (None) apart
from "data that sums to zero".
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Iterable
from typing import Any, TypeVar

from ep_gql_mcp.errors import EliteProspectsError

log = logging.getLogger("ep-gql-mcp")

R = TypeVar("R")
G = TypeVar("G", bound=Hashable)


def dedupe(keys: Iterable[str]) -> list[str]:
    """Drop repeated and empty keys, keeping first-seen order."""
    seen: dict[str, None] = {}
    for key in keys:
        if key and key not in seen:
            seen[key] = None
    return list(seen)


async def fanout(
    keys: Iterable[str],
    fetch: Callable[[str], Awaitable[list[R]]],
    *,
    record_id: Callable[[R], str],
    sort_key: Callable[[R], Any],
    limit: int,
    descending: bool = True,
    context: str = "Failed to run multi-key query",
) -> list[R]:
    """Query every key concurrently and merge the results.

    Args:
        keys: Keys to query; duplicates are removed before any call is made.
        fetch: Coroutine function returning the records for one key.
        record_id: Unique id of a record; records sharing an id are stored once
            (the branch for the later key wins).
        sort_key: Ordering key applied after the merge. Ties are broken by id.
        limit: Maximum number of records returned, applied after sorting.
        descending: Sort direction.
        context: Prefix attached to the error of a failing branch.

    Raises:
        EliteProspectsError: any branch failed; the whole call fails with it.
    """
    unique = dedupe(keys)
    if not unique:
        return []

    log.info("Fanout over %d keys (limit %d)", len(unique), limit)
    try:
        branches = await gather_all(fetch(key) for key in unique)
    except EliteProspectsError as exc:
        raise exc.with_context(context)

    merged: dict[str, R] = {}
    for key, records in zip(unique, branches):
        log.debug("Branch %s returned %d records", key, len(records))
        for record in records:
            merged[record_id(record)] = record

    ordered = sorted(
        merged.values(),
        key=lambda r: (sort_key(r), record_id(r)),
        reverse=descending,
    )
    return ordered[:limit]


async def gather_all(aws: Iterable[Awaitable[R]]) -> list[R]:
    """Await *aws* concurrently and return their results in order.

    The first failure cancels every call still running and is re-raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        _cancel_pending(tasks)
        raise


def _cancel_pending(tasks: list[asyncio.Future[Any]]) -> None:
    for task in tasks:
        if not task.done():
            task.cancel()


def aggregate_by_group(
    records: Iterable[R],
    groups: Iterable[G | None],
    *,
    key: Callable[[R], G | None],
    value: Callable[[R], int | float | None],
) -> dict[G | None, int | float | None]:
    """Sum ``value`` per declared group.

    A group no record belongs to maps to None. Missing values count as zero.
    Records whose group was not declared are ignored.
    """
    totals: dict[G | None, int | float | None] = {group: None for group in groups}
    for record in records:
        group = key(record)
        if group is None or group not in totals:
            continue
        current = totals[group] or 0
        totals[group] = current + (value(record) or 0)
    return totals
