"""Entity search and name-to-ID resolution.

Resolves natural language references such as "McDavid" to canonical
EliteProspects IDs (player 296251). IDs are numeric strings; anything else
is treated as a name and searched for.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ep_gql_mcp import queries
from ep_gql_mcp.errors import EliteProspectsError, NotFoundError, ValidationError
from ep_gql_mcp.fanout import dedupe, gather_all
from ep_gql_mcp.graphql_client import QueryExecutor
from ep_gql_mcp.models import edges

log = logging.getLogger("ep-gql-mcp")

ENTITY_KINDS = ("player", "team", "league", "staff")

# Key used for each kind in the result/error maps
_PLURAL = {"player": "players", "team": "teams", "league": "leagues", "staff": "staff"}


@dataclass(slots=True)
class SearchResults:
    """Per-kind search hits, plus the kinds whose search failed."""

    search_term: str
    entity_type: str
    results: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(len(hits) for hits in self.results.values())

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "searchTerm": self.search_term,
            "entityType": self.entity_type,
            "results": self.results,
            "totalResults": self.total,
        }
        if self.errors:
            out["errors"] = self.errors
        return out


def is_canonical_id(term: str) -> bool:
    """Return True if *term* is already an EliteProspects ID."""
    return term.strip().isdigit()


async def _search_kind(
    executor: QueryExecutor, kind: str, term: str, limit: int
) -> list[dict[str, Any]]:
    data = await executor.execute(queries.SEARCH_QUERIES[kind], {"q": term, "limit": limit})
    return edges(data, queries.SEARCH_ROOTS[kind])


async def search_entities(
    executor: QueryExecutor,
    search_term: str,
    entity_type: str = "all",
    limit: int = 10,
) -> SearchResults:
    """Search players, teams, leagues and/or staff by name.

    With a single *entity_type*, an upstream failure or an empty result
    raises. With ``"all"``, each kind is searched concurrently and a failing
    kind is reported in ``SearchResults.errors`` next to the others' hits.

    Raises:
        ValidationError: blank term or unknown entity type.
        NotFoundError: a single-kind search found nothing.
    """
    if not search_term or not search_term.strip():
        raise ValidationError("searchTerm must be a non-empty string")
    if entity_type != "all" and entity_type not in ENTITY_KINDS:
        raise ValidationError(
            f"Invalid entityType: {entity_type}. Expected one of "
            f"{', '.join((*ENTITY_KINDS, 'all'))}"
        )

    out = SearchResults(search_term=search_term, entity_type=entity_type)

    if entity_type != "all":
        plural = _PLURAL[entity_type]
        try:
            hits = await _search_kind(executor, entity_type, search_term, limit)
        except EliteProspectsError as exc:
            raise exc.with_context(f"Failed to search {plural}")
        if not hits:
            raise NotFoundError(entity_type, search_term)
        out.results[plural] = hits
        return out

    outcomes = await asyncio.gather(
        *(_search_kind(executor, kind, search_term, limit) for kind in ENTITY_KINDS),
        return_exceptions=True,
    )
    for kind, outcome in zip(ENTITY_KINDS, outcomes):
        plural = _PLURAL[kind]
        if isinstance(outcome, EliteProspectsError):
            log.warning("Search for %s %r failed: %s", plural, search_term, outcome)
            out.errors[plural] = str(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            out.results[plural] = outcome
    return out


async def _resolve_name(executor: QueryExecutor, kind: str, name: str, limit: int) -> str:
    found = await search_entities(executor, name, entity_type=kind, limit=limit)
    first = found.results[_PLURAL[kind]][0]
    if first.get("id") is None:
        raise NotFoundError(kind, name)
    log.debug("Resolved %s %r -> %s", kind, name, first["id"])
    return str(first["id"])


async def resolve(
    executor: QueryExecutor,
    terms: str | Iterable[str],
    kind: str,
    limit: int = 1,
) -> list[str]:
    """Turn IDs and/or names into a de-duplicated list of canonical IDs.

    IDs are returned unchanged without a network call; each name is
    searched within *kind* and its first hit used.

    Raises:
        NotFoundError: a name matched nothing. The message names the term.
    """
    if isinstance(terms, str):
        terms = [terms]
    cleaned = [t.strip() for t in terms if t and t.strip()]

    names = dedupe(t for t in cleaned if not is_canonical_id(t))
    resolved_names: dict[str, str] = {}
    if names:
        ids = await gather_all(_resolve_name(executor, kind, n, limit) for n in names)
        resolved_names = dict(zip(names, ids))

    return dedupe(t if is_canonical_id(t) else resolved_names[t] for t in cleaned)


async def resolve_one(
    executor: QueryExecutor,
    kind: str,
    entity_id: str | None = None,
    name: str | None = None,
) -> str:
    """Resolve a tool's ``<kind>Id`` / ``<kind>Name`` argument pair."""
    if entity_id:
        return entity_id.strip()
    if not name:
        raise ValidationError(f"Either {kind}Id or {kind}Name must be provided")
    ids = await resolve(executor, name, kind)
    return ids[0]
