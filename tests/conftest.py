"""Shared pytest fixtures for the ep-gql-mcp test suite."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from ep_gql_mcp import graphql_client
from ep_gql_mcp.graphql_client import GraphQLConfig, QueryExecutor

ENDPOINT = "https://gql.test"

_OPERATION = re.compile(r"^\s*(?:query|mutation)\s+(\w+)")

Responder = Callable[[dict[str, Any]], "dict[str, Any] | httpx.Response"]


class FakeUpstream:
    """Routes GraphQL requests to responders by operation name and records them.

    A responder receives the request variables and returns either a JSON body
    (``{"data": ...}`` / ``{"errors": ...}``) or a ready ``httpx.Response``.
    It may also raise an ``httpx`` transport error.
    """

    def __init__(self) -> None:
        self.routes: dict[str | None, Responder] = {}
        self.calls: list[tuple[str | None, dict[str, Any]]] = []

    def on(self, operation: str | None, responder: Responder) -> None:
        self.routes[operation] = responder

    def calls_to(self, operation: str) -> list[dict[str, Any]]:
        return [variables for op, variables in self.calls if op == operation]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        match = _OPERATION.match(body["query"])
        operation = match.group(1) if match else None
        variables = body.get("variables", {})
        self.calls.append((operation, variables))
        result = self.routes[operation](variables)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)


def make_executor(handler: Callable[[httpx.Request], httpx.Response], retries: int = 1) -> QueryExecutor:
    config = GraphQLConfig(endpoint=ENDPOINT, timeout=5.0, retries=retries, retry_backoff=0.0)
    return QueryExecutor(config, transport=httpx.MockTransport(handler))


def games_body(*games: dict[str, Any]) -> dict[str, Any]:
    return {"data": {"games": {"edges": list(games)}}}


def game(
    game_id: str,
    date_time: str,
    home: str,
    visiting: str,
    logs: list[tuple[str, int | None]] | None = None,
) -> dict[str, Any]:
    """A raw upstream game; *logs* are (team id, SOG) pairs."""
    return {
        "id": game_id,
        "dateTime": date_time,
        "homeTeam": {"id": home, "name": f"Team {home}", "slug": f"team-{home}"},
        "visitingTeam": {"id": visiting, "name": f"Team {visiting}", "slug": f"team-{visiting}"},
        "homeTeamScore": 3,
        "visitingTeamScore": 2,
        "status": "finished",
        "league": {"name": "NHL", "slug": "nhl"},
        "season": {"slug": "2023-2024"},
        "gameLogs": {
            "edges": [
                {"player": {"id": f"p{i}"}, "team": {"id": team}, "SOG": sog}
                for i, (team, sog) in enumerate(logs or [])
            ]
        },
    }


@pytest.fixture(autouse=True)
def reset_executor(monkeypatch):
    """Never let a test reach the real endpoint through the process executor."""
    monkeypatch.setattr(graphql_client, "_executor", None)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def executor(upstream, monkeypatch) -> QueryExecutor:
    """Executor backed by ``upstream``, also installed as the process executor."""
    ex = make_executor(upstream)
    monkeypatch.setattr(graphql_client, "_executor", ex)
    return ex
