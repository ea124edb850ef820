"""Async GraphQL client for the EliteProspects API using httpx.

Features:
- One fixed endpoint, configured once from EP_GQL_URL
- Retry with a fixed backoff for transient transport errors
- GraphQL ``errors`` payloads surfaced immediately (never retried)
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any

import httpx

from ep_gql_mcp.errors import TransportError, UpstreamGraphQLError

log = logging.getLogger("ep-gql-mcp")

_DEFAULT_ENDPOINT = "https://dev-gql-41yd43jtq6.eliteprospects-assets.com"
_DEFAULT_TIMEOUT = 30.0
_DEFAULT_RETRIES = 1
_DEFAULT_BACKOFF = 0.5  # seconds, fixed

_TRANSIENT_ERRORS = (httpx.NetworkError, httpx.TimeoutException, httpx.RemoteProtocolError)


@dataclass(frozen=True, slots=True)
class GraphQLConfig:
    """Connection settings for the upstream GraphQL endpoint."""

    endpoint: str = _DEFAULT_ENDPOINT
    timeout: float = _DEFAULT_TIMEOUT
    retries: int = _DEFAULT_RETRIES
    retry_backoff: float = _DEFAULT_BACKOFF

    @classmethod
    def from_env(cls) -> GraphQLConfig:
        return cls(
            endpoint=os.environ.get("EP_GQL_URL", _DEFAULT_ENDPOINT),
            timeout=float(os.environ.get("EP_GQL_TIMEOUT", str(_DEFAULT_TIMEOUT))),
            retries=int(os.environ.get("EP_GQL_RETRIES", str(_DEFAULT_RETRIES))),
            retry_backoff=float(os.environ.get("EP_GQL_RETRY_BACKOFF", str(_DEFAULT_BACKOFF))),
        )


class QueryExecutor:
    """Sends GraphQL documents to the configured endpoint.

    Args:
        config: Endpoint, timeout and retry settings.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: GraphQLConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=self.config.timeout,
            transport=self._transport,
        )

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        drop_none: bool = True,
    ) -> dict[str, Any]:
        """Run *query* and return the response's ``data`` object.

        Variables whose value is ``None`` are treated as not provided unless
        *drop_none* is False.

        Raises:
            UpstreamGraphQLError: the server answered with GraphQL errors or a
                non-2xx status.
            TransportError: the endpoint stayed unreachable after retrying.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            if drop_none:
                variables = {k: v for k, v in variables.items() if v is not None}
            if variables:
                payload["variables"] = variables

        async with self._make_client() as client:
            resp = await self._post_with_retry(client, payload)
        return self._parse(resp)

    async def _post_with_retry(
        self, client: httpx.AsyncClient, payload: dict[str, Any]
    ) -> httpx.Response:
        """POST with a fixed-backoff retry on transient errors."""
        attempts = self.config.retries + 1
        for attempt in range(attempts):
            try:
                return await client.post(self.config.endpoint, json=payload)
            except _TRANSIENT_ERRORS as exc:
                if attempt < attempts - 1:
                    log.warning(
                        "Retry %d/%d for %s: %s (wait %.1fs)",
                        attempt + 1,
                        self.config.retries,
                        self.config.endpoint,
                        type(exc).__name__,
                        self.config.retry_backoff,
                    )
                    await asyncio.sleep(self.config.retry_backoff)
                    continue
                log.error("GraphQL endpoint unreachable: %s (%s)", self.config.endpoint, exc)
                raise TransportError(self.config.endpoint) from exc
            except httpx.TransportError as exc:
                log.error("GraphQL request failed: %s (%s)", self.config.endpoint, exc)
                raise TransportError(self.config.endpoint) from exc
        raise AssertionError("unreachable")  # pragma: no cover

    def _parse(self, resp: httpx.Response) -> dict[str, Any]:
        try:
            body = resp.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("errors"):
            raise UpstreamGraphQLError([_error_message(e) for e in body["errors"]])
        if resp.is_error or not isinstance(body, dict):
            raise UpstreamGraphQLError(
                [f"HTTP {resp.status_code} from {self.config.endpoint}"]
            )

        data = body.get("data")
        return data if isinstance(data, dict) else {}


def _error_message(error: object) -> str:
    if isinstance(error, dict):
        return str(error.get("message", error))
    return str(error)


# Module-level executor, built from the environment on first use
_executor: QueryExecutor | None = None


def get_executor() -> QueryExecutor:
    """Return the process-wide executor (created on first call)."""
    global _executor  # noqa: PLW0603
    if _executor is None:
        config = GraphQLConfig.from_env()
        log.info("GraphQL endpoint: %s", config.endpoint)
        _executor = QueryExecutor(config)
    return _executor
