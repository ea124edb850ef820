"""Error types surfaced to MCP tool callers.

Every failure a tool can report derives from :class:`EliteProspectsError`.
The message is what the caller sees, so each one names the input or the
sub-operation that failed.
"""

from __future__ import annotations

from typing import Self


class EliteProspectsError(Exception):
    """Base class for all errors raised by ep-gql-mcp."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def with_context(self, context: str) -> Self:
        """Prefix the message with the sub-operation that failed.

        Returns the same instance so it can be re-raised without losing its type.
        """
        self.message = f"{context}: {self.message}"
        self.args = (self.message,)
        return self


class ValidationError(EliteProspectsError):
    """Malformed tool input, detected before any network call."""


class NotFoundError(EliteProspectsError):
    """A name-based lookup returned no match."""

    def __init__(self, kind: str, term: str) -> None:
        super().__init__(f'No {kind} found matching "{term}"')
        self.kind = kind
        self.term = term


class UpstreamGraphQLError(EliteProspectsError):
    """The GraphQL endpoint rejected the query."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__(f"GraphQL Error: {', '.join(messages)}")
        self.messages = messages


class TransportError(EliteProspectsError):
    """The GraphQL endpoint could not be reached."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(
            f"Network error: Unable to connect to EliteProspects GraphQL API at {endpoint}"
        )
        self.endpoint = endpoint


class ResponseShapeError(EliteProspectsError):
    """The upstream answered with data the typed result models cannot read."""
