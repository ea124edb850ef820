"""Typed views of the upstream records used by the games pipeline.

Raw GraphQL JSON is read here, at the boundary, so the fanout and
aggregation code only ever sees :class:`Game` and :class:`GameLogEntry`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ep_gql_mcp.errors import ResponseShapeError

log = logging.getLogger("ep-gql-mcp")


def edges(data: dict[str, Any], root: str) -> list[dict[str, Any]]:
    """Return the ``edges`` list of a connection field.

    A missing or null connection reads as empty. Anything that is present
    but not shaped like ``{"edges": [...]}`` raises :class:`ResponseShapeError`.
    """
    connection = data.get(root)
    if connection is None:
        return []
    if not isinstance(connection, dict):
        raise ResponseShapeError(f"Expected '{root}' to be an object, got {type(connection).__name__}")
    items = connection.get("edges")
    if items is None:
        return []
    if not isinstance(items, list):
        raise ResponseShapeError(f"Expected '{root}.edges' to be a list, got {type(items).__name__}")
    return [item for item in items if isinstance(item, dict)]


def _opt_id(obj: object) -> str | None:
    if isinstance(obj, dict) and obj.get("id") is not None:
        return str(obj["id"])
    return None


def _opt_int(value: object) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    try:
        return int(str(value))
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class TeamRef:
    """A team as embedded in a game."""

    id: str | None
    name: str | None = None
    slug: str | None = None

    @classmethod
    def from_json(cls, data: object) -> TeamRef | None:
        if not isinstance(data, dict):
            return None
        return cls(id=_opt_id(data), name=data.get("name"), slug=data.get("slug"))


@dataclass(frozen=True, slots=True)
class GameLogEntry:
    """One player's line in a game, reduced to what aggregation needs."""

    player_id: str | None
    team_id: str | None
    shots_on_goal: int | None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> GameLogEntry:
        return cls(
            player_id=_opt_id(data.get("player")),
            team_id=_opt_id(data.get("team")),
            shots_on_goal=_opt_int(data.get("SOG")),
        )


@dataclass(frozen=True, slots=True)
class Game:
    """A scheduled or played game."""

    id: str
    date_time: str | None
    home_team: TeamRef | None
    visiting_team: TeamRef | None
    home_team_score: int | None
    visiting_team_score: int | None
    status: str | None
    game_logs: tuple[GameLogEntry, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Game:
        if data.get("id") is None:
            raise ResponseShapeError("Game record without an id")
        logs_conn = data.get("gameLogs")
        logs = edges({"gameLogs": logs_conn}, "gameLogs") if logs_conn is not None else []
        return cls(
            id=str(data["id"]),
            date_time=data.get("dateTime"),
            home_team=TeamRef.from_json(data.get("homeTeam")),
            visiting_team=TeamRef.from_json(data.get("visitingTeam")),
            home_team_score=_opt_int(data.get("homeTeamScore")),
            visiting_team_score=_opt_int(data.get("visitingTeamScore")),
            status=data.get("status"),
            game_logs=tuple(GameLogEntry.from_json(entry) for entry in logs),
            raw=data,
        )

    @property
    def home_team_id(self) -> str | None:
        return self.home_team.id if self.home_team else None

    @property
    def visiting_team_id(self) -> str | None:
        return self.visiting_team.id if self.visiting_team else None

    @property
    def timestamp(self) -> float | None:
        """``date_time`` as POSIX seconds, or None when absent/unparseable.

        Naive values are read as UTC.
        """
        if not self.date_time:
            return None
        try:
            parsed = datetime.fromisoformat(self.date_time.replace("Z", "+00:00"))
        except ValueError:
            log.debug("Unparseable dateTime on game %s: %r", self.id, self.date_time)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.timestamp()

    def to_dict(self, home_team_shots: int | None, visiting_team_shots: int | None) -> dict[str, Any]:
        """Upstream fields plus the derived shot totals (game logs are not echoed)."""
        out = {k: v for k, v in self.raw.items() if k != "gameLogs"}
        out["homeTeamShots"] = home_team_shots
        out["visitingTeamShots"] = visiting_team_shots
        return out


def parse_games(data: dict[str, Any]) -> list[Game]:
    """Read the ``games`` connection of a response, skipping id-less entries."""
    games: list[Game] = []
    for item in edges(data, "games"):
        if item.get("id") is None:
            log.debug("Skipping game without id: %r", item)
            continue
        games.append(Game.from_json(item))
    return games
