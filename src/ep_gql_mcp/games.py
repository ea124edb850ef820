"""Game schedules and results across several teams and players.

Player references are turned into the teams they played for, every team is
queried in parallel, the games are merged by id, enriched with shots totals
derived from per-player game logs, and re-sorted most recent first.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from ep_gql_mcp import queries
from ep_gql_mcp.errors import EliteProspectsError, ValidationError
from ep_gql_mcp.fanout import aggregate_by_group, dedupe, fanout, gather_all
from ep_gql_mcp.graphql_client import QueryExecutor
from ep_gql_mcp.models import Game, GameLogEntry, edges, parse_games
from ep_gql_mcp.search import resolve

log = logging.getLogger("ep-gql-mcp")

DEFAULT_LIMIT = 50
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NO_TEAMS_MESSAGE = (
    "No teams found for the specified player(s) with the given filters. "
    "The player may not have stats in the specified league/season."
)


def validate_date(name: str, value: str | None) -> None:
    """Reject anything that is not a real ``YYYY-MM-DD`` calendar date."""
    if value is None:
        return
    if not _DATE_RE.match(value):
        raise ValidationError(f"Invalid {name} format: {value}. Expected YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value} is not a calendar date") from None


def normalize_limit(limit: object, default: int = DEFAULT_LIMIT) -> int:
    if isinstance(limit, bool) or not isinstance(limit, (int, float)) or limit <= 0:
        return default
    return int(limit)


@dataclass(frozen=True, slots=True)
class GameFilters:
    """Filters shared by every branch of a games query."""

    league: str | None = None
    season: str | None = None
    date_from: str | None = None
    date_to: str | None = None

    def stats_variables(self) -> dict[str, str | None]:
        # playerStats accepts no date range
        return {"league": self.league, "season": self.season}

    def games_variables(self) -> dict[str, str | None]:
        return {
            "league": self.league,
            "season": self.season,
            "dateFrom": self.date_from,
            "dateTo": self.date_to,
        }

    def to_dict(self) -> dict[str, str]:
        return {k: v for k, v in self.games_variables().items() if v is not None}


# ---------------------------------------------------------------------------
# Player -> teams
# ---------------------------------------------------------------------------


async def teams_for_player(
    executor: QueryExecutor, player_id: str, filters: GameFilters
) -> set[str]:
    """Return the distinct team IDs the player has stats for under *filters*."""
    try:
        data = await executor.execute(
            queries.PLAYER_TEAMS, {"player": player_id, **filters.stats_variables()}
        )
    except EliteProspectsError as exc:
        raise exc.with_context(
            f"Invalid player ID or player data unavailable: "
            f"Failed to fetch teams for player {player_id}"
        )

    team_ids = {str(row["team"]["id"]) for row in edges(data, "playerStats") if _has_team_id(row)}
    log.debug("Player %s played for teams %s", player_id, sorted(team_ids))
    return team_ids


def _has_team_id(row: dict[str, Any]) -> bool:
    team = row.get("team")
    return isinstance(team, dict) and team.get("id") is not None


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------


def team_shots(game: Game) -> tuple[int | None, int | None]:
    """Home and visiting shots on goal summed from the game's player logs."""
    home, visiting = game.home_team_id, game.visiting_team_id
    totals = aggregate_by_group(
        game.game_logs,
        [home, visiting],
        key=lambda entry: entry.team_id,
        value=_sog,
    )
    return (
        totals.get(home) if home is not None else None,
        totals.get(visiting) if visiting is not None else None,
    )


def _sog(entry: GameLogEntry) -> int | None:
    return entry.shots_on_goal


def _game_sort_key(game: Game) -> float:
    ts = game.timestamp
    return ts if ts is not None else float("-inf")


def _enrich(game: Game) -> dict[str, Any]:
    home_shots, visiting_shots = team_shots(game)
    return game.to_dict(home_shots, visiting_shots)


async def _query_games(
    executor: QueryExecutor, filters: GameFilters, team: str | None, limit: int
) -> list[Game]:
    data = await executor.execute(
        queries.GAMES,
        {**filters.games_variables(), "team": team, "limit": limit, "sort": "-dateTime"},
    )
    return parse_games(data)


async def games_for_teams(
    executor: QueryExecutor,
    team_ids: Iterable[str],
    filters: GameFilters,
    limit: int = DEFAULT_LIMIT,
) -> list[Game]:
    """Most recent games involving any of *team_ids*, each game once."""

    async def fetch(team_id: str) -> list[Game]:
        return await _query_games(executor, filters, team_id, limit)

    return await fanout(
        team_ids,
        fetch,
        record_id=lambda game: game.id,
        sort_key=_game_sort_key,
        limit=limit,
        context="Failed to fetch games for multiple teams",
    )


def _merge_ids(single: str | None, many: Iterable[str] | None) -> list[str]:
    return dedupe([*(many or []), *([single] if single else [])])


async def get_games(
    executor: QueryExecutor,
    *,
    player_id: str | None = None,
    player_ids: list[str] | None = None,
    team_id: str | None = None,
    team_ids: list[str] | None = None,
    league: str | None = None,
    season: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    limit: int | None = DEFAULT_LIMIT,
) -> dict[str, Any]:
    """Games filtered by players, teams, league, season and date range.

    Returns a payload with the applied ``filters``, the ``games`` (most
    recent first, with ``homeTeamShots``/``visitingTeamShots``) and
    ``totalGames``.

    Raises:
        ValidationError: a date bound is not ``YYYY-MM-DD``.
        NotFoundError: a player or team name matched nothing.
    """
    validate_date("dateFrom", date_from)
    validate_date("dateTo", date_to)
    n = normalize_limit(limit)
    filters = GameFilters(league=league, season=season, date_from=date_from, date_to=date_to)

    players = _merge_ids(player_id, player_ids)
    teams = _merge_ids(team_id, team_ids)
    if players:
        players = await resolve(executor, players, "player")
    if teams:
        teams = await resolve(executor, teams, "team")

    if players:
        player_teams = await gather_all(
            teams_for_player(executor, pid, filters) for pid in players
        )
        derived = sorted(set().union(*player_teams))
        teams = dedupe([*teams, *derived])
        if not teams:
            return {
                "filters": {"playerIds": players, **filters.to_dict()},
                "games": [],
                "totalGames": 0,
                "message": _NO_TEAMS_MESSAGE,
            }

    if teams:
        games = await games_for_teams(executor, teams, filters, n)
        applied: dict[str, Any] = {"teamIds": teams, **filters.to_dict()}
        if players:
            applied = {"playerIds": players, **applied}
    else:
        try:
            games = await _query_games(executor, filters, None, n)
        except EliteProspectsError as exc:
            raise exc.with_context("Failed to fetch games")
        applied = filters.to_dict()

    enriched = [_enrich(game) for game in games]
    return {"filters": applied, "games": enriched, "totalGames": len(enriched)}
