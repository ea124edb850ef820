"""MCP tool implementations for the EliteProspects GraphQL API.

Argument names are the camelCase ones of the upstream API (``teamIds``,
``leagueSlug``), since FastMCP matches them against the Python parameters.
Every tool returns JSON text. Failures raise ``EliteProspectsError``
subclasses; FastMCP reports them to the client as failed tool calls.
"""

from __future__ import annotations

import logging
from typing import Any

from ep_gql_mcp import games, graphql_client, queries, reference, search
from ep_gql_mcp.errors import (
    EliteProspectsError,
    NotFoundError,
    UpstreamGraphQLError,
    ValidationError,
)
from ep_gql_mcp.fanout import gather_all
from ep_gql_mcp.formatting import entity_url, format_response, pagination
from ep_gql_mcp.hints import annotate_graphql_error
from ep_gql_mcp.models import edges
from ep_gql_mcp.server import mcp

log = logging.getLogger("ep-gql-mcp")

_QUERY_PREFIXES = ("{", "query", "mutation", "subscription")


def _require(name: str, value: str | None) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{name} is required")
    return value.strip()


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@mcp.tool(name="search_entities")
async def search_entities(searchTerm: str, entityType: str = "all", limit: int = 10) -> str:
    """Search for players, teams, leagues, or staff by name.

    Resolves natural language references to entity IDs, e.g. "McDavid" to
    player 296251. Use it to find IDs before calling the other tools.

    Args:
        searchTerm: Player, team, league or staff name.
        entityType: One of player, team, league, staff, or all.
        limit: Maximum results per entity type.
    """
    found = await search.search_entities(
        graphql_client.get_executor(), searchTerm, entityType, games.normalize_limit(limit, 10)
    )
    return format_response(found.to_dict())


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------


@mcp.tool(name="get_games")
async def get_games(
    playerId: str | None = None,
    playerIds: list[str] | None = None,
    teamId: str | None = None,
    teamIds: list[str] | None = None,
    league: str | None = None,
    season: str | None = None,
    dateFrom: str | None = None,
    dateTo: str | None = None,
    limit: int = games.DEFAULT_LIMIT,
) -> str:
    """Get game schedules and results, most recent first.

    Players are expanded to the teams they played for in the given
    league/season, and every team is queried in parallel. Games involving
    several of the teams appear once. homeTeamShots/visitingTeamShots are
    summed from player shots on goal and are null when not tracked.

    Args:
        playerId: Single player ID (or name).
        playerIds: Player IDs; games of any of these players.
        teamId: Single team ID (or name).
        teamIds: Team IDs; games of any of these teams.
        league: League slug, e.g. "nhl".
        season: Season, e.g. "2023-2024".
        dateFrom: Start date, YYYY-MM-DD (inclusive).
        dateTo: End date, YYYY-MM-DD (inclusive).
        limit: Maximum number of games.
    """
    payload = await games.get_games(
        graphql_client.get_executor(),
        player_id=playerId,
        player_ids=playerIds,
        team_id=teamId,
        team_ids=teamIds,
        league=league,
        season=season,
        date_from=dateFrom,
        date_to=dateTo,
        limit=limit,
    )
    return format_response(payload)


@mcp.tool(name="get_game_logs")
async def get_game_logs(
    id: str | None = None,  # noqa: A002
    player: str | None = None,
    game: str | None = None,
    team: str | None = None,
    opponent: str | None = None,
    gameLeague: str | None = None,
    gameSeason: str | None = None,
    gameDateFrom: str | None = None,
    gameDateTo: str | None = None,
    limit: int = 50,
) -> str:
    """Get game-by-game player statistics (game logs), most recent first.

    Skater lines carry G, A, PTS, SOG, PM, PIM, PPG, SHG, TOI; goalie lines
    carry SA, SV, GA, SVP, TOI.

    Args:
        id: Specific game log ID.
        player: Player ID.
        game: Game ID (all player lines of one game).
        team: Team ID.
        opponent: Opponent team ID.
        gameLeague: League slug.
        gameSeason: Season, e.g. "2023-2024".
        gameDateFrom: Start date, YYYY-MM-DD.
        gameDateTo: End date, YYYY-MM-DD.
        limit: Maximum number of logs.
    """
    games.validate_date("gameDateFrom", gameDateFrom)
    games.validate_date("gameDateTo", gameDateTo)
    applied = {
        "id": id,
        "player": player,
        "game": game,
        "team": team,
        "opponent": opponent,
        "gameLeague": gameLeague,
        "gameSeason": gameSeason,
        "gameDateFrom": gameDateFrom,
        "gameDateTo": gameDateTo,
    }
    try:
        data = await graphql_client.get_executor().execute(
            queries.GAME_LOGS,
            {**applied, "limit": games.normalize_limit(limit), "sort": "-game.dateTime"},
        )
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch game logs")

    logs = edges(data, "gameLogs")
    return format_response(
        {
            "filters": {k: v for k, v in applied.items() if v is not None},
            "gameLogs": logs,
            "totalLogs": len(logs),
        }
    )


# ---------------------------------------------------------------------------
# Players and teams
# ---------------------------------------------------------------------------


@mcp.tool(name="get_player")
async def get_player(playerId: str | None = None, playerName: str | None = None) -> str:
    """Get a player profile by ID or name (a name uses the first search match).

    Returns bio, current team, position, nationality and physical attributes.
    """
    executor = graphql_client.get_executor()
    pid = await search.resolve_one(executor, "player", playerId, playerName)
    try:
        data = await executor.execute(queries.PLAYER, {"id": pid})
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch player")

    player = data.get("player")
    if not isinstance(player, dict):
        return format_response({"playerId": pid, "player": None})
    return format_response({**player, "url": entity_url("player", pid, player.get("slug"))})


@mcp.tool(name="get_player_stats")
async def get_player_stats(
    playerId: str | None = None,
    playerName: str | None = None,
    season: str | None = None,
    league: str | None = None,
    limit: int = 50,
) -> str:
    """Get a player's season-by-season statistics.

    No filters gives the whole career. Returns regular season and postseason
    lines (GP, G, A, PTS, PIM, ...).

    Args:
        playerId: Player ID.
        playerName: Player name (first search match is used).
        season: Season filter, e.g. "2023-2024".
        league: League slug filter, e.g. "nhl".
        limit: Maximum number of stat lines.
    """
    executor = graphql_client.get_executor()
    pid = await search.resolve_one(executor, "player", playerId, playerName)
    try:
        data = await executor.execute(
            queries.PLAYER_STATS,
            {"id": pid, "season": season, "league": league, "limit": games.normalize_limit(limit)},
        )
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch player stats")

    stats = edges(data, "playerStats")
    return format_response(
        {"playerId": pid, "season": season, "league": league, "stats": stats, "totalRecords": len(stats)}
    )


@mcp.tool(name="get_team")
async def get_team(
    teamId: str | None = None, teamName: str | None = None, includeRoster: bool = True
) -> str:
    """Get a team profile (name, country, league, arena) and optionally its roster.

    A name uses the first search match.
    """
    executor = graphql_client.get_executor()
    tid = await search.resolve_one(executor, "team", teamId, teamName)

    async def roster() -> list[dict[str, Any]]:
        if not includeRoster:
            return []
        return edges(await executor.execute(queries.TEAM_ROSTER, {"id": tid}), "teamRoster")

    try:
        team_data, players = await gather_all(
            [executor.execute(queries.TEAM, {"id": tid}), roster()]
        )
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch team")

    team = team_data.get("team") if isinstance(team_data.get("team"), dict) else {"id": tid}
    out: dict[str, Any] = {**team, "url": entity_url("team", tid, team.get("slug"))}
    if includeRoster:
        out["roster"] = players
        out["rosterCount"] = len(players)
    return format_response(out)


# ---------------------------------------------------------------------------
# Leagues
# ---------------------------------------------------------------------------


@mcp.tool(name="get_league_standings")
async def get_league_standings(leagueSlug: str, season: str | None = None, limit: int = 50) -> str:
    """Get standings for a league and season (current season if omitted).

    Args:
        leagueSlug: League slug, e.g. "nhl", "ahl", "shl", "khl".
        season: Season, e.g. "2023-2024".
        limit: Maximum number of teams.
    """
    slug = _require("leagueSlug", leagueSlug)
    try:
        data = await graphql_client.get_executor().execute(
            queries.LEAGUE_STANDINGS, {"slug": slug, "season": season}
        )
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch league standings")

    league = data.get("league")
    if not isinstance(league, dict):
        raise NotFoundError("league", slug)
    standings = edges(league, "standings")[: games.normalize_limit(limit)]
    return format_response(
        {
            "league": slug,
            "leagueName": league.get("name"),
            "season": season or "current",
            "standings": standings,
            "totalTeams": len(standings),
        }
    )


@mcp.tool(name="get_league_leaders")
async def get_league_leaders(leagueSlug: str, season: str | None = None, limit: int = 10) -> str:
    """Get scoring leaders in a league: skaters by points, goalies by wins.

    Args:
        leagueSlug: League slug, e.g. "nhl".
        season: Season, e.g. "2023-2024" (current season if omitted).
        limit: Number of leaders in each list.
    """
    slug = _require("leagueSlug", leagueSlug)
    executor = graphql_client.get_executor()
    variables = {"slug": slug, "season": season, "limit": games.normalize_limit(limit, 10)}
    try:
        skaters, goalies = await gather_all(
            [
                executor.execute(queries.LEAGUE_SKATER_LEADERS, variables),
                executor.execute(queries.LEAGUE_GOALIE_LEADERS, variables),
            ]
        )
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch league leaders")

    return format_response(
        {
            "league": slug,
            "season": season or "current",
            "skaterLeaders": edges(skaters, "leagueSkaterStats"),
            "goalieLeaders": edges(goalies, "leagueGoalieStats"),
        }
    )


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


@mcp.tool(name="get_draft_picks")
async def get_draft_picks(
    draftTypeSlug: str = "nhl-entry-draft",
    year: str | None = None,
    teamId: str | None = None,
    playerId: str | None = None,
    round: int | None = None,  # noqa: A002
    limit: int = 50,
) -> str:
    """Get draft selections, e.g. for the NHL Entry Draft.

    Args:
        draftTypeSlug: Draft type slug (see list_draft_types).
        year: Draft year, e.g. "2023".
        teamId: Team ID.
        playerId: Player ID.
        round: Round number.
        limit: Maximum number of picks.
    """
    try:
        data = await graphql_client.get_executor().execute(
            queries.DRAFT_PICKS,
            {
                "draftTypeSlug": draftTypeSlug,
                "year": year,
                "team": teamId,
                "player": playerId,
                "round": round,
                "limit": games.normalize_limit(limit),
            },
        )
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch draft picks")

    picks = edges(data, "draftTypeSelections")
    applied = {"year": year, "teamId": teamId, "playerId": playerId, "round": round}
    return format_response(
        {
            "draftType": draftTypeSlug,
            "filters": {k: v for k, v in applied.items() if v is not None},
            "picks": picks,
            "totalPicks": len(picks),
        }
    )


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@mcp.tool(name="list_leagues")
async def list_leagues(limit: int = 100) -> str:
    """List leagues with their slugs (used by most other tools)."""
    leagues = reference.load_reference_data()["leagues"]
    n = games.normalize_limit(limit, 100)
    shown = leagues[:n]
    return format_response(
        {
            "leagues": shown,
            "pagination": pagination(shown, total=len(leagues), limit=n, offset=0),
            "note": "Use league slugs (e.g., 'nhl', 'ahl') in queries.",
        }
    )


@mcp.tool(name="list_seasons")
async def list_seasons(leagueSlug: str) -> str:
    """List the seasons available for a league (format YYYY-YYYY)."""
    slug = _require("leagueSlug", leagueSlug)
    try:
        data = await graphql_client.get_executor().execute(queries.LEAGUE_SEASONS, {"slug": slug})
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch seasons")

    league = data.get("league")
    if not isinstance(league, dict):
        raise NotFoundError("league", slug)
    seasons = [s.get("slug") for s in edges(league, "seasons")]
    return format_response(
        {
            "league": {"id": league.get("id"), "name": league.get("name"), "slug": league.get("slug")},
            "seasons": seasons,
            "totalSeasons": len(seasons),
        }
    )


@mcp.tool(name="list_draft_types")
async def list_draft_types(limit: int = 50) -> str:
    """List draft types; their slugs are used by get_draft_picks."""
    try:
        data = await graphql_client.get_executor().execute(queries.DRAFT_TYPES)
    except EliteProspectsError as exc:
        raise exc.with_context("Failed to fetch draft types")

    draft_types = edges(data, "draftTypes")
    return format_response(
        {
            "draftTypes": draft_types[: games.normalize_limit(limit)],
            "total": len(draft_types),
            "note": "Use the 'slug' field in get_draft_picks.",
        }
    )


@mcp.tool(name="get_current_season")
async def get_current_season() -> str:
    """Get the current season string (YYYY-YYYY)."""
    data = reference.load_reference_data()
    return format_response(
        {"currentSeason": data["currentSeason"], "seasonFormat": data["seasonFormat"]}
    )


# ---------------------------------------------------------------------------
# Raw GraphQL and schema discovery
# ---------------------------------------------------------------------------


@mcp.tool(name="execute_graphql")
async def execute_graphql(query: str, variables: dict[str, Any] | None = None) -> str:
    """Execute any GraphQL query against the EliteProspects API.

    Use it for anything the convenience tools do not cover. Stat field names
    are UPPERCASE (GP, G, A, PTS), object fields need a sub-selection
    (team { name }), and most list queries use the edges { ... } pattern.

    Args:
        query: GraphQL document.
        variables: Variables for the document.
    """
    if not query or not query.strip():
        raise ValidationError("Query must be a non-empty string")
    if not query.strip().startswith(_QUERY_PREFIXES):
        raise ValidationError(
            "Query must be a valid GraphQL query "
            "(should start with '{', 'query', 'mutation', or 'subscription')"
        )

    try:
        data = await graphql_client.get_executor().execute(query, variables, drop_none=False)
    except UpstreamGraphQLError as exc:
        log.info("execute_graphql rejected upstream: %s", exc)
        exc.message = annotate_graphql_error(exc.message)
        raise exc.with_context("GraphQL query failed")
    except EliteProspectsError as exc:
        raise exc.with_context("GraphQL query failed")
    return format_response(data)


@mcp.tool(name="introspect_schema")
async def introspect_schema(queryName: str | None = None, typeName: str | None = None) -> str:
    """Explore the schema: one query, one type, or a summary of everything.

    Args:
        queryName: Root query name, e.g. "player" or "leagueStandings".
        typeName: Type name, e.g. "Player", "Team".
    """
    all_queries = reference.load_queries()
    all_types = reference.load_types()

    if queryName:
        match = next((q for q in all_queries if q.get("name") == queryName), None)
        if match is None:
            return format_response(
                {
                    "error": f"Query '{queryName}' not found",
                    "availableQueries": [q.get("name") for q in all_queries[:20]],
                }
            )
        return format_response(match)

    if typeName:
        match = next((t for t in all_types if t.get("name") == typeName), None)
        if match is None:
            return format_response(
                {
                    "error": f"Type '{typeName}' not found",
                    "availableTypes": [t.get("name") for t in all_types[:20]],
                }
            )
        return format_response(match)

    return format_response(
        {
            "summary": {
                "totalQueries": len(all_queries),
                "totalTypes": len(all_types),
                "totalEnums": len(reference.load_enums()),
            },
            "sampleQueries": [
                {"name": q.get("name"), "description": q.get("description"), "returnType": q.get("returnType")}
                for q in all_queries[:20]
            ],
            "sampleTypes": [{"name": t.get("name"), "kind": t.get("kind")} for t in all_types[:10]],
            "note": "Pass queryName or typeName for details about a specific query or type.",
        }
    )
