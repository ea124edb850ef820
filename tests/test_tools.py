"""Unit tests for the MCP tools (upstream mocked per operation)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from conftest import game, games_body
from ep_gql_mcp import games, tools
from ep_gql_mcp.errors import NotFoundError, UpstreamGraphQLError, ValidationError
from ep_gql_mcp.server import mcp


def _edges(root: str, *items: dict) -> dict:
    return {"data": {root: {"edges": list(items)}}}


class TestSearchTool:
    @pytest.mark.asyncio
    async def test_single_kind_payload(self, upstream, executor) -> None:
        upstream.on("SearchLeagues", lambda v: _edges("leagues", {"slug": "nhl", "name": "NHL"}))

        out = json.loads(await tools.search_entities("NHL", entityType="league"))

        assert out == {
            "searchTerm": "NHL",
            "entityType": "league",
            "results": {"leagues": [{"slug": "nhl", "name": "NHL"}]},
            "totalResults": 1,
        }

    @pytest.mark.asyncio
    async def test_not_found_raises(self, upstream, executor) -> None:
        upstream.on("SearchPlayers", lambda v: _edges("players"))

        with pytest.raises(NotFoundError, match='No player found matching "Unknown Player XYZ"'):
            await tools.search_entities("Unknown Player XYZ", entityType="player")


class TestGetGamesTool:
    @pytest.mark.asyncio
    async def test_team_fanout(self, upstream, executor) -> None:
        shared = game("G1", "2024-01-10T19:00:00Z", "1", "2", [("1", 30)])
        by_team = {
            "1": games_body(shared, game("G2", "2024-01-05T19:00:00Z", "1", "3")),
            "2": games_body(shared, game("G3", "2024-01-08T19:00:00Z", "2", "4")),
        }
        upstream.on("GetGames", lambda v: by_team[v["team"]])

        out = json.loads(await tools.get_games(teamIds=["1", "2"]))

        assert [g["id"] for g in out["games"]] == ["G1", "G3", "G2"]
        assert out["totalGames"] == 3
        assert out["games"][0]["homeTeamShots"] == 30

    @pytest.mark.asyncio
    async def test_arguments_forwarded(self, executor) -> None:
        payload = {"filters": {}, "games": [], "totalGames": 0}
        with patch.object(games, "get_games", new_callable=AsyncMock, return_value=payload) as mocked:
            out = json.loads(await tools.get_games(playerIds=["8"], season="2023-2024", limit=5))

        assert out == payload
        kwargs = mocked.await_args.kwargs
        assert kwargs["player_ids"] == ["8"]
        assert kwargs["season"] == "2023-2024"
        assert kwargs["limit"] == 5
        assert mocked.await_args.args == (executor,)

    @pytest.mark.asyncio
    async def test_invalid_date(self, upstream, executor) -> None:
        with pytest.raises(ValidationError, match="2024-13-40"):
            await tools.get_games(teamId="1", dateTo="2024-13-40")
        assert upstream.calls == []


class TestLeagueTools:
    @pytest.mark.asyncio
    async def test_leaders(self, upstream, executor) -> None:
        upstream.on(
            "GetLeagueSkaterLeaders",
            lambda v: _edges("leagueSkaterStats", {"player": {"name": "Connor McDavid"}, "regularStats": {"PTS": 132}}),
        )
        upstream.on(
            "GetLeagueGoalieLeaders",
            lambda v: _edges("leagueGoalieStats", {"player": {"name": "Goalie"}, "regularStats": {"W": 40}}),
        )

        out = json.loads(await tools.get_league_leaders("nhl", season="2023-2024", limit=5))

        assert out["league"] == "nhl"
        assert out["season"] == "2023-2024"
        assert out["skaterLeaders"][0]["regularStats"]["PTS"] == 132
        assert out["goalieLeaders"][0]["regularStats"]["W"] == 40
        assert upstream.calls_to("GetLeagueSkaterLeaders") == [
            {"slug": "nhl", "season": "2023-2024", "limit": 5}
        ]

    @pytest.mark.asyncio
    async def test_leaders_error_has_context(self, upstream, executor) -> None:
        upstream.on("GetLeagueSkaterLeaders", lambda v: {"errors": [{"message": "oops"}]})
        upstream.on("GetLeagueGoalieLeaders", lambda v: _edges("leagueGoalieStats"))

        with pytest.raises(UpstreamGraphQLError, match="^Failed to fetch league leaders: GraphQL Error: oops$"):
            await tools.get_league_leaders("nhl")

    @pytest.mark.asyncio
    async def test_leaders_requires_slug(self, upstream, executor) -> None:
        with pytest.raises(ValidationError):
            await tools.get_league_leaders("  ")
        assert upstream.calls == []

    @pytest.mark.asyncio
    async def test_standings(self, upstream, executor) -> None:
        rows = [{"team": {"name": f"Team {i}"}, "rank": i} for i in range(1, 5)]
        upstream.on(
            "GetLeagueStandings",
            lambda v: {"data": {"league": {"name": "NHL", "standings": {"edges": rows}}}},
        )

        out = json.loads(await tools.get_league_standings("nhl", limit=2))

        assert out["leagueName"] == "NHL"
        assert out["season"] == "current"
        assert out["totalTeams"] == 2
        assert [r["rank"] for r in out["standings"]] == [1, 2]

    @pytest.mark.asyncio
    async def test_standings_unknown_league(self, upstream, executor) -> None:
        upstream.on("GetLeagueStandings", lambda v: {"data": {"league": None}})

        with pytest.raises(NotFoundError, match="zzz"):
            await tools.get_league_standings("zzz")

    @pytest.mark.asyncio
    async def test_list_seasons(self, upstream, executor) -> None:
        upstream.on(
            "GetLeagueSeasons",
            lambda v: {
                "data": {
                    "league": {
                        "id": "7",
                        "name": "SHL",
                        "slug": "shl",
                        "seasons": {"edges": [{"slug": "2022-2023"}, {"slug": "2023-2024"}]},
                    }
                }
            },
        )

        out = json.loads(await tools.list_seasons("shl"))

        assert out["seasons"] == ["2022-2023", "2023-2024"]
        assert out["totalSeasons"] == 2
        assert out["league"]["name"] == "SHL"


class TestPlayerAndTeamTools:
    @pytest.mark.asyncio
    async def test_player_by_name(self, upstream, executor) -> None:
        upstream.on("SearchPlayers", lambda v: _edges("players", {"id": "296251"}))
        upstream.on(
            "GetPlayer",
            lambda v: {"data": {"player": {"id": v["id"], "name": "Connor McDavid", "slug": "connor-mcdavid"}}},
        )

        out = json.loads(await tools.get_player(playerName="McDavid"))

        assert out["name"] == "Connor McDavid"
        assert out["url"] == "https://www.eliteprospects.com/player/296251/connor-mcdavid"

    @pytest.mark.asyncio
    async def test_player_requires_id_or_name(self, upstream, executor) -> None:
        with pytest.raises(ValidationError):
            await tools.get_player()
        assert upstream.calls == []

    @pytest.mark.asyncio
    async def test_player_stats(self, upstream, executor) -> None:
        upstream.on("GetPlayerStats", lambda v: _edges("playerStats", {"season": {"slug": "2023-2024"}}))

        out = json.loads(await tools.get_player_stats(playerId="296251", league="nhl"))

        assert out["totalRecords"] == 1
        assert upstream.calls_to("GetPlayerStats") == [{"id": "296251", "league": "nhl", "limit": 50}]

    @pytest.mark.asyncio
    async def test_team_with_roster(self, upstream, executor) -> None:
        upstream.on("GetTeam", lambda v: {"data": {"team": {"id": "77", "name": "Edmonton Oilers", "slug": "edmonton-oilers"}}})
        upstream.on("GetTeamRoster", lambda v: _edges("teamRoster", {"player": {"name": "A"}}, {"player": {"name": "B"}}))

        out = json.loads(await tools.get_team(teamId="77"))

        assert out["url"] == "https://www.eliteprospects.com/team/77/edmonton-oilers"
        assert out["rosterCount"] == 2

    @pytest.mark.asyncio
    async def test_team_without_roster(self, upstream, executor) -> None:
        upstream.on("GetTeam", lambda v: {"data": {"team": {"id": "77", "name": "Edmonton Oilers"}}})

        out = json.loads(await tools.get_team(teamId="77", includeRoster=False))

        assert "roster" not in out
        assert upstream.calls_to("GetTeamRoster") == []

    @pytest.mark.asyncio
    async def test_game_logs_filters(self, upstream, executor) -> None:
        upstream.on("GetGameLogs", lambda v: _edges("gameLogs", {"id": "1"}, {"id": "2"}))

        out = json.loads(await tools.get_game_logs(player="296251", gameSeason="2023-2024", limit=2))

        assert out["filters"] == {"player": "296251", "gameSeason": "2023-2024"}
        assert out["totalLogs"] == 2
        assert upstream.calls_to("GetGameLogs")[0]["sort"] == "-game.dateTime"

    @pytest.mark.asyncio
    async def test_draft_picks(self, upstream, executor) -> None:
        upstream.on("GetDraftPicks", lambda v: _edges("draftTypeSelections", {"overall": 1}))

        out = json.loads(await tools.get_draft_picks(year="2015", round=1))

        assert out["draftType"] == "nhl-entry-draft"
        assert out["filters"] == {"year": "2015", "round": 1}
        assert out["totalPicks"] == 1


class TestExecuteGraphql:
    @pytest.mark.asyncio
    async def test_passes_through_data(self, upstream, executor) -> None:
        upstream.on(None, lambda v: {"data": {"player": {"name": "Connor McDavid"}}})

        out = json.loads(await tools.execute_graphql('{ player(id: 296251) { name } }'))
        assert out == {"player": {"name": "Connor McDavid"}}

    @pytest.mark.asyncio
    async def test_explicit_null_variables_sent(self, upstream, executor) -> None:
        upstream.on("Q", lambda v: {"data": {}})

        await tools.execute_graphql("query Q($t: ID) { games(team: $t) { edges { id } } }", {"t": None})
        assert upstream.calls_to("Q") == [{"t": None}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "select * from players", "player { id }"])
    async def test_rejects_non_graphql(self, query: str, upstream, executor) -> None:
        with pytest.raises(ValidationError):
            await tools.execute_graphql(query)
        assert upstream.calls == []

    @pytest.mark.asyncio
    async def test_error_annotated_with_hint(self, upstream, executor) -> None:
        message = 'Cannot query field "playerStatRecords" on type "Query".'
        upstream.on(None, lambda v: {"errors": [{"message": message}]})

        with pytest.raises(UpstreamGraphQLError) as info:
            await tools.execute_graphql("{ playerStatRecords { edges { id } } }")

        text = str(info.value)
        assert text.startswith(f"GraphQL query failed: GraphQL Error: {message}")
        assert "introspect_schema" in text
        assert "leagueSkaterStats" in text


class TestReferenceTools:
    @pytest.fixture
    def generated(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EP_GENERATED_DIR", str(tmp_path))
        (tmp_path / "queries.json").write_text(
            json.dumps(
                [
                    {"name": "player", "description": "One player", "returnType": "Player"},
                    {"name": "leagueStandings", "description": "Standings", "returnType": "StandingsConnection"},
                ]
            )
        )
        (tmp_path / "types.json").write_text(json.dumps([{"name": "Player", "kind": "OBJECT"}]))
        (tmp_path / "enums.json").write_text(json.dumps([{"name": "Position", "values": ["C", "D"]}]))
        (tmp_path / "reference-data.json").write_text(
            json.dumps(
                {
                    "leagues": [{"slug": "nhl"}, {"slug": "ahl"}, {"slug": "shl"}],
                    "currentSeason": "2025-2026",
                }
            )
        )
        return tmp_path

    @pytest.mark.asyncio
    async def test_introspect_query(self, generated) -> None:
        out = json.loads(await tools.introspect_schema(queryName="player"))
        assert out["returnType"] == "Player"

    @pytest.mark.asyncio
    async def test_introspect_unknown_type(self, generated) -> None:
        out = json.loads(await tools.introspect_schema(typeName="Referee"))
        assert out["error"] == "Type 'Referee' not found"
        assert out["availableTypes"] == ["Player"]

    @pytest.mark.asyncio
    async def test_introspect_summary(self, generated) -> None:
        out = json.loads(await tools.introspect_schema())
        assert out["summary"] == {"totalQueries": 2, "totalTypes": 1, "totalEnums": 1}

    @pytest.mark.asyncio
    async def test_list_leagues_paginated(self, generated) -> None:
        out = json.loads(await tools.list_leagues(limit=2))
        assert [lg["slug"] for lg in out["leagues"]] == ["nhl", "ahl"]
        assert out["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}

    @pytest.mark.asyncio
    async def test_list_leagues_default_limit_reported(self, generated) -> None:
        out = json.loads(await tools.list_leagues(limit=0))
        assert len(out["leagues"]) == 3
        assert out["pagination"]["limit"] == 100
        assert out["pagination"]["hasMore"] is False

    @pytest.mark.asyncio
    async def test_current_season(self, generated) -> None:
        out = json.loads(await tools.get_current_season())
        assert out["currentSeason"] == "2025-2026"

    @pytest.mark.asyncio
    async def test_draft_types(self, upstream, executor) -> None:
        upstream.on("GetDraftTypes", lambda v: _edges("draftTypes", {"slug": "nhl-entry-draft"}))

        out = json.loads(await tools.list_draft_types())
        assert out["total"] == 1
        assert out["draftTypes"][0]["slug"] == "nhl-entry-draft"


class TestMcpArguments:
    """Calls go through FastMCP so the argument schema is exercised."""

    @pytest.mark.asyncio
    async def test_schema_uses_api_argument_names(self) -> None:
        listed = {t.name: set(t.inputSchema["properties"]) for t in await mcp.list_tools()}

        assert {"playerId", "playerIds", "teamId", "teamIds", "dateFrom", "dateTo"} <= listed["get_games"]
        assert {"searchTerm", "entityType", "limit"} <= listed["search_entities"]
        assert {"leagueSlug", "season", "limit"} <= listed["get_league_leaders"]
        assert "team_ids" not in listed["get_games"]

    @pytest.mark.asyncio
    async def test_get_games_team_ids_fan_out(self, upstream, executor) -> None:
        upstream.on("GetGames", lambda v: games_body(game(f"G{v['team']}", "2024-01-02T00:00:00Z", v["team"], "9")))

        await mcp.call_tool("get_games", {"teamIds": ["1", "2"], "dateFrom": "2024-01-01"})

        calls = upstream.calls_to("GetGames")
        assert sorted(v["team"] for v in calls) == ["1", "2"]
        assert all(v["dateFrom"] == "2024-01-01" for v in calls)

    @pytest.mark.asyncio
    async def test_search_entities_search_term(self, upstream, executor) -> None:
        upstream.on("SearchPlayers", lambda v: _edges("players", {"id": "296251"}))

        await mcp.call_tool("search_entities", {"searchTerm": "McDavid", "entityType": "player"})

        assert upstream.calls_to("SearchPlayers") == [{"q": "McDavid", "limit": 10}]

    @pytest.mark.asyncio
    async def test_league_leaders_league_slug(self, upstream, executor) -> None:
        upstream.on("GetLeagueSkaterLeaders", lambda v: _edges("leagueSkaterStats"))
        upstream.on("GetLeagueGoalieLeaders", lambda v: _edges("leagueGoalieStats"))

        await mcp.call_tool("get_league_leaders", {"leagueSlug": "shl", "limit": 3})

        assert upstream.calls_to("GetLeagueGoalieLeaders") == [{"slug": "shl", "limit": 3}]

    @pytest.mark.asyncio
    async def test_validation_error_reported_as_tool_error(self, upstream, executor) -> None:
        with pytest.raises(ToolError, match="dateTo"):
            await mcp.call_tool("get_games", {"teamId": "1", "dateTo": "2024-13-40"})
        assert upstream.calls == []
