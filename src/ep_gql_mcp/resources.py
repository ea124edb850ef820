"""MCP resources: generated schema, reference lists and usage guides."""

from __future__ import annotations

import json
from typing import Any

from ep_gql_mcp import reference
from ep_gql_mcp.server import mcp

_JSON = "application/json"

POSITION_NAMES = {
    "C": "Center",
    "LW": "Left Wing",
    "RW": "Right Wing",
    "D": "Defenseman",
    "G": "Goalie",
    "F": "Forward",
    "W": "Winger",
}


def _render(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# schema://
# ---------------------------------------------------------------------------


@mcp.resource(
    "schema://queries",
    name="GraphQL Queries",
    description="Available GraphQL root queries",
    mime_type=_JSON,
)
def schema_queries() -> str:
    queries = reference.load_queries()
    return _render(
        {
            "totalQueries": len(queries),
            "queries": queries[:100],
            "note": "Use the introspect_schema tool to get details about a specific query.",
        }
    )


@mcp.resource(
    "schema://types",
    name="GraphQL Types",
    description="Key GraphQL types (Player, Team, League, etc.)",
    mime_type=_JSON,
)
def schema_types() -> str:
    types = reference.load_types()
    return _render(
        {
            "totalTypes": len(types),
            "types": types[:50],
            "note": "Use introspect_schema with typeName to get details about a specific type.",
        }
    )


@mcp.resource(
    "schema://enums",
    name="GraphQL Enums",
    description="Enumeration values (positions, statuses, etc.)",
    mime_type=_JSON,
)
def schema_enums() -> str:
    enums = reference.load_enums()
    return _render({"totalEnums": len(enums), "enums": enums[:50]})


# ---------------------------------------------------------------------------
# reference://
# ---------------------------------------------------------------------------


@mcp.resource(
    "reference://leagues",
    name="Leagues Reference",
    description="Leagues with their slugs",
    mime_type=_JSON,
)
def reference_leagues() -> str:
    leagues = reference.load_reference_data()["leagues"]
    return _render(
        {
            "leagues": leagues,
            "total": len(leagues),
            "note": "Use league slugs (e.g., 'nhl', 'ahl') in queries.",
        }
    )


@mcp.resource(
    "reference://countries",
    name="Countries Reference",
    description="Country codes and names",
    mime_type=_JSON,
)
def reference_countries() -> str:
    countries = reference.load_reference_data()["countries"]
    return _render(
        {
            "countries": countries,
            "total": len(countries),
            "note": "Country codes are ISO 3166-1 alpha-2, e.g. 'CA', 'US', 'SE', 'FI'.",
        }
    )


@mcp.resource(
    "reference://positions",
    name="Player Positions",
    description="Valid player positions (C, LW, RW, D, G, etc.)",
    mime_type=_JSON,
)
def reference_positions() -> str:
    positions = reference.load_reference_data()["positions"]
    return _render(
        {
            "positions": positions,
            "positionDescriptions": {p: POSITION_NAMES.get(p, p) for p in positions},
        }
    )


@mcp.resource(
    "reference://seasons",
    name="Season Format Guide",
    description="Season format guide (YYYY-YYYY)",
    mime_type=_JSON,
)
def reference_seasons() -> str:
    data = reference.load_reference_data()
    return _render(
        {
            "seasonFormat": data["seasonFormat"],
            "currentSeason": data["currentSeason"],
            "examples": ["2023-2024", "2022-2023", "2021-2022"],
        }
    )


# ---------------------------------------------------------------------------
# guide://
# ---------------------------------------------------------------------------

_COMMON_QUERIES = [
    {
        "description": "Player profile by ID",
        "query": "{ player(id: 296251) { name position nationality { name } } }",
    },
    {
        "description": "NHL standings for the current season",
        "query": '{ league(slug: "nhl") { standings { edges { team { name } stats { PTS } rank } } } }',
    },
    {
        "description": "Player statistics for a season",
        "query": (
            '{ playerStats(player: 296251, season: "2023-2024") '
            "{ edges { league { name } regularStats { GP G A PTS } } } }"
        ),
    },
    {
        "description": "Search for players",
        "query": '{ players(q: "McDavid", limit: 5) { edges { id name position } } }',
    },
    {
        "description": "Team roster",
        "query": "{ teamRoster(team: 123) { edges { player { name position } jerseyNumber } } }",
    },
]

_TERMINOLOGY = {
    "skater": {
        "GP": "Games Played",
        "G": "Goals",
        "A": "Assists",
        "PTS": "Points (Goals + Assists)",
        "PIM": "Penalty Minutes",
        "PM": "Plus/Minus",
        "PPG": "Power Play Goals",
        "SHG": "Short Handed Goals",
        "GWG": "Game Winning Goals",
        "SOG": "Shots on Goal",
        "TOI": "Time on Ice",
    },
    "goalie": {
        "GP": "Games Played",
        "W": "Wins",
        "L": "Losses",
        "GAA": "Goals Against Average",
        "SVP": "Save Percentage",
        "SO": "Shutouts",
        "SA": "Shots Against",
        "SV": "Saves",
    },
    "team": {
        "W": "Wins",
        "L": "Losses",
        "T": "Ties",
        "OTW": "Overtime Wins",
        "OTL": "Overtime Losses",
        "PTS": "Points",
        "GF": "Goals For",
        "GA": "Goals Against",
        "GD": "Goal Differential",
    },
}


@mcp.resource(
    "guide://common-queries",
    name="Common Query Examples",
    description="Examples of common GraphQL queries",
    mime_type=_JSON,
)
def guide_common_queries() -> str:
    return _render(
        {
            "examples": _COMMON_QUERIES,
            "note": "Run these with execute_graphql. Stat field names are UPPERCASE.",
        }
    )


@mcp.resource(
    "guide://hockey-terminology",
    name="Hockey Terminology",
    description="Hockey stats abbreviations and terminology",
    mime_type=_JSON,
)
def guide_hockey_terminology() -> str:
    return _render({"stats": _TERMINOLOGY, "positions": POSITION_NAMES})
