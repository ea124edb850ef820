"""Corrective hints for GraphQL errors that agents commonly trigger."""

from __future__ import annotations

import re

_LOWERCASE_STAT = re.compile(r'Cannot query field "(gp|g|a|pts|pim|pm|gaa|svp|sog|toi)"')

# Misnamed root fields and what to use instead
_ROOT_FIELD_NOTES = {
    "playerstatrecords": (
        "Use playerStats, playerStatsLeagues, playerStatsSeasons, or leagueSkaterStats instead.\n"
        'Example: leagueSkaterStats(slug: "nhl", sort: "-regularStats.PTS") for points leaders.'
    ),
    "rookies": (
        'There is no "rookies" query. Filter leagueSkaterStats by age and games played.\n'
        'Example: leagueSkaterStats(slug: "nhl", playerAge: 25, regularStatsGPMax: 82, '
        'sort: "-regularStats.PTS")'
    ),
    "teamstats": (
        'Use leagueStandings for team statistics, not "teamStats".\n'
        'Example: leagueStandings(slug: "nhl") returns team records and goal differentials.'
    ),
}


def annotate_graphql_error(message: str) -> str:
    """Append hints to *message* for recognised mistakes.

    The original message is always kept in full at the start.
    """
    hints: list[str] = []
    lowered = message.lower()

    if "Cannot query field" in message and 'on type "Query"' in message:
        hints.append(
            "Hint: Use the introspect_schema tool or check guide://common-queries for examples."
        )
        hints.extend(note for name, note in _ROOT_FIELD_NOTES.items() if name in lowered)

    if _LOWERCASE_STAT.search(message):
        hints.append(
            "Note: Stat field names are UPPERCASE (GP, G, A, PTS, PIM, PM, GAA, SVP, SOG, TOI)."
        )

    if "must have a selection of subfields" in message or "must have a sub selection" in message:
        hints.append(
            "Note: Object-type fields require subfield selection.\n"
            'Example: country { name slug } instead of just "country".'
        )

    if not hints:
        return message
    return message + "\n\n" + "\n\n".join(hints)
