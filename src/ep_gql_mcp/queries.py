"""GraphQL documents issued against the EliteProspects API.

Introspection is disabled on the production endpoint, so every field
selected here is fixed at authoring time.
"""

SEARCH_QUERIES: dict[str, str] = {
    "player": """
query SearchPlayers($q: String!, $limit: Int) {
  players(q: $q, limit: $limit) {
    edges {
      id
      name
      slug
      position
      latestStats { teamName leagueName }
    }
  }
}
""",
    "team": """
query SearchTeams($q: String!, $limit: Int) {
  teams(q: $q, limit: $limit) {
    edges {
      id
      name
      slug
      country { name slug }
      league { name slug }
    }
  }
}
""",
    "league": """
query SearchLeagues($q: String!, $limit: Int) {
  leagues(q: $q, limit: $limit) {
    edges {
      id
      name
      slug
      country { name slug }
    }
  }
}
""",
    "staff": """
query SearchStaff($q: String!, $limit: Int) {
  staff(q: $q, limit: $limit) {
    edges {
      id
      name
      slug
      latestStats { role teamName }
    }
  }
}
""",
}

# Root field of each search query, keyed by entity kind
SEARCH_ROOTS: dict[str, str] = {
    "player": "players",
    "team": "teams",
    "league": "leagues",
    "staff": "staff",
}

PLAYER_TEAMS = """
query GetPlayerTeams($player: ID!, $league: String, $season: String) {
  playerStats(player: $player, league: $league, season: $season, limit: 100) {
    edges {
      team { id name }
      season { slug }
      league { slug }
    }
  }
}
"""

GAMES = """
query GetGames(
  $league: String
  $season: String
  $team: ID
  $dateFrom: String
  $dateTo: String
  $limit: Int
  $sort: String
) {
  games(
    league: $league
    season: $season
    team: $team
    dateFrom: $dateFrom
    dateTo: $dateTo
    limit: $limit
    sort: $sort
  ) {
    edges {
      id
      dateTime
      homeTeam { id name slug }
      visitingTeam { id name slug }
      homeTeamScore
      visitingTeamScore
      status
      league { name slug }
      season { slug }
      gameLogs {
        edges {
          player { id }
          team { id }
          SOG
        }
      }
    }
  }
}
"""

GAME_LOGS = """
query GetGameLogs(
  $id: ID
  $player: ID
  $game: ID
  $gameLeague: String
  $gameSeason: String
  $gameDateFrom: String
  $gameDateTo: String
  $team: ID
  $opponent: ID
  $limit: Int
  $sort: String
) {
  gameLogs(
    id: $id
    player: $player
    game: $game
    gameLeague: $gameLeague
    gameSeason: $gameSeason
    gameDateFrom: $gameDateFrom
    gameDateTo: $gameDateTo
    team: $team
    opponent: $opponent
    limit: $limit
    sort: $sort
  ) {
    edges {
      id
      game { id dateTime status homeTeamScore visitingTeamScore }
      team { id name slug }
      opponent { id name slug }
      gameType
      teamScore
      opponentScore
      outcome
      player { id name position }
      jerseyNumber
      playerRole
      stats { TOI SOG G A PTS PIM PM PPG SHG SA SV GA SVP }
      updatedAt
    }
  }
}
"""

PLAYER = """
query GetPlayer($id: ID!) {
  player(id: $id) {
    id
    name
    slug
    position
    nationality { name }
    dateOfBirth
    placeOfBirth
    height
    weight
    shoots
    currentTeam {
      id
      name
      slug
      league { name slug }
    }
    playerType
    status
  }
}
"""

PLAYER_STATS = """
query GetPlayerStats($id: ID!, $season: String, $league: String, $limit: Int) {
  playerStats(player: $id, season: $season, league: $league, limit: $limit) {
    edges {
      id
      season { slug }
      league { name slug }
      team { id name slug }
      regularStats { GP G A PTS PIM PM PPG SHG GWG SOG }
      postseasonStats { GP G A PTS }
    }
  }
}
"""

TEAM = """
query GetTeam($id: ID!) {
  team(id: $id) {
    id
    name
    slug
    country { name slug }
    league { id name slug }
    founded
    arena { name city }
  }
}
"""

TEAM_ROSTER = """
query GetTeamRoster($id: ID!) {
  teamRoster(team: $id) {
    edges {
      id
      player { id name slug position nationality { name } }
      jerseyNumber
      position
      status
    }
  }
}
"""

LEAGUE_STANDINGS = """
query GetLeagueStandings($slug: String!, $season: String) {
  league(slug: $slug) {
    id
    name
    slug
    standings(season: $season) {
      edges {
        id
        team { id name slug }
        stats { GP W L T OTW OTL PTS GF GA GD PPG }
        rank
      }
    }
  }
}
"""

LEAGUE_SKATER_LEADERS = """
query GetLeagueSkaterLeaders($slug: String!, $season: String, $limit: Int) {
  leagueSkaterStats(slug: $slug, season: $season, limit: $limit, sort: "-regularStats.PTS") {
    edges {
      id
      player { id name slug position }
      team { name slug }
      regularStats { GP G A PTS PM PIM }
    }
  }
}
"""

LEAGUE_GOALIE_LEADERS = """
query GetLeagueGoalieLeaders($slug: String!, $season: String, $limit: Int) {
  leagueGoalieStats(slug: $slug, season: $season, limit: $limit, sort: "-regularStats.W") {
    edges {
      id
      player { id name slug }
      team { name slug }
      regularStats { GP W L GAA SVP SO }
    }
  }
}
"""

LEAGUE_SEASONS = """
query GetLeagueSeasons($slug: String!) {
  league(slug: $slug) {
    id
    name
    slug
    seasons { edges { id slug } }
  }
}
"""

DRAFT_PICKS = """
query GetDraftPicks(
  $draftTypeSlug: String!
  $year: String
  $team: ID
  $player: ID
  $round: Int
  $limit: Int
) {
  draftTypeSelections(
    slug: $draftTypeSlug
    year: $year
    team: $team
    player: $player
    round: $round
    limit: $limit
  ) {
    edges {
      id
      year
      round
      overall
      team { id name slug }
      player { id name slug position nationality { name } }
    }
  }
}
"""

DRAFT_TYPES = """
query GetDraftTypes {
  draftTypes(limit: 50) {
    edges { id slug name }
  }
}
"""
