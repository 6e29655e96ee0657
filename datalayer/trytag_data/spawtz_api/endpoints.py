"""Spawtz league site endpoint helpers."""

from __future__ import annotations

from typing import Optional

from .client import FetchClient

LEAGUE_LIST = "/ActionController/LeagueList"
STANDINGS = "/Leagues/Standings"
FIXTURES = "/Leagues/Fixtures"
STATISTICS = "/Leagues/Statistics"
TEAM_PROFILE = "/Leagues/TeamProfile"


def division_params(league_id: int, season_id: int, division_id: int) -> dict[str, int]:
    return {
        "VenueId": 0,
        "LeagueId": league_id,
        "SeasonId": season_id,
        "DivisionId": division_id,
    }


def get_league_list(client: FetchClient) -> str:
    return client.fetch(LEAGUE_LIST)


def get_standings(
    client: FetchClient, league_id: int, season_id: int, division_id: int
) -> str:
    return client.fetch_with_params(STANDINGS, division_params(league_id, season_id, division_id))


def get_fixtures(
    client: FetchClient, league_id: int, season_id: int, division_id: int
) -> str:
    return client.fetch_with_params(FIXTURES, division_params(league_id, season_id, division_id))


def get_statistics(
    client: FetchClient, league_id: int, season_id: int, division_id: int
) -> str:
    return client.fetch_with_params(
        STATISTICS, division_params(league_id, season_id, division_id)
    )


def get_team_profile(
    client: FetchClient,
    team_id: int,
    *,
    league_id: Optional[int] = None,
    season_id: Optional[int] = None,
    division_id: Optional[int] = None,
) -> str:
    params: dict[str, int] = {"TeamId": team_id, "VenueId": 0}
    if league_id:
        params["LeagueId"] = league_id
    if season_id:
        params["SeasonId"] = season_id
    if division_id:
        params["DivisionId"] = division_id
    return client.fetch_with_params(TEAM_PROFILE, params)
