"""Page parsers: raw HTML in, validated records out."""

from .fixtures import parse_fixtures
from .league_list import LeagueList, clean_league_name, infer_region, parse_league_list
from .standings import StandingsPage, parse_standings
from .statistics import StatisticsPage, parse_statistics
from .team_profile import parse_team_profile

__all__ = [
    "LeagueList",
    "StandingsPage",
    "StatisticsPage",
    "clean_league_name",
    "infer_region",
    "parse_fixtures",
    "parse_league_list",
    "parse_standings",
    "parse_statistics",
    "parse_team_profile",
]
