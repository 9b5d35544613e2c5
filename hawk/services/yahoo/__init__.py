"""
Yahoo payload normalization: raw fantasy_content trees in, typed records out.

Parsers log through module loggers and never configure handlers; scripts and
notebooks call hawk.core.logging.configure_logging() once to see them.
"""

from hawk.services.yahoo.stat_values import parse_stat_value, is_fraction_value
from hawk.services.yahoo.parsers import (
    fail_soft,
    iter_indexed,
    merge_properties,
    find_slot,
    parse_stats_block,
    parse_team_record,
    parse_league_settings,
    parse_standings,
    parse_season_team_records,
    parse_scoreboard_team_records,
    parse_weekly_scoreboards,
    parse_leagues,
)

__all__ = [
    "parse_stat_value",
    "is_fraction_value",
    "fail_soft",
    "iter_indexed",
    "merge_properties",
    "find_slot",
    "parse_stats_block",
    "parse_team_record",
    "parse_league_settings",
    "parse_standings",
    "parse_season_team_records",
    "parse_scoreboard_team_records",
    "parse_weekly_scoreboards",
    "parse_leagues",
]
