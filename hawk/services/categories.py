# hawk/services/categories.py
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from hawk.schemas.league import Direction, LeagueInfo
from hawk.schemas.stats import CategoryCell, CategoryStatsRow, CategoryStatsView
from hawk.schemas.team import TeamRecord
from hawk.services.aggregation import Timespan, aggregate
from hawk.services.formatting import (
    format_percent_diff,
    format_value,
    heat_intensity,
    ordinal,
    percent_diff_tone,
    timespan_label,
)
from hawk.services.ranking.category_stats import build_category_table
from hawk.services.yahoo.parsers import (
    parse_league_settings,
    parse_season_team_records,
    parse_weekly_scoreboards,
)

logger = logging.getLogger(__name__)


def sort_rows(
    rows: List[CategoryStatsRow],
    column: str = "team",
    descending: Optional[bool] = None,
) -> List[CategoryStatsRow]:
    """
    Order table rows by team name (default ascending) or by a stat_id's raw
    value (default descending). Rows without that cell sort as 0.
    """
    if descending is None:
        descending = column != "team"
    if column == "team":
        return sorted(rows, key=lambda r: r.team_name.casefold(), reverse=descending)

    def _value(r: CategoryStatsRow) -> float:
        cell = r.cells.get(column)
        return cell.ranking.value if cell else 0.0

    return sorted(rows, key=_value, reverse=descending)


def build_category_stats_view(
    league: LeagueInfo,
    records: Iterable[TeamRecord],
    timespan: Timespan | str,
    weeks_included: Optional[Iterable[int]] = None,
    directions: Optional[Mapping[str, Direction | str]] = None,
    sort_by: str = "team",
    descending: Optional[bool] = None,
) -> CategoryStatsView:
    """
    Records (season totals, or per-week rows for a rolling window) -> the
    category table: aggregate, rank per scoring category, then format cells.
    """
    ts = Timespan(timespan)
    records = list(records)
    teams = aggregate(records, ts, league.percentage_stat_ids())

    if weeks_included is None:
        weeks = sorted({r.week for r in records if r.week is not None}) if ts is not Timespan.SEASON else []
    else:
        weeks = sorted(set(weeks_included))
    num_weeks = len(weeks) or 1
    weekly_average = ts is not Timespan.SEASON

    scoring = league.scoring_categories()
    table = build_category_table(teams, scoring, directions)

    rows: List[CategoryStatsRow] = []
    for team in teams:
        cells = {}
        for cat in scoring:
            r = table.get(team.team_key, {}).get(cat.stat_id)
            if r is None:
                continue
            cells[cat.stat_id] = CategoryCell(
                ranking=r,
                display_value=format_value(r.value, cat, num_weeks=num_weeks, weekly_average=weekly_average),
                display_diff=format_percent_diff(r.percent_diff),
                display_rank=ordinal(r.rank),
                # tone follows the raw diff, not the category direction
                tone=percent_diff_tone(r.percent_diff),
                intensity=heat_intensity(r.percent_diff),
            )
        rows.append(CategoryStatsRow(team_key=team.team_key, team_name=team.team_name, cells=cells))

    current_week = max(weeks) if weeks else league.current_week
    return CategoryStatsView(
        league_key=league.league_key,
        timespan=ts.value,
        label=timespan_label(ts, current_week, weeks),
        num_weeks=num_weeks,
        weeks_included=weeks,
        columns=[c.stat_id for c in scoring],
        rows=sort_rows(rows, sort_by, descending),
    )


def category_stats_from_payloads(
    settings_payload: Any,
    timespan: Timespan | str,
    standings_payload: Any = None,
    weekly_data: Any = None,
    directions: Optional[Mapping[str, Direction | str]] = None,
) -> Optional[CategoryStatsView]:
    """
    Raw proxy responses in, table out. Season reads team_stats off the
    standings payload; other timespans read the [{week, data}] scoreboard bundle.
    Returns None when the league settings can't be read.
    """
    league = parse_league_settings(settings_payload)
    if league is None:
        logger.warning("Category stats unavailable: league settings could not be parsed")
        return None

    ts = Timespan(timespan)
    weeks_included = None
    if ts is Timespan.SEASON:
        records = parse_season_team_records(standings_payload) if standings_payload is not None else []
    else:
        records = parse_weekly_scoreboards(weekly_data)
        if isinstance(weekly_data, dict) and isinstance(weekly_data.get("weeksIncluded"), list):
            weeks_included = [w for w in weekly_data["weeksIncluded"] if isinstance(w, int)]

    return build_category_stats_view(league, records, ts, weeks_included=weeks_included, directions=directions)
