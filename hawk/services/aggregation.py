# hawk/services/aggregation.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

from hawk.core.config import settings
from hawk.schemas.team import AggregatedTeamStats, TeamRecord

logger = logging.getLogger(__name__)


class Timespan(str, Enum):
    THIS_WEEK = "this_week"
    LAST_3_WEEKS = "last_3_weeks"
    SEASON = "season"


def window_weeks(current_week: Optional[int], timespan: Timespan | str, span: Optional[int] = None) -> List[int]:
    """
    Weeks a timespan covers, oldest first.
      this_week    -> [w]
      last_3_weeks -> [max(1, w - span + 1) .. w]
      season       -> [1 .. w]
    """
    if current_week is None or current_week < 1:
        return []
    ts = Timespan(timespan)
    if ts is Timespan.THIS_WEEK:
        return [current_week]
    if ts is Timespan.SEASON:
        return list(range(1, current_week + 1))
    n = settings.ROLLING_WINDOW_WEEKS if span is None else span
    start = max(1, current_week - max(n, 1) + 1)
    return list(range(start, current_week + 1))


def aggregate_season(records: Iterable[TeamRecord]) -> List[AggregatedTeamStats]:
    """Season totals are already totals: copy them through, one row per team."""
    out: List[AggregatedTeamStats] = []
    seen: set[str] = set()
    for rec in records:
        if rec.team_key in seen:
            logger.debug("Duplicate season record for %s ignored", rec.team_key)
            continue
        seen.add(rec.team_key)
        out.append(AggregatedTeamStats(
            team_key=rec.team_key,
            team_name=rec.team_name,
            stats=dict(rec.stats),
        ))
    return out


def aggregate_weeks(
    records: Iterable[TeamRecord],
    percentage_stat_ids: Iterable[str] = (),
) -> List[AggregatedTeamStats]:
    """
    Sum per-week records into one row per team.

    Counting stats are summed. Percentage stats are not summable, so the value
    from the most recent week that reports the stat is kept, whatever order the
    records arrive in (records without a week fall back to input order).
    Teams come out in first-seen order; the name is taken from the first record.
    """
    pct_ids = {str(s) for s in percentage_stat_ids}
    names: Dict[str, str] = {}
    totals: Dict[str, Dict[str, float]] = {}
    pct_weeks: Dict[str, Dict[str, Optional[int]]] = {}
    weeks: Dict[str, List[int]] = {}

    for rec in records:
        key = rec.team_key
        if key not in totals:
            names[key] = rec.team_name
            totals[key] = {}
            pct_weeks[key] = {}
            weeks[key] = []
        acc = totals[key]
        for sid, val in rec.stats.items():
            if sid in pct_ids:
                seen_week = pct_weeks[key].get(sid)
                if sid not in acc or rec.week is None or seen_week is None or rec.week >= seen_week:
                    acc[sid] = val
                    pct_weeks[key][sid] = rec.week
            else:
                acc[sid] = acc.get(sid, 0.0) + val
        if rec.week is not None and rec.week not in weeks[key]:
            weeks[key].append(rec.week)

    return [
        AggregatedTeamStats(team_key=k, team_name=names[k], stats=totals[k], weeks=sorted(weeks[k]))
        for k in totals
    ]


def aggregate(
    records: Iterable[TeamRecord],
    timespan: Timespan | str,
    percentage_stat_ids: Iterable[str] = (),
) -> List[AggregatedTeamStats]:
    if Timespan(timespan) is Timespan.SEASON:
        return aggregate_season(records)
    return aggregate_weeks(records, percentage_stat_ids)
