# hawk/services/ranking/category_stats.py
from __future__ import annotations

import logging
import math
from collections import defaultdict
from statistics import pstdev
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from hawk.schemas.league import CategoryDefinition, Direction
from hawk.schemas.stats import (
    CategoryRanking,
    CategoryStanding,
    CategoryTrend,
    Classification,
    LeagueComparison,
    TeamCategoryProfile,
    TrendLabel,
    WeekRank,
)
from hawk.schemas.team import AggregatedTeamStats, TeamRecord
from hawk.services.formatting import ordinal

logger = logging.getLogger(__name__)


# ========= Classification / trend config =========

# percentile cut points (percentile = 100 * (N - rank) / (N - 1))
ELITE_PERCENTILE = 75.0
STRONG_PERCENTILE = 50.0
AVERAGE_PERCENTILE = 25.0

# rank movement (earlier-half mean minus recent-half mean) that counts as a trend
TREND_CHANGE_THRESHOLD = 2

# how many strengths / weaknesses a profile lists
PROFILE_HIGHLIGHTS = 3

TeamValues = Union[Mapping[str, float], Iterable[Tuple[str, float]]]


# ========= Direction table =========

def resolve_direction(
    category: CategoryDefinition,
    overrides: Optional[Mapping[str, Direction | str]] = None,
) -> Direction:
    if overrides and category.stat_id in overrides:
        return Direction(overrides[category.stat_id])
    return category.direction


def build_direction_table(
    categories: Iterable[CategoryDefinition],
    overrides: Optional[Mapping[str, Direction | str]] = None,
) -> Dict[str, Direction]:
    """{stat_id: Direction} for scoring categories; overrides beat the league defaults."""
    return {c.stat_id: resolve_direction(c, overrides) for c in categories if c.is_scoring}


# ========= Math helpers =========

def _finite(v) -> float:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return 0.0
    return f if math.isfinite(f) else 0.0


def _pairs(values: TeamValues) -> List[Tuple[str, float]]:
    """One (team_key, value) per team; a repeated team_key keeps its first value."""
    items = values.items() if isinstance(values, Mapping) else values
    out: List[Tuple[str, float]] = []
    seen: set[str] = set()
    for k, v in items:
        key = str(k)
        if key in seen:
            logger.debug("Duplicate value for team %s ignored", key)
            continue
        seen.add(key)
        out.append((key, _finite(v)))
    return out


def league_average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std_dev(values: Sequence[float]) -> float:
    if len(values) <= 1:
        return 0.0
    return pstdev(values)


def percent_diff(value: float, avg: float) -> float:
    if avg == 0:
        return 0.0
    return (value - avg) / avg * 100


def z_score(value: float, mean: float, std: float) -> float:
    if std == 0:
        return 0.0
    return (value - mean) / std


def percentile_from_rank(rank: int, total_teams: int) -> float:
    if total_teams <= 1:
        return 100.0
    return 100 * (total_teams - rank) / (total_teams - 1)


def classify_percentile(percentile: float) -> Classification:
    if percentile >= ELITE_PERCENTILE:
        return "elite"
    if percentile >= STRONG_PERCENTILE:
        return "strong"
    if percentile >= AVERAGE_PERCENTILE:
        return "average"
    return "weak"


def _js_round(x: float) -> int:
    # half-up, not banker's rounding
    return math.floor(x + 0.5)


# ========= Ranking =========

def _ordered(pairs: List[Tuple[str, float]], direction: Direction) -> List[Tuple[str, float]]:
    """
    Best first. Ties are broken by first-seen position in the input, never shared:
    two teams on the same value get consecutive ranks in input order.
    """
    sign = -1.0 if Direction(direction) is Direction.HIGHER else 1.0
    indexed = list(enumerate(pairs))
    indexed.sort(key=lambda t: (sign * t[1][1], t[0]))
    return [p for _, p in indexed]


def rank_category(
    values: TeamValues,
    direction: Direction | str = Direction.HIGHER,
    stat_id: str = "",
) -> Dict[str, CategoryRanking]:
    """
    {team_key: value} for one stat across the whole league -> {team_key: CategoryRanking}.
    Result keys follow rank order (1st first).
    """
    pairs = _pairs(values)
    if not pairs:
        return {}
    avg = league_average([v for _, v in pairs])
    total = len(pairs)
    out: Dict[str, CategoryRanking] = {}
    for i, (team_key, value) in enumerate(_ordered(pairs, Direction(direction))):
        out[team_key] = CategoryRanking(
            stat_id=str(stat_id),
            team_key=team_key,
            value=value,
            league_avg=avg,
            percent_diff=percent_diff(value, avg),
            rank=i + 1,
            total_teams=total,
        )
    return out


def rank_category_standings(
    values: TeamValues,
    direction: Direction | str = Direction.HIGHER,
    stat_id: str = "",
) -> Dict[str, CategoryStanding]:
    """
    rank_category plus z-score, percentile and classification.
    z-score is sign-flipped for lower-is-better stats so positive always means "good".
    """
    pairs = _pairs(values)
    rankings = rank_category(pairs, direction, stat_id)
    if not rankings:
        return {}
    vals = [v for _, v in pairs]
    mean = league_average(vals)
    std = population_std_dev(vals)
    flip = Direction(direction) is Direction.LOWER

    out: Dict[str, CategoryStanding] = {}
    for team_key, r in rankings.items():
        z = z_score(r.value, mean, std)
        if flip:
            z = -z
        pct = percentile_from_rank(r.rank, r.total_teams)
        out[team_key] = CategoryStanding(
            **r.model_dump(),
            z_score=z,
            percentile=pct,
            classification=classify_percentile(pct),
        )
    return out


def _category_values(teams: Sequence[AggregatedTeamStats | TeamRecord], stat_id: str) -> Dict[str, float]:
    return {t.team_key: t.value(stat_id) for t in teams}


def _scoring(categories: Iterable[CategoryDefinition]) -> List[CategoryDefinition]:
    seen: set[str] = set()
    out: List[CategoryDefinition] = []
    for c in categories:
        if c.is_scoring and c.stat_id not in seen:
            seen.add(c.stat_id)
            out.append(c)
    return out


def build_category_table(
    teams: Sequence[AggregatedTeamStats | TeamRecord],
    categories: Iterable[CategoryDefinition],
    directions: Optional[Mapping[str, Direction | str]] = None,
) -> Dict[str, Dict[str, CategoryRanking]]:
    """
    {team_key: {stat_id: CategoryRanking}} for every scoring category.
    Display-only stats and stat ids the league doesn't define are never ranked.
    """
    result: Dict[str, Dict[str, CategoryRanking]] = {t.team_key: {} for t in teams}
    for cat in _scoring(categories):
        ranked = rank_category(
            _category_values(teams, cat.stat_id),
            resolve_direction(cat, directions),
            cat.stat_id,
        )
        for team_key, r in ranked.items():
            result[team_key][cat.stat_id] = r
    return result


# ========= Profiles & comparison =========

def _highlight(cat: CategoryDefinition, rank: int) -> str:
    return f"{cat.abbr or cat.label} ({ordinal(rank)})"


def build_team_profiles(
    teams: Sequence[AggregatedTeamStats | TeamRecord],
    categories: Iterable[CategoryDefinition],
    directions: Optional[Mapping[str, Direction | str]] = None,
) -> List[TeamCategoryProfile]:
    """Per-team category standings sorted best-first, with top strengths and weaknesses."""
    cats = _scoring(categories)
    by_team: Dict[str, List[Tuple[CategoryDefinition, CategoryStanding]]] = {t.team_key: [] for t in teams}

    for cat in cats:
        standings = rank_category_standings(
            _category_values(teams, cat.stat_id),
            resolve_direction(cat, directions),
            cat.stat_id,
        )
        for team_key, s in standings.items():
            by_team[team_key].append((cat, s))

    out: List[TeamCategoryProfile] = []
    for t in teams:
        rows = sorted(by_team[t.team_key], key=lambda cs: cs[1].rank)  # stable → category order on ties
        strengths = [
            _highlight(c, s.rank) for c, s in rows if s.classification in ("elite", "strong")
        ][:PROFILE_HIGHLIGHTS]
        weaknesses = [_highlight(c, s.rank) for c, s in rows if s.classification == "weak"][:PROFILE_HIGHLIGHTS]
        out.append(TeamCategoryProfile(
            team_key=t.team_key,
            team_name=t.team_name,
            categories=[s for _, s in rows],
            strengths=strengths,
            weaknesses=weaknesses,
        ))
    return out


def build_league_comparison(
    teams: Sequence[AggregatedTeamStats | TeamRecord],
    categories: Iterable[CategoryDefinition],
) -> LeagueComparison:
    averages: Dict[str, float] = {}
    std_devs: Dict[str, float] = {}
    for cat in _scoring(categories):
        vals = list(_category_values(teams, cat.stat_id).values())
        averages[cat.stat_id] = round(league_average(vals), 2)
        std_devs[cat.stat_id] = round(population_std_dev(vals), 2)
    return LeagueComparison(league_averages=averages, league_std_devs=std_devs)


# ========= Trends =========

def determine_trend(ranks: Sequence[int]) -> Tuple[TrendLabel, int]:
    """
    Compare the mean rank of the earlier half with the recent half.
    Returns (label, change) where a positive change means the team climbed.
    """
    if len(ranks) < 2:
        return "stable", 0
    n = len(ranks)
    recent = league_average(list(ranks[-math.ceil(n / 2):]))
    earlier = league_average(list(ranks[: n // 2]))
    change = _js_round(earlier - recent)
    if change >= TREND_CHANGE_THRESHOLD:
        return "improving", change
    if change <= -TREND_CHANGE_THRESHOLD:
        return "declining", change
    return "stable", change


def build_category_trends(
    records: Iterable[TeamRecord],
    categories: Iterable[CategoryDefinition],
    team_key: str,
    directions: Optional[Mapping[str, Direction | str]] = None,
) -> List[CategoryTrend]:
    """
    Week-by-week rank of one team in each scoring category, ranked against the
    teams that reported that week. Records without a week are ignored.
    """
    by_week: Dict[int, List[TeamRecord]] = defaultdict(list)
    for rec in records:
        if rec.week is not None:
            by_week[rec.week].append(rec)

    out: List[CategoryTrend] = []
    for cat in _scoring(categories):
        direction = resolve_direction(cat, directions)
        points: List[WeekRank] = []
        for week in sorted(by_week):
            ranked = rank_category(_category_values(by_week[week], cat.stat_id), direction, cat.stat_id)
            mine = ranked.get(team_key)
            if mine is not None:
                points.append(WeekRank(week=week, rank=mine.rank, value=mine.value))
        label, change = determine_trend([p.rank for p in points])
        out.append(CategoryTrend(
            stat_id=cat.stat_id,
            label=cat.label,
            weeks=points,
            trend=label,
            rank_change=change,
        ))
    return out
