from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict

Classification = Literal["elite", "strong", "average", "weak"]
TrendLabel = Literal["improving", "declining", "stable"]


class CategoryRanking(BaseModel):
    model_config = ConfigDict(frozen=True)

    stat_id: str
    team_key: str
    value: float
    league_avg: float
    percent_diff: float  # (value - avg) / avg * 100, 0 when avg is 0
    rank: int            # 1 = best under the stat's direction
    total_teams: int


class CategoryStanding(CategoryRanking):
    z_score: float
    percentile: float
    classification: Classification


class TeamCategoryProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_key: str
    team_name: str
    categories: List[CategoryStanding] = []
    strengths: List[str] = []
    weaknesses: List[str] = []


class LeagueComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    league_averages: Dict[str, float] = {}
    league_std_devs: Dict[str, float] = {}


class WeekRank(BaseModel):
    model_config = ConfigDict(frozen=True)

    week: int
    rank: int
    value: float


class CategoryTrend(BaseModel):
    model_config = ConfigDict(frozen=True)

    stat_id: str
    label: str
    weeks: List[WeekRank] = []
    trend: TrendLabel = "stable"
    rank_change: int = 0  # positive = climbed


class CategoryCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    ranking: CategoryRanking
    display_value: str
    display_diff: str
    display_rank: str
    tone: str
    intensity: float


class CategoryStatsRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_key: str
    team_name: str
    cells: Dict[str, CategoryCell] = {}  # stat_id -> cell


class CategoryStatsView(BaseModel):
    model_config = ConfigDict(frozen=True)

    league_key: str
    timespan: str
    label: str
    num_weeks: int = 1
    weeks_included: List[int] = []
    columns: List[str] = []  # scoring stat_ids, league order
    rows: List[CategoryStatsRow] = []
