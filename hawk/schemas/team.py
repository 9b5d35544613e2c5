from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class TeamRecord(BaseModel):
    """Stats for one team over exactly one window (a week, or the season when week is None)."""

    model_config = ConfigDict(frozen=True)

    team_key: str
    team_name: str
    stats: Dict[str, float] = {}
    week: Optional[int] = None

    def value(self, stat_id: str) -> float:
        # missing == 0, no "didn't report" state at this layer
        return self.stats.get(str(stat_id), 0.0)


class AggregatedTeamStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_key: str
    team_name: str
    stats: Dict[str, float] = {}
    weeks: List[int] = []  # contributing weeks; empty for season totals

    def value(self, stat_id: str) -> float:
        return self.stats.get(str(stat_id), 0.0)


class StandingRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    team_key: str
    team_id: Optional[str] = None
    name: str
    rank: Optional[int] = None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    percentage: Optional[float] = None  # None before games start
    points_for: Optional[float] = None
    points_back: Optional[str] = None
    streak: Optional[str] = None
