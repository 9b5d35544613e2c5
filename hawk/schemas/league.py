from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class Direction(str, Enum):
    HIGHER = "higher"
    LOWER = "lower"


class CategoryDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    stat_id: str
    name: str = ""
    display_name: Optional[str] = None
    abbr: Optional[str] = None
    is_only_display_stat: bool = False  # shown but not scored (e.g. FGM/FGA)
    direction: Direction = Direction.HIGHER

    @property
    def label(self) -> str:
        return self.display_name or self.abbr or self.name or self.stat_id

    @property
    def is_percentage(self) -> bool:
        return "Percentage" in (self.name or "")

    @property
    def is_scoring(self) -> bool:
        return not self.is_only_display_stat


class LeagueInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    league_key: str
    name: str
    categories: List[CategoryDefinition] = []
    season: Optional[str] = None
    scoring_type: Optional[str] = None
    current_week: Optional[int] = None
    num_teams: Optional[int] = None

    def scoring_categories(self) -> List[CategoryDefinition]:
        return [c for c in self.categories if c.is_scoring]

    def category(self, stat_id: str) -> Optional[CategoryDefinition]:
        for c in self.categories:
            if c.stat_id == str(stat_id):
                return c
        return None

    def percentage_stat_ids(self) -> List[str]:
        return [c.stat_id for c in self.categories if c.is_percentage]

    def direction_table(self) -> Dict[str, Direction]:
        return {c.stat_id: c.direction for c in self.scoring_categories()}


class LeagueSummary(BaseModel):
    """One row of the user's league picker."""

    league_key: str
    name: str
    season: str = ""
    scoring_type: str = ""
    num_teams: Optional[int] = None
    current_week: Optional[int] = None
