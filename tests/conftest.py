"""Shared fixtures: captured Yahoo payloads plus builders for scoreboard weeks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from hawk.schemas.league import CategoryDefinition, Direction

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture(scope="module")
def settings_payload() -> dict:
    return load_fixture("league_settings.json")


@pytest.fixture(scope="module")
def standings_payload() -> dict:
    return load_fixture("league_standings.json")


def _team_array(team_key: str, name: str, stats: Dict[str, str], week: Optional[int] = None) -> list:
    return [
        [
            {"team_key": team_key},
            {"team_id": team_key.rsplit(".", 1)[-1]},
            {"name": name},
            [],
            {"managers": [{"manager": {"nickname": name[:3]}}]},
        ],
        {
            "team_stats": {
                "coverage_type": "week",
                "week": str(week) if week is not None else None,
                "stats": [{"stat": {"stat_id": sid, "value": val}} for sid, val in stats.items()],
            },
            "team_points": {"coverage_type": "week", "week": str(week), "total": "5"},
        },
    ]


def _scoreboard(week: int, matchups: List[List[list]]) -> dict:
    """matchups: [[team_array, team_array], ...] -> Yahoo scoreboard payload for that week."""
    m_node: dict = {"count": len(matchups)}
    for i, pair in enumerate(matchups):
        teams: dict = {"count": len(pair)}
        for j, t in enumerate(pair):
            teams[str(j)] = {"team": t}
        m_node[str(i)] = {"matchup": {"week": str(week), "status": "postevent", "0": {"teams": teams}}}
    return {
        "fantasy_content": {
            "league": [
                {"league_key": "466.l.15701", "name": "NWF Keeper Lge Jamboree", "current_week": str(week)},
                {"scoreboard": {"0": {"matchups": m_node}, "week": str(week)}},
            ]
        }
    }


@pytest.fixture
def make_team() -> Callable[..., list]:
    return _team_array


@pytest.fixture
def make_scoreboard() -> Callable[..., dict]:
    return _scoreboard


@pytest.fixture
def nba_categories() -> List[CategoryDefinition]:
    return [
        CategoryDefinition(stat_id="9004003", name="Field Goals Made / Field Goals Attempted",
                           display_name="FGM/A", abbr="FGM/A", is_only_display_stat=True),
        CategoryDefinition(stat_id="5", name="Field Goal Percentage", display_name="FG%", abbr="FG%"),
        CategoryDefinition(stat_id="12", name="Points Scored", display_name="PTS", abbr="PTS"),
        CategoryDefinition(stat_id="15", name="Total Rebounds", display_name="REB", abbr="REB"),
        CategoryDefinition(stat_id="19", name="Turnovers", display_name="TO", abbr="TO", direction=Direction.LOWER),
    ]
