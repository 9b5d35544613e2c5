"""End-to-end: raw payloads -> category stats table."""

from __future__ import annotations

import pytest

from hawk.services.categories import build_category_stats_view, category_stats_from_payloads, sort_rows
from hawk.services.yahoo.parsers import parse_league_settings


def test_season_table_from_payloads(settings_payload: dict, standings_payload: dict) -> None:
    view = category_stats_from_payloads(settings_payload, "season", standings_payload=standings_payload)

    assert view is not None
    assert view.league_key == "466.l.15701"
    assert view.label == "Full Season"
    assert view.num_weeks == 1
    assert view.weeks_included == []
    assert view.columns == ["5", "10", "12", "15", "19"]
    assert [r.team_name for r in view.rows] == ["Hawks", "Owls", "Ravens"]

    hawks, owls, ravens = view.rows
    pts = hawks.cells["12"]
    assert pts.display_value == "4800.0"
    assert pts.display_diff == "+0.0%"
    assert pts.display_rank == "2nd"
    assert pts.tone == "neutral"
    assert pts.intensity == pytest.approx(0.08)

    assert owls.cells["5"].display_value == "48.6%"
    assert owls.cells["5"].ranking.rank == 1
    assert "9004003" not in owls.cells

    # turnovers: lower wins, Owls/Ravens tie on 480 and keep listing order
    assert owls.cells["19"].display_rank == "1st"
    assert ravens.cells["19"].display_rank == "2nd"
    assert hawks.cells["19"].display_rank == "3rd"


def test_rolling_table_shows_weekly_averages(settings_payload: dict, make_team, make_scoreboard) -> None:
    week5 = make_scoreboard(5, [[make_team("l.1.t.1", "Hawks", {"12": "80", "5": ".450"}),
                                 make_team("l.1.t.2", "Owls", {"12": "60", "5": ".500"})]])
    week6 = make_scoreboard(6, [[make_team("l.1.t.1", "Hawks", {"12": "95", "5": ".480"}),
                                 make_team("l.1.t.2", "Owls", {"12": "70", "5": ".400"})]])
    bundle = {"weeklyData": [{"week": 5, "data": week5}, {"week": 6, "data": week6}], "weeksIncluded": [5, 6], "currentWeek": 6}

    view = category_stats_from_payloads(settings_payload, "last_3_weeks", weekly_data=bundle)

    assert view.label == "Weeks 5-6"
    assert view.num_weeks == 2
    hawks = next(r for r in view.rows if r.team_name == "Hawks")
    assert hawks.cells["12"].ranking.value == 175.0
    assert hawks.cells["12"].display_value == "87.5"
    # percentages use the latest week, not a sum
    assert hawks.cells["5"].display_value == "48.0%"
    assert hawks.cells["5"].ranking.rank == 1


def test_missing_settings_degrades_to_none(standings_payload: dict) -> None:
    assert category_stats_from_payloads({"garbage": True}, "season", standings_payload=standings_payload) is None


def test_broken_standings_gives_empty_table(settings_payload: dict) -> None:
    view = category_stats_from_payloads(settings_payload, "season", standings_payload={"fantasy_content": {}})
    assert view is not None
    assert view.rows == []


def test_sort_rows_by_stat(settings_payload: dict, standings_payload: dict) -> None:
    view = category_stats_from_payloads(settings_payload, "season", standings_payload=standings_payload)

    by_pts = sort_rows(view.rows, "12")
    assert [r.team_name for r in by_pts] == ["Owls", "Hawks", "Ravens"]
    by_pts_asc = sort_rows(view.rows, "12", descending=False)
    assert [r.team_name for r in by_pts_asc] == ["Ravens", "Hawks", "Owls"]
    by_team_desc = sort_rows(view.rows, "team", descending=True)
    assert [r.team_name for r in by_team_desc] == ["Ravens", "Owls", "Hawks"]


def test_view_is_json_serializable(settings_payload: dict, standings_payload: dict) -> None:
    league = parse_league_settings(settings_payload)
    view = build_category_stats_view(league, [], "season")
    dumped = view.model_dump(mode="json")
    assert dumped["columns"] == ["5", "10", "12", "15", "19"]
    assert dumped["rows"] == []


def test_tone_tracks_raw_diff_even_for_lower_is_better(settings_payload: dict, standings_payload: dict) -> None:
    view = category_stats_from_payloads(settings_payload, "season", standings_payload=standings_payload)
    hawks = next(r for r in view.rows if r.team_name == "Hawks")

    # 520 turnovers vs a 493.3 average: worst in the league, yet above average
    assert hawks.cells["19"].display_rank == "3rd"
    assert hawks.cells["19"].tone == "strong_positive"
