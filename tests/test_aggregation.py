"""Tests for season and multi-week aggregation."""

from __future__ import annotations

import pytest

from hawk.schemas.team import TeamRecord
from hawk.services.aggregation import Timespan, aggregate, aggregate_season, aggregate_weeks, window_weeks
from hawk.services.yahoo.stat_values import parse_stat_value


def _rec(key: str, name: str, week, **stats) -> TeamRecord:
    return TeamRecord(team_key=key, team_name=name, week=week, stats={k.lstrip("s"): v for k, v in stats.items()})


def test_weekly_points_are_summed() -> None:
    out = aggregate_weeks([_rec("t1", "Hawks", 1, s12=80.0), _rec("t1", "Hawks", 2, s12=95.0)])

    assert len(out) == 1
    assert out[0].value("12") == 175.0
    assert out[0].weeks == [1, 2]


def test_team_missing_from_a_week_just_contributes_less() -> None:
    out = aggregate_weeks([
        _rec("t1", "Hawks", 1, s12=80.0),
        _rec("t2", "Owls", 1, s12=60.0),
        _rec("t1", "Hawks", 2, s12=95.0),
    ])
    by_key = {t.team_key: t for t in out}
    assert by_key["t1"].value("12") == 175.0
    assert by_key["t2"].value("12") == 60.0
    assert by_key["t2"].weeks == [1]


def test_output_order_is_first_seen_and_name_from_first_record() -> None:
    out = aggregate_weeks([
        _rec("t2", "Owls", 1, s12=1.0),
        _rec("t1", "Hawks", 1, s12=1.0),
        _rec("t2", "Owls (renamed)", 2, s12=1.0),
    ])
    assert [t.team_key for t in out] == ["t2", "t1"]
    assert out[0].team_name == "Owls"


def test_percentage_stats_keep_latest_week_value() -> None:
    out = aggregate_weeks(
        [_rec("t1", "Hawks", 1, s5=0.450, s12=10.0), _rec("t1", "Hawks", 2, s5=0.500, s12=20.0)],
        percentage_stat_ids=["5"],
    )
    assert out[0].value("5") == pytest.approx(0.5)
    assert out[0].value("12") == 30.0


def test_display_fractions_never_add_to_a_sum() -> None:
    weeks = [
        _rec("t1", "Hawks", 1, s9004003=parse_stat_value("56/66")),
        _rec("t1", "Hawks", 2, s9004003=parse_stat_value("40/51")),
    ]
    assert aggregate_weeks(weeks)[0].value("9004003") == 0.0


def test_season_is_identity_and_ignores_duplicates() -> None:
    first = _rec("t1", "Hawks", None, s12=4800.0)
    out = aggregate_season([first, _rec("t2", "Owls", None, s12=5100.0), _rec("t1", "Hawks", None, s12=1.0)])

    assert [t.team_key for t in out] == ["t1", "t2"]
    assert out[0].stats == first.stats
    assert out[0].weeks == []


def test_aggregate_dispatches_on_timespan() -> None:
    recs = [_rec("t1", "Hawks", 1, s12=1.0), _rec("t1", "Hawks", 2, s12=2.0)]
    assert aggregate(recs, Timespan.LAST_3_WEEKS)[0].value("12") == 3.0
    assert aggregate(recs, "season")[0].value("12") == 1.0


def test_empty_input() -> None:
    assert aggregate_weeks([]) == []
    assert aggregate_season([]) == []


@pytest.mark.parametrize("current, timespan, expected", [
    (7, Timespan.THIS_WEEK, [7]),
    (7, Timespan.LAST_3_WEEKS, [5, 6, 7]),
    (2, Timespan.LAST_3_WEEKS, [1, 2]),
    (3, Timespan.SEASON, [1, 2, 3]),
    (None, Timespan.SEASON, []),
])
def test_window_weeks(current, timespan, expected) -> None:
    assert window_weeks(current, timespan, span=3) == expected


def test_percentage_stats_follow_week_not_input_order() -> None:
    out = aggregate_weeks(
        [_rec("t1", "Hawks", 6, s5=0.480, s12=20.0), _rec("t1", "Hawks", 5, s5=0.450, s12=10.0)],
        percentage_stat_ids=["5"],
    )
    assert out[0].value("5") == pytest.approx(0.48)
    assert out[0].value("12") == 30.0
    assert out[0].weeks == [5, 6]
