"""Tests for raw Yahoo stat value parsing."""

from __future__ import annotations

import math

import pytest

from hawk.services.yahoo.stat_values import is_fraction_value, parse_stat_value


def test_leading_dot_is_a_zero_to_one_percentage() -> None:
    assert parse_stat_value(".485") == pytest.approx(0.485)
    assert parse_stat_value(".5") == pytest.approx(0.5)


def test_made_attempted_fraction_is_suppressed() -> None:
    assert parse_stat_value("56/66") == 0.0
    assert is_fraction_value("56/66")
    assert not is_fraction_value(".485")


@pytest.mark.parametrize("raw, expected", [("512", 512.0), ("-3", -3.0), (" 41.5 ", 41.5), (7, 7.0), (2.5, 2.5)])
def test_plain_counts(raw, expected) -> None:
    assert parse_stat_value(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "-", "abc", "nan", "inf", float("nan"), True])
def test_unparseable_values_fall_back_to_zero(raw) -> None:
    value = parse_stat_value(raw)
    assert value == 0.0
    assert math.isfinite(value)
