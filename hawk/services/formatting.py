# hawk/services/formatting.py
from __future__ import annotations

from typing import Iterable, Literal, Optional

from hawk.schemas.league import CategoryDefinition
from hawk.services.aggregation import Timespan, window_weeks

# Cell heat: opacity grows linearly with |percent diff| up to the ceiling
HEAT_CEILING_PCT = 25.0
HEAT_MIN_OPACITY = 0.08
HEAT_MAX_OPACITY = 0.5

# |percent diff| above this is a "strong" tone
TONE_STRONG_THRESHOLD = 5.0

Tone = Literal["strong_positive", "positive", "neutral", "negative", "strong_negative"]


def ordinal(rank: int) -> str:
    # Only the literal ranks 1/2/3 get special suffixes, so 21 comes out as "21th".
    # Leagues stay well under 21 teams in practice; kept until that changes.
    suffix = "st" if rank == 1 else "nd" if rank == 2 else "rd" if rank == 3 else "th"
    return f"{rank}{suffix}"


def format_percentage(value: float) -> str:
    """0.485 -> "48.5%". Percentage stats are stored 0..1."""
    return f"{value * 100:.1f}%"


def format_value(
    value: float,
    category: Optional[CategoryDefinition] = None,
    num_weeks: int = 1,
    weekly_average: bool = False,
) -> str:
    """
    Display a ranked value. Percentage categories are never divided by the
    week count; counting stats show a per-week average when asked for one.
    """
    if category is not None and category.is_percentage:
        return format_percentage(value)
    if weekly_average and num_weeks > 1:
        return f"{value / num_weeks:.1f}"
    return f"{value:.1f}"


def format_percent_diff(diff: float) -> str:
    sign = "+" if diff >= 0 else ""
    return f"{sign}{diff:.1f}%"


def percent_diff_tone(diff: float) -> Tone:
    if diff > TONE_STRONG_THRESHOLD:
        return "strong_positive"
    if diff > 0:
        return "positive"
    if diff < -TONE_STRONG_THRESHOLD:
        return "strong_negative"
    if diff < 0:
        return "negative"
    return "neutral"


def heat_intensity(diff: float) -> float:
    scaled = min(abs(diff) / HEAT_CEILING_PCT, 1.0)
    return HEAT_MIN_OPACITY + scaled * (HEAT_MAX_OPACITY - HEAT_MIN_OPACITY)


def timespan_label(
    timespan: Timespan | str,
    current_week: Optional[int] = None,
    weeks_included: Iterable[int] = (),
) -> str:
    ts = Timespan(timespan)
    if ts is Timespan.THIS_WEEK:
        return f"Week {current_week}" if current_week else "This Week"
    if ts is Timespan.SEASON:
        return "Full Season"

    weeks = list(weeks_included)
    if not weeks:
        weeks = window_weeks(current_week, ts)
    if weeks:
        return f"Weeks {min(weeks)}-{max(weeks)}"
    return "Last 3 Weeks"
