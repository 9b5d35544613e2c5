from __future__ import annotations

import math
from typing import Any


def is_fraction_value(raw: Any) -> bool:
    """True for Yahoo's display-only "made/attempted" strings such as "56/66"."""
    return isinstance(raw, str) and "/" in raw


def parse_stat_value(raw: Any) -> float:
    """
    Yahoo sends every stat value as a string. Rules, in order:
      ".485"  -> 0.485 (percentage, already 0..1; scaling to % is a display concern)
      "56/66" -> 0.0   (display-only fraction, never summed or ranked)
      else    -> float, or 0.0 when unparseable
    Always returns a finite float so callers can sum/sort without checks.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        v = float(raw)
        return v if math.isfinite(v) else 0.0

    s = str(raw).strip()
    if not s:
        return 0.0
    if not s.startswith(".") and is_fraction_value(s):
        return 0.0
    try:
        v = float(s)
    except ValueError:
        return 0.0
    return v if math.isfinite(v) else 0.0
