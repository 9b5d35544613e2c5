# hawk/core/errors.py
from __future__ import annotations


class HawkError(Exception):
    """Base class for errors raised inside the hawk package."""


class PayloadShapeError(HawkError, ValueError):
    """A Yahoo payload section did not have the expected structure.

    Raised by the strict walkers in the normalizer and caught at each public
    parser boundary, which logs it and degrades to an empty/partial result.
    """

    def __init__(self, section: str, detail: str):
        self.section = section
        self.detail = detail
        super().__init__(f"{section}: {detail}")


class ConfigError(HawkError, RuntimeError):
    """Settings failed startup validation."""
