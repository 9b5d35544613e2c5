# hawk/core/config.py
from __future__ import annotations

import json
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hawk.core.errors import ConfigError


EnvType = Literal["local", "dev", "staging", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_str_list(v) -> List[str]:
    # Accept JSON list or comma-separated string
    if isinstance(v, (list, tuple, set)):
        return [str(x).strip() for x in v if str(x).strip()]
    s = str(v).strip()
    if not s:
        return []
    try:
        parsed = json.loads(s)
        if isinstance(parsed, list):
            return [str(x).strip() for x in parsed if str(x).strip()]
    except ValueError:
        pass
    return [p.strip() for p in s.split(",") if p.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "FantasyHawkStats"
    APP_ENV: EnvType = "local"
    LOG_LEVEL: LogLevel = "INFO"

    # Category rules
    LOWER_IS_BETTER_ABBRS: str | List[str] = Field(
        default='["TO"]',
        validate_default=True,
        description="Category abbreviations where a smaller value wins (JSON list or comma-separated)",
    )
    LOWER_IS_BETTER_NAME_KEYWORDS: str | List[str] = Field(
        default='["turnover"]',
        validate_default=True,
        description="Case-insensitive substrings of category names that mark lower-is-better",
    )

    # Windows
    ROLLING_WINDOW_WEEKS: int = 3

    @property
    def IS_LOCAL(self) -> bool:
        return self.APP_ENV == "local"

    # ---------- Validators ----------

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).strip().upper() if v is not None else v

    @field_validator("LOWER_IS_BETTER_ABBRS")
    @classmethod
    def _parse_abbrs(cls, v):
        return [a.upper() for a in _parse_str_list(v)]

    @field_validator("LOWER_IS_BETTER_NAME_KEYWORDS")
    @classmethod
    def _parse_keywords(cls, v):
        return [k.lower() for k in _parse_str_list(v)]

    # ---------- Runtime validations ----------

    def validate_at_startup(self) -> None:
        """Fail fast with clear messages for misconfigurations."""
        problems: list[str] = []

        if self.ROLLING_WINDOW_WEEKS < 1:
            problems.append("ROLLING_WINDOW_WEEKS must be at least 1.")

        # Outside local an empty rule set almost certainly means a broken .env
        if not self.IS_LOCAL and not (self.LOWER_IS_BETTER_ABBRS or self.LOWER_IS_BETTER_NAME_KEYWORDS):
            problems.append(
                "LOWER_IS_BETTER_ABBRS or LOWER_IS_BETTER_NAME_KEYWORDS must be set in non-local env."
            )

        if problems:
            # Collapse to one helpful error line
            raise ConfigError("Config validation failed: " + " ".join(problems))


settings = Settings()
