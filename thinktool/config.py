from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .operators import Operator

logger = logging.getLogger(__name__)

TERM_COUNT_MIN = 2
TERM_COUNT_MAX = 10
TERM_LENGTH_MIN = 1
TERM_LENGTH_MAX = 5
DEFAULT_TERM_LENGTH = 2
DURATION_MIN_S = 10
DURATION_MAX_S = 3600
DEFAULT_DURATION_S = 60

DURATION_ENV = "THINKTOOL_TRIAL_DURATION"
SEED_ENV = "THINKTOOL_SEED"
AUTO_START_ENV = "THINKTOOL_AUTO_START"
LOG_LEVEL_ENV = "THINKTOOL_LOG_LEVEL"

_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


@dataclass(slots=True)
class DrillConfig:
    """Runtime drill parameters. Mutated only through validated setters."""

    operator: Operator = Operator.ADDITION
    term_lengths: list[int] = field(default_factory=lambda: [DEFAULT_TERM_LENGTH, DEFAULT_TERM_LENGTH])
    trial_duration_s: int = DEFAULT_DURATION_S

    @property
    def term_count(self) -> int:
        return len(self.term_lengths)


@dataclass(frozen=True, slots=True)
class Settings:
    """Process settings read once at startup."""

    trial_duration_s: int = DEFAULT_DURATION_S
    seed: int | None = None
    auto_start_trial: bool = True
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        duration = DEFAULT_DURATION_S
        raw = env.get(DURATION_ENV, "").strip()
        if raw:
            try:
                value = int(raw)
            except ValueError:
                value = None
            if value is None or not (DURATION_MIN_S <= value <= DURATION_MAX_S):
                logger.warning(
                    "ignoring %s=%r: expected an integer between %d and %d",
                    DURATION_ENV,
                    raw,
                    DURATION_MIN_S,
                    DURATION_MAX_S,
                )
            else:
                duration = value

        seed: int | None = None
        raw = env.get(SEED_ENV, "").strip()
        if raw:
            try:
                seed = int(raw)
            except ValueError:
                logger.warning("ignoring %s=%r: expected an integer", SEED_ENV, raw)

        raw = env.get(AUTO_START_ENV, "").strip().lower()
        auto_start = raw not in _FALSE_WORDS if raw else True

        level = env.get(LOG_LEVEL_ENV, "").strip().upper() or "WARNING"
        if not isinstance(logging.getLevelName(level), int):
            logger.warning("ignoring %s=%r: unknown log level", LOG_LEVEL_ENV, level)
            level = "WARNING"

        return cls(
            trial_duration_s=duration,
            seed=seed,
            auto_start_trial=auto_start,
            log_level=level,
        )

    def drill_config(self) -> DrillConfig:
        return DrillConfig(trial_duration_s=self.trial_duration_s)
