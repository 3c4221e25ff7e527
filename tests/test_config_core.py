from __future__ import annotations

import logging

import pytest

from thinktool.config import DrillConfig, Settings
from thinktool.operators import Operator


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s == Settings(trial_duration_s=60, seed=None, auto_start_trial=True, log_level="WARNING")
    cfg = s.drill_config()
    assert cfg.operator is Operator.ADDITION
    assert cfg.term_lengths == [2, 2]
    assert cfg.term_count == 2
    assert cfg.trial_duration_s == 60


def test_env_values_are_applied() -> None:
    s = Settings.from_env(
        {
            "THINKTOOL_TRIAL_DURATION": "120",
            "THINKTOOL_SEED": "42",
            "THINKTOOL_AUTO_START": "off",
            "THINKTOOL_LOG_LEVEL": "debug",
        }
    )
    assert s.trial_duration_s == 120
    assert s.seed == 42
    assert s.auto_start_trial is False
    assert s.log_level == "DEBUG"
    assert s.drill_config().trial_duration_s == 120


@pytest.mark.parametrize("raw", ["5", "4000", "sixty"])
def test_bad_duration_falls_back_with_warning(raw: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="thinktool.config"):
        s = Settings.from_env({"THINKTOOL_TRIAL_DURATION": raw})
    assert s.trial_duration_s == 60
    assert "THINKTOOL_TRIAL_DURATION" in caplog.text


def test_bad_seed_and_level_fall_back(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="thinktool.config"):
        s = Settings.from_env({"THINKTOOL_SEED": "x", "THINKTOOL_LOG_LEVEL": "loud"})
    assert s.seed is None
    assert s.log_level == "WARNING"
    assert "THINKTOOL_SEED" in caplog.text


def test_drill_configs_do_not_share_term_lengths() -> None:
    a = DrillConfig()
    b = DrillConfig()
    a.term_lengths.append(3)
    assert b.term_lengths == [2, 2]
