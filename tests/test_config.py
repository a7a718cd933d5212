import decimal
from decimal import Decimal

import pytest

from rollstat.core.config import Config
from rollstat.core.domain.errors import ConfigurationError, InvalidObservation
from rollstat.core.domain.params.stats_params import (
    DEFAULT_PRECISION,
    DEFAULT_ROUNDING,
    StatsParams,
)
from rollstat.core.domain.rolling import RollingStatistics
from rollstat.utils.decimals import parse_rounding, require_finite

# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)

# ------------------------------------------------------------
# Tests
# ------------------------------------------------------------

def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


def test_full_statistics_section(tmp_path):
    cfg = Config(write_config(tmp_path, """
statistics:
  window_size: 20
  precision: 30
  rounding: ROUND_HALF_UP
"""))

    assert cfg.window_size == 20
    assert cfg.precision == 30
    assert cfg.rounding == "ROUND_HALF_UP"

    params = cfg.stats_params()
    assert params == StatsParams(window_size=20, precision=30, rounding=decimal.ROUND_HALF_UP)

    ctx = params.context()
    assert ctx.prec == 30
    assert ctx.rounding == decimal.ROUND_HALF_UP
    assert ctx.Emax == decimal.MAX_EMAX
    assert ctx.Emin == decimal.MIN_EMIN


def test_defaults(tmp_path):
    cfg = Config(write_config(tmp_path, "statistics:\n  window_size: 4\n"))
    params = cfg.stats_params()

    assert params.window_size == 4
    assert params.precision == DEFAULT_PRECISION
    assert params.rounding == DEFAULT_ROUNDING
    assert cfg.get("missing", "fallback") == "fallback"


def test_missing_window_size(tmp_path):
    cfg = Config(write_config(tmp_path, "statistics:\n  precision: 10\n"))
    assert cfg.window_size is None

    with pytest.raises(ConfigurationError):
        cfg.stats_params()


def test_empty_file(tmp_path):
    cfg = Config(write_config(tmp_path, ""))
    with pytest.raises(ConfigurationError):
        cfg.stats_params()


def test_non_mapping_root(tmp_path):
    with pytest.raises(ConfigurationError):
        Config(write_config(tmp_path, "- 1\n- 2\n"))


def test_non_mapping_section(tmp_path):
    cfg = Config(write_config(tmp_path, "statistics: 5\n"))
    with pytest.raises(ConfigurationError):
        cfg.stats_params()


@pytest.mark.parametrize(
    "props",
    [
        {"window_size": 0},
        {"window_size": -3},
        {"window_size": "10"},
        {"window_size": 3, "precision": 0},
        {"window_size": 3, "precision": 2.5},
        {"window_size": 3, "rounding": "sideways"},
        {"window_size": 3, "rounding": 1},
    ],
)
def test_invalid_params(props):
    with pytest.raises(ConfigurationError):
        StatsParams.from_dict(props)


def test_from_dict_none():
    with pytest.raises(ConfigurationError):
        StatsParams.from_dict(None)


def test_engine_from_config(tmp_path):
    cfg = Config(write_config(tmp_path, """
statistics:
  window_size: 2
  precision: 4
  rounding: half_up
"""))
    stats = RollingStatistics.from_params(cfg.stats_params())

    stats.insert(Decimal(1))
    stats.insert(Decimal(2))
    stats.insert(Decimal(3))

    assert stats.window_capacity() == 2
    assert stats.count() == 2
    assert stats.sum() == Decimal(5)
    assert stats.mean() == Decimal("2.5")
    assert str(stats.standard_deviation()) == "0.7071"


def test_parse_rounding():
    assert parse_rounding("ROUND_FLOOR") == decimal.ROUND_FLOOR
    assert parse_rounding(" half_even ") == decimal.ROUND_HALF_EVEN
    with pytest.raises(ConfigurationError):
        parse_rounding("ROUND_NEAREST")


def test_require_finite():
    assert require_finite(Decimal("1.5")) == Decimal("1.5")
    with pytest.raises(InvalidObservation):
        require_finite(1)
    with pytest.raises(InvalidObservation):
        require_finite(Decimal("-Infinity"))
