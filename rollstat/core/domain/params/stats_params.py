import decimal
import numbers
from dataclasses import dataclass
from typing import Optional

from rollstat.core.domain.errors import ConfigurationError
from rollstat.utils.decimals import parse_rounding

DEFAULT_PRECISION = 50
DEFAULT_ROUNDING = decimal.ROUND_HALF_EVEN


def validate_window_size(window_size) -> int:
    """Return window_size as an int, raising ConfigurationError unless it is a positive count."""
    if window_size is None:
        raise ConfigurationError("You must provide a valid window size")
    if isinstance(window_size, bool) or not isinstance(window_size, numbers.Integral):
        raise ConfigurationError(
            f"Window size must be an integer, got {type(window_size).__name__}"
        )
    if window_size <= 0:
        raise ConfigurationError(f"Window size must be positive, got {window_size}")
    return int(window_size)


@dataclass
class StatsParams:
    window_size: int
    precision: int = DEFAULT_PRECISION
    rounding: str = DEFAULT_ROUNDING

    def __post_init__(self):
        self.window_size = validate_window_size(self.window_size)

        if (
            isinstance(self.precision, bool)
            or not isinstance(self.precision, numbers.Integral)
            or self.precision <= 0
        ):
            raise ConfigurationError(
                f"Precision must be a positive integer, got {self.precision!r}"
            )
        self.precision = int(self.precision)
        self.rounding = parse_rounding(self.rounding)

    def context(self) -> decimal.Context:
        return decimal.Context(
            prec=self.precision,
            rounding=self.rounding,
            Emax=decimal.MAX_EMAX,
            Emin=decimal.MIN_EMIN,
        )

    @staticmethod
    def from_dict(stats_props: Optional[dict]) -> "StatsParams":
        if stats_props is None:
            raise ConfigurationError("Statistics section is missing")
        if not isinstance(stats_props, dict):
            raise ConfigurationError(
                f"Statistics section must be a mapping, got {type(stats_props).__name__}"
            )

        return StatsParams(
            window_size=stats_props.get("window_size"),
            precision=stats_props.get("precision", DEFAULT_PRECISION),
            rounding=stats_props.get("rounding", DEFAULT_ROUNDING),
        )
