import decimal
from decimal import Decimal

from rollstat.core.domain.errors import ConfigurationError, InvalidObservation


ROUNDING_MODES = {
    decimal.ROUND_CEILING,
    decimal.ROUND_DOWN,
    decimal.ROUND_FLOOR,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_UP,
    decimal.ROUND_05UP,
}


def require_finite(value) -> Decimal:
    """Return value if it is a finite Decimal, raise InvalidObservation otherwise."""
    if not isinstance(value, Decimal):
        raise InvalidObservation(
            f"Observations must be Decimal, got {type(value).__name__}"
        )
    if not value.is_finite():
        raise InvalidObservation(f"Observations cannot be non-finite, got {value}")
    return value


def parse_rounding(name: str) -> str:
    # decimal rounding constants are their own names, e.g. "ROUND_HALF_EVEN"
    if not isinstance(name, str):
        raise ConfigurationError(f"Rounding must be a string, got {type(name).__name__}")

    mode = name.strip().upper()
    if not mode.startswith("ROUND_"):
        mode = "ROUND_" + mode
    if mode not in ROUNDING_MODES:
        raise ConfigurationError(f"Unknown rounding mode: {name}")
    return mode
