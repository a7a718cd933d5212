import decimal
import logging
from decimal import Decimal
from enum import Enum, auto
from typing import List, Optional, Tuple

import numpy as np

from rollstat.core.domain.errors import InvalidObservation
from rollstat.core.domain.params.stats_params import StatsParams, validate_window_size
from rollstat.core.ports.statistics import StatisticsPort
from rollstat.utils.decimals import require_finite

logger = logging.getLogger(__name__)

ZERO = Decimal(0)

# running sums are kept exact regardless of the configured precision
EXACT = decimal.Context(
    prec=decimal.MAX_PREC, Emax=decimal.MAX_EMAX, Emin=decimal.MIN_EMIN
)


class Phase(Enum):
    FILLING = auto()
    FULL = auto()


class RollingStatistics(StatisticsPort):
    """Sum, mean and sample variance over the last ``window_size`` observations.

    Observations are kept in a fixed size circular buffer. While the buffer fills,
    aggregates are updated with Welford's algorithm. Once it is full, every insertion
    replaces the oldest observation and the aggregates are updated in O(1) from the
    evicted and inserted values, without rescanning the window.

    Args:
        window_size: Number of observations in the window. Must be a positive integer.
        context: Decimal context used for the mean and variance updates. Defaults to
            ``StatsParams`` defaults (50 digits, ROUND_HALF_EVEN).

    The sum is always exact. Aggregates are ``None`` until the first observation
    is inserted. An insert either completes or raises with the state unchanged.
    Instances are not thread safe; guard ``insert`` with a lock if shared.
    """

    def __init__(
        self,
        window_size: Optional[int] = None,
        context: Optional[decimal.Context] = None,
    ):
        self._window_size = validate_window_size(window_size)
        self._context = context if context is not None else StatsParams(window_size).context()

        self._elements: List[Optional[Decimal]] = [None] * self._window_size
        self._next_idx = 0
        self._phase = Phase.FILLING

        self._sum: Optional[Decimal] = None
        self._mean: Optional[Decimal] = None
        self._variance: Optional[Decimal] = None

        logger.debug(
            "Rolling statistics created: window=%d prec=%d",
            self._window_size,
            self._context.prec,
        )

    @classmethod
    def from_params(cls, params: StatsParams) -> "RollingStatistics":
        return cls(params.window_size, params.context())

    @property
    def phase(self) -> Phase:
        return self._phase

    def is_full(self) -> bool:
        return self._phase is Phase.FULL

    def count(self) -> int:
        if self._phase is Phase.FULL:
            return self._window_size
        return self._next_idx

    def window_capacity(self) -> int:
        return self._window_size

    def sum(self) -> Optional[Decimal]:
        return self._sum

    def mean(self) -> Optional[Decimal]:
        return self._mean

    def variance(self) -> Optional[Decimal]:
        return self._variance

    def standard_deviation(self) -> Optional[Decimal]:
        if self._variance is None:
            return None
        return self._variance.sqrt(self._context)

    def elements(self) -> List[Optional[Decimal]]:
        """Snapshot of the raw buffer slots; never written slots are None."""
        return list(self._elements)

    def window(self) -> List[Decimal]:
        """Retained observations in arrival order, oldest first."""
        if self._phase is Phase.FILLING:
            return self._elements[: self._next_idx]
        return self._elements[self._next_idx :] + self._elements[: self._next_idx]

    def as_array(self) -> np.ndarray:
        return np.array([float(v) for v in self.window()], dtype=np.float64)

    def insert(self, value: Decimal) -> None:
        value = require_finite(value)

        try:
            with decimal.localcontext(self._context):
                if self._phase is Phase.FULL:
                    new_sum, new_mean, new_variance = self._update_full(value)
                else:
                    new_sum, new_mean, new_variance = self._update_filling(value)
        except decimal.DecimalException as e:
            raise InvalidObservation(
                f"Observation {value} cannot be added to the window: {e!r}"
            ) from e

        self._sum = new_sum
        self._mean = new_mean
        self._variance = new_variance
        self._elements[self._next_idx] = value
        self._advance()

    def _update_filling(self, value: Decimal) -> Tuple[Decimal, Decimal, Decimal]:
        if self._next_idx == 0:
            return value, value, ZERO

        # Welford's algorithm, k observations already present
        k = self._next_idx
        old_deviation = value - self._mean

        new_sum = EXACT.add(self._sum, value)
        new_mean = self._mean + old_deviation / (k + 1)

        new_deviation = value - new_mean
        new_variance = self._clamp(
            self._variance + (old_deviation * new_deviation - self._variance) / k
        )
        return new_sum, new_mean, new_variance

    def _update_full(self, value: Decimal) -> Tuple[Decimal, Decimal, Decimal]:
        evicted = self._elements[self._next_idx]
        old_mean = self._mean

        new_sum = EXACT.add(EXACT.subtract(self._sum, evicted), value)

        diff = value - evicted
        new_mean = old_mean + diff / self._window_size

        new_deviation = value - new_mean
        old_deviation = evicted - old_mean
        summed_deviation = new_deviation + old_deviation
        sample_size = self._window_size - 1

        # a window of one has no spread
        if sample_size == 0:
            return new_sum, new_mean, ZERO

        new_variance = self._clamp(
            self._variance + diff * summed_deviation / sample_size
        )
        return new_sum, new_mean, new_variance

    def _clamp(self, variance: Decimal) -> Decimal:
        # rounding can push the variance slightly below zero
        if variance < 0:
            logger.debug("Clamping negative variance %s to zero", variance)
            return ZERO
        return variance

    def _advance(self):
        self._next_idx = (self._next_idx + 1) % self._window_size
        if self._next_idx == 0 and self._phase is Phase.FILLING:
            self._phase = Phase.FULL
            logger.debug("Rolling window of %d observations is full", self._window_size)

    def __repr__(self) -> str:
        return (
            f"RollingStatistics(window_size={self._window_size}, count={self.count()}, "
            f"sum={self._sum}, mean={self._mean}, variance={self._variance})"
        )
