from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional


class StatisticsPort(ABC):
    @abstractmethod
    def insert(self, value: Decimal) -> None:
        """Add one observation to the window."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of observations currently held."""
        pass

    @abstractmethod
    def window_capacity(self) -> int:
        pass

    @abstractmethod
    def sum(self) -> Optional[Decimal]:
        pass

    @abstractmethod
    def mean(self) -> Optional[Decimal]:
        pass

    @abstractmethod
    def variance(self) -> Optional[Decimal]:
        pass

    @abstractmethod
    def standard_deviation(self) -> Optional[Decimal]:
        pass

    def __len__(self) -> int:
        return self.count()
