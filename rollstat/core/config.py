import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from rollstat.core.domain.errors import ConfigurationError
from rollstat.core.domain.params.stats_params import (
    DEFAULT_PRECISION,
    DEFAULT_ROUNDING,
    StatsParams,
)

logger = logging.getLogger(__name__)

STATS_SECTION = "statistics"


class Config:
    def __init__(self, path: str):
        """
        Load YAML configuration from the given path.

        Args:
            path: Path to config.yaml.
        """
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Config file not found: {self.path}")

        with open(self.path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config root must be a mapping: {self.path}")

        self._data: Dict[str, Any] = data
        logger.info("Loaded configuration from %s", self.path)

    def get(self, key: str, default=None):
        """Get a config value by key."""
        return self._data.get(key, default)

    def _stats_props(self) -> Dict[str, Any]:
        props = self._data.get(STATS_SECTION, {})
        if props is None:
            return {}
        if not isinstance(props, dict):
            raise ConfigurationError(f"'{STATS_SECTION}' must be a mapping")
        return props

    @property
    def window_size(self) -> Optional[int]:
        return self._stats_props().get("window_size")

    @property
    def precision(self) -> int:
        return self._stats_props().get("precision", DEFAULT_PRECISION)

    @property
    def rounding(self) -> str:
        return self._stats_props().get("rounding", DEFAULT_ROUNDING)

    def stats_params(self) -> StatsParams:
        return StatsParams.from_dict(self._stats_props())
