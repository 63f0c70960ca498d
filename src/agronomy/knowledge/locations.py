"""
Location Adjustment Table
=========================

Per-region multipliers (rainfall, humidity, temperature) applied to the crop
knowledge-base ranges. Lookups are case-sensitive; an unknown region falls back
to the table's default region.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Tuple

from agronomy.config import config
from agronomy.utils.logger import logger


@dataclass(frozen=True)
class LocationAdjustment:
    region: str
    rainfall: float
    humidity: float
    temperature: float

    def __post_init__(self):
        for label in ("rainfall", "humidity", "temperature"):
            if getattr(self, label) <= 0:
                raise ValueError(f"{self.region}: {label} multiplier must be positive")


DEFAULT_LOCATION_ADJUSTMENTS: Tuple[LocationAdjustment, ...] = (
    LocationAdjustment("Kerala", rainfall=1.2, humidity=1.3, temperature=1.1),
    LocationAdjustment("Tamil Nadu", rainfall=0.9, humidity=1.1, temperature=1.2),
    LocationAdjustment("Karnataka", rainfall=1.0, humidity=1.0, temperature=1.0),
    LocationAdjustment("Andhra Pradesh", rainfall=0.9, humidity=1.0, temperature=1.2),
    LocationAdjustment("Maharashtra", rainfall=0.8, humidity=0.9, temperature=1.1),
    LocationAdjustment("Punjab", rainfall=0.7, humidity=0.8, temperature=0.9),
    LocationAdjustment("Uttar Pradesh", rainfall=0.9, humidity=0.9, temperature=1.0),
    LocationAdjustment("West Bengal", rainfall=1.3, humidity=1.2, temperature=1.0),
    LocationAdjustment("Rajasthan", rainfall=0.5, humidity=0.6, temperature=1.3),
)


class LocationTable:
    """Read-only region → multiplier table with a designated default region."""

    def __init__(
        self,
        adjustments: Iterable[LocationAdjustment] = DEFAULT_LOCATION_ADJUSTMENTS,
        default_region: str = None,
    ):
        self._adjustments = MappingProxyType({a.region: a for a in adjustments})
        self.default_region = default_region or config.default_location
        if self.default_region not in self._adjustments:
            raise ValueError(f"Default region {self.default_region!r} is not in the location table")

    def __contains__(self, region: str) -> bool:
        return region in self._adjustments

    def __len__(self) -> int:
        return len(self._adjustments)

    @property
    def regions(self) -> Tuple[str, ...]:
        return tuple(self._adjustments.keys())

    def lookup(self, region: str) -> LocationAdjustment:
        """Multipliers for ``region``; unknown regions get the default region's."""
        adjustment = self._adjustments.get(region)
        if adjustment is None:
            logger.info(f"Unknown location {region!r}, using {self.default_region} multipliers")
            return self._adjustments[self.default_region]
        return adjustment
