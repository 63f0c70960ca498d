"""
Market Trend Synthesizer
========================

Generates smoothly varying synthetic price series (sine trend plus small
noise) for charting, reshapes series into chart rows and adapts real trend
data from a market-data provider into the same shape.

Synthetic series are a visual simulation, not a forecast; they are always
flagged ``simulated=True`` so they cannot be confused with provider data.
"""

import math
import random
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from agronomy.models import SeriesLengthMismatch
from agronomy.utils.logger import logger


MIN_PRICE = 0.01
CHART_SLOTS = 3


def _common_length(series: Mapping[str, Sequence[float]]) -> int:
    lengths = {crop: len(prices) for crop, prices in series.items()}
    if len(set(lengths.values())) > 1:
        raise SeriesLengthMismatch(lengths)
    return next(iter(lengths.values()), 0)


class MarketTrendSeries(OrderedDict):
    """
    Crop name → daily prices, in insertion order.

    ``simulated`` is True for series produced by :func:`synthesize` and False
    for data adapted from a market-data provider.
    """

    def __init__(self, data: Optional[Mapping[str, Sequence[float]]] = None,
                 simulated: bool = True, market_drivers: Optional[str] = None):
        super().__init__()
        self.simulated = simulated
        self.market_drivers = market_drivers
        for crop, prices in (data or {}).items():
            self[crop] = list(prices)

    @property
    def days(self) -> int:
        """Series length; raises if the series disagree."""
        return _common_length(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trends": {crop: list(prices) for crop, prices in self.items()},
            "simulated": self.simulated,
            "marketDrivers": self.market_drivers,
        }


def synthesize(crop_names: Iterable[str], days: int, rng: random.Random) -> MarketTrendSeries:
    """
    Simulated daily prices for each crop.

    For crop ``i``: base = 15 + 5i + U(0, 10); day ``d`` price =
    base + 2·sin(0.5d + i) + U(-0.1, 0.1), floored at 0.01 and rounded to 2 dp.
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")

    series = MarketTrendSeries(simulated=True)
    for index, crop in enumerate(crop_names):
        base_price = 15 + index * 5 + rng.uniform(0, 10)
        prices = []
        for day in range(days):
            trend = math.sin(day * 0.5 + index) * 2
            noise = rng.uniform(-0.1, 0.1)
            prices.append(round(max(MIN_PRICE, base_price + trend + noise), 2))
        series[crop] = prices

    logger.info(f"Synthesized {days}-day market trends for {list(series.keys())}")
    return series


def to_chart_rows(series: Mapping[str, Sequence[float]]) -> List[Dict[str, Any]]:
    """
    Reshape a trend map into one row per day: ``{"day": n, "c1", "c2", "c3"}``.

    Slots follow the map's insertion order; crops beyond the third are
    dropped and missing slots are None.

    Raises:
        SeriesLengthMismatch: if the series are not all the same length.
    """
    days = _common_length(series)
    if not series:
        return []

    slots = list(series.values())[:CHART_SLOTS]

    rows = []
    for day in range(days):
        row = {"day": day + 1}
        for slot in range(CHART_SLOTS):
            row[f"c{slot + 1}"] = slots[slot][day] if slot < len(slots) else None
        rows.append(row)
    return rows


def fallback_series(days: int, rng: random.Random) -> List[Dict[str, Any]]:
    """Placeholder chart rows for when there is no crop context at all."""
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")

    rows = []
    for i in range(days):
        rows.append({
            "day": i + 1,
            "c1": round(25 + math.sin(i) * 3 + rng.uniform(0, 2), 2),
            "c2": round(30 + math.cos(i) * 2 + rng.uniform(0, 2), 2),
            "c3": round(20 + math.sin(i * 0.5) * 4 + rng.uniform(0, 2), 2),
        })
    return rows


def _coerce_price(crop: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Non-numeric price for {crop}: {value!r}")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Non-numeric price for {crop}: {value!r}")
    if math.isnan(price) or price <= 0:
        raise ValueError(f"Price for {crop} must be positive, got {value!r}")
    return price


def adapt_provider_trends(payload: Mapping[str, Any]) -> MarketTrendSeries:
    """
    Adapt real trend data from a market-data provider.

    Accepts the provider response (``{"trends": {...}, "marketDrivers": "..."}``)
    or a bare crop → prices mapping. The provider call itself is the
    caller's job and must complete before this is invoked.

    Raises:
        ValueError: on non-numeric or non-positive prices.
        SeriesLengthMismatch: if the series differ in length.
    """
    if "trends" in payload and isinstance(payload["trends"], Mapping):
        trends = payload["trends"]
        drivers = payload.get("marketDrivers")
    else:
        trends = payload
        drivers = None

    series = MarketTrendSeries(simulated=False, market_drivers=drivers)
    for crop, prices in trends.items():
        if isinstance(prices, (str, bytes)) or not isinstance(prices, Sequence):
            raise ValueError(f"Trend for {crop} must be a list of prices")
        series[str(crop)] = [_coerce_price(crop, p) for p in prices]

    _common_length(series)
    return series
