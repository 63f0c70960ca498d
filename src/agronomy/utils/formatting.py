"""
Sampling and display helpers shared by the recommenders and the trend charts.
"""

import random
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from agronomy.config import config


def random_in_range(low: float, high: float, rng: random.Random) -> float:
    """Uniform sample from [low, high]."""
    if low > high:
        raise ValueError(f"Invalid range: {low} > {high}")
    return rng.uniform(low, high)


def format_price(value: float) -> str:
    """Format a price for cards and chart tooltips, e.g. ``₹42.50``."""
    return f"{config.currency_symbol}{float(value):.2f}"


def format_amount(value: int) -> str:
    """Format a whole-rupee amount with thousands separators, e.g. ``₹12,500``."""
    return f"{config.currency_symbol}{int(value):,}"


def placeholder_name(index: int) -> str:
    """Generated legend name for chart slot ``index``: Crop A, Crop B, ..."""
    return f"Crop {chr(65 + index)}"


def legend_name(
    index: int,
    trends: Optional[Mapping[str, Sequence[float]]] = None,
    items: Optional[List[Any]] = None,
) -> str:
    """
    Resolve the display name for chart series ``index``.

    A trend map wins when one is supplied (its key order is the series order);
    otherwise the recommendation list is used. Items may be records or their
    dict rendering.
    """
    if trends is not None:
        crops = list(trends.keys())
        return crops[index] if index < len(crops) else placeholder_name(index)

    items = items or []
    if index < len(items):
        item = items[index]
        crop = item.get("crop") if isinstance(item, dict) else getattr(item, "crop", None)
        if crop:
            return crop
    return placeholder_name(index)


def request_rng(
    soil_type: str,
    season: str,
    location: str,
    day_key: Optional[str] = None,
    salt: str = "",
) -> random.Random:
    """
    Random source seeded from the request inputs and the calendar day.

    The same soil/season/location on the same day yields the same
    recommendations; ``salt`` lets a caller ask for a fresh set.
    """
    day_key = day_key or date.today().isoformat()
    key = f"{soil_type}|{season}|{location}|{day_key}|{salt}"
    return random.Random(key)


def to_json_ready(records: List[Any]) -> List[Dict[str, Any]]:
    """Render records (or already-rendered dicts) as plain dicts."""
    return [r if isinstance(r, dict) else r.to_dict() for r in records]
