"""
Recommendation Engine
=====================

Holds the injected, read-only knowledge tables and a random source, and
exposes both recommenders and the market trend synthesizer over them.

Engines share nothing mutable: two engines built on different knowledge
bases (e.g. per-region deployments) can run side by side. A single engine's
random source is not synchronized; give each thread its own engine.
"""

import random
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from agronomy.config import EngineConfig, config
from agronomy.knowledge.crop_database import CropKnowledgeBase
from agronomy.knowledge.locations import LocationTable
from agronomy.market.trends import (
    MarketTrendSeries,
    adapt_provider_trends,
    fallback_series,
    synthesize,
    to_chart_rows,
)
from agronomy.models import RecommendationRecord, SoilReading
from agronomy.recommenders.conditions import recommend_by_conditions
from agronomy.recommenders.soil import recommend_by_soil


class RecommendationEngine:
    def __init__(
        self,
        crop_db: Optional[CropKnowledgeBase] = None,
        locations: Optional[LocationTable] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[EngineConfig] = None,
    ):
        self.settings = config if settings is None else settings
        self.crop_db = CropKnowledgeBase() if crop_db is None else crop_db
        if locations is None:
            locations = LocationTable(default_region=self.settings.default_location)
        self.locations = locations
        self.rng = random.Random() if rng is None else rng

    def recommend_by_conditions(self, soil_type: str, season: str, location: str,
                                rng: Optional[random.Random] = None) -> List[RecommendationRecord]:
        """Condition-based recommendations; ``rng`` overrides the engine's source for one call."""
        return recommend_by_conditions(
            soil_type, season, location,
            crop_db=self.crop_db,
            locations=self.locations,
            rng=self.rng if rng is None else rng,
            limit=self.settings.max_condition_results,
        )

    def recommend_by_soil(self, nitrogen: Any, phosphorus: Any = None, potassium: Any = None,
                          rainfall: Any = None, humidity: Any = None) -> List[RecommendationRecord]:
        return recommend_by_soil(nitrogen, phosphorus, potassium, rainfall, humidity)

    def recommend_by_reading(self, reading: Mapping[str, Any]) -> List[RecommendationRecord]:
        """Soil recommendations from a ``{"N", "P", "K", "rainfall", "humidity"}`` mapping."""
        return recommend_by_soil(SoilReading.from_dict(reading))

    def market_trends(self, crop_names: Iterable[str], days: Optional[int] = None) -> MarketTrendSeries:
        days = self.settings.trend_days if days is None else days
        return synthesize(crop_names, days, self.rng)

    def adapt_trends(self, payload: Mapping[str, Any]) -> MarketTrendSeries:
        return adapt_provider_trends(payload)

    def chart_rows(self, series: Mapping[str, Sequence[float]]) -> List[Dict[str, Any]]:
        return to_chart_rows(series)

    def fallback_chart(self, days: Optional[int] = None) -> List[Dict[str, Any]]:
        days = self.settings.trend_days if days is None else days
        return fallback_series(days, self.rng)

    @staticmethod
    def trend_crops(records: Iterable[Any], limit: int = 3) -> List[str]:
        """First ``limit`` distinct crop names from records (or their dicts), in rank order."""
        names = []
        for record in records:
            crop = record.get("crop") if isinstance(record, dict) else record.crop
            if crop and crop not in names:
                names.append(crop)
            if len(names) >= limit:
                break
        return names
