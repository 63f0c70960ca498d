"""
Condition-Based Recommender
===========================

Recommends crops for a soil type, season and location.

Filters the crop knowledge base by season and soil compatibility, samples
location-adjusted yield/profit/price figures from each profile's ranges and
attaches a randomized suitability score, risk level and economics. The result
is ranked by suitability and truncated.

All randomness comes from the injected ``random.Random`` so results are
reproducible for a fixed seed.
"""

import math
import random
from dataclasses import dataclass
from typing import List, Optional

from agronomy.config import config
from agronomy.knowledge.crop_database import CropKnowledgeBase, CropProfile
from agronomy.knowledge.locations import LocationAdjustment, LocationTable
from agronomy.models import Demand, Level, RecommendationRecord
from agronomy.utils.formatting import format_amount, format_price, random_in_range
from agronomy.utils.logger import logger


INVESTMENT_RANGE = (10000, 60000)
ROI_PERCENT_RANGE = (120, 300)
HARVEST_DAYS_RANGE = (90, 210)
SCORE_RANGE = (70, 100)

# Reason is picked among the first REASON_POOL candidates
REASON_POOL = 3

PLANTING_WINDOWS = {
    "monsoon": "June - July",
    "post-monsoon": "September - October",
    "winter": "November - December",
    "summer": "February - March",
}


@dataclass(frozen=True)
class CropEstimate:
    """Sampled figures for one profile, before and after location adjustment."""
    base_yield: float
    base_profit: float
    base_price: float
    yield_kg_ha: int
    profit_per_acre: int
    price_per_kg: int


def sample_estimate(profile: CropProfile, adjustment: LocationAdjustment,
                    rng: random.Random) -> CropEstimate:
    """Draw yield, profit and price for ``profile`` and apply the region multipliers."""
    base_yield = random_in_range(*profile.yield_range, rng=rng)
    base_profit = random_in_range(*profile.profit_range, rng=rng)
    base_price = random_in_range(*profile.price_range, rng=rng)

    return CropEstimate(
        base_yield=base_yield,
        base_profit=base_profit,
        base_price=base_price,
        yield_kg_ha=math.floor(base_yield * adjustment.rainfall * adjustment.humidity),
        profit_per_acre=math.floor(base_profit * adjustment.temperature),
        price_per_kg=math.floor(base_price * adjustment.temperature),
    )


def _reason_candidates(profile: CropProfile, season: str, location: str,
                       estimate: CropEstimate) -> List[str]:
    """Ordered reason phrasings; only the first REASON_POOL are ever used."""
    return [
        f"Well suited to the {season} season in {location}",
        f"Expected yield of about {estimate.yield_kg_ha:,} kg/ha under local rainfall and humidity",
        f"Good market price of {format_price(estimate.price_per_kg)}/kg this season",
        f"{profile.name} thrives in {'/'.join(sorted(profile.soil_types))} soils",
        f"{profile.water_requirement.value} water need with {profile.pest_resistance.value.lower()} pest resistance",
    ]


def _risk_level(rng: random.Random) -> Level:
    draw = rng.random()
    if draw > 0.7:
        return Level.HIGH
    if draw > 0.4:
        return Level.MEDIUM
    return Level.LOW


def _build_record(profile: CropProfile, season: str, location: str,
                  adjustment: LocationAdjustment, rng: random.Random) -> RecommendationRecord:
    variety = rng.choice(profile.varieties)
    estimate = sample_estimate(profile, adjustment, rng)

    reasons = _reason_candidates(profile, season, location, estimate)
    reason = reasons[rng.randrange(REASON_POOL)]

    suitability = rng.randint(*SCORE_RANGE)
    risk = _risk_level(rng)
    investment = rng.randint(*INVESTMENT_RANGE)
    roi = rng.randint(*ROI_PERCENT_RANGE)
    harvest_days = rng.randint(*HARVEST_DAYS_RANGE)
    demand = Demand.HIGH if rng.random() < 0.5 else Demand.MEDIUM
    export = rng.random() < 0.4

    return RecommendationRecord(
        crop=profile.name,
        variety=variety,
        reason=reason,
        expected_yield=f"{estimate.yield_kg_ha:,} kg/ha",
        profit_estimate=f"{format_amount(estimate.profit_per_acre)}/acre",
        market_price=f"{format_price(estimate.price_per_kg)}/kg",
        water_requirement=profile.water_requirement,
        temperature_range=profile.temperature_range,
        growing_period=profile.growing_period,
        fertilizer_needs=profile.fertilizer_needs,
        pest_resistance=profile.pest_resistance,
        suitability_score=suitability,
        risk_level=risk,
        investment_required=format_amount(investment),
        expected_roi=f"{roi}%",
        planting_window=PLANTING_WINDOWS.get(season.strip().lower(), "Flexible"),
        harvest_time=f"{harvest_days} days",
        market_demand=demand,
        export_potential=export,
        season=season,
    )


def recommend_by_conditions(
    soil_type: str,
    season: str,
    location: str,
    crop_db: CropKnowledgeBase,
    locations: LocationTable,
    rng: random.Random,
    limit: Optional[int] = None,
) -> List[RecommendationRecord]:
    """
    Rank crops compatible with the given soil type and season.

    Args:
        soil_type: Free-text soil type, matched case-insensitively
        season: Free-text season, matched case-insensitively
        location: Region name, matched case-sensitively; unknown regions use
            the table's default multipliers
        crop_db: Knowledge base to filter
        locations: Location adjustment table
        rng: Random source for all sampled figures
        limit: Maximum number of records (defaults to config, 8)

    Returns:
        Records sorted by suitability score, highest first. Empty when no
        profile matches; that is not an error.
    """
    limit = config.max_condition_results if limit is None else limit
    soil_type = soil_type or ""
    season = season or ""

    candidates = crop_db.matching(season, soil_type)
    if not candidates:
        logger.info(f"No crop profile matches soil={soil_type!r}, season={season!r}")
        return []

    adjustment = locations.lookup(location)
    records = [_build_record(p, season, location, adjustment, rng) for p in candidates]
    records.sort(key=lambda r: r.suitability_score, reverse=True)

    logger.info(
        f"Condition recommender: soil={soil_type}, season={season}, location={location}, "
        f"{len(candidates)} matched, returning {min(len(records), limit)}"
    )
    return records[:limit]
