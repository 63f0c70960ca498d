"""
Soil-Chemistry Recommender
==========================

Classifies raw N/P/K, rainfall and humidity readings into Low/Medium/High
levels and maps level combinations to a curated set of crop recommendations.

Rules are independent: each one may add its record regardless of the others,
and the same crop may appear more than once. Records are static per rule and
do not depend on the exact numeric input.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Tuple, Union

from agronomy.models import Demand, Level, RecommendationRecord, SoilReading
from agronomy.utils.formatting import format_amount, format_price
from agronomy.utils.logger import logger


# (low_below, medium_below) thresholds per reading
NITROGEN_THRESHOLDS = (30, 60)
PHOSPHORUS_THRESHOLDS = (15, 30)
POTASSIUM_THRESHOLDS = (20, 40)
MOISTURE_THRESHOLDS = (50, 150)
HUMIDITY_THRESHOLDS = (40, 70)


def classify(value: float, thresholds: Tuple[float, float]) -> Level:
    low_below, medium_below = thresholds
    if value < low_below:
        return Level.LOW
    if value < medium_below:
        return Level.MEDIUM
    return Level.HIGH


@dataclass(frozen=True)
class SoilLevels:
    nitrogen: Level
    phosphorus: Level
    potassium: Level
    moisture: Level
    humidity: Level


def classify_soil(reading: SoilReading) -> SoilLevels:
    """Map a reading onto qualitative levels (rainfall is treated as moisture)."""
    return SoilLevels(
        nitrogen=classify(reading.nitrogen, NITROGEN_THRESHOLDS),
        phosphorus=classify(reading.phosphorus, PHOSPHORUS_THRESHOLDS),
        potassium=classify(reading.potassium, POTASSIUM_THRESHOLDS),
        moisture=classify(reading.rainfall, MOISTURE_THRESHOLDS),
        humidity=classify(reading.humidity, HUMIDITY_THRESHOLDS),
    )


@dataclass(frozen=True)
class SoilRule:
    name: str
    applies: Callable[[SoilLevels], bool]
    build: Callable[[], RecommendationRecord]


def _rice() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Rice", variety="Jaya", season="Kharif",
        reason="High nitrogen supports vigorous vegetative growth and tillering",
        expected_yield="4,500 kg/ha", profit_estimate=f"{format_amount(35000)}/acre", market_price=f"{format_price(28.00)}/kg",
        water_requirement=Level.HIGH, temperature_range="20-35°C", growing_period="120-150 days",
        fertilizer_needs="Phosphorus and potassium top-up", pest_resistance=Level.MEDIUM,
        suitability_score=92, risk_level=Level.LOW, investment_required=format_amount(25000),
        expected_roi="180%", planting_window="June - July", harvest_time="130 days",
        market_demand=Demand.HIGH, export_potential=True,
    )


def _wheat() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Wheat", variety="HD 2967", season="Rabi",
        reason="Adequate phosphorus favours root development and grain filling",
        expected_yield="4,000 kg/ha", profit_estimate=f"{format_amount(30000)}/acre", market_price=f"{format_price(25.00)}/kg",
        water_requirement=Level.MEDIUM, temperature_range="15-25°C", growing_period="110-130 days",
        fertilizer_needs="Nitrogen in split doses", pest_resistance=Level.MEDIUM,
        suitability_score=88, risk_level=Level.LOW, investment_required=format_amount(20000),
        expected_roi="160%", planting_window="November - December", harvest_time="120 days",
        market_demand=Demand.HIGH, export_potential=True,
    )


def _potato() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Potato", variety="Kufri Jyoti", season="Rabi",
        reason="High potassium improves tuber size, quality and storage life",
        expected_yield="25,000 kg/ha", profit_estimate=f"{format_amount(50000)}/acre", market_price=f"{format_price(18.00)}/kg",
        water_requirement=Level.MEDIUM, temperature_range="15-20°C", growing_period="90-110 days",
        fertilizer_needs="Nitrogen and phosphorus at planting", pest_resistance=Level.MEDIUM,
        suitability_score=85, risk_level=Level.MEDIUM, investment_required=format_amount(45000),
        expected_roi="150%", planting_window="October - November", harvest_time="100 days",
        market_demand=Demand.HIGH, export_potential=False,
    )


def _sugarcane() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Sugarcane", variety="Co 86032", season="Year-round",
        reason="High rainfall and humidity meet the crop's heavy water demand",
        expected_yield="85,000 kg/ha", profit_estimate=f"{format_amount(70000)}/acre", market_price=f"{format_price(3.50)}/kg",
        water_requirement=Level.HIGH, temperature_range="20-35°C", growing_period="10-12 months",
        fertilizer_needs="High nitrogen and potassium", pest_resistance=Level.MEDIUM,
        suitability_score=90, risk_level=Level.MEDIUM, investment_required=format_amount(55000),
        expected_roi="210%", planting_window="February - March", harvest_time="330 days",
        market_demand=Demand.HIGH, export_potential=True,
    )


def _maize() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Maize", variety="HQPM-1", season="Kharif",
        reason="Balanced medium NPK suits maize's moderate nutrient needs",
        expected_yield="5,500 kg/ha", profit_estimate=f"{format_amount(28000)}/acre", market_price=f"{format_price(21.00)}/kg",
        water_requirement=Level.MEDIUM, temperature_range="21-30°C", growing_period="90-110 days",
        fertilizer_needs="Balanced NPK with zinc", pest_resistance=Level.MEDIUM,
        suitability_score=86, risk_level=Level.LOW, investment_required=format_amount(18000),
        expected_roi="170%", planting_window="June - July", harvest_time="100 days",
        market_demand=Demand.MEDIUM, export_potential=False,
    )


def _chili() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Chili", variety="Pusa Jwala", season="Rabi/Kharif",
        reason="Tolerates low nutrient levels and responds well to targeted feeding",
        expected_yield="2,000 kg/ha", profit_estimate=f"{format_amount(45000)}/acre", market_price=f"{format_price(120.00)}/kg",
        water_requirement=Level.MEDIUM, temperature_range="20-30°C", growing_period="120-150 days",
        fertilizer_needs="Correct the deficient nutrient before transplanting", pest_resistance=Level.LOW,
        suitability_score=82, risk_level=Level.MEDIUM, investment_required=format_amount(22000),
        expected_roi="200%", planting_window="September - October", harvest_time="140 days",
        market_demand=Demand.HIGH, export_potential=True,
    )


def _tomato() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Tomato", variety="Pusa Ruby", season="Rabi/Kharif",
        reason="Adaptable vegetable crop that diversifies income across seasons",
        expected_yield="25,000 kg/ha", profit_estimate=f"{format_amount(60000)}/acre", market_price=f"{format_price(25.00)}/kg",
        water_requirement=Level.MEDIUM, temperature_range="18-27°C", growing_period="90-120 days",
        fertilizer_needs="Balanced NPK with calcium", pest_resistance=Level.LOW,
        suitability_score=78, risk_level=Level.MEDIUM, investment_required=format_amount(30000),
        expected_roi="190%", planting_window="August - October", harvest_time="110 days",
        market_demand=Demand.HIGH, export_potential=False,
    )


def _onion() -> RecommendationRecord:
    return RecommendationRecord(
        crop="Onion", variety="Agrifound Dark Red", season="Rabi",
        reason="Steady year-round demand and good storage make it a safe addition",
        expected_yield="22,000 kg/ha", profit_estimate=f"{format_amount(45000)}/acre", market_price=f"{format_price(30.00)}/kg",
        water_requirement=Level.MEDIUM, temperature_range="13-25°C", growing_period="120-150 days",
        fertilizer_needs="Nitrogen and sulphur", pest_resistance=Level.MEDIUM,
        suitability_score=75, risk_level=Level.MEDIUM, investment_required=format_amount(28000),
        expected_roi="160%", planting_window="October - November", harvest_time="135 days",
        market_demand=Demand.MEDIUM, export_potential=True,
    )


def _any_npk_low(levels: SoilLevels) -> bool:
    return Level.LOW in (levels.nitrogen, levels.phosphorus, levels.potassium)


# Evaluated in this order; every rule is checked independently.
SOIL_RULES: Tuple[SoilRule, ...] = (
    SoilRule("high_nitrogen", lambda lv: lv.nitrogen is Level.HIGH, _rice),
    SoilRule("adequate_phosphorus", lambda lv: lv.phosphorus in (Level.MEDIUM, Level.HIGH), _wheat),
    SoilRule("high_potassium", lambda lv: lv.potassium is Level.HIGH, _potato),
    SoilRule("wet_and_humid",
             lambda lv: lv.moisture is Level.HIGH and lv.humidity is Level.HIGH, _sugarcane),
    SoilRule("balanced_npk",
             lambda lv: all(l is Level.MEDIUM for l in (lv.nitrogen, lv.phosphorus, lv.potassium)),
             _maize),
    SoilRule("nutrient_deficit", _any_npk_low, _chili),
    SoilRule("baseline_tomato", lambda lv: True, _tomato),
    SoilRule("baseline_onion", lambda lv: True, _onion),
)


def apply_rules(levels: SoilLevels, rules: Tuple[SoilRule, ...] = SOIL_RULES) -> List[RecommendationRecord]:
    """Records from every rule that fires, in rule order (unsorted, not de-duplicated)."""
    return [rule.build() for rule in rules if rule.applies(levels)]


def recommend_by_soil(
    nitrogen: Union[SoilReading, Any],
    phosphorus: Any = None,
    potassium: Any = None,
    rainfall: Any = None,
    humidity: Any = None,
) -> List[RecommendationRecord]:
    """
    Recommend crops from a soil chemistry reading.

    Accepts either a ``SoilReading`` or the five raw values (numbers or
    numeric strings).

    Raises:
        InvalidInput: if any value is missing, blank, non-numeric or negative.

    Returns:
        Every rule-triggered record sorted by suitability score, highest
        first. The list is never truncated.
    """
    if isinstance(nitrogen, SoilReading):
        reading = nitrogen
    else:
        reading = SoilReading.parse(nitrogen, phosphorus, potassium, rainfall, humidity)

    levels = classify_soil(reading)
    records = apply_rules(levels)
    records.sort(key=lambda r: r.suitability_score, reverse=True)

    logger.info(
        f"Soil recommender: N={levels.nitrogen.value}, P={levels.phosphorus.value}, "
        f"K={levels.potassium.value}, moisture={levels.moisture.value}, "
        f"humidity={levels.humidity.value} -> {[r.crop for r in records]}"
    )
    return records
