"""
Shared Types
============

Record, reading and enum types shared by both recommenders, the market trend
synthesizer and the ledger, plus the engine's error taxonomy.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class Level(Enum):
    """Qualitative level used for risk, water need, resistance and soil readings."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Demand(Enum):
    """Market demand for a recommended crop."""
    MEDIUM = "Medium"
    HIGH = "High"


class AgronomyError(Exception):
    """Base class for engine failures reported to the caller."""


class InvalidInput(AgronomyError, ValueError):
    """Raised when a soil reading has missing, blank or non-numeric fields."""
    def __init__(self, fields: List[str], message: str = None):
        self.fields = list(fields)
        super().__init__(
            message or f"Invalid soil reading, required non-negative numeric fields: {', '.join(self.fields)}"
        )


class SeriesLengthMismatch(AgronomyError, ValueError):
    """Raised when trend series handed to the chart reshape differ in length."""
    def __init__(self, lengths: Dict[str, int]):
        self.lengths = dict(lengths)
        super().__init__(f"Market trend series must share one length, got {self.lengths}")


@dataclass(frozen=True)
class RecommendationRecord:
    """One ranked crop recommendation, identical in shape for both recommenders."""

    crop: str
    variety: Optional[str]
    reason: str
    expected_yield: str
    profit_estimate: str
    market_price: str
    water_requirement: Level
    temperature_range: str
    growing_period: str
    fertilizer_needs: str
    pest_resistance: Level
    suitability_score: int
    risk_level: Level
    investment_required: str
    expected_roi: str
    planting_window: str
    harvest_time: str
    market_demand: Demand
    export_potential: bool
    season: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.suitability_score <= 100:
            raise ValueError(f"suitability_score out of range: {self.suitability_score}")

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase shape consumed by the dashboard and the ledger."""
        return {
            "crop": self.crop,
            "variety": self.variety,
            "reason": self.reason,
            "expectedYield": self.expected_yield,
            "profitEstimate": self.profit_estimate,
            "marketPrice": self.market_price,
            "waterRequirement": self.water_requirement.value,
            "temperatureRange": self.temperature_range,
            "growingPeriod": self.growing_period,
            "fertilizerNeeds": self.fertilizer_needs,
            "pestResistance": self.pest_resistance.value,
            "suitabilityScore": self.suitability_score,
            "riskLevel": self.risk_level.value,
            "investmentRequired": self.investment_required,
            "expectedROI": self.expected_roi,
            "plantingWindow": self.planting_window,
            "harvestTime": self.harvest_time,
            "marketDemand": self.market_demand.value,
            "exportPotential": "Yes" if self.export_potential else "No",
            "season": self.season,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecommendationRecord":
        return cls(
            crop=data["crop"],
            variety=data.get("variety"),
            reason=data.get("reason", ""),
            expected_yield=data.get("expectedYield", ""),
            profit_estimate=data.get("profitEstimate", ""),
            market_price=data.get("marketPrice", ""),
            water_requirement=Level(data.get("waterRequirement", "Medium")),
            temperature_range=data.get("temperatureRange", ""),
            growing_period=data.get("growingPeriod", ""),
            fertilizer_needs=data.get("fertilizerNeeds", ""),
            pest_resistance=Level(data.get("pestResistance", "Medium")),
            suitability_score=int(data.get("suitabilityScore", 0)),
            risk_level=Level(data.get("riskLevel", "Medium")),
            investment_required=data.get("investmentRequired", ""),
            expected_roi=data.get("expectedROI", ""),
            planting_window=data.get("plantingWindow", ""),
            harvest_time=data.get("harvestTime", ""),
            market_demand=Demand(data.get("marketDemand", "Medium")),
            export_potential=data.get("exportPotential") in ("Yes", True),
            season=data.get("season"),
        )


def _parse_reading_value(value: Any) -> Optional[float]:
    """Return a non-negative float, or None if the value is unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


@dataclass(frozen=True)
class SoilReading:
    """Raw soil chemistry and weather reading (N/P/K, rainfall mm, humidity %)."""

    nitrogen: float
    phosphorus: float
    potassium: float
    rainfall: float
    humidity: float

    @classmethod
    def parse(cls, nitrogen: Any, phosphorus: Any, potassium: Any,
              rainfall: Any, humidity: Any) -> "SoilReading":
        """
        Build a reading from loosely-typed input (form values, JSON numbers).

        Raises:
            InvalidInput: naming every field that is missing, blank,
                non-numeric or negative. No partial reading is returned.
        """
        raw = {
            "N": nitrogen,
            "P": phosphorus,
            "K": potassium,
            "rainfall": rainfall,
            "humidity": humidity,
        }
        parsed = {key: _parse_reading_value(value) for key, value in raw.items()}
        bad = [key for key, value in parsed.items() if value is None]
        if bad:
            raise InvalidInput(bad)
        return cls(
            nitrogen=parsed["N"],
            phosphorus=parsed["P"],
            potassium=parsed["K"],
            rainfall=parsed["rainfall"],
            humidity=parsed["humidity"],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SoilReading":
        return cls.parse(
            data.get("N"),
            data.get("P"),
            data.get("K"),
            data.get("rainfall"),
            data.get("humidity"),
        )
