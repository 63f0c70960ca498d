"""
Agronomic Recommendation Engine
===============================

Pure computation over structured inputs:
- Condition-Based Recommender: soil type + season + location → ranked crops
- Soil-Chemistry Recommender: N/P/K + rainfall + humidity → rule-based crops
- Market Trend Synthesizer: simulated price series and chart rows

Both recommenders return the same RecommendationRecord shape. Randomness is
always drawn from an injected ``random.Random`` so results are reproducible.
"""

from agronomy.engine import RecommendationEngine
from agronomy.models import (
    AgronomyError,
    Demand,
    InvalidInput,
    Level,
    RecommendationRecord,
    SeriesLengthMismatch,
    SoilReading,
)

__version__ = "0.1.0"

# Wire shape of RecommendationRecord.to_dict()
RECOMMENDATION_SCHEMA = {
    "crop": "string",
    "variety": "string|null",
    "reason": "string",
    "expectedYield": "string",       # e.g. "4,500 kg/ha"
    "profitEstimate": "string",      # e.g. "₹35,000/acre"
    "marketPrice": "string",         # e.g. "₹28.00/kg"
    "waterRequirement": "string",    # Low, Medium, High
    "temperatureRange": "string",
    "growingPeriod": "string",
    "fertilizerNeeds": "string",
    "pestResistance": "string",      # Low, Medium, High
    "suitabilityScore": "int",       # 0-100
    "riskLevel": "string",           # Low, Medium, High
    "investmentRequired": "string",
    "expectedROI": "string",         # e.g. "185%"
    "plantingWindow": "string",
    "harvestTime": "string",
    "marketDemand": "string",        # Medium, High
    "exportPotential": "string",     # Yes, No
    "season": "string|null",
}

__all__ = [
    "AgronomyError",
    "Demand",
    "InvalidInput",
    "Level",
    "RECOMMENDATION_SCHEMA",
    "RecommendationEngine",
    "RecommendationRecord",
    "SeriesLengthMismatch",
    "SoilReading",
]
