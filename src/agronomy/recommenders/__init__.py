"""
Recommenders
============

Two pure recommenders sharing the ``RecommendationRecord`` output shape:
- Condition-based: soil type + season + location, randomized and truncated
- Soil-chemistry: N/P/K + rainfall + humidity, fixed rule set, validated input
"""

from agronomy.recommenders.conditions import recommend_by_conditions
from agronomy.recommenders.soil import classify_soil, recommend_by_soil

__all__ = ["recommend_by_conditions", "recommend_by_soil", "classify_soil"]
