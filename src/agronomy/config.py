"""
Engine Configuration
--------------------
Central configuration for the recommendation engine and the ledger table.
"""

import os
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Recommendation engine settings."""

    # AWS Settings
    aws_region: str = os.environ.get("AWS_REGION", "ap-south-1")

    # DynamoDB table for saved/favorited recommendations
    favorites_table: str = os.environ.get("FAVORITES_TABLE", "farmer-recommendation-ledger")

    # Region whose multipliers are used when a location is not in the table
    default_location: str = os.environ.get("DEFAULT_LOCATION", "Kerala")

    # Condition-based results are truncated to this many records
    max_condition_results: int = int(os.environ.get("MAX_CONDITION_RESULTS", "8"))

    # Market trend window (days) and the largest window a request may ask for
    trend_days: int = int(os.environ.get("TREND_DAYS", "7"))
    max_trend_days: int = int(os.environ.get("MAX_TREND_DAYS", "365"))

    currency_symbol: str = os.environ.get("CURRENCY_SYMBOL", "₹")
    log_level: str = os.environ.get("LOG_LEVEL", "INFO")


# Global config instance
config = EngineConfig()
