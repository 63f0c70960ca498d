from agronomy.market.trends import (
    MarketTrendSeries,
    adapt_provider_trends,
    fallback_series,
    synthesize,
    to_chart_rows,
)

__all__ = [
    "MarketTrendSeries",
    "adapt_provider_trends",
    "fallback_series",
    "synthesize",
    "to_chart_rows",
]
