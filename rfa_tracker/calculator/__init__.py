"""Aggregation and premium calculation module."""

from .aggregator import AllocationAggregator, classify_tier, percentage_share
from .premium import (
    build_chart_rows,
    build_premium_rows,
    build_wrappers,
    filter_series,
    premium_percent,
)

__all__ = [
    "AllocationAggregator",
    "classify_tier",
    "percentage_share",
    "build_chart_rows",
    "build_premium_rows",
    "build_wrappers",
    "filter_series",
    "premium_percent",
]
