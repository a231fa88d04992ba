"""Ledger computation services."""

from kardex.core.services.anomaly_classifier import (
    DEFAULT_HIGH_MOVEMENT_FACTOR,
    DEFAULT_LOW_STOCK_THRESHOLD,
    classify,
    mean_daily_volume,
)
from kardex.core.services.balance_reconstructor import BalanceReconstructor
from kardex.core.services.daily_aggregator import (
    DEFAULT_MAX_WINDOW_DAYS,
    DailyAggregator,
    aggregate_movements,
    iter_window_dates,
    validate_window,
    window_day_count,
)

__all__ = [
    "BalanceReconstructor",
    "DailyAggregator",
    "aggregate_movements",
    "iter_window_dates",
    "validate_window",
    "window_day_count",
    "DEFAULT_MAX_WINDOW_DAYS",
    "classify",
    "mean_daily_volume",
    "DEFAULT_LOW_STOCK_THRESHOLD",
    "DEFAULT_HIGH_MOVEMENT_FACTOR",
]
