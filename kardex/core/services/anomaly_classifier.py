"""
Anomaly Classifier.

Flags low-stock and high-movement days on an already materialized window.
Pure function, no I/O.
"""

from decimal import Decimal

from kardex.core.entities.ledger import ZERO, LedgerWindow
from kardex.core.exceptions import MalformedWindowError

DEFAULT_LOW_STOCK_THRESHOLD = Decimal("10")
DEFAULT_HIGH_MOVEMENT_FACTOR = Decimal("2")


def mean_daily_volume(window: LedgerWindow) -> Decimal:
    """Mean of inbound + outbound per day across the whole window."""
    if not window.buckets:
        raise MalformedWindowError("window has no buckets")
    volume = window.totals.inbound + window.totals.outbound
    return volume / len(window.buckets)


def classify(
    window: LedgerWindow,
    low_stock_threshold: Decimal = DEFAULT_LOW_STOCK_THRESHOLD,
    high_movement_factor: Decimal = DEFAULT_HIGH_MOVEMENT_FACTOR,
) -> LedgerWindow:
    """
    Annotate each bucket with low_stock and high_movement flags.

    low_stock: running balance strictly below low_stock_threshold.
    high_movement: day volume strictly above high_movement_factor times the
    window's mean daily volume, and nonzero. A window with no movement at all
    has no high-movement days.

    Returns the same window, updated in place.

    Raises:
        MalformedWindowError: If the window has no buckets.
    """
    mean = mean_daily_volume(window)
    cutoff = high_movement_factor * mean

    for bucket in window.buckets:
        bucket.low_stock = bucket.running_balance < low_stock_threshold
        volume = bucket.volume
        bucket.high_movement = mean > ZERO and volume > ZERO and volume > cutoff

    return window
