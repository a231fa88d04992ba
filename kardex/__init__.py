"""Kardex: inventory ledger reconstruction and daily aggregation."""

__version__ = "1.0.0"
