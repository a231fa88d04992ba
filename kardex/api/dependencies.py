"""
FastAPI dependency providers.

Overridden in tests via app.dependency_overrides.
"""

from kardex.application.use_cases import ComputeKardexUseCase, SearchItemsUseCase


def get_compute_kardex_use_case() -> ComputeKardexUseCase:
    """Get ledger computation use case."""
    return ComputeKardexUseCase()


def get_search_items_use_case() -> SearchItemsUseCase:
    """Get item lookup use case."""
    return SearchItemsUseCase()
