"""Application use cases."""

from kardex.application.use_cases.compute_kardex import ComputeKardexUseCase, KardexResult
from kardex.application.use_cases.search_items import SearchItemsUseCase

__all__ = [
    "ComputeKardexUseCase",
    "KardexResult",
    "SearchItemsUseCase",
]
