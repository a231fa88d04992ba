"""Data transfer objects."""

from kardex.application.dto.requests import ItemSearchRequest, KardexRequest
from kardex.application.dto.responses import (
    DailyBucketResponse,
    ErrorResponse,
    HealthResponse,
    ItemResponse,
    ItemSearchResponse,
    KardexResponse,
    LedgerTotalsResponse,
    MovementDetailResponse,
    StatementResponse,
    StatementRowResponse,
)

__all__ = [
    "KardexRequest",
    "ItemSearchRequest",
    "DailyBucketResponse",
    "ErrorResponse",
    "HealthResponse",
    "ItemResponse",
    "ItemSearchResponse",
    "KardexResponse",
    "LedgerTotalsResponse",
    "MovementDetailResponse",
    "StatementResponse",
    "StatementRowResponse",
]
