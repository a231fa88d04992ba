"""Daily ledger (kardex) endpoints."""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from kardex.api.dependencies import get_compute_kardex_use_case
from kardex.application.dto.requests import KardexRequest
from kardex.application.dto.responses import ErrorResponse, KardexResponse, StatementResponse
from kardex.application.use_cases.compute_kardex import ComputeKardexUseCase, KardexResult

router = APIRouter(prefix="/api/kardex", tags=["kardex"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


async def _compute(
    item_code: str,
    date_from: date | None,
    date_to: date | None,
    low_stock_threshold: Decimal | None,
    high_movement_factor: Decimal | None,
    use_case: ComputeKardexUseCase,
) -> KardexResult:
    request = KardexRequest(
        item_id=item_code,
        date_from=date_from,
        date_to=date_to,
        low_stock_threshold=low_stock_threshold,
        high_movement_factor=high_movement_factor,
    )
    return await use_case.execute(request)


@router.get("/{item_code}", response_model=KardexResponse, responses=ERROR_RESPONSES)
async def get_kardex(
    item_code: str,
    date_from: date | None = Query(default=None, description="Window start, inclusive"),
    date_to: date | None = Query(default=None, description="Window end, inclusive"),
    low_stock_threshold: Decimal | None = Query(default=None),
    high_movement_factor: Decimal | None = Query(default=None, gt=0),
    use_case: ComputeKardexUseCase = Depends(get_compute_kardex_use_case),
) -> KardexResponse:
    """
    Daily ledger for one item.

    Returns the opening balance, one bucket per day of the window (days
    without movements included) and window totals.
    """
    result = await _compute(
        item_code, date_from, date_to, low_stock_threshold, high_movement_factor, use_case
    )
    return use_case.to_response(result)


@router.get(
    "/{item_code}/statement", response_model=StatementResponse, responses=ERROR_RESPONSES
)
async def get_kardex_statement(
    item_code: str,
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    low_stock_threshold: Decimal | None = Query(default=None),
    use_case: ComputeKardexUseCase = Depends(get_compute_kardex_use_case),
) -> StatementResponse:
    """Same ledger as flat rows for tables and exports."""
    result = await _compute(item_code, date_from, date_to, low_stock_threshold, None, use_case)
    return use_case.to_statement_response(result)
