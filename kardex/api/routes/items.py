"""Item lookup endpoints."""

from fastapi import APIRouter, Depends, Query

from kardex.api.dependencies import get_search_items_use_case
from kardex.application.dto.requests import ItemSearchRequest
from kardex.application.dto.responses import ErrorResponse, ItemResponse, ItemSearchResponse
from kardex.application.use_cases.search_items import SearchItemsUseCase

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=ItemSearchResponse)
async def search_items(
    q: str = Query(..., min_length=1, description="Code or name fragment"),
    limit: int = Query(default=10, ge=1, le=100),
    use_case: SearchItemsUseCase = Depends(get_search_items_use_case),
) -> ItemSearchResponse:
    """Search items by code or name."""
    items = await use_case.execute(ItemSearchRequest(term=q, limit=limit))
    return use_case.to_response(items)


@router.get(
    "/{item_code}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_code: str,
    use_case: SearchItemsUseCase = Depends(get_search_items_use_case),
) -> ItemResponse:
    """Get one item by code."""
    item = await use_case.get(item_code)
    return ItemResponse.from_entity(item)
