"""Search Items Use Case — item lookup by code or name."""

from kardex.application.dto.requests import ItemSearchRequest
from kardex.application.dto.responses import ItemResponse, ItemSearchResponse
from kardex.config import get_logger
from kardex.core.entities.movement import Item
from kardex.core.exceptions import ItemNotFoundError
from kardex.core.interfaces.movement_repository import IMovementRepository

logger = get_logger(__name__)


class SearchItemsUseCase:
    """Find the item a ledger query should run against."""

    def __init__(self, repository: IMovementRepository | None = None):
        self._repository = repository

    async def _get_repository(self) -> IMovementRepository:
        if self._repository is None:
            from kardex.infrastructure.storage.sqlite import get_movement_repository

            self._repository = await get_movement_repository()
        return self._repository

    async def execute(self, request: ItemSearchRequest) -> list[Item]:
        """Search items whose code or name contains the term."""
        repository = await self._get_repository()
        items = await repository.search_items(request.term.strip(), limit=request.limit)
        logger.info("item_search_complete", term=request.term, results=len(items))
        return items

    async def get(self, item_code: str) -> Item:
        """Fetch one item by code."""
        repository = await self._get_repository()
        item = await repository.get_item(item_code)
        if item is None:
            raise ItemNotFoundError(item_code)
        return item

    def to_response(self, items: list[Item]) -> ItemSearchResponse:
        """Convert result to API response."""
        return ItemSearchResponse(
            items=[ItemResponse.from_entity(item) for item in items],
            total=len(items),
        )
