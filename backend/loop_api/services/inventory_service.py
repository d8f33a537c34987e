"""
Loop API — Shop & Inventory Service
=====================================

What:  Offset-paged reads of the caller's inventory and of the shop catalog.

hasMore:
    Computed as "the page came back full" (len(rows) == limit) rather than
    from a count query. When exactly `limit` rows remain, the client gets
    hasMore=true and its next request returns an empty page.
"""

from typing import List

from loop_api.schemas.queries import InventoryQuery, ShopItemQuery
from loop_api.schemas.responses import PagedItemsResponse, Row
from loop_api.services.store_base import DataStore


def page(rows: List[Row], limit: int) -> PagedItemsResponse:
    return PagedItemsResponse(items=rows, has_more=len(rows) == limit)


class InventoryService:

    async def list_inventory(self, store: DataStore, query: InventoryQuery) -> PagedItemsResponse:
        rows = await store.list_inventory(query)
        return page(rows, query.limit)

    async def list_shop_items(self, store: DataStore, query: ShopItemQuery) -> PagedItemsResponse:
        rows = await store.list_shop_items(query)
        return page(rows, query.limit)


inventory_service = InventoryService()
