"""
Loop API — Shop & Inventory Route Handlers
============================================

What:  GET /api/inventory (caller's purchased items) and GET /api/shop/items
       (public catalog), both offset-paged.

Pagination:
    limit / offset come in as raw strings and are parsed after
    authentication. Missing values use the defaults (limit 50, offset 0);
    non-integers, limit < 1 and offset < 0 are 400s.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from loop_api.auth import require_identity
from loop_api.dependencies import get_store
from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import InventoryQuery, ShopItemQuery
from loop_api.schemas.responses import ErrorResponse, PagedItemsResponse
from loop_api.services.inventory_service import inventory_service
from loop_api.services.store_base import DataStore
from loop_api.validation import parse_int_param

router = APIRouter(prefix="/api", tags=["Shop"])

DEFAULT_PAGE_SIZE = 50


@router.get(
    "/inventory",
    response_model=PagedItemsResponse,
    responses={
        400: {"description": "Bad pagination parameter", "model": ErrorResponse},
        401: {"description": "Missing or invalid credential", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="List the caller's inventory, newest purchase first",
)
async def list_inventory(
    category: Optional[str] = Query(default=None, description="Shop item category filter"),
    limit: Optional[str] = Query(default=None, description="Page size (default 50)"),
    offset: Optional[str] = Query(default=None, description="Rows to skip (default 0)"),
    identity: Identity = Depends(require_identity),
    store: DataStore = Depends(get_store),
) -> PagedItemsResponse:
    query = InventoryQuery(
        user_id=identity.id,
        category=category or None,
        limit=parse_int_param(limit, "limit", default=DEFAULT_PAGE_SIZE, minimum=1),
        offset=parse_int_param(offset, "offset", default=0, minimum=0),
    )
    return await inventory_service.list_inventory(store, query)


@router.get(
    "/shop/items",
    response_model=PagedItemsResponse,
    responses={
        400: {"description": "Bad pagination parameter", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="List active shop items, newest first",
)
async def list_shop_items(
    category: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    offset: Optional[str] = Query(default=None),
    store: DataStore = Depends(get_store),
) -> PagedItemsResponse:
    query = ShopItemQuery(
        category=category or None,
        limit=parse_int_param(limit, "limit", default=DEFAULT_PAGE_SIZE, minimum=1),
        offset=parse_int_param(offset, "offset", default=0, minimum=0),
    )
    return await inventory_service.list_shop_items(store, query)
