"""
Loop API — Loop Interaction Route Handler
===========================================

What:  GET /api/loop-interactions?loop_ids=a,b,c
Who:   The feed, to mark loops the caller already liked or saved.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from loop_api.auth import require_identity
from loop_api.dependencies import get_store
from loop_api.schemas.identity import Identity
from loop_api.schemas.responses import ErrorResponse, LoopInteractionsResponse
from loop_api.services.interaction_service import interaction_service
from loop_api.services.store_base import DataStore
from loop_api.validation import split_csv_param

router = APIRouter(prefix="/api", tags=["Loops"])


@router.get(
    "/loop-interactions",
    response_model=LoopInteractionsResponse,
    responses={
        401: {"description": "Missing or invalid credential", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="The caller's interactions with the given loops",
)
async def list_loop_interactions(
    loop_ids: Optional[str] = Query(default=None, description="Comma-separated loop ids"),
    identity: Identity = Depends(require_identity),
    store: DataStore = Depends(get_store),
) -> LoopInteractionsResponse:
    # blank or all-comma values mean "no loops", not an error
    return await interaction_service.list_loop_interactions(
        store, identity, split_csv_param(loop_ids)
    )
