"""
Loop API — Admin Route Handlers
=================================

What:  Privileged quest and bonus operations.
How:   Each route depends on a privilege dependency from loop_api.auth, so
       FastAPI rejects unauthenticated (401) and non-admin (403) callers
       before the handler body runs.

Two privilege models coexist in the profile table:
    - is_admin (boolean) gates bonus distribution
    - role == "admin" (string) gates quest management
"""

import logging

from fastapi import APIRouter, Depends, Request

from loop_api.auth import require_admin, require_admin_role
from loop_api.dependencies import get_store
from loop_api.schemas.identity import Identity
from loop_api.schemas.requests import (
    QuestCreateRequest,
    QuestToggleRequest,
    QuestUpdateRequest,
)
from loop_api.schemas.responses import (
    BonusDistributionResponse,
    ErrorResponse,
    QuestDeleteResponse,
    QuestListResponse,
    QuestResponse,
)
from loop_api.services.quest_service import quest_service
from loop_api.services.store_base import DataStore
from loop_api.validation import parse_body, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])

AUTH_ERRORS = {
    401: {"description": "Missing or invalid credential", "model": ErrorResponse},
    403: {"description": "Admin access required", "model": ErrorResponse},
    500: {"description": "Backend failure", "model": ErrorResponse},
}


@router.post(
    "/distribute-bonus",
    response_model=BonusDistributionResponse,
    responses=AUTH_ERRORS,
    summary="Distribute the weekly coin bonus to all eligible users",
)
async def distribute_bonus(
    admin: Identity = Depends(require_admin),
    store: DataStore = Depends(get_store),
) -> BonusDistributionResponse:
    logger.info("Weekly bonus distribution requested by %s", admin.id)
    return await quest_service.distribute_weekly_bonus(store)


@router.post(
    "/quests/{quest_id}/toggle",
    response_model=QuestResponse,
    responses={400: {"description": "is_active missing", "model": ErrorResponse}, **AUTH_ERRORS},
    summary="Activate or deactivate a quest",
)
async def toggle_quest(
    quest_id: str,
    request: Request,
    admin: Identity = Depends(require_admin_role),
    store: DataStore = Depends(get_store),
) -> QuestResponse:
    """
    Body: {"is_active": true|false}

    The body is read only after the role check has passed.
    """
    payload = parse_body(QuestToggleRequest, await read_json_body(request))
    return await quest_service.toggle_quest(store, quest_id, payload)


@router.get(
    "/quests",
    response_model=QuestListResponse,
    responses=AUTH_ERRORS,
    summary="List all quests with completion counts",
)
async def list_quests(
    admin: Identity = Depends(require_admin_role),
    store: DataStore = Depends(get_store),
) -> QuestListResponse:
    return await quest_service.list_quests(store)


@router.post(
    "/quests",
    response_model=QuestResponse,
    responses={400: {"description": "title missing or bad field", "model": ErrorResponse}, **AUTH_ERRORS},
    summary="Create a quest",
)
async def create_quest(
    request: Request,
    admin: Identity = Depends(require_admin_role),
    store: DataStore = Depends(get_store),
) -> QuestResponse:
    payload = parse_body(QuestCreateRequest, await read_json_body(request))
    return await quest_service.create_quest(store, admin, payload)


@router.put(
    "/quests/{quest_id}",
    response_model=QuestResponse,
    responses={400: {"description": "Bad field", "model": ErrorResponse}, **AUTH_ERRORS},
    summary="Update a quest's fields",
)
async def update_quest(
    quest_id: str,
    request: Request,
    admin: Identity = Depends(require_admin_role),
    store: DataStore = Depends(get_store),
) -> QuestResponse:
    payload = parse_body(QuestUpdateRequest, await read_json_body(request))
    return await quest_service.update_quest(store, quest_id, payload)


@router.delete(
    "/quests/{quest_id}",
    response_model=QuestDeleteResponse,
    responses=AUTH_ERRORS,
    summary="Delete a quest",
)
async def delete_quest(
    quest_id: str,
    admin: Identity = Depends(require_admin_role),
    store: DataStore = Depends(get_store),
) -> QuestDeleteResponse:
    return await quest_service.delete_quest(store, quest_id)
