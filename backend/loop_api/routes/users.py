"""
Loop API — User & Profile Route Handlers
==========================================

Route Inventory:
    GET  /api/users                  public listing (?sort=newest|popular&limit=5)
    GET  /api/users/profile          caller's own profile
    POST /api/users/update-profile   partial update of the caller's profile
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from loop_api.auth import require_identity
from loop_api.dependencies import get_store
from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import UserListQuery
from loop_api.schemas.requests import ProfileUpdateRequest
from loop_api.schemas.responses import (
    ErrorResponse,
    ProfileResponse,
    ProfileUpdateResponse,
    UserListResponse,
)
from loop_api.services.profile_service import profile_service
from loop_api.services.store_base import DataStore
from loop_api.validation import parse_body, parse_int_param, read_json_body

router = APIRouter(prefix="/api/users", tags=["Users"])

DEFAULT_USER_LIMIT = 5


@router.get(
    "",
    response_model=UserListResponse,
    responses={
        400: {"description": "Bad limit", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="List users, newest or most followed first",
)
async def list_users(
    sort: Optional[str] = Query(default=None, description="'newest' (default) or 'popular'"),
    limit: Optional[str] = Query(default=None, description="Number of users (default 5)"),
    store: DataStore = Depends(get_store),
) -> UserListResponse:
    query = UserListQuery(
        sort=sort or "newest",
        limit=parse_int_param(limit, "limit", default=DEFAULT_USER_LIMIT, minimum=1),
    )
    return await profile_service.list_users(store, query)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={
        401: {"description": "Missing or invalid credential", "model": ErrorResponse},
        404: {"description": "Profile not found", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="The caller's profile",
)
async def get_profile(
    identity: Identity = Depends(require_identity),
    store: DataStore = Depends(get_store),
) -> ProfileResponse:
    return await profile_service.get_profile(store, identity)


@router.post(
    "/update-profile",
    response_model=ProfileUpdateResponse,
    responses={
        400: {"description": "Malformed body", "model": ErrorResponse},
        401: {"description": "Missing or invalid credential", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="Update bio, interests, avatar, theme or onboarding state",
)
async def update_profile(
    request: Request,
    identity: Identity = Depends(require_identity),
    store: DataStore = Depends(get_store),
) -> ProfileUpdateResponse:
    payload = parse_body(ProfileUpdateRequest, await read_json_body(request))
    return await profile_service.update_profile(store, identity, payload)
