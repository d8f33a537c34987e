"""
Loop API — Message Reaction Route Handler
===========================================

What:  POST /api/messages/reactions
Body:  {"message_id": "...", "emoji": "🔥", "action": "add" | "remove"}

The caller is resolved through the identity provider like every other
protected endpoint, and the reaction is stored under that identity.
"""

from fastapi import APIRouter, Depends, Request

from loop_api.auth import require_identity
from loop_api.dependencies import get_realtime, get_store
from loop_api.schemas.identity import Identity
from loop_api.schemas.requests import ReactionRequest
from loop_api.schemas.responses import ErrorResponse, ReactionResponse
from loop_api.services.reaction_service import reaction_service
from loop_api.services.realtime import RealtimeConnection
from loop_api.services.store_base import DataStore
from loop_api.validation import parse_body, read_json_body

router = APIRouter(prefix="/api/messages", tags=["Messages"])


@router.post(
    "/reactions",
    response_model=ReactionResponse,
    responses={
        400: {"description": "Missing field or invalid action", "model": ErrorResponse},
        401: {"description": "Missing or invalid credential", "model": ErrorResponse},
        500: {"description": "Backend failure", "model": ErrorResponse},
    },
    summary="Add or remove the caller's emoji reaction on a message",
)
async def react_to_message(
    request: Request,
    identity: Identity = Depends(require_identity),
    store: DataStore = Depends(get_store),
    realtime: RealtimeConnection = Depends(get_realtime),
) -> ReactionResponse:
    payload = parse_body(ReactionRequest, await read_json_body(request))
    return await reaction_service.apply(store, realtime, identity, payload)
