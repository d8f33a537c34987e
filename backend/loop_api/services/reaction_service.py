"""
Loop API — Message Reaction Service
=====================================

What:  Adds or removes one emoji reaction of the caller on a message, then
       tells other clients about it over the realtime connection.

Workflow (POST /api/messages/reactions):
    ┌────────────┐    ┌──────────────┐    ┌─────────────────┐
    │  Validate  │───▶│  Store add/  │───▶│ Publish event   │
    │  payload   │    │  remove      │    │ (if connected)  │
    └────────────┘    └──────────────┘    └─────────────────┘

    Validation failure → BadRequestError, nothing stored or published.
    Store failure      → BackendError, nothing published.

Both store operations are idempotent set operations, so repeating a request
is harmless.
"""

import logging

from loop_api.exceptions import BadRequestError
from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import ReactionKey
from loop_api.schemas.requests import ReactionRequest
from loop_api.schemas.responses import ReactionResponse
from loop_api.services.realtime import RealtimeConnection
from loop_api.services.store_base import DataStore

logger = logging.getLogger(__name__)

REACTION_EVENT = "message:reaction"

ACTION_MESSAGES = {
    "add": "Reaction added",
    "remove": "Reaction removed",
}


class ReactionService:

    def validate(self, identity: Identity, payload: ReactionRequest) -> ReactionKey:
        """
        Raises:
            BadRequestError: message_id or emoji missing/empty, or action
                             is neither "add" nor "remove"
        """
        missing = [name for name in ("message_id", "emoji") if not getattr(payload, name)]
        if missing:
            raise BadRequestError(
                message="Message ID and emoji are required",
                context={"fields": missing},
            )
        if payload.action not in ACTION_MESSAGES:
            raise BadRequestError(message="Invalid action", field="action")
        return ReactionKey(
            message_id=payload.message_id,
            user_id=identity.id,
            emoji=payload.emoji,
        )

    async def apply(
        self,
        store: DataStore,
        realtime: RealtimeConnection,
        identity: Identity,
        payload: ReactionRequest,
    ) -> ReactionResponse:
        key = self.validate(identity, payload)

        if payload.action == "add":
            await store.add_reaction(key)
        else:
            await store.remove_reaction(key)

        # never opened when realtime is disabled by configuration
        if realtime.is_open and realtime.is_connected:
            await realtime.emit(REACTION_EVENT, {**key.model_dump(), "action": payload.action})
        else:
            logger.debug("Realtime offline; reaction on %s not broadcast", key.message_id)

        return ReactionResponse(message=ACTION_MESSAGES[payload.action])


reaction_service = ReactionService()
