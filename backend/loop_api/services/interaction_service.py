"""
Loop API — Loop Interaction Service
=====================================

What:  Looks up which of a set of loops the caller has interacted with
       (liked, saved, ...), so the feed can render its toggles.
"""

from typing import List

from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import LoopInteractionQuery
from loop_api.schemas.responses import LoopInteractionsResponse
from loop_api.services.store_base import DataStore


class InteractionService:

    async def list_loop_interactions(
        self, store: DataStore, identity: Identity, loop_ids: List[str]
    ) -> LoopInteractionsResponse:
        """
        An empty id list answers with no interactions and no backend query.
        """
        if not loop_ids:
            return LoopInteractionsResponse(interactions=[])
        query = LoopInteractionQuery(user_id=identity.id, loop_ids=loop_ids)
        rows = await store.list_loop_interactions(query)
        return LoopInteractionsResponse(interactions=rows)


interaction_service = InteractionService()
