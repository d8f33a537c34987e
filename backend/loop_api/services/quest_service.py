"""
Loop API — Quest & Bonus Service
==================================

What:  Admin operations on quests and the weekly coin bonus.
How:   Each method issues exactly one backend operation. Authorization has
       already happened in the route's dependency by the time these run.
"""

import logging

from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import QuestChanges, QuestDraft, QuestKey, QuestStatusChange
from loop_api.schemas.requests import QuestCreateRequest, QuestToggleRequest, QuestUpdateRequest
from loop_api.schemas.responses import (
    BonusDistributionResponse,
    QuestDeleteResponse,
    QuestListResponse,
    QuestResponse,
    Row,
)
from loop_api.services.store_base import DataStore
from loop_api.timeutils import now_utc_iso

logger = logging.getLogger(__name__)


def completion_count(quest: Row) -> int:
    """Count from an embedded `quest_completions: [{"count": n}]` aggregate."""
    completions = quest.get("quest_completions") or []
    if completions and isinstance(completions[0], dict):
        return int(completions[0].get("count") or 0)
    return 0


class QuestService:

    async def toggle_quest(
        self, store: DataStore, quest_id: str, payload: QuestToggleRequest
    ) -> QuestResponse:
        """
        Set a quest's active flag.

        Idempotent in the flag: repeating the same call leaves is_active
        unchanged and only moves updated_at forward.
        """
        change = QuestStatusChange(
            quest_id=quest_id,
            is_active=payload.is_active,
            updated_at=now_utc_iso(),
        )
        quest = await store.update_quest_status(change)
        state = "activated" if payload.is_active else "deactivated"
        logger.info("Quest %s %s", quest_id, state)
        return QuestResponse(quest=quest, message=f"Quest {state} successfully")

    async def create_quest(
        self, store: DataStore, admin: Identity, payload: QuestCreateRequest
    ) -> QuestResponse:
        draft = QuestDraft(
            title=payload.title,
            description=payload.description,
            type=payload.type,
            reward_amount=payload.reward_amount,
            requirements=payload.requirements or {},
            is_active=True if payload.is_active is None else payload.is_active,
            created_by=admin.id,
        )
        quest = await store.create_quest(draft)
        logger.info("Quest %s created by %s", quest.get("id"), admin.id)
        return QuestResponse(quest=quest, message="Quest created successfully")

    async def update_quest(
        self, store: DataStore, quest_id: str, payload: QuestUpdateRequest
    ) -> QuestResponse:
        """
        Write only the fields the admin sent, plus a fresh updated_at.

        A null requirements is stored as {}.
        """
        sent = payload.model_dump(exclude_unset=True)
        if "requirements" in sent and sent["requirements"] is None:
            sent["requirements"] = {}
        changes = QuestChanges(quest_id=quest_id, updated_at=now_utc_iso(), **sent)
        quest = await store.update_quest(changes)
        logger.info("Quest %s updated: %s", quest_id, sorted(sent))
        return QuestResponse(quest=quest, message="Quest updated successfully")

    async def delete_quest(self, store: DataStore, quest_id: str) -> QuestDeleteResponse:
        await store.delete_quest(QuestKey(quest_id=quest_id))
        logger.info("Quest %s deleted", quest_id)
        return QuestDeleteResponse()

    async def list_quests(self, store: DataStore) -> QuestListResponse:
        quests = await store.list_quests()
        return QuestListResponse(
            quests=[{**quest, "completion_count": completion_count(quest)} for quest in quests]
        )

    async def distribute_weekly_bonus(self, store: DataStore) -> BonusDistributionResponse:
        users_count = await store.distribute_weekly_bonus()
        logger.info("Weekly bonus distributed to %d users", users_count)
        return BonusDistributionResponse(
            users_count=users_count,
            message=f"Weekly bonus distributed to {users_count} users",
        )


quest_service = QuestService()
