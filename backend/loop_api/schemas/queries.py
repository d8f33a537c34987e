"""
Loop API — Typed Backend Query Structs
========================================

What:  One pydantic model per backend operation, describing exactly which
       filters, ordering and pagination window the operation sends.
Why:   Every handler's query shape is visible in one place and can be
       validated before anything reaches the backend.
How:   Routes build these from validated request input; the DataStore
       translates them into PostgREST parameters.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Read Queries
# ══════════════════════════════════════════════════════════════════════════


class InventoryQuery(BaseModel):
    """
    What:  A page of one user's inventory, newest purchase first.
    Who:   GET /api/inventory

    category filters on the embedded shop item's category.
    """
    user_id: str = Field(min_length=1)
    category: Optional[str] = Field(default=None)
    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class ShopItemQuery(BaseModel):
    """A page of active shop items, newest first (GET /api/shop/items)."""
    category: Optional[str] = Field(default=None)
    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class UserListQuery(BaseModel):
    """
    What:  Public profile listing for GET /api/users.

    Sort options:
        newest:  created_at descending
        popular: follower_count descending
        anything else: backend default order
    """
    sort: str = Field(default="newest")
    limit: int = Field(default=5, ge=1)

    model_config = {"frozen": True}

    @property
    def order_column(self) -> Optional[str]:
        return {"newest": "created_at", "popular": "follower_count"}.get(self.sort)


class LoopInteractionQuery(BaseModel):
    """The caller's interactions with a set of loops (GET /api/loop-interactions)."""
    user_id: str = Field(min_length=1)
    loop_ids: List[str] = Field(min_length=1)

    model_config = {"frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Mutations
# ══════════════════════════════════════════════════════════════════════════


class ProfileChanges(BaseModel):
    """
    What:  Column changes for one profile row, keyed by identity id.
    Who:   POST /api/users/update-profile

    Only fields the caller actually sent are written; `updated_at` is always
    set by the handler.
    """
    user_id: str = Field(min_length=1)
    updated_at: str
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    avatar_url: Optional[str] = None
    theme_data: Optional[Dict[str, Any]] = None
    onboarding_completed: Optional[bool] = None

    def columns(self) -> Dict[str, Any]:
        """Columns to write: every explicitly set field except the row key."""
        values = self.model_dump(exclude_unset=True, exclude={"user_id"})
        values["updated_at"] = self.updated_at
        return values


class QuestStatusChange(BaseModel):
    """Single-row quest activation update (POST /api/admin/quests/{id}/toggle)."""
    quest_id: str = Field(min_length=1)
    is_active: bool
    updated_at: str

    model_config = {"frozen": True}


class QuestDraft(BaseModel):
    """
    What:  A new quest row (POST /api/admin/quests).

    created_by is the admin who created it.
    """
    title: str = Field(min_length=1)
    description: Optional[str] = None
    type: Optional[str] = None
    reward_amount: int = Field(default=0, ge=0)
    requirements: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_by: str = Field(min_length=1)

    model_config = {"frozen": True}


class QuestChanges(BaseModel):
    """Column changes for one quest row (PUT /api/admin/quests/{id})."""
    quest_id: str = Field(min_length=1)
    updated_at: str
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[str] = None
    reward_amount: Optional[int] = Field(default=None, ge=0)
    requirements: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    def columns(self) -> Dict[str, Any]:
        values = self.model_dump(exclude_unset=True, exclude={"quest_id"})
        values["updated_at"] = self.updated_at
        return values


class QuestKey(BaseModel):
    """Row key of one quest (DELETE /api/admin/quests/{id})."""
    quest_id: str = Field(min_length=1)

    model_config = {"frozen": True}


class ReactionKey(BaseModel):
    """
    What:  Set-membership key of one message reaction.

    Adding an existing key and removing an absent key both succeed
    without changing anything.
    """
    message_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    emoji: str = Field(min_length=1)

    model_config = {"frozen": True}
