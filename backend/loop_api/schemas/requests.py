"""
Loop API — Request Body Schemas
=================================

What:  Pydantic models for JSON request bodies.
How:   Route handlers read the raw body only after authentication, then
       validate it with loop_api.validation.parse_body(), which turns a
       pydantic failure into a 400 BadRequestError.

Unknown keys are ignored, matching how the web client sends whole form
objects.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class ProfileUpdateRequest(BaseModel):
    """
    What:  Body of POST /api/users/update-profile.

    profile_theme is stored in the profile's theme_data column.
    Every field is optional; omitted fields are left untouched.
    """
    bio: Optional[str] = None
    interests: Optional[List[str]] = None
    avatar_url: Optional[str] = None
    profile_theme: Optional[Dict[str, Any]] = None
    onboarding_completed: Optional[bool] = None

    model_config = {"extra": "ignore"}


class QuestToggleRequest(BaseModel):
    """Body of POST /api/admin/quests/{quest_id}/toggle."""
    is_active: bool = Field(description="New activation state of the quest")

    model_config = {"extra": "ignore"}


class QuestCreateRequest(BaseModel):
    """
    What:  Body of POST /api/admin/quests.

    Only title is required. requirements defaults to {} and is_active to
    true.
    """
    title: str = Field(min_length=1)
    description: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Quest type, e.g. 'daily'")
    reward_amount: int = Field(default=0, ge=0, description="Coins paid on completion")
    requirements: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    model_config = {"extra": "ignore"}


class QuestUpdateRequest(BaseModel):
    """
    What:  Body of PUT /api/admin/quests/{quest_id}.

    Omitted fields are left untouched. title, reward_amount and is_active
    may be omitted but not sent as null; a null requirements resets it to {}.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[str] = None
    reward_amount: Optional[int] = Field(default=None, ge=0)
    requirements: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

    model_config = {"extra": "ignore"}

    @field_validator("title", "reward_amount", "is_active")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        # only runs for values the caller actually sent
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ReactionRequest(BaseModel):
    """
    What:  Body of POST /api/messages/reactions.

    message_id and emoji are checked by the reaction service so that an
    empty string is rejected the same way as a missing key.
    """
    message_id: Optional[str] = None
    emoji: Optional[str] = None
    action: Optional[str] = Field(default=None, description="'add' or 'remove'")

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}
