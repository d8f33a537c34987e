"""
Loop API — Response Envelopes
===============================

What:  Pydantic models for every JSON response the API returns.
Why:   The web client reads these exact keys, so the envelopes are fixed
       per endpoint: a success indicator, the payload, and for paged reads
       a `hasMore` hint.

Backend rows are passed through as plain dicts: their columns belong to the
hosted schema, not to this service.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

Row = Dict[str, Any]


# ══════════════════════════════════════════════════════════════════════════
# Admin
# ══════════════════════════════════════════════════════════════════════════


class BonusDistributionResponse(BaseModel):
    """Returned by POST /api/admin/distribute-bonus."""
    success: bool = True
    users_count: int = Field(description="Users that received the weekly bonus")
    message: str


class QuestResponse(BaseModel):
    """Returned by quest create, update and toggle."""
    quest: Row
    message: str


class QuestDeleteResponse(BaseModel):
    """Returned by DELETE /api/admin/quests/{quest_id}."""
    success: bool = True
    message: str = "Quest deleted successfully"


class QuestListResponse(BaseModel):
    """Returned by GET /api/admin/quests; each quest carries completion_count."""
    quests: List[Row]


# ══════════════════════════════════════════════════════════════════════════
# Paged Reads
# ══════════════════════════════════════════════════════════════════════════


class PagedItemsResponse(BaseModel):
    """
    What:  Offset-paged list of backend rows.
    Who:   GET /api/inventory and GET /api/shop/items

    hasMore is "the page came back full". When the remaining row count is
    exactly `limit`, the client asks for one more page and gets it empty.
    """
    success: bool = True
    items: List[Row]
    has_more: bool = Field(alias="hasMore")

    model_config = {"populate_by_name": True}


class LoopInteractionsResponse(BaseModel):
    """Returned by GET /api/loop-interactions."""
    success: bool = True
    interactions: List[Row]


class UserListResponse(BaseModel):
    """Returned by GET /api/users."""
    success: bool = True
    users: List[Row]


# ══════════════════════════════════════════════════════════════════════════
# Profiles & Reactions
# ══════════════════════════════════════════════════════════════════════════


class ProfileResponse(BaseModel):
    """Returned by GET /api/users/profile."""
    success: bool = True
    profile: Row


class ProfileUpdateResponse(BaseModel):
    """Returned by POST /api/users/update-profile."""
    message: str = "Profile updated successfully"
    profile: Row


class ReactionResponse(BaseModel):
    """Returned by POST /api/messages/reactions."""
    success: bool = True
    message: str


# ══════════════════════════════════════════════════════════════════════════
# Errors & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Example:
        {
            "success": false,
            "error": "forbidden",
            "message": "Admin access required",
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Client-safe context (400 only)")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="healthy or degraded")
    version: str
    backend: str = Field(description="reachable or unreachable")
    realtime: str = Field(description="connected, disconnected or closed")
    uptime_seconds: float
