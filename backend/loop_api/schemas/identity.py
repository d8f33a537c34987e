"""
Loop API — Identity Schema
============================

What:  The authenticated principal a request runs as.
How:   Built from the identity provider's user payload, then enriched with
       the authorization attribute a privileged endpoint checked.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """
    What:  Resolved caller of a request.

    Fields:
        id:       Unique principal id (primary key of the profile row)
        email:    Provider email, when present
        is_admin: Admin flag read from the profile (privileged endpoints only)
        role:     Role string read from the profile (privileged endpoints only)
    """
    id: str = Field(min_length=1)
    email: Optional[str] = None
    is_admin: bool = False
    role: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_provider(cls, payload: Dict[str, Any]) -> Optional["Identity"]:
        """Returns None when the provider answered without a usable id."""
        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            return None
        return cls(id=str(user_id), email=payload.get("email"))
