"""
Loop API — Profile Service
============================

What:  Profile reads and writes for the authenticated caller, plus the
       public user listing.
Who:   Called by the handlers in loop_api.routes.users.

Design Decision:
    ProfileService is stateless: the DataStore is passed to every call, the
    same way a database session would be. Tests hand in a fake store.
"""

import logging

from loop_api.exceptions import NotFoundError
from loop_api.schemas.identity import Identity
from loop_api.schemas.queries import ProfileChanges, UserListQuery
from loop_api.schemas.requests import ProfileUpdateRequest
from loop_api.schemas.responses import (
    ProfileResponse,
    ProfileUpdateResponse,
    Row,
    UserListResponse,
)
from loop_api.services.store_base import DataStore
from loop_api.timeutils import now_utc_iso

logger = logging.getLogger(__name__)


def with_onboarding_flag(profile: Row) -> Row:
    """
    Fill in onboarding_completed when the row has no explicit value.

    Profiles created before the flag existed count as onboarded once they
    have a non-empty bio.
    """
    if profile.get("onboarding_completed") is not None:
        return profile
    return {**profile, "onboarding_completed": bool(profile.get("bio"))}


class ProfileService:
    """
    Responsibilities:
        - get_profile():    the caller's full profile row
        - update_profile(): partial update of the caller's profile
        - list_users():     public listing, newest or most popular first
    """

    async def get_profile(self, store: DataStore, identity: Identity) -> ProfileResponse:
        """
        Raises:
            NotFoundError: no profile row for this identity (→ 404)
            BackendError:  lookup failed (→ 500)
        """
        profile = await store.fetch_profile(identity.id)
        if profile is None:
            raise NotFoundError(resource="profile", resource_id=identity.id)
        return ProfileResponse(profile=with_onboarding_flag(profile))

    async def update_profile(
        self,
        store: DataStore,
        identity: Identity,
        payload: ProfileUpdateRequest,
    ) -> ProfileUpdateResponse:
        """
        Write the fields the caller sent, plus a fresh updated_at.

        Omitted fields keep their stored values. profile_theme maps onto the
        theme_data column.
        """
        sent = payload.model_dump(exclude_unset=True)
        if "profile_theme" in sent:
            sent["theme_data"] = sent.pop("profile_theme")

        changes = ProfileChanges(user_id=identity.id, updated_at=now_utc_iso(), **sent)
        profile = await store.update_profile(changes)
        logger.info("Profile %s updated: %s", identity.id, sorted(sent))
        return ProfileUpdateResponse(profile=profile)

    async def list_users(self, store: DataStore, query: UserListQuery) -> UserListResponse:
        users = await store.list_profiles(query)
        return UserListResponse(users=users)


# Stateless singleton shared by all requests
profile_service = ProfileService()
