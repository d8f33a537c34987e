"""
Loop API — Request Authorization
==================================

What:  The first three stages every protected endpoint runs through:
       credential extraction, identity resolution and, for privileged
       endpoints, a check of the caller's admin flag or role.
How:   Implemented as FastAPI dependencies. A route declares
       `Depends(require_identity)` or `Depends(require_admin)`; FastAPI runs
       the dependency before the handler body, so a failing check stops the
       request before any parameter is validated or any write happens.

Pipeline:
    Authorization header ──▶ extract_bearer_token ──▶ UnauthenticatedError (401)
            │
            ▼
    store.get_user(token) ──▶ InvalidCredentialError (401)
            │
            ▼
    profile flag/role check ──▶ ForbiddenError (403)     (privileged only)
            │
            ▼
        route handler
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import Depends, Header

from loop_api.dependencies import get_store
from loop_api.exceptions import (
    BackendError,
    ForbiddenError,
    InvalidCredentialError,
    UnauthenticatedError,
)
from loop_api.schemas.identity import Identity
from loop_api.services.store_base import DataStore

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Return the token from an `Authorization: Bearer <token>` header value.

    Raises:
        UnauthenticatedError: header missing, another scheme, or empty token
    """
    if not authorization:
        raise UnauthenticatedError(message="Unauthorized")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthenticatedError(message="Unauthorized")
    return token.strip()


async def resolve_identity(store: DataStore, token: str) -> Identity:
    """
    Exchange a token for an identity.

    A rejected token and an unreachable provider both end as
    InvalidCredentialError; the provider failure is logged.
    """
    try:
        identity = await store.get_user(token)
    except BackendError as exc:
        logger.warning("Identity provider failure: %s | Context: %s", exc.message, exc.context)
        raise InvalidCredentialError(context=exc.context) from exc
    if identity is None:
        raise InvalidCredentialError()
    return identity


async def require_identity(
    authorization: Optional[str] = Header(default=None),
    store: DataStore = Depends(get_store),
) -> Identity:
    """Dependency: the authenticated caller of this request."""
    token = extract_bearer_token(authorization)
    return await resolve_identity(store, token)


def require_privilege(
    column: str, check: Callable[[Any], bool]
) -> Callable[..., Awaitable[Identity]]:
    """
    Build a dependency that admits only callers whose profile passes check.

    What:    Reads one profile column for the authenticated caller and
             applies check to its value. A missing profile counts as a
             failed check.
    Returns: The Identity enriched with the value that was read.
    Raises:
        ForbiddenError: the check failed
        BackendError:   the profile lookup itself failed (→ 500)
    """

    async def dependency(
        identity: Identity = Depends(require_identity),
        store: DataStore = Depends(get_store),
    ) -> Identity:
        profile = await store.fetch_profile(identity.id, columns=(column,))
        value = profile.get(column) if profile else None
        if not check(value):
            logger.info("Privilege check on %s failed for user %s", column, identity.id)
            raise ForbiddenError()
        return identity.model_copy(update={column: value})

    return dependency


# Boolean admin flag on the profile (bonus distribution)
require_admin = require_privilege("is_admin", lambda value: value is True)

# String role on the profile (quest management)
require_admin_role = require_privilege("role", lambda value: value == "admin")
