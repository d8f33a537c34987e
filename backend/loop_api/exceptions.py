"""
Loop API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for each way a request can fail.
Why:   Each class maps to one HTTP status code. Route handlers and services
       raise them; global handlers registered in main.py turn them into
       JSON error responses.
How:   Each exception carries a user-facing message and an optional context
       dict. The context is logged server-side and never returned.

Exception Hierarchy:
    LoopError (base)
    ├── UnauthenticatedError    → 401 (no or empty bearer credential)
    ├── InvalidCredentialError  → 401 (identity provider rejected the token)
    ├── ForbiddenError          → 403 (authenticated, insufficient privilege)
    ├── BadRequestError         → 400 (missing or malformed parameter)
    ├── NotFoundError           → 404 (requested record does not exist)
    └── BackendError            → 500 (hosted backend failed)

Failures are terminal for the current request; nothing here is retried.
"""

from typing import Any, Dict, Optional


class LoopError(Exception):
    """
    Base exception for all Loop API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        status_code: HTTP status the global handler responds with
        error_code:  Machine-readable code placed in the response body
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthenticatedError(LoopError):
    """
    Raised when the request carries no usable bearer credential.

    When:    Authorization header absent, not a Bearer scheme, or empty token.
    HTTP:    401 Unauthorized
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialError(LoopError):
    """
    Raised when the identity provider does not resolve the token.

    Covers a rejected token, an empty provider answer, and an unreachable
    provider alike; callers cannot tell these apart.
    HTTP:    401 Unauthorized
    """

    status_code = 401
    error_code = "invalid_credential"

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(LoopError):
    """
    Raised when an authenticated caller lacks the required privilege.

    When:    Admin flag unset or role mismatch on a privileged endpoint.
    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "Admin access required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class BadRequestError(LoopError):
    """
    Raised when client input fails validation.

    What:    A required field is missing, a value has the wrong type, or the
             JSON body cannot be parsed.
    HTTP:    400 Bad Request

    Example response:
        {
            "success": false,
            "error": "bad_request",
            "message": "Message ID and emoji are required",
            "details": {"fields": ["emoji"]}
        }
    """

    status_code = 400
    error_code = "bad_request"

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(LoopError):
    """
    Raised when a requested record does not exist.

    When:    GET /api/users/profile for an identity without a profile row.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class BackendError(LoopError):
    """
    Raised when the hosted backend fails.

    What:    Transport failure, non-2xx answer, or an unexpected payload from
             PostgREST, an RPC, or the identity provider.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The backend's
        own error text, status code and operation name travel in `context`
        and are logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
