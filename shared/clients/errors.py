"""Typed failures raised by the deployments backend client.

Every non-2xx response is mapped to one subclass of ``StoreError`` so callers can
branch on type or on ``status_code`` without looking at transport objects.
"""

from http import HTTPStatus

import httpx


class StoreError(Exception):
    """Base class for all resource store failures."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class NetworkError(StoreError):
    """Connectivity or transport failure; no response was received."""


class ServerError(StoreError):
    """5xx response or service unavailable."""


class ValidationError(StoreError):
    """Input rejected by the backend (400 / 422)."""


class AuthenticationError(StoreError):
    """Session missing or expired (401)."""


class PermissionDeniedError(StoreError):
    """Authenticated but not allowed (403)."""


class NotFoundError(StoreError):
    """Record already absent (404)."""


class ConflictError(StoreError):
    """Dependent resource or duplicate conflict (409)."""


class UnknownError(StoreError):
    """Unclassified failure."""


class FetchError(StoreError):
    """Listing the collection failed. Wraps the classified cause."""


_STATUS_MAP: dict[int, type[StoreError]] = {
    HTTPStatus.BAD_REQUEST: ValidationError,
    HTTPStatus.UNAUTHORIZED: AuthenticationError,
    HTTPStatus.FORBIDDEN: PermissionDeniedError,
    HTTPStatus.NOT_FOUND: NotFoundError,
    HTTPStatus.CONFLICT: ConflictError,
    HTTPStatus.UNPROCESSABLE_ENTITY: ValidationError,
}


def extract_detail(response: httpx.Response) -> str | None:
    """Pull the backend's own message out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def error_from_response(response: httpx.Response) -> StoreError:
    """Build the typed error for a non-2xx response."""
    status_code = response.status_code
    detail = extract_detail(response)
    message = detail or f"HTTP {status_code}: {response.reason_phrase}"

    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        error_cls: type[StoreError] = ServerError
    else:
        error_cls = _STATUS_MAP.get(status_code, UnknownError)
    return error_cls(message, status_code=status_code, detail=detail)
