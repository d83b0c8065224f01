"""User-facing wording for store failures and operation summaries.

Messages are derived from the failure category and raw transport text is never shown.
Backend validation detail is the one exception.
"""

from enum import Enum
from http import HTTPStatus

from shared.clients.errors import NetworkError, StoreError, ValidationError


class MessageCategory(str, Enum):
    AUTH_REQUIRED = "auth_required"
    FORBIDDEN = "forbidden"
    ALREADY_GONE = "already_gone"
    DEPENDENCY_CONFLICT = "dependency_conflict"
    SERVER_ERROR = "server_error"
    NETWORK = "network"
    VALIDATION = "validation"
    GENERIC = "generic"


_STATUS_CATEGORIES = {
    HTTPStatus.UNAUTHORIZED: MessageCategory.AUTH_REQUIRED,
    HTTPStatus.FORBIDDEN: MessageCategory.FORBIDDEN,
    HTTPStatus.NOT_FOUND: MessageCategory.ALREADY_GONE,
    HTTPStatus.CONFLICT: MessageCategory.DEPENDENCY_CONFLICT,
}


def categorize(error: BaseException) -> MessageCategory:
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        if status_code in _STATUS_CATEGORIES:
            return _STATUS_CATEGORIES[status_code]
        if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
            return MessageCategory.SERVER_ERROR
    if isinstance(error, NetworkError):
        return MessageCategory.NETWORK
    if isinstance(error, ValidationError):
        return MessageCategory.VALIDATION
    return MessageCategory.GENERIC


def describe_failure(
    error: BaseException, action: str = "update", resource: str = "deployment"
) -> str:
    """Message for a failed ``action`` on one ``resource``."""
    category = categorize(error)

    if category == MessageCategory.AUTH_REQUIRED:
        return "Authentication required. Please log in again."
    if category == MessageCategory.FORBIDDEN:
        return f"Access denied. You don't have permission to {action} {resource}s."
    if category == MessageCategory.ALREADY_GONE:
        return f"{resource.capitalize()} not found. It may have already been deleted."
    if category == MessageCategory.DEPENDENCY_CONFLICT:
        return (
            f"Cannot {action} {resource} due to dependencies. "
            "Please check related resources."
        )
    if category == MessageCategory.SERVER_ERROR:
        return "Server error occurred. Please try again later."
    if category == MessageCategory.NETWORK:
        return "Unable to connect to the server. Please check your connection and try again."
    if category == MessageCategory.VALIDATION:
        detail = error.detail if isinstance(error, StoreError) else None
        return detail or f"The {resource} data was rejected. Please check the values."
    return f"Failed to {action} {resource}. Please try again."


def plural(count: int, noun: str = "deployment") -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def bulk_delete_success(count: int) -> str:
    return f"Successfully deleted {plural(count)}"


def bulk_delete_failure(count: int) -> str:
    return f"Failed to delete {plural(count)}. They may have dependencies or other issues."


BULK_DELETE_CRASHED = "An error occurred during bulk deletion"


def status_updated(status: str) -> str:
    return f"Deployment status updated to {status}"
