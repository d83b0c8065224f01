"""Clients for external services."""

from .deployments import DeploymentsClient
from .errors import (
    AuthenticationError,
    ConflictError,
    FetchError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    StoreError,
    UnknownError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "DeploymentsClient",
    "FetchError",
    "NetworkError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServerError",
    "StoreError",
    "UnknownError",
    "ValidationError",
]
