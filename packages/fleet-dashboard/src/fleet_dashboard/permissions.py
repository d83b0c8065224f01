from collections.abc import Callable
from http import HTTPStatus

from shared.contracts.dto import SessionUser, UserRole

SessionAccessor = Callable[[], SessionUser | None]

DEPLOYMENT_PERMISSIONS = frozenset(
    {"create_deployment", "read_deployment", "update_deployment", "delete_deployment"}
)

ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.ADMIN: DEPLOYMENT_PERMISSIONS | {"manage_users", "view_admin_panel"},
    UserRole.USER: DEPLOYMENT_PERMISSIONS,
}


class PermissionDenied(Exception):
    """Raised locally when the session lacks a permission; no request is sent."""

    def __init__(self, permission: str, status_code: int = HTTPStatus.FORBIDDEN):
        super().__init__(f"Missing permission: {permission}")
        self.permission = permission
        self.status_code = status_code


class PermissionManager:
    """Role based permission checks against an injected session accessor.

    Without an accessor every action is allowed.
    """

    def __init__(self, session: SessionAccessor | None = None):
        self._session = session

    @staticmethod
    def role_allows(role: UserRole, permission: str) -> bool:
        return permission in ROLE_PERMISSIONS.get(role, frozenset())

    def is_allowed(self, permission: str) -> bool:
        if self._session is None:
            return True
        user = self._session()
        return user is not None and self.role_allows(user.role, permission)

    def check_permission(self, permission: str) -> None:
        """Check permission and raise if denied.

        A missing session is reported as 401, a missing role permission as 403.
        """
        if self._session is None:
            return
        user = self._session()
        if user is None:
            raise PermissionDenied(permission, status_code=HTTPStatus.UNAUTHORIZED)
        if not self.role_allows(user.role, permission):
            raise PermissionDenied(permission)
