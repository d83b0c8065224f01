from fleet_dashboard.messages import (
    MessageCategory,
    bulk_delete_failure,
    bulk_delete_success,
    categorize,
    describe_failure,
    plural,
    status_updated,
)
from fleet_dashboard.permissions import PermissionDenied
import pytest

from shared.clients.errors import (
    AuthenticationError,
    ConflictError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    StoreError,
    UnknownError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (AuthenticationError("x", status_code=401), MessageCategory.AUTH_REQUIRED),
        (PermissionDeniedError("x", status_code=403), MessageCategory.FORBIDDEN),
        (NotFoundError("x", status_code=404), MessageCategory.ALREADY_GONE),
        (ConflictError("x", status_code=409), MessageCategory.DEPENDENCY_CONFLICT),
        (ServerError("x", status_code=503), MessageCategory.SERVER_ERROR),
        (NetworkError("x"), MessageCategory.NETWORK),
        (ValidationError("x", status_code=422), MessageCategory.VALIDATION),
        (UnknownError("x", status_code=418), MessageCategory.GENERIC),
        (StoreError("x"), MessageCategory.GENERIC),
        (RuntimeError("x"), MessageCategory.GENERIC),
        (PermissionDenied("delete_deployment"), MessageCategory.FORBIDDEN),
        (PermissionDenied("delete_deployment", status_code=401), MessageCategory.AUTH_REQUIRED),
    ],
)
def test_categorize(error, category):
    assert categorize(error) == category


def test_status_code_wins_over_type():
    # A wrapped fetch failure keeps the status of its cause
    assert categorize(StoreError("x", status_code=404)) == MessageCategory.ALREADY_GONE


class TestDescribeFailure:
    def test_dependency_conflict_on_update(self):
        message = describe_failure(ConflictError("raw", status_code=409), action="update")

        assert message == (
            "Cannot update deployment due to dependencies. Please check related resources."
        )

    def test_already_gone(self):
        assert describe_failure(NotFoundError("raw", status_code=404), action="delete") == (
            "Deployment not found. It may have already been deleted."
        )

    def test_forbidden_mentions_action(self):
        message = describe_failure(PermissionDeniedError("raw", status_code=403), action="delete")

        assert message == "Access denied. You don't have permission to delete deployments."

    def test_auth_required(self):
        assert describe_failure(AuthenticationError("raw", status_code=401)) == (
            "Authentication required. Please log in again."
        )

    def test_server_error_hides_raw_text(self):
        message = describe_failure(ServerError("Traceback: db down", status_code=500))

        assert "Traceback" not in message
        assert message == "Server error occurred. Please try again later."

    def test_network(self):
        assert "Unable to connect" in describe_failure(NetworkError("refused"))

    def test_validation_detail_passes_through(self):
        error = ValidationError("raw", status_code=422, detail="Name is required")

        assert describe_failure(error) == "Name is required"

    def test_validation_without_detail(self):
        error = ValidationError("raw", status_code=400)

        assert describe_failure(error) == (
            "The deployment data was rejected. Please check the values."
        )

    def test_generic(self):
        assert describe_failure(UnknownError("raw", status_code=418), action="load") == (
            "Failed to load deployment. Please try again."
        )


@pytest.mark.parametrize(("count", "expected"), [(1, "1 deployment"), (2, "2 deployments")])
def test_plural(count, expected):
    assert plural(count) == expected


def test_summaries():
    assert bulk_delete_success(2) == "Successfully deleted 2 deployments"
    assert bulk_delete_failure(1) == (
        "Failed to delete 1 deployment. They may have dependencies or other issues."
    )
    assert status_updated("completed") == "Deployment status updated to completed"
