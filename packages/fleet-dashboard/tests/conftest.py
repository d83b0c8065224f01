from datetime import UTC, datetime, timedelta

import pytest

from shared.contracts.dto import (
    DeploymentDTO,
    DeploymentStatus,
    EngineerDTO,
    EngineerRef,
    ProjectDTO,
)
from shared.tests.mocks.deployments import InMemoryDeploymentStore

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def build_deployment(
    record_id,
    status: DeploymentStatus = DeploymentStatus.PENDING,
    hours_ago: int = 0,
    **fields,
) -> DeploymentDTO:
    fields.setdefault("name", f"deploy-{record_id}")
    fields.setdefault("project_id", "p1")
    return DeploymentDTO(
        id=record_id,
        status=status,
        deployed_at=BASE_TIME - timedelta(hours=hours_ago),
        **fields,
    )


class RecordingNotifier:
    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def make_deployment():
    return build_deployment


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def projects():
    return [
        ProjectDTO(id="p1", name="Payments"),
        ProjectDTO(id="p2", name="Storefront"),
    ]


@pytest.fixture
def engineers():
    return [
        EngineerDTO(id="e2", username="ghopper", first_name="Grace", last_name="Hopper"),
    ]


@pytest.fixture
def sample_deployments():
    """Four records, one per status; newest is d4."""
    return [
        build_deployment(
            "d1",
            DeploymentStatus.RUNNING,
            hours_ago=1,
            name="api-v2",
            engineer_id="e1",
            engineer=EngineerRef(
                id="e1", first_name="Ada", last_name="Lovelace", full_name="Ada Lovelace"
            ),
        ),
        build_deployment(
            "d2",
            DeploymentStatus.FAILED,
            hours_ago=2,
            name="worker-rollout",
            project_id="p2",
            engineer_id="e2",
        ),
        build_deployment("d3", DeploymentStatus.COMPLETED, hours_ago=3, name="billing"),
        build_deployment(
            "d4",
            DeploymentStatus.PENDING,
            hours_ago=0,
            name="frontend",
            project_id="p2",
            description="Canary for checkout",
        ),
    ]


@pytest.fixture
def many_deployments():
    """Sixty records; ``n00`` is the newest."""
    return [build_deployment(f"n{i:02d}", hours_ago=i) for i in range(60)]


@pytest.fixture
def store(sample_deployments, projects, engineers):
    return InMemoryDeploymentStore(sample_deployments, projects, engineers)
