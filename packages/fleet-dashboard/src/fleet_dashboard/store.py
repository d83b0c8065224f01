from collections.abc import Awaitable, Callable
from typing import Protocol

from shared.contracts.dto import (
    DeploymentDTO,
    DeploymentUpdate,
    EngineerDTO,
    ProjectDTO,
    RecordId,
)

Refresh = Callable[[], Awaitable[None]]


class DeploymentStore(Protocol):
    """What the dashboard core needs from the backend.

    ``shared.clients.DeploymentsClient`` is the HTTP implementation. Failures are
    raised as ``shared.clients.errors.StoreError`` subclasses; listing raises
    ``FetchError``.
    """

    async def list_deployments(self) -> list[DeploymentDTO]: ...

    async def update_deployment(
        self, deployment_id: RecordId, payload: DeploymentUpdate
    ) -> DeploymentDTO: ...

    async def delete_deployment(self, deployment_id: RecordId) -> None: ...

    async def list_projects(self) -> list[ProjectDTO]: ...

    async def list_engineers(self) -> list[EngineerDTO]: ...

    async def close(self) -> None: ...
