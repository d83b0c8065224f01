from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DeploymentStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return self.value.capitalize()


RecordId = str | int


class EngineerRef(BaseModel):
    """Assignee summary embedded in a deployment by the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    id: RecordId
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    full_name: str | None = None


class DeploymentDTO(BaseModel):
    """Deployment record as returned by the backend.

    Instances are frozen: the dashboard never edits a record in place, it sends an
    update and adopts whatever the next fetch returns.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        from_attributes=True,
    )

    id: RecordId
    name: str = ""
    project_id: RecordId
    status: DeploymentStatus
    deployed_at: datetime
    engineer_id: RecordId | None = None
    engineer: EngineerRef | None = None
    description: str = ""
    services: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    project_name: str | None = None
    project_group_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or f"Deployment #{str(self.id)[-6:]}"


class DeploymentUpdate(BaseModel):
    """Full-record update payload.

    The backend replaces the whole record on PUT, so every known field is resent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    project_id: RecordId
    status: DeploymentStatus
    deployed_at: datetime
    engineer_id: RecordId | None = None
    description: str = ""
    services: str | None = None

    @classmethod
    def from_deployment(
        cls, deployment: DeploymentDTO, status: DeploymentStatus | None = None
    ) -> "DeploymentUpdate":
        return cls(
            name=deployment.name,
            project_id=deployment.project_id,
            status=status or deployment.status,
            deployed_at=deployment.deployed_at,
            engineer_id=deployment.engineer_id,
            description=deployment.description,
            services=deployment.services,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
