from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .deployment import RecordId


class ProjectDTO(BaseModel):
    """Project response."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    id: RecordId
    name: str
    description: str | None = None
    group_id: RecordId | None = None
    status: str | None = None
    repository_url: str | None = None
    project_group_name: str | None = None
