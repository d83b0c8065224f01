from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .deployment import RecordId


class UserRole(str, Enum):
    ADMIN = "Admin"
    USER = "User"


class EngineerDTO(BaseModel):
    """Engineer response."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    id: RecordId
    username: str = ""
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    full_name: str | None = None
    role: str | None = None


class SessionUser(BaseModel):
    """Signed-in user as seen by the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: RecordId
    username: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
