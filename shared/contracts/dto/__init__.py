"""Typed contracts for the deployments backend.

Usage:
    from shared.contracts.dto import DeploymentDTO, DeploymentStatus
"""

from .deployment import (
    DeploymentDTO,
    DeploymentStatus,
    DeploymentUpdate,
    EngineerRef,
    RecordId,
)
from .project import ProjectDTO
from .user import EngineerDTO, SessionUser, UserRole

__all__ = [
    "DeploymentDTO",
    "DeploymentStatus",
    "DeploymentUpdate",
    "EngineerDTO",
    "EngineerRef",
    "ProjectDTO",
    "RecordId",
    "SessionUser",
    "UserRole",
]
