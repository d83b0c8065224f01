"""Search and filter predicate for the deployments list.

All active predicates are ANDed: free-text query, status, project. The output is
always ordered newest ``deployed_at`` first, whatever the input order.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from shared.contracts.dto import (
    DeploymentDTO,
    DeploymentStatus,
    EngineerDTO,
    ProjectDTO,
    RecordId,
)


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    status: DeploymentStatus | None = None
    project_id: RecordId | None = None

    @property
    def is_active(self) -> bool:
        return bool(self.query.strip()) or self.status is not None or self.project_id is not None

    def with_query(self, query: str) -> "FilterState":
        return replace(self, query=query)

    def with_status(self, status: DeploymentStatus | None) -> "FilterState":
        return replace(self, status=status)

    def with_project(self, project_id: RecordId | None) -> "FilterState":
        return replace(self, project_id=project_id)


def _sort_key(deployment: DeploymentDTO) -> datetime:
    # Naive timestamps are treated as UTC so mixed inputs still compare
    deployed_at = deployment.deployed_at
    if deployed_at.tzinfo is None:
        return deployed_at.replace(tzinfo=UTC)
    return deployed_at


def sort_by_recency(deployments: Iterable[DeploymentDTO]) -> list[DeploymentDTO]:
    """Newest first. Stable for equal timestamps."""
    return sorted(deployments, key=_sort_key, reverse=True)


def searchable_fields(
    deployment: DeploymentDTO,
    projects: dict[str, ProjectDTO],
    engineers: dict[str, EngineerDTO],
) -> list[str | None]:
    """Fields the free-text query is matched against, in match order."""
    project_name = deployment.project_name
    if project_name is None:
        project = projects.get(str(deployment.project_id))
        project_name = project.name if project else None

    full_name = first_name = last_name = username = None
    if deployment.engineer_id is not None:
        engineer = engineers.get(str(deployment.engineer_id))
        if engineer is not None:
            full_name = engineer.full_name
            first_name = engineer.first_name or None
            last_name = engineer.last_name or None
            username = engineer.username or None

    # Embedded assignee fills whatever the index did not provide
    ref = deployment.engineer
    if ref is not None:
        full_name = full_name or ref.full_name
        first_name = first_name or ref.first_name
        last_name = last_name or ref.last_name

    return [
        deployment.name,
        deployment.description,
        str(deployment.id),
        project_name,
        full_name,
        first_name,
        last_name,
        username,
    ]


def matches_query(
    deployment: DeploymentDTO,
    query: str,
    projects: dict[str, ProjectDTO],
    engineers: dict[str, EngineerDTO],
) -> bool:
    if not query.strip():
        return True
    needle = query.lower()
    return any(
        value and needle in value.lower()
        for value in searchable_fields(deployment, projects, engineers)
    )


def filter_deployments(
    deployments: Sequence[DeploymentDTO],
    filters: FilterState,
    projects: Iterable[ProjectDTO] = (),
    engineers: Iterable[EngineerDTO] = (),
) -> list[DeploymentDTO]:
    """Reduce ``deployments`` to those matching every active filter.

    Args:
        deployments: Full record set. Not modified.
        filters: Query, status and project filters.
        projects: Projects used to resolve parent project names for search.
        engineers: Engineers used to resolve assignee names for search.

    Returns:
        New list ordered by ``deployed_at`` descending.
    """
    project_index = {str(p.id): p for p in projects}
    engineer_index = {str(e.id): e for e in engineers}

    selected = []
    for deployment in deployments:
        if filters.project_id is not None and str(deployment.project_id) != str(
            filters.project_id
        ):
            continue
        if filters.status is not None and deployment.status != filters.status:
            continue
        if not matches_query(deployment, filters.query, project_index, engineer_index):
            continue
        selected.append(deployment)

    return sort_by_recency(selected)


def status_counts(deployments: Iterable[DeploymentDTO]) -> dict[DeploymentStatus, int]:
    """Per-status totals, every status present even when zero."""
    counts = dict.fromkeys(DeploymentStatus, 0)
    for deployment in deployments:
        counts[deployment.status] += 1
    return counts
