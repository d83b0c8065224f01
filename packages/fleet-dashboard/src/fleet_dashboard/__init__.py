"""Deployment list synchronization engine: filter, paginate, select, edit, bulk delete."""

from .bulk import BulkOperationCoordinator, BulkOperationResult, FailedItem
from .filtering import FilterState, filter_deployments
from .pagination import PageWindow, PaginationState, paginate
from .selection import SelectionSet
from .status_editor import EditOutcome, EditState, StatusDraft, StatusEditor
from .view import DeploymentListView, ListView, build_view

__all__ = [
    "BulkOperationCoordinator",
    "BulkOperationResult",
    "DeploymentListView",
    "EditOutcome",
    "EditState",
    "FailedItem",
    "FilterState",
    "ListView",
    "PageWindow",
    "PaginationState",
    "SelectionSet",
    "StatusDraft",
    "StatusEditor",
    "build_view",
    "filter_deployments",
    "paginate",
]
