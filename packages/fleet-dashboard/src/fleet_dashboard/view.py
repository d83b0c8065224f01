"""Deployments list view: the entry points a UI drives.

Derived state is recomputed by ``build_view`` every time an input changes; there is
no dependency tracking. The view owns filter, pagination and selection state and
delegates writes to ``StatusEditor`` and ``BulkOperationCoordinator``, both of which
hand control back through ``refresh``.
"""

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from shared.clients.errors import FetchError, StoreError
from shared.contracts.dto import (
    DeploymentDTO,
    DeploymentStatus,
    EngineerDTO,
    ProjectDTO,
    RecordId,
)
from shared.logging import get_logger

from .bulk import BulkOperationCoordinator, BulkOperationResult
from .filtering import FilterState, filter_deployments, status_counts
from .messages import describe_failure
from .notifications import LoggingNotifier, Notifier
from .pagination import DEFAULT_PAGE_SIZE, PageWindow, PaginationState, paginate
from .permissions import PermissionDenied, PermissionManager, SessionAccessor
from .selection import SelectionSet
from .status_editor import EditOutcome, EditState, StatusDraft, StatusEditor
from .store import DeploymentStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ListView:
    window: PageWindow[DeploymentDTO]
    status_counts: dict[DeploymentStatus, int]

    @property
    def page_items(self) -> list[DeploymentDTO]:
        return self.window.items

    @property
    def total_items(self) -> int:
        return self.window.total_items

    @property
    def total_pages(self) -> int:
        return self.window.total_pages

    @property
    def current_page(self) -> int:
        return self.window.page


def build_view(
    records: Sequence[DeploymentDTO],
    filters: FilterState,
    page: int,
    page_size: int,
    projects: Iterable[ProjectDTO] = (),
    engineers: Iterable[EngineerDTO] = (),
) -> ListView:
    """Filter, sort and paginate ``records``. Pure; inputs are not modified."""
    filtered = filter_deployments(records, filters, projects, engineers)
    return ListView(
        window=paginate(filtered, page, page_size),
        status_counts=status_counts(filtered),
    )


class DeploymentListView:
    def __init__(
        self,
        store: DeploymentStore,
        notifier: Notifier | None = None,
        session: SessionAccessor | None = None,
        items_per_page: int = DEFAULT_PAGE_SIZE,
        bulk_concurrency: int = 1,
        scope_project_id: RecordId | None = None,
    ):
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.permissions = PermissionManager(session)

        self.filters = FilterState()
        self.scope_project_id = scope_project_id
        self.pagination = PaginationState(items_per_page)
        self.selection = SelectionSet()
        self.editor = StatusEditor(store, self.refresh, self.notifier, self.permissions)
        self.bulk = BulkOperationCoordinator(
            store,
            self.selection,
            self.refresh,
            self.notifier,
            self.permissions,
            concurrency=bulk_concurrency,
        )

        self.records: list[DeploymentDTO] = []
        self.projects: list[ProjectDTO] = []
        self.engineers: list[EngineerDTO] = []
        self.is_loading = False
        self.error: str | None = None
        self._view = build_view([], self._effective_filters(), 1, items_per_page)

    # === Data loading ===

    async def refresh(self) -> None:
        """Refetch the collection and recompute. Keeps the page, clamped."""
        self.is_loading = True
        try:
            self.records = await self.store.list_deployments()
            self.error = None
            logger.debug("deployments_fetched", count=len(self.records))
        except FetchError as e:
            self.error = describe_failure(e, action="load")
            logger.warning(
                "deployments_fetch_failed", status_code=e.status_code, error=str(e)
            )
        finally:
            self.is_loading = False
        self._recompute()

    async def load_related(self) -> None:
        """Load projects and engineers used for name search."""
        self.projects, self.engineers = await asyncio.gather(
            self.store.list_projects(), self.store.list_engineers()
        )
        self._recompute()

    def _effective_filters(self) -> FilterState:
        if self.scope_project_id is not None:
            return self.filters.with_project(self.scope_project_id)
        return self.filters

    def _recompute(self) -> None:
        self._view = build_view(
            self.records,
            self._effective_filters(),
            self.pagination.current_page,
            self.pagination.items_per_page,
            self.projects,
            self.engineers,
        )
        self.pagination.sync(self._view.window)
        self.selection.set_visible(d.id for d in self._view.page_items)
        self.editor.reconcile(self.records)

    @property
    def current(self) -> ListView:
        return self._view

    def get_record(self, record_id: RecordId) -> DeploymentDTO:
        for record in self.records:
            if record.id == record_id or str(record.id) == str(record_id):
                return record
        raise KeyError(f"Deployment {record_id!r} not found")

    # === Filters ===

    def _apply_filters(self, filters: FilterState) -> None:
        if filters == self.filters:
            return
        self.filters = filters
        self.pagination.reset()
        self._recompute()

    def set_query(self, query: str) -> None:
        self._apply_filters(self.filters.with_query(query))

    def set_status_filter(self, status: DeploymentStatus | None) -> None:
        self._apply_filters(self.filters.with_status(status))

    def set_project_filter(self, project_id: RecordId | None) -> None:
        self._apply_filters(self.filters.with_project(project_id))

    def clear_filters(self) -> None:
        self._apply_filters(FilterState())

    @property
    def has_active_filters(self) -> bool:
        return self.filters.is_active or self.scope_project_id is not None

    def change_scope(self, project_id: RecordId | None) -> None:
        """Switch to another collection scope; prior filters and selection no longer apply."""
        self.scope_project_id = project_id
        self.filters = FilterState()
        self.pagination.reset()
        self.selection.clear()
        self._recompute()

    # === Pagination ===

    def go_to_page(self, page: int) -> None:
        self.pagination.go_to_page(page)
        self._recompute()

    def next_page(self) -> None:
        self.pagination.next_page()
        self._recompute()

    def previous_page(self) -> None:
        self.pagination.previous_page()
        self._recompute()

    def first_page(self) -> None:
        self.pagination.first_page()
        self._recompute()

    def last_page(self) -> None:
        self.pagination.last_page()
        self._recompute()

    def set_items_per_page(self, items_per_page: int) -> None:
        self.pagination.set_items_per_page(items_per_page)
        self._recompute()

    # === Status editing ===

    def edit_status(self, record_id: RecordId) -> StatusDraft:
        return self.editor.begin(self.get_record(record_id))

    def pick_status(self, record_id: RecordId, status: DeploymentStatus) -> None:
        self.editor.pick(self.get_record(record_id).id, status)

    async def confirm_status(
        self, record_id: RecordId, new_status: DeploymentStatus | None = None
    ) -> EditOutcome:
        return await self.editor.confirm(self.get_record(record_id), new_status)

    def cancel_status(self, record_id: RecordId) -> None:
        self.editor.cancel(self.get_record(record_id).id)

    def edit_state(self, record_id: RecordId) -> EditState:
        return self.editor.state(self.get_record(record_id).id)

    def display_status(self, record_id: RecordId) -> DeploymentStatus:
        return self.editor.display_status(self.get_record(record_id))

    def status_error(self, record_id: RecordId) -> str | None:
        draft = self.editor.draft(self.get_record(record_id).id)
        return draft.error if draft else None

    # === Selection ===

    def _selection_key(self, record_id: RecordId) -> RecordId:
        # Ids of records that vanished after a refetch can still sit in the selection
        try:
            return self.get_record(record_id).id
        except KeyError:
            return record_id

    def toggle_select(self, record_id: RecordId) -> bool:
        return self.selection.toggle(self._selection_key(record_id))

    def toggle_select_all(self) -> None:
        self.selection.toggle_all()

    def clear_selection(self) -> None:
        self.selection.clear()

    def is_selected(self, record_id: RecordId) -> bool:
        return self.selection.is_selected(self._selection_key(record_id))

    @property
    def is_all_selected(self) -> bool:
        return self.selection.is_all_selected

    @property
    def is_indeterminate(self) -> bool:
        return self.selection.is_indeterminate

    # === Deletion ===

    @property
    def is_bulk_deleting(self) -> bool:
        return self.bulk.is_running

    async def bulk_delete(
        self, selected_ids: Iterable[RecordId] | None = None
    ) -> BulkOperationResult | None:
        """Delete the selection, or ``selected_ids`` when given.

        Selected ids are resolved against the whole dataset, not only the visible page;
        ids that no longer exist are skipped.
        """
        if selected_ids is None:
            targets = self.selection.resolve(self.records)
        else:
            targets = []
            for record_id in selected_ids:
                try:
                    targets.append(self.get_record(record_id))
                except KeyError:
                    logger.warning("bulk_delete_unknown_id", deployment_id=record_id)
        return await self.bulk.delete(targets)

    async def delete_one(self, record_id: RecordId) -> bool:
        deployment = self.get_record(record_id)
        try:
            self.permissions.check_permission("delete_deployment")
            await self.store.delete_deployment(deployment.id)
        except (StoreError, PermissionDenied) as e:
            logger.warning(
                "deployment_delete_failed",
                deployment_id=deployment.id,
                status_code=getattr(e, "status_code", None),
                error=str(e),
            )
            self.notifier.error(describe_failure(e, action="delete"))
            return False

        self.notifier.success(f'Deployment "{deployment.display_name}" deleted successfully')
        await self.refresh()
        return True
