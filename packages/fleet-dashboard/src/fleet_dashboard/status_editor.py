"""Inline status editing with optimistic display and rollback.

Per record the editor moves through::

    VIEWING --begin--> EDITING --confirm (changed)--> SAVING --ok--> VIEWING (+ refetch)
                          ^                              |
                          +------- failure (reverted) ---+

Confirming an unchanged status goes straight back to VIEWING without a request.
The record itself is never touched; the candidate lives in a ``StatusDraft`` until
the refetch after a successful save replaces the record with the backend's copy.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from shared.clients.errors import StoreError
from shared.contracts.dto import DeploymentDTO, DeploymentStatus, DeploymentUpdate, RecordId
from shared.logging import get_logger

from .messages import categorize, describe_failure, status_updated
from .notifications import Notifier
from .permissions import PermissionManager
from .store import DeploymentStore, Refresh

logger = get_logger(__name__)


class EditState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class EditOutcome(str, Enum):
    UNCHANGED = "unchanged"
    SAVED = "saved"
    FAILED = "failed"


class StatusEditInProgressError(RuntimeError):
    """A save for this record is already in flight."""


@dataclass
class StatusDraft:
    record_id: RecordId
    original_status: DeploymentStatus
    pending_status: DeploymentStatus
    is_saving: bool = False
    error: str | None = None

    @property
    def state(self) -> EditState:
        return EditState.SAVING if self.is_saving else EditState.EDITING


class StatusEditor:
    def __init__(
        self,
        store: DeploymentStore,
        refresh: Refresh,
        notifier: Notifier,
        permissions: PermissionManager | None = None,
    ):
        self.store = store
        self.refresh = refresh
        self.notifier = notifier
        self.permissions = permissions or PermissionManager()
        self._drafts: dict[RecordId, StatusDraft] = {}

    def draft(self, record_id: RecordId) -> StatusDraft | None:
        return self._drafts.get(record_id)

    def state(self, record_id: RecordId) -> EditState:
        draft = self._drafts.get(record_id)
        return draft.state if draft else EditState.VIEWING

    def display_status(self, deployment: DeploymentDTO) -> DeploymentStatus:
        """Status to show for a row: the candidate while editing, else the record's."""
        draft = self._drafts.get(deployment.id)
        return draft.pending_status if draft else deployment.status

    def _require_idle_draft(self, record_id: RecordId) -> StatusDraft:
        draft = self._drafts.get(record_id)
        if draft is None:
            raise KeyError(f"Deployment {record_id!r} is not being edited")
        if draft.is_saving:
            raise StatusEditInProgressError(f"Status save for {record_id!r} is in flight")
        return draft

    def begin(self, deployment: DeploymentDTO) -> StatusDraft:
        """Open the editor for a row, seeding the candidate with its current status."""
        existing = self._drafts.get(deployment.id)
        if existing is not None:
            if existing.is_saving:
                raise StatusEditInProgressError(
                    f"Status save for {deployment.id!r} is in flight"
                )
            return existing

        self.permissions.check_permission("update_deployment")
        draft = StatusDraft(
            record_id=deployment.id,
            original_status=deployment.status,
            pending_status=deployment.status,
        )
        self._drafts[deployment.id] = draft
        return draft

    def pick(self, record_id: RecordId, status: DeploymentStatus) -> None:
        draft = self._require_idle_draft(record_id)
        draft.pending_status = status
        draft.error = None

    def cancel(self, record_id: RecordId) -> None:
        """Discard the candidate. Also used when the user clicks outside the control."""
        if record_id not in self._drafts:
            return
        self._require_idle_draft(record_id)
        del self._drafts[record_id]

    async def confirm(
        self, deployment: DeploymentDTO, status: DeploymentStatus | None = None
    ) -> EditOutcome:
        """Commit the candidate (or ``status`` if given) for ``deployment``.

        On failure the candidate reverts to the pre-edit status, the derived message is
        kept on the draft for inline display, and the editor stays open.
        """
        draft = self._require_idle_draft(deployment.id)
        if status is not None:
            draft.pending_status = status

        if draft.pending_status == deployment.status:
            del self._drafts[deployment.id]
            return EditOutcome.UNCHANGED

        new_status = draft.pending_status
        draft.is_saving = True
        draft.error = None
        try:
            await self.store.update_deployment(
                deployment.id, DeploymentUpdate.from_deployment(deployment, status=new_status)
            )
        except StoreError as e:
            draft.pending_status = draft.original_status
            draft.error = describe_failure(e, action="update")
            logger.warning(
                "deployment_status_update_failed",
                deployment_id=deployment.id,
                requested_status=new_status.value,
                category=categorize(e).value,
                status_code=e.status_code,
                error=str(e),
            )
            return EditOutcome.FAILED
        finally:
            draft.is_saving = False

        self._drafts.pop(deployment.id, None)
        logger.info(
            "deployment_status_updated",
            deployment_id=deployment.id,
            old_status=deployment.status.value,
            new_status=new_status.value,
        )
        self.notifier.success(status_updated(new_status.value))
        await self.refresh()
        return EditOutcome.SAVED

    def reconcile(self, deployments: Iterable[DeploymentDTO]) -> None:
        """Drop idle drafts whose record vanished or changed status underneath them."""
        current = {d.id: d.status for d in deployments}
        for record_id, draft in list(self._drafts.items()):
            if draft.is_saving:
                continue
            if current.get(record_id) != draft.original_status:
                logger.debug("status_draft_discarded", deployment_id=record_id)
                del self._drafts[record_id]
