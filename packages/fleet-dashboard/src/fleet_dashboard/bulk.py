"""Bulk destructive operations over the selection.

Every record is attempted; one failure never stops the rest. After the loop the
selection is cleared and the list refetched whether or not anything failed, so the
view never shows a mix of deleted and live rows. The user sees totals only; the
per-item reasons go to the log.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
import uuid

from shared.clients.errors import StoreError
from shared.contracts.dto import DeploymentDTO, RecordId
from shared.logging import bound_context, get_logger

from .messages import (
    BULK_DELETE_CRASHED,
    bulk_delete_failure,
    bulk_delete_success,
    categorize,
    describe_failure,
)
from .notifications import Notifier
from .permissions import PermissionDenied, PermissionManager
from .selection import SelectionSet
from .store import DeploymentStore, Refresh

logger = get_logger(__name__)

Operation = Callable[[DeploymentDTO], Awaitable[object]]


class BulkOperationInProgressError(RuntimeError):
    """Another bulk operation is still running."""


@dataclass(frozen=True)
class FailedItem:
    id: RecordId
    reason: str


@dataclass
class BulkOperationResult:
    success_count: int = 0
    error_count: int = 0
    failed_items: list[FailedItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.error_count

    @property
    def all_failed(self) -> bool:
        return self.total > 0 and self.success_count == 0

    @property
    def failed_ids(self) -> list[RecordId]:
        return [item.id for item in self.failed_items]


class BulkOperationCoordinator:
    def __init__(
        self,
        store: DeploymentStore,
        selection: SelectionSet,
        refresh: Refresh,
        notifier: Notifier,
        permissions: PermissionManager | None = None,
        concurrency: int = 1,
    ):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.store = store
        self.selection = selection
        self.refresh = refresh
        self.notifier = notifier
        self.permissions = permissions or PermissionManager()
        self.concurrency = concurrency
        self.is_running = False

    async def delete(self, deployments: Sequence[DeploymentDTO]) -> BulkOperationResult | None:
        """Delete every deployment in ``deployments``.

        Returns:
            Aggregated result, or None when the coordinator itself failed (a single
            generic notice is shown in that case) or the session may not delete.
        """
        try:
            self.permissions.check_permission("delete_deployment")
        except PermissionDenied as e:
            self.notifier.error(describe_failure(e, action="delete"))
            return None

        async def _delete(deployment: DeploymentDTO) -> None:
            await self.store.delete_deployment(deployment.id)

        return await self.run(deployments, _delete)

    async def run(
        self, deployments: Sequence[DeploymentDTO], operation: Operation
    ) -> BulkOperationResult | None:
        if self.is_running:
            raise BulkOperationInProgressError("A bulk operation is already running")

        self.is_running = True
        try:
            with bound_context(bulk_operation_id=uuid.uuid4().hex[:12]):
                logger.info("bulk_delete_started", count=len(deployments))
                result = await self._attempt_all(deployments, operation)
                self._report(result)

                self.selection.clear()
                await self.refresh()

                logger.info(
                    "bulk_delete_finished",
                    success_count=result.success_count,
                    error_count=result.error_count,
                    failed_ids=result.failed_ids,
                )
                return result
        except Exception:
            logger.exception("bulk_delete_crashed")
            self.notifier.error(BULK_DELETE_CRASHED)
            return None
        finally:
            self.is_running = False

    async def _attempt_all(
        self, deployments: Sequence[DeploymentDTO], operation: Operation
    ) -> BulkOperationResult:
        async def _attempt(deployment: DeploymentDTO) -> FailedItem | None:
            try:
                await operation(deployment)
            except StoreError as e:
                logger.warning(
                    "bulk_delete_item_failed",
                    deployment_id=deployment.id,
                    deployment_name=deployment.display_name,
                    category=categorize(e).value,
                    status_code=e.status_code,
                    error=str(e),
                )
                return FailedItem(id=deployment.id, reason=describe_failure(e, action="delete"))
            return None

        if self.concurrency == 1:
            outcomes = [await _attempt(deployment) for deployment in deployments]
        else:
            semaphore = asyncio.Semaphore(self.concurrency)

            async def _bounded(deployment: DeploymentDTO) -> FailedItem | None:
                async with semaphore:
                    return await _attempt(deployment)

            # An unexpected error cancels the remaining deletes before the crash is reported
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(_bounded(d)) for d in deployments]
            outcomes = [task.result() for task in tasks]

        result = BulkOperationResult()
        for outcome in outcomes:
            if outcome is None:
                result.success_count += 1
            else:
                result.error_count += 1
                result.failed_items.append(outcome)
        return result

    def _report(self, result: BulkOperationResult) -> None:
        if result.success_count > 0:
            self.notifier.success(bulk_delete_success(result.success_count))
        if result.error_count > 0:
            self.notifier.error(bulk_delete_failure(result.error_count))
