import asyncio
from unittest.mock import AsyncMock

from fleet_dashboard.bulk import (
    BulkOperationCoordinator,
    BulkOperationInProgressError,
    BulkOperationResult,
    FailedItem,
)
from fleet_dashboard.messages import BULK_DELETE_CRASHED
from fleet_dashboard.permissions import PermissionManager
from fleet_dashboard.selection import SelectionSet
import pytest
import structlog

from shared.clients.errors import NotFoundError, ServerError


@pytest.fixture
def refresh():
    return AsyncMock()


@pytest.fixture
def selection(sample_deployments):
    selection = SelectionSet()
    selection.set_visible(d.id for d in sample_deployments)
    return selection


@pytest.fixture
def coordinator(store, selection, refresh, notifier):
    return BulkOperationCoordinator(store, selection, refresh, notifier)


def targets(store, *ids):
    return [store.deployments[record_id] for record_id in ids]


class TestBulkDelete:
    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_rest(
        self, coordinator, store, selection, refresh, notifier
    ):
        for record_id in ("d1", "d2", "d3"):
            selection.toggle(record_id)
        store.delete_failures["d2"] = NotFoundError("gone", status_code=404)

        result = await coordinator.delete(targets(store, "d1", "d2", "d3"))

        assert result.success_count == 2  # noqa: PLR2004
        assert result.error_count == 1
        assert result.failed_items == [
            FailedItem(id="d2", reason="Deployment not found. It may have already been deleted.")
        ]
        assert store.calls_to("delete") == ["d1", "d2", "d3"]
        assert selection.selected_count == 0
        refresh.assert_awaited_once()
        assert notifier.successes == ["Successfully deleted 2 deployments"]
        assert notifier.errors == [
            "Failed to delete 1 deployment. They may have dependencies or other issues."
        ]
        assert not coordinator.is_running

    @pytest.mark.asyncio
    async def test_all_failed_reports_only_failure(self, coordinator, store, refresh, notifier):
        store.should_fail = True
        store.fail_exception = ServerError("down", status_code=503)

        result = await coordinator.delete(targets(store, "d1", "d3"))

        assert result.all_failed
        assert result.failed_ids == ["d1", "d3"]
        assert notifier.successes == []
        assert notifier.errors == [
            "Failed to delete 2 deployments. They may have dependencies or other issues."
        ]
        refresh.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_input(self, coordinator, refresh, notifier):
        result = await coordinator.delete([])

        assert result.total == 0
        assert not result.all_failed
        assert notifier.successes == []
        assert notifier.errors == []
        refresh.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_crash_shows_single_generic_notice(self, coordinator, store, refresh, notifier):
        refresh.side_effect = RuntimeError("refetch exploded")

        result = await coordinator.delete(targets(store, "d1"))

        assert result is None
        assert notifier.errors == [BULK_DELETE_CRASHED]
        assert not coordinator.is_running

    @pytest.mark.asyncio
    async def test_denied_session_sends_nothing(self, store, selection, refresh, notifier):
        coordinator = BulkOperationCoordinator(
            store, selection, refresh, notifier, PermissionManager(lambda: None)
        )

        result = await coordinator.delete(targets(store, "d1"))

        assert result is None
        assert store.calls_to("delete") == []
        assert notifier.errors == ["Authentication required. Please log in again."]
        refresh.assert_not_awaited()


class TestRun:
    @pytest.mark.asyncio
    async def test_rejects_concurrent_run(self, coordinator, store):
        coordinator.is_running = True

        with pytest.raises(BulkOperationInProgressError):
            await coordinator.delete(targets(store, "d1"))

        assert store.calls_to("delete") == []

    @pytest.mark.asyncio
    async def test_operation_id_bound_while_running(self, coordinator, store):
        seen = []

        async def operation(deployment):
            seen.append(structlog.contextvars.get_contextvars().get("bulk_operation_id"))

        await coordinator.run(targets(store, "d1", "d2"), operation)

        assert seen[0] is not None
        assert seen[0] == seen[1]
        assert "bulk_operation_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded_and_order_kept(
        self, store, selection, refresh, notifier, many_deployments
    ):
        coordinator = BulkOperationCoordinator(
            store, selection, refresh, notifier, concurrency=3
        )
        active = 0
        peak = 0

        async def operation(deployment):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0)
            active -= 1
            if deployment.id in ("n03", "n01"):
                raise NotFoundError("gone", status_code=404)

        result = await coordinator.run(many_deployments[:8], operation)

        assert peak == 3  # noqa: PLR2004
        assert result.success_count == 6  # noqa: PLR2004
        assert result.failed_ids == ["n01", "n03"]

    @pytest.mark.asyncio
    async def test_unexpected_error_cancels_overlapping_deletes(
        self, store, selection, refresh, notifier, many_deployments
    ):
        coordinator = BulkOperationCoordinator(
            store, selection, refresh, notifier, concurrency=2
        )
        started = []
        finished = []
        cancelled = []

        async def operation(deployment):
            started.append(deployment.id)
            if deployment.id == "n00":
                raise RuntimeError("bad payload")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(deployment.id)
                raise
            finished.append(deployment.id)

        result = await coordinator.run(many_deployments[:4], operation)

        assert result is None
        assert notifier.errors == [BULK_DELETE_CRASHED]
        # every sibling that got going was cancelled, none ran to completion
        assert cancelled
        assert sorted(cancelled) == sorted(set(started) - {"n00"})
        assert "n03" not in started
        assert finished == []
        refresh.assert_not_awaited()
        assert not coordinator.is_running

    def test_rejects_invalid_concurrency(self, store, selection, refresh, notifier):
        with pytest.raises(ValueError, match="concurrency"):
            BulkOperationCoordinator(store, selection, refresh, notifier, concurrency=0)


def test_result_totals():
    result = BulkOperationResult(
        success_count=0, error_count=2, failed_items=[FailedItem("a", "x"), FailedItem("b", "y")]
    )

    assert result.total == 2  # noqa: PLR2004
    assert result.all_failed
    assert result.failed_ids == ["a", "b"]
