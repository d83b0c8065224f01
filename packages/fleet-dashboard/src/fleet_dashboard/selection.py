"""Multi-row selection over a paginated list.

Ids can only be added while they are on the visible page. Once selected they stay
selected when the page changes; "select all" and its inverse only ever touch the
ids of the current page.
"""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from shared.contracts.dto import RecordId
from shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SelectionSet:
    def __init__(self) -> None:
        # dict keeps selection order for bulk operations
        self._selected: dict[RecordId, None] = {}
        self._visible: list[RecordId] = []

    def set_visible(self, ids: Iterable[RecordId]) -> None:
        """Replace the visible universe with the ids of the current page."""
        self._visible = list(ids)

    @property
    def visible_ids(self) -> list[RecordId]:
        return list(self._visible)

    @property
    def selected_ids(self) -> list[RecordId]:
        return list(self._selected)

    @property
    def selected_count(self) -> int:
        return len(self._selected)

    @property
    def visible_selected_count(self) -> int:
        return sum(1 for record_id in self._visible if record_id in self._selected)

    def is_selected(self, record_id: RecordId) -> bool:
        return record_id in self._selected

    def toggle(self, record_id: RecordId) -> bool:
        """Flip membership of ``record_id``. Returns the new membership.

        Raises:
            KeyError: when adding an id that is not on the visible page.
        """
        if record_id in self._selected:
            del self._selected[record_id]
            return False
        if record_id not in self._visible:
            raise KeyError(f"Record {record_id!r} is not on the visible page")
        self._selected[record_id] = None
        return True

    def toggle_all(self) -> None:
        if not self._visible:
            return
        if self.is_all_selected:
            for record_id in self._visible:
                self._selected.pop(record_id, None)
        else:
            for record_id in self._visible:
                self._selected.setdefault(record_id, None)

    @property
    def is_all_selected(self) -> bool:
        return bool(self._visible) and all(
            record_id in self._selected for record_id in self._visible
        )

    @property
    def is_indeterminate(self) -> bool:
        return 0 < self.visible_selected_count < len(self._visible)

    def clear(self) -> None:
        """Empty the selection across all pages."""
        if self._selected:
            logger.debug("selection_cleared", count=len(self._selected))
        self._selected.clear()

    def resolve(self, records: Sequence[T], key=lambda record: record.id) -> list[T]:
        """Records whose id is selected, in selection order.

        Ids with no matching record (already gone) are skipped.
        """
        by_id = {key(record): record for record in records}
        return [by_id[record_id] for record_id in self._selected if record_id in by_id]
