from fleet_dashboard.pagination import (
    PAGE_SIZE_OPTIONS,
    PaginationState,
    paginate,
    total_pages_for,
)
import pytest


class TestPaginate:
    def test_middle_page(self):
        window = paginate(list(range(30)), page=2, page_size=10)

        assert window.items == list(range(10, 20))
        assert window.total_items == 30  # noqa: PLR2004
        assert window.total_pages == 3  # noqa: PLR2004
        assert window.start_index == 10  # noqa: PLR2004
        assert window.end_index == 20  # noqa: PLR2004
        assert window.has_next
        assert window.has_previous

    def test_partial_last_page(self):
        window = paginate(list(range(23)), page=3, page_size=10)

        assert window.items == [20, 21, 22]
        assert window.end_index == 23  # noqa: PLR2004
        assert not window.has_next

    def test_page_past_end_is_clamped(self):
        window = paginate(list(range(30)), page=5, page_size=10)

        assert window.page == 3  # noqa: PLR2004
        assert window.items == list(range(20, 30))

    def test_page_below_one_is_clamped(self):
        window = paginate(list(range(30)), page=0, page_size=10)

        assert window.page == 1
        assert not window.has_previous

    def test_empty_input(self):
        window = paginate([], page=4, page_size=25)

        assert window.items == []
        assert window.total_pages == 1
        assert window.page == 1

    def test_input_not_modified(self):
        records = list(range(5))

        paginate(records, page=1, page_size=2)

        assert records == list(range(5))


@pytest.mark.parametrize(
    ("total_items", "page_size", "expected"),
    [(0, 25, 1), (1, 25, 1), (25, 25, 1), (26, 25, 2), (100, 10, 10)],
)
def test_total_pages_for(total_items, page_size, expected):
    assert total_pages_for(total_items, page_size) == expected


def test_total_pages_for_rejects_non_positive_size():
    with pytest.raises(ValueError, match="page_size"):
        total_pages_for(10, 0)


class TestPaginationState:
    def test_page_size_change_resets_to_first_page(self):
        items = list(range(60))
        state = PaginationState(items_per_page=25)
        state.sync(paginate(items, 1, state.items_per_page))
        state.go_to_page(3)

        state.set_items_per_page(10)
        window = paginate(items, state.current_page, state.items_per_page)
        state.sync(window)

        assert state.current_page == 1
        assert state.total_pages == 6  # noqa: PLR2004
        assert window.items == list(range(10))

    def test_navigation_is_bounded(self):
        state = PaginationState(items_per_page=10)
        state.sync(paginate(list(range(30)), 1, 10))

        state.previous_page()
        assert state.current_page == 1

        state.last_page()
        assert state.current_page == 3  # noqa: PLR2004
        state.next_page()
        assert state.current_page == 3  # noqa: PLR2004

        state.go_to_page(99)
        assert state.current_page == 3  # noqa: PLR2004
        state.go_to_page(-1)
        assert state.current_page == 1

        state.next_page()
        state.first_page()
        assert state.current_page == 1

    def test_sync_writes_back_clamped_page(self):
        state = PaginationState(items_per_page=10)
        state.sync(paginate(list(range(30)), 3, 10))

        # collection shrank underneath the current page
        state.sync(paginate(list(range(15)), state.current_page, state.items_per_page))

        assert state.current_page == 2  # noqa: PLR2004
        assert state.total_pages == 2  # noqa: PLR2004

    def test_reset(self):
        state = PaginationState(items_per_page=10, current_page=4)

        state.reset()

        assert state.current_page == 1

    @pytest.mark.parametrize("size", [0, -5])
    def test_rejects_non_positive_size(self, size):
        with pytest.raises(ValueError, match="items_per_page"):
            PaginationState(items_per_page=size)
        with pytest.raises(ValueError, match="items_per_page"):
            PaginationState().set_items_per_page(size)


def test_page_size_options():
    assert PAGE_SIZE_OPTIONS == (10, 25, 50, 100)
