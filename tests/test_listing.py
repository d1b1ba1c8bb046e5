"""List page controller: filters, debounced search, stale responses, delete."""

from unittest.mock import MagicMock

import pytest

from qrtag_admin.models.common import ListFilters
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.workflows.debounce import Debouncer
from qrtag_admin.workflows.listing import ListController


def page(*ids, total=None):
    return {"tags": [{"_id": i} for i in ids], "pagination": {"total": total or len(ids), "page": 1}}


@pytest.fixture
def fetch():
    return MagicMock(return_value=page("t1", "t2"))


@pytest.fixture
def controller(fetch, scheduler):
    return ListController(fetch, "tags", delete=MagicMock(), debouncer=Debouncer(400, scheduler))


class TestFetching:
    def test_fetch_replaces_rows(self, controller, fetch):
        assert controller.fetch() is True
        fetch.assert_called_once_with({"page": 1, "limit": 10})
        assert [row["_id"] for row in controller.rows] == ["t1", "t2"]
        assert controller.pagination["total"] == 2
        assert controller.loading is False

    def test_filter_change_resets_page(self, controller, fetch):
        controller.set_page(3)
        controller.set_filters(status="activated")
        assert fetch.call_args.args[0] == {"page": 1, "limit": 10, "status": "activated"}

    def test_set_page_keeps_filters(self, controller, fetch):
        controller.set_filters(status="activated")
        controller.set_page(2, limit=25)
        assert fetch.call_args.args[0] == {"page": 2, "limit": 25, "status": "activated"}

    def test_search_is_debounced(self, controller, fetch, scheduler):
        controller.on_search_input("a")
        controller.on_search_input("ab")
        controller.on_search_input("abc")
        fetch.assert_not_called()
        assert scheduler.live[0].delay == 0.4

        scheduler.flush()
        fetch.assert_called_once_with({"page": 1, "limit": 10, "search": "abc"})
        assert controller.search_input == "abc"

    def test_error_keeps_rows_and_notifies(self, controller, fetch):
        controller.fetch()
        fetch.side_effect = ServiceError(500, "UPSTREAM_ERROR", "boom")
        assert controller.fetch() is False
        assert controller.error == "boom"
        assert len(controller.rows) == 2
        assert controller.notifier.last.message == "boom"

    def test_rejected_filters_fail_cleanly(self, scheduler):
        def fetch(filters):
            ListFilters(**filters)
            return page("t1")

        controller = ListController(fetch, "tags", debouncer=Debouncer(400, scheduler))
        assert controller.set_page(0) is False
        assert controller.loading is False
        assert controller.error == "Input should be greater than or equal to 1"
        assert controller.notifier.last.level == "error"


class TestStaleResponses:
    def test_older_response_is_discarded(self, controller):
        first = controller.begin_fetch()
        second = controller.begin_fetch()

        assert controller.apply(second, page("new")) is True
        assert controller.apply(first, page("old")) is False
        assert [row["_id"] for row in controller.rows] == ["new"]
        assert controller.loading is False

    def test_older_error_is_ignored(self, controller):
        first = controller.begin_fetch()
        second = controller.begin_fetch()
        controller.apply(second, page("new"))
        assert controller.fail(first, ServiceError(500, "UPSTREAM_ERROR", "late")) is False
        assert controller.error is None

    def test_response_arriving_during_newer_fetch(self, scheduler):
        # the first fetch returns only after a second one has started
        controller = None

        def fetch(filters):
            if filters.get("status") == "slow":
                controller.set_filters(status="fast")
                return page("slow")
            return page("fast")

        controller = ListController(fetch, "tags", debouncer=Debouncer(400, scheduler))
        assert controller.set_filters(status="slow") is False
        assert [row["_id"] for row in controller.rows] == ["fast"]


class TestDelete:
    def test_confirmed_delete_refetches(self, controller, fetch):
        assert controller.delete("t1", confirm=lambda: True) is True
        controller._delete.assert_called_once_with("t1")
        fetch.assert_called_once()
        assert controller.notifier.last.message == "Deleted successfully"

    def test_cancelled_delete_does_nothing(self, controller, fetch):
        assert controller.delete("t1", confirm=lambda: False) is False
        controller._delete.assert_not_called()
        fetch.assert_not_called()

    def test_failed_delete(self, controller, fetch):
        controller._delete.side_effect = ServiceError(404, "UPSTREAM_ERROR", "Error 404: Not Found")
        assert controller.delete("t1", confirm=lambda: True) is False
        assert controller.notifier.last.message == "Error 404: Not Found"
        fetch.assert_not_called()

    def test_list_without_delete(self, fetch, scheduler):
        controller = ListController(fetch, "tags", debouncer=Debouncer(400, scheduler))
        with pytest.raises(RuntimeError):
            controller.delete("t1", confirm=lambda: True)
