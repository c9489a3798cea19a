import threading

import pytest

from errors import RemoteError
from fakes import FakeLibrary, liked
from stages.fetch import PAGE_SIZE, FetchError, Page, fetch_liked, plan_pages


def test_plan_pages_short_last_page():
    assert plan_pages(120) == [Page(0, 50), Page(50, 50), Page(100, 20)]


def test_plan_pages_exact_multiple():
    assert plan_pages(100) == [Page(0, 50), Page(50, 50)]


def test_plan_pages_zero_is_empty():
    assert plan_pages(0) == []


@pytest.mark.parametrize("total,page_size", [(-1, 50), (10, 0), (10, PAGE_SIZE + 1)])
def test_plan_pages_rejects_bad_input(total, page_size):
    with pytest.raises(ValueError):
        plan_pages(total, page_size)


def test_fetch_liked_zero_makes_no_calls():
    lib = FakeLibrary(liked(10))
    assert fetch_liked(lib, 0) == []
    assert lib.calls == []


def test_fetch_liked_preserves_page_order_despite_completion_order():
    records = liked(120)
    lib = FakeLibrary(records)
    # First page finishes last
    lib.page_delays[0] = 0.2

    result = fetch_liked(lib, 120)

    assert [r.item_id for r in result] == [r.item_id for r in records]
    assert sorted(c[1:] for c in lib.calls_to("fetch_page")) == [
        (0, 50),
        (50, 50),
        (100, 20),
    ]


def test_fetch_liked_fewer_remote_items_than_requested():
    lib = FakeLibrary(liked(30))
    result = fetch_liked(lib, 100)
    assert len(result) == 30


def test_fetch_liked_failure_drains_every_page():
    lib = FakeLibrary(liked(150))
    lib.page_errors[0] = RemoteError("boom")
    # A slow sibling must still have been called before the error surfaces
    lib.page_delays[100] = 0.2

    with pytest.raises(FetchError) as excinfo:
        fetch_liked(lib, 150)

    assert len(lib.calls_to("fetch_page")) == 3
    assert [page for page, _ in excinfo.value.failures] == [Page(0, 50)]
    assert isinstance(excinfo.value, RemoteError)
    assert "offset 0" in str(excinfo.value)


def test_fetch_liked_reports_first_failure_in_page_order():
    lib = FakeLibrary(liked(150))
    lib.page_errors[50] = RemoteError("second")
    lib.page_errors[100] = RemoteError("third")

    with pytest.raises(FetchError) as excinfo:
        fetch_liked(lib, 150)

    assert [page.offset for page, _ in excinfo.value.failures] == [50, 100]
    assert excinfo.value.__cause__ is lib.page_errors[50]


def test_fetch_liked_non_remote_error_propagates_unchanged():
    lib = FakeLibrary(liked(60))
    lib.page_errors[50] = KeyError("unexpected")

    with pytest.raises(KeyError):
        fetch_liked(lib, 60)


def test_fetch_liked_issues_every_page_at_once():
    records = liked(200)
    pages = plan_pages(200)
    barrier = threading.Barrier(len(pages))

    class AllAtOnce(FakeLibrary):
        def fetch_page(self, offset, limit):
            # Only passes if every page request is in flight together
            barrier.wait(timeout=5)
            return super().fetch_page(offset, limit)

    result = fetch_liked(AllAtOnce(records), 200)

    assert [r.item_id for r in result] == [r.item_id for r in records]
