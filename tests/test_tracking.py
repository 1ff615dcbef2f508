"""Tests for the document tracking store."""

from __future__ import annotations

from typing import Callable

from prowl.core.labels import LabelRegistry
from prowl.core.render_cache import RenderCache
from prowl.core.tracking import CloseSummary, DocumentTrackingStore
from prowl.host.memory import InMemoryHost


def _make_store(host: InMemoryHost, labels: str = "abc") -> tuple[DocumentTrackingStore, RenderCache]:
    cache = RenderCache()
    return DocumentTrackingStore(LabelRegistry(tuple(labels)), host, cache), cache


def _bindings(store: DocumentTrackingStore) -> list[tuple[str, str]]:
    return [(doc.label, doc.identity) for doc in store.documents]


def test_track_binds_label_and_invalidates(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host)
    alpha = open_file("alpha.py")

    allocation = store.track(alpha)

    assert allocation is not None
    assert _bindings(store) == [("a", alpha)]
    assert cache.generation == 1


def test_track_is_idempotent(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host)
    alpha = open_file("alpha.py")
    store.track(alpha)
    generation = cache.generation

    assert store.track(alpha) is None
    assert _bindings(store) == [("a", alpha)]
    assert cache.generation == generation


def test_track_skips_ineligible_documents(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host)
    unlisted = open_file("unlisted.py", listed=False)
    help_page = open_file("help.txt", buftype="help")

    assert store.track(unlisted) is None
    assert store.track(help_page) is None
    assert store.track("/not/open/anywhere.py") is None
    assert store.documents == ()
    assert cache.generation == 0


def test_track_many_invalidates_once(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host, labels="abcd")
    identities = [open_file(name) for name in ("a.py", "b.py", "c.py")]

    allocations = store.track_many(identities + [identities[0]])

    assert [allocation.document.label for allocation in allocations] == ["a", "b", "c"]
    assert cache.generation == 1


def test_untrack_removes_document_and_is_noop_when_absent(
    host: InMemoryHost, open_file: Callable[..., str]
) -> None:
    store, cache = _make_store(host)
    alpha = open_file("alpha.py")
    beta = open_file("beta.py")
    store.track_many([alpha, beta])
    generation = cache.generation

    assert store.untrack(alpha) is True
    assert _bindings(store) == [("b", beta)]
    assert store.registry.by_label("a") is None
    assert cache.generation == generation + 1

    assert store.untrack(alpha) is False
    assert cache.generation == generation + 1


def test_reorder_by_label_priority_keeps_bindings(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host)
    x, y, z, w = (open_file(name) for name in ("x.py", "y.py", "z.py", "w.py"))
    store.track_many([x, y, z])
    store.untrack(x)
    store.track(w)
    assert _bindings(store) == [("b", y), ("c", z), ("a", w)]
    generation = cache.generation

    store.reorder_by_label_priority()

    assert _bindings(store) == [("a", w), ("b", y), ("c", z)]
    assert store.registry.by_label("a").identity == w
    assert cache.generation == generation + 1


def test_eligibility_is_cached_per_generation(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host)
    alpha = open_file("alpha.py")
    handle = host.find_document(alpha)
    assert handle is not None

    assert store.is_eligible(alpha) is True
    host.set_listed(handle, False)
    assert store.is_eligible(alpha) is True

    cache.invalidate()
    assert store.is_eligible(alpha) is False


def test_discard_purges_cached_eligibility(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, _cache = _make_store(host)
    alpha = open_file("alpha.py")
    handle = host.find_document(alpha)
    assert handle is not None
    assert store.is_eligible(alpha) is True
    host.set_listed(handle, False)

    store.discard(handle)

    assert store.is_eligible(alpha) is False


def test_prune_ineligible_drops_unlisted_documents(host: InMemoryHost, open_file: Callable[..., str]) -> None:
    store, cache = _make_store(host)
    alpha = open_file("alpha.py")
    beta = open_file("beta.py")
    store.track_many([alpha, beta])
    handle = host.find_document(alpha)
    assert handle is not None
    host.set_listed(handle, False)
    cache.invalidate()

    assert store.prune_ineligible() == [alpha]
    assert _bindings(store) == [("b", beta)]


def test_close_all_except_keeps_focus_and_visible_documents(
    host: InMemoryHost, open_file: Callable[..., str]
) -> None:
    store, _cache = _make_store(host)
    visible = open_file("visible.py")
    closeable = open_file("closeable.py")
    current = open_file("current.py")
    store.track_many([visible, closeable, current])
    visible_handle = host.find_document(visible)
    assert visible_handle is not None
    host.split_view(visible_handle)

    summary = store.close_all_except(current)

    assert (summary.closed, summary.failed, summary.skipped_visible) == (1, 0, 1)
    assert _bindings(store) == [("a", visible), ("c", current)]
    assert host.find_document(closeable) is None


def test_close_all_except_retains_documents_that_fail_to_close(
    host: InMemoryHost, open_file: Callable[..., str]
) -> None:
    store, _cache = _make_store(host)
    dirty = open_file("dirty.py")
    current = open_file("current.py")
    store.track_many([dirty, current])
    dirty_handle = host.find_document(dirty)
    assert dirty_handle is not None
    host.set_modified(dirty_handle)

    summary = store.close_all_except(current)

    assert (summary.closed, summary.failed) == (0, 1)
    assert summary.failed_names == ["dirty.py"]
    assert [doc.identity for doc in store.documents] == [dirty, current]


def test_close_all_except_drops_documents_the_host_lost(
    host: InMemoryHost, open_file: Callable[..., str]
) -> None:
    store, _cache = _make_store(host)
    gone = open_file("gone.py")
    current = open_file("current.py")
    store.track_many([gone, current])
    gone_handle = host.find_document(gone)
    assert gone_handle is not None
    host.wipe_document(gone_handle)

    summary = store.close_all_except(current)

    assert (summary.closed, summary.failed, summary.skipped_visible) == (0, 0, 0)
    assert [doc.identity for doc in store.documents] == [current]


def test_close_summary_message() -> None:
    assert CloseSummary(closed=1).message() == "Closed 1 buffer"
    assert CloseSummary(closed=0).message() == "Closed 0 buffers"
    assert (
        CloseSummary(closed=2, failed=1, skipped_visible=3).message()
        == "Closed 2 buffers (1 failed - unsaved changes) (3 visible in windows)"
    )
