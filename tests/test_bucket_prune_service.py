"""Tests for the listing-driven bucket pruner."""

from datetime import datetime, timedelta, timezone

from rentops.schemas.enums import PruneOutcome
from rentops.services.bucket_prune_service import BucketPruneService
from tests.fakes import FakeObjectStore

CUTOFF = datetime(2025, 11, 1, tzinfo=timezone.utc)
OLD = CUTOFF - timedelta(days=30)
YOUNG = CUTOFF + timedelta(days=1)


def test_deletes_only_old_entries_with_metadata():
    store = FakeObjectStore()
    store.add("proofs/a.jpg", OLD, size=100)
    store.add("proofs/b.jpg", OLD + timedelta(hours=1), size=50)
    store.add("proofs/.emptyFolderPlaceholder", OLD, metadata=False)

    report = BucketPruneService(store, "proofs").run(CUTOFF)

    assert store.remove_calls == [["proofs/a.jpg", "proofs/b.jpg"]]
    assert report.total_deleted == 2
    assert report.bytes_freed == 150
    assert report.outcome == PruneOutcome.DONE


def test_listing_always_starts_at_offset_zero():
    store = FakeObjectStore()
    for i in range(250):
        store.add(f"proofs/{i:04d}.jpg", OLD + timedelta(seconds=i))

    report = BucketPruneService(store, "proofs", page_size=100).run(CUTOFF)

    assert [len(call) for call in store.remove_calls] == [100, 100, 50]
    assert {call["offset"] for call in store.list_calls} == {0}
    assert report.total_deleted == 250
    assert report.pages_listed == 4
    assert report.outcome == PruneOutcome.EMPTY


def test_empty_folder():
    report = BucketPruneService(FakeObjectStore(), "proofs").run(CUTOFF)

    assert report.outcome == PruneOutcome.EMPTY
    assert report.total_deleted == 0


def test_stops_at_first_page_without_old_files():
    store = FakeObjectStore()
    store.add("proofs/new.jpg", YOUNG)

    report = BucketPruneService(store, "proofs").run(CUTOFF)

    assert report.outcome == PruneOutcome.DONE
    assert store.remove_calls == []


def test_delete_error_aborts_the_loop():
    store = FakeObjectStore(fail_remove_calls={0})
    store.add("proofs/a.jpg", OLD)

    report = BucketPruneService(store, "proofs").run(CUTOFF)

    assert report.outcome == PruneOutcome.ABORTED
    assert report.abort_reason.startswith("delete_failed")
    assert report.total_deleted == 0
    assert len(store.list_calls) == 1


def test_list_error_aborts_the_loop():
    report = BucketPruneService(FakeObjectStore(fail_list=True), "proofs").run(CUTOFF)

    assert report.outcome == PruneOutcome.ABORTED
    assert report.abort_reason.startswith("list_failed")
    assert report.has_errors


def test_repeated_page_aborts_instead_of_spinning():
    store = FakeObjectStore(remove_is_noop=True)
    store.add("proofs/a.jpg", OLD, size=500)

    report = BucketPruneService(store, "proofs").run(CUTOFF)

    assert report.outcome == PruneOutcome.ABORTED
    assert report.abort_reason == "no_progress"
    assert len(store.remove_calls) == 1
    assert report.total_deleted == 0
    assert report.bytes_freed == 0
    assert "proofs/a.jpg" in store.objects


def test_max_pages_limits_the_run():
    store = FakeObjectStore()
    for i in range(5):
        store.add(f"proofs/{i}.jpg", OLD + timedelta(seconds=i))

    report = BucketPruneService(store, "proofs", page_size=2, max_pages=2).run(CUTOFF)

    assert report.total_deleted == 4
    assert report.outcome == PruneOutcome.ABORTED
    assert report.abort_reason == "max_pages"


def test_dry_run_previews_first_page():
    store = FakeObjectStore()
    store.add("proofs/a.jpg", OLD)
    store.add("proofs/b.jpg", YOUNG)

    report = BucketPruneService(store, "proofs").run(CUTOFF, dry_run=True)

    assert report.preview_paths == ["proofs/a.jpg"]
    assert store.remove_calls == []
    assert "proofs/a.jpg" in store.objects
