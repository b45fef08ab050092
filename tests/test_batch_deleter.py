"""Tests for sequential batch deletion."""

import math

import pytest

from rentops.integrations.exceptions import StorageDeleteError
from rentops.schemas.enums import BatchFailurePolicy
from rentops.services.batch_deleter import BatchDeleter
from tests.fakes import FakeObjectStore


@pytest.mark.parametrize("count,batch_size", [(1, 50), (50, 50), (101, 50), (10, 4)])
def test_issues_ceil_n_over_b_calls(count, batch_size):
    store = FakeObjectStore()
    paths = [f"2024/{i}.jpg" for i in range(count)]

    results = BatchDeleter(store, batch_size).delete(paths)

    assert len(store.remove_calls) == math.ceil(count / batch_size)
    assert all(len(call) <= batch_size for call in store.remove_calls)
    assert [path for call in store.remove_calls for path in call] == paths
    assert [result.offset for result in results] == list(range(0, count, batch_size))


def test_empty_input_issues_no_calls():
    store = FakeObjectStore()
    assert BatchDeleter(store, 50).delete([]) == []
    assert store.remove_calls == []


def test_continue_policy_records_failure_and_keeps_going():
    store = FakeObjectStore(fail_remove_calls={0})
    for i in range(4):
        store.add(f"2024/{i}.jpg", None)

    results = BatchDeleter(store, 2).delete([f"2024/{i}.jpg" for i in range(4)])

    assert [result.succeeded for result in results] == [False, True]
    assert results[0].error == "remove rejected"
    assert results[1].removed == 2


def test_abort_policy_raises_on_first_failure():
    store = FakeObjectStore(fail_remove_calls={1})

    with pytest.raises(StorageDeleteError):
        BatchDeleter(store, 1, BatchFailurePolicy.ABORT).delete(["a", "b", "c"])

    assert store.remove_calls == [["a"], ["b"]]


def test_rejects_non_positive_batch_size():
    with pytest.raises(ValueError):
        BatchDeleter(FakeObjectStore(), 0)


def test_records_only_paths_the_store_removed():
    store = FakeObjectStore()
    store.add("2024/a.jpg", None)

    results = BatchDeleter(store, 50).delete(["2024/a.jpg", "2024/gone.jpg"])

    assert results[0].removed == 1
    assert results[0].removed_paths == ["2024/a.jpg"]
    assert results[0].succeeded
