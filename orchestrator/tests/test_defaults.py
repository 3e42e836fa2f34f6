import pytest

from orchestrator.defaults import DefaultStore
from orchestrator.errors import InstanceError


def test_add_then_remove_headers():
    store = DefaultStore()
    store.add_headers({"A": "1"})
    store.add_headers({"A": "2", "B": "3"})
    store.remove_headers(["A"])
    assert store.headers == {"B": "3"}


def test_remove_headers_without_names_clears_all():
    store = DefaultStore(headers={"A": "1", "B": "2"})
    store.remove_headers()
    assert store.headers == {}


def test_remove_absent_names_is_noop():
    store = DefaultStore(params={"a": 1})
    store.remove_params(["zzz"])
    store.remove_headers(["zzz"])
    assert store.params == {"a": 1}


def test_remove_params_without_names_clears_all():
    store = DefaultStore(params={"a": 1, "nested": {"b": 2}})
    store.remove_params()
    assert store.params == {}


def test_merge_is_shallow_and_call_wins():
    store = DefaultStore(params={"filter": {"a": 1, "b": 2}, "page": 1})
    merged = store.merged_params({"filter": {"c": 3}})
    assert merged == {"filter": {"c": 3}, "page": 1}
    assert store.params == {"filter": {"a": 1, "b": 2}, "page": 1}


def test_views_are_copies():
    store = DefaultStore(headers={"A": "1"})
    store.headers["B"] = "2"
    merged = store.merged_headers()
    merged["C"] = "3"
    assert store.headers == {"A": "1"}


def test_timeout():
    store = DefaultStore(timeout=100)
    assert store.timeout == 100
    store.set_timeout(0)
    assert store.timeout == 0
    store.remove_timeout()
    assert store.timeout is None
    with pytest.raises(InstanceError):
        store.set_timeout(-1)
