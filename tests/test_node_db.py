import gc

import pytest

from autotrack import observable
from autotrack.node_db import NodeDb, node_db


def test_nodes_are_referenced():
    state = observable({"foo": {"bar": 1}})
    assert state in node_db
    assert node_db.get(state.__id__) is state
    assert len(node_db) == 1

    foo = state["foo"]
    assert foo in node_db
    assert len(node_db) == 2


def test_nested_nodes_are_created_lazily():
    state = observable({"foo": {"bar": {"baz": 1}}})
    assert state in node_db
    assert len(node_db) == 1


def test_ids_are_unique():
    first = observable({})
    second = observable({})
    assert first.__id__ != second.__id__


def test_reference_conflicting_id():
    db = NodeDb()
    first = observable({})
    second = observable({})
    db.reference(first)
    # referencing the same node again is fine
    db.reference(first)

    object.__setattr__(second, "__id__", first.__id__)
    with pytest.raises(RuntimeError):
        db.reference(second)


def test_nodes_are_held_weakly():
    for i in range(100):
        state = observable({"foo": {"bar": i}})
        state["foo"]["bar"]
    gc.collect()
    assert len(node_db) <= 2

    del state
    gc.collect()
    assert len(node_db) == 0


def test_nodes_stay_alive_while_memoized():
    state = observable({"foo": {"bar": 1}})
    foo_id = state["foo"].__id__
    gc.collect()

    assert node_db.get(foo_id) is state["foo"]
