import pytest

from termplan.core.exceptions import DepartmentMismatchError, ResourceNotFoundError
from termplan.services.records import SECTIONS, get_section


def test_add_assigns_id_and_preserves_insertion_order(store):
    first = store.add(SECTIONS, {"departmentId": "dept-a", "title": "B"})
    second = store.add(SECTIONS, {"id": "fixed", "departmentId": "dept-a", "title": "A"})

    assert first
    assert second == "fixed"
    assert [record["title"] for record in store.list(SECTIONS, "dept-a")] == ["B", "A"]


def test_list_is_partitioned_by_department(store):
    store.batch_add(
        SECTIONS,
        [{"departmentId": "dept-a", "title": "A"}, {"departmentId": "dept-b", "title": "B"}],
    )
    assert [record["title"] for record in store.list(SECTIONS, "dept-b")] == ["B"]
    assert len(store.list(SECTIONS)) == 2


def test_update_merges_partial(store):
    record_id = store.add(SECTIONS, {"departmentId": "dept-a", "title": "A", "room": "CAT 201"})
    merged = store.update(SECTIONS, record_id, {"room": "CAT 105"})

    assert merged == {"id": record_id, "departmentId": "dept-a", "title": "A", "room": "CAT 105"}
    assert store.get(SECTIONS, record_id) == merged


def test_update_and_delete_missing_record_raise(store):
    with pytest.raises(ResourceNotFoundError):
        store.update(SECTIONS, "missing", {"room": "X"})
    with pytest.raises(ResourceNotFoundError):
        store.delete(SECTIONS, "missing")


def test_delete_removes_record(store):
    record_id = store.add(SECTIONS, {"departmentId": "dept-a"})
    store.delete(SECTIONS, record_id)
    assert store.get(SECTIONS, record_id) is None


def test_batch_add_notifies_once_with_full_snapshot(store):
    snapshots = []
    store.subscribe(SECTIONS, snapshots.append)

    store.batch_add(SECTIONS, [{"departmentId": "dept-a"}, {"departmentId": "dept-a"}, {"departmentId": "dept-b"}])

    assert len(snapshots) == 1
    assert len(snapshots[0]) == 3


def test_unsubscribe_stops_delivery(store):
    snapshots = []
    unsubscribe = store.subscribe(SECTIONS, snapshots.append)
    store.add(SECTIONS, {"departmentId": "dept-a"})
    unsubscribe()
    store.add(SECTIONS, {"departmentId": "dept-a"})

    assert len(snapshots) == 1


def test_listeners_only_see_their_collection(store):
    snapshots = []
    store.subscribe("requests", snapshots.append)
    store.add(SECTIONS, {"departmentId": "dept-a"})
    assert snapshots == []


def test_scoped_lookup_rejects_other_department(store, make_section):
    store.add(SECTIONS, make_section(id="s1", department_id="dept-b").to_document())

    with pytest.raises(DepartmentMismatchError):
        get_section(store, "dept-a", "s1")
    with pytest.raises(ResourceNotFoundError):
        get_section(store, "dept-a", "nope")
    assert get_section(store, "dept-b", "s1").id == "s1"
