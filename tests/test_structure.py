import pytest

from jira_worktime.core.errors import StructuralError
from jira_worktime.core.structure import (
    deep_copy,
    filter_data_in_map,
    get_by_path,
    node_integer_value,
    put_by_path,
    remap_data_in_map,
)


def test_get_by_path_nested_and_missing():
    doc = {"fields": {"created": "x", "status": {"name": "Open"}}}
    assert get_by_path(doc, "fields.created") == "x"
    assert get_by_path(doc, "fields.status.name") == "Open"
    assert get_by_path(doc, "fields.missing") is None
    assert get_by_path(doc, "fields.created.deeper") is None
    assert get_by_path(None, "fields") is None


def test_put_by_path_creates_levels():
    doc = {}
    put_by_path(doc, "time.in_source", 5)
    assert doc == {"time": {"in_source": 5}}
    put_by_path(doc, "flat", 1)
    assert doc["flat"] == 1


def test_put_by_path_rejects_scalar_segment():
    doc = {"time": 3}
    with pytest.raises(StructuralError):
        put_by_path(doc, "time.in_source", 5)
    with pytest.raises(ValueError):
        put_by_path(doc, "", 5)


def test_deep_copy_new_containers_shared_scalars():
    label = "backend"
    source = {"a": [{"b": label}, None], "c": None, "d": 1}
    copied = deep_copy(source)
    assert copied == {"a": [{"b": "backend"}], "d": 1}
    assert copied["a"] is not source["a"]
    assert copied["a"][0] is not source["a"][0]
    assert copied["a"][0]["b"] is label


def test_filter_and_remap():
    data = {"a": 1, "b": 2, "c": 3}
    filter_data_in_map(data, {"a", "c"})
    assert data == {"a": 1, "c": 3}
    filter_data_in_map(data, set())
    assert data == {"a": 1, "c": 3}

    remap_data_in_map(data, {"a": "alpha", "c": "a"})
    assert data == {"alpha": 1, "a": 3}


def test_node_integer_value():
    assert node_integer_value(None) is None
    assert node_integer_value(7) == 7
    assert node_integer_value(7.9) == 7
    assert node_integer_value(" 12 ") == 12
    with pytest.raises(ValueError):
        node_integer_value("twelve")
