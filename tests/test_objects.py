import pytest
from frozendict import frozendict as fd

from regolib.objects import (
    json_filter,
    json_match_schema,
    json_remove,
    json_verify_schema,
    object_filter,
    object_get,
    object_keys,
    object_remove,
    object_subset,
    object_union,
    object_union_n,
)
from regolib.values import UNDEFINED, RegoError

OBJ = fd({"a": fd({"b": 1, "c": 2}), "d": 3})


def test_json_filter_string_paths():
    result = json_filter(OBJ, ("a/b", "d"), True)
    assert result == fd({"a": fd({"b": OBJ["a"]["b"]}), "d": OBJ["d"]})


def test_json_filter_array_path_matches_string_path():
    assert json_filter(OBJ, (("a", "c"),), True) == json_filter(OBJ, ("a/c",), True)


def test_json_filter_set_of_paths():
    assert json_filter(OBJ, frozenset({"d"}), True) == fd({"d": OBJ["d"]})


def test_json_filter_whole_subtree():
    assert json_filter(OBJ, ("a",), True) == fd({"a": OBJ["a"]})


def test_json_filter_empty_paths():
    assert json_filter(OBJ, (), True) == fd()


def test_json_filter_array_index():
    obj = fd({"arr": ("x", "y", "z")})
    assert json_filter(obj, ("arr/1",), True) == fd({"arr": ("y",)})


def test_json_filter_missing_key_dropped():
    assert json_filter(OBJ, ("missing", "d"), True) == fd({"d": OBJ["d"]})


def test_json_filter_errors():
    with pytest.raises(RegoError):
        json_filter(1, ("a",), True)
    with pytest.raises(RegoError):
        json_filter(OBJ, "a", True)
    with pytest.raises(RegoError):
        json_filter(OBJ, (5,), True)


def test_json_remove_nested():
    result = json_remove(OBJ, ("a/b",), True)
    assert result == fd({"a": fd({"c": OBJ["a"]["c"]}), "d": OBJ["d"]})


def test_json_remove_nothing_is_identity():
    assert json_remove(OBJ, (), True) == OBJ


def test_json_remove_array_index():
    obj = fd({"arr": ("x", "y", "z")})
    assert json_remove(obj, ("arr/1",), True) == fd({"arr": ("x", "z")})


def test_json_remove_errors():
    with pytest.raises(RegoError):
        json_remove((1,), ("a",), True)
    with pytest.raises(RegoError):
        json_remove(OBJ, (None,), True)


@pytest.mark.parametrize(
    "keys", [("a", "x"), frozenset({"a", "x"}), fd({"a": 0, "x": 0})]
)
def test_object_filter_key_kinds(keys):
    assert object_filter(OBJ, keys, True) == fd({"a": OBJ["a"]})


def test_object_filter_and_remove_partition_keys():
    kept = object_filter(OBJ, ("a",), True)
    dropped = object_remove(OBJ, ("a",), True)
    assert object_keys(kept, True) | object_keys(dropped, True) == object_keys(OBJ, True)
    assert not object_keys(kept, True) & object_keys(dropped, True)


def test_object_filter_bad_keys():
    with pytest.raises(RegoError):
        object_filter(OBJ, "a", True)
    with pytest.raises(RegoError):
        object_remove(OBJ, 3, True)


def test_object_get():
    assert object_get(OBJ, "d", 0, True) == OBJ["d"]
    assert object_get(OBJ, "zz", "default", True) == "default"
    assert object_get(OBJ, ("a", "b"), 0, True) == OBJ["a"]["b"]
    assert object_get(OBJ, ("a", "zz"), "default", True) == "default"
    assert object_get(OBJ, (), "default", True) == OBJ


def test_object_get_requires_object():
    with pytest.raises(RegoError):
        object_get("s", "a", 0, True)


def test_object_keys():
    assert object_keys(OBJ, True) == frozenset(OBJ.keys())


def test_object_subset():
    assert object_subset(OBJ, fd({"a": fd({"b": 1})}), True) is True
    assert object_subset(OBJ, fd({"a": fd({"b": 2})}), True) is False
    assert object_subset(frozenset({1, 2, 3}), frozenset({1, 3}), True) is True
    assert object_subset(frozenset({1}), frozenset({1, 3}), True) is False
    assert object_subset((1, 2, 3, 4), (2, 3), True) is True
    assert object_subset((1, 2, 3, 4), (2, 4), True) is False
    assert object_subset((1, 2, 3), frozenset({1, 3}), True) is True
    assert object_subset("x", "x", True) is True


def test_object_union_right_wins_and_merges():
    right = fd({"a": fd({"c": 9, "e": 5}), "f": 6})
    result = object_union(OBJ, right, True)
    assert result == fd(
        {"a": fd({"b": 1, "c": 9, "e": 5}), "d": OBJ["d"], "f": right["f"]}
    )


def test_object_union_requires_objects():
    with pytest.raises(RegoError):
        object_union(OBJ, 1, True)


def test_object_union_n():
    assert object_union_n((), True) == fd()
    assert object_union_n((OBJ, fd({"d": 4})), True) == object_union(OBJ, fd({"d": 4}), True)
    assert object_union_n((OBJ, 1), False) is UNDEFINED
    with pytest.raises(RegoError):
        object_union_n((OBJ, 1), True)


def test_json_verify_schema():
    assert json_verify_schema(fd({"type": "string"}), True) == (True, None)
    assert json_verify_schema('{"type": "string"}', True) == (True, None)
    ok, reason = json_verify_schema(fd({"type": 5}), False)
    assert ok is False and isinstance(reason, str) and reason
    with pytest.raises(RegoError):
        json_verify_schema(fd({"type": 5}), True)
    assert json_verify_schema("{", False)[0] is False


def test_json_match_schema():
    schema = fd({"type": "object", "required": ("name",)})
    assert json_match_schema(fd({"name": "n"}), schema, True) == (True, None)
    ok, errors = json_match_schema(fd({}), schema, True)
    assert ok is False
    assert len(errors) == 1
    with pytest.raises(RegoError):
        json_match_schema(fd({}), fd({"type": 5}), True)