import pytest

from regolib import registry
from regolib.values import RegoError


def test_call_count():
    assert registry.call("count", [(1, 2, 3)], True) == 3


def test_call_matches_lookup_function():
    builtin = registry.lookup("upper")
    assert builtin.arity == 1
    assert registry.call("upper", ["abc"], True) == builtin.function("abc", strict=True)


def test_wrong_argument_count_raises():
    with pytest.raises(RegoError):
        registry.call("count", [(1,), (2,)], True)


def test_unknown_builtin():
    assert registry.lookup("no.such.function") is None
    with pytest.raises(RegoError):
        registry.call("no.such.function", [], True)


def test_deprecated_lookup():
    builtin = registry.lookup("re_match")
    assert builtin.deprecated is True
    assert registry.call("re_match", ["^a", "abc"], True) is True


def test_current_builtin_not_deprecated():
    assert registry.lookup("sum").deprecated is False


def test_print_is_variadic():
    assert registry.call("print", ["a", 1, None], True) is True


def test_print_argument_limit():
    with pytest.raises(RegoError):
        registry.call("print", [1] * 256, True)


def test_must_cache():
    assert registry.must_cache("time.now_ns") == "time.now_ns"
    assert registry.must_cache("rand.intn") == "rand.intn"
    assert registry.must_cache("count") is None


def test_opa_runtime_contents():
    runtime = registry.opa_runtime(True)
    assert runtime["version"] == "0.60.0"
    assert "regex" in runtime["features"]
    assert list(runtime["builtins"]) == sorted(runtime["builtins"])
    assert "count" in runtime["builtins"]
    assert "all" in runtime["deprecated"]
    assert "all" not in runtime["builtins"]


def test_opa_runtime_via_call():
    result = registry.call("opa.runtime", [], True)
    assert result["builtins"] == registry.opa_runtime(True)["builtins"]


def test_zero_arity_call():
    assert registry.call("time.now_ns", [], True) > 0
    with pytest.raises(RegoError):
        registry.call("time.now_ns", [1], True)