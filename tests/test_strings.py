import math

import pytest
from frozendict import frozendict

from regolib import strings
from regolib.values import UNDEFINED, RegoError


def test_concat_split_round_trip():
    items = ("alpha", "beta", "gamma")
    joined = strings.concat(",", items, True)
    assert strings.split(joined, ",", True) == items


def test_concat_set_uses_sorted_order():
    result = strings.concat("", frozenset({"b", "a"}), True)
    assert result == "".join(sorted({"a", "b"}))


def test_concat_rejects_non_string_items():
    with pytest.raises(RegoError):
        strings.concat(",", ("a", 1), True)


def test_contains_startswith_endswith():
    prefix, middle, suffix = "pre", "mid", "post"
    s = prefix + middle + suffix
    assert strings.contains(s, middle, True) is True
    assert strings.startswith(s, prefix, True) is True
    assert strings.endswith(s, suffix, True) is True
    assert strings.startswith(s, suffix, True) is False
    assert strings.contains(s, "absent", True) is False


def test_string_functions_require_strings():
    with pytest.raises(RegoError):
        strings.lower(1, True)
    with pytest.raises(RegoError):
        strings.contains("a", None, True)


@pytest.mark.parametrize("base", [2, 8, 10, 16])
@pytest.mark.parametrize("number", [0, 7, 255, 123456])
def test_format_int_round_trip(number, base):
    assert int(strings.format_int(number, base, True), base) == number


@pytest.mark.parametrize("base", [2, 8, 10, 16])
def test_format_int_negative(base):
    result = strings.format_int(-42, base, True)
    assert result.startswith("-")
    assert int(result, base) == -42


def test_format_int_floors_fraction():
    assert int(strings.format_int(7.9, 10, True), 10) == math.floor(7.9)


def test_format_int_bad_base():
    with pytest.raises(RegoError, match="expects base to be one of 2, 8, 10, 16"):
        strings.format_int(10, 3, True)
    assert strings.format_int(10, 3, False) is UNDEFINED


def test_indexof():
    s, sub = "abcabc", "ca"
    idx = strings.indexof(s, sub, True)
    assert s[idx:].startswith(sub)
    assert sub not in s[: idx + len(sub) - 1]
    assert strings.indexof(s, "zz", True) == -1
    assert strings.indexof("", "", True) == -1


def test_indexof_counts_characters():
    s = "héllo"
    idx = strings.indexof(s, "llo", True)
    assert s[idx:] == "llo"


def test_indexof_n_positions():
    s, sub = "ababab", "ab"
    positions = strings.indexof_n(s, sub, True)
    assert positions[0] == strings.indexof(s, sub, True)
    assert list(positions) == sorted(set(positions))
    assert all(s[p:].startswith(sub) for p in positions)
    assert len(positions) == s.count(sub)


def test_lower_upper():
    s = "MiXeD Case"
    assert strings.upper(strings.lower(s, True), True) == strings.upper(s, True)
    assert strings.lower(s, True).islower()
    assert strings.upper(s, True).isupper()


def test_replace():
    s = "a-b-c"
    replaced = strings.replace(s, "-", "+", True)
    assert "-" not in replaced
    assert strings.split(replaced, "+", True) == strings.split(s, "-", True)


def test_split_empty_delimiter():
    result = strings.split("ab", "", True)
    assert result[0] == "" and result[-1] == ""
    assert strings.concat("", result, True) == "ab"


def test_sprintf_literal_and_percent():
    assert strings.sprintf("100%%", (), True) == "100%"


def test_sprintf_strings_and_values():
    assert strings.sprintf("%s-%s", ("a", "b"), True) == "a-b"
    assert strings.sprintf("%v", (None,), True) == "null"
    assert strings.sprintf("%s", (7,), True) == "7"


def test_sprintf_integers():
    assert strings.sprintf("%d", (42,), True) == "42"
    assert strings.sprintf("%d", (-5,), True) == "-5"
    assert strings.sprintf("%05d", (42,), True) == "00042"
    assert strings.sprintf("%x", (255,), True) == "ff"
    assert strings.sprintf("%X", (255,), True) == strings.sprintf("%x", (255,), True).upper()


def test_sprintf_char():
    assert ord(strings.sprintf("%c", (65,), True)) == 65


def test_sprintf_floats():
    assert strings.sprintf("%.2f", (3.14159,), True) == "3.14"
    assert float(strings.sprintf("%f", (1.5,), True)) == 1.5
    assert float(strings.sprintf("%e", (1.5,), True)) == 1.5
    assert float(strings.sprintf("%g", (1250.0,), True)) == 1250.0


def test_sprintf_argument_errors():
    with pytest.raises(RegoError, match="no argument specified for format verb"):
        strings.sprintf("%d %d", (1,), True)
    with pytest.raises(RegoError, match="extra arguments"):
        strings.sprintf("%d", (1, 2), True)
    with pytest.raises(RegoError, match="missing format verb"):
        strings.sprintf("abc%", (), True)


def test_sprintf_verb_errors():
    with pytest.raises(RegoError, match="number specified for format verb"):
        strings.sprintf("%d", (1.5,), True)
    with pytest.raises(RegoError, match="not supported"):
        strings.sprintf("%q", ("x",), True)
    with pytest.raises(RegoError, match="invalid value"):
        strings.sprintf("%c", (-1,), True)


def test_any_prefix_match():
    assert strings.any_prefix_match("foobar", ("baz", "foo"), True) is True
    assert strings.any_prefix_match(("x", "y"), "foo", True) is False
    assert strings.any_prefix_match(1, "foo", False) is UNDEFINED
    with pytest.raises(RegoError):
        strings.any_prefix_match(1, "foo", True)


def test_any_suffix_match():
    assert strings.any_suffix_match(frozenset({"foobar"}), "bar", True) is True
    assert strings.any_suffix_match("foobar", ("foo",), True) is False
    assert strings.any_suffix_match("foo", ("a", 2), False) is UNDEFINED
    with pytest.raises(RegoError):
        strings.any_suffix_match("foo", ("a", 2), True)


def test_replace_n():
    result = strings.replace_n(frozendict({"cat": "dog"}), "cat and cat", True)
    assert "cat" not in result
    assert result.count("dog") == 2


def test_replace_n_requires_string_pairs():
    with pytest.raises(RegoError, match="expects string keys and values"):
        strings.replace_n(frozendict({"a": 1}), "abc", True)


def test_reverse_round_trip():
    s = "héllo wörld"
    reversed_s = strings.reverse(s, True)
    assert strings.reverse(reversed_s, True) == s
    assert reversed_s[0] == s[-1]


def test_substring():
    s = "abcdefg"
    assert strings.substring(s, 0, -1, True) == s
    assert strings.substring(s, 2, 3, True) == s[2:5]
    assert strings.substring(s, 100, 3, True) == ""
    assert strings.substring(s, 1.5, 3, True) == ""


def test_substring_negative_offset():
    with pytest.raises(RegoError, match="negative offset"):
        strings.substring("abc", -1, 2, True)
    assert strings.substring("abc", -1, 2, False) is UNDEFINED


def test_trim_family():
    pad, core = "xy", "core"
    s = pad + core + pad
    assert strings.trim(s, pad, True) == core
    assert strings.trim_left(s, pad, True) == core + pad
    assert strings.trim_right(s, pad, True) == pad + core
    assert strings.trim(s, "", True) == s


def test_trim_prefix_suffix():
    assert strings.trim_prefix("pre" + "body", "pre", True) == "body"
    assert strings.trim_suffix("body" + "post", "post", True) == "body"
    assert strings.trim_prefix("body", "pre", True) == "body"
    assert strings.trim_suffix("body", "post", True) == "body"


def test_trim_space():
    core = "core text"
    assert strings.trim_space("\t " + core + " \n", True) == core