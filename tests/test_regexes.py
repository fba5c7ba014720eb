import re

import pytest

from regolib.regexes import (
    find_all_string_submatch_n,
    find_n,
    is_valid,
    regex_match,
    regex_replace,
    regex_split,
    template_match,
)
from regolib.values import UNDEFINED, RegoError


def test_find_n_limits():
    found = find_n(r"a\d", "a1a2a3", 2, True)
    assert len(found) == 2
    assert all(re.fullmatch(r"a\d", item) and item in "a1a2a3" for item in found)


def test_find_n_negative_finds_all():
    everything = find_n(r"a\d", "a1a2a3", -1, True)
    assert len(everything) == 3
    assert "".join(everything) == "a1a2a3"


def test_find_n_non_integer():
    with pytest.raises(RegoError, match="n must be an integer"):
        find_n("a", "aaa", 1.5, True)


def test_find_n_invalid_regex():
    with pytest.raises(RegoError, match="invalid regex"):
        find_n("[", "aaa", 1, True)


def test_submatch_groups():
    rows = find_all_string_submatch_n(r"([a-z])(\d)", "a1b2c3", -1, True)
    assert len(rows) == 3
    assert all(row[0] == row[1] + row[2] for row in rows)
    assert len(find_all_string_submatch_n(r"([a-z])(\d)", "a1b2c3", 1, True)) == 1


def test_submatch_unmatched_group_is_empty():
    assert find_all_string_submatch_n(r"(x)?y", "y", -1, True) == (("y", ""),)


def test_is_valid():
    assert is_valid("a+", True) is True
    assert is_valid("[", True) is False
    assert is_valid(5, True) is False


def test_regex_match():
    assert regex_match(r"^\d+$", "123", True) is True
    assert regex_match(r"^\d+$", "12a", True) is False
    with pytest.raises(RegoError, match="invalid regex"):
        regex_match("(", "x", True)


def test_replace_plain():
    assert regex_replace("abc", "b", "X", True) == "aXc"


def test_replace_group_references():
    assert regex_replace("ab", "(a)(b)", "$2$1", True) == "ba"
    assert regex_replace("ab", "(?P<first>a)", "${first}$$", True) == "a$b"


def test_replace_invalid_pattern_undefined():
    assert regex_replace("abc", "[", "x", True) is UNDEFINED


def test_split_round_trip():
    parts = regex_split(",", "a,b,c", True)
    assert len(parts) == 3
    assert ",".join(parts) == "a,b,c"


def test_split_no_match():
    assert regex_split("x", "abc", True) == ("abc",)


def test_template_match():
    assert template_match("urn:foo:{.*}", "urn:foo:bar:baz", "{", "}", True) is True
    assert template_match("urn:foo:{.*}", "urn:bar:baz", "{", "}", True) is False
    assert template_match("{[0-9]+}-end", "123-end", "{", "}", True) is True
    assert template_match("{[0-9]+}-end", "123-fin", "{", "}", True) is False


def test_template_match_misordered_delimiters():
    assert template_match("a}b{c", "abc", "{", "}", True) is UNDEFINED


def test_template_match_invalid_regex():
    with pytest.raises(RegoError, match="invalid regex"):
        template_match("{[}", "x", "{", "}", True)