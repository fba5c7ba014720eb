"""Table of builtin functions by their Rego names."""

from __future__ import annotations

import functools
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from frozendict import frozendict

from . import (
    aggregates,
    arrays,
    bitwise,
    conversions,
    crypto,
    deprecated,
    encoding,
    globmatch,
    graph,
    jwtdecode,
    numbers,
    objects,
    regexes,
    sets,
    strings,
    timefns,
    versions,
)
from .values import RegoError

_MAX_ARGS = 255
_PACKAGE_VERSION = "0.1.0"
_OPA_VERSION = "0.60.0"

_FEATURES = (
    "base64",
    "base64url",
    "crypto",
    "deprecated",
    "glob",
    "graph",
    "hex",
    "http",
    "jwt",
    "jsonschema",
    "opa-runtime",
    "regex",
    "semver",
    "time",
    "urlquery",
    "yaml",
)

_CACHED = frozenset({"opa.runtime", "rand.intn", "time.now_ns", "uuid.rfc4122"})


@dataclass(frozen=True)
class Builtin:
    """A builtin: its function, number of arguments and whether it is deprecated."""

    name: str
    function: Callable[..., Any]
    arity: int
    variadic: bool = False
    deprecated: bool = False


def _builtin_specs() -> list[tuple[str, Callable[..., Any], int]]:
    return [
        ("abs", numbers.abs_value, 1),
        ("ceil", numbers.ceil, 1),
        ("floor", numbers.floor, 1),
        ("numbers.range", numbers.numbers_range, 2),
        ("numbers.range_step", numbers.range_step, 3),
        ("rand.intn", numbers.intn, 2),
        ("round", numbers.round_value, 1),
        ("count", aggregates.count, 1),
        ("max", aggregates.max_of, 1),
        ("min", aggregates.min_of, 1),
        ("product", aggregates.product, 1),
        ("sort", aggregates.sort, 1),
        ("sum", aggregates.sum_of, 1),
        ("array.concat", arrays.concat, 2),
        ("array.reverse", arrays.reverse, 1),
        ("array.slice", arrays.slice_array, 3),
        ("intersection", sets.intersection_of, 1),
        ("union", sets.union_of, 1),
        ("json.filter", objects.json_filter, 2),
        ("json.remove", objects.json_remove, 2),
        ("object.filter", objects.object_filter, 2),
        ("object.get", objects.object_get, 3),
        ("object.keys", objects.object_keys, 1),
        ("object.remove", objects.object_remove, 2),
        ("object.subset", objects.object_subset, 2),
        ("object.union", objects.object_union, 2),
        ("object.union_n", objects.object_union_n, 1),
        ("json.match_schema", objects.json_match_schema, 2),
        ("json.verify_schema", objects.json_verify_schema, 1),
        ("concat", strings.concat, 2),
        ("contains", strings.contains, 2),
        ("endswith", strings.endswith, 2),
        ("format_int", strings.format_int, 2),
        ("indexof", strings.indexof, 2),
        ("indexof_n", strings.indexof_n, 2),
        ("lower", strings.lower, 1),
        ("replace", strings.replace, 3),
        ("split", strings.split, 2),
        ("sprintf", strings.sprintf, 2),
        ("startswith", strings.startswith, 2),
        ("strings.any_prefix_match", strings.any_prefix_match, 2),
        ("strings.any_suffix_match", strings.any_suffix_match, 2),
        ("strings.replace_n", strings.replace_n, 2),
        ("strings.reverse", strings.reverse, 1),
        ("substring", strings.substring, 3),
        ("trim", strings.trim, 2),
        ("trim_left", strings.trim_left, 2),
        ("trim_prefix", strings.trim_prefix, 2),
        ("trim_right", strings.trim_right, 2),
        ("trim_space", strings.trim_space, 1),
        ("trim_suffix", strings.trim_suffix, 2),
        ("upper", strings.upper, 1),
        ("regex.find_all_string_submatch_n", regexes.find_all_string_submatch_n, 3),
        ("regex.find_n", regexes.find_n, 3),
        ("regex.is_valid", regexes.is_valid, 1),
        ("regex.match", regexes.regex_match, 2),
        ("regex.replace", regexes.regex_replace, 3),
        ("regex.split", regexes.regex_split, 2),
        ("regex.template_match", regexes.template_match, 4),
        ("glob.match", globmatch.glob_match, 3),
        ("glob.quote_meta", globmatch.quote_meta, 1),
        ("graph.reachable", graph.reachable, 2),
        ("graph.reachable_paths", graph.reachable_paths, 2),
        ("walk", graph.walk, 1),
        ("bits.and", bitwise.bits_and, 2),
        ("bits.lsh", bitwise.bits_lsh, 2),
        ("bits.negate", bitwise.bits_negate, 1),
        ("bits.or", bitwise.bits_or, 2),
        ("bits.rsh", bitwise.bits_rsh, 2),
        ("bits.xor", bitwise.bits_xor, 2),
        ("to_number", conversions.to_number, 1),
        ("base64.decode", encoding.base64_decode, 1),
        ("base64.encode", encoding.base64_encode, 1),
        ("base64.is_valid", encoding.base64_is_valid, 1),
        ("base64url.decode", encoding.base64url_decode, 1),
        ("base64url.encode", encoding.base64url_encode, 1),
        ("base64url.encode_no_pad", encoding.base64url_encode_no_pad, 1),
        ("hex.decode", encoding.hex_decode, 1),
        ("hex.encode", encoding.hex_encode, 1),
        ("urlquery.decode", encoding.urlquery_decode, 1),
        ("urlquery.decode_object", encoding.urlquery_decode_object, 1),
        ("urlquery.encode", encoding.urlquery_encode, 1),
        ("urlquery.encode_object", encoding.urlquery_encode_object, 1),
        ("json.is_valid", encoding.json_is_valid, 1),
        ("json.marshal", encoding.json_marshal, 1),
        ("json.unmarshal", encoding.json_unmarshal, 1),
        ("yaml.is_valid", encoding.yaml_is_valid, 1),
        ("yaml.marshal", encoding.yaml_marshal, 1),
        ("yaml.unmarshal", encoding.yaml_unmarshal, 1),
        ("io.jwt.decode", jwtdecode.jwt_decode, 1),
        ("io.jwt.decode_verify", jwtdecode.jwt_decode_verify, 2),
        ("time.add_date", timefns.add_date, 4),
        ("time.clock", timefns.clock, 1),
        ("time.date", timefns.date, 1),
        ("time.now_ns", timefns.now_ns, 0),
        ("time.parse_rfc3339_ns", timefns.parse_rfc3339_ns, 1),
        ("time.weekday", timefns.weekday, 1),
        ("crypto.hmac.equal", crypto.hmac_equal, 2),
        ("crypto.hmac.md5", crypto.hmac_md5, 2),
        ("crypto.hmac.sha1", crypto.hmac_sha1, 2),
        ("crypto.hmac.sha256", crypto.hmac_sha256, 2),
        ("crypto.hmac.sha512", crypto.hmac_sha512, 2),
        ("crypto.md5", crypto.md5, 1),
        ("crypto.sha1", crypto.sha1, 1),
        ("crypto.sha256", crypto.sha256, 1),
        ("http.send", conversions.http_send, 1),
        ("semver.compare", versions.semver_compare, 2),
        ("semver.is_valid", versions.semver_is_valid, 1),
        ("opa.runtime", opa_runtime, 0),
    ]


def _deprecated_specs() -> list[tuple[str, Callable[..., Any], int]]:
    return [
        ("all", deprecated.all_true, 1),
        ("any", deprecated.any_true, 1),
        ("cast_array", deprecated.cast_array, 1),
        ("cast_boolean", deprecated.cast_boolean, 1),
        ("cast_null", deprecated.cast_null, 1),
        ("cast_object", deprecated.cast_object, 1),
        ("cast_set", deprecated.cast_set, 1),
        ("cast_string", deprecated.cast_string, 1),
        ("set_diff", deprecated.set_diff, 2),
        ("re_match", regexes.regex_match, 2),
    ]


@functools.cache
def _builtins() -> dict[str, Builtin]:
    table = {name: Builtin(name, fn, arity) for name, fn, arity in _builtin_specs()}
    table["print"] = Builtin("print", conversions.print_values, _MAX_ARGS, variadic=True)
    return table


@functools.cache
def _deprecated() -> dict[str, Builtin]:
    return {
        name: Builtin(name, fn, arity, deprecated=True)
        for name, fn, arity in _deprecated_specs()
    }


def lookup(name: str) -> Builtin | None:
    """The builtin of that name, current ones before deprecated ones."""
    return _builtins().get(name) or _deprecated().get(name)


def call(name: str, args: Sequence[Any], strict: bool) -> Any:
    """Call a builtin by name, checking the number of arguments."""
    builtin = lookup(name)
    if builtin is None:
        raise RegoError(f"unknown builtin `{name}`")
    args = list(args)
    if builtin.variadic:
        if len(args) > builtin.arity:
            raise RegoError(f"{name} supports up to 100 arguments")
    elif len(args) != builtin.arity:
        plural = "" if builtin.arity == 1 else "s"
        raise RegoError(f"`{name}` expects {builtin.arity} argument{plural}")
    return builtin.function(*args, strict=strict)


def must_cache(path: str) -> str | None:
    """The path itself when results of that builtin must be cached per query."""
    return path if path in _CACHED else None


@functools.cache
def _commit() -> str:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return ""
    return result.stdout if result.returncode == 0 else ""


def opa_runtime(strict: bool) -> frozendict:
    """Description of this runtime: versions, features and builtin names."""
    return frozendict(
        {
            "commit": _commit(),
            "regorus-version": _PACKAGE_VERSION,
            "version": _OPA_VERSION,
            "features": _FEATURES,
            "builtins": tuple(sorted(_builtins())),
            "deprecated": tuple(sorted(_deprecated())),
        }
    )