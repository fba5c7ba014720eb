"""Encoding builtins: base64, base64url, hex, URL queries, JSON and YAML."""

from __future__ import annotations

import base64
import binascii
import json
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

import yaml
from frozendict import frozendict

from .values import (
    RegoError,
    ensure_object,
    ensure_string,
    ensure_string_collection,
    from_json,
    from_python,
    sort_key,
    to_json,
)

_STD_ALPHABET = re.compile(r"[A-Za-z0-9+/]*")
_URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")
_FORM_SAFE = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789*-._")


def _decode_b64(text: str, *, urlsafe: bool, padded: bool) -> bytes:
    """Strictly decode base64 text; raises ValueError when it is not canonical."""
    body = text.rstrip("=") if padded else text
    pad = len(text) - len(body)
    if padded and (len(text) % 4 or pad != (-len(body)) % 4):
        raise ValueError("invalid padding")
    if len(body) % 4 == 1:
        raise ValueError("invalid length")
    alphabet = _URL_ALPHABET if urlsafe else _STD_ALPHABET
    if not alphabet.fullmatch(body):
        raise ValueError("invalid symbol")
    filled = body + "=" * ((-len(body)) % 4)
    if urlsafe:
        data = base64.urlsafe_b64decode(filled)
        again = base64.urlsafe_b64encode(data)
    else:
        data = base64.b64decode(filled)
        again = base64.b64encode(data)
    if again.decode("ascii").rstrip("=") != body:
        raise ValueError("non-canonical trailing bits")
    return data


def _lossy(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def base64_decode(s: Any, strict: bool) -> str:
    name = "base64.decode"
    text = ensure_string(name, s)
    try:
        return _lossy(_decode_b64(text, urlsafe=False, padded=True))
    except ValueError as exc:
        raise RegoError(f"`{name}` invalid base64 string: {exc}") from exc


def base64_encode(s: Any, strict: bool) -> str:
    text = ensure_string("base64.encode", s)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_is_valid(s: Any, strict: bool) -> bool:
    text = ensure_string("base64.is_valid", s)
    try:
        _decode_b64(text, urlsafe=False, padded=True)
    except ValueError:
        return False
    return True


def base64url_decode(s: Any, strict: bool) -> str:
    """Decode URL-safe base64, with or without padding."""
    text = ensure_string("base64url.decode", s)
    try:
        data = _decode_b64(text, urlsafe=True, padded=True)
    except ValueError:
        try:
            data = _decode_b64(text, urlsafe=True, padded=False)
        except ValueError as exc:
            raise RegoError("not a valid url") from exc
    return _lossy(data)


def base64url_encode(s: Any, strict: bool) -> str:
    text = ensure_string("base64url.encode", s)
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def base64url_encode_no_pad(s: Any, strict: bool) -> str:
    text = ensure_string("base64url.encode_no_pad", s)
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def hex_decode(s: Any, strict: bool) -> str:
    """Decode hex digits of either case."""
    name = "hex.decode"
    text = ensure_string(name, s)
    try:
        return _lossy(binascii.unhexlify(text))
    except (binascii.Error, ValueError) as exc:
        raise RegoError(f"`{name}` invalid hex string: {exc}") from exc


def hex_encode(s: Any, strict: bool) -> str:
    return ensure_string("hex.encode", s).encode("utf-8").hex()


def _form_encode(text: str) -> str:
    out = []
    for byte in text.encode("utf-8"):
        if byte in _FORM_SAFE:
            out.append(chr(byte))
        elif byte == 0x20:
            out.append("+")
        else:
            out.append(f"%{byte:02X}")
    return "".join(out)


def _query_pairs(text: str) -> list[tuple[str, str]]:
    query = text.split("#", 1)[0]
    return parse_qsl(query, keep_blank_values=True, errors="replace")


def urlquery_decode(s: Any, strict: bool) -> str:
    """Decode a query string, joining each key with its non-empty value."""
    text = ensure_string("urlquery.decode", s)
    parts = []
    for key, value in _query_pairs(text):
        parts.append(key)
        if value != "":
            parts.append("=" + value)
    return "".join(parts)


def urlquery_decode_object(s: Any, strict: bool) -> frozendict:
    """Decode a query string into an object of value arrays."""
    text = ensure_string("urlquery.decode_object", s)
    grouped: dict[str, list[str]] = {}
    for key, value in _query_pairs(text):
        grouped.setdefault(key, []).append(value)
    return frozendict({key: tuple(values) for key, values in grouped.items()})


def urlquery_encode(s: Any, strict: bool) -> str:
    return _form_encode(ensure_string("urlquery.encode", s))


def urlquery_encode_object(obj: Any, strict: bool) -> str:
    """Encode an object of strings or string collections as a query string."""
    name = "urlquery.encode_object"
    mapping = ensure_object(name, obj)
    pairs = []
    for key in sorted(mapping, key=sort_key):
        key_text = ensure_string(name, key)
        value = mapping[key]
        values = [value] if isinstance(value, str) else ensure_string_collection(name, value)
        pairs.extend(f"{_form_encode(key_text)}={_form_encode(v)}" for v in values)
    return "&".join(pairs)


def json_is_valid(s: Any, strict: bool) -> bool:
    text = ensure_string("json.is_valid", s)
    try:
        from_json(text)
    except RegoError:
        return False
    return True


def json_marshal(value: Any, strict: bool) -> str:
    try:
        return to_json(value)
    except RegoError as exc:
        raise RegoError("could not serialize to json") from exc


def json_unmarshal(s: Any, strict: bool) -> Any:
    text = ensure_string("json.unmarshal", s)
    try:
        return from_json(text)
    except RegoError as exc:
        raise RegoError("could not deserialize json.") from exc


def _load_yaml(text: str) -> Any:
    try:
        return from_python(yaml.safe_load(text))
    except (yaml.YAMLError, TypeError, RegoError) as exc:
        raise RegoError("could not deserialize yaml.") from exc


def yaml_is_valid(s: Any, strict: bool) -> bool:
    text = ensure_string("yaml.is_valid", s)
    try:
        _load_yaml(text)
    except RegoError:
        return False
    return True


def yaml_marshal(value: Any, strict: bool) -> str:
    try:
        data = json.loads(to_json(value))
    except RegoError as exc:
        raise RegoError("could not serialize to yaml") from exc
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def yaml_unmarshal(s: Any, strict: bool) -> Any:
    return _load_yaml(ensure_string("yaml.unmarshal", s))


__all__ = [
    "Mapping",
]