"""Hashing and HMAC builtins; digests are returned as lowercase hex."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

from .values import ensure_string


def hmac_equal(left: Any, right: Any, strict: bool) -> bool:
    """Compare two MACs in constant time."""
    name = "crypto.hmac.equal"
    first = ensure_string(name, left)
    second = ensure_string(name, right)
    return hmac.compare_digest(first.encode("utf-8"), second.encode("utf-8"))


def _hmac(name: str, x: Any, key: Any, digest: str) -> str:
    message = ensure_string(name, x)
    secret_key = ensure_string(name, key)
    return hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), digest).hexdigest()


def hmac_md5(x: Any, key: Any, strict: bool) -> str:
    return _hmac("crypto.hmac.md5", x, key, "md5")


def hmac_sha1(x: Any, key: Any, strict: bool) -> str:
    return _hmac("crypto.hmac.sha1", x, key, "sha1")


def hmac_sha256(x: Any, key: Any, strict: bool) -> str:
    return _hmac("crypto.hmac.sha256", x, key, "sha256")


def hmac_sha512(x: Any, key: Any, strict: bool) -> str:
    return _hmac("crypto.hmac.sha512", x, key, "sha512")


def _digest(name: str, x: Any, algorithm: str) -> str:
    return hashlib.new(algorithm, ensure_string(name, x).encode("utf-8")).hexdigest()


def md5(x: Any, strict: bool) -> str:
    return _digest("crypto.md5", x, "md5")


def sha1(x: Any, strict: bool) -> str:
    return _digest("crypto.sha1", x, "sha1")


def sha256(x: Any, strict: bool) -> str:
    return _digest("crypto.sha256", x, "sha256")