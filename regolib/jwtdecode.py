"""JSON Web Token decoding builtins."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .encoding import _decode_b64
from .values import UNDEFINED, RegoError, ensure_string, from_json


def _decode(token: str, strict: bool) -> Any:
    parts = token.split(".")
    try:
        if len(parts) != 3:
            raise ValueError("expected three segments")
        header_bytes, payload_bytes, signature_bytes = (
            _decode_b64(part, urlsafe=True, padded=False) for part in parts
        )
    except ValueError as exc:
        if strict:
            raise RegoError("invalid jwt token") from exc
        return UNDEFINED

    header = from_json(header_bytes.decode("utf-8", errors="replace"))
    payload = payload_bytes.decode("utf-8", errors="replace")
    signature = signature_bytes.hex()

    if isinstance(header, Mapping) and "enc" in header:
        raise RegoError("JWT is a JWE object, which is not supported")

    if isinstance(header, Mapping) and header.get("cty") == "JWT":
        if len(payload) <= 2 or not payload.startswith('"') or not payload.endswith('"'):
            raise RegoError("invalid nested JWT")
        return _decode(payload[1:-1], strict)

    return (header, from_json(payload), signature)


def jwt_decode(token: Any, strict: bool) -> Any:
    """Decode a token into (header, payload, hex signature) without verifying it."""
    return _decode(ensure_string("io.jwt.decode", token), strict)


def jwt_decode_verify(token: Any, constraints: Any, strict: bool) -> Any:
    """Verification is not supported; the result is always undefined."""
    return UNDEFINED