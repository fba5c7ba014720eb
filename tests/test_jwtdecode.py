import base64
import json

import pytest

from regolib.jwtdecode import jwt_decode, jwt_decode_verify
from regolib.values import UNDEFINED, RegoError

HEADER = {"alg": "HS256", "typ": "JWT"}
PAYLOAD = {"sub": "1234", "admin": True}
SIGNATURE = b"\x01\x02\xab"


def _segment(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def _token(header, payload, signature=SIGNATURE, raw_payload=None):
    body = raw_payload if raw_payload is not None else json.dumps(payload).encode()
    return ".".join(
        [_segment(json.dumps(header).encode()), _segment(body), _segment(signature)]
    )


def test_decode_returns_header_payload_signature():
    header, payload, signature = jwt_decode(_token(HEADER, PAYLOAD), True)
    assert header == HEADER
    assert payload == PAYLOAD
    assert signature == SIGNATURE.hex()


def test_nested_jwt_is_unwrapped():
    inner = _token(HEADER, PAYLOAD)
    outer = _token({"cty": "JWT"}, None, raw_payload=json.dumps(inner).encode())
    assert jwt_decode(outer, True) == jwt_decode(inner, True)


def test_nested_jwt_requires_quoted_payload():
    outer = _token({"cty": "JWT"}, PAYLOAD)
    with pytest.raises(RegoError, match="invalid nested JWT"):
        jwt_decode(outer, True)


def test_jwe_is_rejected():
    with pytest.raises(RegoError, match="JWE"):
        jwt_decode(_token({"enc": "A128GCM"}, PAYLOAD), True)


@pytest.mark.parametrize("token", ["abc", "a.b", "a.b.c.d", "a==.b.c"])
def test_invalid_token(token):
    with pytest.raises(RegoError, match="invalid jwt token"):
        jwt_decode(token, True)
    assert jwt_decode(token, False) is UNDEFINED


def test_padded_segments_are_rejected():
    good = _token(HEADER, PAYLOAD)
    head, rest = good.split(".", 1)
    padded = head + "=" * ((-len(head)) % 4)
    if padded == head:
        padded = head + "===="
    assert jwt_decode(padded + "." + rest, False) is UNDEFINED


def test_non_string_token_raises():
    with pytest.raises(RegoError):
        jwt_decode(42, True)


def test_decode_verify_is_undefined():
    assert jwt_decode_verify(_token(HEADER, PAYLOAD), {"secret": "secret"}, True) is UNDEFINED