from __future__ import annotations

import base64
import os

import pytest

from pypubnub._crypto.base64url import b64url_decode, b64url_encode
from pypubnub.exceptions import PubnubInvalidArgumentError


def test_encode_decode_hello_world_json() -> None:
    raw = b'{"test":"Hello World"}'
    encoded = b64url_encode(raw)

    assert encoded == "eyJ0ZXN0IjoiSGVsbG8gV29ybGQifQ"
    assert b64url_decode(encoded) == raw


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (b"", ""),
        (b"f", "Zg"),
        (b"fo", "Zm8"),
        (b"foo", "Zm9v"),
        (b"\xfb\xff", "-_8"),
    ],
)
def test_remainders_are_unpadded(raw: bytes, expected: str) -> None:
    assert b64url_encode(raw) == expected
    assert b64url_decode(expected) == raw


def test_output_never_uses_standard_alphabet_or_padding() -> None:
    data = bytes(range(256)) * 3 + os.urandom(64)
    for size in range(0, 70):
        encoded = b64url_encode(data[: size * 7])
        assert "+" not in encoded
        assert "/" not in encoded
        assert "=" not in encoded
        assert b64url_decode(encoded) == data[: size * 7]


def test_matches_stdlib_urlsafe_without_padding() -> None:
    data = os.urandom(100)
    assert b64url_encode(data) == base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def test_decode_rejects_length_one_mod_four() -> None:
    with pytest.raises(PubnubInvalidArgumentError, match="1 mod 4"):
        b64url_decode("abcde")


def test_decode_rejects_foreign_characters() -> None:
    with pytest.raises(PubnubInvalidArgumentError):
        b64url_decode("ab+/")

    with pytest.raises(ValueError):
        b64url_decode("Zg==")
