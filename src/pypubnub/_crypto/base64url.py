"""URL-safe, unpadded Base64 used to frame ciphertext.

The alphabet is ``A-Z a-z 0-9 - _`` and no trailing ``=`` is ever
emitted or expected, so encoded ciphertext can sit in a URL path
segment without escaping.
"""

from __future__ import annotations

import base64
import re

from pypubnub.exceptions import PubnubInvalidArgumentError

_ALPHABET_RE = re.compile(r"[A-Za-z0-9_-]*")


def b64url_encode(data: bytes) -> str:
    """Encode *data* as unpadded URL-safe Base64.

    A 1-byte remainder yields 2 characters and a 2-byte remainder
    yields 3 characters.
    """
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(text: str) -> bytes:
    """Decode unpadded URL-safe Base64 back to bytes.

    Parameters
    ----------
    text : str
        Encoded text. A 2-character remainder yields 1 byte, a
        3-character remainder yields 2 bytes.

    Returns
    -------
    bytes
        Decoded data.

    Raises
    ------
    PubnubInvalidArgumentError
        If the length is 1 modulo 4 or a character is outside the alphabet.
    """
    if len(text) % 4 == 1:
        raise PubnubInvalidArgumentError(f"Base64 length {len(text)} is invalid (1 mod 4)")
    if not _ALPHABET_RE.fullmatch(text):
        raise PubnubInvalidArgumentError("Base64 text contains characters outside A-Z a-z 0-9 - _")
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded)
