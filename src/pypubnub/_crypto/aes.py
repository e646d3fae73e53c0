"""AES-128-CBC encryption of message payloads.

Ciphertext is framed with unpadded URL-safe Base64 and always uses an
all-zero IV, which is what the backend's other clients expect.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from pypubnub._crypto.base64url import b64url_decode, b64url_encode
from pypubnub.exceptions import PubnubCryptoError, PubnubInvalidArgumentError

_ZERO_IV = b"\x00" * 16
_KEY_BYTES = 16


def validate_key(key: bytes) -> bytes:
    """Return *key* as bytes, raising if it is not a 16-byte AES key."""
    if not isinstance(key, (bytes, bytearray)):
        raise PubnubCryptoError(f"AES key must be bytes (got {type(key).__name__})")
    if len(key) != _KEY_BYTES:
        raise PubnubCryptoError(f"AES key must be {_KEY_BYTES} bytes (got {len(key)})")
    return bytes(key)


def aes_encrypt_b64(plaintext: str, key: bytes) -> str:
    """AES-128-CBC encrypt with zero IV, returning URL-safe Base64.

    Parameters
    ----------
    plaintext : str
        UTF-8 string to encrypt.
    key : bytes
        16-byte key.

    Returns
    -------
    str
        Unpadded URL-safe Base64 ciphertext.

    Raises
    ------
    PubnubCryptoError
        If the key is invalid or encryption fails.
    """
    key = validate_key(key)
    try:
        padder = padding.PKCS7(128).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        cipher = Cipher(algorithms.AES(key), modes.CBC(_ZERO_IV))
        encryptor = cipher.encryptor()
        ct = encryptor.update(padded) + encryptor.finalize()
    except Exception as exc:
        raise PubnubCryptoError(f"AES encryption failed: {exc}") from exc
    return b64url_encode(ct)


def aes_decrypt_b64(ciphertext: str, key: bytes) -> str:
    """AES-128-CBC decrypt URL-safe Base64 with zero IV.

    Parameters
    ----------
    ciphertext : str
        Unpadded URL-safe Base64 ciphertext.
    key : bytes
        16-byte key.

    Returns
    -------
    str
        Decrypted UTF-8 plaintext.

    Raises
    ------
    PubnubCryptoError
        If the ciphertext is malformed, the key is wrong or the padding
        does not verify.
    """
    key = validate_key(key)
    try:
        ct = b64url_decode(ciphertext)
    except PubnubInvalidArgumentError as exc:
        raise PubnubCryptoError(f"AES ciphertext is not Base64: {exc}") from exc
    if not ct or len(ct) % 16 != 0:
        raise PubnubCryptoError(f"AES ciphertext length {len(ct)} is not a positive multiple of 16")
    try:
        cipher = Cipher(algorithms.AES(key), modes.CBC(_ZERO_IV))
        decryptor = cipher.decryptor()
        padded = decryptor.update(ct) + decryptor.finalize()
        unpadder = padding.PKCS7(128).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return plaintext.decode("utf-8")
    except Exception as exc:
        raise PubnubCryptoError(f"AES decryption failed: {exc}") from exc
