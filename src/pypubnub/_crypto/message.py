"""Message-level encryption: JSON in, ``[ciphertext]`` out."""

from __future__ import annotations

import json
import logging
from typing import Any

from pypubnub._crypto.aes import aes_decrypt_b64, aes_encrypt_b64, validate_key
from pypubnub.exceptions import PubnubCryptoError

_logger = logging.getLogger(__name__)


def dumps_message(message: Any) -> str:
    """Serialize a message to the compact JSON text used on the wire."""
    return json.dumps(message, separators=(",", ":"), ensure_ascii=False)


def _extract_ciphertext(value: Any) -> str:
    """Pull the Base64 ciphertext out of a ``[ciphertext]`` wrapper."""
    if isinstance(value, str):
        text = value.strip()
        if not text.startswith("["):
            return text
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PubnubCryptoError(f"Ciphertext wrapper is not JSON: {text[:64]}") from exc
    if isinstance(value, list) and len(value) == 1 and isinstance(value[0], str):
        return value[0]
    raise PubnubCryptoError(f"Value is not a ciphertext envelope: {type(value).__name__}")


class MessageCrypto:
    """Encrypt and decrypt messages under an optional AES-128 cipher key.

    Without a key every operation is the identity, so callers never need
    to branch on whether encryption is configured.

    Parameters
    ----------
    cipher_key : bytes or None
        16-byte AES key, or ``None`` to disable encryption.
    """

    def __init__(self, cipher_key: bytes | None = None) -> None:
        self._key = validate_key(cipher_key) if cipher_key is not None else None

    @property
    def enabled(self) -> bool:
        return self._key is not None

    def encrypt(self, message: Any) -> Any:
        """Encrypt *message* into a single-element ``[ciphertext]`` list.

        Returns *message* unchanged when no cipher key is configured.
        """
        if self._key is None:
            return message
        return [aes_encrypt_b64(dumps_message(message), self._key)]

    def decrypt(self, value: Any) -> Any:
        """Decrypt a ``[ciphertext]`` envelope back to the original message.

        Parameters
        ----------
        value : Any
            A one-element list holding the ciphertext, its JSON text, or
            the bare ciphertext string. A ``dict`` is already plaintext
            and is returned as-is.

        Raises
        ------
        PubnubCryptoError
            If *value* is not a ciphertext envelope or does not decrypt
            to JSON under the configured key.
        """
        if self._key is None or isinstance(value, dict):
            return value
        plaintext = aes_decrypt_b64(_extract_ciphertext(value), self._key)
        try:
            return json.loads(plaintext)
        except json.JSONDecodeError as exc:
            raise PubnubCryptoError(f"Decrypted message is not JSON: {plaintext[:64]}") from exc

    def decrypt_or_passthrough(self, value: Any) -> Any:
        """Decrypt *value*, or return it unchanged if it is not ciphertext.

        History and subscribe responses mix encrypted and literal entries
        depending on how each was published; both read paths use this.
        """
        try:
            return self.decrypt(value)
        except PubnubCryptoError:
            _logger.debug("Entry did not decrypt; delivering as plaintext", exc_info=True)
            return value
