################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Client-side encryption of secret values.

Values are encrypted with AES-256-GCM before they leave the process. The result is
a self-contained envelope::

    base64( IV (12 bytes) || ciphertext || auth tag (16 bytes) )

Decryption only needs the envelope and the key.
"""
import base64
import binascii
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .. import exceptions

IV_SIZE = 12  # 96 bits, standard for AES-GCM
TAG_SIZE = 16  # 128 bits
KEY_SIZE = 32  # 256 bits for AES-256

_HEX_KEY_RE = re.compile(rf"[0-9a-f]{{{KEY_SIZE * 2}}}")


def _parse_hex_key(key: str) -> bytes:
    if key.startswith("0x"):
        key = key[2:]
    normalised = key.lower()

    if len(normalised) != KEY_SIZE * 2:
        raise exceptions.EncryptionError(
            f"Encryption key must be {KEY_SIZE * 2} hex characters",
            code="INVALID_KEY",
        )
    if not _HEX_KEY_RE.fullmatch(normalised):
        raise exceptions.EncryptionError(
            "Encryption key must be a valid hex string", code="INVALID_KEY"
        )

    return bytes.fromhex(normalised)


class EncryptionService:
    """Symmetric authenticated encryption keyed by a 256-bit hex key.

    The key is validated when the service is created, so a bad key fails fast
    rather than on the first ``encrypt()``/``decrypt()`` call.

    Args:
        key: 64 hex characters, optionally prefixed with ``0x``.

    Raises:
        envase.sdk.exceptions.EncryptionError: if the key has the wrong length or
            contains non-hex characters.
    """

    def __init__(self, key: str):
        self._aesgcm = AESGCM(_parse_hex_key(key))

    def __repr__(self):
        # Never show key material.
        return f"{type(self).__name__}(key=***)"

    @staticmethod
    def generate_key() -> str:
        """Generate a random 256-bit key as 64 lowercase hex characters."""
        return AESGCM.generate_key(bit_length=KEY_SIZE * 8).hex()

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` with a fresh random IV.

        Raises:
            envase.sdk.exceptions.EncryptionError: if the value can't be encrypted.
        """
        iv = os.urandom(IV_SIZE)
        try:
            ciphertext = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        except (UnicodeEncodeError, OverflowError) as e:
            raise exceptions.EncryptionError("Failed to encrypt data") from e

        return base64.b64encode(iv + ciphertext).decode("ascii")

    def decrypt(self, envelope: str) -> str:
        """Decrypt an envelope produced by ``encrypt()``.

        Raises:
            envase.sdk.exceptions.EncryptionError: if the envelope is malformed, was
                tampered with, or was encrypted with a different key.
        """
        try:
            data = base64.b64decode(envelope, validate=True)
        except (binascii.Error, ValueError) as e:
            raise exceptions.EncryptionError(
                "Failed to decrypt data", code="MALFORMED_ENVELOPE"
            ) from e

        if len(data) < IV_SIZE + TAG_SIZE:
            raise exceptions.EncryptionError(
                "Failed to decrypt data", code="MALFORMED_ENVELOPE"
            )

        iv, ciphertext = data[:IV_SIZE], data[IV_SIZE:]
        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext, None)
            return plaintext.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError) as e:
            raise exceptions.EncryptionError("Failed to decrypt data") from e
