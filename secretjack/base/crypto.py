"""
Symmetric obfuscation of cached secret values.

Values sit in the cache as AES-256-CBC ciphertext (PKCS7 padded, base64
text) so that dumping the cache structure or logging it by accident does
not reveal plaintext. This is not a confidentiality boundary against a
privileged attacker with access to the process memory.
"""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass, field

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

KEY_SIZE = 32
IV_SIZE = 16


@dataclass(frozen=True)
class CryptoContext:
    """Process-wide key and initialization vector.

    Create one per process and share it; a context must not be replaced
    while values encrypted with it are still cached.
    """

    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.key) != KEY_SIZE:
            raise ValueError(f"Crypto key must be {KEY_SIZE} bytes, got {len(self.key)}")
        if len(self.iv) != IV_SIZE:
            raise ValueError(f"Crypto IV must be {IV_SIZE} bytes, got {len(self.iv)}")

    @classmethod
    def generate(cls) -> CryptoContext:
        """Return a context with a fresh random key and IV."""
        return cls(key=os.urandom(KEY_SIZE), iv=os.urandom(IV_SIZE))

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self.key), modes.CBC(self.iv))


def encrypt(plaintext: str, context: CryptoContext) -> str:
    """Encrypt *plaintext* and return base64 ciphertext."""
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = context._cipher().encryptor()
    raw = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(raw).decode("ascii")


def decrypt(ciphertext: str, context: CryptoContext) -> str:
    """Decrypt base64 *ciphertext* produced by :func:`encrypt`."""
    decryptor = context._cipher().decryptor()
    padded = decryptor.update(base64.b64decode(ciphertext)) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")
