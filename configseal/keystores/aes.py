"""
AES block cipher over raw key material.

CBC with a fixed all-zero IV and no cipher-level padding. Input is already
block-aligned and randomized by the padding codec, so the IV carries no
secret and the same bytes always map to the same ciphertext.
"""

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from configseal.errors import CryptoError
from configseal.keystores.base import BlockCipher


KEY_SIZES = (16, 24, 32)  # AES-128 / 192 / 256
_ZERO_IV = bytes(16)


class AesKey(BlockCipher):
    """
    AES-CBC key.

    Args:
        key: 16, 24 or 32 bytes of key material.
        label: Name of the key, for error messages only.
    """

    def __init__(self, key: bytes, label: str = "aes"):
        if len(key) not in KEY_SIZES:
            raise CryptoError(
                f"AES key '{label}' must be 16, 24 or 32 bytes, got {len(key)}"
            )
        self.label = label
        self._cipher = Cipher(algorithms.AES(key), modes.CBC(_ZERO_IV))

    def _check_aligned(self, data: bytes) -> None:
        if not data or len(data) % self.block_size:
            raise CryptoError(
                f"Data length {len(data)} is not a positive multiple "
                f"of the {self.block_size}-byte block size"
            )

    def encrypt_block(self, data: bytes) -> bytes:
        self._check_aligned(data)
        encryptor = self._cipher.encryptor()
        return encryptor.update(data) + encryptor.finalize()

    def decrypt_block(self, data: bytes) -> bytes:
        self._check_aligned(data)
        decryptor = self._cipher.decryptor()
        return decryptor.update(data) + decryptor.finalize()
