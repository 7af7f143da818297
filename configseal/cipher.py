"""
Cipher Adapter
Connects the padding codec to a key store.

    encrypt: text -> encode() -> key.encrypt_block() -> lowercase hex
    decrypt: hex  -> key.decrypt_block() -> decode() -> text

Every call opens its own session on the token and closes it on the way out,
whatever happens in between. No session is held across calls.
"""

import logging

from configseal.errors import (
    ConfigSealError,
    CryptoError,
    FormatError,
    KeyNotFoundError,
    StartupError,
)
from configseal.keystores.base import KeyStore
from configseal.padding import RANDOM_PREFIX_SIZE, decode, encode


logger = logging.getLogger(__name__)


class SecretCipher:
    """
    Encrypts and decrypts strings with one key in one token.

    Args:
        key_store: Backend that opens sessions and finds keys.
        token_label: Token holding the key.
        key_label: Key to use.
    """

    def __init__(self, key_store: KeyStore, token_label: str, key_label: str):
        if key_store is None:
            raise ValueError("key_store cannot be None")
        if not token_label:
            raise ValueError("token_label cannot be None or empty")
        if not key_label:
            raise ValueError("key_label cannot be None or empty")

        self.key_store = key_store
        self.token_label = token_label
        self.key_label = key_label

    def encrypt(self, text: str) -> str:
        """
        Encrypt text to a lowercase hex string.

        Raises:
            CryptoError: text is None, or the key store / cipher failed.
        """
        if text is None:
            raise CryptoError("Cannot encrypt None")

        try:
            with self.key_store.open_session(self.token_label) as session:
                key = session.find_key(self.key_label)
                ciphertext = key.encrypt_block(encode(text))
        except ConfigSealError:
            logger.warning("Encryption failed with key %s/%s", self.token_label, self.key_label)
            raise
        except Exception as e:
            logger.warning("Encryption failed with key %s/%s", self.token_label, self.key_label)
            raise CryptoError("Unexpected error during encryption") from e

        logger.debug("Encrypted %d bytes with key %s", len(ciphertext), self.key_label)
        return ciphertext.hex()

    def decrypt(self, hex_text: str) -> str:
        """
        Decrypt a hex string produced by encrypt().

        Raises:
            CryptoError: hex_text is None, or the key store / cipher failed.
            FormatError: hex_text is not hex, or the padding is invalid.
        """
        if hex_text is None:
            raise CryptoError("Cannot decrypt None")

        try:
            ciphertext = bytes.fromhex(hex_text)
        except ValueError as e:
            raise FormatError("Encrypted value is not a hex string") from e
        if len(ciphertext) <= RANDOM_PREFIX_SIZE:
            raise FormatError(f"Encrypted value too short: {len(ciphertext)} bytes")

        try:
            with self.key_store.open_session(self.token_label) as session:
                key = session.find_key(self.key_label)
                block = key.decrypt_block(ciphertext)
                text = decode(block)
        except FormatError:
            logger.debug("Decrypted value has invalid padding")
            raise
        except ConfigSealError:
            logger.warning("Decryption failed with key %s/%s", self.token_label, self.key_label)
            raise
        except Exception as e:
            logger.warning("Decryption failed with key %s/%s", self.token_label, self.key_label)
            raise CryptoError("Unexpected error during decryption") from e

        logger.debug("Decrypted %d bytes with key %s", len(ciphertext), self.key_label)
        return text


def ensure_key_exists(key_store: KeyStore, token_label: str, key_label: str):
    """
    Check at startup that the key is there. Refuse to start if it isn't.

    Raises:
        StartupError: Key missing, or the key store could not be checked.
    """
    try:
        with key_store.open_session(token_label) as session:
            session.find_key(key_label)
    except KeyNotFoundError as e:
        raise StartupError(
            f"AES key not found: {key_label} in token: {token_label}. "
            f"Please create the key manually."
        ) from e
    except Exception as e:
        raise StartupError(f"Failed to check key existence: {key_label} ({e})") from e

    logger.info("Key %s found in token %s", key_label, token_label)
