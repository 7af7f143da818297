"""
Base classes for key store backends.
A key store holds named keys inside named tokens. Callers open a session
on a token, look a key up, use it, and close the session.
"""

from abc import ABC, abstractmethod


class BlockCipher(ABC):
    """A keyed block cipher over block-aligned input."""

    block_size = 16

    @abstractmethod
    def encrypt_block(self, data: bytes) -> bytes:
        """Encrypt block-aligned data. Output has the same length."""

    @abstractmethod
    def decrypt_block(self, data: bytes) -> bytes:
        """Decrypt block-aligned data. Output has the same length."""


class KeySession(ABC):
    """
    A scoped handle to one token. Use as a context manager so it is
    closed on every exit path.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @abstractmethod
    def find_key(self, key_label: str) -> BlockCipher:
        """
        Look up a key in this session's token.

        Raises:
            KeyNotFoundError: No key with that label.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the session."""


class KeyStore(ABC):
    """Abstract base class for key store backends."""

    @abstractmethod
    def open_session(self, token_label: str) -> KeySession:
        """
        Open a session on a token.

        Raises:
            SessionUnavailableError: The token cannot be opened.
        """

    @abstractmethod
    def describe(self) -> dict:
        """Get metadata about this key store (kind, location, tokens)."""
