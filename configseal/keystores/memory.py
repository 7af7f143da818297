"""
In-memory key store.
Holds raw key bytes per token in a dict. Useful for tests and for hosts
that fetch key material themselves.
"""

import threading

from configseal.errors import KeyNotFoundError, SessionUnavailableError
from configseal.keystores.aes import AesKey
from configseal.keystores.base import BlockCipher, KeySession, KeyStore


class MemoryKeySession(KeySession):
    """Session over one token's dict of keys."""

    def __init__(self, store: "MemoryKeyStore", token_label: str):
        self._store = store
        self.token_label = token_label
        self.closed = False

    def find_key(self, key_label: str) -> BlockCipher:
        keys = self._store.tokens[self.token_label]
        if key_label not in keys:
            raise KeyNotFoundError(key_label, self.token_label)
        return AesKey(keys[key_label], label=key_label)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._store._session_closed()


class MemoryKeyStore(KeyStore):
    """
    Key store backed by a dict.

    Args:
        tokens: {token_label: {key_label: key_bytes}}.
    """

    def __init__(self, tokens: dict[str, dict[str, bytes]] = None):
        self.tokens = tokens if tokens is not None else {}
        self._lock = threading.Lock()
        self._open_sessions = 0
        self.sessions_opened = 0

    def add_key(self, token_label: str, key_label: str, key: bytes):
        """Register key material under token_label/key_label."""
        self.tokens.setdefault(token_label, {})[key_label] = key

    def open_session(self, token_label: str) -> MemoryKeySession:
        if token_label not in self.tokens:
            raise SessionUnavailableError(f"Token '{token_label}' not found")
        with self._lock:
            self._open_sessions += 1
            self.sessions_opened += 1
        return MemoryKeySession(self, token_label)

    def _session_closed(self):
        with self._lock:
            self._open_sessions -= 1

    @property
    def open_sessions(self) -> int:
        """Sessions opened and not yet closed."""
        return self._open_sessions

    def describe(self) -> dict:
        return {
            "kind": "memory",
            "tokens": sorted(self.tokens),
            "open_sessions": self._open_sessions,
        }
