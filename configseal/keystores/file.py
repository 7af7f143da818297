"""
File-backed key store.
The simplest real backend: one directory per token, one hex key file per key.

    <key_dir>/<token_label>/<key_label>.key   (hex text, 32 bytes for AES-256)

Keys are created by the operator, never by this library, e.g.

    python -c "import os; print(os.urandom(32).hex())" > keys/CONFIGSEAL/ConfigSealKey.key

Restrict the directory to the service account (chmod 700 / 600).
"""

import logging
from pathlib import Path

from configseal.errors import CryptoError, KeyNotFoundError, SessionUnavailableError
from configseal.keystores.aes import AesKey
from configseal.keystores.base import BlockCipher, KeySession, KeyStore


logger = logging.getLogger(__name__)

KEY_FILE_SUFFIX = ".key"


class FileKeySession(KeySession):
    """Session over one token directory."""

    def __init__(self, token_dir: Path, token_label: str):
        self.token_dir = token_dir
        self.token_label = token_label

    def _key_file(self, key_label: str) -> Path:
        return self.token_dir / f"{key_label}{KEY_FILE_SUFFIX}"

    def find_key(self, key_label: str) -> BlockCipher:
        key_file = self._key_file(key_label)
        if not key_file.is_file():
            raise KeyNotFoundError(key_label, self.token_label)

        try:
            key = bytes.fromhex(key_file.read_text().strip())
        except ValueError as e:
            raise CryptoError(f"Key file {key_file} does not contain hex key material") from e
        except OSError as e:
            raise CryptoError(f"Could not read key file {key_file}") from e

        return AesKey(key, label=key_label)

    def close(self) -> None:
        # Nothing held open between reads
        pass


class FileKeyStore(KeyStore):
    """
    Key store reading hex key files from a directory tree.

    Args:
        key_dir: Root directory. Each token is a subdirectory.
    """

    def __init__(self, key_dir: str | Path):
        self.key_dir = Path(key_dir)

    def open_session(self, token_label: str) -> FileKeySession:
        token_dir = self.key_dir / token_label
        if not token_dir.is_dir():
            raise SessionUnavailableError(
                f"Token '{token_label}' not found: no directory {token_dir}"
            )
        logger.debug("Opened file key session on token %s", token_label)
        return FileKeySession(token_dir, token_label)

    def describe(self) -> dict:
        tokens = []
        if self.key_dir.is_dir():
            tokens = sorted(p.name for p in self.key_dir.iterdir() if p.is_dir())
        return {
            "kind": "file",
            "key_dir": str(self.key_dir),
            "tokens": tokens,
        }
