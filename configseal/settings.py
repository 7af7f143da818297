"""
Settings
Encryption and key store configuration, read from CONFIGSEAL_* environment
variables (optionally seeded from a .env file).
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Callable, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from configseal.envelope import DEFAULT_PREFIX, DEFAULT_SUFFIX


ENV_PREFIX = "CONFIGSEAL_"
DEFAULT_KEY_LABEL = "ConfigSealKey"
DEFAULT_ENV_FILE = ".env"

ENV_TEMPLATE = """\
# configseal settings

# Turn on transparent decryption of wrapped config values
CONFIGSEAL_ENABLED=true

# Token (a subdirectory of CONFIGSEAL_KEY_DIR) and key holding the AES key
CONFIGSEAL_TOKEN_LABEL=CONFIGSEAL
CONFIGSEAL_KEY_LABEL=ConfigSealKey

# Directory of hex key files: <key_dir>/<token_label>/<key_label>.key
CONFIGSEAL_KEY_DIR=./keys

# Envelope around encrypted values
CONFIGSEAL_PREFIX=HCENC(
CONFIGSEAL_SUFFIX=)

# Logging level for the CLI
LOG_LEVEL=WARNING
"""


class EncryptionSettings(BaseModel):
    """Which key to use and how encrypted values are wrapped."""

    enabled: bool = Field(default=False, description="Decrypt wrapped values in config sources")
    token_label: Optional[str] = Field(default=None, description="Token holding the encryption key")
    key_label: str = Field(default=DEFAULT_KEY_LABEL, description="Label of the AES key in the token")
    prefix: str = Field(default=DEFAULT_PREFIX, min_length=1, description="Opening of a wrapped value")
    suffix: str = Field(default=DEFAULT_SUFFIX, description="Closing of a wrapped value")


class KeyStoreSettings(BaseModel):
    """Where the file key store finds key material."""

    key_dir: str = Field(default="./keys", description="Root directory of token subdirectories")


class Settings(BaseModel):
    """configseal configuration bundle."""

    encryption: EncryptionSettings = Field(default_factory=EncryptionSettings)
    key_store: KeyStoreSettings = Field(default_factory=KeyStoreSettings)

    @classmethod
    def _from_lookup(cls, get: Callable[[str, Optional[str]], Optional[str]]) -> "Settings":
        encryption = EncryptionSettings(
            enabled=get(ENV_PREFIX + "ENABLED", "false"),
            token_label=get(ENV_PREFIX + "TOKEN_LABEL", None) or None,
            key_label=get(ENV_PREFIX + "KEY_LABEL", DEFAULT_KEY_LABEL),
            prefix=get(ENV_PREFIX + "PREFIX", DEFAULT_PREFIX),
            suffix=get(ENV_PREFIX + "SUFFIX", DEFAULT_SUFFIX),
        )
        key_store = KeyStoreSettings(key_dir=get(ENV_PREFIX + "KEY_DIR", "./keys"))
        return cls(encryption=encryption, key_store=key_store)

    # PUBLIC_INTERFACE
    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "Settings":
        """Create settings from a dict of CONFIGSEAL_* variables."""
        return cls._from_lookup(values.get)

    # PUBLIC_INTERFACE
    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Settings":
        """Create settings from environment variables, after loading env_file if it exists."""
        if env_file is not None and Path(env_file).is_file():
            load_dotenv(env_file, override=False)
        return cls._from_lookup(os.getenv)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings loaded from the environment and ./.env."""
    return Settings.from_env(DEFAULT_ENV_FILE)


def write_env_template(path: str | Path) -> bool:
    """
    Write ENV_TEMPLATE to path unless a file is already there.

    Returns:
        True if the template was written, False if the file existed.
    """
    path = Path(path)
    if path.exists():
        return False
    path.write_text(ENV_TEMPLATE, encoding="utf-8")
    return True
