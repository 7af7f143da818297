"""
configseal: Encrypted values in plain config files
Keep secrets in configuration as HCENC(...) and read them back decrypted.

configseal provides three layers:
1. Codec:    randomized, padded, block-aligned encoding of a string
2. Envelope: AES encryption through a key store, wrapped as PREFIX...SUFFIX
3. Resolver: config sources that decrypt wrapped values when read

The application reading the config never sees the ciphertext. Values that
are not wrapped pass through untouched.

Usage:
    from configseal import LayeredConfig, DictSource, Settings, enable_config_decryption
    config = LayeredConfig([DictSource("app", {"db": {"password": "HCENC(...)"}})])
    enable_config_decryption(config, Settings.from_env(".env"))
    config.get("db.password")
"""

__version__ = "1.0.0"

from configseal.errors import (
    ConfigSealError,
    FormatError,
    CryptoError,
    KeyNotFoundError,
    SessionUnavailableError,
    NotReadyError,
    StartupError,
)
from configseal.padding import encode, decode
from configseal.keystores import BlockCipher, KeyStore, AesKey, MemoryKeyStore, FileKeyStore
from configseal.cipher import SecretCipher, ensure_key_exists
from configseal.envelope import Envelope, DEFAULT_PREFIX, DEFAULT_SUFFIX
from configseal.resolver import (
    KeyValueSource,
    DictSource,
    ResolvingSource,
    LayeredConfig,
    LazyProvider,
    install_decryption,
)
from configseal.settings import Settings, get_settings
from configseal.bootstrap import build_envelope, enable_config_decryption

__all__ = [
    "ConfigSealError",
    "FormatError",
    "CryptoError",
    "KeyNotFoundError",
    "SessionUnavailableError",
    "NotReadyError",
    "StartupError",
    "encode",
    "decode",
    "BlockCipher",
    "KeyStore",
    "AesKey",
    "MemoryKeyStore",
    "FileKeyStore",
    "SecretCipher",
    "ensure_key_exists",
    "Envelope",
    "DEFAULT_PREFIX",
    "DEFAULT_SUFFIX",
    "KeyValueSource",
    "DictSource",
    "ResolvingSource",
    "LayeredConfig",
    "LazyProvider",
    "install_decryption",
    "Settings",
    "get_settings",
    "build_envelope",
    "enable_config_decryption",
]
