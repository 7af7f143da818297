"""
Bootstrap
Build the Envelope from Settings and hook decryption into a host's config.

Two phases, as a host assembling itself needs them:
  1. enable_config_decryption() checks token and key, then wraps every
     config source, handing each view a LazyProvider instead of a ready
     Envelope. A missing token or key stops startup here.
  2. The first string read asks the provider, which runs build_envelope().
     From then on the Envelope is reused.
"""

import logging

from configseal.cipher import SecretCipher, ensure_key_exists
from configseal.envelope import Envelope
from configseal.errors import NotReadyError, StartupError
from configseal.keystores import FileKeyStore, KeyStore
from configseal.resolver import LayeredConfig, LazyProvider, install_decryption
from configseal.settings import Settings


logger = logging.getLogger(__name__)


def create_key_store(settings: Settings) -> KeyStore:
    """The key store described by settings."""
    return FileKeyStore(settings.key_store.key_dir)


def build_envelope(settings: Settings, key_store: KeyStore = None) -> Envelope:
    """
    Check the key, then build cipher and envelope.

    Args:
        settings: Token, key and envelope format.
        key_store: Backend to use. Defaults to a FileKeyStore from settings.

    Raises:
        NotReadyError: No token label configured.
        StartupError: The key is missing or cannot be checked. Fatal.
    """
    enc = settings.encryption
    if not enc.token_label:
        raise NotReadyError("No token label configured (CONFIGSEAL_TOKEN_LABEL)")

    if key_store is None:
        key_store = create_key_store(settings)

    ensure_key_exists(key_store, enc.token_label, enc.key_label)
    cipher = SecretCipher(key_store, enc.token_label, enc.key_label)
    return Envelope(cipher, prefix=enc.prefix, suffix=enc.suffix)


def enable_config_decryption(
    config: LayeredConfig,
    settings: Settings,
    key_store: KeyStore = None,
) -> LazyProvider | None:
    """
    Make every source in config decrypt wrapped values on read.

    Does nothing when encryption is disabled in settings.

    Returns:
        The provider shared by all views, or None if disabled.

    Raises:
        StartupError: Encryption is enabled but no token label is set, or
            the configured key is missing. Nothing is installed.
    """
    enc = settings.encryption
    if not enc.enabled:
        logger.info("Config decryption disabled")
        return None

    if not enc.token_label:
        raise StartupError(
            "Config decryption is enabled but no token label is configured "
            "(CONFIGSEAL_TOKEN_LABEL)"
        )

    if key_store is None:
        key_store = create_key_store(settings)
    ensure_key_exists(key_store, enc.token_label, enc.key_label)

    provider = LazyProvider(lambda: build_envelope(settings, key_store))
    install_decryption(config, provider)
    return provider
