"""
Error taxonomy.

Two recoverable kinds sit side by side:
  FormatError:  the value is not what it claims to be (bad padding,
                bad envelope, input too short). Treat it as invalid.
  CryptoError:  the cipher or key store failed. Retry later or report.

StartupError is the only fatal one: a missing key at startup means
secrets could be read back unencrypted, so the process must not start.
"""


class ConfigSealError(Exception):
    """Base class for every error raised by configseal."""


class FormatError(ConfigSealError, ValueError):
    """Malformed padding, malformed envelope, or input too short to decode."""


class CryptoError(ConfigSealError):
    """The underlying cipher or key store failed."""


class KeyNotFoundError(CryptoError):
    """The requested key label does not exist in the token."""

    def __init__(self, key_label: str, token_label: str):
        self.key_label = key_label
        self.token_label = token_label
        super().__init__(f"Key '{key_label}' not found in token '{token_label}'")


class SessionUnavailableError(CryptoError):
    """A session to the token could not be opened."""


class NotReadyError(ConfigSealError):
    """The decryption envelope cannot be built yet."""


class StartupError(RuntimeError):
    """Fatal: the configured key is unusable, refuse to start."""
