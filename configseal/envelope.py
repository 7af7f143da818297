"""
Wrapped-Value Formatter
Adds and strips the PREFIX...SUFFIX envelope around ciphertext hex so it can
sit inside ordinary config text:

    db.password = HCENC(3f9a...c1)
"""

from configseal.cipher import SecretCipher


DEFAULT_PREFIX = "HCENC("
DEFAULT_SUFFIX = ")"


class Envelope:
    """
    Wraps ciphertext in a textual envelope and decrypts wrapped values.

    Args:
        cipher: The SecretCipher used for encrypt/decrypt.
        prefix: Envelope opening. Fixed for a whole configuration set.
        suffix: Envelope closing.
    """

    def __init__(self, cipher: SecretCipher, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX):
        if cipher is None:
            raise ValueError("cipher cannot be None")
        if not prefix:
            raise ValueError("prefix cannot be None or empty")
        if suffix is None:
            raise ValueError("suffix cannot be None")

        self.cipher = cipher
        self.prefix = prefix
        self.suffix = suffix

    def wrap(self, cipher_hex: str) -> str:
        return self.prefix + cipher_hex + self.suffix

    def is_wrapped(self, value) -> bool:
        return (
            isinstance(value, str)
            and value.startswith(self.prefix)
            and value.endswith(self.suffix)
            and len(value) >= len(self.prefix) + len(self.suffix)
        )

    def unwrap(self, value):
        """Return the text between prefix and suffix, or value unchanged."""
        if not self.is_wrapped(value):
            return value
        return value[len(self.prefix):len(value) - len(self.suffix)]

    def encrypt_and_wrap(self, text: str | None) -> str | None:
        """Encrypt text and wrap it. None stays None."""
        if text is None:
            return None
        return self.wrap(self.cipher.encrypt(text))

    def decrypt_if_wrapped(self, value):
        """
        Decrypt value if it is wrapped; otherwise return it unchanged.

        This is the only call the resolving view makes per string value.

        Raises:
            FormatError: Wrapped, but the content does not decode.
            CryptoError: Wrapped, but the cipher failed.
        """
        if not self.is_wrapped(value):
            return value
        return self.cipher.decrypt(self.unwrap(value))
