"""
configseal command line.

    configseal enc "myPassword"
    configseal vrf "myPassword:HCENC(3f9a...)"
    configseal help | version

Settings come from CONFIGSEAL_* environment variables and a .env file
(CONFIGSEAL_ENV_FILE, default ./.env). If neither is present, a template
.env is written and the tool exits so the operator can fill it in.

Exit status: 0 on success, help and version; 1 on any usage error,
failed verification, or unusable key.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Callable, TextIO

from pydantic import ValidationError

from configseal import __version__
from configseal.bootstrap import build_envelope
from configseal.envelope import DEFAULT_PREFIX, DEFAULT_SUFFIX, Envelope
from configseal.errors import ConfigSealError, StartupError
from configseal.settings import DEFAULT_ENV_FILE, ENV_PREFIX, Settings, write_env_template


logger = logging.getLogger(__name__)

PROG = "configseal"

EXIT_OK = 0
EXIT_FAILURE = 1


class _UsageError(Exception):
    pass


class CommandLine:
    """
    Dispatches one command. All output goes to out/err; nothing calls exit.

    Args:
        envelope_factory: Builds the Envelope. Only called by enc and vrf.
        prefix: Envelope opening shown in help and used to split vrf input.
        suffix: Envelope closing.
        out: Standard output stream.
        err: Standard error stream.
    """

    def __init__(
        self,
        envelope_factory: Callable[[], Envelope],
        prefix: str = DEFAULT_PREFIX,
        suffix: str = DEFAULT_SUFFIX,
        out: TextIO = None,
        err: TextIO = None,
    ):
        self.envelope_factory = envelope_factory
        self.prefix = prefix
        self.suffix = suffix
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def _print(self, *args):
        print(*args, file=self.out)

    def _error(self, *args):
        print(*args, file=self.err)

    def run(self, argv: list[str]) -> int:
        if not argv:
            self.print_usage()
            return EXIT_FAILURE

        command = argv[0].lower()

        if command == "enc":
            return self.handle_encrypt(argv)
        if command == "vrf":
            return self.handle_verify(argv)
        if command in ("help", "-h", "--help"):
            self.print_usage()
            return EXIT_OK
        if command in ("version", "-v", "--version"):
            self._print(f"{PROG} CLI version {__version__}")
            return EXIT_OK

        self._error(f"Unknown command: {command}")
        self.print_usage()
        return EXIT_FAILURE

    def _single_argument(self, argv: list[str]) -> str:
        """The one argument after the command. Raises _UsageError otherwise."""
        if len(argv) > 2:
            raise _UsageError("Too many arguments. Use quotes for text with spaces.")
        if len(argv) < 2 or not argv[1]:
            raise _UsageError("Input text is required")
        return argv[1]

    def _envelope(self) -> Envelope | None:
        try:
            return self.envelope_factory()
        except (StartupError, ConfigSealError) as e:
            self._error(f"Error: {e}")
            return None

    def handle_encrypt(self, argv: list[str]) -> int:
        """enc <text>: print the wrapped ciphertext."""
        try:
            text = self._single_argument(argv)
        except _UsageError as e:
            self._error(f"Error: {e}")
            self.print_usage()
            return EXIT_FAILURE

        envelope = self._envelope()
        if envelope is None:
            return EXIT_FAILURE

        try:
            wrapped = envelope.encrypt_and_wrap(text)
        except ConfigSealError as e:
            self._error(f"Error: Encryption failed: {e}")
            return EXIT_FAILURE

        self._print(wrapped)
        return EXIT_OK

    def handle_verify(self, argv: list[str]) -> int:
        """vrf <plaintext:WRAPPED>: print Valid if WRAPPED decrypts to plaintext."""
        try:
            value = self._single_argument(argv)
        except _UsageError as e:
            self._error(f"Error: {e}")
            self.print_usage()
            return EXIT_FAILURE

        # The wrapped part is always last; the plaintext may contain colons
        start = value.rfind(self.prefix)
        if start == -1:
            self._print(f"Invalid: {self.prefix}{self.suffix} format not found")
            return EXIT_FAILURE

        colon = value.rfind(":", 0, start)
        if colon == -1:
            self._print(
                f"Invalid: Input must be in 'plaintext:{self.prefix}...{self.suffix}' format"
            )
            return EXIT_FAILURE

        plaintext = value[:colon]
        wrapped = value[colon + 1:]
        if not wrapped.startswith(self.prefix) or not wrapped.endswith(self.suffix):
            self._print(f"Invalid: Encrypted part is not in {self.prefix}{self.suffix} format")
            return EXIT_FAILURE

        envelope = self._envelope()
        if envelope is None:
            return EXIT_FAILURE

        try:
            decrypted = envelope.decrypt_if_wrapped(wrapped)
        except ConfigSealError as e:
            logger.debug("Verification decrypt failed", exc_info=True)
            self._print(f"Invalid: {e}")
            return EXIT_FAILURE

        if decrypted == plaintext:
            self._print("Valid")
            return EXIT_OK

        self._print("Invalid")
        return EXIT_FAILURE

    def print_usage(self):
        p, s = self.prefix, self.suffix
        self._print(f"{PROG} - encrypt secrets for config files / verify encrypted values")
        self._print()
        self._print("Usage:")
        self._print(f"  {PROG} <command> <text>")
        self._print()
        self._print("Commands:")
        self._print(f"  enc <text>                Encrypt text (outputs in {p}...{s} format)")
        self._print("  vrf <plaintext:encrypted> Verify plaintext:encrypted pair")
        self._print("  help                      Show this help message")
        self._print("  version                   Show version information")
        self._print()
        self._print("Configuration:")
        self._print(f"  {ENV_PREFIX}* environment variables, or a .env file in the current directory.")
        self._print()
        self._print("Examples:")
        self._print("  # Encrypt text")
        self._print(f'  {PROG} enc "Hello World"')
        self._print()
        self._print("  # Verify plaintext and encrypted value match")
        self._print(f'  {PROG} vrf "Hello World:{p}...{s}"')


def run(
    argv: list[str],
    envelope_factory: Callable[[], Envelope],
    prefix: str = DEFAULT_PREFIX,
    suffix: str = DEFAULT_SUFFIX,
    out: TextIO = None,
    err: TextIO = None,
) -> int:
    """Run one command and return its exit status."""
    return CommandLine(envelope_factory, prefix, suffix, out, err).run(argv)


def _configure_logging():
    level = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main(argv: list[str] = None) -> int:
    _configure_logging()
    if argv is None:
        argv = sys.argv[1:]

    env_file = Path(os.getenv(ENV_PREFIX + "ENV_FILE", DEFAULT_ENV_FILE))
    needs_key = bool(argv) and argv[0].lower() in ("enc", "vrf")

    if needs_key and not env_file.exists() and not os.getenv(ENV_PREFIX + "TOKEN_LABEL"):
        try:
            created = write_env_template(env_file)
        except OSError as e:
            print(f"Error: Could not create {env_file}: {e}", file=sys.stderr)
            return EXIT_FAILURE
        if created:
            print(f"\nConfiguration template created: {env_file}")
            print("Please edit it to point at your key directory, token and key,")
            print("then run the command again.\n")
            return EXIT_OK

    try:
        settings = Settings.from_env(env_file)
    except ValidationError as e:
        if needs_key:
            reasons = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            print(f"Error: invalid configuration: {reasons}", file=sys.stderr)
            return EXIT_FAILURE
        # help and version do not need settings
        logger.debug("Ignoring invalid configuration for %s", argv[:1], exc_info=True)
        return run(argv, lambda: None)

    return run(
        argv,
        lambda: build_envelope(settings),
        prefix=settings.encryption.prefix,
        suffix=settings.encryption.suffix,
    )


if __name__ == "__main__":
    sys.exit(main())
