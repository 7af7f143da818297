"""
Tests for the wrapped-value formatter.
"""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from configseal.cipher import SecretCipher
from configseal.envelope import DEFAULT_PREFIX, DEFAULT_SUFFIX, Envelope
from configseal.errors import FormatError
from configseal.keystores import MemoryKeyStore


def _envelope(prefix=DEFAULT_PREFIX, suffix=DEFAULT_SUFFIX):
    store = MemoryKeyStore({"T": {"k": os.urandom(32)}})
    return Envelope(SecretCipher(store, "T", "k"), prefix=prefix, suffix=suffix)


def test_defaults():
    print("Testing default envelope...", end=" ")
    assert DEFAULT_PREFIX == "HCENC("
    assert DEFAULT_SUFFIX == ")"
    env = _envelope()
    assert env.wrap("abc123") == "HCENC(abc123)"
    print("PASS")


def test_is_wrapped():
    """Only prefix...suffix strings count as wrapped."""
    print("Testing wrapped detection...", end=" ")
    env = _envelope()
    for hex_text in ["", "00", "deadbeef" * 8]:
        assert env.is_wrapped(env.wrap(hex_text))

    for plain in [None, "", "plain", "HCENC(", "HCENC(abc", "abc)", "xHCENC(abc)", "hcenc(abc)", 42]:
        assert not env.is_wrapped(plain), f"{plain!r} should not count as wrapped"
    print("PASS")


def test_unwrap():
    print("Testing unwrap...", end=" ")
    env = _envelope()
    assert env.unwrap("HCENC(abc123)") == "abc123"
    assert env.unwrap("HCENC()") == ""
    assert env.unwrap("plain") == "plain"
    assert env.unwrap("HCENC(abc") == "HCENC(abc"
    assert env.unwrap(None) is None
    print("PASS")


def test_encrypt_and_decrypt():
    """encrypt_and_wrap output decrypts back through decrypt_if_wrapped."""
    print("Testing wrap + decrypt...", end=" ")
    env = _envelope()
    wrapped = env.encrypt_and_wrap("Hello World")
    assert env.is_wrapped(wrapped)
    assert env.decrypt_if_wrapped(wrapped) == "Hello World"
    assert env.encrypt_and_wrap(None) is None
    print("PASS")


def test_pass_through():
    """Anything not wrapped comes back unchanged, None included."""
    print("Testing pass-through...", end=" ")
    env = _envelope()
    for value in [None, "", "jdbc:postgresql://db/app", "HCENC(no close", 8080, True]:
        assert env.decrypt_if_wrapped(value) == value
    print("PASS")


def test_custom_format():
    """Custom prefix/suffix are honoured; the default one is then just text."""
    print("Testing custom envelope...", end=" ")
    env = _envelope(prefix="ENC[", suffix="]")
    wrapped = env.encrypt_and_wrap("s3cret")
    assert wrapped.startswith("ENC[") and wrapped.endswith("]")
    assert env.decrypt_if_wrapped(wrapped) == "s3cret"
    assert env.decrypt_if_wrapped("HCENC(abc)") == "HCENC(abc)"
    print("PASS")


def test_broken_content():
    """Wrapped but undecodable content raises FormatError."""
    print("Testing broken wrapped content...", end=" ")
    env = _envelope()
    for bad in ["HCENC(zz)", "HCENC()"]:
        try:
            env.decrypt_if_wrapped(bad)
            raise AssertionError(f"{bad} should raise")
        except FormatError:
            pass
    print("PASS")


def test_validation():
    print("Testing constructor validation...", end=" ")
    cipher = _envelope().cipher
    for kwargs in [{"cipher": None}, {"cipher": cipher, "prefix": ""}, {"cipher": cipher, "suffix": None}]:
        try:
            Envelope(**kwargs)
            raise AssertionError(f"{kwargs} should raise")
        except ValueError:
            pass
    print("PASS")


def main():
    print("=" * 50)
    print("  Envelope Tests")
    print("=" * 50)
    print()

    tests = [
        test_defaults,
        test_is_wrapped,
        test_unwrap,
        test_encrypt_and_decrypt,
        test_pass_through,
        test_custom_format,
        test_broken_content,
        test_validation,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {e}")
            failed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
