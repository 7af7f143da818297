"""
Tests for the padding / obfuscation codec.
"""

import os
import sys
from pathlib import Path

# Add parent to path for local development
sys.path.insert(0, str(Path(__file__).parent.parent))

from configseal.errors import FormatError
from configseal.padding import (
    BLOCK_SIZE,
    PADDING_MARKER,
    RANDOM_PREFIX_SIZE,
    _mix,
    decode,
    encode,
)


SAMPLES = [
    "",
    "x",
    "Hello World",
    "pässwörd ✓ 秘密 \U0001F511",
    "nul\x00inside\x00",
    "trailing nul\x00",
    "\u0080 looks like a marker",
    "colon:separated:value",
    "a" * 7,
    "a" * 8,
    "a" * 1000,
]


def _assert_raises_format_error(block: bytes):
    try:
        decode(block)
    except FormatError:
        return
    raise AssertionError(f"decode({block!r}) should have raised FormatError")


def test_round_trip():
    """decode(encode(s)) == s for assorted strings."""
    print("Testing codec round-trip...", end=" ")
    for s in SAMPLES:
        assert decode(encode(s)) == s, f"Round-trip failed for {s!r}"
    print("PASS")


def test_block_alignment():
    """Encoded output is always a whole number of cipher blocks."""
    print("Testing block alignment...", end=" ")
    for s in SAMPLES:
        assert len(encode(s)) % BLOCK_SIZE == 0

    # prefix(8) + marker(1) fits one block
    assert len(encode("")) == BLOCK_SIZE
    # prefix(8) + 7 + marker(1) == 16 exactly
    assert len(encode("a" * 7)) == BLOCK_SIZE
    # one more byte spills into a second block
    assert len(encode("a" * 8)) == 2 * BLOCK_SIZE
    print("PASS")


def test_layout():
    """Payload is data || 0x80 || zeros, XOR-mixed with the repeating prefix."""
    print("Testing layout...", end=" ")
    block = encode("abc")
    prefix = block[:RANDOM_PREFIX_SIZE]
    payload = _mix(block[RANDOM_PREFIX_SIZE:], prefix)
    assert payload[:3] == b"abc"
    assert payload[3] == PADDING_MARKER
    assert payload[4:] == bytes(len(payload) - 4)
    print("PASS")


def test_non_deterministic():
    """The same text encodes differently every time."""
    print("Testing non-determinism...", end=" ")
    first = encode("same secret")
    second = encode("same secret")
    assert first != second
    assert first[:RANDOM_PREFIX_SIZE] != second[:RANDOM_PREFIX_SIZE]
    assert decode(first) == decode(second) == "same secret"
    print("PASS")


def test_payload_is_mixed():
    """Plaintext bytes do not show up verbatim after the prefix."""
    print("Testing payload mixing...", end=" ")
    text = "A" * 32
    block = encode(text)
    assert text.encode() not in block
    print("PASS")


def test_too_short():
    """Buffers with no room after the prefix are rejected."""
    print("Testing short input rejected...", end=" ")
    for n in range(RANDOM_PREFIX_SIZE + 1):
        _assert_raises_format_error(os.urandom(n))
    print("PASS")


def test_missing_marker():
    """A block-aligned buffer with no 0x80 marker is rejected."""
    print("Testing missing marker rejected...", end=" ")
    prefix = os.urandom(RANDOM_PREFIX_SIZE)

    # Unmixes to plain letters: last non-zero byte is not the marker
    no_marker = prefix + _mix(b"A" * 24, prefix)
    _assert_raises_format_error(no_marker)

    # Unmixes to all zeros
    all_zero = prefix + _mix(bytes(24), prefix)
    _assert_raises_format_error(all_zero)

    # Marker followed by a non-zero byte
    dirty_fill = prefix + _mix(b"abc\x80\x00\x00\x01" + bytes(17), prefix)
    _assert_raises_format_error(dirty_fill)
    print("PASS")


def test_failure_is_value_error():
    """FormatError can be caught as ValueError too."""
    print("Testing FormatError is a ValueError...", end=" ")
    try:
        decode(b"short")
        raise AssertionError("should have raised")
    except ValueError as e:
        assert isinstance(e, FormatError)
    print("PASS")


def test_invalid_utf8():
    """Valid padding around bytes that are not UTF-8 is rejected."""
    print("Testing invalid UTF-8 rejected...", end=" ")
    prefix = os.urandom(RANDOM_PREFIX_SIZE)
    payload = b"\xff\xfe\x80" + bytes(5)
    _assert_raises_format_error(prefix + _mix(payload, prefix))
    print("PASS")


def test_marker_found_from_tail():
    """A 0x80 inside the data does not end the payload early."""
    print("Testing tail-first marker scan...", end=" ")
    prefix = os.urandom(RANDOM_PREFIX_SIZE)
    # "\u0080" is c2 80 in UTF-8
    payload = "\u0080\u0080".encode() + b"\x80" + bytes(3)
    assert decode(prefix + _mix(payload, prefix)) == "\u0080\u0080"
    print("PASS")


def main():
    print("=" * 50)
    print("  Codec Tests")
    print("=" * 50)
    print()

    tests = [
        test_round_trip,
        test_block_alignment,
        test_layout,
        test_non_deterministic,
        test_payload_is_mixed,
        test_too_short,
        test_missing_marker,
        test_failure_is_value_error,
        test_invalid_utf8,
        test_marker_found_from_tail,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
