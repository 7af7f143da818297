"""
Padding / Obfuscation Codec
Turn a string into a block-aligned buffer a block cipher can take, and back.

Layout of an encoded buffer:

    [8 random bytes] [ (utf-8 data || 0x80 || 0x00 ...) XOR prefix ]

The random prefix makes identical plaintexts encode differently on every
call, so repeated secrets in a config file never share a ciphertext.
The payload is XOR-mixed with the prefix (repeating every 8 bytes) and
zero-filled until the whole buffer is a multiple of the 16-byte cipher block.
"""

import os

from configseal.errors import FormatError


RANDOM_PREFIX_SIZE = 8
BLOCK_SIZE = 16       # AES block
PADDING_MARKER = 0x80


def _mix(data: bytes, prefix: bytes) -> bytes:
    """XOR data with the prefix repeated over its length. Self-inverse."""
    n = len(prefix)
    return bytes(b ^ prefix[i % n] for i, b in enumerate(data))


def encode(text: str) -> bytes:
    """
    Encode text into a randomized, padded, block-aligned buffer.

    Args:
        text: Any string, including the empty string.

    Returns:
        prefix || mixed payload, a multiple of BLOCK_SIZE bytes long.
    """
    prefix = os.urandom(RANDOM_PREFIX_SIZE)
    data = text.encode("utf-8")

    # Marker byte, then zero fill up to the next block boundary
    payload = data + bytes([PADDING_MARKER])
    remainder = (RANDOM_PREFIX_SIZE + len(payload)) % BLOCK_SIZE
    if remainder:
        payload += bytes(BLOCK_SIZE - remainder)

    return prefix + _mix(payload, prefix)


def decode(block: bytes) -> str:
    """
    Reverse encode(): strip the prefix, unmix, remove padding.

    Args:
        block: The encoded buffer (after decryption).

    Returns:
        The original text.

    Raises:
        FormatError: Too short, no valid padding marker, or not UTF-8.
    """
    if len(block) <= RANDOM_PREFIX_SIZE:
        raise FormatError(
            f"Encoded value too short: {len(block)} bytes, "
            f"need more than {RANDOM_PREFIX_SIZE}"
        )

    prefix = block[:RANDOM_PREFIX_SIZE]
    payload = _mix(block[RANDOM_PREFIX_SIZE:], prefix)

    # Walk back over the zero fill; the first non-zero byte must be the marker
    end = len(payload) - 1
    while end >= 0 and payload[end] == 0x00:
        end -= 1
    if end < 0 or payload[end] != PADDING_MARKER:
        raise FormatError("Invalid padding: no 0x80 marker before zero fill")

    try:
        return payload[:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError("Decoded payload is not valid UTF-8") from e
