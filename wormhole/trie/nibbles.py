"""
Nibble paths and hex-prefix (compact) encoding of trie paths.
"""
from __future__ import annotations

from typing import Sequence

Nibbles = tuple[int, ...]


def bytes_to_nibbles(data: bytes) -> Nibbles:
    """Split bytes into high/low nibbles, most significant first."""
    out: list[int] = []
    for byte in data:
        out.append(byte >> 4)
        out.append(byte & 0x0F)
    return tuple(out)


def encode_hex_prefix(nibbles: Sequence[int], is_leaf: bool) -> bytes:
    """
    Compact-encode a nibble path with its node-type flag.

    High nibble of the first byte: 0 extension/even, 1 extension/odd,
    2 leaf/even, 3 leaf/odd. Odd paths carry their first nibble in the
    low half of the first byte.
    """
    flag = 2 if is_leaf else 0
    if len(nibbles) % 2 == 1:
        out = bytearray([((flag + 1) << 4) | nibbles[0]])
        rest = nibbles[1:]
    else:
        out = bytearray([flag << 4])
        rest = nibbles
    for i in range(0, len(rest), 2):
        out.append((rest[i] << 4) | rest[i + 1])
    return bytes(out)


def decode_hex_prefix(data: bytes) -> tuple[Nibbles, bool]:
    """
    Decode a compact-encoded path.

    Returns:
        (nibbles, is_leaf)

    Raises:
        ValueError: Empty input, unknown flag, or non-zero padding nibble
    """
    if not data:
        raise ValueError("empty hex-prefix path")

    flag = data[0] >> 4
    if flag > 3:
        raise ValueError(f"invalid hex-prefix flag: {flag}")

    is_leaf = flag >= 2
    nibbles: list[int] = []
    if flag & 1:
        nibbles.append(data[0] & 0x0F)
    elif data[0] & 0x0F:
        raise ValueError("non-zero padding in even hex-prefix path")

    nibbles.extend(bytes_to_nibbles(data[1:]))
    return tuple(nibbles), is_leaf


def common_prefix_length(a: Sequence[int], b: Sequence[int]) -> int:
    length = 0
    for x, y in zip(a, b):
        if x != y:
            break
        length += 1
    return length
