"""32-bit word helpers shared by the hash and block cipher engines."""

from __future__ import annotations

import struct
from typing import List, Sequence

MASK32 = 0xFFFFFFFF


def rotate_left(x: int, r: int, w: int = 32) -> int:
    """Rotate-left x by r bits in a w-bit word."""
    mask = (1 << w) - 1
    r &= (w - 1)
    x &= mask
    return ((x << r) & mask) | (x >> (w - r))


def bytes_to_words(data: bytes, word_size: int = 4, byteorder: str = 'little') -> List[int]:
    """Convert bytes to list of integers (words)."""
    fmt = '<' if byteorder == 'little' else '>'
    fmt += {2: 'H', 4: 'I', 8: 'Q'}[word_size] * (len(data) // word_size)
    return list(struct.unpack(fmt, data))


def words_to_bytes(words: Sequence[int], word_size: int = 4, byteorder: str = 'little') -> bytes:
    """Convert list of integers (words) to bytes."""
    fmt = '<' if byteorder == 'little' else '>'
    fmt += {2: 'H', 4: 'I', 8: 'Q'}[word_size] * len(words)
    return struct.pack(fmt, *words)
