"""XTEA block cipher (Needham & Wheeler, 1997).

64-bit block, 128-bit key, 32 cycles (64 Feistel half-rounds). Key and block
are read as little-endian 32-bit words and the result is written back the
same way, v0 first.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from typing import List, Tuple

from ..errors import KeyLengthViolation
from .words import MASK32, bytes_to_words, words_to_bytes

BLOCK_BYTES = 8
KEY_BYTES = 16
CYCLES = 32
DELTA = 0x9E3779B9


def _split(key: bytes, block: bytes) -> Tuple[List[int], int, int]:
    if len(key) != KEY_BYTES:
        raise KeyLengthViolation(f"XTEA key must be {KEY_BYTES} bytes, got {len(key)}")
    if len(block) != BLOCK_BYTES:
        raise KeyLengthViolation(f"XTEA block must be {BLOCK_BYTES} bytes, got {len(block)}")
    v0, v1 = bytes_to_words(block)
    return bytes_to_words(key), v0, v1


def _mix(v: int) -> int:
    return ((((v << 4) & MASK32) ^ (v >> 5)) + v) & MASK32


def xtea_encrypt_block(key: bytes, block: bytes) -> bytes:
    """Encrypt one 8-byte block under a 16-byte key."""
    k, v0, v1 = _split(key, block)
    total = 0
    for _ in range(CYCLES):
        v0 = (v0 + (_mix(v1) ^ ((total + k[total & 3]) & MASK32))) & MASK32
        total = (total + DELTA) & MASK32
        v1 = (v1 + (_mix(v0) ^ ((total + k[(total >> 11) & 3]) & MASK32))) & MASK32
    return words_to_bytes([v0, v1])


def xtea_decrypt_block(key: bytes, block: bytes) -> bytes:
    """Inverse of :func:`xtea_encrypt_block`."""
    k, v0, v1 = _split(key, block)
    total = (DELTA * CYCLES) & MASK32
    for _ in range(CYCLES):
        v1 = (v1 - (_mix(v0) ^ ((total + k[(total >> 11) & 3]) & MASK32))) & MASK32
        total = (total - DELTA) & MASK32
        v0 = (v0 - (_mix(v1) ^ ((total + k[total & 3]) & MASK32))) & MASK32
    return words_to_bytes([v0, v1])
