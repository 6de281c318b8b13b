"""CubeHash 16/32-512.

Sponge-style hash over a 1024-bit state of 32 little-endian 32-bit words,
designed by Daniel J. Bernstein (second-round SHA-3 candidate):

- 16 rounds per 32-byte message block
- 16 initialization rounds, 32 finalization rounds
- 512-bit (64-byte) digest

The state is a plain list owned by a single ``cubehash()`` call and passed
explicitly to every step, so concurrent calls never share anything.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from typing import List

from .words import MASK32, bytes_to_words, rotate_left, words_to_bytes

STATE_WORDS = 32
BLOCK_BYTES = 32
ROUNDS = 16
INIT_ROUNDS = 16
FINAL_ROUNDS = 32
DIGEST_BYTES = 64


# ============================================================================
# ROUND FUNCTION
# ============================================================================

def _add_rotate(state: List[int], r: int) -> None:
    """Add the low half into the high half, then rotate the low half left by r."""
    for i in range(16):
        state[16 + i] = (state[16 + i] + state[i]) & MASK32
        state[i] = rotate_left(state[i], r)


def _mix_swap(state: List[int], mask1: int, mask2: int) -> None:
    """Swap-xor across the low half, then swap within the high half."""
    for i in range(16):
        if i & mask1:
            j = i ^ mask1
            # both assignments use pre-update values
            state[i], state[j] = state[j] ^ state[i + 16], state[i] ^ state[j + 16]
    for i in range(16, 32):
        if i & mask2:
            j = i ^ mask2
            state[i], state[j] = state[j], state[i]


def _rounds(state: List[int], n: int) -> None:
    for _ in range(n):
        _add_rotate(state, 7)
        _mix_swap(state, 8, 2)
        _add_rotate(state, 11)
        _mix_swap(state, 4, 1)


# ============================================================================
# PUBLIC API
# ============================================================================

def pad_message(message: bytes) -> bytes:
    """Append 0x80 and zero-fill to a multiple of the 32-byte block size."""
    padded = bytes(message) + b"\x80"
    return padded + bytes(-len(padded) % BLOCK_BYTES)


def cubehash(message: bytes) -> bytes:
    """Return the 64-byte CubeHash16/32-512 digest of ``message``."""
    state = [0] * STATE_WORDS
    state[0] = DIGEST_BYTES
    state[1] = BLOCK_BYTES
    state[2] = ROUNDS
    _rounds(state, INIT_ROUNDS)

    padded = pad_message(message)
    for offset in range(0, len(padded), BLOCK_BYTES):
        block = bytes_to_words(padded[offset:offset + BLOCK_BYTES])
        for i in range(8):
            state[i] ^= block[i]
        _rounds(state, ROUNDS)

    state[31] ^= 1
    _rounds(state, FINAL_ROUNDS)

    return words_to_bytes(state[:16])
