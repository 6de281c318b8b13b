"""Avalanche measurements for the hash and the block cipher.

Flip one input bit, recompute, and record the fraction of output bits that
changed. A well-mixed primitive sits close to 0.5. This is a regression
check, not a security argument.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

import numpy as np

from ..primitives.cubehash import DIGEST_BYTES, cubehash
from ..primitives.xtea import BLOCK_BYTES, KEY_BYTES, xtea_encrypt_block


def hamming_distance(a: bytes, b: bytes) -> int:
    if len(a) != len(b):
        raise ValueError("hamming distance length mismatch")
    diff = np.frombuffer(a, dtype=np.uint8) ^ np.frombuffer(b, dtype=np.uint8)
    return int(np.unpackbits(diff).sum())


def flip_bit(data: bytes, bit_index: int) -> bytes:
    byte_i = bit_index // 8
    bit_i = bit_index % 8
    if byte_i < 0 or byte_i >= len(data):
        raise IndexError("bit_index out of range")
    out = bytearray(data)
    out[byte_i] ^= 1 << bit_i
    return bytes(out)


def rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


@dataclass
class AvalancheResult:
    """Flipped-output-bit fractions for one primitive and input type."""
    primitive: str
    input_type: str             # "message", "plaintext" or "key"
    num_trials: int
    num_output_bits: int
    fractions: List[float] = field(default_factory=list)

    mean: float = 0.0
    std: float = 0.0
    min_fraction: float = 0.0
    max_fraction: float = 0.0

    @property
    def passes(self) -> bool:
        """Heuristic: mean within 0.05 of 0.5 and no trial below 0.25."""
        return abs(self.mean - 0.5) < 0.05 and self.min_fraction > 0.25

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop("fractions")
        d["passes"] = self.passes
        return d

    def summary(self) -> str:
        status = "PASS" if self.passes else "FAIL"
        return (
            f"[{status}] avalanche {self.primitive}({self.input_type}): "
            f"mean={self.mean:.4f}, std={self.std:.4f}, "
            f"min={self.min_fraction:.4f}, max={self.max_fraction:.4f}"
        )


def _finish(primitive: str, input_type: str, output_bits: int, fractions: List[float]) -> AvalancheResult:
    arr = np.asarray(fractions, dtype=np.float64)
    return AvalancheResult(
        primitive=primitive,
        input_type=input_type,
        num_trials=len(fractions),
        num_output_bits=output_bits,
        fractions=fractions,
        mean=round(float(arr.mean()), 6) if arr.size else 0.0,
        std=round(float(arr.std()), 6) if arr.size else 0.0,
        min_fraction=round(float(arr.min()), 6) if arr.size else 0.0,
        max_fraction=round(float(arr.max()), 6) if arr.size else 0.0,
    )


def hash_avalanche(
    *,
    trials: int = 64,
    message_len: int = 64,
    seed: int = 1337,
) -> AvalancheResult:
    """Flip one random bit of a random message per trial and compare digests."""
    if message_len < 1:
        raise ValueError("message_len must be at least 1 to flip a bit")
    rng = random.Random(seed)
    out_bits = DIGEST_BYTES * 8
    fractions: List[float] = []
    for _ in range(trials):
        msg = rand_bytes(rng, message_len)
        msg2 = flip_bit(msg, rng.randrange(0, message_len * 8))
        fractions.append(hamming_distance(cubehash(msg), cubehash(msg2)) / out_bits)
    return _finish("CubeHash16/32-512", "message", out_bits, fractions)


def block_avalanche(
    *,
    input_type: str = "plaintext",
    trials: int = 64,
    seed: int = 1337,
) -> AvalancheResult:
    """XTEA avalanche under a one-bit change of the plaintext or the key."""
    if input_type not in ("plaintext", "key"):
        raise ValueError(f"input_type must be 'plaintext' or 'key', got '{input_type}'")
    rng = random.Random(seed if input_type == "plaintext" else seed + 1)
    out_bits = BLOCK_BYTES * 8
    fractions: List[float] = []
    for _ in range(trials):
        key = rand_bytes(rng, KEY_BYTES)
        pt = rand_bytes(rng, BLOCK_BYTES)
        ct = xtea_encrypt_block(key, pt)
        if input_type == "plaintext":
            ct2 = xtea_encrypt_block(key, flip_bit(pt, rng.randrange(0, BLOCK_BYTES * 8)))
        else:
            ct2 = xtea_encrypt_block(flip_bit(key, rng.randrange(0, KEY_BYTES * 8)), pt)
        fractions.append(hamming_distance(ct, ct2) / out_bits)
    return _finish("XTEA", input_type, out_bits, fractions)
