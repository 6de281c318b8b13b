"""Roundtrip verification: P = D(E(P, K), K).

Generates randomized vectors for the block cipher, the stream cipher, or
the whole file pipeline (in-memory streams) and checks that decryption
inverts encryption for every one of them.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import io
import random
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import Settings
from ..pipeline.core import decrypt_stream, encrypt_stream
from ..primitives.rc4 import rc4
from ..primitives.xtea import BLOCK_BYTES, KEY_BYTES, xtea_decrypt_block, xtea_encrypt_block
from .avalanche import rand_bytes

TARGETS = ("block", "stream", "file")


@dataclass
class RoundtripFailure:
    """Details of a single failed roundtrip vector."""
    vector_index: int
    plaintext_hex: str
    key_hex: str
    ciphertext_hex: str
    decrypted_hex: str       # What decrypt returned (should equal plaintext)
    error: Optional[str]     # Exception message if encrypt/decrypt threw


@dataclass
class RoundtripResult:
    """Aggregate result of roundtrip testing for one target."""
    target: str
    total_vectors: int
    passed: int
    failed: int
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors > 0 else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] roundtrip {self.target}: "
            f"{self.passed}/{self.total_vectors} vectors passed "
            f"({self.elapsed_seconds:.2f}s)"
        )


def _block_case(rng: random.Random, settings: Settings) -> Tuple[bytes, bytes, bytes, bytes]:
    pt = rand_bytes(rng, BLOCK_BYTES)
    key = rand_bytes(rng, KEY_BYTES)
    ct = xtea_encrypt_block(key, pt)
    return pt, key, ct, xtea_decrypt_block(key, ct)


def _stream_case(rng: random.Random, settings: Settings) -> Tuple[bytes, bytes, bytes, bytes]:
    pt = rand_bytes(rng, rng.randrange(0, 65))
    key = rand_bytes(rng, rng.randrange(1, 33))
    ct = rc4(key, pt)
    return pt, key, ct, rc4(key, ct)


def _file_case(rng: random.Random, settings: Settings) -> Tuple[bytes, bytes, bytes, bytes]:
    pt = rand_bytes(rng, rng.randrange(0, 80))
    password = rand_bytes(rng, rng.randrange(0, 24))
    enc = io.BytesIO()
    encrypt_stream(password, io.BytesIO(pt), enc, settings=settings)
    ct = enc.getvalue()
    dec = io.BytesIO()
    decrypt_stream(password, io.BytesIO(ct), dec, settings=settings)
    return pt, password, ct, dec.getvalue()


_CASES: Dict[str, Callable[[random.Random, Settings], Tuple[bytes, bytes, bytes, bytes]]] = {
    "block": _block_case,
    "stream": _stream_case,
    "file": _file_case,
}


def run_roundtrip_tests(
    target: str,
    *,
    num_vectors: int = 200,
    seed: int = 1337,
    max_failures_recorded: int = 10,
    settings: Optional[Settings] = None,
) -> RoundtripResult:
    """Run roundtrip verification across many random vectors.

    Args:
        target: "block" (XTEA), "stream" (RC4) or "file" (full pipeline).
        num_vectors: Number of random vectors to test.
        seed: Random seed for the vector generator. File salts and padding
            still come from the system CSPRNG.
        max_failures_recorded: Maximum number of failure details to keep.
        settings: Optional settings passed to the file pipeline.

    Returns:
        RoundtripResult with pass/fail counts and failure details.
    """
    if target not in _CASES:
        raise ValueError(f"target must be one of {TARGETS}, got '{target}'")
    case = _CASES[target]
    cfg = settings or Settings()

    rng = random.Random(seed)
    passed = 0
    failed = 0
    failures: List[RoundtripFailure] = []

    start = time.perf_counter()

    for i in range(num_vectors):
        try:
            pt, key, ct, pt2 = case(rng, cfg)
        except Exception as exc:
            failed += 1
            if len(failures) < max_failures_recorded:
                failures.append(RoundtripFailure(
                    vector_index=i,
                    plaintext_hex="<error>",
                    key_hex="<error>",
                    ciphertext_hex="<error>",
                    decrypted_hex="<error>",
                    error=f"{type(exc).__name__}: {exc}",
                ))
            continue

        if pt == pt2:
            passed += 1
        else:
            failed += 1
            if len(failures) < max_failures_recorded:
                failures.append(RoundtripFailure(
                    vector_index=i,
                    plaintext_hex=pt.hex(),
                    key_hex=key.hex(),
                    ciphertext_hex=ct.hex(),
                    decrypted_hex=pt2.hex(),
                    error=None,
                ))

    elapsed = time.perf_counter() - start

    return RoundtripResult(
        target=target,
        total_vectors=num_vectors,
        passed=passed,
        failed=failed,
        failures=failures,
        elapsed_seconds=round(elapsed, 4),
        seed=seed,
    )


def run_all_targets(
    *,
    num_vectors: int = 200,
    seed: int = 1337,
    settings: Optional[Settings] = None,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> List[RoundtripResult]:
    results: List[RoundtripResult] = []
    for idx, target in enumerate(TARGETS):
        if progress_callback:
            progress_callback(target, idx, len(TARGETS))
        results.append(run_roundtrip_tests(target, num_vectors=num_vectors, seed=seed, settings=settings))
    return results
