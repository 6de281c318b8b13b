"""Known-answer tests against published RC4 and XTEA vectors.

RC4 vectors are the classic key/plaintext/ciphertext triples plus the first
keystream bytes from RFC 6229. XTEA vectors are published with key and
block read as *big-endian* words; this implementation reads little-endian
words, so every 4-byte group is byte-reversed before use. Only the byte
order of the I/O changes; the words entering the cipher are identical.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from ..primitives.rc4 import rc4
from ..primitives.xtea import xtea_decrypt_block, xtea_encrypt_block


def swap_words(data: bytes) -> bytes:
    """Reverse the byte order inside every 4-byte word."""
    if len(data) % 4 != 0:
        raise ValueError("swap_words requires data length divisible by 4")
    return b"".join(data[i:i + 4][::-1] for i in range(0, len(data), 4))


@dataclass(frozen=True)
class KnownAnswer:
    algorithm: str   # "RC4" or "XTEA"
    source: str
    key: bytes
    plaintext: bytes
    ciphertext: bytes


RC4_VECTORS: List[KnownAnswer] = [
    KnownAnswer("RC4", "Wikipedia", b"Key", b"Plaintext", bytes.fromhex("bbf316e8d940af0ad3")),
    KnownAnswer("RC4", "Wikipedia", b"Wiki", b"pedia", bytes.fromhex("1021bf0420")),
    KnownAnswer(
        "RC4", "Wikipedia", b"Secret", b"Attack at dawn",
        bytes.fromhex("45a01f645fc35b383552544b9bf5"),
    ),
    KnownAnswer(
        "RC4", "RFC 6229 (40-bit key, offset 0)", bytes.fromhex("0102030405"), bytes(16),
        bytes.fromhex("b2396305f03dc027ccc3524a0a1118a8"),
    ),
]


def _xtea_be(source: str, key: str, pt: str, ct: str) -> KnownAnswer:
    return KnownAnswer(
        "XTEA", source,
        swap_words(bytes.fromhex(key)),
        swap_words(bytes.fromhex(pt)),
        swap_words(bytes.fromhex(ct)),
    )


XTEA_VECTORS: List[KnownAnswer] = [
    _xtea_be("Bouncy Castle XTEATest", "00000000000000000000000000000000", "0000000000000000", "dee9d4d8f7131ed9"),
    _xtea_be("XTEA reference table", "000102030405060708090a0b0c0d0e0f", "4142434445464748", "497df3d072612cb5"),
    _xtea_be("XTEA reference table", "000102030405060708090a0b0c0d0e0f", "4141414141414141", "e78f2d13744341d8"),
    _xtea_be("XTEA reference table", "000102030405060708090a0b0c0d0e0f", "5a5b6e278948d77f", "4141414141414141"),
    _xtea_be("XTEA reference table", "00000000000000000000000000000000", "4142434445464748", "a0390589f8b8efa5"),
    _xtea_be("XTEA reference table", "00000000000000000000000000000000", "4141414141414141", "ed23375a821a8c2d"),
    _xtea_be("XTEA reference table", "00000000000000000000000000000000", "70e1225d6e4e7655", "4141414141414141"),
]


@dataclass
class VectorResult:
    algorithm: str
    source: str
    key_hex: str
    expected_hex: str
    actual_hex: str
    inverse_ok: bool

    @property
    def passed(self) -> bool:
        return self.expected_hex == self.actual_hex and self.inverse_ok

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["passed"] = self.passed
        return d

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {self.algorithm} ({self.source}) key={self.key_hex}"


def check_vector(vec: KnownAnswer) -> VectorResult:
    if vec.algorithm == "RC4":
        actual = rc4(vec.key, vec.plaintext)
        inverse = rc4(vec.key, vec.ciphertext)
    elif vec.algorithm == "XTEA":
        actual = xtea_encrypt_block(vec.key, vec.plaintext)
        inverse = xtea_decrypt_block(vec.key, vec.ciphertext)
    else:
        raise ValueError(f"Unknown algorithm: {vec.algorithm}")
    return VectorResult(
        algorithm=vec.algorithm,
        source=vec.source,
        key_hex=vec.key.hex(),
        expected_hex=vec.ciphertext.hex(),
        actual_hex=actual.hex(),
        inverse_ok=inverse == vec.plaintext,
    )


def check_reference_vectors() -> List[VectorResult]:
    """Run every published RC4 and XTEA vector."""
    return [check_vector(v) for v in RC4_VECTORS + XTEA_VECTORS]
