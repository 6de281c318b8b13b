"""Password-based key derivation and round-robin sub-keys."""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Tuple

from ..primitives.cubehash import DIGEST_BYTES, cubehash
from .fileformat import SALT_BYTES, FileHeader

SUBKEY_COUNT = 4
SUBKEY_BYTES = DIGEST_BYTES // SUBKEY_COUNT


def generate_salt() -> bytes:
    return secrets.token_bytes(SALT_BYTES)


@dataclass(frozen=True)
class DerivedKey:
    """64-byte digest and its four non-overlapping 16-byte sub-keys."""
    digest: bytes
    subkeys: Tuple[bytes, ...]

    @classmethod
    def from_digest(cls, digest: bytes) -> "DerivedKey":
        if len(digest) != DIGEST_BYTES:
            raise ValueError(f"digest must be {DIGEST_BYTES} bytes")
        subkeys = tuple(
            digest[i * SUBKEY_BYTES:(i + 1) * SUBKEY_BYTES] for i in range(SUBKEY_COUNT)
        )
        return cls(digest=digest, subkeys=subkeys)

    def subkey_for(self, chunk_index: int) -> bytes:
        return self.subkeys[chunk_index % SUBKEY_COUNT]

    def __repr__(self) -> str:
        return "DerivedKey(<redacted>)"


def derive_key(password: bytes, header: FileHeader) -> DerivedKey:
    """key = CubeHash(password || pad-count byte || salt)."""
    return DerivedKey.from_digest(cubehash(bytes(password) + header.kdf_suffix))
