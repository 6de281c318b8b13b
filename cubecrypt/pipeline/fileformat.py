"""On-disk layout of a cubecrypt file.

    offset  length  content
    0       4       magic marker 01 02 03 04
    4       1       pad-count (0..7)
    5       128     random salt
    133     8*k     ciphertext chunks

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from ..errors import HeaderMismatch, TruncatedInput

MAGIC = b"\x01\x02\x03\x04"
SALT_BYTES = 128
CHUNK_BYTES = 8
HEADER_BYTES = len(MAGIC) + 1 + SALT_BYTES


def pad_count_for(length: int) -> int:
    """Number of filler bytes needed to bring ``length`` to a whole chunk."""
    return (CHUNK_BYTES - length % CHUNK_BYTES) % CHUNK_BYTES


def read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read up to ``n`` bytes, retrying short reads until EOF."""
    buf = bytearray()
    while len(buf) < n:
        piece = stream.read(n - len(buf))
        if not piece:
            break
        buf += piece
    return bytes(buf)


@dataclass(frozen=True)
class FileHeader:
    pad_count: int
    salt: bytes

    def __post_init__(self):
        if not 0 <= self.pad_count < CHUNK_BYTES:
            raise ValueError(f"pad_count must be in [0, {CHUNK_BYTES - 1}], got {self.pad_count}")
        if len(self.salt) != SALT_BYTES:
            raise ValueError(f"salt must be {SALT_BYTES} bytes, got {len(self.salt)}")

    @property
    def kdf_suffix(self) -> bytes:
        """Bytes appended to the password before hashing: pad-count then salt."""
        return bytes([self.pad_count]) + self.salt

    def to_bytes(self) -> bytes:
        return MAGIC + self.kdf_suffix

    def write(self, stream: BinaryIO) -> None:
        stream.write(self.to_bytes())

    @classmethod
    def read(cls, stream: BinaryIO) -> "FileHeader":
        """Parse and validate a header from the front of ``stream``.

        Raises:
            HeaderMismatch: Magic marker absent or wrong, or pad-count > 7.
            TruncatedInput: Stream ends inside the pad-count/salt fields.
        """
        magic = read_exact(stream, len(MAGIC))
        if magic != MAGIC:
            raise HeaderMismatch("The file was not encrypted with cubecrypt (bad magic marker)")

        rest = read_exact(stream, 1 + SALT_BYTES)
        if len(rest) != 1 + SALT_BYTES:
            raise TruncatedInput(
                f"Header truncated: expected {HEADER_BYTES} bytes, got {len(MAGIC) + len(rest)}"
            )

        pad_count = rest[0]
        if pad_count >= CHUNK_BYTES:
            raise HeaderMismatch(f"Invalid pad-count byte in header: {pad_count}")
        return cls(pad_count=pad_count, salt=rest[1:])
