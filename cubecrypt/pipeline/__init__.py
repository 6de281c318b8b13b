"""File encryption pipeline: header, key derivation and chunk processing."""

from .fileformat import MAGIC, SALT_BYTES, CHUNK_BYTES, HEADER_BYTES, FileHeader, pad_count_for
from .keys import DerivedKey, derive_key, generate_salt
from .core import (
    Mode,
    OperationResult,
    encrypt_chunk,
    decrypt_chunk,
    encrypt_stream,
    decrypt_stream,
    encrypt_file,
    decrypt_file,
    run,
)

__all__ = [
    "MAGIC",
    "SALT_BYTES",
    "CHUNK_BYTES",
    "HEADER_BYTES",
    "FileHeader",
    "pad_count_for",
    "DerivedKey",
    "derive_key",
    "generate_salt",
    "Mode",
    "OperationResult",
    "encrypt_chunk",
    "decrypt_chunk",
    "encrypt_stream",
    "decrypt_stream",
    "encrypt_file",
    "decrypt_file",
    "run",
]
