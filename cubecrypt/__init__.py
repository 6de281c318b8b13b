"""cubecrypt: password-based file encryption from CubeHash, RC4 and XTEA.

Research / education only. Do NOT use in production.
"""

from .errors import CubeCryptError, ErrorKind, HeaderMismatch, KeyLengthViolation, TruncatedInput
from .primitives import cubehash, rc4, xtea_encrypt_block, xtea_decrypt_block
from .pipeline import (
    Mode,
    OperationResult,
    encrypt_stream,
    decrypt_stream,
    encrypt_file,
    decrypt_file,
    run,
)

__version__ = "0.1.0"

__all__ = [
    "CubeCryptError",
    "ErrorKind",
    "HeaderMismatch",
    "KeyLengthViolation",
    "TruncatedInput",
    "cubehash",
    "rc4",
    "xtea_encrypt_block",
    "xtea_decrypt_block",
    "Mode",
    "OperationResult",
    "encrypt_stream",
    "decrypt_stream",
    "encrypt_file",
    "decrypt_file",
    "run",
]
