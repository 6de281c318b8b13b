"""From-scratch primitives: CubeHash16/32-512, RC4 and XTEA."""

from .cubehash import cubehash, DIGEST_BYTES
from .rc4 import rc4
from .xtea import xtea_encrypt_block, xtea_decrypt_block

__all__ = [
    "cubehash",
    "DIGEST_BYTES",
    "rc4",
    "xtea_encrypt_block",
    "xtea_decrypt_block",
]
