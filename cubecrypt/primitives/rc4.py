"""RC4 stream cipher (Rivest, 1987).

``rc4(key, data)`` both encrypts and decrypts: the keystream is XORed into
the data, so applying it twice with the same key restores the input. The
permutation table is rebuilt from the key on every call.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from ..errors import KeyLengthViolation


def _key_schedule(key: bytes) -> bytearray:
    table = bytearray(range(256))
    j = 0
    key_len = len(key)
    for i in range(256):
        j = (j + table[i] + key[i % key_len]) % 256
        table[i], table[j] = table[j], table[i]
    return table


def rc4(key: bytes, data: bytes) -> bytes:
    """XOR ``data`` with the RC4 keystream for ``key``.

    Args:
        key: Non-empty key (RC4 accepts 1..256 bytes; longer keys wrap).
        data: Bytes to transform.

    Returns:
        Transformed bytes of the same length as ``data``.

    Raises:
        KeyLengthViolation: If ``key`` is empty.
    """
    if not key:
        raise KeyLengthViolation("RC4 key must not be empty")

    table = _key_schedule(key)
    out = bytearray(len(data))
    i = j = 0
    for k, byte in enumerate(data):
        i = (i + 1) % 256
        j = (j + table[i]) % 256
        table[i], table[j] = table[j], table[i]
        out[k] = byte ^ table[(table[i] + table[j]) % 256]
    return bytes(out)
