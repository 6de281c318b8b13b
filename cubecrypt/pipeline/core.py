"""Password-based file encryption pipeline.

To encrypt:
  1. key = CubeHash(password || pad-count || salt), salt = 128 random bytes
  2. split the 64-byte key into four 16-byte sub-keys
  3. write header (magic, pad-count, salt)
  4. for chunk n of 8 bytes: XTEA(K[n % 4], RC4(K[n % 4], chunk)); the final
     short chunk is first filled up with random bytes

To decrypt:
  1. verify the magic marker, read pad-count and salt
  2. regenerate the key from the supplied password
  3. for chunk n: RC4(K[n % 4], unXTEA(K[n % 4], chunk))
  4. drop the random filler from the last chunk

There is no authentication tag: a wrong password yields wrong plaintext
without any error.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import io
import logging
import os
import secrets
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, BinaryIO, Dict, Iterator, Optional, Union

from ..config import Settings, load_settings
from ..errors import CubeCryptError, ErrorKind, TruncatedInput
from ..primitives.rc4 import rc4
from ..primitives.xtea import xtea_decrypt_block, xtea_encrypt_block
from .fileformat import CHUNK_BYTES, HEADER_BYTES, FileHeader, pad_count_for, read_exact
from .keys import DerivedKey, derive_key, generate_salt

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Mode(str, Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


@dataclass
class OperationResult:
    """Outcome of one encrypt/decrypt operation."""
    ok: bool
    mode: Mode
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    bytes_in: int = 0
    bytes_out: int = 0
    chunks: int = 0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["mode"] = self.mode.value
        d["error_kind"] = self.error_kind.value if self.error_kind else None
        return d

    def summary(self) -> str:
        if self.ok:
            return f"[OK] {self.mode.value}: {self.bytes_in} -> {self.bytes_out} bytes ({self.chunks} chunks)"
        return f"[FAIL] {self.mode.value}: {self.error_kind.value}: {self.message}"


# ============================================================================
# PER-CHUNK TRANSFORMS
# ============================================================================

def encrypt_chunk(key: DerivedKey, index: int, chunk: bytes) -> bytes:
    subkey = key.subkey_for(index)
    return xtea_encrypt_block(subkey, rc4(subkey, chunk))


def decrypt_chunk(key: DerivedKey, index: int, chunk: bytes) -> bytes:
    subkey = key.subkey_for(index)
    return rc4(subkey, xtea_decrypt_block(subkey, chunk))


# ============================================================================
# CHUNK ITERATION
# ============================================================================

def _input_length(source: BinaryIO) -> int:
    """Bytes remaining in a seekable ``source`` from its current position."""
    if not (hasattr(source, "seekable") and source.seekable()):
        raise io.UnsupportedOperation("length is required when the input stream is not seekable")
    pos = source.tell()
    end = source.seek(0, os.SEEK_END)
    source.seek(pos)
    return end - pos


def _plaintext_chunks(source: BinaryIO, length: int, buffer_size: int) -> Iterator[bytes]:
    """Yield ``length`` bytes of ``source`` as 8-byte chunks; the last may be short."""
    remaining = length
    while remaining > 0:
        want = min(buffer_size, remaining)
        buf = read_exact(source, want)
        if len(buf) != want:
            raise TruncatedInput(
                f"Input ended after {length - remaining + len(buf)} of {length} bytes"
            )
        remaining -= want
        for off in range(0, want, CHUNK_BYTES):
            yield buf[off:off + CHUNK_BYTES]


def _ciphertext_chunks(source: BinaryIO, buffer_size: int) -> Iterator[bytes]:
    """Yield 8-byte chunks until EOF; a dangling partial chunk is an error."""
    carry = b""
    total = 0
    while True:
        buf = source.read(buffer_size)
        if not buf:
            break
        total += len(buf)
        data = carry + buf
        whole = len(data) - len(data) % CHUNK_BYTES
        for off in range(0, whole, CHUNK_BYTES):
            yield data[off:off + CHUNK_BYTES]
        carry = data[whole:]
    if carry:
        raise TruncatedInput(
            f"Ciphertext body of {total} bytes is not a multiple of {CHUNK_BYTES}"
        )


# ============================================================================
# STREAM OPERATIONS
# ============================================================================

def encrypt_stream(
    password: bytes,
    source: BinaryIO,
    sink: BinaryIO,
    *,
    length: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> OperationResult:
    """Encrypt ``source`` into ``sink``.

    Args:
        password: Raw password bytes, used as-is.
        source: Readable binary stream holding the plaintext.
        sink: Writable binary stream for the header and ciphertext.
        length: Plaintext length. Required for non-seekable sources; for
            seekable ones it defaults to the bytes left from the current
            position.
        settings: Optional settings; uses ``load_settings()`` if omitted.

    Returns:
        OperationResult with byte and chunk counts.

    Raises:
        TruncatedInput: ``source`` holds fewer than ``length`` bytes.
        io.UnsupportedOperation: ``source`` is not seekable and no
            ``length`` was given.
        OSError: Any read/write failure, unchanged.
    """
    cfg = settings or load_settings()
    if length is None:
        length = _input_length(source)
    if length < 0:
        raise ValueError("length must be non-negative")

    header = FileHeader(pad_count=pad_count_for(length), salt=generate_salt())
    key = derive_key(password, header)
    logger.info("Encrypting %d bytes", length)
    logger.debug("pad_count=%d", header.pad_count)

    header.write(sink)
    written = HEADER_BYTES
    chunks = 0
    for index, chunk in enumerate(_plaintext_chunks(source, length, cfg.read_buffer_size)):
        if len(chunk) < CHUNK_BYTES:
            chunk += secrets.token_bytes(CHUNK_BYTES - len(chunk))
        sink.write(encrypt_chunk(key, index, chunk))
        written += CHUNK_BYTES
        chunks += 1

    logger.info("Encryption complete: %d chunks, %d bytes written", chunks, written)
    return OperationResult(
        ok=True, mode=Mode.ENCRYPT, bytes_in=length, bytes_out=written, chunks=chunks,
    )


def _decrypt_body(
    password: bytes,
    header: FileHeader,
    source: BinaryIO,
    sink: BinaryIO,
    cfg: Settings,
) -> OperationResult:
    key = derive_key(password, header)
    logger.debug("pad_count=%d", header.pad_count)

    pending: Optional[bytes] = None
    written = 0
    chunks = 0
    for index, chunk in enumerate(_ciphertext_chunks(source, cfg.read_buffer_size)):
        # hold one chunk back: only the last one carries filler
        if pending is not None:
            sink.write(pending)
            written += len(pending)
        pending = decrypt_chunk(key, index, chunk)
        chunks += 1

    if pending is None:
        if header.pad_count:
            raise TruncatedInput("Header announces padding but the file has no chunks")
    else:
        tail = pending[:CHUNK_BYTES - header.pad_count]
        sink.write(tail)
        written += len(tail)

    logger.info("Decryption complete: %d chunks, %d bytes written", chunks, written)
    return OperationResult(
        ok=True,
        mode=Mode.DECRYPT,
        bytes_in=HEADER_BYTES + chunks * CHUNK_BYTES,
        bytes_out=written,
        chunks=chunks,
    )


def decrypt_stream(
    password: bytes,
    source: BinaryIO,
    sink: BinaryIO,
    *,
    settings: Optional[Settings] = None,
) -> OperationResult:
    """Decrypt ``source`` into ``sink``.

    The header is fully validated before anything is written to ``sink``.

    Raises:
        HeaderMismatch: ``source`` is not a cubecrypt file.
        TruncatedInput: Header or ciphertext body cut short.
        OSError: Any read/write failure, unchanged.
    """
    cfg = settings or load_settings()
    header = FileHeader.read(source)
    logger.info("Decrypting")
    return _decrypt_body(password, header, source, sink, cfg)


# ============================================================================
# PATH HELPERS
# ============================================================================

def encrypt_file(
    in_path: PathLike,
    out_path: PathLike,
    password: bytes,
    *,
    settings: Optional[Settings] = None,
) -> OperationResult:
    with open(in_path, "rb") as src, open(out_path, "wb") as dst:
        return encrypt_stream(password, src, dst, settings=settings)


def decrypt_file(
    in_path: PathLike,
    out_path: PathLike,
    password: bytes,
    *,
    settings: Optional[Settings] = None,
) -> OperationResult:
    """Decrypt ``in_path`` to ``out_path``.

    ``out_path`` is only created once the header has been validated.
    """
    cfg = settings or load_settings()
    with open(in_path, "rb") as src:
        header = FileHeader.read(src)
        with open(out_path, "wb") as dst:
            return _decrypt_body(password, header, src, dst, cfg)


# ============================================================================
# CORE BOUNDARY
# ============================================================================

def run(
    mode: Union[Mode, str],
    source: BinaryIO,
    sink: BinaryIO,
    password: bytes,
    *,
    length: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> OperationResult:
    """Run one operation and classify any failure instead of raising.

    ``OSError`` (including an unmeasurable, non-seekable ``source`` with no
    ``length``) becomes ``ErrorKind.IO_FAILURE``; cubecrypt errors keep
    their own kind. ``length`` is only used when encrypting. A failed
    operation may have written partial output to ``sink``, which the caller
    must discard.
    """
    mode = Mode(mode)
    try:
        if mode is Mode.ENCRYPT:
            return encrypt_stream(password, source, sink, length=length, settings=settings)
        return decrypt_stream(password, source, sink, settings=settings)
    except CubeCryptError as exc:
        logger.warning("%s failed (%s): %s", mode.value, exc.kind.value, exc)
        return OperationResult(ok=False, mode=mode, error_kind=exc.kind, message=str(exc))
    except OSError as exc:
        logger.error("%s failed on I/O: %s", mode.value, exc)
        return OperationResult(
            ok=False, mode=mode, error_kind=ErrorKind.IO_FAILURE, message=str(exc),
        )
