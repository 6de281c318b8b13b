import io
import sys
import random
from pathlib import Path

import pytest

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from cubecrypt.config import Settings
from cubecrypt.errors import ErrorKind, HeaderMismatch, TruncatedInput
from cubecrypt.pipeline import (
    CHUNK_BYTES,
    HEADER_BYTES,
    MAGIC,
    SALT_BYTES,
    FileHeader,
    Mode,
    decrypt_chunk,
    decrypt_file,
    decrypt_stream,
    derive_key,
    encrypt_chunk,
    encrypt_file,
    encrypt_stream,
    pad_count_for,
    run,
)
from cubecrypt.primitives.cubehash import cubehash

PASSWORD = b"correct horse battery staple"
SETTINGS = Settings(read_buffer_size=64)


def _encrypt(data: bytes, password: bytes = PASSWORD, settings: Settings = SETTINGS) -> bytes:
    out = io.BytesIO()
    encrypt_stream(password, io.BytesIO(data), out, settings=settings)
    return out.getvalue()


def _decrypt(blob: bytes, password: bytes = PASSWORD, settings: Settings = SETTINGS) -> bytes:
    out = io.BytesIO()
    decrypt_stream(password, io.BytesIO(blob), out, settings=settings)
    return out.getvalue()


class _ReadOnly:
    """Non-seekable source."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def read(self, n: int = -1) -> bytes:
        return self._buf.read(min(n, 3) if n > 0 else n)


class _BrokenSink(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        raise OSError("disk full")


# ---------------------------------------------------------------------------
# File layout
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("length,expected", [(0, 0), (1, 7), (7, 1), (8, 0), (9, 7), (1000, 0), (1001, 7)])
def test_pad_count_for(length, expected):
    assert pad_count_for(length) == expected


@pytest.mark.parametrize("length", [0, 1, 7, 8, 9, 1000])
def test_header_and_size(length):
    blob = _encrypt(bytes(length))
    assert blob[:4] == MAGIC == b"\x01\x02\x03\x04"
    assert blob[4] == pad_count_for(length)
    chunks = (length + CHUNK_BYTES - 1) // CHUNK_BYTES
    assert len(blob) == HEADER_BYTES + chunks * CHUNK_BYTES
    assert HEADER_BYTES == 133


def test_salt_is_fresh_per_encryption():
    a = _encrypt(b"same plaintext")
    b = _encrypt(b"same plaintext")
    assert a[5:5 + SALT_BYTES] != b[5:5 + SALT_BYTES]
    assert a[HEADER_BYTES:] != b[HEADER_BYTES:]


def test_header_roundtrip():
    header = FileHeader(pad_count=3, salt=bytes(range(128)))
    parsed = FileHeader.read(io.BytesIO(header.to_bytes()))
    assert parsed == header


@pytest.mark.parametrize("pad_count", [-1, 8, 255])
def test_header_rejects_bad_pad_count(pad_count):
    with pytest.raises(ValueError):
        FileHeader(pad_count=pad_count, salt=bytes(SALT_BYTES))


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def test_derive_key_matches_hash_of_password_pad_salt():
    salt = bytes(range(128))
    header = FileHeader(pad_count=5, salt=salt)
    key = derive_key(PASSWORD, header)
    digest = cubehash(PASSWORD + b"\x05" + salt)
    assert key.digest == digest
    assert key.subkeys == (digest[0:16], digest[16:32], digest[32:48], digest[48:64])
    assert [key.subkey_for(n) for n in range(6)] == [
        digest[0:16], digest[16:32], digest[32:48], digest[48:64], digest[0:16], digest[16:32],
    ]
    assert PASSWORD.hex() not in repr(key)


def test_subkeys_rotate_every_four_chunks():
    # identical plaintext chunks repeat exactly when the sub-key repeats
    blob = _encrypt(b"ABCDEFGH" * 8)
    body = blob[HEADER_BYTES:]
    chunks = [body[i:i + 8] for i in range(0, len(body), 8)]
    assert chunks[0:4] == chunks[4:8]
    assert len(set(chunks[0:4])) == 4


def test_chunk_transform_depends_only_on_index():
    header = FileHeader(pad_count=0, salt=bytes(SALT_BYTES))
    key = derive_key(PASSWORD, header)
    chunk = b"12345678"
    for index in (0, 1, 5, 1003):
        ct = encrypt_chunk(key, index, chunk)
        assert ct == encrypt_chunk(key, index % 4, chunk)
        assert decrypt_chunk(key, index, ct) == chunk


# Output of the 2012 JavaCrypt tool for PASSWORD, salt 00 01 .. 7f and a
# 40-byte plaintext (no padding, five chunks so sub-key 0 is reused)
FIXED_SALT = bytes(range(SALT_BYTES))
FIXED_PLAINTEXT = b"0123456789ABCDEF" * 2 + b"01234567"
FIXED_KEY = bytes.fromhex(
    "27de6c63cc9a9275e2e56bbef5a6e5d202577a3b1f01f60fd770bf8817a8adb9"
    "28f1d60b4b54376cf8ca54a9f0eca451aa2c5a7a9e7e8aa87304cfa66d7827db"
)
FIXED_BODY = bytes.fromhex(
    "2e9da674d65a9f26" "7f644d528ad2b03f" "0ba1cdb6b95dc70d" "7068b358a496df9e" "2e9da674d65a9f26"
)


def test_known_key_and_chunks():
    header = FileHeader(pad_count=0, salt=FIXED_SALT)
    key = derive_key(PASSWORD, header)
    assert key.digest == FIXED_KEY
    body = b"".join(
        encrypt_chunk(key, n, FIXED_PLAINTEXT[8 * n:8 * n + 8]) for n in range(5)
    )
    assert body == FIXED_BODY


def test_known_file_bytes(monkeypatch):
    monkeypatch.setattr("cubecrypt.pipeline.core.generate_salt", lambda: FIXED_SALT)
    blob = _encrypt(FIXED_PLAINTEXT)
    assert blob == MAGIC + b"\x00" + FIXED_SALT + FIXED_BODY
    assert _decrypt(blob) == FIXED_PLAINTEXT


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("length", [0, 1, 7, 8, 9, 1000])
def test_file_roundtrip(length):
    data = bytes(random.Random(length).randrange(0, 256) for _ in range(length))
    assert _decrypt(_encrypt(data)) == data


@pytest.mark.parametrize("buffer_size", [8, 16, 24, 4096])
def test_roundtrip_independent_of_buffer_size(buffer_size):
    data = bytes(range(256)) * 3 + b"tail"
    enc_settings = Settings(read_buffer_size=buffer_size)
    blob = _encrypt(data, settings=enc_settings)
    assert _decrypt(blob, settings=Settings(read_buffer_size=8)) == data
    assert _decrypt(blob, settings=Settings(read_buffer_size=65536)) == data


def test_empty_file_emits_header_only():
    blob = _encrypt(b"")
    assert len(blob) == HEADER_BYTES
    assert blob[4] == 0
    assert _decrypt(blob) == b""


def test_empty_password_roundtrip():
    assert _decrypt(_encrypt(b"hello", password=b""), password=b"") == b"hello"


def test_non_seekable_source_requires_length():
    data = b"streamed input of 29 bytes..."
    with pytest.raises(ValueError):
        encrypt_stream(PASSWORD, _ReadOnly(data), io.BytesIO(), settings=SETTINGS)

    out = io.BytesIO()
    result = encrypt_stream(PASSWORD, _ReadOnly(data), out, length=len(data), settings=SETTINGS)
    assert result.ok and result.bytes_in == len(data)
    assert _decrypt(out.getvalue()) == data


def test_encrypt_from_current_position():
    src = io.BytesIO(b"skip-me|payload")
    src.seek(8)
    out = io.BytesIO()
    encrypt_stream(PASSWORD, src, out, settings=SETTINGS)
    assert _decrypt(out.getvalue()) == b"payload"


def test_source_shorter_than_declared_length():
    with pytest.raises(TruncatedInput):
        encrypt_stream(PASSWORD, io.BytesIO(b"short"), io.BytesIO(), length=20, settings=SETTINGS)


def test_operation_result_counts():
    out = io.BytesIO()
    result = encrypt_stream(PASSWORD, io.BytesIO(bytes(17)), out, settings=SETTINGS)
    assert (result.ok, result.mode, result.chunks) == (True, Mode.ENCRYPT, 3)
    assert result.bytes_out == len(out.getvalue()) == HEADER_BYTES + 24

    dec = io.BytesIO()
    result = decrypt_stream(PASSWORD, io.BytesIO(out.getvalue()), dec, settings=SETTINGS)
    assert (result.ok, result.mode, result.chunks, result.bytes_out) == (True, Mode.DECRYPT, 3, 17)


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("bad", [b"", b"\x01\x02", b"\x00\x02\x03\x04", b"\x01\x02\x03\x05" + bytes(200)])
def test_header_mismatch(bad):
    out = io.BytesIO()
    with pytest.raises(HeaderMismatch):
        decrypt_stream(PASSWORD, io.BytesIO(bad), out, settings=SETTINGS)
    assert out.getvalue() == b""


def test_header_mismatch_via_run_writes_nothing():
    blob = bytearray(_encrypt(b"some data"))
    blob[0] ^= 0xFF
    out = io.BytesIO()
    result = run("decrypt", io.BytesIO(bytes(blob)), out, PASSWORD, settings=SETTINGS)
    assert not result.ok
    assert result.error_kind is ErrorKind.HEADER_MISMATCH
    assert out.getvalue() == b""


def test_invalid_pad_count_is_header_mismatch():
    blob = bytearray(_encrypt(b"12345678"))
    blob[4] = 8
    with pytest.raises(HeaderMismatch):
        _decrypt(bytes(blob))


def test_truncated_header():
    with pytest.raises(TruncatedInput):
        _decrypt(MAGIC + b"\x00" + bytes(10))


def test_truncated_body():
    blob = _encrypt(b"sixteen bytes!!!")
    with pytest.raises(TruncatedInput):
        _decrypt(blob[:-1])
    result = run(Mode.DECRYPT, io.BytesIO(blob[:-3]), io.BytesIO(), PASSWORD, settings=SETTINGS)
    assert result.error_kind is ErrorKind.TRUNCATED_INPUT


def test_padding_announced_without_chunks():
    blob = _encrypt(b"abc")
    with pytest.raises(TruncatedInput):
        _decrypt(blob[:HEADER_BYTES])


def test_wrong_password_gives_wrong_output_without_error():
    data = bytes(range(256)) * 4
    blob = _encrypt(data)
    out = io.BytesIO()
    result = run(Mode.DECRYPT, io.BytesIO(blob), out, b"wrong password", settings=SETTINGS)
    assert result.ok
    assert len(out.getvalue()) == len(data)
    assert out.getvalue() != data


def test_io_failure_is_classified():
    result = run(Mode.ENCRYPT, io.BytesIO(b"data"), _BrokenSink(), PASSWORD, settings=SETTINGS)
    assert not result.ok
    assert result.error_kind is ErrorKind.IO_FAILURE
    assert "disk full" in result.message
    assert result.to_dict()["error_kind"] == "io_failure"


def test_io_failure_propagates_from_stream_api():
    with pytest.raises(OSError):
        encrypt_stream(PASSWORD, io.BytesIO(b"data"), _BrokenSink(), settings=SETTINGS)


def test_run_rejects_unknown_mode():
    with pytest.raises(ValueError):
        run("compress", io.BytesIO(), io.BytesIO(), PASSWORD, settings=SETTINGS)


def test_run_non_seekable_source_without_length():
    out = io.BytesIO()
    result = run(Mode.ENCRYPT, _ReadOnly(b"abc"), out, PASSWORD, settings=SETTINGS)
    assert not result.ok
    assert result.error_kind is ErrorKind.IO_FAILURE
    assert "not seekable" in result.message
    assert out.getvalue() == b""


def test_run_non_seekable_source_with_length():
    data = b"piped from stdin"
    enc = io.BytesIO()
    result = run(Mode.ENCRYPT, _ReadOnly(data), enc, PASSWORD, length=len(data), settings=SETTINGS)
    assert result.ok and result.bytes_in == len(data)
    assert _decrypt(enc.getvalue()) == data


def test_run_roundtrip():
    enc = io.BytesIO()
    assert run("encrypt", io.BytesIO(b"via run"), enc, PASSWORD, settings=SETTINGS).ok
    dec = io.BytesIO()
    result = run("decrypt", io.BytesIO(enc.getvalue()), dec, PASSWORD, settings=SETTINGS)
    assert result.ok and dec.getvalue() == b"via run"
    assert result.summary().startswith("[OK] decrypt")


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def test_file_helpers_roundtrip(tmp_path):
    plain = tmp_path / "plain.bin"
    enc = tmp_path / "plain.bin.enc"
    dec = tmp_path / "plain.out"
    plain.write_bytes(b"file contents " * 50)

    assert encrypt_file(plain, enc, PASSWORD, settings=SETTINGS).ok
    assert enc.read_bytes()[:4] == MAGIC
    assert decrypt_file(enc, dec, PASSWORD, settings=SETTINGS).ok
    assert dec.read_bytes() == plain.read_bytes()


def test_decrypt_file_header_mismatch_creates_no_output(tmp_path):
    bogus = tmp_path / "bogus.bin"
    out = tmp_path / "never.out"
    bogus.write_bytes(b"not an encrypted file at all")
    with pytest.raises(HeaderMismatch):
        decrypt_file(bogus, out, PASSWORD, settings=SETTINGS)
    assert not out.exists()
