"""Error classification for primitives and the file pipeline.

Every failure the core can report maps to one ``ErrorKind``. Stream I/O
errors are not wrapped: ``OSError`` propagates as-is and is classified as
``ErrorKind.IO_FAILURE`` only at the ``run()`` boundary.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    HEADER_MISMATCH = "header_mismatch"
    KEY_LENGTH_VIOLATION = "key_length_violation"
    TRUNCATED_INPUT = "truncated_input"
    IO_FAILURE = "io_failure"


class CubeCryptError(Exception):
    """Base class for all errors raised by cubecrypt."""

    kind: ErrorKind


class HeaderMismatch(CubeCryptError):
    """Input does not start with a valid cubecrypt header."""

    kind = ErrorKind.HEADER_MISMATCH


class KeyLengthViolation(CubeCryptError, ValueError):
    """A primitive was called with a key or block of the wrong size."""

    kind = ErrorKind.KEY_LENGTH_VIOLATION


class TruncatedInput(CubeCryptError):
    """Ciphertext ends before a complete header or chunk was read."""

    kind = ErrorKind.TRUNCATED_INPUT
