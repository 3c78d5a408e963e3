"""Errors raised while ingesting transaction files."""

from __future__ import annotations

from enum import Enum


class DecodeReason(str, Enum):
    MALFORMED_SYNTAX = "malformed-syntax"
    NOT_A_BINARY_STRING = "not-a-binary-string"
    MALFORMED_WORKBOOK = "malformed-workbook"


class RepairError(Exception):
    """Base error for this package."""


class UnsupportedFormatError(RepairError):
    """Raised when a file matches none of the recognized formats."""

    def __init__(self, filename: str, media_type: str | None):
        super().__init__(f"unsupported file type {media_type!r} for {filename!r}")
        self.filename = filename
        self.media_type = media_type


class DecodeError(RepairError):
    """Raised when a decoder cannot parse file content.

    Attributes:
        reason: which part of decoding failed.
    """

    def __init__(self, reason: DecodeReason, detail: str = ""):
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


class ReadError(RepairError):
    """Raised when reading an uploaded file did not complete."""


class ReadAbortedError(ReadError):
    """The source stopped delivering content before the read finished."""


class ReadFailedError(ReadError):
    """The read itself failed (I/O error, closed stream, ...)."""
