# fs2utf8/errors.py

from __future__ import annotations
from enum import Enum


class ErrorKind(Enum):
    """Per-entry failures. Local to one entry unless error-exit is set."""
    TRANSCODE_FAILURE = "unable to convert name"
    OUTPUT_TOO_LARGE = "converted name too large"
    COLLISION = "target already exists"
    EMPTY_NAME = "would rename to empty name"
    UNFIXABLE = "unfixable name"
    RENAME_FAILURE = "rename failed"


class ConverterUnavailable(Exception):
    """The requested source charset cannot be converted to UTF-8."""

    def __init__(self, charset: str, reason: str = "unknown encoding") -> None:
        super().__init__(f"cannot convert from {charset!r} to 'UTF-8': {reason}")
        self.charset = charset
