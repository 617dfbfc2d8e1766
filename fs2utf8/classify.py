# fs2utf8/classify.py

from __future__ import annotations
import logging

from .model import Classification

logger = logging.getLogger(__name__)

# --- byte ranges ----------------------------------------------------------------

_PRINTABLE_LO = 0x20   # space
_PRINTABLE_HI = 0x7E   # tilde

# C1 controls plus NBSP; Latin-1 glyphs start at 0xA1
_LATIN1_EXCLUDED_LO = 0x7F
_LATIN1_EXCLUDED_HI = 0xA0

# (mask, pattern, continuation bytes) for legal UTF-8 lead bytes
_UTF8_LEADS = (
    (0xE0, 0xC0, 1),   # 110xxxxx
    (0xF0, 0xE0, 2),   # 1110xxxx
    (0xF8, 0xF0, 3),   # 11110xxx
)


def _is_printable(b: int) -> bool:
    return _PRINTABLE_LO <= b <= _PRINTABLE_HI


def _is_continuation(b: int) -> bool:
    return b & 0xC0 == 0x80


def _is_illegal_utf8(b: int) -> bool:
    """Bytes that never appear in UTF-8 limited to U+10FFFF (overlong leads, 0xF5+)."""
    return b in (0xC0, 0xC1) or b >= 0xF5


def _continuation_count(lead: int) -> int | None:
    for mask, pattern, count in _UTF8_LEADS:
        if lead & mask == pattern:
            return count
    return None


# --- public API -----------------------------------------------------------------


def is_ascii(name: bytes) -> bool:
    """True if every byte is printable ASCII (0x20-0x7E)."""
    return all(_is_printable(b) for b in name)


def is_iso8859_1(name: bytes) -> bool:
    """True if no byte is a C0 control or falls in 0x7F-0xA0.

    Bytes 0xA1 and up are taken as Latin-1 supplement glyphs without
    further checks.
    """
    for b in name:
        if b < _PRINTABLE_LO or _LATIN1_EXCLUDED_LO <= b <= _LATIN1_EXCLUDED_HI:
            return False
    return True


def is_utf8(name: bytes) -> bool:
    """Validate ``name`` as UTF-8 with printable ASCII as the single-byte subset.

    The state machine has two states: waiting for a lead byte, and waiting
    for ``remaining`` continuation bytes (10xxxxxx). Sequences are at most
    four bytes long. Lead bytes for the obsolete five and six byte forms
    (0xF8-0xFD) are caught by the illegal byte check along with 0xC0, 0xC1
    and everything from 0xF5 up. A string that ends inside a sequence is
    rejected.

    Args:
        name (bytes): Raw file name.

    Returns:
        bool: True if the whole string is valid.
    """
    remaining = 0

    for pos, b in enumerate(name):
        if _is_illegal_utf8(b):
            logger.debug("is_utf8: illegal byte 0x%02x at %d", b, pos)
            return False

        if remaining == 0:
            if _is_printable(b):
                continue
            count = _continuation_count(b)
            if count is None:
                logger.debug("is_utf8: bad lead byte 0x%02x at %d", b, pos)
                return False
            remaining = count
            continue

        if not _is_continuation(b):
            logger.debug("is_utf8: bad continuation byte 0x%02x at %d", b, pos)
            return False
        remaining -= 1

    if remaining:
        logger.debug("is_utf8: truncated sequence at end (%d byte(s) missing)", remaining)
        return False

    return True


def classify(name: bytes) -> Classification:
    """Classify a name, trying ASCII, then UTF-8, then ISO8859-1."""
    if is_ascii(name):
        return Classification.ASCII
    if is_utf8(name):
        return Classification.UTF8
    if is_iso8859_1(name):
        return Classification.LATIN1
    return Classification.UNCLASSIFIED
