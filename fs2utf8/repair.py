# fs2utf8/repair.py

from __future__ import annotations

from .model import RepairResult

_SPACE = 0x20
_TAB = 0x09
_LF = 0x0A
_CR = 0x0D
_NBSP = 0xA0

# legacy Mac Roman bytes with a sensible replacement
_SUBSTITUTIONS = {
    0x8E: 0xAE,        # trademark glyph -> registered sign
    0x90: ord("'"),    # smart quote -> apostrophe
}


def is_whitespace(b: int, severity: int) -> bool:
    """Byte-level class for non-UTF-8 names: space, tab and the Latin-1 NBSP
    byte; CR and LF too from severity 3."""
    if b in (_SPACE, _TAB, _NBSP):
        return True
    return severity > 2 and b in (_CR, _LF)


def _whitespace_chars(severity: int) -> str:
    return " \t\u00a0\r\n" if severity > 2 else " \t\u00a0"


def _fix_utf8_whitespace(text: str, severity: int) -> bytes:
    chars = _whitespace_chars(severity)
    text = text.strip(chars)
    if severity > 1:
        text = "".join(" " if ch in chars else ch for ch in text)
    return text.encode("utf-8")


def _fix_byte_whitespace(name: bytes, severity: int) -> bytes:
    start, end = 0, len(name)
    while start < end and is_whitespace(name[start], severity):
        start += 1
    while end > start and is_whitespace(name[end - 1], severity):
        end -= 1

    body = name[start:end]
    if severity > 1:
        body = bytes(_SPACE if is_whitespace(b, severity) else b for b in body)
    return body


def fix_whitespace(name: bytes, severity: int) -> RepairResult:
    """Trim (and at higher severity, normalize) whitespace in a name.

    Severity 1 strips leading and trailing whitespace. Severity 2 also turns
    every inner whitespace character into a plain space, one for one; runs
    are not merged. Severity 3 widens the whitespace class to CR and LF.
    The result may be empty, which callers must treat as an error.

    NBSP depends on the name's encoding. In a name that decodes as UTF-8 it
    is the pair C2 A0, and a lone A0 continuation byte (the tail of ``à``,
    for instance) is left alone. In any other name it is the Latin-1 byte
    0xA0.

    Args:
        name (bytes): Raw file name.
        severity (int): 0 disables the fix.

    Returns:
        RepairResult: Repaired name and whether it differs from ``name``.
    """
    if severity < 1:
        return RepairResult(name, False)

    try:
        text = name.decode("utf-8")
    except UnicodeDecodeError:
        body = _fix_byte_whitespace(name, severity)
    else:
        body = _fix_utf8_whitespace(text, severity)

    return RepairResult(body, body != name)


def fix_invalid(name: bytes) -> RepairResult:
    """Patch bytes that make a name unclassifiable.

    0x8E and 0x90 get legacy substitutions, C0 controls other than tab,
    CR and LF are dropped, and the rest of 0x7F-0x9F becomes ``?``. The
    output is never longer than the input. An unchanged result means the
    name cannot be fixed this way.
    """
    out = bytearray()
    for b in name:
        if b in _SUBSTITUTIONS:
            out.append(_SUBSTITUTIONS[b])
        elif b in (_TAB, _CR, _LF):
            out.append(b)
        elif 0x01 <= b < _SPACE:
            continue
        elif 0x7F <= b <= 0x9F:
            out.append(ord("?"))
        else:
            out.append(b)

    fixed = bytes(out)
    return RepairResult(fixed, fixed != name)
