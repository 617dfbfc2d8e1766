# fs2utf8/report.py

from __future__ import annotations
import os
import sys
from typing import BinaryIO, Optional, TextIO

from .model import Classification, Counters

_ESCAPES = {
    ord("("): b"\\(",
    ord(")"): b"\\)",
    ord('"'): b'\\"',
    ord("'"): b"\\'",
    ord(" "): b"\\ ",
    ord("\t"): b"\\t",
    ord("\n"): b"\\n",
    ord("\r"): b"\\r",
}


def quote_name(name: bytes) -> bytes:
    """Escape a name so that it prints safely on any terminal.

    Quotes, parentheses and whitespace get a backslash, printable ASCII is
    kept, and every other byte becomes a three digit octal escape.
    """
    out = bytearray()
    for b in name:
        if b in _ESCAPES:
            out += _ESCAPES[b]
        elif 0x20 < b <= 0x7E:
            out.append(b)
        else:
            out += b"\\%03o" % b
    return bytes(out)


def _plural(n: int, one: str, many: str) -> str:
    return one if n == 1 else many


def format_summary(c: Counters, dry_run: bool) -> str:
    """Build the one-line end of run summary."""
    scanned = (
        f"{c.matches} match{_plural(c.matches, '', 'es')} "
        f"({c.dirs} director{_plural(c.dirs, 'y', 'ies')}, "
        f"{c.symlinks} symlink{_plural(c.symlinks, '', 's')} & "
        f"{c.files} file{_plural(c.files, '', 's')} scanned)"
    )
    classes = f"{c.ascii} ASCII, {c.utf8} UTF-8, {c.latin1} ISO8859-1, {c.other} Other"
    done = "would be renamed" if dry_run else "renamed"
    return f"{scanned}: {classes}: {c.renamed} {done}"


class Reporter:
    """Writes report lines (raw bytes) and error messages for a run.

    Args:
        stream (BinaryIO): Report destination, stdout or the ``-L`` file.
        quote (bool): Escape names with :func:`quote_name`.
        verbose (int): Reporting verbosity.
        err (TextIO | None): Error stream, ``sys.stderr`` when None.
    """

    def __init__(self, stream: BinaryIO, quote: bool = False, verbose: int = 0,
                 err: Optional[TextIO] = None) -> None:
        self.stream = stream
        self.quote = quote
        self.verbose = verbose
        self._err = err

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def show(self, name: bytes) -> bytes:
        return quote_name(name) if self.quote else name

    def display(self, name: bytes) -> str:
        """Text form of a name for error messages."""
        if self.quote:
            return quote_name(name).decode("ascii")
        return name.decode("utf-8", errors="backslashreplace")

    def _write(self, line: bytes) -> None:
        self.stream.write(line + b"\n")

    def tagged(self, path: bytes, tag: str, level: int = 0) -> None:
        """Write ``path [tag]`` if verbosity is at least ``level``."""
        if self.verbose >= level:
            self._write(self.show(path) + b" [" + tag.encode("ascii") + b"]")

    def match(self, path: bytes, cls: Classification) -> None:
        line = self.show(path)
        if self.verbose > 1:
            line += b" [" + cls.value.encode("ascii") + b"]"
        self._write(line)

    def renamed(self, parent: bytes, old: bytes, new: bytes, cls: Classification) -> None:
        if self.verbose < 1:
            return
        line = self.show(os.path.join(parent, old)) + b" -> " + new
        if self.verbose > 1:
            line += b" [" + cls.value.encode("ascii") + b"]"
        self._write(line)

    def error(self, path: bytes, message: str) -> None:
        print(f"[ERR] {self.display(path)}: {message}", file=self.err)

    def flush(self) -> None:
        self.stream.flush()
