# fs2utf8/model.py

from __future__ import annotations
import os
from dataclasses import dataclass
from enum import Enum

from .errors import ErrorKind


class Classification(Enum):
    """Encoding detected for a file name."""
    ASCII = "ASCII"
    UTF8 = "UTF-8"
    LATIN1 = "ISO8859-1"
    UNCLASSIFIED = "Other"


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    DIRECTORY_UNREADABLE = "directory-unreadable"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True)
class Entry:
    """One filesystem object met during the walk."""
    parent: bytes     # directory holding the entry (raw bytes)
    name: bytes       # base name (raw bytes)
    depth: int        # 0 for the root itself
    kind: EntryKind

    @property
    def path(self) -> bytes:
        return os.path.join(self.parent, self.name) if self.parent else self.name


@dataclass(frozen=True)
class RepairResult:
    name: bytes
    changed: bool


@dataclass(frozen=True)
class TranscodeResult:
    """UTF-8 bytes on success, otherwise an error kind and a message."""
    data: bytes | None
    error: ErrorKind | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class RenameStatus(Enum):
    RENAMED = "renamed"
    SKIPPED = "skipped"
    COLLISION = "collision"
    FAILED = "failed"


@dataclass(frozen=True)
class RenameOutcome:
    """Result of a single rename attempt inside one directory."""
    status: RenameStatus
    old: bytes
    new: bytes
    reason: str = ""
    simulated: bool = False    # dry-run: checked but not performed

    @property
    def error(self) -> ErrorKind | None:
        if self.status is RenameStatus.COLLISION:
            return ErrorKind.COLLISION
        if self.status is RenameStatus.FAILED:
            return ErrorKind.EMPTY_NAME if not self.new else ErrorKind.RENAME_FAILURE
        return None


@dataclass
class EntryResult:
    """What the pipeline did with one entry."""
    entry: Entry
    classification: Classification | None = None
    new_name: bytes | None = None
    outcome: RenameOutcome | None = None
    error: ErrorKind | None = None


@dataclass
class Counters:
    """Run-wide tallies, read once for the summary."""
    files: int = 0
    dirs: int = 0
    symlinks: int = 0
    matches: int = 0
    ascii: int = 0
    utf8: int = 0
    latin1: int = 0
    other: int = 0
    renamed: int = 0

    def count_kind(self, kind: EntryKind) -> None:
        if kind is EntryKind.FILE:
            self.files += 1
        elif kind in (EntryKind.DIRECTORY, EntryKind.DIRECTORY_UNREADABLE):
            self.dirs += 1
        elif kind is EntryKind.SYMLINK:
            self.symlinks += 1

    def count_class(self, cls: Classification) -> None:
        if cls is Classification.ASCII:
            self.ascii += 1
        elif cls is Classification.UTF8:
            self.utf8 += 1
        elif cls is Classification.LATIN1:
            self.latin1 += 1
        else:
            self.other += 1
