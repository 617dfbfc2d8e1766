# fs2utf8/walk.py

from __future__ import annotations
import logging
import os
import stat
from typing import Iterator, List, Optional, Tuple

from .model import Entry, EntryKind

try:
    import resource
except ImportError:  # not available on Windows
    resource = None

logger = logging.getLogger(__name__)

DEPTH_MARGIN = 32
MAX_DEPTH_CAP = 4096
DEFAULT_DESCRIPTORS = 1024

_SEP = os.fsencode(os.sep)


def descriptor_depth_limit(margin: int = DEPTH_MARGIN) -> int:
    """Return the walk depth allowed by the open-file budget.

    Raises the soft RLIMIT_NOFILE to the hard limit where permitted, then
    keeps ``margin`` descriptors in reserve.
    """
    if resource is None:
        budget = DEFAULT_DESCRIPTORS
    else:
        soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
        if soft != hard:
            try:
                resource.setrlimit(resource.RLIMIT_NOFILE, (hard, hard))
                soft = hard
            except (ValueError, OSError) as exc:
                logger.debug("setrlimit(RLIMIT_NOFILE, %s): %s", hard, exc)
        budget = MAX_DEPTH_CAP + margin if soft == resource.RLIM_INFINITY else soft
    return max(1, min(MAX_DEPTH_CAP, budget - margin))


def _kind_of_mode(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


def _kind_of_dirent(de: os.DirEntry) -> EntryKind:
    try:
        if de.is_symlink():
            return EntryKind.SYMLINK
        if de.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if de.is_file(follow_symlinks=False):
            return EntryKind.FILE
    except OSError as exc:
        logger.debug("cannot stat %r: %s", de.path, exc)
    return EntryKind.OTHER


def _list_dir(path: bytes) -> Optional[List[Tuple[bytes, EntryKind]]]:
    """Read a directory in one go so no descriptor stays open during the walk."""
    try:
        with os.scandir(path) as it:
            children = [(de.name, _kind_of_dirent(de)) for de in it]
    except OSError as exc:
        logger.warning("cannot read directory %r: %s", path, exc.strerror or exc)
        return None
    children.sort()
    return children


def _split_root(root: bytes) -> Tuple[bytes, bytes]:
    stripped = root.rstrip(_SEP) or root
    return os.path.split(stripped)


def iter_entries(root: str | bytes, max_depth: int | None = None) -> Iterator[Entry]:
    """Walk ``root`` depth-first, yielding each entry after its contents.

    Symbolic links are reported but never followed. Every directory is
    listed before any of its children is yielded, so renaming a child (or a
    finished subdirectory) does not disturb the rest of the walk. The root
    itself comes last. Directories that cannot be read are yielded as
    ``DIRECTORY_UNREADABLE``. Directories at ``max_depth`` are yielded but
    not entered.

    Args:
        root (str | bytes): Directory (or single entry) to walk.
        max_depth (int | None): Deepest level to enter, None for no limit.

    Yields:
        Entry: Entries in post-order.

    Raises:
        OSError: If ``root`` itself cannot be stat'ed.
    """
    root = os.fsencode(root)
    kind = _kind_of_mode(os.lstat(root).st_mode)
    parent, name = _split_root(root)

    if kind is not EntryKind.DIRECTORY:
        yield Entry(parent, name, 0, kind)
        return

    children = _list_dir(root)
    if children is None:
        yield Entry(parent, name, 0, EntryKind.DIRECTORY_UNREADABLE)
        return

    stack = [(Entry(parent, name, 0, EntryKind.DIRECTORY), root, iter(children))]
    while stack:
        dir_entry, dir_path, pending = stack[-1]
        depth = dir_entry.depth + 1

        for child_name, child_kind in pending:
            if child_kind is EntryKind.DIRECTORY:
                if max_depth is not None and depth >= max_depth:
                    logger.warning("not descending into %r: depth limit %d reached",
                                   os.path.join(dir_path, child_name), max_depth)
                    yield Entry(dir_path, child_name, depth, child_kind)
                    continue

                child_path = os.path.join(dir_path, child_name)
                grandchildren = _list_dir(child_path)
                if grandchildren is None:
                    yield Entry(dir_path, child_name, depth, EntryKind.DIRECTORY_UNREADABLE)
                    continue

                stack.append((Entry(dir_path, child_name, depth, child_kind),
                              child_path, iter(grandchildren)))
                break

            yield Entry(dir_path, child_name, depth, child_kind)
        else:
            stack.pop()
            yield dir_entry
