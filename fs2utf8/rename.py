# fs2utf8/rename.py

from __future__ import annotations
import errno
import logging
import os

from .model import RenameOutcome, RenameStatus

logger = logging.getLogger(__name__)


def rename_in_dir(parent: bytes, old: bytes, new: bytes, dry_run: bool = False) -> RenameOutcome:
    """Rename ``parent/old`` to ``parent/new`` without ever overwriting.

    Unlike a numbered-suffix rename, a taken target is refused outright:
    the caller gets ``COLLISION`` and nothing on disk changes. Anything at
    the target counts, dangling symlinks included. In dry-run mode the
    collision check still runs but the rename is only simulated.

    Args:
        parent (bytes): Directory holding the entry.
        old (bytes): Current base name.
        new (bytes): Wanted base name.
        dry_run (bool): Check only, do not touch the filesystem.

    Returns:
        RenameOutcome: ``RENAMED``, ``SKIPPED`` (no change needed),
        ``COLLISION`` or ``FAILED`` (empty name or OS error).
    """
    if new == old:
        return RenameOutcome(RenameStatus.SKIPPED, old, new, reason="unchanged")
    if not new:
        return RenameOutcome(RenameStatus.FAILED, old, new, reason="would rename to empty name")

    old_path = os.path.join(parent, old)
    new_path = os.path.join(parent, new)
    logger.debug("rename: old=%r new=%r", old_path, new_path)

    if os.path.lexists(new_path):
        return RenameOutcome(RenameStatus.COLLISION, old, new, reason=os.strerror(errno.EEXIST))

    if dry_run:
        return RenameOutcome(RenameStatus.RENAMED, old, new, simulated=True)

    try:
        os.rename(old_path, new_path)
    except OSError as exc:
        return RenameOutcome(RenameStatus.FAILED, old, new, reason=exc.strerror or str(exc))
    return RenameOutcome(RenameStatus.RENAMED, old, new)
