# fs2utf8/pipeline.py

"""
Per-entry pipeline: whitespace fix, classify, repair, transcode, rename.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field

from .classify import classify
from .config import RunConfig
from .errors import ErrorKind
from .model import Classification, Counters, Entry, EntryKind, EntryResult, RenameStatus
from .rename import rename_in_dir
from .repair import fix_invalid, fix_whitespace
from .report import Reporter
from .transcode import Transcoder
from .walk import iter_entries

logger = logging.getLogger(__name__)

# never renamed: the filesystem root and relative roots
_SKIP_NAMES = (b"", b".", b"..")


@dataclass
class RunContext:
    """Everything a run shares: settings, converter, report and counters."""
    config: RunConfig
    transcoder: Transcoder
    report: Reporter
    counters: Counters = field(default_factory=Counters)


def _fail(ctx: RunContext, result: EntryResult, kind: ErrorKind, message: str) -> EntryResult:
    ctx.report.error(result.entry.path, message)
    result.error = kind
    return result


def _candidate_name(ctx: RunContext, result: EntryResult, name: bytes, cls: Classification) -> bytes | None:
    """Repair (if needed) and transcode a non-UTF-8 name. None on failure."""
    if cls is Classification.UNCLASSIFIED:
        fixed = fix_invalid(name)
        if not fixed.changed:
            ctx.report.tagged(result.entry.path, "Unfixable")
            result.error = ErrorKind.UNFIXABLE
            return None
        name = fixed.name
        if not name:
            ctx.report.tagged(result.entry.path, "Empty", level=2)
            _fail(ctx, result, ErrorKind.EMPTY_NAME, ErrorKind.EMPTY_NAME.value)
            return None

    converted = ctx.transcoder.transcode(name)
    if not converted.ok:
        _fail(ctx, result, converted.error,
              f"{converted.error.value} from {ctx.transcoder.charset} to UTF-8: {converted.detail}")
        return None
    if b"/" in converted.data or b"\0" in converted.data:
        _fail(ctx, result, ErrorKind.TRANSCODE_FAILURE,
              f"{ErrorKind.TRANSCODE_FAILURE.value}: result contains a path separator or NUL")
        return None
    return converted.data


def process_entry(ctx: RunContext, entry: Entry) -> EntryResult:
    """Run one walked entry through the pipeline.

    Args:
        ctx (RunContext): Shared run state.
        entry (Entry): Entry yielded by the walk.

    Returns:
        EntryResult: Classification, new name and rename outcome. ``error``
        is set when the entry failed; under error-exit the caller stops.
    """
    cfg, report = ctx.config, ctx.report
    result = EntryResult(entry)

    if entry.kind is EntryKind.OTHER:
        logger.debug("skipping special file %r", entry.path)
        return result
    ctx.counters.count_kind(entry.kind)
    if entry.name in _SKIP_NAMES:
        return result

    name, ws_changed = entry.name, False
    if cfg.whitespace:
        trimmed = fix_whitespace(entry.name, cfg.whitespace)
        name, ws_changed = trimmed.name, trimmed.changed
        if not name:
            report.tagged(entry.path, "Empty", level=2)
            return _fail(ctx, result, ErrorKind.EMPTY_NAME, ErrorKind.EMPTY_NAME.value)

    cls = classify(name)
    ctx.counters.count_class(cls)
    result.classification = cls

    if cls in (Classification.ASCII, Classification.UTF8):
        report.tagged(entry.path, cls.value, level=3)
        if not ws_changed:
            return result
        new_name = name
    else:
        new_name = _candidate_name(ctx, result, name, cls)
        if new_name is None:
            return result

    result.new_name = new_name
    ctx.counters.matches += 1

    if not cfg.fix:
        report.match(entry.path, cls)
        return result

    outcome = rename_in_dir(entry.parent, entry.name, new_name, dry_run=cfg.dry_run)
    result.outcome = outcome
    if outcome.status is RenameStatus.RENAMED:
        ctx.counters.renamed += 1
        report.renamed(entry.parent, entry.name, new_name, cls)
    elif outcome.error is not None:
        return _fail(ctx, result, outcome.error,
                     f"cannot rename to {report.display(new_name)}: {outcome.reason}")
    return result


def scan_root(ctx: RunContext, root: str | bytes) -> bool:
    """Walk one root and process every entry.

    Returns:
        bool: False if the root could not be walked or error-exit stopped
        the run, True otherwise.

    Raises:
        OSError: If writing the report fails. Only errors from the walk
        itself are reported as "walk failed".
    """
    entries = iter_entries(root, ctx.config.max_depth)
    while True:
        try:
            entry = next(entries, None)
        except OSError as exc:
            ctx.report.error(os.fsencode(root), f"walk failed: {exc.strerror or exc}")
            return False
        if entry is None:
            return True

        result = process_entry(ctx, entry)
        if result.error is not None and ctx.config.errexit:
            logger.debug("error-exit: stopping at %r (%s)", entry.path, result.error.name)
            return False
