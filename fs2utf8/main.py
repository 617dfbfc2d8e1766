# fs2utf8/main.py

"""
Orchestrator: read params (JSON + CLI), walk directories, classify each name,
report it and, in fix mode, rename it to UTF-8.
"""
from __future__ import annotations
import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from .config import RunConfig, default_config_path, load_config, merge_config
from .errors import ConverterUnavailable
from .pipeline import RunContext, scan_root
from .report import Reporter, format_summary
from .transcode import Transcoder
from .walk import descriptor_depth_limit

try:
    __version__ = version("fs2utf8")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0+unknown"

logger = logging.getLogger("fs2utf8")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    p = argparse.ArgumentParser(
        prog="fs2utf8",
        description="Find (and optionally fix) file names that are not ASCII or UTF-8.",
    )
    p.add_argument("-d", dest="debug", action="count", default=0, help="Debug mode (repeat for more).")
    p.add_argument("-v", dest="verbose", action="count", default=0, help="Increase verbosity level.")
    p.add_argument("-n", dest="dry_run", action="store_true", help="No-modify mode: only simulate renames.")
    p.add_argument("-e", dest="errexit", action="store_true", help="Abort on the first error.")
    p.add_argument("-s", dest="whitespace", action="count", default=0,
                   help="Remove whitespace (1=leading/trailing SPC/TAB/NBSP, 2=internal, 3=also CR/LF).")
    p.add_argument("-q", dest="quote", action="store_true",
                   help="Print nonprintable characters as \\octal or \\char.")
    p.add_argument("-F", dest="fix", action="store_true", help="Find-and-fix mode (default is find only).")
    p.add_argument("-S", dest="charset", metavar="CHARSET", help="Source charset (default: ISO8859-1).")
    p.add_argument("-L", dest="log", metavar="FILE", help="Log file (default: stdout).")
    p.add_argument("-C", dest="config", metavar="FILE", help="Optional JSON config (flags override).")
    p.add_argument("-x", dest="hex", action="store_true", help="With -d, dump names in hex before and after conversion.")
    p.add_argument("-V", dest="version", action="store_true", help="Print version and continue.")
    p.add_argument("dirs", nargs="*", metavar="DIR", help="Directories to scan.")
    return p.parse_args(argv)


def _setup_logging(debug: int) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_context(cfg: RunConfig) -> RunContext:
    """Open the converter and the report destination. Raises on fatal setup errors."""
    transcoder = Transcoder(cfg.charset, cfg.max_name_bytes, hex_dump=cfg.hex and cfg.debug > 0)
    stream = open(cfg.log, "wb") if cfg.log else sys.stdout.buffer
    return RunContext(cfg, transcoder, Reporter(stream, quote=cfg.quote, verbose=cfg.verbose))


def main(argv: Optional[List[str]] = None) -> int:
    """Main orchestration function.

    Returns:
        int: Exit code.
    """
    args = parse_args(argv)
    cfg = merge_config(load_config(default_config_path(args)), args)
    _setup_logging(cfg.debug)

    if args.version:
        print(f"[fs2utf8, version {__version__}]", flush=True)
    if not args.dirs:
        if args.version:
            return 0
        print("[ERR] At least one directory is required (use -h for help).", file=sys.stderr)
        return 2

    if cfg.max_depth is None:
        cfg.max_depth = descriptor_depth_limit()

    try:
        ctx = _build_context(cfg)
    except ConverterUnavailable as exc:
        print(f"[ERR] {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"[ERR] Cannot open log file {cfg.log}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    ok = True
    try:
        for root in args.dirs:
            logger.info("scanning %s", root)
            if not scan_root(ctx, root):
                ok = False
                break
        ctx.report.flush()
    except OSError as exc:
        print(f"[ERR] Cannot write report {cfg.log or 'stdout'}: {exc.strerror or exc}", file=sys.stderr)
        ok = False
    finally:
        if cfg.log:
            try:
                ctx.report.stream.close()
            except OSError as exc:
                logger.debug("closing %s: %s", cfg.log, exc)

    print(format_summary(ctx.counters, cfg.dry_run), file=sys.stderr)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
