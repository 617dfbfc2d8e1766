# fs2utf8/config.py

from __future__ import annotations
import argparse
import json
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .transcode import DEFAULT_CHARSET, DEFAULT_MAX_BYTES

DEFAULT_CONFIG_NAME = "fs2utf8.json"
MAX_WHITESPACE_SEVERITY = 3

_INT_FIELDS = ("debug", "verbose", "whitespace", "max_name_bytes", "max_depth")
_BOOL_FIELDS = ("dry_run", "errexit", "quote", "fix", "hex")
_STR_FIELDS = ("charset", "log")
_OPTIONAL_FIELDS = ("log", "max_depth")   # null allowed
_MINIMUMS = {"debug": 0, "verbose": 0, "max_name_bytes": 1, "max_depth": 1}


@dataclass
class RunConfig:
    """Effective settings for one run."""
    debug: int = 0
    verbose: int = 0
    dry_run: bool = False
    errexit: bool = False
    whitespace: int = 0            # 0 = off, 1-3 = severity
    quote: bool = False
    fix: bool = False
    charset: str = DEFAULT_CHARSET
    log: Optional[str] = None      # None = stdout
    hex: bool = False
    max_name_bytes: int = DEFAULT_MAX_BYTES
    max_depth: Optional[int] = None


def load_config(path: Path | None) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path (Path | None): Path to the JSON configuration file.

    Returns:
        Dict[str, Any]: Configuration dictionary. Empty if no file is provided or read fails.
    """
    if not path:
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        print(f"[WARN] Failed to read config {path}: {exc}", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        print(f"[WARN] Ignoring config {path}: top level must be an object", file=sys.stderr)
        return {}
    return data


def default_config_path(args: argparse.Namespace) -> Path | None:
    """Config named with -C, else fs2utf8.json in the working directory if present."""
    if args.config:
        return Path(args.config)
    candidate = Path.cwd() / DEFAULT_CONFIG_NAME
    return candidate if candidate.exists() else None


def _coerce(key: str, value: Any) -> Any:
    """Check one JSON value against its field type. Raises ValueError if unusable."""
    if value is None and key in _OPTIONAL_FIELDS:
        return None
    if key in _INT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"expected an integer, got {value!r}")
        number = int(value)
        if number < _MINIMUMS.get(key, number):
            raise ValueError(f"must be at least {_MINIMUMS[key]}, got {number}")
        return number
    if key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ValueError(f"expected true or false, got {value!r}")
        return value
    if key in _STR_FIELDS and not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def merge_config(file_cfg: Dict[str, Any], args: argparse.Namespace) -> RunConfig:
    """Combine JSON settings with CLI flags, giving precedence to the flags."""
    known = {f.name for f in fields(RunConfig)}
    unknown = sorted(set(file_cfg) - known)
    if unknown:
        print(f"[WARN] Unknown config keys ignored: {', '.join(unknown)}", file=sys.stderr)

    values = {}
    for key in sorted(known & set(file_cfg)):
        try:
            values[key] = _coerce(key, file_cfg[key])
        except ValueError as exc:
            print(f"[WARN] Ignoring config {key}: {exc}", file=sys.stderr)
    cfg = RunConfig(**values)

    cfg.debug = args.debug or cfg.debug
    cfg.verbose = args.verbose or cfg.verbose
    cfg.dry_run = bool(args.dry_run or cfg.dry_run)
    cfg.errexit = bool(args.errexit or cfg.errexit)
    cfg.whitespace = min(MAX_WHITESPACE_SEVERITY, max(0, int(args.whitespace or cfg.whitespace)))
    cfg.quote = bool(args.quote or cfg.quote)
    cfg.fix = bool(args.fix or cfg.fix)
    cfg.hex = bool(args.hex or cfg.hex)
    cfg.charset = args.charset or cfg.charset
    cfg.log = args.log or cfg.log
    return cfg
