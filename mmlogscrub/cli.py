"""Command-line entry point for scrubbing Mattermost log files."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from mmlogscrub.scrubber import Scrubber

VERSION = "0.3.1"
PROGRAM_NAME = "mattermost-log-scrubber"

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class _FlagError(Exception):
    """Raised when the command line cannot be parsed."""


@dataclass
class _Options:
    input_short: str = ""
    input_long: str = ""
    output_short: str = ""
    output_long: str = ""
    level_short: int = 0
    level_long: int = 0
    dry_run: bool = False
    verbose_short: bool = False
    verbose_long: bool = False
    audit_short: str = ""
    audit_long: str = ""
    version: bool = False
    help_short: bool = False
    help_long: bool = False


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError("parse error")


def _parse_int(text: str) -> int:
    body = text.lstrip("+-")
    sign = -1 if text.startswith("-") else 1
    if not body or body != text[len(text) - len(body):] or len(text) - len(body) > 1:
        raise ValueError("parse error")
    try:
        if len(body) > 1 and body[0] == "0" and body[1].isdigit():
            value = int(body.replace("_", ""), 8)
        else:
            value = int(body, 0)
    except ValueError:
        raise ValueError("parse error") from None
    value *= sign
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError("value out of range")
    return value


def _parse_str(text: str) -> str:
    return text


_FLAGS: Dict[str, Tuple[str, Callable[[str], object]]] = {
    "i": ("input_short", _parse_str),
    "input": ("input_long", _parse_str),
    "o": ("output_short", _parse_str),
    "output": ("output_long", _parse_str),
    "l": ("level_short", _parse_int),
    "level": ("level_long", _parse_int),
    "dry-run": ("dry_run", _parse_bool),
    "v": ("verbose_short", _parse_bool),
    "verbose": ("verbose_long", _parse_bool),
    "a": ("audit_short", _parse_str),
    "audit": ("audit_long", _parse_str),
    "version": ("version", _parse_bool),
    "h": ("help_short", _parse_bool),
    "help": ("help_long", _parse_bool),
}


def _parse_args(args: Sequence[str]) -> _Options:
    """Parse single- or double-dash flags; stops at the first non-flag."""
    options = _Options()
    pending: List[str] = list(args)
    while pending:
        arg = pending[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        pending.pop(0)
        name = arg[1:]
        if name.startswith("-"):
            name = name[1:]
            if not name:
                break
        if not name or name.startswith("-") or name.startswith("="):
            raise _FlagError(f"bad flag syntax: {arg}")

        value: Optional[str] = None
        if "=" in name:
            name, value = name.split("=", 1)

        spec = _FLAGS.get(name)
        if spec is None:
            raise _FlagError(f"flag provided but not defined: -{name}")
        attr, convert = spec

        if convert is _parse_bool:
            text = "true" if value is None else value
        elif value is not None:
            text = value
        elif pending:
            text = pending.pop(0)
        else:
            raise _FlagError(f"flag needs an argument: -{name}")

        try:
            setattr(options, attr, convert(text))
        except ValueError as exc:
            raise _FlagError(f'invalid value "{text}" for flag -{name}: {exc}') from None
    return options


def _usage(prog: str, stream: TextIO) -> None:
    stream.write(
        f"Usage: {prog} [options]\n\n"
        "An application that scrubs identifying information from Mattermost log files.\n\n"
        "Required flags:\n"
        "  -i, --input string    Input log file path\n"
        "  -l, --level int       Scrubbing level (1, 2, or 3)\n\n"
        "Optional flags:\n"
        "  -o, --output string   Output file path (default: <input>_scrubbed.<ext>)\n"
        "  -a, --audit string    Audit file path for tracking mappings (default: <input>_audit.csv)\n"
        "  --dry-run             Preview changes without writing output\n"
        "  -v, --verbose         Verbose output\n"
        "  --version             Show version and exit\n"
        "  -h, --help            Show this help message\n\n"
        "Examples:\n"
        f"  {prog} -i mattermost.log -l 1\n"
        f"  {prog} --input mattermost.log --level 2 --output clean.log\n"
        f"  {prog} -i mattermost.log -l 3 --dry-run --verbose\n"
    )


def _split_ext(path: str) -> Tuple[str, str]:
    """Split off the extension of the last path element, dot included."""
    separators = {os.sep, "/"}
    if os.altsep:
        separators.add(os.altsep)
    for index in range(len(path) - 1, -1, -1):
        char = path[index]
        if char in separators:
            break
        if char == ".":
            return path[:index], path[index:]
    return path, ""


def default_output_path(input_path: str) -> str:
    """Return '<base>_scrubbed<ext>' for the given input path."""
    base, ext = _split_ext(input_path)
    return base + "_scrubbed" + ext


def default_audit_path(input_path: str) -> str:
    """Return '<base>_audit.csv' for the given input path."""
    base, _ = _split_ext(input_path)
    return base + "_audit.csv"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the scrubber from the command line and return the exit status."""
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else PROGRAM_NAME
    args = list(sys.argv[1:] if argv is None else argv)
    out, err = sys.stdout, sys.stderr

    try:
        options = _parse_args(args)
    except _FlagError as exc:
        err.write(f"{exc}\n")
        _usage(prog, err)
        return 2

    if options.help_short or options.help_long:
        _usage(prog, err)
        return 0

    if options.version:
        out.write(f"{PROGRAM_NAME} v{VERSION}\n")
        return 0

    input_path = options.input_short or options.input_long
    output_path = options.output_short or options.output_long
    level = options.level_short if options.level_short != 0 else options.level_long
    verbose = options.verbose_short or options.verbose_long
    audit_path = options.audit_short or options.audit_long

    if not input_path:
        err.write("Error: Input file path is required\n\n")
        _usage(prog, err)
        return 1

    if not 1 <= level <= 3:
        err.write("Error: Scrubbing level must be 1, 2, or 3\n\n")
        _usage(prog, err)
        return 1

    try:
        os.stat(input_path)
    except FileNotFoundError:
        err.write(f"Error: Input file '{input_path}' does not exist\n")
        return 1
    except OSError:
        pass

    if not output_path:
        output_path = default_output_path(input_path)
    if not audit_path:
        audit_path = default_audit_path(input_path)

    out.write(f"Input file: {input_path}\n")
    out.write(f"Output file: {output_path}\n")
    out.write(f"Audit file: {audit_path}\n")
    out.write(f"Scrubbing level: {level}\n")
    out.write(f"Dry run: {'true' if options.dry_run else 'false'}\n")

    scrubber = Scrubber(level=level, verbose=verbose)

    try:
        scrubber.process_file(input_path, output_path, options.dry_run)
    except OSError as exc:
        err.write(f"Error processing file: {exc}\n")
        return 1

    if not options.dry_run:
        try:
            scrubber.write_audit_file(audit_path)
        except OSError as exc:
            err.write(f"Error writing audit file: failed to create audit file: {exc}\n")
            return 1

    if options.dry_run:
        out.write("Dry run completed successfully. No files were modified.\n")
    else:
        out.write(f"Log scrubbing completed successfully. Output written to: {output_path}\n")
        out.write(f"Audit log written to: {audit_path}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())