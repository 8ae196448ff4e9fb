#!/usr/bin/env python3
"""
lc2kit — LC-2K Assembly Toolkit
===============================

One CLI for everything:
    lc2kit check   — Report warnings for LC-2K source files
    lc2kit fmt     — Align source lines on tab-stop columns
    lc2kit labels  — Dump the label table of a source file

Usage:
    python lc2kit.py <command> [options]
    python lc2kit.py --help
    python lc2kit.py <command> --help

Examples:
    python lc2kit.py check count5.as
    python lc2kit.py check *.as --format json
    python lc2kit.py fmt count5.as --in-place
    python lc2kit.py fmt count5.as --check --tab-stops 8,16,24,32
    python lc2kit.py labels count5.as

Settings are read from lc2k.json (searched upward from the current
directory) or from --config; --tab-stops and --comment-token override both.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

__version__ = "0.3.0"

# Ensure our package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from lc2k_lint import Analyzer, Document, LintConfig, ConfigError, load_config, find_config
from lc2k_lint.formatter import apply_edits, format_document

logger = logging.getLogger("lc2kit")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="lc2kit",
        description="LC-2K Toolkit — check and format LC-2K assembly",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  check      Report warnings for LC-2K source files
  fmt        Align source lines on tab-stop columns
  labels     Dump the label table of a source file
""",
    )
    parser.add_argument("--version", action="version", version=f"lc2kit {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="JSON settings file (default: nearest lc2k.json)")
    common.add_argument("--comment-token", default=None,
                        help="End-of-line comment token (default: #)")
    common.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v, -vv)")
    common.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress all output except errors")
    common.add_argument("--log-file", help="Write log to file")

    # ── check ────────────────────────────────────────────────────────────
    p_chk = sub.add_parser("check", parents=[common], help="Report warnings for source files")
    p_chk.add_argument("inputs", nargs="+", help="Input .as files")
    p_chk.add_argument("--format", choices=["text", "json"], default="text",
                       help="Report format (default: text)")
    p_chk.add_argument("--strict", action="store_true",
                       help="Exit with status 1 if any warning is reported")

    # ── fmt ──────────────────────────────────────────────────────────────
    p_fmt = sub.add_parser("fmt", parents=[common], help="Align source lines on tab stops")
    p_fmt.add_argument("inputs", nargs="+", help="Input .as files")
    p_fmt.add_argument("--tab-stops", type=_parse_stops, default=None,
                       help="Comma-separated tab stops (default: 8,16,24,40)")
    mode = p_fmt.add_mutually_exclusive_group()
    mode.add_argument("-i", "--in-place", action="store_true", help="Rewrite files in place")
    mode.add_argument("--check", action="store_true",
                      help="Exit with status 1 if any file would be reformatted")

    # ── labels ───────────────────────────────────────────────────────────
    p_lbl = sub.add_parser("labels", parents=[common], help="Dump the label table")
    p_lbl.add_argument("input", help="Input .as file")

    # ── Parse and dispatch ───────────────────────────────────────────────
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose, args.quiet, args.log_file)

    try:
        config = _resolve_config(args)
        handler = COMMANDS[args.command]
        return handler(args, config)
    except ConfigError as e:
        logger.error("Config error: %s", e)
        return 1
    except SourceError as e:
        logger.error("Source error: %s", e)
        return 1
    except OSError as e:
        logger.error("Error: %s", e)
        return 1
    except Exception as e:
        logger.error("Internal error: %s", e, exc_info=args.verbose > 0)
        return 2


def setup_logging(verbose=0, quiet=False, log_file=None):
    """Configure the root logger for console (and optional file) output."""
    if quiet:
        level = logging.ERROR
    elif verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # -vv or more
        level = logging.DEBUG

    handlers = []
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    handlers.append(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        handlers=handlers,
        force=True
    )


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

def _parse_stops(s):
    """Parse '8,16,24,40' into a list of ints."""
    try:
        stops = [int(part) for part in s.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"tab stops must be integers: {s!r}")
    if not stops or any(stop <= 0 for stop in stops):
        raise argparse.ArgumentTypeError(f"tab stops must be positive: {s!r}")
    return stops


def _resolve_config(args):
    if args.config:
        config = load_config(args.config)
    else:
        found = find_config()
        config = load_config(found) if found else LintConfig()
        if found:
            logger.info("Using settings from %s", found)
    return config.merged(tab_stops=getattr(args, "tab_stops", None),
                         comment_token=args.comment_token)


class SourceError(Exception):
    """Raised when a source file cannot be decoded as UTF-8 text."""


def _read_source(path):
    """Read *path* untranslated, returning (text, line terminator)."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            source = f.read()
    except UnicodeDecodeError as e:
        raise SourceError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})")
    eol = "\r\n" if "\r\n" in source else "\n"
    return source, eol


# ── check ────────────────────────────────────────────────────────────────
def cmd_check(args, config):
    analyzer = Analyzer(config)
    report = {}
    total = 0
    for path in args.inputs:
        source, _ = _read_source(path)
        doc = Document.from_text(path, source)
        diagnostics = analyzer.run(doc.lines).diagnostics
        report[path] = diagnostics
        total += len(diagnostics)
        logger.info("%s: %d line(s), %d warning(s)", path, doc.line_count, len(diagnostics))

    if args.format == "json":
        data = {path: [d.to_dict() for d in diags] for path, diags in report.items()}
        print(json.dumps(data, indent=2, ensure_ascii=False))
    elif not args.quiet:
        for path, diags in report.items():
            for d in diags:
                print(d.format(path))
        if total:
            print(f"{total} warning(s) in {len(report)} file(s)", file=sys.stderr)

    return 1 if (args.strict and total) else 0


# ── fmt ──────────────────────────────────────────────────────────────────
def cmd_fmt(args, config):
    changed_files = 0
    for path in args.inputs:
        source, eol = _read_source(path)
        doc = Document.from_text(path, source)
        edits = format_document(doc, config.tab_stops, config.comment_token)
        if edits:
            changed_files += 1

        if args.check:
            if edits:
                print(f"would reformat {path} ({len(edits)} line(s))")
            continue

        # stdout is a text stream and translates "\n" itself
        sep = eol if args.in_place else "\n"
        text = sep.join(apply_edits(doc.lines, edits))
        if source.endswith("\n"):
            text += sep

        if args.in_place:
            if edits:
                with open(path, "w", encoding="utf-8", newline="") as f:
                    f.write(text)
                logger.info("Reformatted %s (%d line(s))", path, len(edits))
        else:
            sys.stdout.write(text)

    if args.check:
        return 1 if changed_files else 0
    return 0


# ── labels ───────────────────────────────────────────────────────────────
def cmd_labels(args, config):
    source, _ = _read_source(args.input)
    doc = Document.from_text(args.input, source)
    result = Analyzer(config).run(doc.lines)
    if not result.labels:
        print("(no labels)")
        return 0
    width = max(len(name) for name in result.labels)
    for name, index in result.labels.items():
        print(f"{name:<{width}}  line {index + 1}")
    return 0


COMMANDS = {
    "check": cmd_check,
    "fmt": cmd_fmt,
    "labels": cmd_labels,
}


if __name__ == "__main__":
    sys.exit(main())
