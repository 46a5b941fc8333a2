"""
NHA Assembler – command-line interface
======================================

Usage
-----
::

    python -m nha_assembler.cli SOURCE.nha [OPTIONS]

Options
-------
--output, -o          Output file path (default: SOURCE with a .bin suffix;
                      ``-`` writes to stdout).
--strict              Abort the run at the first malformed instruction.
--keep-duplicates     Emit repeated instructions instead of dropping them.
--expect FILE         Compare the output with an expected .bin listing.
--report FILE         Write a per-line JSON report of what was dropped and why.
--verbose, -v         Enable DEBUG logging.

Examples
--------
::

    python -m nha_assembler.cli add.nha
    python -m nha_assembler.cli add.nha -o - --strict
    python -m nha_assembler.cli add.nha --expect add.expected.bin
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .models import (
    DUPLICATE,
    MALFORMED,
    NO_OUTPUT,
    AssemblerError,
    AssemblerIOError,
    MalformedInstructionError,
    TranslationResult,
)
from .output import diff_report
from .pipeline.translator import ProgramTranslator

SOURCE_SUFFIX = ".nha"
OUTPUT_SUFFIX = ".bin"


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nha_assembler",
        description="NHA Assembler – translate .nha source into 16-bit binary words",
    )
    p.add_argument("source", help="NHA source file to assemble (*.nha)")
    p.add_argument(
        "--output", "-o",
        default="",
        metavar="FILE",
        help="Output file (default: SOURCE with a .bin suffix; '-' for stdout)",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Abort at the first malformed instruction instead of skipping it",
    )
    p.add_argument(
        "--keep-duplicates",
        action="store_true",
        help="Emit every instruction, even when the same text appeared before",
    )
    p.add_argument(
        "--expect",
        default="",
        metavar="FILE",
        help="Compare the produced words with FILE and report differences",
    )
    p.add_argument(
        "--report",
        default="",
        metavar="FILE",
        help="Write a JSON report with the outcome of every source line to FILE",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return p


def default_output_path(source: str) -> str:
    """``prog.nha`` → ``prog.bin`` next to the source."""
    return str(Path(source).with_suffix(OUTPUT_SUFFIX))


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.source.endswith(SOURCE_SUFFIX):
        print(f"error: unrecognised command or file type: {args.source}", file=sys.stderr)
        return 2

    translator = ProgramTranslator(
        deduplicate=not args.keep_duplicates,
        strict=args.strict,
    )
    output = args.output or default_output_path(args.source)

    try:
        if output == "-":
            result = translator.translate_into(translator.read_source(args.source), sys.stdout)
        else:
            result = translator.translate_file(args.source, output)
            print(f"Output written to {output}", file=sys.stderr)
    except MalformedInstructionError as exc:
        print(f"error: {args.source}: {exc}", file=sys.stderr)
        return 1
    except AssemblerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        _report_dropped(result, args.report)
    except AssemblerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.expect:
        return _check_expected(result, args.expect)
    return 0


# ---------------------------------------------------------------------------
# Helpers: dropped-line summary and expected-output comparison
# ---------------------------------------------------------------------------

def _report_dropped(result: TranslationResult, log_file: str) -> None:
    """Print a dropped-line summary to stderr and optionally write a JSON log."""
    dropped = result.dropped()
    if dropped:
        print(
            f"{len(result.words)} word(s) written, {len(dropped)} line(s) dropped: "
            f"{result.count(MALFORMED)} malformed, {result.count(NO_OUTPUT)} "
            f"not encodable, {result.count(DUPLICATE)} repeated "
            f"(use --verbose for details)",
            file=sys.stderr,
        )

    if log_file:
        log_data = {
            "word_count": len(result.words),
            "dropped_count": len(dropped),
            "lines": [o.to_dict() for o in result.outcomes],
        }
        try:
            Path(log_file).write_text(json.dumps(log_data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise AssemblerIOError(log_file, exc.strerror or str(exc)) from exc
        print(f"  Line report written to: {log_file}", file=sys.stderr)


def _check_expected(result: TranslationResult, expected_path: str) -> int:
    try:
        expected = diff_report.load_expected(expected_path)
    except AssemblerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    entries = diff_report.compare(expected, result)
    if not entries:
        print(f"Output matches {expected_path}", file=sys.stderr)
        return 0

    print(f"Output differs from {expected_path}:", file=sys.stderr)
    print(diff_report.render(entries), file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
