"""
assemble_all.py
===============
Assemble several ``.nha`` programs in one go, writing ``<stem>.bin`` for
each into a single output directory.

Usage
-----
    python scripts/assemble_all.py \\
        --sources programs/add.nha programs/max.nha \\
        --output-dir outputs/bin
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from nha_assembler.models import AssemblerError
from nha_assembler.pipeline.translator import ProgramTranslator


def assemble(source: str, output_dir: Path, translator: ProgramTranslator) -> bool:
    out_file = output_dir / f"{Path(source).stem}.bin"
    try:
        result = translator.translate_file(source, str(out_file))
    except AssemblerError as exc:
        print(f"  FAILED {source}: {exc}")
        return False
    print(
        f"  wrote {out_file} ({len(result.words)} words, "
        f"{len(result.dropped())} dropped)"
    )
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Assemble many NHA programs")
    parser.add_argument("--sources", nargs="+", required=True, metavar="FILE")
    parser.add_argument("--output-dir", "-o", default="outputs/bin", metavar="DIR")
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("--keep-duplicates", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    out = Path(args.output_dir)
    out.mkdir(parents=True, exist_ok=True)

    translator = ProgramTranslator(
        deduplicate=not args.keep_duplicates,
        strict=args.strict,
    )
    failures = 0
    for src in args.sources:
        print(f"\n=== {src} ===")
        if not assemble(src, out, translator):
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
