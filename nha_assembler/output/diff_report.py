"""
diff_report.py
==============

Compare the words produced by a translation run against an expected
listing (typically a hand-checked ``.bin`` file) and render the
differences line by line.

Each mismatch is reported against the source instruction that produced the
word, e.g.::

    line   2: ldr D, A	1110110000010000 != 1110001100010000
    line   7: 	1110001100001000 != missing
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..models import AssemblerIOError, TranslationResult

MISSING = "missing"


@dataclass
class DiffEntry:
    """One differing output position."""

    position: int              # 1-indexed output line
    instruction: str           # Source text that produced the actual word
    expected: Optional[str]    # None when the run produced an extra word
    actual: Optional[str]      # None when the run produced too few words

    def render(self) -> str:
        expected = self.expected or ""
        actual = self.actual if self.actual is not None else MISSING
        return f"line {self.position:3d}: {self.instruction}\t{expected} != {actual}"


def load_expected(path: str) -> List[str]:
    """Read an expected listing, ignoring blank lines and surrounding spaces."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise AssemblerIOError(path, exc.strerror or str(exc)) from exc
    return [line.strip() for line in text.splitlines() if line.strip()]


def compare(expected: List[str], result: TranslationResult) -> List[DiffEntry]:
    """
    Return one :class:`DiffEntry` per position where *result* disagrees
    with *expected*.  An empty list means the outputs match.
    """
    sources = [o.text.strip() for o in result.outcomes if o.word is not None]
    actual = result.words
    entries: List[DiffEntry] = []

    for index in range(max(len(expected), len(actual))):
        want = expected[index] if index < len(expected) else None
        got = actual[index] if index < len(actual) else None
        if want == got:
            continue
        instruction = sources[index] if index < len(sources) else ""
        entries.append(DiffEntry(index + 1, instruction, want, got))

    return entries


def render(entries: List[DiffEntry]) -> str:
    return "\n".join(entry.render() for entry in entries)
