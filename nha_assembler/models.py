"""
Core data models for the NHA assembler.

Encoding outcomes are tagged results rather than exceptions so a single bad
line never disturbs the rest of a translation run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Encoding outcome tags
# ---------------------------------------------------------------------------

ENCODED = "ENCODED"        # A 16-bit word was produced
NO_OUTPUT = "NO_OUTPUT"    # Nothing to emit (unknown mnemonic, unsupported form)
MALFORMED = "MALFORMED"    # Operands missing or unparseable

# Line-level outcomes recorded by the translator in addition to the above
BLANK = "BLANK"            # Empty or comment-only line
DUPLICATE = "DUPLICATE"    # Normalised text already emitted in this run

WORD_WIDTH = 16


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class AssemblerError(Exception):
    """Base class for all assembler errors."""


class MalformedInstructionError(AssemblerError):
    """
    An instruction whose operand shape cannot be encoded.

    Raised by the individual encoders; :class:`InstructionEncoder` turns it
    into a ``MALFORMED`` result.  The translator re-raises it only in strict
    mode, filling in the line number and source text.
    """

    def __init__(
        self,
        reason: str,
        line_number: Optional[int] = None,
        text: str = "",
    ) -> None:
        self.reason = reason
        self.line_number = line_number
        self.text = text
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line_number is None:
            return self.reason
        return f"line {self.line_number}: {self.reason} ({self.text!r})"


class AssemblerIOError(AssemblerError):
    """Reading the source or writing the output failed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


# ---------------------------------------------------------------------------
# Encoding result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EncodeResult:
    """Outcome of encoding one token sequence."""

    status: str
    word: Optional[str] = None
    reason: str = ""

    @classmethod
    def encoded(cls, word: str) -> EncodeResult:
        if len(word) != WORD_WIDTH or set(word) - {"0", "1"}:
            raise ValueError(f"not a {WORD_WIDTH}-bit word: {word!r}")
        return cls(status=ENCODED, word=word)

    @classmethod
    def no_output(cls, reason: str) -> EncodeResult:
        return cls(status=NO_OUTPUT, reason=reason)

    @classmethod
    def malformed(cls, reason: str) -> EncodeResult:
        return cls(status=MALFORMED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == ENCODED


# ---------------------------------------------------------------------------
# Translation result
# ---------------------------------------------------------------------------


@dataclass
class LineOutcome:
    """What happened to a single source line."""

    line_number: int           # 1-indexed position in the source
    text: str                  # Raw source line
    status: str                # ENCODED | NO_OUTPUT | MALFORMED | BLANK | DUPLICATE
    word: Optional[str] = None
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_number": self.line_number,
            "text": self.text,
            "status": self.status,
            "word": self.word,
            "reason": self.reason,
        }


@dataclass
class TranslationResult:
    """
    Everything one translation run produced.

    ``words`` is the output stream in source order; ``outcomes`` has one
    entry per input line, including the lines that produced nothing.
    """

    words: List[str] = field(default_factory=list)
    outcomes: List[LineOutcome] = field(default_factory=list)

    def add(self, outcome: LineOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status == ENCODED and outcome.word is not None:
            self.words.append(outcome.word)

    def dropped(self) -> List[LineOutcome]:
        """Non-blank lines that did not produce a word."""
        return [o for o in self.outcomes if o.status not in (ENCODED, BLANK)]

    def count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def __repr__(self) -> str:
        return (
            f"TranslationResult(words={len(self.words)}, "
            f"lines={len(self.outcomes)}, dropped={len(self.dropped())})"
        )
