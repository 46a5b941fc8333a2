"""
ProgramTranslator
=================

Drives the NHA assembly pipeline over a whole program.

Per-line stages:

1. :class:`~nha_assembler.passes.normalise.NormalisePass`
   – Strip ``//`` comments, trim, lower-case; blank lines are skipped.
2. Repeated-line filter
   – A normalised line that already produced a word earlier in the same
   run is skipped (disable with ``deduplicate=False``).
3. :class:`~nha_assembler.parser.tokenizer.Tokenizer`
   – Split into mnemonic + operands.
4. :class:`~nha_assembler.encoder.instruction_encoder.InstructionEncoder`
   – Produce the 16-bit word or a reason for producing nothing.

Lines that cannot be encoded are dropped and logged.  In ``strict`` mode
the first malformed line raises
:class:`~nha_assembler.models.MalformedInstructionError` instead.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Set, TextIO

from ..encoder.instruction_encoder import InstructionEncoder
from ..models import (
    BLANK,
    DUPLICATE,
    MALFORMED,
    AssemblerIOError,
    LineOutcome,
    MalformedInstructionError,
    TranslationResult,
)
from ..parser.tokenizer import Tokenizer
from ..passes.normalise import NormalisePass

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """
    Split *text* on ``\\n``, ``\\r\\n`` or bare ``\\r`` only.

    Other characters that :meth:`str.splitlines` treats as breaks (form
    feed, U+2028, ...) stay inside the line.  A single trailing empty line
    left by a final terminator is dropped.
    """
    lines = _LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class ProgramTranslator:
    """
    Translates NHA source into 16-bit binary words.

    Parameters
    ----------
    deduplicate:
        Drop a line whose normalised text was already emitted in this run.
    strict:
        Raise on the first malformed line instead of skipping it.
    """

    def __init__(self, deduplicate: bool = True, strict: bool = False) -> None:
        self.deduplicate = deduplicate
        self.strict = strict
        self._normaliser = NormalisePass()
        self._tokenizer = Tokenizer()
        self._encoder = InstructionEncoder()

    # ------------------------------------------------------------------
    # Primary API
    # ------------------------------------------------------------------

    def translate_lines(self, lines: Iterable[str]) -> TranslationResult:
        """
        Translate an ordered sequence of source lines.

        Parameters
        ----------
        lines:
            Source lines without line terminators.

        Returns
        -------
        TranslationResult
            Emitted words in source order plus one outcome per line.
        """
        result = TranslationResult()
        for outcome in self._outcomes(lines):
            result.add(outcome)
        self._log_summary(result)
        return result

    def translate_text(self, source: str) -> TranslationResult:
        """
        Translate NHA source supplied as a **string**.

        ``\\n``, ``\\r\\n`` and bare ``\\r`` line endings are all accepted.
        """
        return self.translate_lines(split_lines(source))

    def translate_file(self, source_path: str, output_path: str) -> TranslationResult:
        """
        Translate the file at *source_path* and write the words to
        *output_path*, one per line.

        Words are written as they are produced and the output file is
        closed on every exit path, so a strict-mode abort leaves the words
        before the offending line in place.

        Raises
        ------
        AssemblerIOError
            When the source cannot be read or the output cannot be written.
        """
        lines = self.read_source(source_path)
        logger.info("Assembling %s -> %s", source_path, output_path)

        try:
            with Path(output_path).open("w", encoding="utf-8", newline="\n") as sink:
                return self.translate_into(lines, sink)
        except OSError as exc:
            raise AssemblerIOError(output_path, exc.strerror or str(exc)) from exc

    def translate_into(self, lines: Iterable[str], sink: TextIO) -> TranslationResult:
        """
        Translate *lines*, writing each word to *sink* as soon as it is
        produced.  A strict-mode abort leaves the earlier words in *sink*.
        """
        result = TranslationResult()
        for outcome in self._outcomes(lines):
            result.add(outcome)
            if outcome.word is not None:
                self.write([outcome.word], sink)
        self._log_summary(result)
        return result

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------

    @staticmethod
    def read_source(source_path: str) -> List[str]:
        """Read *source_path* and split it into lines."""
        try:
            # newline="" keeps \r and \r\n intact for split_lines
            with Path(source_path).open(encoding="utf-8", newline="") as stream:
                text = stream.read()
        except UnicodeDecodeError as exc:
            raise AssemblerIOError(source_path, f"not UTF-8 text ({exc.reason})") from exc
        except OSError as exc:
            raise AssemblerIOError(source_path, exc.strerror or str(exc)) from exc
        return split_lines(text)

    @staticmethod
    def write(words: Iterable[str], sink: TextIO) -> None:
        """Write each word followed by a newline to *sink*."""
        for word in words:
            sink.write(word)
            sink.write("\n")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _outcomes(self, lines: Iterable[str]) -> Iterator[LineOutcome]:
        seen: Set[str] = set()
        lines = list(lines)
        normalised_lines = self._normaliser.run(lines)

        for line_number, (raw, normalised) in enumerate(zip(lines, normalised_lines), start=1):
            if normalised is None:
                yield LineOutcome(line_number, raw, BLANK)
                continue

            if self.deduplicate and normalised in seen:
                logger.debug("Line %d repeats %r – skipped", line_number, normalised)
                yield LineOutcome(line_number, raw, DUPLICATE, reason="already emitted")
                continue

            encoded = self._encoder.encode(self._tokenizer.tokenize(normalised))

            if encoded.ok:
                seen.add(normalised)
            elif encoded.status == MALFORMED:
                if self.strict:
                    raise MalformedInstructionError(
                        encoded.reason, line_number=line_number, text=raw.strip()
                    )
                logger.warning(
                    "Line %d: malformed instruction %r – %s",
                    line_number, raw.strip(), encoded.reason,
                )
            else:
                logger.debug(
                    "Line %d: no output for %r – %s",
                    line_number, raw.strip(), encoded.reason,
                )

            yield LineOutcome(
                line_number, raw, encoded.status,
                word=encoded.word, reason=encoded.reason,
            )

    @staticmethod
    def _log_summary(result: TranslationResult) -> None:
        logger.info(
            "Translated %d line(s) into %d word(s), %d dropped",
            len(result.outcomes), len(result.words), len(result.dropped()),
        )
