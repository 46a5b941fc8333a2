"""
NormalisePass
=============

First processing step for NHA source lines.

Performs, in order:
  * Truncation at the first ``//`` line-comment marker.
  * Trimming of surrounding whitespace.
  * Lower-casing (mnemonics and register names are case-insensitive).

A line with nothing left after this is *blank* and yields ``None``.  The
normalised text is both the tokenizer input and the key the translator
uses to drop repeated lines.
"""
from __future__ import annotations

from typing import List, Optional

COMMENT_MARKER = "//"


class NormalisePass:
    """Strips comments and whitespace, lower-cases what remains."""

    def run(self, lines: List[str]) -> List[Optional[str]]:
        """
        Normalise every line.

        Parameters
        ----------
        lines:
            Raw source lines (line terminators already removed).

        Returns
        -------
        List[Optional[str]]
            Same length list; blank and comment-only lines become ``None``
            so that indices still match source line numbers.
        """
        return [self.normalise(line) for line in lines]

    # ------------------------------------------------------------------

    @staticmethod
    def normalise(line: str) -> Optional[str]:
        comment_start = line.find(COMMENT_MARKER)
        if comment_start >= 0:
            line = line[:comment_start]
        line = line.strip()
        if not line:
            return None
        return line.lower()
