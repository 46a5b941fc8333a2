"""
Tokenizer
=========

Splits a normalised NHA instruction into its mnemonic and operands.

Separators are runs of whitespace, or a comma with optional whitespace on
either side, so all of these tokenise identically::

    add d, d, a
    add d,d,a
    add   d ,d   ,a

Operand shape is *not* checked here; each encoder validates the operands
it needs.
"""
from __future__ import annotations

import re
from typing import List

_SEPARATOR_RE = re.compile(r"\s*,\s*|\s+")


class Tokenizer:
    """Stateless splitter for normalised instruction text."""

    def tokenize(self, text: str) -> List[str]:
        """
        Split *text* into ``[mnemonic, operand1, operand2, ...]``.

        Trailing empty tokens left by a dangling comma are dropped, so
        ``"ldr a,"`` gives ``['ldr', 'a']``.

        Examples
        --------
        >>> Tokenizer().tokenize("str (a), d")
        ['str', '(a)', 'd']
        >>> Tokenizer().tokenize("jmp")
        ['jmp']
        """
        tokens = _SEPARATOR_RE.split(text)
        while len(tokens) > 1 and not tokens[-1]:
            tokens.pop()
        return tokens
