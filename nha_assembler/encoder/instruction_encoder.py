"""
InstructionEncoder
==================

Turns a token sequence (see :class:`~nha_assembler.parser.tokenizer.Tokenizer`)
into a single 16-bit machine word.

Word layouts
------------
::

    ldr a, $n          0 nnnnnnnnnnnnnnn          immediate, 15-bit value
    ldr r, a           1110 110000 rrr 000
    ldr r, d           1110 001100 rrr 000
    ldr r, (a)         1111 110000 rrr 000        memory-indirect source
    add r, x, y        1110 000010 rrr 000        1111 lead when y is (..)
    sub r, x, y        1110 010011 rrr 000
    str (r), d         1110 0011 0000 1000        1100 for any other source
    jXX s              1110 0011 0000 cccc        1111 lead when s is (..),
                                                  1100 when s has no d
    jmp                1110101010000111           fixed

``rrr`` is the destination register field (``a`` = 100, ``d`` = 010) and
``cccc`` the jump condition field from
:data:`~nha_assembler.encoder.tables.JUMP_CONDITIONS`.

The encoder keeps no state between calls.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, List

from ..models import EncodeResult, MalformedInstructionError
from . import tables

IMMEDIATE_MARKER = "$"

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

# Significant digits in MAX_IMMEDIATE; anything longer is out of range
_MAX_IMMEDIATE_DIGITS = len(str(tables.MAX_IMMEDIATE))


def _is_dereference(operand: str) -> bool:
    return operand.startswith("(") and operand.endswith(")")


def _strip_dereference(operand: str) -> str:
    return operand[1:-1].strip() if _is_dereference(operand) else operand


def _is_plain_integer(operand: str) -> bool:
    return _DECIMAL_RE.fullmatch(operand) is not None


class InstructionEncoder:
    """Dispatches a token sequence to the encoder for its mnemonic."""

    def __init__(self) -> None:
        self._handlers: Dict[str, Callable[[List[str]], EncodeResult]] = {
            "ldr": self._encode_load,
            "str": self._encode_store,
            "add": self._encode_arithmetic,
            "sub": self._encode_arithmetic,
            "jmp": self._encode_jmp,
        }
        for mnemonic in tables.JUMP_CONDITIONS:
            self._handlers[mnemonic] = self._encode_conditional_jump

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def encode(self, tokens: List[str]) -> EncodeResult:
        """
        Encode one instruction.

        Parameters
        ----------
        tokens:
            ``[mnemonic, operand1, ...]`` as produced by the tokenizer.

        Returns
        -------
        EncodeResult
            ``ENCODED`` with the 16-character word, ``NO_OUTPUT`` for
            unknown mnemonics and unsupported operand forms, or
            ``MALFORMED`` when operands are missing or unparseable.
        """
        if not tokens or not tokens[0]:
            return EncodeResult.no_output("empty instruction")

        handler = self._handlers.get(tokens[0])
        if handler is None:
            return EncodeResult.no_output(f"unrecognised mnemonic {tokens[0]!r}")

        try:
            return handler(tokens)
        except MalformedInstructionError as exc:
            return EncodeResult.malformed(exc.reason)

    # ------------------------------------------------------------------
    # Operand helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _operand(tokens: List[str], index: int) -> str:
        if index >= len(tokens) or not tokens[index]:
            raise MalformedInstructionError(
                f"{tokens[0]} expects at least {index} operand"
                f"{'' if index == 1 else 's'}, got {len(tokens) - 1}"
            )
        return tokens[index]

    @staticmethod
    def _register_field(name: str) -> str:
        try:
            return tables.REGISTER_FIELDS[name]
        except KeyError:
            raise MalformedInstructionError(f"unknown register {name!r}") from None

    # ------------------------------------------------------------------
    # ldr
    # ------------------------------------------------------------------

    def _encode_load(self, tokens: List[str]) -> EncodeResult:
        dest = self._operand(tokens, 1)
        if dest.startswith("("):
            return EncodeResult.no_output("ldr cannot target a memory dereference")

        src = self._operand(tokens, 2)
        if dest.startswith("d") and src.startswith(IMMEDIATE_MARKER):
            return EncodeResult.no_output("immediate loads only target register a")

        if _is_plain_integer(src):
            return EncodeResult.no_output(f"literal {src!r} lacks the '$' marker")

        if src.startswith(IMMEDIATE_MARKER):
            return self._encode_immediate(src[len(IMMEDIATE_MARKER):])

        dest_field = self._register_field(dest)
        lead = tables.LEAD_INDIRECT if _is_dereference(src) else tables.LEAD_DIRECT
        source = _strip_dereference(src)
        select = tables.SELECT_D if source == "d" else tables.SELECT_A
        return EncodeResult.encoded(lead + select + dest_field + tables.NO_JUMP)

    @staticmethod
    def _encode_immediate(digits: str) -> EncodeResult:
        if not _is_plain_integer(digits):
            raise MalformedInstructionError(f"immediate {digits!r} is not a number")
        negative = digits.startswith("-")
        magnitude = digits.lstrip("+-").lstrip("0")
        if len(magnitude) > _MAX_IMMEDIATE_DIGITS:
            return EncodeResult.no_output(
                f"immediate {digits[:12]}... outside 0..{tables.MAX_IMMEDIATE}"
            )
        value = -int(magnitude or "0") if negative else int(magnitude or "0")
        if value < 0 or value > tables.MAX_IMMEDIATE:
            return EncodeResult.no_output(
                f"immediate {value} outside 0..{tables.MAX_IMMEDIATE}"
            )
        return EncodeResult.encoded(format(value, "016b"))

    # ------------------------------------------------------------------
    # str
    # ------------------------------------------------------------------

    def _encode_store(self, tokens: List[str]) -> EncodeResult:
        dest = self._operand(tokens, 1)
        if not _is_dereference(dest) or _strip_dereference(dest) not in tables.REGISTER_FIELDS:
            return EncodeResult.no_output("str target must be (a) or (d)")

        src = self._operand(tokens, 2)
        source = tables.SOURCE_D if src == "d" else tables.SOURCE_A
        return EncodeResult.encoded(
            tables.LEAD_DIRECT + source + tables.NO_DEST + tables.STORE_SUFFIX
        )

    # ------------------------------------------------------------------
    # add / sub
    # ------------------------------------------------------------------

    def _encode_arithmetic(self, tokens: List[str]) -> EncodeResult:
        dest = self._operand(tokens, 1)
        second = self._operand(tokens, 3)
        dest_field = self._register_field(dest)
        lead = tables.LEAD_INDIRECT if _is_dereference(second) else tables.LEAD_DIRECT
        select = tables.ARITHMETIC_OPS[tokens[0]]
        return EncodeResult.encoded(lead + select + dest_field + tables.NO_JUMP)

    # ------------------------------------------------------------------
    # Jumps
    # ------------------------------------------------------------------

    @staticmethod
    def _encode_jmp(tokens: List[str]) -> EncodeResult:
        return EncodeResult.encoded(tables.JMP_WORD)

    def _encode_conditional_jump(self, tokens: List[str]) -> EncodeResult:
        operand = self._operand(tokens, 1)
        lead = tables.LEAD_INDIRECT if _is_dereference(operand) else tables.LEAD_DIRECT
        operand = _strip_dereference(operand)
        source = tables.SOURCE_D if "d" in operand else tables.SOURCE_A
        return EncodeResult.encoded(
            lead + source + tables.NO_DEST + tables.JUMP_CONDITIONS[tokens[0]]
        )
