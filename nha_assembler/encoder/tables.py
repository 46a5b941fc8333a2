"""
Static encoding tables for the NHA instruction set.

Read-only lookups used by
:class:`~nha_assembler.encoder.instruction_encoder.InstructionEncoder`.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ── Destination register fields (3 bits) ─────────────────────────────────
REGISTER_FIELDS: Mapping[str, str] = MappingProxyType(
    {
        "a": "100",
        "d": "010",
    }
)

# ── Conditional jump condition fields (4 bits) ───────────────────────────
JUMP_CONDITIONS: Mapping[str, str] = MappingProxyType(
    {
        "jgt": "0001",
        "jeq": "0010",
        "jge": "0011",
        "jlt": "0100",
        "jne": "0101",
        "jle": "0110",
    }
)

# Unconditional jump: compute 0, no destination, jump always
JMP_WORD = "1110101010000111"

# ── ALU op-select fields (6 bits) ────────────────────────────────────────
ARITHMETIC_OPS: Mapping[str, str] = MappingProxyType(
    {
        "add": "000010",
        "sub": "010011",
    }
)
SELECT_A = "110000"   # pass through A (or M when indirect)
SELECT_D = "001100"   # pass through D

# ── Leading bits of a compute/control word ──────────────────────────────
LEAD_DIRECT = "1110"
LEAD_INDIRECT = "1111"

# ── 4-bit source-select used by str and conditional jumps ───────────────
SOURCE_D = "0011"
SOURCE_A = "1100"

NO_DEST = "0000"
NO_JUMP = "000"
STORE_SUFFIX = "1000"

# Largest value an immediate load can carry (15 bits)
MAX_IMMEDIATE = 32767
