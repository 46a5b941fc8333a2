"""
NHA Assembler
=============

A single-pass assembler for a small Hack-like 16-bit CPU.  Each line of
``.nha`` source (``ldr``, ``str``, ``add``, ``sub``, ``jmp`` and the
conditional jumps) becomes one 16-character binary word.

Quick start
-----------
>>> from nha_assembler import ProgramTranslator
>>> result = ProgramTranslator().translate_text("ldr A, $21")
>>> result.words
['0000000000010101']
"""

from .encoder.instruction_encoder import InstructionEncoder
from .models import (
    AssemblerError,
    AssemblerIOError,
    EncodeResult,
    LineOutcome,
    MalformedInstructionError,
    TranslationResult,
)
from .parser.tokenizer import Tokenizer
from .passes.normalise import NormalisePass
from .pipeline.translator import ProgramTranslator

__version__ = "0.1.0"
__all__ = [
    "AssemblerError",
    "AssemblerIOError",
    "EncodeResult",
    "InstructionEncoder",
    "LineOutcome",
    "MalformedInstructionError",
    "NormalisePass",
    "ProgramTranslator",
    "Tokenizer",
    "TranslationResult",
]
