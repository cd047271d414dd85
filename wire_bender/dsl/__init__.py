"""
Bend program DSL front end.

Parses program text into instructions and unrolls repeat blocks into a
flat instruction stream ready for G-code generation.
"""

from wire_bender.dsl.errors import (
    ProgramError,
    ProgramSyntaxError,
    UnmatchedEndError,
    UnmatchedRepeatError,
)
from wire_bender.dsl.expander import expand_program
from wire_bender.dsl.parser import parse_line, parse_program

__all__ = [
    "ProgramError",
    "ProgramSyntaxError",
    "UnmatchedEndError",
    "UnmatchedRepeatError",
    "expand_program",
    "parse_line",
    "parse_program",
]
