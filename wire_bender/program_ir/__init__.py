"""
Bend program intermediate representation.

Defines every DSL instruction as an immutable dataclass. This vocabulary
is the contract between the parser, the expander and G-code generation.
"""

from wire_bender.program_ir.instructions import (
    CONTENT_INSTRUCTIONS,
    UNIT_SYNONYMS,
    Bend,
    Comment,
    End,
    Feed,
    Instruction,
    Program,
    Repeat,
    Unit,
    is_flat,
    normalize_unit,
)

__all__ = [
    "CONTENT_INSTRUCTIONS",
    "UNIT_SYNONYMS",
    "Bend",
    "Comment",
    "End",
    "Feed",
    "Instruction",
    "Program",
    "Repeat",
    "Unit",
    "is_flat",
    "normalize_unit",
]
