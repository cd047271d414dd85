"""Bend program instructions -- the vocabulary between DSL text and G-code.

Every DSL line becomes exactly one immutable, slotted dataclass.  The
parser produces all six variants; the expander removes the control-flow
pair (``Repeat`` / ``End``) so the G-code generator only ever sees
*content* instructions.

Line numbers
------------
Each instruction remembers the 0-based index of the source line it was
parsed from (``line``).  The field is keyword-only and excluded from
equality, so ``Feed(1.0) == Feed(1.0, line=7)``.  Errors use it to point
the operator at the offending line.

Units
-----
Unit words are normalised at parse time through ``UNIT_SYNONYMS``;
``Unit.code`` is therefore ``"in"`` or ``"mm"`` for anything the parser
emits.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# ---------------------------------------------------------------------------
# Unit normalisation
# ---------------------------------------------------------------------------

UNIT_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "inch": "in",
        "inches": "in",
        "in": "in",
        "millimeter": "mm",
        "millimeters": "mm",
        "mm": "mm",
    }
)
"""DSL unit word -> canonical unit code.  Read-only."""


def normalize_unit(word: str) -> str:
    """Return the canonical unit code for a DSL unit word.

    Parameters
    ----------
    word : str
        Unit word as written in the program (case-insensitive).

    Returns
    -------
    str
        ``"in"`` or ``"mm"``.

    Raises
    ------
    ValueError
        If *word* is not a recognised unit synonym.
    """
    try:
        return UNIT_SYNONYMS[word.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown unit {word!r}, expected one of {sorted(UNIT_SYNONYMS)}"
        ) from None


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Instruction(ABC):
    """Base class for all bend program instructions."""

    line: int | None = field(default=None, kw_only=True, compare=False)


# ---------------------------------------------------------------------------
# Content instructions (survive expansion)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Unit(Instruction):
    """Switch the machine unit system.

    Parameters
    ----------
    code : str
        Canonical unit code, ``"in"`` or ``"mm"``.
    """

    code: str


@dataclass(frozen=True, slots=True)
class Feed(Instruction):
    """Advance the wire along the feed axis.

    Parameters
    ----------
    length : float
        Signed feed distance in machine units.
    """

    length: float


@dataclass(frozen=True, slots=True)
class Bend(Instruction):
    """Rotate the bend axis to an absolute angle.

    Parameters
    ----------
    angle : float
        Target angle in degrees.  The sign selects the bend side:
        ``> 0`` is the positive side, ``<= 0`` the negative side.
    """

    angle: float


@dataclass(frozen=True, slots=True)
class Comment(Instruction):
    """No-op placeholder for blank and comment lines."""

    pass


# ---------------------------------------------------------------------------
# Control-flow instructions (eliminated by the expander)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Repeat(Instruction):
    """Open a repeat block.

    Parameters
    ----------
    count : int
        Number of times the block body runs.  Must be >= 0.
    """

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(
                f"Repeat count must be >= 0, got {self.count}"
            )


@dataclass(frozen=True, slots=True)
class End(Instruction):
    """Close the nearest open repeat block."""

    pass


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

Program = list[Instruction]
"""Ordered instruction sequence.  Order defines emission and loop bounds."""

CONTENT_INSTRUCTIONS: tuple[type[Instruction], ...] = (Unit, Feed, Bend, Comment)
"""Instruction types allowed in an expanded program."""


def is_flat(program: Program) -> bool:
    """Return ``True`` when *program* holds only content instructions."""
    return all(isinstance(ins, CONTENT_INSTRUCTIONS) for ins in program)
