"""Bend program parser -- DSL text to a list of instructions.

The DSL is line oriented.  Every line is stripped, lower-cased and then
matched against the statement shapes below, first match wins::

    BEND <signed-decimal>
    FEED <signed-decimal>
    UNIT <inch|inches|in|mm|millimeter|millimeters>
    REPEAT <count>:
    END
    // comment   or   ' comment
    <blank line>

Patterns are *searched* rather than anchored, so a statement keyword
may sit anywhere on its line and trailing text is ignored.  The statement
rules are tried before the comment rule: ``feed 2 // advance`` is a feed.

Anything else is a syntax error.  Parsing stops at the first bad line;
no partial program is returned.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from wire_bender.dsl.errors import ProgramSyntaxError
from wire_bender.program_ir.instructions import (
    Bend,
    Comment,
    End,
    Feed,
    Instruction,
    Program,
    Repeat,
    Unit,
    normalize_unit,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Statement patterns
# ---------------------------------------------------------------------------

_NUMBER = r"(-?\d+(?:\.\d+)?)"

# ASCII digits only: other Unicode numerals are a syntax error.
_BEND_RE = re.compile(rf"bend\s+{_NUMBER}", re.ASCII)
_FEED_RE = re.compile(rf"feed\s+{_NUMBER}", re.ASCII)
_UNIT_RE = re.compile(
    r"unit\s+(inches|inch|in|millimeters|millimeter|mm)\b", re.ASCII
)
_REPEAT_RE = re.compile(r"repeat\s+(\d+):", re.ASCII)
# Whole word, not a substring: a bare "bend" or "legend" is not END.
_END_RE = re.compile(r"\bend\b", re.ASCII)
_COMMENT_RE = re.compile(r"//|'")

_Rule = tuple[re.Pattern[str], Callable[[re.Match[str], int], Instruction]]

_RULES: tuple[_Rule, ...] = (
    (_BEND_RE, lambda m, i: Bend(float(m.group(1)), line=i)),
    (_FEED_RE, lambda m, i: Feed(float(m.group(1)), line=i)),
    (_UNIT_RE, lambda m, i: Unit(normalize_unit(m.group(1)), line=i)),
    (_REPEAT_RE, lambda m, i: Repeat(int(m.group(1)), line=i)),
    (_END_RE, lambda m, i: End(line=i)),
    (_COMMENT_RE, lambda m, i: Comment(line=i)),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_line(raw: str, index: int) -> Instruction:
    """Classify a single source line.

    Parameters
    ----------
    raw : str
        Line text as it appears in the program.
    index : int
        0-based line index, recorded on the instruction.

    Returns
    -------
    Instruction
        The instruction for this line.  Blank lines become ``Comment``.

    Raises
    ------
    ProgramSyntaxError
        If the line matches no statement shape.
    """
    line = raw.strip().lower()

    for pattern, build in _RULES:
        match = pattern.search(line)
        if match:
            return build(match, index)

    if line == "":
        return Comment(line=index)

    raise ProgramSyntaxError(index, raw.strip())


def parse_program(text: str) -> Program:
    """Parse bend program text into one instruction per line.

    Parameters
    ----------
    text : str
        Complete program text.  Lines are split on ``"\\n"``.

    Returns
    -------
    Program
        Instructions in source order; ``len(result)`` equals the number
        of input lines.

    Raises
    ------
    ProgramSyntaxError
        On the first line that matches no statement shape.
    """
    program: Program = [
        parse_line(raw, index) for index, raw in enumerate(text.split("\n"))
    ]
    logger.debug("Parsed %d instruction(s)", len(program))
    return program
