"""Repeat-block expansion -- parsed program to a flat instruction stream.

Loops are unrolled by walking the program with an explicit program
counter and a stack of open repeats, each entry ``[repeat_pc, passes]``
where *passes* is how many more times the body will be re-entered.

Counter sharing
---------------
Every ``END`` consults the **oldest** open repeat (``stack[0]``), not the
innermost one, and when that counter is exhausted it pops the **newest**
entry.  Sequential repeat blocks behave as expected.  Nested blocks do
not behave like independent nested loops: the inner count is ignored and
an outer count above one leaves a dangling entry, which surfaces as
``UnmatchedRepeatError``.  This mirrors the behaviour of the bend
programs already in use and is pinned by the test-suite.

``REPEAT 0`` skips straight past its matching ``END``, so the body runs
zero times.
"""

from __future__ import annotations

import logging

from wire_bender.dsl.errors import UnmatchedEndError, UnmatchedRepeatError
from wire_bender.program_ir.instructions import End, Program, Repeat

logger = logging.getLogger(__name__)


def _skip_block(program: Program, repeat_pc: int) -> int:
    """Return the pc of the ``END`` matching the ``REPEAT`` at *repeat_pc*."""
    depth = 0
    for pc in range(repeat_pc + 1, len(program)):
        ins = program[pc]
        if isinstance(ins, Repeat):
            depth += 1
        elif isinstance(ins, End):
            if depth == 0:
                return pc
            depth -= 1
    raise UnmatchedRepeatError(repeat_pc)


def expand_program(program: Program) -> Program:
    """Unroll ``REPEAT`` / ``END`` blocks.

    Parameters
    ----------
    program : Program
        Parsed program, possibly containing ``Repeat`` and ``End``.

    Returns
    -------
    Program
        Flat program containing only ``Unit``, ``Feed``, ``Bend`` and
        ``Comment`` instructions.  Instructions are shared, not copied;
        they are immutable.

    Raises
    ------
    UnmatchedEndError
        If an ``END`` has no open ``REPEAT``.
    UnmatchedRepeatError
        If a ``REPEAT`` is still open when the program ends.  The error
        points at the most recently opened one.
    """
    stack: list[list[int]] = []
    output: Program = []
    pc = 0

    while pc < len(program):
        ins = program[pc]
        if isinstance(ins, Repeat):
            if ins.count == 0:
                pc = _skip_block(program, pc)
            else:
                stack.append([pc, ins.count - 1])
        elif isinstance(ins, End):
            if not stack:
                raise UnmatchedEndError(pc)
            entry = stack[0]
            if entry[1] > 0:
                entry[1] -= 1
                pc = entry[0]
            else:
                stack.pop()
        else:
            output.append(ins)
        pc += 1

    if stack:
        raise UnmatchedRepeatError(stack[-1][0])

    logger.debug(
        "Expanded %d instruction(s) into %d", len(program), len(output)
    )
    return output
