"""G-code generator -- flat bend program to G-code lines.

Axis convention:
    ``X`` is the bend axis, ``Y`` the wire feed axis and ``Z`` the duck
    pin.  The program runs in absolute mode (``G90``); only the wire feed
    itself is a relative move (``G91`` ... ``G90``).

Side changes:
    The bend head sits on the negative side (angle ``<= 0``) or the
    positive side (angle ``> 0``).  Crossing from one side to the other
    would drag the head through the wire, so the duck pin is raised
    first, the head moves to the clearance position of the new side,
    and the pin is lowered again before bending.

Feeding:
    Before every feed the head parks at the clearance position of the
    side it is currently on, so the wire can advance freely.

Number formatting:
    Coordinates use 5 decimals, feed rates 3 decimals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wire_bender.configs.loader import BenderConfig
from wire_bender.program_ir.instructions import (
    Bend,
    Comment,
    Feed,
    Instruction,
    Program,
    Unit,
)

logger = logging.getLogger(__name__)


class GCodeError(Exception):
    """Raised when an instruction cannot be turned into G-code."""

    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_UNIT_COMMANDS: dict[str, tuple[str, str]] = {
    "in": ("(Change units to inches)", "G20"),
    "mm": ("(Change units to millimeters)", "G21"),
}


def _coord(value: float) -> str:
    return f"{value + 0.0:.5f}"  # no "-0.00000"


def _f(feedrate: float) -> str:
    """Format a G-code ``F`` parameter."""
    return f"F{feedrate:.3f}"


def _num(value: float) -> str:
    """Render a number compactly: ``90``, ``-12.5``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _is_positive_side(angle: float) -> bool:
    return angle > 0


# ---------------------------------------------------------------------------
# Machine state
# ---------------------------------------------------------------------------


@dataclass
class MachineState:
    """Mutable machine model threaded through one generation pass.

    Attributes
    ----------
    current_angle : float
        Last commanded bend angle.  ``0`` counts as the negative side.
    ducked : bool
        Whether the duck pin is currently raised.
    """

    current_angle: float = 0.0
    ducked: bool = False


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class GCodeGenerator:
    """Convert a flat bend program to G-code lines.

    Parameters
    ----------
    config : BenderConfig
        Validated machine configuration.

    Notes
    -----
    The generator holds configuration only.  A fresh ``MachineState`` is
    created for every ``generate()`` call, so one generator can serve
    any number of programs, concurrently or in sequence.
    """

    def __init__(self, config: BenderConfig) -> None:
        self._cfg = config

    @property
    def config(self) -> BenderConfig:
        return self._cfg

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, program: Program) -> list[str]:
        """Generate G-code for an expanded program.

        Parameters
        ----------
        program : Program
            Flat program (``Unit``, ``Feed``, ``Bend``, ``Comment`` only).

        Returns
        -------
        list[str]
            G-code lines, including the preamble.  Each instruction block
            is followed by one blank line.

        Raises
        ------
        GCodeError
            If a control-flow or unknown instruction reaches generation.
        """
        state = MachineState()
        lines = self._init(state)

        for ins in program:
            block = self._generate_instruction(ins, state)
            if block:
                lines.extend(block)
                lines.append("")

        lines.extend(self._exit(state))
        logger.debug(
            "Generated %d G-code line(s) from %d instruction(s)",
            len(lines),
            len(program),
        )
        return lines

    # ------------------------------------------------------------------
    # Internal: per-instruction dispatch
    # ------------------------------------------------------------------

    def _generate_instruction(
        self, ins: Instruction, state: MachineState,
    ) -> list[str]:
        if isinstance(ins, Feed):
            return self._gen_feed(ins, state)
        if isinstance(ins, Bend):
            return self._gen_bend(ins, state)
        if isinstance(ins, Unit):
            return self._gen_unit(ins)
        if isinstance(ins, Comment):
            return []
        where = f" (line {ins.line})" if ins.line is not None else ""
        raise GCodeError(
            f"Cannot generate G-code for {type(ins).__name__}{where}; "
            "program must be expanded first"
        )

    # ------------------------------------------------------------------
    # Preamble / closing
    # ------------------------------------------------------------------

    def _init(self, state: MachineState) -> list[str]:
        state.current_angle = 0.0
        state.ducked = False
        return [
            "(Bend Program)",
            "(Generated by wire_bender)",
            "",
            "(Absolute Mode)",
            "G90",
            "",
        ]

    def _exit(self, state: MachineState) -> list[str]:
        return []

    # ------------------------------------------------------------------
    # Duck pin
    # ------------------------------------------------------------------

    def _duck(self, state: MachineState, force: bool = False) -> list[str]:
        """Raise the duck pin unless it already is (or *force*)."""
        if state.ducked and not force:
            return []
        state.ducked = True
        return ["(Duck)", f"G0Z{_num(self._cfg.duck_engaged_z)}"]

    def _unduck(self, state: MachineState, force: bool = False) -> list[str]:
        """Lower the duck pin if it is raised (or *force*)."""
        if not state.ducked and not force:
            return []
        state.ducked = False
        return ["(Unduck)", f"G0Z{_num(self._cfg.duck_released_z)}"]

    # ------------------------------------------------------------------
    # Individual generators
    # ------------------------------------------------------------------

    def _gen_unit(self, ins: Unit) -> list[str]:
        try:
            return list(_UNIT_COMMANDS[ins.code])
        except KeyError:
            logger.warning("Unknown unit code %r at line %s", ins.code, ins.line)
            return [f'(Warning: unknown unit change? "{ins.code}")']

    def _gen_feed(self, ins: Feed, state: MachineState) -> list[str]:
        clearance = self._cfg.clearance_for(state.current_angle)
        return [
            f"(Feed {ins.length + 0.0:.3f})",
            f"G0X{_coord(clearance)}",
            "G91",
            f"G1Y{_coord(ins.length)}{_f(self._cfg.feed_feedrate)}",
            "G90",
        ]

    def _gen_bend(self, ins: Bend, state: MachineState) -> list[str]:
        angle = ins.angle
        bend_move = f"G1X{_coord(angle)}{_f(self._cfg.bend_feedrate)}"

        if _is_positive_side(state.current_angle) == _is_positive_side(angle):
            lines = [f"(Bend {_num(angle)} degrees)", bend_move]
        else:
            side = "positive" if _is_positive_side(angle) else "negative"
            lines = self._duck(state)
            lines.append(f"(Clear wire on {side} side)")
            lines.append(f"G0X{_coord(self._cfg.clearance_for(angle))}")
            lines.extend(self._unduck(state))
            lines.append(bend_move)
            logger.debug(
                "Side change to %s at line %s", side, ins.line,
            )

        state.current_angle = angle
        return lines
