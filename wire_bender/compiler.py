"""Bend compiler -- DSL text to G-code text in one call.

Runs the three pipeline stages in order::

    text --parse_program--> Program --expand_program--> flat Program
         --GCodeGenerator.generate--> G-code lines --join--> text

Every stage either succeeds completely or raises; no partial G-code is
ever returned.  Machine state lives inside a single ``generate()`` call,
so a ``BendCompiler`` can be reused for any number of programs.

Usage::

    from wire_bender import BendCompiler
    gcode = BendCompiler(bend_feedrate=4000).compile(text)
"""

from __future__ import annotations

import logging
from typing import Any

from wire_bender.configs.loader import BenderConfig
from wire_bender.dsl.expander import expand_program
from wire_bender.dsl.parser import parse_program
from wire_bender.gcode.generator import GCodeGenerator
from wire_bender.program_ir.instructions import Program

logger = logging.getLogger(__name__)


class BendCompiler:
    """Facade over parser, expander and G-code generator.

    Parameters
    ----------
    config : BenderConfig | None
        Base configuration.  ``None`` uses the built-in defaults.
    **overrides
        Individual options applied on top of *config*
        (``feed_feedrate``, ``bend_feedrate``, ``positive_bend_clearance``,
        ``negative_bend_clearance``, ``duck_engaged_z``, ``duck_released_z``).

    Raises
    ------
    ConfigError
        If an override is unknown or invalid.
    """

    def __init__(
        self, config: BenderConfig | None = None, **overrides: Any,
    ) -> None:
        base = config if config is not None else BenderConfig()
        self._config = base.with_overrides(**overrides)

    @property
    def config(self) -> BenderConfig:
        return self._config

    def set_options(self, **overrides: Any) -> BenderConfig:
        """Reconfigure incrementally; unspecified options keep their values."""
        self._config = self._config.with_overrides(**overrides)
        return self._config

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def parse(self, text: str) -> Program:
        return parse_program(text)

    def expand(self, program: Program) -> Program:
        return expand_program(program)

    def generate(self, program: Program) -> list[str]:
        return GCodeGenerator(self._config).generate(program)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, text: str) -> str:
        """Compile bend program text to G-code.

        Parameters
        ----------
        text : str
            Bend program source.

        Returns
        -------
        str
            Newline-joined G-code.

        Raises
        ------
        ProgramError
            On a syntax error or unbalanced ``REPEAT`` / ``END``.
        """
        program = self.parse(text)
        flat = self.expand(program)
        lines = self.generate(flat)
        logger.info(
            "Compiled %d source line(s) into %d instruction(s)",
            len(program),
            len(flat),
        )
        return "\n".join(lines)


def compile_program(text: str, config: BenderConfig | None = None) -> str:
    """Compile bend program text with a one-off compiler.

    See ``BendCompiler.compile``.
    """
    return BendCompiler(config).compile(text)
