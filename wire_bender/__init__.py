"""
Wire Bender Package.

Compiles bend programs -- a small line-oriented language of UNIT, FEED,
BEND and REPEAT/END statements -- into G-code for a wire-bending machine
with a feed axis, a rotating bend axis and a retractable duck pin.

Subpackages:
    program_ir: Instruction vocabulary shared by all stages
    dsl: Parser and repeat-block expander
    gcode: G-code generation with side and duck pin tracking
    configs: Machine configuration loading and validation
    utils: Filesystem and logging helpers
    scripts: Command-line entry points
"""

from wire_bender.compiler import BendCompiler, compile_program
from wire_bender.configs.loader import BenderConfig, ConfigError, load_config
from wire_bender.dsl.errors import (
    ProgramError,
    ProgramSyntaxError,
    UnmatchedEndError,
    UnmatchedRepeatError,
)
from wire_bender.gcode.generator import GCodeError

__version__ = "0.1.0"

__all__ = [
    "BendCompiler",
    "BenderConfig",
    "ConfigError",
    "GCodeError",
    "ProgramError",
    "ProgramSyntaxError",
    "UnmatchedEndError",
    "UnmatchedRepeatError",
    "compile_program",
    "load_config",
]
