"""
G-code generation module.

Converts an expanded bend program to G-code lines, modelling the bend
side and duck pin state of the machine.
"""

from wire_bender.gcode.generator import GCodeError, GCodeGenerator, MachineState

__all__ = ["GCodeError", "GCodeGenerator", "MachineState"]
