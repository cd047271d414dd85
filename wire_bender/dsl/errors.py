"""Errors raised while turning bend program text into a flat program.

All of them are terminal for a compile: a half-expanded bend program is
meaningless to the machine, so nothing catches these inside the package.
Each error carries the 0-based source ``line`` it refers to.
"""

from __future__ import annotations


class ProgramError(Exception):
    """Base class for parse and structure errors in a bend program.

    Parameters
    ----------
    line : int
        0-based index of the offending source line.
    message : str
        Human-readable description.

    Attributes
    ----------
    kind : str
        Short machine-readable error kind (``"SyntaxError"``,
        ``"UnmatchedEnd"``, ``"UnmatchedRepeat"``), set per subclass.
    """

    kind: str = "ProgramError"

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"{message} (line {line})")
        self.line = line
        self.message = message


class ProgramSyntaxError(ProgramError):
    """A line matches none of the DSL statement shapes."""

    kind = "SyntaxError"

    def __init__(self, line: int, text: str = "") -> None:
        super().__init__(line, f"Syntax error: unrecognised statement {text!r}")
        self.text = text


class UnmatchedEndError(ProgramError):
    """``END`` with no open ``REPEAT``."""

    kind = "UnmatchedEnd"

    def __init__(self, line: int) -> None:
        super().__init__(line, "END without REPEAT")


class UnmatchedRepeatError(ProgramError):
    """``REPEAT`` never closed by an ``END``."""

    kind = "UnmatchedRepeat"

    def __init__(self, line: int) -> None:
        super().__init__(line, "REPEAT without END")
