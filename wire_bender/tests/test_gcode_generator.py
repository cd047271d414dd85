"""Tests for G-code generator.

Validates the preamble, unit commands, feed clearance, side-change duck
sequencing, number formatting, and rejection of unexpanded programs.
"""

from __future__ import annotations

import pytest

from wire_bender.configs.loader import BenderConfig
from wire_bender.gcode.generator import GCodeError, GCodeGenerator, MachineState
from wire_bender.program_ir.instructions import (
    Bend,
    Comment,
    End,
    Feed,
    Instruction,
    Repeat,
    Unit,
)

PREAMBLE = [
    "(Bend Program)",
    "(Generated by wire_bender)",
    "",
    "(Absolute Mode)",
    "G90",
    "",
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> BenderConfig:
    return BenderConfig()


@pytest.fixture()
def gen(config: BenderConfig) -> GCodeGenerator:
    return GCodeGenerator(config)


def _body(gen: GCodeGenerator, program: list[Instruction]) -> list[str]:
    """Generated lines without the preamble."""
    lines = gen.generate(program)
    assert lines[: len(PREAMBLE)] == PREAMBLE
    return lines[len(PREAMBLE):]


# ---------------------------------------------------------------------------
# Preamble
# ---------------------------------------------------------------------------


class TestPreamble:
    def test_empty_program_is_preamble_only(self, gen: GCodeGenerator) -> None:
        assert gen.generate([]) == PREAMBLE

    def test_absolute_mode_first(self, gen: GCodeGenerator) -> None:
        lines = gen.generate([Feed(1.0)])
        assert lines.index("G90") < lines.index("G91")


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TestUnits:
    def test_inches(self, gen: GCodeGenerator) -> None:
        assert _body(gen, [Unit("in")]) == ["(Change units to inches)", "G20", ""]

    def test_millimeters(self, gen: GCodeGenerator) -> None:
        assert _body(gen, [Unit("mm")]) == [
            "(Change units to millimeters)",
            "G21",
            "",
        ]

    def test_unknown_unit_emits_warning_comment_only(
        self, gen: GCodeGenerator, caplog: pytest.LogCaptureFixture,
    ) -> None:
        body = _body(gen, [Unit("cubit", line=3)])
        assert body == ['(Warning: unknown unit change? "cubit")', ""]
        assert "Unknown unit code" in caplog.text


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------


class TestFeed:
    def test_feed_block_from_initial_state(self, gen: GCodeGenerator) -> None:
        assert _body(gen, [Feed(1.0)]) == [
            "(Feed 1.000)",
            "G0X-122.00000",
            "G91",
            "G1Y1.00000F360.000",
            "G90",
            "",
        ]

    def test_feed_clears_on_positive_side(self, gen: GCodeGenerator) -> None:
        body = _body(gen, [Bend(45.0), Feed(2.0)])
        feed_at = body.index("(Feed 2.000)")
        assert body[feed_at + 1] == "G0X-82.00000"

    def test_feed_clears_on_negative_side(self, gen: GCodeGenerator) -> None:
        body = _body(gen, [Bend(-45.0), Feed(2.0)])
        feed_at = body.index("(Feed 2.000)")
        assert body[feed_at + 1] == "G0X-122.00000"

    def test_negative_length_uses_current_side(
        self, gen: GCodeGenerator,
    ) -> None:
        body = _body(gen, [Bend(30.0), Feed(-0.5)])
        feed_at = body.index("(Feed -0.500)")
        assert body[feed_at + 1 : feed_at + 4] == [
            "G0X-82.00000",
            "G91",
            "G1Y-0.50000F360.000",
        ]

    def test_custom_feedrate(self) -> None:
        gen = GCodeGenerator(BenderConfig(feed_feedrate=120.5))
        assert "G1Y3.00000F120.500" in gen.generate([Feed(3.0)])

    def test_negative_zero_length_prints_as_zero(
        self, gen: GCodeGenerator,
    ) -> None:
        body = _body(gen, [Feed(-0.0)])
        assert body[0] == "(Feed 0.000)"
        assert body[3] == "G1Y0.00000F360.000"
        assert not any("-0.0" in line for line in body)


# ---------------------------------------------------------------------------
# Bend and duck sequencing
# ---------------------------------------------------------------------------


class TestBend:
    def test_same_side_negative(self, gen: GCodeGenerator) -> None:
        assert _body(gen, [Bend(-30.0)]) == [
            "(Bend -30 degrees)",
            "G1X-30.00000F6000.000",
            "",
        ]

    def test_zero_stays_on_negative_side(self, gen: GCodeGenerator) -> None:
        body = _body(gen, [Bend(0.0)])
        assert "(Duck)" not in body
        assert body[0] == "(Bend 0 degrees)"

    def test_cross_to_positive(self, gen: GCodeGenerator) -> None:
        assert _body(gen, [Bend(90.0)]) == [
            "(Duck)",
            "G0Z180",
            "(Clear wire on positive side)",
            "G0X-82.00000",
            "(Unduck)",
            "G0Z0",
            "G1X90.00000F6000.000",
            "",
        ]

    def test_cross_back_to_negative(self, gen: GCodeGenerator) -> None:
        body = _body(gen, [Bend(10.0), Bend(-15.0)])
        second = body[body.index("") + 1 :]
        assert second == [
            "(Duck)",
            "G0Z180",
            "(Clear wire on negative side)",
            "G0X-122.00000",
            "(Unduck)",
            "G0Z0",
            "G1X-15.00000F6000.000",
            "",
        ]

    def test_same_side_positive_never_ducks(self, gen: GCodeGenerator) -> None:
        body = _body(gen, [Bend(10.0), Bend(20.0)])
        assert body.count("(Duck)") == 1  # only the initial crossing
        assert body.count("(Unduck)") == 1
        assert body[-3:] == ["(Bend 20 degrees)", "G1X20.00000F6000.000", ""]

    def test_crossing_brackets_clearance_with_one_duck_pair(
        self, gen: GCodeGenerator,
    ) -> None:
        body = _body(gen, [Bend(-5.0), Bend(-10.0), Bend(15.0)])
        assert body.count("(Duck)") == 1
        assert body.count("(Unduck)") == 1
        duck = body.index("(Duck)")
        clear = body.index("(Clear wire on positive side)")
        unduck = body.index("(Unduck)")
        assert duck < clear < unduck

    def test_fractional_angle_comment(self, gen: GCodeGenerator) -> None:
        body = _body(gen, [Bend(-12.5)])
        assert body[0] == "(Bend -12.5 degrees)"

    def test_negative_zero_angle_prints_as_zero(
        self, gen: GCodeGenerator,
    ) -> None:
        assert _body(gen, [Bend(-0.0)]) == [
            "(Bend 0 degrees)",
            "G1X0.00000F6000.000",
            "",
        ]

    def test_custom_clearances_and_duck_heights(self) -> None:
        cfg = BenderConfig(
            positive_bend_clearance=-70.0,
            duck_engaged_z=150.5,
            duck_released_z=2.0,
        )
        lines = GCodeGenerator(cfg).generate([Bend(45.0)])
        assert "G0X-70.00000" in lines
        assert "G0Z150.5" in lines
        assert "G0Z2" in lines


# ---------------------------------------------------------------------------
# Duck pin helpers
# ---------------------------------------------------------------------------


class TestDuckHelpers:
    def test_duck_only_once(self, gen: GCodeGenerator) -> None:
        state = MachineState()
        assert gen._duck(state) == ["(Duck)", "G0Z180"]
        assert state.ducked is True
        assert gen._duck(state) == []

    def test_force_duck(self, gen: GCodeGenerator) -> None:
        state = MachineState(ducked=True)
        assert gen._duck(state, force=True) == ["(Duck)", "G0Z180"]
        assert state.ducked is True

    def test_unduck_only_when_ducked(self, gen: GCodeGenerator) -> None:
        state = MachineState()
        assert gen._unduck(state) == []
        state.ducked = True
        assert gen._unduck(state) == ["(Unduck)", "G0Z0"]
        assert state.ducked is False


# ---------------------------------------------------------------------------
# Comments and state isolation
# ---------------------------------------------------------------------------


class TestCommentsAndState:
    def test_comment_emits_nothing(self, gen: GCodeGenerator) -> None:
        assert gen.generate([Comment(), Comment()]) == PREAMBLE

    def test_comment_between_instructions(self, gen: GCodeGenerator) -> None:
        with_comment = gen.generate([Feed(1.0), Comment(), Bend(-5.0)])
        without = gen.generate([Feed(1.0), Bend(-5.0)])
        assert with_comment == without

    def test_state_reset_between_calls(self, gen: GCodeGenerator) -> None:
        gen.generate([Bend(90.0)])
        # A fresh call starts on the negative side again
        body = _body(gen, [Feed(1.0)])
        assert body[1] == "G0X-122.00000"


# ---------------------------------------------------------------------------
# Unexpanded programs
# ---------------------------------------------------------------------------


class TestRejectsControlFlow:
    def test_repeat_rejected(self, gen: GCodeGenerator) -> None:
        with pytest.raises(GCodeError, match="Repeat .*line 2"):
            gen.generate([Repeat(2, line=2)])

    def test_end_rejected(self, gen: GCodeGenerator) -> None:
        with pytest.raises(GCodeError, match="expanded first"):
            gen.generate([End()])
