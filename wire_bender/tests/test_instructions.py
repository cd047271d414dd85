"""Tests for the bend program instruction vocabulary.

Validates dataclass creation, immutability, line-number handling and unit
normalisation.
"""

from __future__ import annotations

import dataclasses

import pytest

from wire_bender.program_ir.instructions import (
    UNIT_SYNONYMS,
    Bend,
    Comment,
    End,
    Feed,
    Instruction,
    Repeat,
    Unit,
    is_flat,
    normalize_unit,
)


# ---------------------------------------------------------------------------
# Dataclass creation and immutability
# ---------------------------------------------------------------------------


class TestInstructionDataclasses:
    def test_all_variants_are_instructions(self) -> None:
        for ins in (Unit("mm"), Feed(1.0), Bend(90.0), Repeat(2), End(), Comment()):
            assert isinstance(ins, Instruction)

    def test_feed_and_bend_fields(self) -> None:
        assert Feed(2.5).length == 2.5
        assert Bend(-45.0).angle == -45.0

    def test_frozen(self) -> None:
        op = Feed(1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            op.length = 2.0  # type: ignore[misc]

    def test_repeat_zero_allowed(self) -> None:
        assert Repeat(0).count == 0

    def test_repeat_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match=">= 0"):
            Repeat(-1)


# ---------------------------------------------------------------------------
# Line numbers
# ---------------------------------------------------------------------------


class TestLineNumbers:
    def test_default_is_none(self) -> None:
        assert Bend(10.0).line is None

    def test_keyword_only(self) -> None:
        assert Bend(10.0, line=4).line == 4

    def test_line_ignored_by_equality(self) -> None:
        assert Feed(1.0, line=0) == Feed(1.0, line=9)
        assert End(line=3) == End()

    def test_different_payload_not_equal(self) -> None:
        assert Feed(1.0) != Feed(2.0)
        assert Feed(1.0) != Bend(1.0)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TestUnits:
    @pytest.mark.parametrize("word", ["inch", "inches", "in", "INCH", " Inches "])
    def test_inch_synonyms(self, word: str) -> None:
        assert normalize_unit(word) == "in"

    @pytest.mark.parametrize("word", ["mm", "millimeter", "millimeters"])
    def test_mm_synonyms(self, word: str) -> None:
        assert normalize_unit(word) == "mm"

    def test_unknown_unit(self) -> None:
        with pytest.raises(ValueError, match="Unknown unit"):
            normalize_unit("furlong")

    def test_synonym_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            UNIT_SYNONYMS["cm"] = "cm"  # type: ignore[index]


# ---------------------------------------------------------------------------
# Flat programs
# ---------------------------------------------------------------------------


class TestIsFlat:
    def test_content_only(self) -> None:
        assert is_flat([Unit("in"), Feed(1.0), Bend(5.0), Comment()])

    def test_control_flow_present(self) -> None:
        assert not is_flat([Repeat(2), Feed(1.0), End()])

    def test_empty(self) -> None:
        assert is_flat([])
