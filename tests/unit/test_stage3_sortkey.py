"""Unit tests for Stage 3 sort key assembly."""

from __future__ import annotations

import pytest

from uca_pipeline.models import SortKey, Strength, VariableWeighting
from uca_pipeline.stages.stage3_sortkey import (
    build_sort_key,
    trim_trailing_quaternary,
    weight_units,
)

AB = [(0x1C47, 0x20, 0x2, 0xFFFF), (0x1C60, 0x20, 0x2, 0xFFFF)]


def test_levels_are_separated_by_zero_units() -> None:
    key = build_sort_key(AB, Strength.QUATERNARY, VariableWeighting.SHIFTED)

    assert key.units == (
        0x1C47, 0x1C60, 0,
        0x20, 0x20, 0,
        0x2, 0x2, 0,
        0xFFFF, 0xFFFF,
    )
    assert key.levels == ((0x1C47, 0x1C60), (0x20, 0x20), (0x2, 0x2), (0xFFFF, 0xFFFF))


def test_strength_truncates_levels() -> None:
    assert build_sort_key(AB, Strength.PRIMARY).units == (0x1C47, 0x1C60)
    assert build_sort_key(AB, Strength.SECONDARY).units == (0x1C47, 0x1C60, 0, 0x20, 0x20)


def test_empty_input_keeps_separators_between_empty_levels() -> None:
    key = build_sort_key([], Strength.TERTIARY)

    assert key == SortKey(units=(0, 0), strength=Strength.TERTIARY)
    assert key.levels == ((), (), ())


def test_ignorable_weights_are_omitted_from_their_level() -> None:
    key = build_sort_key([(0x1C47, 0x20, 0x2, 0), (0, 0x24, 0x2, 0)], Strength.TERTIARY)

    assert key.levels == ((0x1C47,), (0x20, 0x24), (0x2, 0x2))


def test_packed_implicit_primary_becomes_two_units() -> None:
    key = build_sort_key([(0xFB40CE00, 0x20, 0x2, 0)], Strength.PRIMARY)

    assert key.units == (0xFB40, 0xCE00)


def test_shift_trimmed_drops_trailing_maximal_quaternary_units() -> None:
    weights = [(0, 0, 0, 0x0209), (0x1C47, 0x20, 0x2, 0xFFFF)]

    trimmed = build_sort_key(weights, Strength.QUATERNARY, VariableWeighting.SHIFT_TRIMMED)
    shifted = build_sort_key(weights, Strength.QUATERNARY, VariableWeighting.SHIFTED)

    assert trimmed.levels[3] == (0x0209,)
    assert shifted.levels[3] == (0x0209, 0xFFFF)


def test_trim_trailing_quaternary_keeps_inner_maximal_units() -> None:
    assert trim_trailing_quaternary([0xFFFF, 0x0209, 0xFFFF, 0xFFFF]) == [0xFFFF, 0x0209]
    assert trim_trailing_quaternary([0xFFFF]) == []


def test_weight_units_rejects_unrepresentable_weights() -> None:
    with pytest.raises(ValueError, match="exceeds 32 bits"):
        weight_units(0x1_0000_0000)
    with pytest.raises(ValueError, match="empty low half"):
        weight_units(0xFB400000)
