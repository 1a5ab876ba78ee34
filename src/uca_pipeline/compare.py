"""Comparison helpers for sort keys and leveled weight streams."""

from __future__ import annotations

from itertools import zip_longest
from typing import Iterable, Sequence

from uca_pipeline.models import (
    LeveledWeights,
    Relation,
    SortKey,
    Strength,
    VariableWeighting,
)
from uca_pipeline.stages.stage3_sortkey import level_units, trim_trailing_quaternary

_END = -1


def _relation(left: int, right: int) -> Relation:
    if left < right:
        return Relation.LESS
    if left > right:
        return Relation.GREATER
    return Relation.EQUAL


def compare_units(left: Iterable[int], right: Iterable[int]) -> Relation:
    """Compare two unit streams lexicographically, a shorter prefix first.

    Args:
        left: First unit stream.
        right: Second unit stream.

    Returns:
        Relation of ``left`` to ``right``; stops at the first difference.
    """

    for left_unit, right_unit in zip_longest(left, right, fillvalue=_END):
        if left_unit != right_unit:
            return _relation(left_unit, right_unit)
    return Relation.EQUAL


def compare_sort_keys(left: SortKey, right: SortKey) -> Relation:
    """Compare two materialized sort keys.

    Raises:
        ValueError: If the keys were built with different strengths.
    """

    if left.strength != right.strength:
        raise ValueError(
            f"Cannot compare keys of strength {left.strength.name} and {right.strength.name}"
        )
    return compare_units(left.units, right.units)


def compare_weights(
    left: Sequence[LeveledWeights],
    right: Sequence[LeveledWeights],
    strength: Strength,
    weighting: VariableWeighting = VariableWeighting.NON_IGNORABLE,
) -> Relation:
    """Compare two leveled weight sequences without building full keys.

    Levels are compared one at a time from primary upward and the first
    difference decides. Units come from the same generator the key builder
    uses, so the result always equals comparing the built keys.

    Args:
        left: Leveled weights of the first text.
        right: Leveled weights of the second text.
        strength: Highest level compared.
        weighting: Active policy, which decides quaternary trimming.

    Returns:
        Relation of ``left`` to ``right``.
    """

    for level in range(1, int(strength) + 1):
        if level == Strength.QUATERNARY and weighting is VariableWeighting.SHIFT_TRIMMED:
            relation = compare_units(
                trim_trailing_quaternary(list(level_units(left, level))),
                trim_trailing_quaternary(list(level_units(right, level))),
            )
        else:
            relation = compare_units(level_units(left, level), level_units(right, level))
        if relation is not Relation.EQUAL:
            return relation
    return Relation.EQUAL
