"""Stage 3: Assemble leveled weights into a sort key."""

from __future__ import annotations

from typing import Iterator, Sequence

from uca_pipeline.models import (
    LEVEL_SEPARATOR,
    MAX_QUATERNARY,
    MAX_UNIT,
    LeveledWeights,
    SortKey,
    Strength,
    VariableWeighting,
)


def weight_units(weight: int) -> tuple[int, ...]:
    """Split one non-zero weight into 16-bit key units.

    Weights wider than 16 bits (packed implicit primaries) yield their high
    and low halves. Both halves are non-zero, so no unit can be mistaken for
    the level separator.

    Raises:
        ValueError: If the weight does not fit in 32 bits or a half is zero.
    """

    if weight <= MAX_UNIT:
        return (weight,)
    if weight > 0xFFFFFFFF:
        raise ValueError(f"Collation weight {weight:#x} exceeds 32 bits")
    high, low = weight >> 16, weight & MAX_UNIT
    if low == 0:
        raise ValueError(f"Collation weight {weight:#x} has an empty low half")
    return (high, low)


def level_units(weights: Sequence[LeveledWeights], level: int) -> Iterator[int]:
    """Yield the key units of one level, skipping ignorable weights.

    Args:
        weights: Leveled weights from the weight deriver.
        level: 1-based level to read.
    """

    slot = level - 1
    for leveled in weights:
        weight = leveled[slot]
        if weight:
            yield from weight_units(weight)


def trim_trailing_quaternary(units: list[int]) -> list[int]:
    """Drop trailing maximal quaternary units from a quaternary level."""

    end = len(units)
    while end and units[end - 1] == MAX_QUATERNARY:
        end -= 1
    return units[:end]


def level_sequences(
    weights: Sequence[LeveledWeights],
    strength: Strength,
    weighting: VariableWeighting,
) -> list[list[int]]:
    """Return the unit list of every level up to ``strength``.

    Args:
        weights: Leveled weights from the weight deriver.
        strength: Highest level included.
        weighting: Active policy; ``shift-trimmed`` trims the quaternary level.
    """

    levels: list[list[int]] = []
    for level in range(1, int(strength) + 1):
        units = list(level_units(weights, level))
        if level == Strength.QUATERNARY and weighting is VariableWeighting.SHIFT_TRIMMED:
            units = trim_trailing_quaternary(units)
        levels.append(units)
    return levels


def build_sort_key(
    weights: Sequence[LeveledWeights],
    strength: Strength,
    weighting: VariableWeighting = VariableWeighting.NON_IGNORABLE,
) -> SortKey:
    """Concatenate per-level units with one separator between levels.

    A separator is written before every level after the first, including
    empty ones, so a key whose level ends early orders before a key that
    continues at that level.

    Args:
        weights: Leveled weights from the weight deriver.
        strength: Highest level included in the key.
        weighting: Active policy, used for quaternary trimming.

    Returns:
        The assembled sort key.
    """

    units: list[int] = []
    for index, level in enumerate(level_sequences(weights, strength, weighting)):
        if index:
            units.append(LEVEL_SEPARATOR)
        units.extend(level)
    return SortKey(units=tuple(units), strength=Strength(strength))
