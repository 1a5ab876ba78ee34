"""Stage 2: Apply a variable weighting policy to collation elements.

Variable elements are punctuation and symbols whose primary weights lie in the
table's variable range. Each policy rewrites them (and ignorables that follow
them) into four leveled weights:

- ``non-ignorable``: every element keeps its own weights.
- ``blanked``: variable elements and the primary-ignorables after them become
  fully ignorable, except a variable element that opens the text.
- ``shifted``: a variable element's primary moves to the quaternary level and
  its other weights become zero; other elements receive the maximal
  quaternary weight.
- ``shift-trimmed``: as ``shifted``; trailing maximal quaternary weights are
  trimmed when the sort key is assembled.
"""

from __future__ import annotations

from typing import Sequence

from uca_pipeline.models import (
    MAX_QUATERNARY,
    CollationElement,
    LeveledWeights,
    VariableWeighting,
)

ZERO_WEIGHTS: LeveledWeights = (0, 0, 0, 0)


def weigh_element(
    element: CollationElement,
    position: int,
    after_variable: bool,
    weighting: VariableWeighting,
) -> tuple[LeveledWeights, bool]:
    """Rewrite one element's weights under ``weighting``.

    Args:
        element: Element to rewrite.
        position: Index of the element in the text's element sequence.
        after_variable: Whether the closest preceding primary element was
            variable (primary-ignorables in between keep the flag set).
        weighting: Active variable weighting policy.

    Returns:
        Tuple ``(weights, after_variable)`` with the leveled weights and the
        flag value to pass along with the next element.
    """

    if weighting is VariableWeighting.NON_IGNORABLE:
        return element.weights, False

    if element.variable:
        if weighting is VariableWeighting.BLANKED:
            if position == 0:
                return element.weights, False
            return ZERO_WEIGHTS, True
        return (0, 0, 0, element.primary), True

    if element.is_ignorable():
        if after_variable or element.is_completely_ignorable():
            return ZERO_WEIGHTS, after_variable
        if weighting is VariableWeighting.BLANKED:
            return element.weights, False
        return (0, element.secondary, element.tertiary, MAX_QUATERNARY), False

    if weighting is VariableWeighting.BLANKED:
        return element.weights, False
    return (element.primary, element.secondary, element.tertiary, MAX_QUATERNARY), False


def derive_weights(
    elements: Sequence[CollationElement],
    weighting: VariableWeighting,
) -> list[LeveledWeights]:
    """Apply ``weighting`` to an element sequence.

    Args:
        elements: Output of the element mapper for one text.
        weighting: Active variable weighting policy.

    Returns:
        One leveled weight tuple per input element, in order.
    """

    weights: list[LeveledWeights] = []
    after_variable = False
    for position, element in enumerate(elements):
        leveled, after_variable = weigh_element(element, position, after_variable, weighting)
        weights.append(leveled)
    return weights
