"""Ordering checks exposed to conformance test harnesses.

A harness hands two inputs and an expected relation to :func:`check_ordering`
and reads back a pass/fail result. For the UCA ``CollationTest_*.txt`` files,
whose lines are already in collation order, :func:`parse_collation_test_lines`
reads the inputs and :func:`check_adjacent` checks every neighbouring pair.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from uca_pipeline.errors import InvalidCodePointError
from uca_pipeline.models import ConformanceResult, Relation
from uca_pipeline.pipeline import Collator

TEST_LINE_RE = re.compile(r"^([0-9A-Fa-f]{4,6}(?:\s+[0-9A-Fa-f]{4,6})*)\s*;?")


def describe_input(value: str | Sequence[int]) -> str:
    """Render an input for reports: strings as-is, code points as hex."""

    if isinstance(value, str):
        return value
    return " ".join(f"{code_point:04X}" for code_point in value)


def check_ordering(
    collator: Collator,
    left: str | Sequence[int],
    right: str | Sequence[int],
    expected: Relation | str,
    allow_equal: bool = False,
) -> ConformanceResult:
    """Derive both sort keys and compare their relation with ``expected``.

    Args:
        collator: Configured pipeline (its normalizer runs on both inputs).
        left: First input as text or code points.
        right: Second input as text or code points.
        expected: Expected relation or its symbol (``<``, ``=``, ``>``).
        allow_equal: Also accept an equal result.

    Returns:
        Result carrying the actual relation, or the error text when an input
        holds an invalid code point.
    """

    if isinstance(expected, str):
        expected = Relation.from_symbol(expected)
    try:
        actual = collator.compare(left, right)
    except InvalidCodePointError as exc:
        return ConformanceResult(
            left=describe_input(left),
            right=describe_input(right),
            expected=expected,
            actual=None,
            error=str(exc),
            allow_equal=allow_equal,
        )
    return ConformanceResult(
        left=describe_input(left),
        right=describe_input(right),
        expected=expected,
        actual=actual,
        allow_equal=allow_equal,
    )


def parse_collation_test_lines(lines: Iterable[str]) -> list[tuple[int, ...]]:
    """Parse code point sequences from a ``CollationTest`` file.

    Each data line starts with space-separated hexadecimal code points,
    optionally followed by ``;`` and a comment. Comment and blank lines are
    skipped.

    Raises:
        ValueError: If a non-comment line has no code point field.
    """

    cases: list[tuple[int, ...]] = []
    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#") or line.startswith("@"):
            continue
        match = TEST_LINE_RE.match(line)
        if not match:
            raise ValueError(f"Line {line_no}: malformed test line {line!r}")
        cases.append(tuple(int(token, 16) for token in match.group(1).split()))
    return cases


def check_adjacent(
    collator: Collator,
    cases: Sequence[Sequence[int]],
) -> list[ConformanceResult]:
    """Check that each case orders at or after the case before it.

    Args:
        collator: Configured pipeline.
        cases: Inputs in expected collation order.

    Returns:
        One result per adjacent pair.
    """

    return [
        check_ordering(collator, previous, current, Relation.LESS, allow_equal=True)
        for previous, current in zip(cases, cases[1:])
    ]
