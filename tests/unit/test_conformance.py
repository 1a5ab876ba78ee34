"""Unit tests for conformance ordering checks."""

from __future__ import annotations

import pytest

from uca_pipeline.conformance import (
    check_adjacent,
    check_ordering,
    describe_input,
    parse_collation_test_lines,
)
from uca_pipeline.models import CollationConfig, Relation, Strength, VariableWeighting
from uca_pipeline.pipeline import Collator
from uca_pipeline.table.repository import CollationElementTable


@pytest.fixture()
def collator(mini_table: CollationElementTable) -> Collator:
    return Collator(mini_table, CollationConfig(VariableWeighting.SHIFTED, Strength.QUATERNARY))


def test_check_ordering_passes_and_fails(collator: Collator) -> None:
    passing = check_ordering(collator, "a", "b", "<")
    failing = check_ordering(collator, "b", "a", Relation.LESS)

    assert passing.passed
    assert passing.actual is Relation.LESS
    assert not failing.passed
    assert failing.actual is Relation.GREATER


def test_check_ordering_accepts_equal_when_allowed(collator: Collator) -> None:
    result = check_ordering(collator, "a", "a", Relation.LESS, allow_equal=True)

    assert result.actual is Relation.EQUAL
    assert result.passed


def test_check_ordering_reports_invalid_input_without_raising(collator: Collator) -> None:
    result = check_ordering(collator, [0x61], [0xD800], "<")

    assert result.actual is None
    assert result.error is not None and "U+D800" in result.error
    assert result.right == "D800"
    assert not result.passed


def test_check_ordering_rejects_unknown_symbol(collator: Collator) -> None:
    with pytest.raises(ValueError, match="Unknown relation symbol"):
        check_ordering(collator, "a", "b", "<=")


def test_parse_collation_test_lines_reads_code_point_fields() -> None:
    cases = parse_collation_test_lines(
        [
            "# CollationTest_SHIFTED_SHORT.txt",
            "@version 9.0.0",
            "",
            "0061 0301;\t# (á) LATIN SMALL LETTER A",
            "0041",
        ]
    )

    assert cases == [(0x61, 0x301), (0x41,)]


def test_parse_collation_test_lines_rejects_malformed_line() -> None:
    with pytest.raises(ValueError, match="Line 2"):
        parse_collation_test_lines(["0061;", "zzzz;"])


def test_check_adjacent_checks_each_neighbouring_pair(collator: Collator) -> None:
    results = check_adjacent(collator, [(0x61,), (0x41,), (0x62,), (0x62,)])

    assert len(results) == 3
    assert all(result.passed for result in results)
    assert [result.actual for result in results] == [Relation.LESS, Relation.LESS, Relation.EQUAL]


def test_describe_input_renders_code_points_as_hex() -> None:
    assert describe_input([0x61, 0x1F600]) == "0061 1F600"
    assert describe_input("abc") == "abc"
