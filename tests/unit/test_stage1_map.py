"""Unit tests for Stage 1 collation element mapping."""

from __future__ import annotations

from uca_pipeline.models import CollationElement
from uca_pipeline.stages.stage1_map import map_collation_elements
from uca_pipeline.table.repository import CollationElementTable


def _cps(text: str) -> list[int]:
    return [ord(char) for char in text]


def _primaries(elements: list[CollationElement]) -> list[int]:
    return [element.primary for element in elements]


def test_simple_mapping_covers_every_code_point(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements(_cps("abc"), mini_table)

    assert _primaries(elements) == [0x1C47, 0x1C60, 0x1C7A]


def test_expansion_yields_several_elements(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements(_cps("æ"), mini_table)

    assert _primaries(elements) == [0x1C47, 0, 0x1CAA]


def test_contraction_takes_longest_match(mini_table: CollationElementTable) -> None:
    assert _primaries(map_collation_elements(_cps("ch"), mini_table)) == [0x1D19]
    assert _primaries(map_collation_elements(_cps("dzs"), mini_table)) == [0x1C90]


def test_partial_contraction_falls_back_to_shorter_match(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements(_cps("dza"), mini_table)

    assert _primaries(elements) == [0x1C8F, 0x1F21, 0x1C47]


def test_discontiguous_match_skips_unblocked_mark(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements([0x61, 0x0323, 0x030A], mini_table)

    assert elements == [
        CollationElement(0x1F22, 0x20, 0x2),
        CollationElement(0, 0x42, 0x2),
    ]


def test_discontiguous_match_is_blocked_by_mark_of_same_class(
    mini_table: CollationElementTable,
) -> None:
    elements = map_collation_elements([0x61, 0x0301, 0x030A], mini_table)

    assert elements == [
        CollationElement(0x1C47, 0x20, 0x2),
        CollationElement(0, 0x24, 0x2),
        CollationElement(0, 0x29, 0x2),
    ]


def test_discontiguous_search_stops_at_starter(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements([0x61, 0x62, 0x030A], mini_table)

    assert _primaries(elements) == [0x1C47, 0x1C60, 0]


def test_preceding_context_selects_context_entry(mini_table: CollationElementTable) -> None:
    with_context = map_collation_elements(_cps("l·"), mini_table)
    without_context = map_collation_elements(_cps("a·"), mini_table)

    assert with_context[1] == CollationElement(0, 0x0111, 0x2)
    assert without_context[1] == CollationElement(0x0294, 0x20, 0x2, variable=True)


def test_ignorable_code_points_keep_their_elements(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements([0x61, 0x00AD, 0x62], mini_table)

    assert len(elements) == 3
    assert elements[1].is_completely_ignorable()


def test_unmapped_code_point_gets_implicit_element(mini_table: CollationElementTable) -> None:
    elements = map_collation_elements([0x4E00, 0x17000], mini_table)

    assert _primaries(elements) == [0xFB40CE00, 0xFB008000]


def test_empty_input_maps_to_no_elements(mini_table: CollationElementTable) -> None:
    assert map_collation_elements([], mini_table) == []


def test_starter_without_own_entry_reaches_contraction_past_unblocked_mark() -> None:
    table = CollationElementTable.from_lines(
        [
            "0301 ; [.0000.0024.0002]",
            "0323 ; [.0000.0042.0002]",
            "0E01 0301 ; [.3000.0020.0002]",
        ]
    )

    contiguous = map_collation_elements([0x0E01, 0x0301], table)
    discontiguous = map_collation_elements([0x0E01, 0x0323, 0x0301], table)

    assert _primaries(contiguous) == [0x3000]
    assert discontiguous == [
        CollationElement(0x3000, 0x20, 0x2),
        CollationElement(0, 0x42, 0x2),
    ]


def test_starter_without_own_entry_falls_back_to_implicit_weight() -> None:
    table = CollationElementTable.from_lines(
        [
            "0301 ; [.0000.0024.0002]",
            "0323 ; [.0000.0042.0002]",
            "0E01 0301 ; [.3000.0020.0002]",
        ]
    )

    elements = map_collation_elements([0x0E01, 0x0323], table)

    assert _primaries(elements) == [0xFBC08E01, 0]


def test_context_only_contraction_applies_after_its_prefix() -> None:
    table = CollationElementTable.from_lines(
        [
            "0061 ; [.1C47.0020.0002]",
            "0062 ; [.1C60.0020.0002]",
            "006C ; [.1D77.0020.0002]",
            "006C | 0061 0062 ; [.5000.0020.0002]",
        ]
    )

    after_prefix = map_collation_elements(_cps("lab"), table)
    without_prefix = map_collation_elements(_cps("bab"), table)

    assert _primaries(after_prefix) == [0x1D77, 0x5000]
    assert _primaries(without_prefix) == [0x1C60, 0x1C47, 0x1C60]
