"""Unit tests for allkeys-format table parsing."""

from __future__ import annotations

import pytest

from uca_pipeline.models import CollationElement
from uca_pipeline.table.parser import (
    MappingKind,
    TableEntry,
    parse_allkeys_lines,
    parse_element,
    parse_elements,
)


def test_parse_element_reads_weights_and_variable_marker() -> None:
    assert parse_element("[.06D9.0020.0002]") == CollationElement(0x06D9, 0x20, 0x02)
    assert parse_element("[*0209.0020.0002]") == CollationElement(0x0209, 0x20, 0x02, variable=True)
    assert parse_element("[.0001.0001.0001.0001]").quaternary == 1


def test_parse_element_rejects_malformed_notation() -> None:
    with pytest.raises(ValueError, match="Malformed collation element"):
        parse_element("[.06D9.0020]")


def test_element_notation_renders_like_table_source() -> None:
    assert str(parse_element("[.1C47.0020.0002]")) == "[.1C47.0020.0002]"
    assert str(parse_element("[*020D.0020.0002]")) == "[*020D.0020.0002]"


def test_parse_elements_reads_expansions() -> None:
    elements = parse_elements("[.1C47.0020.0004][.0000.0110.0004][.1CAA.0020.0004]")

    assert [element.primary for element in elements] == [0x1C47, 0, 0x1CAA]


def test_parse_allkeys_lines_reads_directives_entries_and_contexts() -> None:
    parsed = parse_allkeys_lines(
        [
            "# comment",
            "@version 9.0.0",
            "@implicitweights 17000..18AFF; FB00 # Tangut",
            "",
            "0061  ; [.1C47.0020.0002] # LATIN SMALL LETTER A",
            "0063 0068 ; [.1D19.0020.0002] # contraction",
            "006C | 00B7 ; [.0000.0111.0002] # context",
        ]
    )

    assert parsed.version == "9.0.0"
    assert [(item.start, item.end, item.base) for item in parsed.implicit_ranges] == [
        (0x17000, 0x18AFF, 0xFB00)
    ]
    assert parsed.entries[0] == TableEntry(key=(0x61,), elements=(CollationElement(0x1C47, 0x20, 0x2),))
    assert parsed.entries[1].is_contraction
    assert parsed.entries[2].prefix == (0x6C,)
    assert parsed.entries[2].key == (0xB7,)


def test_parse_allkeys_lines_reports_line_number_for_malformed_entry() -> None:
    with pytest.raises(ValueError, match="Line 2"):
        parse_allkeys_lines(["0061 ; [.1C47.0020.0002]", "0062 ; [.XYZ]"])


def test_mapping_kind_classifies_entry_shapes() -> None:
    one = (CollationElement(1, 1, 1),)
    two = one * 2

    assert TableEntry((0x61,), one).kind is MappingKind.SIMPLE
    assert TableEntry((0xE6,), two).kind is MappingKind.EXPANSION
    assert TableEntry((0x63, 0x68), one).kind is MappingKind.MANY_TO_ONE
    assert TableEntry((0x63, 0x68), two).kind is MappingKind.MANY_TO_MANY
    assert not TableEntry((0xE6,), two).is_contraction
