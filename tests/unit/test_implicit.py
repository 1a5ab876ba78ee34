"""Unit tests for implicit weight derivation."""

from __future__ import annotations

from uca_pipeline.table.implicit import (
    ImplicitRange,
    ImplicitWeightConfig,
    implicit_element,
    implicit_primary,
    implicit_weight_halves,
)

DEFAULT = ImplicitWeightConfig()


def test_han_and_unassigned_code_points_use_block_bases() -> None:
    assert implicit_weight_halves(0x4E00, DEFAULT) == (0xFB40, 0xCE00)
    assert implicit_weight_halves(0x3400, DEFAULT) == (0xFB80, 0xB400)
    assert implicit_weight_halves(0x20000, DEFAULT) == (0xFB84, 0x8000)
    assert implicit_weight_halves(0x1F600, DEFAULT) == (0xFBC3, 0xF600)


def test_siniform_ranges_share_offset_origin_per_lead_weight() -> None:
    assert implicit_weight_halves(0x17000, DEFAULT) == (0xFB00, 0x8000)
    assert implicit_weight_halves(0x18D00, DEFAULT) == (0xFB00, 0x9D00)
    assert implicit_weight_halves(0x1B170, DEFAULT) == (0xFB01, 0x8000)


def test_with_siniform_ranges_derives_origins_from_declared_ranges() -> None:
    config = DEFAULT.with_siniform_ranges(
        (ImplicitRange(0x18D00, 0x18D8F, 0xFB00), ImplicitRange(0x17000, 0x18AFF, 0xFB00))
    )

    assert implicit_weight_halves(0x18D00, config) == (0xFB00, 0x9D00)
    assert 0xFB00 in config.bases


def test_implicit_primaries_order_core_han_before_other_han_before_unassigned() -> None:
    core = implicit_primary(0x9FFF, DEFAULT)
    other = implicit_primary(0x3400, DEFAULT)
    unassigned = implicit_primary(0x0378, DEFAULT)

    assert core < other < unassigned


def test_implicit_primaries_are_injective_over_a_block() -> None:
    primaries = {implicit_primary(code_point, DEFAULT) for code_point in range(0x4E00, 0x5E00)}

    assert len(primaries) == 0x1000


def test_implicit_element_is_non_variable_with_minimal_lower_weights() -> None:
    element = implicit_element(0x4E00, DEFAULT)

    assert element.primary == 0xFB40CE00
    assert (element.secondary, element.tertiary, element.quaternary) == (0x20, 0x2, 0)
    assert not element.variable
