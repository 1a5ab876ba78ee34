"""Implicit weight derivation for code points absent from the table.

Every code point without an explicit mapping receives a deterministic primary
weight built from two 16-bit halves: a block-dependent lead ``AAAA`` and a
trail ``BBBB`` carrying the code point's offset with its high bit set. Both
halves are packed into one integer primary ``(AAAA << 16) | BBBB``; the sort
key builder splits it back into two units, which orders exactly like the pair
of collation elements ``[.AAAA.0020.0002][.BBBB.0000.0000]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from uca_pipeline.models import CollationElement

TRAIL_FLAG = 0x8000
TRAIL_MASK = 0x7FFF
DEFAULT_SECONDARY = 0x0020
DEFAULT_TERTIARY = 0x0002


@dataclass(frozen=True)
class ImplicitRange:
    """Inclusive code point range assigned a fixed implicit lead weight.

    ``origin`` is the code point subtracted before computing the trail
    weight. Ranges that share a lead weight share one origin so their trail
    weights never collide.
    """

    start: int
    end: int
    base: int
    origin: int | None = None

    def __contains__(self, code_point: object) -> bool:
        return isinstance(code_point, int) and self.start <= code_point <= self.end

    @property
    def offset_origin(self) -> int:
        return self.start if self.origin is None else self.origin


SINIFORM_RANGES = (
    ImplicitRange(0x17000, 0x18AFF, 0xFB00, 0x17000),  # Tangut and components
    ImplicitRange(0x18D00, 0x18D8F, 0xFB00, 0x17000),  # Tangut supplement
    ImplicitRange(0x1B170, 0x1B2FF, 0xFB01),  # Nushu
    ImplicitRange(0x18B00, 0x18CFF, 0xFB02),  # Khitan small script
)

CORE_HAN_RANGES = (
    (0x4E00, 0x9FFF),
    (0xFA0E, 0xFA0F),
    (0xFA11, 0xFA11),
    (0xFA13, 0xFA14),
    (0xFA1F, 0xFA1F),
    (0xFA21, 0xFA21),
    (0xFA23, 0xFA24),
    (0xFA27, 0xFA29),
)

OTHER_HAN_RANGES = (
    (0x3400, 0x4DBF),
    (0x20000, 0x2A6DF),
    (0x2A700, 0x2B739),
    (0x2B740, 0x2B81D),
    (0x2B820, 0x2CEA1),
    (0x2CEB0, 0x2EBE0),
    (0x2EBF0, 0x2EE5D),
    (0x30000, 0x3134A),
    (0x31350, 0x323AF),
)


@dataclass(frozen=True)
class ImplicitWeightConfig:
    """Table-supplied constants for implicit weight derivation.

    The defaults follow the Unicode Collation Algorithm's derivation rules;
    tables that declare ``@implicitweights`` ranges replace
    ``siniform_ranges`` with their own.
    """

    siniform_ranges: tuple[ImplicitRange, ...] = SINIFORM_RANGES
    core_han_ranges: tuple[tuple[int, int], ...] = CORE_HAN_RANGES
    other_han_ranges: tuple[tuple[int, int], ...] = OTHER_HAN_RANGES
    core_han_base: int = 0xFB40
    other_han_base: int = 0xFB80
    unassigned_base: int = 0xFBC0
    secondary: int = DEFAULT_SECONDARY
    tertiary: int = DEFAULT_TERTIARY
    bases: tuple[int, ...] = field(init=False, repr=False, compare=False, default=())

    def __post_init__(self) -> None:
        bases = {item.base for item in self.siniform_ranges}
        bases.update({self.core_han_base, self.other_han_base, self.unassigned_base})
        object.__setattr__(self, "bases", tuple(sorted(bases)))

    def with_siniform_ranges(self, ranges: tuple[ImplicitRange, ...]) -> "ImplicitWeightConfig":
        """Return a copy using ``ranges`` with per-lead shared offset origins.

        Args:
            ranges: Ranges declared by the table source, in any order.

        Returns:
            New configuration whose ranges sharing a lead weight are offset
            from the lowest start among them.
        """

        origins: dict[int, int] = {}
        for item in ranges:
            origins[item.base] = min(origins.get(item.base, item.start), item.start)
        normalized = tuple(
            ImplicitRange(item.start, item.end, item.base, origins[item.base]) for item in ranges
        )
        return ImplicitWeightConfig(
            siniform_ranges=normalized,
            core_han_ranges=self.core_han_ranges,
            other_han_ranges=self.other_han_ranges,
            core_han_base=self.core_han_base,
            other_han_base=self.other_han_base,
            unassigned_base=self.unassigned_base,
            secondary=self.secondary,
            tertiary=self.tertiary,
        )


def _in_ranges(code_point: int, ranges: tuple[tuple[int, int], ...]) -> bool:
    return any(start <= code_point <= end for start, end in ranges)


def implicit_weight_halves(code_point: int, config: ImplicitWeightConfig) -> tuple[int, int]:
    """Compute the ``(AAAA, BBBB)`` implicit weight pair for a code point.

    Args:
        code_point: Unicode scalar value without an explicit table mapping.
        config: Implicit weight constants of the active table.

    Returns:
        Lead and trail 16-bit weights.
    """

    for item in config.siniform_ranges:
        if code_point in item:
            return item.base, ((code_point - item.offset_origin) & TRAIL_MASK) | TRAIL_FLAG

    if _in_ranges(code_point, config.core_han_ranges):
        base = config.core_han_base
    elif _in_ranges(code_point, config.other_han_ranges):
        base = config.other_han_base
    else:
        base = config.unassigned_base
    return base + (code_point >> 15), (code_point & TRAIL_MASK) | TRAIL_FLAG


def implicit_primary(code_point: int, config: ImplicitWeightConfig) -> int:
    """Return the packed implicit primary weight for ``code_point``."""

    lead, trail = implicit_weight_halves(code_point, config)
    return (lead << 16) | trail


def implicit_element(code_point: int, config: ImplicitWeightConfig) -> CollationElement:
    """Synthesize the collation element for an unmapped code point.

    Args:
        code_point: Unicode scalar value without an explicit table mapping.
        config: Implicit weight constants of the active table.

    Returns:
        A non-variable element with the implicit primary and the default
        minimal secondary and tertiary weights.
    """

    return CollationElement(
        primary=implicit_primary(code_point, config),
        secondary=config.secondary,
        tertiary=config.tertiary,
    )
