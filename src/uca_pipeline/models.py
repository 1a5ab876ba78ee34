"""Data models shared across the collation pipeline stages.

This module defines explicit immutable contracts between stages so each stage
has a narrow, testable interface: collation elements produced by the element
mapper, leveled weights produced by the weight deriver, and the sort keys that
the comparator orders.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

IGNORABLE_WEIGHT = 0
LEVEL_SEPARATOR = 0
MAX_UNIT = 0xFFFF
MAX_QUATERNARY = 0xFFFF

LeveledWeights = tuple[int, int, int, int]


class VariableWeighting(str, Enum):
    """Policy applied to variable (punctuation and symbol) collation elements."""

    NON_IGNORABLE = "non-ignorable"
    BLANKED = "blanked"
    SHIFTED = "shifted"
    SHIFT_TRIMMED = "shift-trimmed"


class Strength(IntEnum):
    """Maximum weight level considered when building and comparing keys."""

    PRIMARY = 1
    SECONDARY = 2
    TERTIARY = 3
    QUATERNARY = 4


class Relation(IntEnum):
    """Ordering relation returned by comparator functions."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    @property
    def symbol(self) -> str:
        """Return the relation rendered as ``<``, ``=`` or ``>``."""

        return {-1: "<", 0: "=", 1: ">"}[self.value]

    @classmethod
    def from_symbol(cls, symbol: str) -> "Relation":
        """Parse ``<``, ``=`` or ``>`` into a relation.

        Raises:
            ValueError: If ``symbol`` is not one of the three relation symbols.
        """

        mapping = {"<": cls.LESS, "=": cls.EQUAL, ">": cls.GREATER}
        try:
            return mapping[symbol.strip()]
        except KeyError:
            raise ValueError(f"Unknown relation symbol: {symbol!r}") from None


@dataclass(frozen=True)
class CollationElement:
    """One four-level weight tuple assigned to a matched unit of text.

    ``variable`` marks elements whose primary weight lies in the table's
    variable range (written with ``*`` in the table format). Primary weights
    of explicit table entries are 16-bit; implicit primaries carry their two
    16-bit halves in one wider integer.
    """

    primary: int
    secondary: int
    tertiary: int
    quaternary: int = 0
    variable: bool = False

    @property
    def weights(self) -> LeveledWeights:
        """Return the four weights as a tuple ordered by level."""

        return (self.primary, self.secondary, self.tertiary, self.quaternary)

    def weight_at(self, level: int) -> int:
        """Return the weight at a 1-based level.

        Raises:
            ValueError: If ``level`` is outside ``1..4``.
        """

        if not 1 <= level <= 4:
            raise ValueError(f"Collation level must be within 1..4, got {level}")
        return self.weights[level - 1]

    def is_primary(self) -> bool:
        return self.primary != IGNORABLE_WEIGHT

    def is_secondary(self) -> bool:
        return self.primary == IGNORABLE_WEIGHT and self.secondary != IGNORABLE_WEIGHT

    def is_tertiary(self) -> bool:
        return (
            self.primary == IGNORABLE_WEIGHT
            and self.secondary == IGNORABLE_WEIGHT
            and self.tertiary != IGNORABLE_WEIGHT
        )

    def is_quaternary(self) -> bool:
        return self.weights[:3] == (0, 0, 0) and self.quaternary != IGNORABLE_WEIGHT

    def is_ignorable(self) -> bool:
        """Return whether the element has an ignorable primary weight."""

        return self.primary == IGNORABLE_WEIGHT

    def is_completely_ignorable(self) -> bool:
        return all(weight == IGNORABLE_WEIGHT for weight in self.weights)

    def is_level_ignorable(self, level: int) -> bool:
        """Return whether the element is ignorable at ``level`` but not below it.

        A "level 1 ignorable" element is a secondary collation element, a
        "level 3 ignorable" element is a quaternary one, and a "level 4
        ignorable" element is completely ignorable.
        """

        if not 1 <= level <= 4:
            raise ValueError(f"Collation level must be within 1..4, got {level}")
        weights = self.weights
        if any(weights[: level]):
            return False
        return level == 4 or weights[level] != IGNORABLE_WEIGHT

    def __str__(self) -> str:
        lead = "*" if self.variable else "."
        parts = [f"{self.primary:04X}", f"{self.secondary:04X}", f"{self.tertiary:04X}"]
        if self.quaternary:
            parts.append(f"{self.quaternary:04X}")
        return f"[{lead}{'.'.join(parts)}]"


@dataclass(frozen=True, order=True)
class SortKey:
    """Ordered key built from leveled weights.

    ``units`` is a flat tuple of 16-bit weight units with ``LEVEL_SEPARATOR``
    between levels. Keys compare lexicographically on ``units`` which is the
    multi-pass level-by-level ordering of the collation algorithm.
    """

    units: tuple[int, ...]
    strength: Strength = Strength.QUATERNARY

    @property
    def levels(self) -> tuple[tuple[int, ...], ...]:
        """Return the key split into per-level unit tuples."""

        levels: list[tuple[int, ...]] = []
        current: list[int] = []
        for unit in self.units:
            if unit == LEVEL_SEPARATOR:
                levels.append(tuple(current))
                current = []
                continue
            current.append(unit)
        levels.append(tuple(current))
        return tuple(levels)

    def __len__(self) -> int:
        return len(self.units)


@dataclass(frozen=True)
class CollationConfig:
    """Weighting policy and strength selected once per comparison setup."""

    weighting: VariableWeighting = VariableWeighting.SHIFTED
    strength: Strength = Strength.QUATERNARY


@dataclass(frozen=True)
class KeyResult:
    """Per-input outcome of a batch key derivation.

    Exactly one of ``key`` and ``error`` is set.
    """

    text: str
    key: SortKey | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ConformanceResult:
    """Outcome of one ordering check between two inputs.

    ``allow_equal`` widens the expectation to "expected or equal", which is
    how adjacent lines of an ordered test file are checked.
    """

    left: str
    right: str
    expected: Relation
    actual: Relation | None
    error: str | None = None
    allow_equal: bool = False

    @property
    def passed(self) -> bool:
        """Return whether the derived relation satisfies the expectation."""

        if self.error is not None or self.actual is None:
            return False
        return self.actual == self.expected or (self.allow_equal and self.actual is Relation.EQUAL)
