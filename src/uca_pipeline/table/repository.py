"""Collation element table and the repository that loads it from disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
import logging
from pathlib import Path
from typing import Iterable, Sequence

from uca_pipeline.errors import TableUnavailableError
from uca_pipeline.models import CollationElement
from uca_pipeline.table.implicit import ImplicitWeightConfig, implicit_element
from uca_pipeline.table.parser import ParsedTable, TableEntry, parse_allkeys_lines
from uca_pipeline.table.trie import ROOT, ContractionTrie

logger = logging.getLogger(__name__)

Elements = tuple[CollationElement, ...]


@dataclass(frozen=True, eq=False)
class CollationElementTable:
    """Immutable mapping from code point sequences to collation elements.

    Every key is indexed in a :class:`ContractionTrie` for exact and
    longest-prefix lookup. Keys that only occur with a preceding context are
    stored with an empty element tuple, so they can be matched but yield
    elements only through their context entries, which are indexed by key
    separately. Both indexes are built once at construction and never
    mutated, so one table can be shared by any number of concurrent callers.
    """

    entries: tuple[TableEntry, ...]
    implicit: ImplicitWeightConfig = field(default_factory=ImplicitWeightConfig)
    version: str | None = None
    _trie: ContractionTrie[Elements] = field(init=False, repr=False)
    _contexts: dict[tuple[int, ...], tuple[TableEntry, ...]] = field(init=False, repr=False)
    max_key_length: int = field(init=False, repr=False)
    max_prefix_length: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        trie: ContractionTrie[Elements] = ContractionTrie()
        contexts: dict[tuple[int, ...], list[TableEntry]] = {}
        for entry in self.entries:
            if entry.prefix:
                contexts.setdefault(entry.key, []).append(entry)
            else:
                trie.insert(entry.key, entry.elements)
        for key in contexts:
            if trie.get(key) is None:
                trie.insert(key, ())
        # Longest context first so the most specific one wins.
        ordered = {
            key: tuple(sorted(items, key=lambda item: len(item.prefix), reverse=True))
            for key, items in contexts.items()
        }
        object.__setattr__(self, "_trie", trie)
        object.__setattr__(self, "_contexts", ordered)
        object.__setattr__(
            self, "max_key_length", max((len(entry.key) for entry in self.entries), default=1)
        )
        object.__setattr__(
            self, "max_prefix_length", max((len(entry.prefix) for entry in self.entries), default=0)
        )

    @classmethod
    def from_parsed(cls, parsed: ParsedTable) -> "CollationElementTable":
        """Build a table from parser output, honoring ``@implicitweights``."""

        implicit = ImplicitWeightConfig()
        if parsed.implicit_ranges:
            implicit = implicit.with_siniform_ranges(parsed.implicit_ranges)
        return cls(entries=parsed.entries, implicit=implicit, version=parsed.version)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "CollationElementTable":
        """Parse ``allkeys.txt``-format lines and build a table.

        Raises:
            ValueError: If a line is malformed.
        """

        return cls.from_parsed(parse_allkeys_lines(lines))

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, key: Sequence[int]) -> Elements | None:
        """Return the elements mapped to exactly ``key`` without context, or ``None``."""

        return self._trie.get(key) or None

    def prefix_matches(self, code_points: Sequence[int], positions: Sequence[int]) -> list[tuple[int, int]]:
        """List keys matching along ``positions`` of ``code_points``, shortest first.

        Returns:
            ``(length, node)`` pairs as produced by
            :meth:`ContractionTrie.prefix_matches`.
        """

        return self._trie.prefix_matches(code_points, positions)

    def extend(self, node: int, code_point: int) -> int | None:
        """Return the trie node for the current key followed by ``code_point``."""

        return self._trie.child(node, code_point)

    def resolve(self, node: int, key: Sequence[int], preceding: Sequence[int]) -> Elements | None:
        """Return the elements a match of ``key`` at trie ``node`` produces.

        A context entry whose prefix ends ``preceding`` wins over the plain
        entry for the same key.

        Args:
            node: Trie node reached by ``key``.
            key: Matched key code points.
            preceding: Code points that precede the key in the input, in order.

        Returns:
            The matching elements, or ``None`` when ``node`` holds no plain
            entry and no context applies.
        """

        if node == ROOT:
            return None
        contextual = self.contextual_elements(key, preceding)
        if contextual is not None:
            return contextual
        return self._trie.value(node) or None

    def contextual_elements(self, key: Sequence[int], preceding: Sequence[int]) -> Elements | None:
        """Return elements of a context entry for ``key`` whose prefix ends ``preceding``.

        Args:
            key: Matched key code points.
            preceding: Code points that precede the key in the input, in order.

        Returns:
            Elements of the longest matching context entry, or ``None``.
        """

        for entry in self._contexts.get(tuple(key), ()):
            width = len(entry.prefix)
            if width <= len(preceding) and tuple(preceding[-width:]) == entry.prefix:
                return entry.elements
        return None

    def implicit_element(self, code_point: int) -> CollationElement:
        return implicit_element(code_point, self.implicit)

    @cached_property
    def variable_top(self) -> int:
        """Highest primary weight among variable elements, 0 when none are variable."""

        return max(
            (element.primary for entry in self.entries for element in entry.elements if element.variable),
            default=0,
        )

    @cached_property
    def contraction_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_contraction)

    def min_weight(self, level: int, ignore_zero: bool = False) -> int:
        """Return the least weight at ``level`` over every element in the table.

        Args:
            level: 1-based collation level.
            ignore_zero: Skip ignorable (zero) weights.

        Raises:
            ValueError: If the table has no weight to report.
        """

        weights = self._weights_at(level, ignore_zero)
        if not weights:
            raise ValueError(f"Table has no weights at level {level}")
        return min(weights)

    def max_weight(self, level: int) -> int:
        """Return the greatest weight at ``level`` over every element in the table.

        Raises:
            ValueError: If the table has no entries.
        """

        weights = self._weights_at(level, ignore_zero=False)
        if not weights:
            raise ValueError(f"Table has no weights at level {level}")
        return max(weights)

    def _weights_at(self, level: int, ignore_zero: bool) -> list[int]:
        weights = [
            element.weight_at(level) for entry in self.entries for element in entry.elements
        ]
        if ignore_zero:
            weights = [weight for weight in weights if weight]
        return weights


@dataclass(frozen=True)
class TableRepository:
    """Read-only repository that loads one table file on first access.

    Instances are path-scoped and deterministic; the parsed table is cached.
    """

    path: Path

    @cached_property
    def parsed(self) -> ParsedTable:
        """Load and cache the parsed table source.

        Raises:
            TableUnavailableError: If the file is missing, unreadable,
                malformed, or contains no entries.
        """

        if not self.path.exists():
            raise TableUnavailableError(f"Collation table file not found: {self.path}")

        try:
            with self.path.open("r", encoding="utf-8") as handle:
                parsed = parse_allkeys_lines(handle)
        except (OSError, UnicodeDecodeError) as exc:
            raise TableUnavailableError(f"Cannot read collation table {self.path}: {exc}") from exc
        except ValueError as exc:
            raise TableUnavailableError(f"Malformed collation table {self.path}: {exc}") from exc

        if not parsed.entries:
            raise TableUnavailableError(f"Collation table has no entries: {self.path}")
        return parsed

    @cached_property
    def table(self) -> CollationElementTable:
        table = CollationElementTable.from_parsed(self.parsed)
        logger.info(
            "Loaded collation table %s (version %s): %d entries, %d contractions",
            self.path,
            table.version or "unknown",
            len(table),
            table.contraction_count,
        )
        lowest_implicit = min(table.implicit.bases)
        if table.max_weight(1) >= lowest_implicit:
            logger.warning(
                "Explicit primary weights reach %04X, overlapping implicit lead weights from %04X",
                table.max_weight(1),
                lowest_implicit,
            )
        return table


def load_table(path: Path) -> CollationElementTable:
    """Load a collation element table from ``path``.

    Raises:
        TableUnavailableError: If the table cannot be produced.
    """

    return TableRepository(Path(path)).table
