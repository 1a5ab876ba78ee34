"""Index-based prefix trie for contraction lookup.

Nodes live in flat parallel lists and refer to each other by integer index, so
the structure has no reference cycles and can be serialized as plain lists.
Node 0 is the root and never carries a value.
"""

from __future__ import annotations

from typing import Generic, Iterable, Sequence, TypeVar

ROOT = 0

V = TypeVar("V")


class ContractionTrie(Generic[V]):
    """Trie keyed by code point sequences with longest-prefix lookup."""

    def __init__(self, items: Iterable[tuple[Sequence[int], V]] = ()) -> None:
        self._children: list[dict[int, int]] = [{}]
        self._values: list[V | None] = [None]
        for key, value in items:
            self.insert(key, value)

    def __len__(self) -> int:
        return sum(1 for value in self._values if value is not None)

    def insert(self, key: Sequence[int], value: V) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            ValueError: If ``key`` is empty.
        """

        if not key:
            raise ValueError("Trie keys must contain at least one code point")
        node = ROOT
        for code_point in key:
            child = self._children[node].get(code_point)
            if child is None:
                child = len(self._children)
                self._children.append({})
                self._values.append(None)
                self._children[node][code_point] = child
            node = child
        self._values[node] = value

    def child(self, node: int, code_point: int) -> int | None:
        """Return the index of the node reached from ``node`` by ``code_point``."""

        return self._children[node].get(code_point)

    def value(self, node: int) -> V | None:
        return self._values[node]

    def get(self, key: Sequence[int]) -> V | None:
        """Exact lookup of ``key``; ``None`` when the key has no value."""

        node = ROOT
        for code_point in key:
            next_node = self._children[node].get(code_point)
            if next_node is None:
                return None
            node = next_node
        return self._values[node] if node != ROOT else None

    def prefix_matches(self, code_points: Sequence[int], positions: Sequence[int]) -> list[tuple[int, int]]:
        """List every key that matches ``code_points`` along ``positions``.

        ``positions`` lists the input indexes to walk in order, which lets the
        caller skip code points already consumed by an earlier match.

        Args:
            code_points: Full input sequence.
            positions: Candidate input indexes, starting at the match origin.

        Returns:
            ``(length, node)`` pairs, shortest first, where ``length`` counts
            how many of ``positions`` the key spans and ``node`` holds its
            value. Empty when nothing matches.
        """

        matches: list[tuple[int, int]] = []
        node = ROOT
        for walked, index in enumerate(positions, start=1):
            next_node = self._children[node].get(code_points[index])
            if next_node is None:
                break
            node = next_node
            if self._values[node] is not None:
                matches.append((walked, node))
        return matches
