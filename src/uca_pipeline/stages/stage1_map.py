"""Stage 1: Map a normalized code point sequence to collation elements.

The scan runs left to right. At each position the longest contiguous table
key is matched first; then the non-starters that follow it are examined for a
discontiguous extension of that key. Marks skipped over stay in the input and
are mapped after the extended match, so their own elements follow the
contraction's elements in their original order. Code points without any table
entry receive an implicit element, so every input code point is accounted for.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Callable, Sequence

from uca_pipeline.models import CollationElement
from uca_pipeline.table.repository import CollationElementTable
from uca_pipeline.table.trie import ROOT

logger = logging.getLogger(__name__)

# Upper bound on non-starters examined after one match (Stream-Safe Text Format).
MAX_NONSTARTER_LOOKAHEAD = 30


def canonical_combining_class(code_point: int) -> int:
    """Return the canonical combining class of ``code_point``."""

    return unicodedata.combining(chr(code_point))


def _remaining_positions(consumed: list[bool], start: int, limit: int) -> list[int]:
    """Return up to ``limit`` unconsumed input indexes from ``start`` onward."""

    positions: list[int] = []
    for index in range(start, len(consumed)):
        if len(positions) == limit:
            break
        if not consumed[index]:
            positions.append(index)
    return positions


def _contiguous_match(
    code_points: Sequence[int],
    positions: Sequence[int],
    preceding: Sequence[int],
    table: CollationElementTable,
) -> tuple[int, int]:
    """Return ``(length, node)`` of the longest key that yields elements here.

    Keys that exist only with a preceding context are passed over when the
    context does not match, falling back to the next shorter key.
    """

    for length, node in reversed(table.prefix_matches(code_points, positions)):
        key = [code_points[index] for index in positions[:length]]
        if table.resolve(node, key, preceding) is not None:
            return length, node
    return 0, ROOT


def _extend_discontiguous(
    code_points: Sequence[int],
    consumed: list[bool],
    key: list[int],
    after: int,
    node: int,
    preceding: Sequence[int],
    table: CollationElementTable,
    combining_class: Callable[[int], int],
) -> tuple[int, list[int]]:
    """Try to extend a matched key with unblocked non-starters that follow it.

    Args:
        code_points: Full input sequence.
        consumed: Per-index flags of code points already mapped.
        key: Code points of the match so far; extended in place.
        after: First input index after the contiguous match.
        node: Trie node of the contiguous match.
        preceding: Code points before the match, for context entries.
        table: Table providing trie navigation.
        combining_class: Canonical combining class lookup.

    Returns:
        Tuple ``(node, taken)`` with the trie node of the final match and the
        input indexes absorbed into it (empty when no extension happened).
    """

    taken: list[int] = []
    skipped_max_class = 0
    examined = 0
    index = after
    while index < len(code_points) and examined < MAX_NONSTARTER_LOOKAHEAD:
        if consumed[index]:
            index += 1
            continue
        code_point = code_points[index]
        ccc = combining_class(code_point)
        if ccc == 0:
            break
        examined += 1
        # Blocked when a skipped mark between the match and this one has an
        # equal or higher combining class.
        if ccc > skipped_max_class:
            next_node = table.extend(node, code_point)
            if next_node is not None and table.resolve(next_node, [*key, code_point], preceding) is not None:
                node = next_node
                key.append(code_point)
                taken.append(index)
                index += 1
                continue
        skipped_max_class = max(skipped_max_class, ccc)
        index += 1
    return node, taken


def map_collation_elements(
    code_points: Sequence[int],
    table: CollationElementTable,
    combining_class: Callable[[int], int] = canonical_combining_class,
) -> list[CollationElement]:
    """Map a normalized (NFD) code point sequence to collation elements.

    Args:
        code_points: Canonically decomposed input.
        table: Collation element table to query.
        combining_class: Canonical combining class lookup; defaults to the
            interpreter's Unicode database.

    Returns:
        Ordered collation elements covering every input code point.
    """

    elements: list[CollationElement] = []
    consumed = [False] * len(code_points)
    position = 0

    while position < len(code_points):
        if consumed[position]:
            position += 1
            continue

        positions = _remaining_positions(consumed, position, table.max_key_length)
        preceding = code_points[max(0, position - table.max_prefix_length) : position]
        length, node = _contiguous_match(code_points, positions, preceding, table)
        if length:
            matched = positions[:length]
        else:
            # A starter without an entry of its own may still open a
            # contraction completed by a later non-starter.
            node = table.extend(ROOT, code_points[position]) or ROOT
            matched = [position]
        for index in matched:
            consumed[index] = True

        key = [code_points[index] for index in matched]
        taken: list[int] = []
        if node != ROOT:
            node, taken = _extend_discontiguous(
                code_points,
                consumed,
                key,
                matched[-1] + 1,
                node,
                preceding,
                table,
                combining_class,
            )
        for index in taken:
            consumed[index] = True
        if taken:
            logger.debug(
                "Discontiguous match at index %d absorbed indexes %s",
                position,
                taken,
            )

        resolved = table.resolve(node, key, preceding)
        if resolved is None:
            elements.append(table.implicit_element(code_points[position]))
        else:
            elements.extend(resolved)
        position += 1

    return elements
