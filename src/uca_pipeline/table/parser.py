"""Parsing utilities for collation element tables in the ``allkeys.txt`` format.

The Default Unicode Collation Element Table and tailored tables derived from
it share one line-oriented format::

    @version 15.1.0
    @implicitweights 17000..18AFF; FB00 # Tangut and Tangut Components
    0061 ; [.23EC.0020.0002] # LATIN SMALL LETTER A
    0063 0068 ; [.2426.0020.0002] # contraction
    00E6 ; [.23EC.0020.0004][.0000.0110.0004][.2437.0020.0004] # expansion

Entries may carry a preceding context written before a ``|``
(``0E40 | 0E01 ; ...``): the mapping for the key then applies only when the
context code points immediately precede it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import Iterable

from uca_pipeline.models import CollationElement
from uca_pipeline.table.implicit import ImplicitRange

ELEMENT_RE = re.compile(
    r"\[([.*])([0-9A-Fa-f]{4})\.([0-9A-Fa-f]{4})\.([0-9A-Fa-f]{4})(?:\.([0-9A-Fa-f]{4}))?\]"
)
ENTRY_RE = re.compile(r"^([0-9A-Fa-f |]+);\s*((?:\[[^\]]*\]\s*)+)$")
IMPLICIT_RE = re.compile(r"^@implicitweights\s+([0-9A-Fa-f]+)\.\.([0-9A-Fa-f]+)\s*;\s*([0-9A-Fa-f]+)$")
VERSION_RE = re.compile(r"^@version\s+(\S+)$")
CODE_POINT_RE = re.compile(r"[0-9A-Fa-f]{4,6}")


class MappingKind(str, Enum):
    """Shape of a collation element mapping by input and output length."""

    SIMPLE = "simple"
    EXPANSION = "expansion"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"


@dataclass(frozen=True)
class TableEntry:
    """One collation element mapping from code points to collation elements.

    ``prefix`` holds the preceding-context code points required for the
    mapping to apply; it is empty for ordinary entries.
    """

    key: tuple[int, ...]
    elements: tuple[CollationElement, ...]
    prefix: tuple[int, ...] = ()

    @property
    def kind(self) -> MappingKind:
        """Classify the mapping by the number of code points and elements."""

        many_in = len(self.key) > 1
        many_out = len(self.elements) > 1
        if many_in:
            return MappingKind.MANY_TO_MANY if many_out else MappingKind.MANY_TO_ONE
        return MappingKind.EXPANSION if many_out else MappingKind.SIMPLE

    @property
    def is_contraction(self) -> bool:
        return len(self.key) > 1


@dataclass(frozen=True)
class ParsedTable:
    """Everything read from one table source."""

    entries: tuple[TableEntry, ...]
    version: str | None = None
    implicit_ranges: tuple[ImplicitRange, ...] = field(default_factory=tuple)


def parse_element(text: str) -> CollationElement:
    """Parse one element in ``[.XXXX.XXXX.XXXX]`` notation.

    Args:
        text: Element notation; ``*`` in place of the leading ``.`` marks a
            variable element and an optional fourth weight is accepted.

    Returns:
        The parsed collation element.

    Raises:
        ValueError: If ``text`` is not exactly one element in table notation.
    """

    match = ELEMENT_RE.fullmatch(text.strip())
    if not match:
        raise ValueError(f"Malformed collation element: {text!r}")
    return _element_from_match(match)


def parse_elements(payload: str) -> tuple[CollationElement, ...]:
    """Parse a run of adjacent elements such as ``[.1C47.0020.0002][.0000.0024.0002]``.

    Raises:
        ValueError: If the payload contains anything besides well-formed
            elements and whitespace, or no element at all.
    """

    elements: list[CollationElement] = []
    position = 0
    payload = payload.strip()
    while position < len(payload):
        if payload[position].isspace():
            position += 1
            continue
        match = ELEMENT_RE.match(payload, position)
        if not match:
            raise ValueError(f"Malformed collation element list: {payload!r}")
        elements.append(_element_from_match(match))
        position = match.end()
    if not elements:
        raise ValueError("Collation element list is empty")
    return tuple(elements)


def _element_from_match(match: re.Match[str]) -> CollationElement:
    marker, primary, secondary, tertiary, quaternary = match.groups()
    return CollationElement(
        primary=int(primary, 16),
        secondary=int(secondary, 16),
        tertiary=int(tertiary, 16),
        quaternary=int(quaternary, 16) if quaternary else 0,
        variable=marker == "*",
    )


def parse_code_points(field_text: str) -> tuple[int, ...]:
    """Parse a space-separated list of hexadecimal code points.

    Raises:
        ValueError: If a token is not a 4-6 digit hexadecimal number.
    """

    tokens = field_text.split()
    for token in tokens:
        if not CODE_POINT_RE.fullmatch(token):
            raise ValueError(f"Malformed code point: {token!r}")
    return tuple(int(token, 16) for token in tokens)


def _strip_comment(line: str) -> str:
    for marker in ("#", "%"):
        cut = line.find(marker)
        if cut != -1:
            line = line[:cut]
    return line.strip()


def parse_allkeys_lines(lines: Iterable[str]) -> ParsedTable:
    """Parse table lines into entries plus table-level directives.

    Comments (``#`` and ``%``) and blank lines are ignored. ``@version`` and
    ``@implicitweights`` directives are captured; other ``@`` directives are
    skipped.

    Args:
        lines: Raw table lines.

    Returns:
        Parsed entries in source order with version and implicit ranges.

    Raises:
        ValueError: If an entry line is malformed. The message names the
            1-based line number.
    """

    entries: list[TableEntry] = []
    implicit_ranges: list[ImplicitRange] = []
    version: str | None = None

    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if line.startswith("@"):
            directive = line.split("#", 1)[0].strip()
            version_match = VERSION_RE.match(directive)
            if version_match:
                version = version_match.group(1)
                continue
            implicit_match = IMPLICIT_RE.match(directive)
            if implicit_match:
                start, end, base = (int(group, 16) for group in implicit_match.groups())
                implicit_ranges.append(ImplicitRange(start, end, base))
            elif directive.startswith("@implicitweights"):
                raise ValueError(f"Line {line_no}: malformed @implicitweights directive")
            continue

        line = _strip_comment(line)
        if not line:
            continue

        match = ENTRY_RE.match(line)
        if not match:
            raise ValueError(f"Line {line_no}: malformed table entry {line!r}")
        head, payload = match.groups()
        try:
            prefix_text, _, key_text = head.rpartition("|")
            key = parse_code_points(key_text)
            prefix = parse_code_points(prefix_text)
            elements = parse_elements(payload)
        except ValueError as exc:
            raise ValueError(f"Line {line_no}: {exc}") from exc
        if not key:
            raise ValueError(f"Line {line_no}: entry has no code points")
        entries.append(TableEntry(key=key, elements=elements, prefix=prefix))

    return ParsedTable(
        entries=tuple(entries),
        version=version,
        implicit_ranges=tuple(implicit_ranges),
    )
