"""Serialization helpers for sort keys and sorted output artifacts."""

from __future__ import annotations

from pathlib import Path
import struct
from typing import Sequence

from uca_pipeline.models import KeyResult, SortKey, Strength

TSV_HEADER = ["text", "sort_key"]


def sort_key_to_bytes(key: SortKey) -> bytes:
    """Encode a key as big-endian 16-bit units; ``0x0000`` separates levels.

    Byte strings compare with ``<`` exactly like the keys they encode.
    """

    return struct.pack(f">{len(key.units)}H", *key.units)


def sort_key_from_bytes(payload: bytes, strength: Strength = Strength.QUATERNARY) -> SortKey:
    """Decode bytes produced by :func:`sort_key_to_bytes`.

    Raises:
        ValueError: If ``payload`` has an odd length.
    """

    if len(payload) % 2:
        raise ValueError(f"Sort key payload must hold whole 16-bit units, got {len(payload)} bytes")
    units = struct.unpack(f">{len(payload) // 2}H", payload)
    return SortKey(units=tuple(units), strength=Strength(strength))


def format_sort_key(key: SortKey) -> str:
    """Render a key as hex units with ``|`` between levels.

    Example: ``1C47 1C60 | 0020 0020 | 0002 0002``. An empty level renders
    as ``-``.
    """

    parts = [" ".join(f"{unit:04X}" for unit in level) for level in key.levels]
    return " | ".join(part or "-" for part in parts)


def write_sorted_tsv(
    results: Sequence[KeyResult],
    output_path: Path,
    include_header: bool = True,
) -> None:
    """Write keyed texts to a TSV file, one ``text<TAB>sort_key`` row each.

    Results without a key are skipped; callers report them separately.

    Args:
        results: Keyed texts, already in the desired order.
        output_path: Destination TSV file path.
        include_header: Whether to include a header row.
    """

    with output_path.open("w", encoding="utf-8") as handle:
        if include_header:
            handle.write("\t".join(TSV_HEADER))
            handle.write("\n")
        for result in results:
            if result.key is None:
                continue
            handle.write("\t".join([result.text, format_sort_key(result.key)]))
            handle.write("\n")
