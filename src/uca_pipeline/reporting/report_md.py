"""Markdown report generation for conformance check runs."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from uca_pipeline.models import CollationConfig, ConformanceResult

FAILURE_LIMIT = 200


def _markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a deterministic GitHub-flavored markdown table.

    Args:
        headers: Table header labels.
        rows: Table body rows as string sequences.

    Returns:
        Markdown table text.
    """

    line_header = "| " + " | ".join(headers) + " |"
    line_sep = "| " + " | ".join("---" for _ in headers) + " |"
    body = ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join([line_header, line_sep, *body])


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def build_report_md(
    results: Sequence[ConformanceResult],
    config: CollationConfig,
    source: str = "",
) -> str:
    """Build the markdown report for one conformance run.

    Args:
        results: Ordering check results in test order.
        config: Configuration the checks ran with.
        source: Optional name of the test data source.

    Returns:
        Full markdown content with summary and failure tables.
    """

    passed = [result for result in results if result.passed]
    errored = [result for result in results if result.error is not None]
    failed = [result for result in results if not result.passed and result.error is None]

    lines = ["# Collation conformance report", ""]
    if source:
        lines.extend([f"Source: `{source}`", ""])

    lines.extend(["## Configuration", ""])
    lines.append(
        _markdown_table(
            ["setting", "value"],
            [
                ("weighting", config.weighting.value),
                ("strength", config.strength.name.lower()),
            ],
        )
    )

    lines.extend(["", "## Summary", ""])
    lines.append(
        _markdown_table(
            ["checked", "passed", "failed", "invalid_input"],
            [(str(len(results)), str(len(passed)), str(len(failed)), str(len(errored)))],
        )
    )

    relation_counts: Counter[str] = Counter(
        result.actual.symbol for result in results if result.actual is not None
    )
    lines.extend(["", "## Observed relations", ""])
    lines.append(
        _markdown_table(
            ["relation", "count"],
            [(symbol, str(relation_counts[symbol])) for symbol in ("<", "=", ">")],
        )
    )

    lines.extend(["", "## Failures", ""])
    if failed:
        rows = [
            (
                _cell(result.left),
                _cell(result.right),
                result.expected.symbol + ("=" if result.allow_equal else ""),
                result.actual.symbol if result.actual is not None else "",
            )
            for result in failed[:FAILURE_LIMIT]
        ]
        lines.append(_markdown_table(["left", "right", "expected", "actual"], rows))
        if len(failed) > FAILURE_LIMIT:
            lines.extend(["", f"... and {len(failed) - FAILURE_LIMIT} more"])
    else:
        lines.append("None.")

    lines.extend(["", "## Invalid inputs", ""])
    if errored:
        rows = [
            (_cell(result.left), _cell(result.right), _cell(result.error or ""))
            for result in errored[:FAILURE_LIMIT]
        ]
        lines.append(_markdown_table(["left", "right", "error"], rows))
    else:
        lines.append("None.")

    return "\n".join(lines) + "\n"
