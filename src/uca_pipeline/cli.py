"""CLI entrypoint for the collation sort key pipeline."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from uca_pipeline.conformance import check_adjacent, parse_collation_test_lines
from uca_pipeline.errors import CollationError
from uca_pipeline.io.key_io import format_sort_key, write_sorted_tsv
from uca_pipeline.models import Strength, VariableWeighting
from uca_pipeline.pipeline import Collator, identity_normalizer, nfd_normalizer
from uca_pipeline.reporting.report_md import build_report_md
from uca_pipeline.table.repository import load_table
from uca_pipeline.validation import coerce_config

logger = logging.getLogger(__name__)


def _format_table(headers: Sequence[str], data_rows: Sequence[Sequence[str]]) -> str:
    """Format rows as an ASCII table for terminal output.

    Args:
        headers: Table headers.
        data_rows: Row values.

    Returns:
        Monospace table string.
    """

    widths = [len(header) for header in headers]
    for row in data_rows:
        for idx, value in enumerate(row):
            widths[idx] = max(widths[idx], len(value))

    header_line = " | ".join(header.ljust(widths[idx]) for idx, header in enumerate(headers))
    separator_line = "-+-".join("-" * width for width in widths)
    body_lines = [
        " | ".join(value.ljust(widths[idx]) for idx, value in enumerate(row)) for row in data_rows
    ]
    return "\n".join([header_line, separator_line, *body_lines])


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--table",
        required=True,
        type=Path,
        help="Path to a collation element table in allkeys.txt format.",
    )
    parser.add_argument(
        "--weighting",
        default=VariableWeighting.SHIFTED.value,
        choices=[member.value for member in VariableWeighting],
        help="Variable weighting policy (default: shifted).",
    )
    parser.add_argument(
        "--strength",
        default=Strength.QUATERNARY.name.lower(),
        choices=[member.name.lower() for member in Strength],
        help="Comparison strength (default: quaternary).",
    )
    parser.add_argument(
        "--assume-normalized",
        action="store_true",
        help="Treat input as already canonically decomposed (skip NFD normalization).",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct CLI argument parser.

    Returns:
        Configured parser with ``sort``, ``key`` and ``check`` commands.
    """

    parser = argparse.ArgumentParser(
        prog="uca-pipeline",
        description="Derive Unicode Collation Algorithm sort keys and order text.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    commands = parser.add_subparsers(dest="command", required=True)

    sort_parser = commands.add_parser("sort", help="Sort the lines of a UTF-8 text file.")
    _add_common_arguments(sort_parser)
    sort_parser.add_argument("input", type=Path, help="Input text file, one item per line.")
    sort_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a TSV of sorted lines with their keys instead of printing lines.",
    )
    sort_parser.add_argument("--no-header", action="store_true", help="Do not write TSV header.")
    sort_parser.add_argument(
        "--workers", type=int, default=1, help="Threads used for key derivation (default: 1)."
    )

    key_parser = commands.add_parser("key", help="Print the sort key of each argument.")
    _add_common_arguments(key_parser)
    key_parser.add_argument("texts", nargs="+", help="Texts to key.")

    check_parser = commands.add_parser(
        "check", help="Check ordering of a CollationTest file and write a markdown report."
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument("test_file", type=Path, help="CollationTest_*.txt file.")
    check_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Markdown report output path (default: report.md next to the test file).",
    )
    return parser


def _build_collator(args: argparse.Namespace) -> Collator:
    config = coerce_config(args.weighting, args.strength)
    table = load_table(args.table)
    normalizer = identity_normalizer if args.assume_normalized else nfd_normalizer
    return Collator(table=table, config=config, normalizer=normalizer)


def _run_sort(args: argparse.Namespace) -> int:
    if not args.input.exists():
        raise SystemExit(f"Input file not found: {args.input}")
    collator = _build_collator(args)
    with args.input.open("r", encoding="utf-8") as handle:
        texts = [line.rstrip("\n") for line in handle]

    keyed, failed = collator.sort(texts, max_workers=args.workers)

    if args.output is not None:
        write_sorted_tsv(keyed, output_path=args.output, include_header=not args.no_header)
        print(f"Wrote {len(keyed)} rows to {args.output}")
    else:
        for result in keyed:
            print(result.text)

    if failed:
        logger.warning("%d lines could not be keyed", len(failed))
        for result in failed:
            logger.warning("%r: %s", result.text, result.error)
    return 0


def _run_key(args: argparse.Namespace) -> int:
    collator = _build_collator(args)
    rows = []
    for result in collator.sort_keys(args.texts):
        rendered = format_sort_key(result.key) if result.key is not None else f"ERROR: {result.error}"
        rows.append([result.text, rendered])
    print(_format_table(["text", "sort_key"], rows))
    return 0


def _run_check(args: argparse.Namespace) -> int:
    if not args.test_file.exists():
        raise SystemExit(f"Test file not found: {args.test_file}")
    collator = _build_collator(args)
    with args.test_file.open("r", encoding="utf-8") as handle:
        cases = parse_collation_test_lines(handle)

    results = check_adjacent(collator, cases)
    report_path = args.report if args.report is not None else args.test_file.parent / "report.md"
    report_path.write_text(
        build_report_md(results, collator.config, source=str(args.test_file)), encoding="utf-8"
    )

    passed = sum(1 for result in results if result.passed)
    invalid = sum(1 for result in results if result.error is not None)
    failed = len(results) - passed - invalid
    print(f"Checked {len(results)} adjacent pairs from {len(cases)} lines")
    print(f"Wrote report to {report_path}")
    print(
        "\n"
        + _format_table(
            ["passed", "failed", "invalid_input"],
            [[str(passed), str(failed), str(invalid)]],
        )
    )
    return 1 if failed else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run CLI workflow from arguments through output generation.

    Returns:
        Zero exit status on success; 1 when a conformance check fails.
    """

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {"sort": _run_sort, "key": _run_key, "check": _run_check}
    try:
        return handlers[args.command](args)
    except CollationError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    raise SystemExit(main())
