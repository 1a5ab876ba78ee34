"""Top-level orchestration for the staged sort key pipeline."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
import unicodedata
from typing import Callable, Iterable, Sequence

from uca_pipeline.compare import compare_sort_keys, compare_weights
from uca_pipeline.errors import ConfigurationError, InvalidCodePointError, TableUnavailableError
from uca_pipeline.models import (
    CollationConfig,
    CollationElement,
    KeyResult,
    LeveledWeights,
    Relation,
    SortKey,
)
from uca_pipeline.stages.stage1_map import map_collation_elements
from uca_pipeline.stages.stage2_weight import derive_weights
from uca_pipeline.stages.stage3_sortkey import build_sort_key
from uca_pipeline.table.repository import CollationElementTable
from uca_pipeline.validation import text_to_code_points, validate_code_points, validate_config

logger = logging.getLogger(__name__)

Normalizer = Callable[[Sequence[int]], Sequence[int]]


def nfd_normalizer(code_points: Sequence[int]) -> list[int]:
    """Canonically decompose ``code_points`` with the interpreter's Unicode data."""

    text = "".join(chr(code_point) for code_point in code_points)
    return text_to_code_points(unicodedata.normalize("NFD", text))


def identity_normalizer(code_points: Sequence[int]) -> list[int]:
    """Pass already-normalized input through unchanged."""

    return list(code_points)


@dataclass(frozen=True)
class Collator:
    """Sort key pipeline bound to one table and one configuration.

    Construction validates the configuration, so every error a collator can
    raise afterwards is specific to one input.

    Attributes:
        table: Shared read-only collation element table.
        config: Weighting policy and strength.
        normalizer: Collaborator producing canonically decomposed input.
    """

    table: CollationElementTable
    config: CollationConfig = field(default_factory=CollationConfig)
    normalizer: Normalizer = nfd_normalizer

    def __post_init__(self) -> None:
        if self.table is None:
            raise TableUnavailableError("A collation element table is required")
        object.__setattr__(self, "config", validate_config(self.config))

    def code_points(self, text: str | Sequence[int]) -> list[int]:
        """Validate raw input and return its normalized code points.

        Raises:
            InvalidCodePointError: If the raw input contains a non-scalar value.
        """

        raw = text_to_code_points(text) if isinstance(text, str) else list(text)
        validate_code_points(raw)
        return list(self.normalizer(raw))

    def elements(self, text: str | Sequence[int]) -> list[CollationElement]:
        return map_collation_elements(self.code_points(text), self.table)

    def weights(self, text: str | Sequence[int]) -> list[LeveledWeights]:
        return derive_weights(self.elements(text), self.config.weighting)

    def sort_key(self, text: str | Sequence[int]) -> SortKey:
        """Derive the sort key of one text.

        Args:
            text: A string or a sequence of code points.

        Returns:
            Sort key truncated to the configured strength.

        Raises:
            InvalidCodePointError: If the input contains a non-scalar value.
        """

        return build_sort_key(self.weights(text), self.config.strength, self.config.weighting)

    def compare(self, left: str | Sequence[int], right: str | Sequence[int]) -> Relation:
        """Order two texts through their sort keys."""

        return compare_sort_keys(self.sort_key(left), self.sort_key(right))

    def compare_incremental(self, left: str | Sequence[int], right: str | Sequence[int]) -> Relation:
        """Order two texts level by level, stopping at the first difference."""

        return compare_weights(
            self.weights(left),
            self.weights(right),
            self.config.strength,
            self.config.weighting,
        )

    def _key_result(self, text: str) -> KeyResult:
        try:
            return KeyResult(text=text, key=self.sort_key(text))
        except InvalidCodePointError as exc:
            logger.warning("Skipping input with invalid code point at index %d", exc.index)
            return KeyResult(text=text, error=str(exc))

    def sort_keys(self, texts: Iterable[str], max_workers: int = 1) -> list[KeyResult]:
        """Derive keys for many texts, reporting failures per input.

        Args:
            texts: Input texts.
            max_workers: Threads used for key derivation; 1 runs inline.

        Returns:
            One result per input in input order. Invalid inputs carry an error
            instead of a key and never abort the batch.
        """

        items = list(texts)
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
        if max_workers == 1 or len(items) < 2:
            return [self._key_result(text) for text in items]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self._key_result, items))

    def sort(
        self, texts: Iterable[str], max_workers: int = 1
    ) -> tuple[list[KeyResult], list[KeyResult]]:
        """Sort texts by sort key.

        Returns:
            Tuple ``(ordered, failed)`` where ``ordered`` holds keyed results
            in collation order (ties keep input order) and ``failed`` holds
            the results of inputs that could not be keyed.
        """

        results = self.sort_keys(texts, max_workers=max_workers)
        keyed = [result for result in results if result.ok]
        failed = [result for result in results if not result.ok]
        keyed.sort(key=lambda result: result.key.units)
        return keyed, failed

    def sorted_texts(self, texts: Iterable[str]) -> list[str]:
        """Return valid texts in collation order, dropping inputs that fail."""

        ordered, _ = self.sort(texts)
        return [result.text for result in ordered]
