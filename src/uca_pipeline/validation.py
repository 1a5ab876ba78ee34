"""Validation helpers for pipeline inputs and configuration."""

from __future__ import annotations

from typing import Sequence

from uca_pipeline.errors import ConfigurationError, InvalidCodePointError
from uca_pipeline.models import CollationConfig, Strength, VariableWeighting

MAX_CODE_POINT = 0x10FFFF
SURROGATE_START = 0xD800
SURROGATE_END = 0xDFFF
PREVIEW_LIMIT = 25


def is_scalar_value(value: object) -> bool:
    """Return whether ``value`` is a Unicode scalar value."""

    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return 0 <= value <= MAX_CODE_POINT and not SURROGATE_START <= value <= SURROGATE_END


def _describe(value: object) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        if SURROGATE_START <= value <= SURROGATE_END:
            return f"isolated surrogate U+{value:04X}"
        return f"out-of-range value {value:#x}"
    return f"non-integer entry {value!r}"


def validate_code_points(code_points: Sequence[int]) -> None:
    """Validate that every entry of ``code_points`` is a Unicode scalar value.

    Args:
        code_points: Input sequence to check.

    Raises:
        InvalidCodePointError: If any entry is a surrogate, out of range, or
            not an integer. The error carries the first offending index and
            its message previews up to 25 problems.
    """

    errors: list[str] = []
    first: tuple[int, int] | None = None
    for idx, value in enumerate(code_points):
        if is_scalar_value(value):
            continue
        if first is None:
            first = (idx, value if isinstance(value, int) else -1)
        errors.append(f"Index {idx}: {_describe(value)}")

    if first is not None:
        preview = "\n".join(f"- {item}" for item in errors[:PREVIEW_LIMIT])
        rest = len(errors) - min(PREVIEW_LIMIT, len(errors))
        more = f"\n- ... and {rest} more" if rest > 0 else ""
        raise InvalidCodePointError(
            first[0],
            first[1],
            f"Input contains {len(errors)} invalid code points:\n{preview}{more}",
        )


def text_to_code_points(text: str) -> list[int]:
    """Convert a string to its code points without validating them."""

    return [ord(char) for char in text]


def coerce_weighting(value: VariableWeighting | str) -> VariableWeighting:
    """Resolve a weighting policy from an enum member or its name.

    Accepts spellings such as ``"shifted"``, ``"SHIFT_TRIMMED"`` and
    ``"non-ignorable"``.

    Raises:
        ConfigurationError: If the value names no known policy.
    """

    if isinstance(value, VariableWeighting):
        return value
    if isinstance(value, str):
        token = value.strip().lower().replace("_", "-")
        for member in VariableWeighting:
            if member.value == token:
                return member
    valid = ", ".join(member.value for member in VariableWeighting)
    raise ConfigurationError(f"Unknown variable weighting {value!r}; expected one of: {valid}")


def coerce_strength(value: Strength | int | str) -> Strength:
    """Resolve a strength from an enum member, level number or level name.

    Raises:
        ConfigurationError: If the value names no known strength.
    """

    if isinstance(value, Strength):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return Strength(value)
        except ValueError:
            pass
    if isinstance(value, str):
        token = value.strip()
        if token.isdigit():
            return coerce_strength(int(token))
        member = Strength.__members__.get(token.upper())
        if member is not None:
            return member
    valid = ", ".join(f"{member.name.lower()} ({member.value})" for member in Strength)
    raise ConfigurationError(f"Unknown strength {value!r}; expected one of: {valid}")


def coerce_config(
    weighting: VariableWeighting | str = VariableWeighting.SHIFTED,
    strength: Strength | int | str = Strength.QUATERNARY,
) -> CollationConfig:
    """Build a validated :class:`CollationConfig`.

    Raises:
        ConfigurationError: If either option is unknown.
    """

    return CollationConfig(weighting=coerce_weighting(weighting), strength=coerce_strength(strength))


def validate_config(config: CollationConfig) -> CollationConfig:
    """Check a configuration before any text is processed.

    Every weighting and strength pairing is usable: levels the table does not
    fill are emitted as zero weights.

    Args:
        config: Configuration to check; string spellings are coerced.

    Returns:
        Configuration with enum-typed fields.

    Raises:
        ConfigurationError: If a field is unknown.
    """

    return coerce_config(config.weighting, config.strength)
