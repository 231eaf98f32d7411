from __future__ import annotations

import re
from dataclasses import dataclass, field

from taskdeck.config import DEFAULT_MAX_DESCRIPTION_LENGTH, DEFAULT_WARNING_THRESHOLD

EMPTY_DESCRIPTION = "description cannot be empty"
NOT_A_STRING = "description must be a string"
LONG_DESCRIPTION_WARNING = "description is getting long"
SURROUNDING_WHITESPACE_WARNING = "leading or trailing spaces will be removed"

# str.strip() leaves the byte order mark (U+FEFF) in place
_EDGE_SPACE = re.compile(r"\A[\s\ufeff]+|[\s\ufeff]+\Z")


def trim_description(text: str) -> str:
    """Remove surrounding whitespace, including byte order marks."""
    return _EDGE_SPACE.sub("", text)


def too_long_message(max_length: int) -> str:
    return f"description cannot exceed {max_length} characters"


@dataclass(slots=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_description(
    text: object,
    *,
    max_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
    warning_threshold: int = DEFAULT_WARNING_THRESHOLD,
) -> ValidationResult:
    """Decide whether ``text`` is acceptable as a task description.

    Length rules apply to the trimmed value. Warnings are only reported for
    descriptions that pass, since a rejected input is never stored.
    """
    if not isinstance(text, str):
        return ValidationResult(valid=False, errors=[NOT_A_STRING])
    trimmed = trim_description(text)
    if not trimmed:
        return ValidationResult(valid=False, errors=[EMPTY_DESCRIPTION])
    if len(trimmed) > max_length:
        return ValidationResult(valid=False, errors=[too_long_message(max_length)])

    warnings: list[str] = []
    if len(trimmed) > warning_threshold:
        warnings.append(LONG_DESCRIPTION_WARNING)
    if trimmed != text:
        warnings.append(SURROUNDING_WHITESPACE_WARNING)
    return ValidationResult(valid=True, warnings=warnings)


__all__ = [
    "ValidationResult",
    "validate_description",
    "trim_description",
    "too_long_message",
    "EMPTY_DESCRIPTION",
    "NOT_A_STRING",
    "LONG_DESCRIPTION_WARNING",
    "SURROUNDING_WHITESPACE_WARNING",
]
