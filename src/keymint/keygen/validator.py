"""
Offline license key format validation.

Validates structure only; whether a key was ever issued is a store question.
"""

import re

from keymint.keygen.generator import ALPHABET, SEGMENT_LEN, SEGMENTS, SEPARATOR

SEGMENT_PATTERN = re.compile(f"^[{ALPHABET}]{{{SEGMENT_LEN}}}$")
KEY_PATTERN = re.compile(
    "^" + SEPARATOR.join([f"[{ALPHABET}]{{{SEGMENT_LEN}}}"] * SEGMENTS) + "$"
)


class ValidationResult:
    """Result of offline key validation."""

    __slots__ = ("valid", "code", "message")

    def __init__(self, valid: bool, code: str = "", message: str = ""):
        self.valid = valid
        self.code = code
        self.message = message


def normalize_key(raw: str) -> str:
    """Strip surrounding whitespace and upper-case operator-typed input."""
    return raw.strip().upper()


def validate_format(key: str) -> ValidationResult:
    """
    Validate the structural format of a license key.

    Checks:
    - Correct number of segments (4)
    - Every segment is exactly 4 characters of A-Z0-9

    Returns:
        ValidationResult with format check outcome
    """
    if not key or not isinstance(key, str):
        return ValidationResult(False, "INVALID_FORMAT", "Key is empty or not a string")

    parts = key.split(SEPARATOR)
    if len(parts) != SEGMENTS:
        return ValidationResult(
            False,
            "INVALID_FORMAT",
            f"Expected {SEGMENTS} segments, got {len(parts)}",
        )

    for i, segment in enumerate(parts, start=1):
        if not SEGMENT_PATTERN.match(segment):
            return ValidationResult(
                False,
                "INVALID_SEGMENT",
                f"Segment {i} must be {SEGMENT_LEN} characters of A-Z0-9 (got '{segment}')",
            )

    return ValidationResult(True, "FORMAT_OK", "Key format is valid")
