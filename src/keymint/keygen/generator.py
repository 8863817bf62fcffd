"""
License key generator.

Format: {AAAA}-{BBBB}-{CCCC}-{DDDD}
- 4 segments x 4 chars drawn from A-Z0-9 (36 symbols)
- 36^16 ≈ 7.9 * 10^24 possible keys

Symbols are drawn independently and uniformly with the ``secrets`` CSPRNG, so
keys are neither sequential nor guessable from previously issued ones.
"""

import secrets
import string

ALPHABET = string.ascii_uppercase + string.digits
SEGMENT_LEN = 4
SEGMENTS = 4
SEPARATOR = "-"
KEY_LEN = SEGMENT_LEN * SEGMENTS + (SEGMENTS - 1)


def _random_segment() -> str:
    """Generate a random 4-char segment."""
    return "".join(secrets.choice(ALPHABET) for _ in range(SEGMENT_LEN))


def generate_key() -> str:
    """Generate a single license key, e.g. ``7QZK-M2XA-0B9D-TT4C``."""
    return SEPARATOR.join(_random_segment() for _ in range(SEGMENTS))


def generate_keys(count: int) -> list[str]:
    """Generate ``count`` independent keys (not deduplicated; the store enforces uniqueness)."""
    return [generate_key() for _ in range(count)]
