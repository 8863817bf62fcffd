"""Keymint: admin-gated batch issuer for human-typeable license keys."""

from keymint.keygen.generator import generate_key, generate_keys
from keymint.keygen.validator import normalize_key, validate_format

__all__ = [
    "generate_key",
    "generate_keys",
    "normalize_key",
    "validate_format",
]
__version__ = "0.1.0"
