"""
Identity generation for the form schema builder.
Derives stable, deterministic keys from human-readable labels.
"""

import re
import logging

logger = logging.getLogger(__name__)

# Separator used when schema fragments are addressed by dotted ancestor paths
PATH_SEPARATOR = "."

# Characters that must never appear inside a key
RESERVED_KEY_CHARACTERS = (PATH_SEPARATOR, "/")

HASH_LENGTH = 6

_WHITESPACE_RUN = re.compile(r"\s+")


def _to_int32(value: int) -> int:
    """Wrap an arbitrary integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    if value & 0x80000000:
        value -= 0x100000000
    return value


def _utf16_code_units(text: str):
    """Yield the UTF-16 code units of a string."""
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        yield encoded[i] | (encoded[i + 1] << 8)


def hex_hash(text: str) -> str:
    """
    Compute a short non-cryptographic hash of a string.

    Uses a 32-bit polynomial rolling hash (multiplier 31) over UTF-16 code
    units, takes the absolute value and renders at most six hex digits.

    Args:
        text: String to hash

    Returns:
        Lower-case hex string of up to six characters
    """
    hash_value = 0
    for unit in _utf16_code_units(text):
        hash_value = _to_int32((hash_value << 5) - hash_value + unit)
    return format(abs(hash_value), "x")[:HASH_LENGTH]


def slugify(label: str) -> str:
    """
    Lower-case a label and collapse whitespace runs into single hyphens.

    Path and pointer separators are replaced by hyphens as well so that
    the resulting slug can be used inside dotted paths and JSON pointers.
    """
    slug = _WHITESPACE_RUN.sub("-", label.lower())
    for reserved in RESERVED_KEY_CHARACTERS:
        slug = slug.replace(reserved, "-")
    return slug


def derive_key(label: str) -> str:
    """
    Derive the stable key for a label.

    Identical labels always yield identical keys, so renaming a node back to
    a previous label restores its previous key.

    Args:
        label: Human-readable label

    Returns:
        Key of the form ``<slug>-<hex hash>``
    """
    key = f"{slugify(label)}-{hex_hash(label)}"
    logger.debug(f"Derived key '{key}' from label '{label}'")
    return key
