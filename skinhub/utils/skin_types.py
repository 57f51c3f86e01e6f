"""
Skin-type tag normalization.

Keeps stored product tags and shopper filter values comparable: lowercase,
trimmed, deduplicated. Catalog entry is free-form, so unknown tags are
dropped quietly by validate_and_normalize rather than rejected.
"""
from collections.abc import Iterable
from typing import Union

VALID_SKIN_TYPES = frozenset({"oily", "dry", "combination", "sensitive"})

SkinTypeInput = Union[str, Iterable[str], None]


def normalize(skin_types: SkinTypeInput) -> frozenset[str]:
    """
    Normalize skin-type input into a set of tags.

    Args:
        skin_types: A comma-separated string ("Oily, Dry") or a list of
            strings. List entries may themselves contain commas.

    Returns:
        Lowercased, trimmed, non-empty, deduplicated tags. Anything that is
        neither a string nor iterable yields an empty set.
    """
    if skin_types is None:
        return frozenset()
    if isinstance(skin_types, str):
        skin_types = [skin_types]
    elif not isinstance(skin_types, Iterable):
        return frozenset()

    tags = set()
    for entry in skin_types:
        if not isinstance(entry, str):
            continue
        for part in entry.split(","):
            tag = part.strip().lower()
            if tag:
                tags.add(tag)
    return frozenset(tags)


def validate_and_normalize(skin_types: SkinTypeInput) -> frozenset[str]:
    """Normalize, then keep only the canonical tags (oily, dry, combination, sensitive)."""
    return normalize(skin_types) & VALID_SKIN_TYPES


__all__ = ["VALID_SKIN_TYPES", "normalize", "validate_and_normalize"]
