# Utilities Module
from .skin_types import VALID_SKIN_TYPES, normalize, validate_and_normalize

__all__ = [
    "VALID_SKIN_TYPES",
    "normalize",
    "validate_and_normalize",
]
