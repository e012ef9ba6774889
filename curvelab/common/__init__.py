"""
Common utilities for curvelab.

This module provides:
    - Finite field arithmetic (PrimeField, FieldElement)
    - The DomainError exception raised for invalid mathematical input
"""

from .errors import DomainError
from .field import (
    ENUMERATION_LIMIT,
    FieldElement,
    FieldElementLike,
    FieldLike,
    PrimeField,
    is_probable_prime,
)

__all__ = [
    "DomainError",
    "ENUMERATION_LIMIT",
    "FieldElement",
    "FieldElementLike",
    "FieldLike",
    "PrimeField",
    "is_probable_prime",
]
