"""
curvelab
========

Prime-field arithmetic and short-Weierstrass elliptic-curve group law,
written for small, hand-checkable curves and for any prime field alike.

Modules:
    - common: Prime field arithmetic (PrimeField, FieldElement, DomainError)
    - elliptic: Curve points, parameter sets and the group law

Quick Start:
    >>> from curvelab import curve
    >>> c = curve(61, 9, 1, 5, 7)
    >>> c.add(c.generator, c.generator)
    Affine(x=26, y=50)

Not hardened cryptography: no constant-time arithmetic, no checks
against weak curve parameters.
"""

__version__ = "0.1.0"

from . import common
from . import elliptic

from .common import DomainError, FieldElement, PrimeField
from .elliptic import (
    INFINITY,
    Affine,
    CurveParameters,
    CurvePoint,
    WeierstrassCurve,
    curve,
)

__all__ = [
    "DomainError",
    "FieldElement",
    "PrimeField",
    "INFINITY",
    "Affine",
    "CurveParameters",
    "CurvePoint",
    "WeierstrassCurve",
    "curve",
]
