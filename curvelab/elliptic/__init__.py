"""
Elliptic-Curve Group Law

Key Components:
    - CurvePoint: Affine(x, y) or INFINITY
    - CurveParameters: Validated (p, a, b, G) configuration value
    - WeierstrassCurve: Point evaluation, addition, scalar multiplication
    - Predefined curves: curve61, curve23

Usage:
    >>> from curvelab.elliptic import WeierstrassCurve, get_preset
    >>> c = WeierstrassCurve(get_preset("curve61"))
    >>> c.scalar_multiply(c.generator, 2)
    Affine(x=26, y=50)
"""

from .points import INFINITY, Affine, CurvePoint
from .params import (
    PRESETS,
    CurveParameters,
    create_curve23_params,
    create_curve61_params,
    get_preset,
)
from .core import (
    LadderStep,
    ScalarMultiplicationResult,
    WeierstrassCurve,
    curve,
)

__all__ = [
    "INFINITY",
    "Affine",
    "CurvePoint",
    "PRESETS",
    "CurveParameters",
    "create_curve23_params",
    "create_curve61_params",
    "get_preset",
    "LadderStep",
    "ScalarMultiplicationResult",
    "WeierstrassCurve",
    "curve",
]
