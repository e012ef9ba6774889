"""
Curve Points as a Tagged Variant.

A point of a short-Weierstrass group is either an affine coordinate pair
or the point at infinity, the identity of the group. The two cases are
separate classes sharing the CurvePoint base, so code dispatches on
``point.is_infinity()`` (or isinstance) rather than on None coordinates.

Example:
    >>> field = PrimeField(61)
    >>> p = Affine(field.element(5), field.element(7))
    >>> p
    Affine(x=5, y=7)
    >>> INFINITY.is_infinity()
    True
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..common.field import FieldElementLike


class CurvePoint:
    """Base class of Affine and the INFINITY singleton."""

    __slots__ = ()

    def is_infinity(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Affine(CurvePoint):
    """
    A finite curve point (x, y).

    Affine itself does not know its curve; WeierstrassCurve.point() is
    the checked constructor that verifies y^2 = x^3 + ax + b.

    Attributes:
        x: x-coordinate
        y: y-coordinate
    """
    x: 'FieldElementLike'
    y: 'FieldElementLike'

    def is_infinity(self) -> bool:
        return False

    def as_tuple(self) -> Tuple[int, int]:
        """Coordinates as plain ints."""
        return self.x.value, self.y.value

    def __repr__(self) -> str:
        return f"Affine(x={self.x.value}, y={self.y.value})"

    def __str__(self) -> str:
        return f"({self.x.value}, {self.y.value})"


class _Infinity(CurvePoint):
    """The point at infinity. Use the module-level INFINITY."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def is_infinity(self) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Infinity)

    def __hash__(self) -> int:
        return hash("INFINITY")

    def __reduce__(self):
        return (_Infinity, ())

    def __repr__(self) -> str:
        return "INFINITY"

    def __str__(self) -> str:
        return "O"


INFINITY: CurvePoint = _Infinity()
