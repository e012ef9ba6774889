"""
Short-Weierstrass Group Law.

This module implements the elliptic-curve group y^2 = x^3 + ax + b over a
prime field: finding points from an x-coordinate, adding and doubling
points, and scalar multiplication by double-and-add.

The Group Law:
    For P = (x1, y1), Q = (x2, y2):

    (a) P + O = O + P = P               (O is the point at infinity)
    (b) x1 == x2 and y1 == -y2  ->  O   (vertical line, includes 2P with y = 0)
    (c) P == Q   ->  l = (3x1^2 + a) / (2y1)       (tangent)
    (d) else     ->  l = (y2 - y1) / (x2 - x1)     (chord)

    x3 = l^2 - x1 - x2
    y3 = l(x1 - x3) - y1

Scalar Multiplication (double-and-add, most significant bit first):
    R = O
    for each bit of k from high to low:
        R = 2R
        if bit: R = R + P

    Cost: O(log k) doublings and at most O(log k) additions. The scalar is
    a plain non-negative integer, unrelated to the coordinate modulus.

Example:
    >>> c = curve(61, 9, 1, 5, 7)
    >>> c.evaluate_x(0)
    (FieldElement(1, mod 61), FieldElement(60, mod 61))
    >>> c.scalar_multiply(c.generator, 3)
    Affine(x=27, y=38)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from math import isqrt
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np

from ..common.errors import DomainError
from ..common.field import (
    ENUMERATION_LIMIT,
    FieldElement,
    FieldElementLike,
    FieldLike,
    PrimeField,
)
from .params import CurveParameters
from .points import INFINITY, Affine, CurvePoint


Scalar = Union[int, FieldElement]


@dataclass
class LadderStep:
    """
    One bit of a double-and-add run.

    Attributes:
        bit_index: Position of the bit (0 = least significant)
        bit: The bit value
        doubled: Accumulator after the doubling
        result: Accumulator after the conditional addition
    """
    bit_index: int
    bit: int
    doubled: CurvePoint
    result: CurvePoint

    def __repr__(self) -> str:
        return f"LadderStep(bit_index={self.bit_index}, bit={self.bit}, result={self.result!r})"


@dataclass
class ScalarMultiplicationResult:
    """
    Complete record of a scalar multiplication.

    Attributes:
        point: The point that was multiplied
        scalar: The integer scalar
        steps: One LadderStep per bit, most significant first
        result: scalar * point
    """
    point: CurvePoint
    scalar: int
    steps: List[LadderStep] = field(default_factory=list)
    result: CurvePoint = INFINITY

    @property
    def num_doublings(self) -> int:
        return len(self.steps)

    @property
    def num_additions(self) -> int:
        return sum(step.bit for step in self.steps)


class WeierstrassCurve:
    """
    The group of points of y^2 = x^3 + ax + b over a prime field.

    The curve holds no mutable state: every method is a pure function of
    its arguments and the fixed parameters, so one instance can be shared
    between threads.

    Coordinates only need the FieldElementLike capability; the field is
    built from the parameters' modulus.

    Example:
        >>> c = WeierstrassCurve(create_curve61_params())
        >>> g = c.generator
        >>> c.add(g, g)
        Affine(x=26, y=50)
    """

    def __init__(self, params: CurveParameters, field: Optional[FieldLike] = None):
        """
        Initialize the curve.

        Args:
            params: Validated curve parameters
            field: Coordinate field; defaults to PrimeField(params.p)

        Raises:
            DomainError: If field's modulus differs from params.p
        """
        self.params = params
        self.field = field if field is not None else PrimeField(params.p)
        if self.field.prime != params.p:
            raise DomainError(
                f"Field modulus {self.field.prime} does not match curve modulus {params.p}"
            )
        self.a = self.field.reduce(params.a)
        self.b = self.field.reduce(params.b)
        self._generator = self.point(params.generator_x, params.generator_y)

    def __repr__(self) -> str:
        return (f"WeierstrassCurve(y^2 = x^3 + {self.a.value}x + {self.b.value} "
                f"over F_{self.field.prime})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeierstrassCurve):
            return NotImplemented
        return (self.field.prime, self.a.value, self.b.value) == \
            (other.field.prime, other.a.value, other.b.value)

    def __hash__(self) -> int:
        return hash((self.field.prime, self.a.value, self.b.value))

    @property
    def generator(self) -> Affine:
        """The designated base point."""
        return self._generator

    def _coordinate(self, value: Union[FieldElementLike, int]) -> FieldElementLike:
        """Lift an int into the field; check a FieldElement belongs to it."""
        if isinstance(value, int):
            return self.field.reduce(value)
        if isinstance(value, FieldElement) and value.field.prime != self.field.prime:
            raise TypeError(f"{value!r} does not belong to F_{self.field.prime}")
        return value

    def _check_point(self, point: CurvePoint) -> CurvePoint:
        if not isinstance(point, CurvePoint):
            raise TypeError(f"Expected a CurvePoint, got {type(point).__name__}")
        if not point.is_infinity():
            self._coordinate(point.x)
        return point

    # =========================================================================
    # POINTS FROM COORDINATES
    # =========================================================================

    def rhs(self, x: Union[FieldElementLike, int]) -> FieldElementLike:
        """Right-hand side x^3 + ax + b."""
        x = self._coordinate(x)
        return x * x * x + self.a * x + self.b

    def evaluate_x(self, x: Union[FieldElementLike, int]
                   ) -> Optional[Tuple[FieldElementLike, FieldElementLike]]:
        """
        Find the y-coordinates of the points with the given x.

        Args:
            x: x-coordinate (an int is reduced into the field)

        Returns:
            (y, -y) with the smaller value first, (0, 0) when the point is
            its own negation, or None if no curve point has this x.
            None is an ordinary outcome: about half of all x have no point.
        """
        return self.field.sqrt(self.rhs(x))

    def contains(self, point: CurvePoint) -> bool:
        """True if point is INFINITY or satisfies the curve equation."""
        if point.is_infinity():
            return True
        y = self._coordinate(point.y)
        return y * y == self.rhs(point.x)

    def point(self, x: Union[FieldElementLike, int],
              y: Union[FieldElementLike, int]) -> Affine:
        """
        Checked constructor for an affine point.

        Raises:
            DomainError: If (x, y) is not on the curve
        """
        candidate = Affine(self._coordinate(x), self._coordinate(y))
        if not self.contains(candidate):
            raise DomainError(f"Point {candidate} is not on {self!r}")
        return candidate

    def lift_x(self, x: Union[FieldElementLike, int], odd: bool = False) -> Optional[Affine]:
        """
        The point with this x-coordinate and the requested y parity.

        Returns None when no point has this x.
        """
        roots = self.evaluate_x(x)
        if roots is None:
            return None
        even_y, odd_y = roots if roots[1].value & 1 else roots[::-1]
        return Affine(self._coordinate(x), odd_y if odd else even_y)

    # =========================================================================
    # GROUP LAW
    # =========================================================================

    def negate(self, point: CurvePoint) -> CurvePoint:
        """Reflect over the x-axis: (x, y) -> (x, -y)."""
        self._check_point(point)
        if point.is_infinity():
            return INFINITY
        return Affine(point.x, -point.y)

    def add(self, p: CurvePoint, q: CurvePoint) -> CurvePoint:
        """
        Add two points with the full group law.

        Args:
            p: First point
            q: Second point

        Returns:
            p + q as a new point
        """
        self._check_point(p)
        self._check_point(q)

        # (a) identity
        if p.is_infinity():
            return q
        if q.is_infinity():
            return p

        # (b) inverse points, vertical line
        if p.x == q.x and p.y == -q.y:
            return INFINITY

        if p == q:
            # (c) tangent
            slope = (3 * p.x * p.x + self.a) / (2 * p.y)
        else:
            # (d) chord
            slope = (q.y - p.y) / (q.x - p.x)

        x3 = slope * slope - p.x - q.x
        y3 = slope * (p.x - x3) - p.y
        return Affine(x3, y3)

    def double(self, point: CurvePoint) -> CurvePoint:
        """Point doubling, 2P."""
        return self.add(point, point)

    def subtract(self, p: CurvePoint, q: CurvePoint) -> CurvePoint:
        """p - q."""
        return self.add(p, self.negate(q))

    # =========================================================================
    # SCALAR MULTIPLICATION
    # =========================================================================

    @staticmethod
    def _scalar_value(scalar: Scalar) -> int:
        if isinstance(scalar, FieldElement):
            return scalar.value
        if not isinstance(scalar, int) or isinstance(scalar, bool):
            raise TypeError(f"Scalar must be an int or FieldElement, got {type(scalar).__name__}")
        if scalar < 0:
            raise DomainError(f"Scalar must be non-negative, got {scalar}")
        return scalar

    def scalar_multiply_trace(self, point: CurvePoint, scalar: Scalar) -> ScalarMultiplicationResult:
        """
        Double-and-add, recording the accumulator at every bit.

        Args:
            point: Point to multiply
            scalar: Non-negative integer (a FieldElement contributes its value)

        Returns:
            ScalarMultiplicationResult with one step per bit of the scalar
        """
        self._check_point(point)
        k = self._scalar_value(scalar)
        trace = ScalarMultiplicationResult(point=point, scalar=k)

        accumulator = INFINITY
        for bit_index in range(k.bit_length() - 1, -1, -1):
            bit = (k >> bit_index) & 1
            doubled = self.double(accumulator)
            accumulator = self.add(doubled, point) if bit else doubled
            trace.steps.append(LadderStep(bit_index, bit, doubled, accumulator))

        trace.result = accumulator
        return trace

    def scalar_multiply(self, point: CurvePoint, scalar: Scalar,
                        verbose: bool = False) -> CurvePoint:
        """
        Compute scalar * point by double-and-add.

        Args:
            point: Point to multiply
            scalar: Non-negative integer (a FieldElement contributes its value)
            verbose: If True, print each doubling and addition

        Returns:
            scalar * point; INFINITY when scalar is 0

        Raises:
            DomainError: If scalar is negative
        """
        trace = self.scalar_multiply_trace(point, scalar)
        if verbose:
            self._print_trace(trace)
        return trace.result

    def multiply_generator(self, scalar: Scalar) -> CurvePoint:
        """scalar * G."""
        return self.scalar_multiply(self._generator, scalar)

    def _print_trace(self, trace: ScalarMultiplicationResult):
        """Print a step-by-step report of a scalar multiplication."""
        print("\n" + "═" * 70)
        print("              DOUBLE-AND-ADD")
        print("═" * 70)
        print(f"\nCurve: {self!r}")
        print(f"Point: {trace.point}")
        print(f"Scalar: {trace.scalar} = 0b{trace.scalar:b}")
        print(f"\n{'Bit':>5} {'Value':>6}   {'After double':<20} {'After add':<20}")
        print("─" * 70)
        for step in trace.steps:
            added = str(step.result) if step.bit else "-"
            print(f"{step.bit_index:>5} {step.bit:>6}   {str(step.doubled):<20} {added:<20}")
        print("─" * 70)
        print(f"Result: {trace.result}")
        print(f"Doublings: {trace.num_doublings}, additions: {trace.num_additions}")

    # =========================================================================
    # ENUMERATION (small fields only)
    # =========================================================================

    def _rhs_table(self) -> np.ndarray:
        """x^3 + ax + b for every x in the field, as an int64 array."""
        p = self.field.prime
        if p > ENUMERATION_LIMIT:
            raise ValueError(f"Field too large to enumerate: {p} > {ENUMERATION_LIMIT}")
        xs = np.arange(p, dtype=np.int64)
        # Reduce after each product so nothing exceeds 2^40
        cubes = (xs * xs % p) * xs % p
        return (cubes + self.a.value * xs + self.b.value) % p

    def points(self) -> Iterator[Affine]:
        """
        Iterate over every affine point, x ascending, smaller y first.

        Only for fields up to ENUMERATION_LIMIT.
        """
        squares = self.field.square_table()
        rhs = self._rhs_table()
        for x in np.flatnonzero(squares[rhs]):
            roots = self.evaluate_x(int(x))
            y_low, y_high = roots
            yield Affine(self.field.reduce(int(x)), y_low)
            if y_high != y_low:
                yield Affine(self.field.reduce(int(x)), y_high)

    def count_points(self) -> int:
        """Number of points in the group, INFINITY included."""
        squares = self.field.square_table()
        rhs = self._rhs_table()
        on_curve = squares[rhs]
        double_roots = np.count_nonzero(rhs == 0)
        # Two points per nonzero square, one where y = 0, plus INFINITY
        return int(2 * np.count_nonzero(on_curve) - double_roots + 1)

    def hasse_bound(self) -> int:
        """Upper bound p + 1 + 2 sqrt(p) on the group order."""
        p = self.field.prime
        return p + 1 + 2 * (isqrt(p) + 1)

    def order_of(self, point: CurvePoint) -> int:
        """
        Smallest n > 0 with n * point = INFINITY, by repeated addition.

        Raises:
            DomainError: If point is not on the curve
        """
        self._check_point(point)
        if not self.contains(point):
            raise DomainError(f"Point {point} is not on {self!r}")

        n = 1
        current = point
        limit = self.hasse_bound()
        while not current.is_infinity():
            current = self.add(current, point)
            n += 1
            if n > limit:
                raise RuntimeError(f"No order found below Hasse bound {limit}")
        return n


def curve(p: int, a: int, b: int, generator_x: int, generator_y: int,
          name: str = "custom") -> WeierstrassCurve:
    """
    Build a curve from raw parameters.

    Raises:
        DomainError: If p is not an odd prime, the curve is singular, or
            the generator is not on the curve
    """
    return WeierstrassCurve(CurveParameters(p, a, b, generator_x, generator_y, name=name))
