"""
Curve Parameter Sets.

A short-Weierstrass curve y^2 = x^3 + ax + b over F_p is fully described
by (p, a, b) plus a chosen base point. CurveParameters bundles these as a
frozen value that is validated once, at construction, and shared freely
afterwards.

Predefined Curves:
    - curve61: y^2 = x^3 + 9x + 1 over F_61, G = (5, 7)
    - curve23: y^2 = x^3 + x + 1 over F_23, G = (3, 10)

Both are toy curves, small enough to check every result by hand.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..common.errors import DomainError
from ..common.field import PrimeField


@dataclass(frozen=True)
class CurveParameters:
    """
    Parameters of a short-Weierstrass curve and its base point.

    Attributes:
        p: Odd prime modulus of the coordinate field
        a: Coefficient of x (reduced mod p)
        b: Constant term (reduced mod p)
        generator_x: x-coordinate of the base point
        generator_y: y-coordinate of the base point
        name: Label used in summaries and the preset registry
        order: Order of the base point, when known

    Example:
        >>> params = CurveParameters(p=61, a=9, b=1, generator_x=5, generator_y=7)
        >>> params.discriminant
        15
    """

    p: int
    a: int
    b: int
    generator_x: int
    generator_y: int
    name: str = "custom"
    order: Optional[int] = None

    def __post_init__(self):
        """Validate parameters."""
        field = PrimeField(self.p)
        for label in ("a", "b", "generator_x", "generator_y"):
            value = getattr(self, label)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{label} must be an int, got {type(value).__name__}")
            # Frozen: normalize through object.__setattr__
            object.__setattr__(self, label, value % field.prime)

        if self.discriminant == 0:
            raise DomainError(
                f"Curve y^2 = x^3 + {self.a}x + {self.b} over F_{self.p} is singular"
            )
        if not self.is_on_curve(self.generator_x, self.generator_y):
            raise DomainError(
                f"Generator ({self.generator_x}, {self.generator_y}) is not on the curve"
            )
        if self.order is not None and self.order < 1:
            raise DomainError("order must be positive")

    @property
    def discriminant(self) -> int:
        """4a^3 + 27b^2 mod p; zero means the curve is singular."""
        return (4 * self.a ** 3 + 27 * self.b ** 2) % self.p

    def is_on_curve(self, x: int, y: int) -> bool:
        """Check y^2 = x^3 + ax + b on raw ints."""
        return (y * y - (x ** 3 + self.a * x + self.b)) % self.p == 0

    def summary(self) -> str:
        """Return parameter summary string."""
        order = self.order if self.order is not None else "unknown"
        return (
            f"CurveParameters '{self.name}':\n"
            f"  Equation: y^2 = x^3 + {self.a}x + {self.b}\n"
            f"  Field: F_{self.p}\n"
            f"  Generator: ({self.generator_x}, {self.generator_y})\n"
            f"  Generator order: {order}"
        )

    def __repr__(self) -> str:
        return (f"CurveParameters(name='{self.name}', p={self.p}, a={self.a}, "
                f"b={self.b}, G=({self.generator_x}, {self.generator_y}))")


# =============================================================================
# PREDEFINED CURVES
# =============================================================================

def create_curve61_params() -> CurveParameters:
    """
    y^2 = x^3 + 9x + 1 over F_61 with base point (5, 7).

    61 = 1 (mod 4), so square roots here go through Tonelli-Shanks.
    """
    return CurveParameters(
        p=61,
        a=9,
        b=1,
        generator_x=5,
        generator_y=7,
        name="curve61",
    )


def create_curve23_params() -> CurveParameters:
    """
    y^2 = x^3 + x + 1 over F_23 with base point (3, 10).

    The group has 28 points. 23 = 3 (mod 4), so square roots use the
    closed form x^((p+1)/4).
    """
    return CurveParameters(
        p=23,
        a=1,
        b=1,
        generator_x=3,
        generator_y=10,
        name="curve23",
        order=28,
    )


PRESETS: Dict[str, Callable[[], CurveParameters]] = {
    "curve61": create_curve61_params,
    "curve23": create_curve23_params,
}


def get_preset(name: str) -> CurveParameters:
    """Look up a predefined parameter set by name."""
    try:
        factory = PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown curve '{name}'. Known curves: {known}") from None
    return factory()
