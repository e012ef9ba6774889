"""
Prime Field Arithmetic for Elliptic-Curve Computations.

This module implements modular arithmetic over Z/pZ for an arbitrary odd
prime p. Every curve operation in this package reduces to the handful of
field operations defined here, so they are written to be pure and cheap:
elements are immutable and every operation returns a new element.

Key Concepts:
    - All arithmetic is done modulo a prime p
    - Addition: (a + b) mod p
    - Multiplication: (a * b) mod p
    - Subtraction: (a - b) mod p (Python's % already returns [0, p))
    - Division: a * b^(-1) mod p (multiply by modular inverse)
    - Inversion: find b such that a * b = 1 mod p (extended Euclid)
    - Square root: r such that r * r = a mod p, if a is a quadratic residue

Example:
    >>> field = PrimeField(61)
    >>> a = field.element(45)
    >>> b = field.element(27)
    >>> a + b  # (45 + 27) mod 61 = 11
    FieldElement(11, mod 61)
    >>> field.sqrt(field.element(49))
    (FieldElement(7, mod 61), FieldElement(54, mod 61))

Square roots:
    Only about half of the nonzero residues have a square root. For those
    that do, the two roots are r and p - r. When p = 3 (mod 4) the root is
    the closed form a^((p+1)/4); otherwise Tonelli-Shanks is used.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Tuple, Union
import random

import numpy as np

from .errors import DomainError


# Largest modulus for which whole-field tables (square_table, point
# enumeration) are built.
ENUMERATION_LIMIT = 1 << 20

# Miller-Rabin witnesses; deterministic for every n < 3.3 * 10^24.
_MILLER_RABIN_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)


class FieldElementLike(Protocol):
    """
    The capability the curve code needs from a coordinate.

    Anything supporting +, -, *, /, unary -, inverse() and sqrt() over a
    field can stand in for FieldElement.
    """

    @property
    def value(self) -> int: ...

    def __add__(self, other): ...

    def __sub__(self, other): ...

    def __mul__(self, other): ...

    def __truediv__(self, other): ...

    def __neg__(self): ...

    def inverse(self): ...

    def sqrt(self): ...

    def is_zero(self) -> bool: ...


class FieldLike(Protocol):
    """The capability the curve code needs from the coordinate field."""

    prime: int

    def reduce(self, n: int): ...

    def zero(self): ...

    def one(self): ...

    def sqrt(self, x): ...

    def square_table(self) -> np.ndarray: ...


@dataclass(frozen=True)
class FieldElement:
    """
    An element of a prime field Z_p.

    Elements are immutable. All operations reduce the result modulo p and
    return a new element. Plain ints are accepted as the other operand and
    are reduced into this element's field; combining two elements of
    different fields raises TypeError.

    Attributes:
        value: The integer value (always in range [0, p-1])
        field: Reference to the parent PrimeField

    Example:
        >>> field = PrimeField(23)
        >>> a = FieldElement(20, field)
        >>> a + 5  # 20 + 5 = 25 -> 25 mod 23 = 2
        FieldElement(2, mod 23)
    """
    value: int
    field: 'PrimeField'

    def __post_init__(self):
        """Reject values outside [0, p)."""
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError(f"Field element value must be an int, got {type(self.value).__name__}")
        if not 0 <= self.value < self.field.prime:
            raise DomainError(
                f"Value {self.value} not in field range 0 to {self.field.prime - 1}"
            )

    def __repr__(self) -> str:
        return f"FieldElement({self.value}, mod {self.field.prime})"

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return self.value == other.value and self.field.prime == other.field.prime
        if isinstance(other, int):
            return self.value == (other % self.field.prime)
        return False

    def __hash__(self) -> int:
        return hash((self.value, self.field.prime))

    def __bool__(self) -> bool:
        return self.value != 0

    def _coerce(self, other: Union[FieldElement, int]) -> Optional[int]:
        """Return the other operand's residue, or None if it is not a number."""
        if isinstance(other, FieldElement):
            if other.field.prime != self.field.prime:
                raise TypeError(
                    f"Cannot combine elements of F_{self.field.prime} and F_{other.field.prime}"
                )
            return other.value
        if isinstance(other, int):
            return other % self.field.prime
        return None

    def _new(self, value: int) -> FieldElement:
        return FieldElement(value % self.field.prime, self.field)

    # Arithmetic Operations

    def __add__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Addition in the field: (a + b) mod p"""
        other_val = self._coerce(other)
        if other_val is None:
            return NotImplemented
        return self._new(self.value + other_val)

    def __radd__(self, other: int) -> FieldElement:
        return self.__add__(other)

    def __sub__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Subtraction in the field: (a - b) mod p"""
        other_val = self._coerce(other)
        if other_val is None:
            return NotImplemented
        return self._new(self.value - other_val)

    def __rsub__(self, other: int) -> FieldElement:
        other_val = self._coerce(other)
        if other_val is None:
            return NotImplemented
        return self._new(other_val - self.value)

    def __mul__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Multiplication in the field: (a * b) mod p"""
        other_val = self._coerce(other)
        if other_val is None:
            return NotImplemented
        return self._new(self.value * other_val)

    def __rmul__(self, other: int) -> FieldElement:
        return self.__mul__(other)

    def __truediv__(self, other: Union[FieldElement, int]) -> FieldElement:
        """Division in the field: a * b^(-1) mod p"""
        other_val = self._coerce(other)
        if other_val is None:
            return NotImplemented
        return self * self._new(other_val).inverse()

    def __rtruediv__(self, other: int) -> FieldElement:
        other_val = self._coerce(other)
        if other_val is None:
            return NotImplemented
        return self._new(other_val) * self.inverse()

    def __neg__(self) -> FieldElement:
        """Negation: -a = p - a"""
        return self._new(-self.value)

    def __pow__(self, exp: int) -> FieldElement:
        """
        Exponentiation using square-and-multiply.

        Time complexity: O(log exp) multiplications. A negative exponent
        raises the inverse instead, so zero ** -1 is a DomainError.
        """
        if isinstance(exp, FieldElement):
            exp = exp.value
        if exp < 0:
            # a^(-n) = (a^(-1))^n
            return self.inverse() ** (-exp)

        result = self.field.one()
        base = self

        while exp > 0:
            if exp & 1:  # If least significant bit is 1
                result = result * base
            base = base * base
            exp >>= 1

        return result

    def inverse(self) -> FieldElement:
        """
        Compute modular inverse using the Extended Euclidean Algorithm.

        Finds b such that a * b = 1 (mod p).

        Raises:
            DomainError: If self.value is 0 (no inverse exists)

        Returns:
            FieldElement b such that self * b = 1
        """
        if self.value == 0:
            raise DomainError("Cannot invert zero")

        # We want x such that a*x + p*y = gcd(a, p) = 1
        old_r, r = self.value, self.field.prime
        old_s, s = 1, 0

        while r != 0:
            quotient = old_r // r
            old_r, r = r, old_r - quotient * r
            old_s, s = s, old_s - quotient * s

        # old_r is the gcd; only 1 for a prime modulus
        if old_r != 1:
            raise DomainError(f"No inverse exists (gcd = {old_r})")

        return self._new(old_s)

    def sqrt(self) -> Optional[Tuple[FieldElement, FieldElement]]:
        """Both square roots of this element, or None. See PrimeField.sqrt."""
        return self.field.sqrt(self)

    def is_square(self) -> bool:
        """True if this element is a quadratic residue (zero included)."""
        return self.field.is_square(self)

    def is_zero(self) -> bool:
        """Check if this element is zero."""
        return self.value == 0

    def is_one(self) -> bool:
        """Check if this element is one."""
        return self.value == 1


class PrimeField:
    """
    A prime field Z_p for modular arithmetic.

    Provides factory methods for creating elements plus the arithmetic
    API in function form (``field.add(a, b)``). Every function accepts
    FieldElements of this field or plain ints, and returns a FieldElement.

    Attributes:
        prime: The odd prime modulus p

    Example:
        >>> field = PrimeField(23)
        >>> field.inverse(5)  # 5 * 14 = 70 = 1 mod 23
        FieldElement(14, mod 23)
        >>> field.sqrt(5) is None
        True
    """

    def __init__(self, prime: int):
        """
        Initialize a prime field.

        Args:
            prime: The odd prime modulus.

        Raises:
            DomainError: If prime is not an odd prime.
        """
        if not isinstance(prime, int) or isinstance(prime, bool):
            raise TypeError(f"Modulus must be an int, got {type(prime).__name__}")
        if prime < 3 or prime % 2 == 0:
            raise DomainError(f"Modulus must be an odd prime, got {prime}")
        if not is_probable_prime(prime):
            raise DomainError(f"Modulus {prime} is not prime")
        self.prime = prime

    def __repr__(self) -> str:
        return f"PrimeField({self.prime})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PrimeField):
            return self.prime == other.prime
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("PrimeField", self.prime))

    # Element construction

    def reduce(self, n: int) -> FieldElement:
        """Reduce any integer into the field (true modulo, negatives included)."""
        return FieldElement(n % self.prime, self)

    def element(self, value: int) -> FieldElement:
        """Create a field element, rejecting values outside [0, p)."""
        return FieldElement(value, self)

    def zero(self) -> FieldElement:
        """Return the additive identity (0)."""
        return FieldElement(0, self)

    def one(self) -> FieldElement:
        """Return the multiplicative identity (1)."""
        return FieldElement(1, self)

    def max(self) -> FieldElement:
        """Return the largest element, p - 1."""
        return FieldElement(self.prime - 1, self)

    def elements(self) -> Iterator[FieldElement]:
        """Iterate over 0, 1, ..., p-1."""
        for value in range(self.prime):
            yield FieldElement(value, self)

    def random(self, exclude_zero: bool = False) -> FieldElement:
        """
        Generate a random field element.

        Not suitable for key material; uses the ``random`` module.

        Args:
            exclude_zero: If True, never returns zero (useful for testing inverses)
        """
        if exclude_zero:
            return FieldElement(random.randint(1, self.prime - 1), self)
        return FieldElement(random.randint(0, self.prime - 1), self)

    def _lift(self, x: Union[FieldElement, int]) -> FieldElement:
        if isinstance(x, FieldElement):
            if x.field.prime != self.prime:
                raise TypeError(f"{x!r} does not belong to F_{self.prime}")
            return x
        if isinstance(x, int):
            return self.reduce(x)
        raise TypeError(f"Expected FieldElement or int, got {type(x).__name__}")

    # Arithmetic in function form

    def add(self, a: Union[FieldElement, int], b: Union[FieldElement, int]) -> FieldElement:
        """Add two elements in the field."""
        return self._lift(a) + self._lift(b)

    def sub(self, a: Union[FieldElement, int], b: Union[FieldElement, int]) -> FieldElement:
        """Subtract two elements in the field."""
        return self._lift(a) - self._lift(b)

    def mul(self, a: Union[FieldElement, int], b: Union[FieldElement, int]) -> FieldElement:
        """Multiply two elements in the field."""
        return self._lift(a) * self._lift(b)

    def neg(self, a: Union[FieldElement, int]) -> FieldElement:
        """Negate an element in the field."""
        return -self._lift(a)

    def div(self, a: Union[FieldElement, int], b: Union[FieldElement, int]) -> FieldElement:
        """Divide a by b; DomainError if b is zero."""
        return self._lift(a) / self._lift(b)

    def inverse(self, a: Union[FieldElement, int]) -> FieldElement:
        """Compute the modular inverse; DomainError for zero."""
        return self._lift(a).inverse()

    def pow(self, base: Union[FieldElement, int], exp: int) -> FieldElement:
        """Compute base^exp in the field."""
        return self._lift(base) ** exp

    # Quadratic residues

    def legendre(self, a: Union[FieldElement, int]) -> int:
        """
        Legendre symbol via Euler's criterion.

        Returns:
            0 if a is zero, 1 if a is a nonzero square, -1 otherwise
        """
        value = self._lift(a).value
        if value == 0:
            return 0
        symbol = pow(value, (self.prime - 1) // 2, self.prime)
        return 1 if symbol == 1 else -1

    def is_square(self, a: Union[FieldElement, int]) -> bool:
        """True if a has a square root in the field."""
        return self.legendre(a) >= 0

    def sqrt(self, a: Union[FieldElement, int]) -> Optional[Tuple[FieldElement, FieldElement]]:
        """
        Compute both square roots of a.

        Returns:
            (r, p - r) with the smaller value first, (0, 0) for zero,
            or None when a is not a quadratic residue.
        """
        x = self._lift(a)
        if x.value == 0:
            return self.zero(), self.zero()
        if self.legendre(x) != 1:
            return None

        if self.prime % 4 == 3:
            root = pow(x.value, (self.prime + 1) // 4, self.prime)
        else:
            root = self._tonelli_shanks(x.value)

        low, high = sorted((root, self.prime - root))
        return FieldElement(low, self), FieldElement(high, self)

    def _tonelli_shanks(self, n: int) -> int:
        """One square root of a known nonzero residue n, for p = 1 (mod 4)."""
        p = self.prime

        # Factor p-1 = q * 2^s with q odd
        q, s = p - 1, 0
        while q % 2 == 0:
            q //= 2
            s += 1

        # Any non-residue works as z
        z = 2
        while pow(z, (p - 1) // 2, p) != p - 1:
            z += 1

        m = s
        c = pow(z, q, p)
        t = pow(n, q, p)
        r = pow(n, (q + 1) // 2, p)

        while t != 1:
            # Least i with t^(2^i) = 1
            i, t_sq = 0, t
            while t_sq != 1:
                t_sq = t_sq * t_sq % p
                i += 1
            b = pow(c, 1 << (m - i - 1), p)
            m = i
            c = b * b % p
            t = t * c % p
            r = r * b % p

        return r

    def square_table(self) -> np.ndarray:
        """
        Boolean mask of the squares: ``mask[v]`` is True iff v has a root.

        Only available for p <= ENUMERATION_LIMIT.
        """
        if self.prime > ENUMERATION_LIMIT:
            raise ValueError(
                f"Field too large to tabulate: {self.prime} > {ENUMERATION_LIMIT}"
            )
        residues = np.arange(self.prime, dtype=np.int64)
        mask = np.zeros(self.prime, dtype=bool)
        mask[(residues * residues) % self.prime] = True
        return mask


# Utility functions

def is_probable_prime(n: int) -> bool:
    """
    Miller-Rabin primality test with fixed witnesses.

    Exact for every n below 3.3 * 10^24, probabilistic above.
    """
    if n < 2:
        return False
    for small in _MILLER_RABIN_BASES:
        if n % small == 0:
            return n == small

    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for base in _MILLER_RABIN_BASES:
        x = pow(base, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True
