"""Tests for the short-Weierstrass group law."""

import copy
import random

import pytest

from curvelab import curve
from curvelab.common.errors import DomainError
from curvelab.common.field import PrimeField
from curvelab.elliptic import INFINITY, Affine, WeierstrassCurve

SECP256K1_P = 2 ** 256 - 2 ** 32 - 977
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
SECP256K1_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8


def pt(c, x, y):
    return c.point(x, y)


# Worked example over F_61

def test_evaluate_x(c61):
    f = c61.field
    assert c61.evaluate_x(0) == (f.element(1), f.element(60))
    assert c61.evaluate_x(1) is None
    assert c61.evaluate_x(2) == (f.element(24), f.element(37))
    assert c61.evaluate_x(3) is None
    assert c61.evaluate_x(4) is None
    assert c61.evaluate_x(5) == (f.element(7), f.element(54))


def test_evaluate_x_accepts_field_element(c61):
    assert c61.evaluate_x(c61.field.element(0)) == c61.evaluate_x(0)


def test_point_add(c61):
    g = pt(c61, 5, 7)
    p2 = c61.add(g, g)
    assert p2 == pt(c61, 26, 50)
    assert c61.add(p2, g) == pt(c61, 27, 38)


def test_point_mul(c61):
    g = pt(c61, 5, 7)
    assert c61.scalar_multiply(g, 2) == pt(c61, 26, 50)
    assert c61.scalar_multiply(g, 3) == pt(c61, 27, 38)


def test_key_exchange(c61):
    g = c61.generator
    k_a, k_b = 12, 7
    a = c61.scalar_multiply(g, k_a)
    b = c61.scalar_multiply(g, k_b)
    assert c61.scalar_multiply(b, k_a) == c61.scalar_multiply(a, k_b)


def test_key_exchange_random_scalars(c61, c23):
    rng = random.Random(2024)
    for c in (c61, c23):
        for _ in range(20):
            k_a, k_b = rng.randrange(1, 10 ** 6), rng.randrange(1, 10 ** 6)
            shared_a = c.scalar_multiply(c.multiply_generator(k_b), k_a)
            shared_b = c.scalar_multiply(c.multiply_generator(k_a), k_b)
            assert shared_a == shared_b


# Group law properties over every point of a small curve

def test_identity(c61):
    for p in c61.points():
        assert c61.add(p, INFINITY) == p
        assert c61.add(INFINITY, p) == p
    assert c61.add(INFINITY, INFINITY) is INFINITY


def test_commutativity(c23):
    points = list(c23.points()) + [INFINITY]
    for p in points:
        for q in points:
            assert c23.add(p, q) == c23.add(q, p)


def test_closure(c23):
    points = list(c23.points())
    for p in points:
        for q in points:
            assert c23.contains(c23.add(p, q))


def test_associativity_sample(c61):
    points = list(c61.points())
    rng = random.Random(3)
    for _ in range(200):
        p, q, r = (rng.choice(points) for _ in range(3))
        assert c61.add(c61.add(p, q), r) == c61.add(p, c61.add(q, r))


def test_inverse_cancellation(c61):
    for p in c61.points():
        assert c61.add(p, c61.negate(p)) == INFINITY
        assert c61.subtract(p, p) == INFINITY
    assert c61.negate(INFINITY) is INFINITY


def test_doubling_point_of_order_two(c23):
    # x^3 + x + 1 = 0 at x = 4 over F_23
    p = pt(c23, 4, 0)
    assert c23.double(p) == INFINITY
    assert c23.order_of(p) == 2


def test_scalar_multiply_consistency(c61):
    for p in c61.points():
        assert c61.scalar_multiply(p, 2) == c61.add(p, p)
        assert c61.scalar_multiply(p, 3) == c61.add(c61.scalar_multiply(p, 2), p)


def test_scalar_multiply_matches_repeated_addition(c23):
    g = c23.generator
    acc = INFINITY
    for k in range(60):
        assert c23.scalar_multiply(g, k) == acc
        acc = c23.add(acc, g)


def test_scalar_zero_and_infinity(c61):
    assert c61.scalar_multiply(c61.generator, 0) is INFINITY
    assert c61.scalar_multiply(INFINITY, 5) is INFINITY
    assert c61.scalar_multiply(c61.generator, 1) == c61.generator


def test_scalar_is_not_reduced_by_field_modulus(c23):
    # 29 > p = 23, and 29 = 1 (mod 28), the order of G
    assert c23.scalar_multiply(c23.generator, 29) == c23.generator
    assert c23.scalar_multiply(c23.generator, 28) == INFINITY


def test_field_element_scalar(c61):
    k = c61.field.element(3)
    assert c61.scalar_multiply(c61.generator, k) == pt(c61, 27, 38)


def test_negative_scalar(c61):
    with pytest.raises(DomainError):
        c61.scalar_multiply(c61.generator, -1)


def test_bad_scalar_type(c61):
    with pytest.raises(TypeError):
        c61.scalar_multiply(c61.generator, 2.0)


# Construction and validation

def test_point_off_curve(c61):
    with pytest.raises(DomainError):
        c61.point(1, 1)


def test_generator_must_be_on_curve():
    with pytest.raises(DomainError):
        curve(61, 9, 1, 5, 8)


def test_singular_curve():
    with pytest.raises(DomainError):
        curve(23, 0, 0, 0, 0)


def test_non_prime_modulus():
    with pytest.raises(DomainError):
        curve(63, 1, 1, 0, 1)


def test_foreign_coordinates(c61):
    other = PrimeField(23)
    foreign = Affine(other.element(3), other.element(10))
    with pytest.raises(TypeError):
        c61.add(c61.generator, foreign)


def test_field_must_match_params(c61):
    with pytest.raises(DomainError):
        WeierstrassCurve(c61.params, field=PrimeField(23))


def test_lift_x(c61):
    even = c61.lift_x(5)
    odd = c61.lift_x(5, odd=True)
    assert even == pt(c61, 5, 54)
    assert odd == pt(c61, 5, 7)
    assert c61.lift_x(1) is None


def test_curve_equality(c61, c23):
    assert c61 == curve(61, 9, 1, 26, 50)
    assert hash(c61) == hash(curve(61, 9, 1, 26, 50))
    assert c61 != c23


# Enumeration

def test_points_are_on_curve(c61):
    points = list(c61.points())
    assert len(points) == len(set(points))
    assert all(c61.contains(p) for p in points)
    assert len(points) + 1 == c61.count_points()


def test_count_points_curve23(c23):
    assert c23.count_points() == 28
    assert c23.order_of(c23.generator) == 28
    assert c23.params.order == 28


def test_order_divides_group_order(c61):
    n = c61.count_points()
    assert n <= c61.hasse_bound()
    for p in c61.points():
        assert n % c61.order_of(p) == 0


def test_enumeration_limit():
    big = curve(SECP256K1_P, 0, 7, SECP256K1_GX, SECP256K1_GY)
    with pytest.raises(ValueError):
        big.count_points()


# Trace and reporting

def test_trace(c61):
    trace = c61.scalar_multiply_trace(c61.generator, 0b1011)
    assert trace.scalar == 11
    assert trace.num_doublings == 4
    assert trace.num_additions == 3
    assert [s.bit for s in trace.steps] == [1, 0, 1, 1]
    assert trace.steps[0].bit_index == 3
    assert trace.result == c61.scalar_multiply(c61.generator, 11)


def test_trace_of_zero(c61):
    trace = c61.scalar_multiply_trace(c61.generator, 0)
    assert trace.steps == []
    assert trace.result is INFINITY


def test_verbose_output(c61, capsys):
    c61.scalar_multiply(c61.generator, 3, verbose=True)
    out = capsys.readouterr().out
    assert "DOUBLE-AND-ADD" in out
    assert "Result: (27, 38)" in out


# Points

def test_infinity_is_singleton():
    assert copy.copy(INFINITY) is INFINITY
    assert copy.deepcopy(INFINITY) is INFINITY
    assert INFINITY.is_infinity()
    assert INFINITY != Affine(PrimeField(23).element(3), PrimeField(23).element(10))


def test_affine_repr(c61):
    assert repr(c61.generator) == "Affine(x=5, y=7)"
    assert c61.generator.as_tuple() == (5, 7)


# A real-sized curve

def test_secp256k1():
    c = curve(SECP256K1_P, 0, 7, SECP256K1_GX, SECP256K1_GY, name="secp256k1")
    g = c.generator
    two_g = c.double(g)
    assert two_g.as_tuple() == (
        0xC6047F9441ED7D6D3045406E95C07CD85C778E4B8CEF3CA7ABAC09B95C709EE5,
        0x1AE168FEA63DC339A3C58419466CEAEEF7F632653266D0E1236431A950CFE52A,
    )
    assert c.scalar_multiply(g, SECP256K1_N) == INFINITY
    assert c.scalar_multiply(g, SECP256K1_N - 1) == c.negate(g)
    assert c.lift_x(SECP256K1_GX) == g
