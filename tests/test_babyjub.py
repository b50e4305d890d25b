import pytest

from zktransfer import BabyJubjub, OutOfDomain
from zktransfer.babyjub import IDENTITY, JubjubFQ, to_ints
from zktransfer.field import BASE8


@pytest.fixture(scope="module")
def curve(ctx):
    return BabyJubjub(ctx)


def test_base_point_on_curve(curve):
    assert curve.is_on_curve(curve.base8)
    assert to_ints(curve.base8) == BASE8


def test_base_point_generates_prime_subgroup(curve):
    assert curve.in_subgroup(curve.base8)
    assert curve.multiply(curve.base8, curve.suborder + 1) == curve.base8


def test_identity(curve):
    assert curve.add(IDENTITY, curve.base8) == curve.base8
    assert curve.add(curve.base8, IDENTITY) == curve.base8
    assert curve.multiply(curve.base8, 0) == IDENTITY


def test_add_and_multiply_agree(curve):
    b = curve.base8
    two = curve.add(b, b)
    three = curve.add(two, b)
    assert curve.multiply(b, 2) == two
    assert curve.multiply(b, 3) == three
    assert curve.add(two, b) == curve.add(b, two)
    assert curve.is_on_curve(three)


def test_negation(curve):
    x, y = curve.base8
    assert curve.add(curve.base8, (-x, y)) == IDENTITY


def test_point_rejects_off_curve(curve):
    with pytest.raises(OutOfDomain):
        curve.point(1, 2)


def test_point_rejects_out_of_field(curve):
    with pytest.raises(OutOfDomain):
        curve.point(JubjubFQ.field_modulus, 1)


def test_negative_scalar(curve):
    with pytest.raises(OutOfDomain):
        curve.multiply(curve.base8, -1)
