"""Baby Jubjub twisted Edwards arithmetic.

The curve ``a*x^2 + y^2 = 1 + d*x^2*y^2`` is defined over the BN254 scalar
field, so its coordinates are native field elements for the hasher and for
the circuit.  Points are affine ``(x, y)`` tuples of field elements; the
neutral element is ``(0, 1)``.
"""

from __future__ import annotations

from typing import Tuple

from py_ecc.fields.field_elements import FQ

from .errors import OutOfDomain
from .field import CryptoContext, check_field_element, p


class JubjubFQ(FQ):
    field_modulus = p


Point = Tuple[JubjubFQ, JubjubFQ]

IDENTITY: Point = (JubjubFQ(0), JubjubFQ(1))


class BabyJubjub:
    def __init__(self, ctx: CryptoContext):
        self.ctx = ctx
        self.a = JubjubFQ(ctx.curve_a)
        self.d = JubjubFQ(ctx.curve_d)
        self.suborder = ctx.suborder
        self.base8 = self.point(*ctx.base8)

    def point(self, x, y) -> Point:
        """Validate raw integer coordinates and lift them onto the curve."""
        pt = (
            JubjubFQ(check_field_element(x, "point x")),
            JubjubFQ(check_field_element(y, "point y")),
        )
        if not self.is_on_curve(pt):
            raise OutOfDomain(f"point ({int(x)}, {int(y)}) is not on Baby Jubjub")
        return pt

    def is_on_curve(self, pt: Point) -> bool:
        x, y = pt
        x2 = x * x
        y2 = y * y
        return self.a * x2 + y2 == 1 + self.d * x2 * y2

    def add(self, pt1: Point, pt2: Point) -> Point:
        if pt1 == IDENTITY:
            return pt2
        if pt2 == IDENTITY:
            return pt1

        x1, y1 = pt1
        x2, y2 = pt2
        x1x2 = x1 * x2
        y1y2 = y1 * y2
        dxy = self.d * x1x2 * y1y2

        # d is a non-square so the addition law is complete; keep the guard
        # anyway for points that were never validated
        denom_x = 1 + dxy
        denom_y = 1 - dxy
        if denom_x == 0 or denom_y == 0:
            raise OutOfDomain("point addition failed: denominator is zero")

        x3 = (x1 * y2 + y1 * x2) / denom_x
        y3 = (y1y2 - self.a * x1x2) / denom_y
        return x3, y3

    def multiply(self, pt: Point, scalar: int) -> Point:
        if scalar < 0:
            raise OutOfDomain("scalar multiplication expects non-negative scalars")
        result = IDENTITY
        addend = pt
        k = scalar

        while k:
            if k & 1:
                result = self.add(result, addend)
            addend = self.add(addend, addend)
            k >>= 1

        return result

    def in_subgroup(self, pt: Point) -> bool:
        return self.multiply(pt, self.suborder) == IDENTITY


def to_ints(pt: Point) -> Tuple[int, int]:
    return pt[0].n, pt[1].n
