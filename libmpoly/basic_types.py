#!/usr/bin/env python3

import random
from numbers import Integral
from typing import Union

from libmpoly.errors import InexactDivisionError

def isiterable(x):
    return isinstance(x, (tuple, list))

########################################################################################################################
#   Integer Arithmetic
########################################################################################################################

def gcd(a, b):
    while b != 0:
        a %= b
        a,b = b,a
    return abs(a)

def xgcd(a, b):
    prevx, x = 1, 0
    prevy, y = 0, 1
    while b != 0:
        q, r = divmod(a, b)
        x, prevx = prevx - q * x, x
        y, prevy = prevy - q * y, y
        a, b = b, r
    return a, prevx, prevy

class Mod:
    """
    Arithmetic in GF(p)
    """

    def __init__(self, x : int, p : int):
        self.x = x
        self.p = p

        if self.x not in range(self.p):
            self.x %= self.p

        # Init for prime if not done
        if self.p not in Mod.__invert__.cache:
            Mod.__invert__.cache[self.p] = {}

    def __str__(self):
        return str(self.x)

    def __repr__(self):
        return f"Mod({self.x}, {self.p})"

    def __hash__(self):
        return hash((self.x, self.p))

    def cvt_other(self, other):
        if isinstance(other, Integral):
            other = Mod(int(other), self.p)
        elif isinstance(other, Rational):
            other = other.to_mod(self.p)
        return other

    def __add__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Mod):
            return NotImplemented
        assert self.p == other.p
        r = self.x + other.x
        if r >= self.p:
            r -= self.p
        return Mod(r, self.p)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Mod):
            return NotImplemented
        assert self.p == other.p
        r = self.x - other.x
        if r < 0:
            r += self.p
        return Mod(r, self.p)

    def __rsub__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Mod):
            return NotImplemented
        assert self.p == other.p
        r = other.x - self.x
        if r < 0:
            r += other.p
        return Mod(r, other.p)

    def __mul__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Mod):
            return NotImplemented
        assert self.p == other.p
        return Mod(self.x * other.x, self.p)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __pow__(self, other):
        assert isinstance(other, Integral)
        if other < 0:
            return (~self) ** -other
        return Mod(pow(self.x, int(other), self.p), self.p)

    def __invert__(self):
        """
        Multiplicative inverse
        """
        if self.x == 0:
            raise ZeroDivisionError

        if self.x in Mod.__invert__.cache[self.p]:
            # Cache hit
            return Mod.__invert__.cache[self.p][self.x]
        else:
            # Cache miss, calculate
            a,x,_ = xgcd(self.x, self.p)
            if x < 0:
                x += self.p
            result = Mod(x, self.p)
            # Add to cache and return
            Mod.__invert__.cache[self.p][self.x] = result
            return result

    def __neg__(self):
        """
        Additive inverse
        """
        return Mod(self.p - self.x, self.p)

    def __truediv__(self, other):
        other = self.cvt_other(other)
        assert self.p == other.p
        return self * ~other

    def __rtruediv__(self, other):
        other = self.cvt_other(other)
        return other / self

    def __eq__(self, other):
        if isinstance(other, Mod):
            # Same field
            assert self.p == other.p
            return self.x == other.x
        elif isinstance(other, Integral):
            # Test equality mod p
            return self.x == int(other) % self.p
        elif isinstance(other, Rational):
            return self.x == other.to_mod(self.p).x
        return NotImplemented

Mod.__invert__.cache = {}

########################################################################################################################
#   Rational Numbers
########################################################################################################################

class Rational:
    def __init__(self, num, dnm):
        self.num = num
        self.dnm = dnm
        self.canonicalise()

    def tup(self):
        return self.num, self.dnm

    def __str__(self):
        if self.dnm == 1:
            return f"{self.num}"
        return f"{self.num}/{self.dnm}"

    def __repr__(self):
        return f"Rational({self.num}, {self.dnm})"

    def __hash__(self):
        # integral values hash like the int they equal
        if self.dnm == 1:
            return hash(self.num)
        return hash((self.num, self.dnm))

    def canonicalise(self):
        # For consistency, require denominator 1 when numerator is 0
        if self.num == 0:
            self.dnm = 1
            return
        # Check div0, denominator can be 0 only when numerator is 0
        if self.dnm == 0:
            raise ZeroDivisionError
        # Move sign out of the denominator
        if self.dnm < 0:
            self.dnm = -self.dnm
            self.num = -self.num
        # Remove common factors
        g = gcd(self.num, self.dnm)
        self.num //= g
        self.dnm //= g

    def cvt_other(self, other):
        if isinstance(other, Integral):
            other = Rational(int(other), 1)
        return other

    def __add__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Rational):
            return NotImplemented
        return Rational(self.num * other.dnm + self.dnm * other.num, self.dnm * other.dnm)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Rational):
            return NotImplemented
        return Rational(self.num * other.dnm - self.dnm * other.num, self.dnm * other.dnm)

    def __rsub__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Rational):
            return NotImplemented
        return Rational(self.dnm * other.num - self.num * other.dnm, self.dnm * other.dnm)

    def __mul__(self, other):
        other = self.cvt_other(other)
        if isinstance(other, Mod):
            return other * self
        if not isinstance(other, Rational):
            return NotImplemented
        return Rational(self.num * other.num, self.dnm * other.dnm)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        other = self.cvt_other(other)
        return Rational(self.num * other.dnm, self.dnm * other.num)

    def __rtruediv__(self, other):
        other = self.cvt_other(other)
        return Rational(other.num * self.dnm, other.dnm * self.num)

    def __pow__(self, other):
        assert isinstance(other, Integral)
        if other < 0:
            return (~self) ** -other
        return Rational(self.num ** other, self.dnm ** other)

    def __invert__(self):
        return Rational(self.dnm, self.num)

    def __neg__(self):
        return Rational(-self.num, self.dnm)

    def __eq__(self, other):
        other = self.cvt_other(other)
        if not isinstance(other, Rational):
            return NotImplemented
        return self.num == other.num and self.dnm == other.dnm

    def to_mod(self, p):
        return Mod(self.num, p) * ~Mod(self.dnm, p)

########################################################################################################################
#   Coefficient Rings
########################################################################################################################

class CoefficientRing:
    """
    Capabilities the polynomial core needs from a coefficient ring.

    Elements support `+`, `-`, `*` and unary `-` directly; everything else goes through the ring object. Every
    concrete ring implements this one interface, including PolynomialRing so that polynomial rings can be nested.
    """

    def __call__(self, arg):
        raise NotImplementedError()

    def zero(self):
        return self(0)

    def one(self):
        return self(1)

    def is_zero(self, a):
        return a == self.zero()

    def is_one(self, a):
        return a == self.one()

    def is_field(self):
        return False

    def canonical_unit(self, a):
        """
        A unit u such that a / u is the canonical associate of a
        """
        raise NotImplementedError()

    def unit_normalize(self, a):
        if self.is_zero(a):
            return a
        return self.exact_divide(a, self.canonical_unit(a))

    def content_gcd(self, a, b):
        raise NotImplementedError()

    def exact_divide(self, a, b):
        raise NotImplementedError()

    def divides(self, a, b):
        """
        Returns (True, q) with q * b == a if b divides a, otherwise (False, None)
        """
        if self.is_zero(b):
            return self.is_zero(a), (self.zero() if self.is_zero(a) else None)
        try:
            return True, self.exact_divide(a, b)
        except InexactDivisionError:
            return False, None

    def rand_elem(self, min : int = 0):
        raise NotImplementedError()

class Field(CoefficientRing):
    def is_field(self):
        return True

    def canonical_unit(self, a):
        return self.one() if self.is_zero(a) else a

    def content_gcd(self, a, b):
        if self.is_zero(a) and self.is_zero(b):
            return self.zero()
        return self.one()

    def exact_divide(self, a, b):
        a, b = self(a), self(b)
        if self.is_zero(b):
            raise ZeroDivisionError
        return a / b

    def divides(self, a, b):
        a, b = self(a), self(b)
        if self.is_zero(b):
            return self.is_zero(a), (self.zero() if self.is_zero(a) else None)
        return True, self.exact_divide(a, b)

class IntegerRing(CoefficientRing):
    def __call__(self, arg : Union[Rational, int]):
        if isinstance(arg, Integral):
            return int(arg)
        elif isinstance(arg, Rational) and arg.dnm == 1:
            return arg.num
        else:
            raise ValueError(f"{arg} cannot be a member of the integers")

    def __str__(self):
        return "The Integers"

    def __repr__(self):
        return "ZZ"

    def __eq__(self, other):
        return isinstance(other, IntegerRing)

    def __hash__(self):
        return hash("ZZ")

    def zero(self):
        return 0

    def one(self):
        return 1

    def is_zero(self, a):
        return a == 0

    def is_one(self, a):
        return a == 1

    def canonical_unit(self, a):
        return -1 if a < 0 else 1

    def unit_normalize(self, a):
        return abs(a)

    def content_gcd(self, a, b):
        return gcd(a, b)

    def exact_divide(self, a, b):
        if b == 0:
            raise ZeroDivisionError
        q, r = divmod(a, b)
        if r != 0:
            raise InexactDivisionError(f"{b} does not divide {a}")
        return q

    def rand_elem(self, min : int = 0):
        # Bounds are arbitrary for testing purposes
        return random.randint(min - 100, 100)

ZZ = IntegerRing()

class RationalField(Field):
    def __call__(self, arg : Union[Rational, int]):
        if isinstance(arg, Rational):
            return arg
        elif isinstance(arg, Integral):
            return Rational(int(arg), 1)
        else:
            raise ValueError(f"{arg} cannot be a member of a rational field")

    def __str__(self):
        return "The Rational Numbers"

    def __repr__(self):
        return "QQ"

    def __eq__(self, other):
        return isinstance(other, RationalField)

    def __hash__(self):
        return hash("QQ")

    def is_zero(self, a):
        return a.num == 0

    def is_one(self, a):
        return a.num == 1 and a.dnm == 1

    def rand_elem(self, min : int = 0):
        # Bounds are arbitrary for testing purposes
        return Rational(random.randint(min, 100), random.randint(1, 100))

QQ = RationalField()

class GF(Field):
    def __init__(self, p : int):
        assert p > 0
        self.p = p

    def __repr__(self):
        return f"GF({self.p})"

    def __str__(self):
        return repr(self)

    def __eq__(self, other):
        if isinstance(other, GF):
            return self.p == other.p
        return False

    def __hash__(self):
        return hash(("GF", self.p))

    def __call__(self, arg : Union[Mod, int]):
        if isinstance(arg, Mod):
            if arg.p != self.p:
                raise ValueError(f"{arg!r} is not a member of {self}")
            return arg
        elif isinstance(arg, Integral):
            return Mod(int(arg), self.p)
        elif isinstance(arg, Rational):
            return Mod(arg.num, self.p) / Mod(arg.dnm, self.p)
        else:
            raise ValueError(f"{arg} cannot be a member of a prime field")

    def is_zero(self, a):
        return a.x == 0

    def is_one(self, a):
        return a.x == 1

    def rand_elem(self, min : int = 0):
        return Mod(random.randint(min, self.p - 1), self.p)

########################################################################################################################
#   Unit Tests
########################################################################################################################

import unittest

class TestGCD(unittest.TestCase):

    def test_gcd(self):
        self.assertEqual(gcd(4, 3), 1)
        self.assertEqual(gcd(12, 3), 3)
        self.assertEqual(gcd(21, 9), 3)
        self.assertEqual(gcd(0, 5), 5)
        self.assertEqual(gcd(0, 0), 0)
        self.assertEqual(gcd(1, -2), gcd(1, 2))
        self.assertEqual(gcd(-1, -2), gcd(1, 2))

    def test_xgcd(self):
        self.assertEqual(xgcd(30, 18), (6, -1, 2))
        self.assertEqual(xgcd(18, 30), (6, 2, -1))

class TestMod(unittest.TestCase):

    def test_arith(self):
        for _ in range(1000):
            p = random.randint(2, 65525)
            x1 = random.randint(2, 65525)
            x2 = random.randint(2, 65525)
            self.assertEqual(Mod(x1, p) + Mod(x2, p), (x1 + x2) % p)
            self.assertEqual(Mod(x1, p) - Mod(x2, p), (x1 - x2) % p)
            self.assertEqual(Mod(x1, p) * Mod(x2, p), (x1 * x2) % p)
            self.assertEqual(-Mod(x1, p), (-x1) % p)

    def test_inversion(self):
        for p in (65413, 65419, 65521):
            x = Mod(random.randint(2, p - 1), p)
            self.assertEqual(x * ~x, 1)
            self.assertEqual(x ** -1, ~x)
        with self.assertRaises(ZeroDivisionError):
            ~Mod(0, 7)

class TestRational(unittest.TestCase):

    def test_canonical(self):
        self.assertEqual(Rational(0, 5).tup(), (0, 1))
        self.assertEqual(Rational(6, 3).tup(), (2, 1))
        self.assertEqual(Rational(2, -4).tup(), (-1, 2))
        self.assertEqual(hash(Rational(2, 4)), hash(Rational(1, 2)))
        self.assertEqual(hash(Rational(6, 2)), hash(3))

    def test_arith(self):
        self.assertEqual((Rational(4, 5) + Rational(6, 7)).tup(), (58, 35))
        self.assertEqual((Rational(3, 2) * Rational(-1, 2)).tup(), (-3, 4))
        self.assertEqual((Rational(2, 3) / Rational(3, 4)).tup(), (8, 9))
        self.assertEqual((~Rational(2, -3)).tup(), (-3, 2))
        with self.assertRaises(ZeroDivisionError):
            Rational(1, 0)

class TestCoefficientRings(unittest.TestCase):

    def test_integers(self):
        self.assertEqual(ZZ.exact_divide(12, -4), -3)
        with self.assertRaises(InexactDivisionError):
            ZZ.exact_divide(7, 2)
        with self.assertRaises(ZeroDivisionError):
            ZZ.exact_divide(7, 0)
        self.assertEqual(ZZ.canonical_unit(-5), -1)
        self.assertEqual(ZZ.unit_normalize(-5), 5)
        self.assertEqual(ZZ.content_gcd(-6, 4), 2)
        self.assertEqual(ZZ.divides(6, 3), (True, 2))
        self.assertEqual(ZZ.divides(6, 4), (False, None))

    def test_fields(self):
        F = GF(7)
        self.assertTrue(F.is_field())
        self.assertEqual(F.unit_normalize(F(3)), 1)
        self.assertEqual(F.exact_divide(F(1), F(3)) * 3, 1)
        self.assertEqual(F.content_gcd(F(0), F(0)), 0)
        self.assertEqual(F.content_gcd(F(0), F(5)), 1)
        with self.assertRaises(ZeroDivisionError):
            F.exact_divide(F(1), F(0))
        self.assertEqual(QQ.exact_divide(QQ(3), QQ(6)), Rational(1, 2))
        self.assertEqual(QQ.canonical_unit(Rational(-2, 3)), Rational(-2, 3))

    def test_prime_field_membership(self):
        F = GF(7)
        self.assertEqual(F(Mod(3, 7)), Mod(3, 7))
        self.assertEqual(F(Rational(1, 2)), Mod(4, 7))
        with self.assertRaises(ValueError):
            F(Mod(3, 5))
