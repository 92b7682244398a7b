#!/usr/bin/env python3
#
#   Exact division, content and greatest common divisors of multivariate polynomials
#
#   The gcd is computed recursively: a polynomial in n variables is viewed as univariate in one of them with
#   coefficients in the ring of the other n - 1, and a primitive pseudo-remainder sequence is run over that ring.
#   Coefficient gcds recurse back into this module through the coefficient ring's content_gcd.
#

import logging

import numpy as np

from libmpoly.errors import InexactDivisionError, InvalidArgumentError

_logger = logging.getLogger(__name__)

def scale_divexact(p, c):
    """
    Divides every coefficient of p by the coefficient ring element c
    """
    K = p.ring.coeff_ring
    return type(p).from_canonical(p.ring, [K.exact_divide(a, c) for a in p.coeffs], p.exps)

def normalize(p):
    """
    The canonical associate of p, e.g. positive leading coefficient over ZZ or monic over a field
    """
    if p.is_zero():
        return p
    K = p.ring.coeff_ring
    u = K.canonical_unit(p.lc())
    if K.is_one(u):
        return p
    return scale_divexact(p, u)

def content(p):
    """
    gcd of the coefficients of p, zero for the zero polynomial
    """
    K = p.ring.coeff_ring
    g = K.zero()
    for c in p.coeffs:
        g = K.content_gcd(g, c)
        if K.is_one(g):
            break
    return g

def primpart(p):
    """
    p divided by its content, normalized
    """
    if p.is_zero():
        return p
    return normalize(scale_divexact(p, content(p)))

def divexact(a, b):
    """
    a / b, raising InexactDivisionError if b does not divide a
    """
    if b.is_zero():
        raise ZeroDivisionError
    if b.is_constant():
        return scale_divexact(a, b.lc())

    R = a.ring
    K = R.coeff_ring
    lm_b = b.exps[0].astype(np.int64)
    q_coeffs = []
    q_rows = []
    r = a
    while not r.is_zero():
        diff = r.exps[0].astype(np.int64) - lm_b
        if (diff < 0).any():
            raise InexactDivisionError(f"{b} does not divide {a}")
        c = K.exact_divide(r.coeffs[0], b.coeffs[0])
        q_coeffs.append(c)
        q_rows.append(diff.tolist())
        r = r - b.mul_term(c, diff)
    return R.from_sorted_terms(q_coeffs, q_rows)

def prem(a, b):
    """
    Pseudo-remainder of univariate polynomials, lc(b)^(deg a - deg b + 1) * a mod b
    """
    if b.is_zero():
        raise ZeroDivisionError
    if a.ring.n_vars != 1:
        raise InvalidArgumentError("Pseudo-remainders are only defined for univariate polynomials")
    db = b.degree(0)
    n = a.degree(0) - db + 1
    if n <= 0:
        return a

    lb = b.lc()
    r = a
    while not r.is_zero() and r.degree(0) >= db:
        r = r.scale(lb) - b.mul_term(r.lc(), (r.degree(0) - db,))
        n -= 1
    if n > 0:
        r = r.scale(lb ** n)
    return r

def univariate_gcd(a, b):
    D = a.ring.coeff_ring
    c = D.content_gcd(content(a), content(b))
    a = primpart(a)
    b = primpart(b)
    if a.degree(0) < b.degree(0):
        a, b = b, a

    while not b.is_zero():
        a, b = b, prem(a, b)
        if not b.is_zero():
            b = primpart(b)
    return a.scale(c)

def recursive_gcd(a, b):
    R = a.ring
    if a.is_constant() or b.is_constant():
        K = R.coeff_ring
        return R.constant(K.content_gcd(content(a), content(b)))
    if R.n_vars == 1:
        return univariate_gcd(a, b)

    i = next(k for k in range(R.n_vars) if a.degree(k) > 0 or b.degree(k) > 0)
    _logger.debug("gcd: recursing on %s over %d remaining variable(s)", R.var_names[i], R.n_vars - 1)
    g = univariate_gcd(a.to_univariate(i), b.to_univariate(i))
    return R.from_univariate(g, i)

def gcd(a, b):
    """
    Normalized greatest common divisor; gcd(a, 0) is normalize(a) and gcd(0, 0) is 0
    """
    if a.ring != b.ring:
        raise InvalidArgumentError("Polynomial rings should match")
    if a.is_zero():
        return normalize(b)
    if b.is_zero():
        return normalize(a)

    # common monomial factor
    R = a.ring
    shift = np.minimum(a.exps.min(axis=0), b.exps.min(axis=0))
    a = type(a).from_canonical(R, a.coeffs, a.exps - shift)
    b = type(b).from_canonical(R, b.coeffs, b.exps - shift)

    g = recursive_gcd(a, b)
    return normalize(g.mul_term(R.coeff_one, shift))

def lcm(a, b):
    """
    Normalized least common multiple, zero if either argument is zero
    """
    if a.ring != b.ring:
        raise InvalidArgumentError("Polynomial rings should match")
    if a.is_zero() or b.is_zero():
        return a.ring.zero()
    return normalize(divexact(a, gcd(a, b)) * b)

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

from libmpoly import polynomial
from libmpoly.basic_types import GF, QQ, ZZ

class TestDivision(unittest.TestCase):

    def test_divexact(self):
        R, (x, y) = polynomial.polynomial_ring(ZZ, ['x', 'y'])
        a = (x + y) * (3 * x - y)
        self.assertEqual(divexact(a, x + y), 3 * x - y)
        self.assertEqual(divexact(a, R(-1)), -a)
        with self.assertRaises(InexactDivisionError):
            divexact(a, x)
        with self.assertRaises(InexactDivisionError):
            divexact(a, 2 * x + 2 * y)
        with self.assertRaises(ZeroDivisionError):
            divexact(a, R.zero())

    def test_prem(self):
        R, (x,) = polynomial.polynomial_ring(ZZ, ['x'])
        self.assertEqual(prem(x ** 2 + 1, 2 * x + 1), R(5))
        self.assertEqual(prem(x + 1, x ** 2), x + 1)
        self.assertTrue(prem(x ** 3 - 1, x - 1).is_zero())

    def test_content(self):
        R, (x, y) = polynomial.polynomial_ring(ZZ, ['x', 'y'])
        self.assertEqual(content(6 * x + 4 * y), 2)
        self.assertEqual(primpart(-6 * x - 4), 3 * x + 2)
        self.assertEqual(content(R.zero()), 0)
        self.assertEqual(normalize(-x + 1), x - 1)
        F, (s, t) = polynomial.polynomial_ring(QQ, ['s', 't'])
        self.assertEqual(normalize(3 * s + t), s + t / 3)

class TestGCD(unittest.TestCase):

    def test_monomial_factor(self):
        R, (x, y) = polynomial.polynomial_ring(ZZ, ['x', 'y'])
        a = x * y + 2 * y
        b = x ** 3 * y + y
        self.assertEqual(gcd(a, b), y)
        self.assertEqual(lcm(a, b), (x + 2) * (x ** 3 + 1) * y)
        self.assertEqual(lcm(a, b) * gcd(a, b), a * b)
        self.assertEqual(gcd(x ** 2 * y, x * y ** 3), x * y)

    def test_polynomial_methods(self):
        R, (x, y) = polynomial.polynomial_ring(ZZ, ['x', 'y'])
        a = (2 * x + 2) * (x - y)
        b = (4 * x + 4) * y
        self.assertEqual(a.gcd(b), 2 * x + 2)
        self.assertEqual(a.lcm(b), 4 * (x + 1) * (x - y) * y)
        self.assertEqual(a.gcd(0), a)
        self.assertEqual(a.content(), 2)
        self.assertEqual((-a).primpart(), (x + 1) * (x - y))
        self.assertEqual((-a).normalize(), a)
        self.assertEqual(a.divexact(x - y), 2 * x + 2)
        self.assertEqual(a.divexact(2), (x + 1) * (x - y))
        with self.assertRaises(InexactDivisionError):
            a.divexact(y)

    def test_zero(self):
        R, (x, y) = polynomial.polynomial_ring(ZZ, ['x', 'y'])
        self.assertEqual(gcd(-x + 2, R.zero()), x - 2)
        self.assertEqual(gcd(R.zero(), 3 * y), y * 3)
        self.assertTrue(gcd(R.zero(), R.zero()).is_zero())
        self.assertTrue(lcm(x, R.zero()).is_zero())

    def test_integers(self):
        R, (x, y) = polynomial.polynomial_ring(ZZ, ['x', 'y'])
        a = (x + y) ** 2 * (x - 2 * y)
        b = (x + y) * (3 * x + 1)
        self.assertEqual(gcd(a, b), x + y)
        self.assertEqual(gcd(6 * x + 6, 4 * x + 4), 2 * x + 2)
        self.assertEqual(gcd(6 * x, 4 * y), R(2))
        self.assertEqual(gcd(x + 1, x + 2), R.one())
        self.assertEqual(lcm(2 * x + 2, 3 * x + 3), 6 * x + 6)

    def test_prime_field(self):
        R, (x, y) = polynomial.polynomial_ring(GF(7), ['x', 'y'], 'lex')
        a = (3 * x + 3) * (y + 2)
        b = (x + 1) * (x - y)
        self.assertEqual(gcd(a, b), x + 1)
        self.assertEqual(gcd(x ** 7 - x, x ** 2 - 1), x ** 2 - 1)

    def test_three_variables(self):
        R, (x, y, z) = polynomial.polynomial_ring(ZZ, ['x', 'y', 'z'])
        f = x * z + y
        a = f * (x + y + z)
        b = f * (x - z) * 2
        self.assertEqual(gcd(a, b), f)
        self.assertEqual(gcd(a * (y - 1), b * (y - 1)), f * (y - 1))

    def test_polynomial_coefficients(self):
        R, (y,) = polynomial.polynomial_ring(ZZ, ['y'])
        T, (x,) = polynomial.polynomial_ring(R, ['x'])
        self.assertEqual(gcd(y * x + y, y ** 2 * x + y ** 2), y * x + y)
        self.assertEqual(T.content_gcd(y * x ** 2 - y, (y + 1) * x + y + 1), x + 1)

    def test_ring_mismatch(self):
        R, (x,) = polynomial.polynomial_ring(ZZ, ['x'])
        S, (s,) = polynomial.polynomial_ring(QQ, ['x'])
        with self.assertRaises(InvalidArgumentError):
            gcd(x, s)

    def test_gcd_lcm_product(self):
        for K in (ZZ, QQ, GF(101)):
            R, (x, y) = polynomial.polynomial_ring(K, ['x', 'y'])
            for _ in range(5):
                c = polynomial.rand_poly(R, n_terms=2, max_deg=2)
                a = polynomial.rand_poly(R, n_terms=3, max_deg=2) * c
                b = polynomial.rand_poly(R, n_terms=3, max_deg=2) * c
                g = gcd(a, b)
                l = lcm(a, b)
                self.assertEqual(normalize(g * l), normalize(a * b))
                if not c.is_zero():
                    self.assertTrue(g.divisible_by(c))
                if not g.is_zero():
                    self.assertTrue(a.divisible_by(g))
                    self.assertTrue(b.divisible_by(g))
                self.assertEqual(g, gcd(b, a))
