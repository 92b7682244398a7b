#!/usr/bin/env python3
#
#   Sparse distributed multivariate polynomials
#
#   A Polynomial is a list of coefficients paired with a packed exponent matrix (one row per term). Terms are kept
#   strictly descending under the ring's monomial ordering, with no zero coefficient and no repeated monomial; the
#   zero polynomial has no terms.
#

import logging
import threading
from numbers import Integral
from typing import List

import numpy as np

from libmpoly import poly_gcd
from libmpoly.basic_types import CoefficientRing, isiterable
from libmpoly.errors import InexactDivisionError, InvalidArgumentError
from libmpoly.monomial import (Monomial, MonomialOrderDegRevLex, add_exponents, cell_dtype, check_degrees,
                               monomial_order, pack, pack_rows, total_degrees)

_logger = logging.getLogger(__name__)

########################################################################################################################
#   Polynomial Rings
########################################################################################################################

class PolynomialRing(CoefficientRing):
    def __init__(self, coeff_ring : CoefficientRing, var_names : List[str], order=MonomialOrderDegRevLex,
                 bits : int = 64):
        self.coeff_ring = coeff_ring
        self.var_names = [var_names] if isinstance(var_names, str) else list(var_names)
        self.n_vars = len(self.var_names)
        if len(set(self.var_names)) != self.n_vars:
            raise InvalidArgumentError("Variable names must be distinct")
        self.order = monomial_order(order)
        self.bits = bits
        self.dtype = cell_dtype(bits)
        self.coeff_zero = self.coeff_ring.zero()
        self.coeff_one = self.coeff_ring.one()
        self.mon0 = Monomial(self, (0,) * self.n_vars)
        self.generators = tuple(self.from_sorted_terms([self.coeff_one], [row])
                                for row in np.eye(self.n_vars, dtype=int).tolist())

    def to_coeff_ring(self, coeff_ring : CoefficientRing):
        return PolynomialRing(coeff_ring, self.var_names, self.order, self.bits)

    def __call__(self, element):
        if isinstance(element, Polynomial):
            if element.ring is self:
                return element
            elif element.ring == self:
                return Polynomial.from_canonical(self, element.coeffs, element.exps)
            elif element.ring == self.coeff_ring:
                return self.constant(element)
            used = [name for name,present in zip(element.ring.var_names, element.exps.any(axis=0)) if present]
            if set(used) <= set(self.var_names):
                # variables matched by name
                rows = [self.map_degrees(element.ring, row) for row in element.exps.tolist()]
                return Polynomial(self, rows, [self.coeff_ring(coeff) for coeff in element.coeffs])
            if isinstance(self.coeff_ring, PolynomialRing):
                return self.constant(self.coeff_ring(element))
            raise InvalidArgumentError(f"{element} is not a member of {self}")
        elif isinstance(element, Monomial):
            if element.ring == self:
                return Polynomial.from_canonical(self, [self.coeff_one], pack_rows([element.degrees], self.n_vars,
                                                                                    self.bits))
            return Polynomial(self, [self.map_degrees(element.ring, element.degrees)], [self.coeff_one])
        return self.constant(self.coeff_ring(element))

    def map_degrees(self, ring, degrees):
        new_degrees = [0] * self.n_vars
        for name,degree in zip(ring.var_names, degrees):
            if name not in self.var_names:
                if degree != 0:
                    raise InvalidArgumentError(f"Variable {name} is not a member of {self}")
                continue
            new_degrees[self.var_names.index(name)] = degree
        return new_degrees

    def constant(self, c):
        c = self.coeff_ring(c)
        if self.coeff_ring.is_zero(c):
            return Polynomial.ZERO(self)
        return Polynomial.from_canonical(self, [c], np.zeros((1, self.n_vars), dtype=self.dtype))

    def from_sorted_terms(self, coeffs, rows):
        """
        Builds a polynomial from terms that are already nonzero and strictly descending
        """
        return Polynomial.from_canonical(self, list(coeffs), pack_rows(rows, self.n_vars, self.bits))

    def canonicalise(self, coeffs, exps):
        """
        Sorts terms descending, merges repeated monomials and strips zero coefficients
        """
        self.check_degree(exps)
        if len(coeffs) == 0:
            return [], exps

        perm = self.order.argsort_desc(exps, self.bits)
        exps = exps[perm]
        coeffs = [coeffs[i] for i in perm]

        rows = exps.tolist()
        keep = []
        out = []
        i = 0
        while i < len(rows):
            c = coeffs[i]
            j = i + 1
            # equal monomials are adjacent once sorted
            while j < len(rows) and rows[j] == rows[i]:
                c = c + coeffs[j]
                j += 1
            if not self.coeff_ring.is_zero(c):
                keep.append(i)
                out.append(c)
            i = j
        return out, exps[np.array(keep, dtype=np.intp)]

    def check_degree(self, exps):
        if self.order.graded:
            total_degrees(exps, self.bits)

    def __eq__(self, other):
        if not isinstance(other, PolynomialRing):
            return False
        return self.coeff_ring == other.coeff_ring and self.var_names == other.var_names and \
            self.order == other.order and self.bits == other.bits

    def __hash__(self):
        return hash((self.coeff_ring, tuple(self.var_names), self.order, self.bits))

    def variables(self):
        return self.generators

    gens = variables

    def var_index(self, var):
        """
        Index of a variable given as an index, a name or a generator of this ring
        """
        if isinstance(var, Polynomial):
            if var.ring != self or not var.is_gen():
                raise InvalidArgumentError(f"{var} is not a generator of {self}")
            return int(np.flatnonzero(var.exps[0])[0])
        if isinstance(var, str):
            if var not in self.var_names:
                raise InvalidArgumentError(f"No variable named {var} in {self}")
            return self.var_names.index(var)
        if isinstance(var, Integral) and 0 <= var < self.n_vars:
            return int(var)
        raise InvalidArgumentError(f"Variable index {var!r} out of range for {self.n_vars} variable(s)")

    def from_univariate(self, u, var):
        """
        Inverse of Polynomial.to_univariate
        """
        i = self.var_index(var)
        rows = []
        coeffs = []
        for c,(d,) in zip(u.coeffs, u.exps.tolist()):
            if self.n_vars == 1:
                rows.append((d,))
                coeffs.append(c)
                continue
            for cc,row in zip(c.coeffs, c.exps.tolist()):
                row.insert(i, d)
                rows.append(row)
                coeffs.append(cc)
        return Polynomial(self, rows, coeffs)

    # Coefficient ring capabilities, so that polynomial rings can themselves be coefficient rings

    def zero(self):
        return Polynomial.ZERO(self)

    def one(self):
        return self.constant(self.coeff_one)

    def is_zero(self, a):
        return self(a).is_zero()

    def is_one(self, a):
        return self(a).is_one()

    def canonical_unit(self, a):
        a = self(a)
        if a.is_zero():
            return self.one()
        return self.constant(self.coeff_ring.canonical_unit(a.lc()))

    def unit_normalize(self, a):
        return poly_gcd.normalize(self(a))

    def content_gcd(self, a, b):
        return poly_gcd.gcd(self(a), self(b))

    def exact_divide(self, a, b):
        return poly_gcd.divexact(self(a), self(b))

    def __str__(self):
        return f"Polynomial Ring in {self.n_vars} variable(s) {self.var_names} over {self.coeff_ring}"

    def __repr__(self) -> str:
        return f"PolynomialRing({repr(self.coeff_ring)}, {repr(self.var_names)}, {self.order.name!r})"

_ring_cache = {}
_ring_cache_lock = threading.Lock()

def polynomial_ring(coeff_ring : CoefficientRing, var_names : List[str], order=MonomialOrderDegRevLex,
                    bits : int = 64, cached : bool = True):
    """
    Returns (ring, generators)

    With `cached` the same ring object is returned for identical parameters.
    """
    var_names = [var_names] if isinstance(var_names, str) else list(var_names)
    order = monomial_order(order)

    if not cached:
        ring = PolynomialRing(coeff_ring, var_names, order, bits)
        return ring, ring.variables()

    key = (coeff_ring, tuple(var_names), order, bits)
    with _ring_cache_lock:
        ring = _ring_cache.get(key)
        if ring is None:
            ring = PolynomialRing(coeff_ring, var_names, order, bits)
            _ring_cache[key] = ring
        else:
            _logger.debug("Reusing cached %r", ring)
    return ring, ring.variables()

########################################################################################################################
#   Polynomial
########################################################################################################################

class Polynomial:
    def __init__(self, ring : PolynomialRing, monomials, coeffs):
        if len(monomials) != len(coeffs):
            raise InvalidArgumentError("Number of coefficients and monomials must match")
        degrees = [m.degrees if isinstance(m, Monomial) else (m,) if isinstance(m, Integral) else m
                   for m in monomials]
        self.ring = ring
        # Promote to member of coefficient ring
        coeffs = [self.ring.coeff_ring(coeff) for coeff in coeffs]
        self.coeffs, self.exps = ring.canonicalise(coeffs, pack_rows(degrees, ring.n_vars, ring.bits))
        self.exps.flags.writeable = False

    @staticmethod
    def from_canonical(ring : PolynomialRing, coeffs, exps):
        """
        Wraps terms that already satisfy the ordering invariants, without checking them
        """
        p = Polynomial.__new__(Polynomial)
        p.ring = ring
        p.coeffs = coeffs
        p.exps = exps
        p.exps.flags.writeable = False
        return p

    @staticmethod
    def ZERO(ring):
        return Polynomial.from_canonical(ring, [], np.zeros((0, ring.n_vars), dtype=ring.dtype))

    def select(self, keep):
        return Polynomial.from_canonical(self.ring, [self.coeffs[i] for i in keep],
                                         self.exps[np.array(keep, dtype=np.intp)])

    def __hash__(self):
        # constants compare equal to their coefficient, so they must hash like it
        if self.is_constant():
            return hash(self.lc())
        return hash((tuple(self.coeffs), self.exps.tobytes()))

    @property
    def monomials(self):
        return [Monomial(self.ring, row) for row in self.exps.tolist()]

    def terms(self):
        for coeff,row in zip(self.coeffs, self.exps.tolist()):
            yield coeff, Monomial(self.ring, row)

    def __len__(self):
        return len(self.coeffs)

    length = __len__

    def __bool__(self):
        return not self.is_zero()

    def __str__(self):
        terms = []
        minus_one = -self.ring.coeff_one
        for coeff,monomial in self.terms():
            if all(deg == 0 for deg in monomial.degrees):
                terms.append(f"{coeff}")
            elif coeff == self.ring.coeff_one:
                terms.append(f"{monomial}")
            elif coeff == minus_one:
                terms.append(f"-{monomial}")
            else:
                coeff_str = f"{coeff}"
                if " " in coeff_str:
                    coeff_str = f"({coeff_str})"
                terms.append(f"{coeff_str} {monomial}")

        if len(terms) == 0:
            return "0"

        return " + ".join(terms)

    def __repr__(self):
        return f"Polynomial({repr(self.ring)}, {repr(self.exps.tolist())}, {repr(self.coeffs)})"

    def coeff(self, key):
        """
        Coefficient of a monomial given as a degree tuple, a Monomial or a monomial polynomial, 0 if not present
        """
        if isinstance(key, Polynomial):
            if not key.is_term():
                raise InvalidArgumentError(f"{key} is not a monomial")
            key = key.exps[0]
        elif isinstance(key, Monomial):
            key = key.degrees
        elif isinstance(key, Integral):
            key = (key,)
        key = tuple(key)
        if len(key) != self.ring.n_vars:
            raise InvalidArgumentError("Degrees should match number of variables")
        if any(d < 0 for d in key):
            return self.ring.coeff_zero
        row = pack(key, self.ring.bits)
        hits = np.flatnonzero((self.exps == row).all(axis=1))
        if len(hits) == 0:
            return self.ring.coeff_zero
        return self.coeffs[hits[0]]

    __getitem__ = coeff

    ####################################################################################################################
    #   Predicates and degrees
    ####################################################################################################################

    def is_zero(self):
        return len(self.coeffs) == 0

    def is_one(self):
        return self.is_constant() and self.ring.coeff_ring.is_one(self.coeffs[0])

    def is_constant(self):
        return self.is_zero() or (len(self.coeffs) == 1 and not self.exps.any())

    def is_term(self):
        return len(self.coeffs) == 1

    def is_monomial(self):
        return self.is_term() and self.ring.coeff_ring.is_one(self.coeffs[0])

    def is_gen(self):
        return self.is_monomial() and int(self.exps[0].sum()) == 1 and int(self.exps[0].max()) == 1

    def degree(self, var=None):
        """
        Degree in `var`, or the total degree; -1 for the zero polynomial
        """
        if var is None:
            return self.total_degree()
        i = self.ring.var_index(var)
        if self.is_zero():
            return -1
        return int(self.exps[:, i].max())

    def degrees(self):
        if self.is_zero():
            return (-1,) * self.ring.n_vars
        return tuple(int(d) for d in self.exps.max(axis=0))

    def total_degree(self):
        if self.is_zero():
            return -1
        return int(total_degrees(self.exps, self.ring.bits).max())

    def vars(self):
        if self.is_zero():
            return []
        present = self.exps.any(axis=0)
        return [var for var,p in zip(self.ring.variables(), present) if p]

    ####################################################################################################################
    #   Leading terms
    ####################################################################################################################

    def lc(self):
        if self.is_zero():
            return self.ring.coeff_zero
        return self.coeffs[0]

    def lm(self):
        if self.is_zero():
            return Polynomial.ZERO(self.ring)
        return Polynomial.from_canonical(self.ring, [self.ring.coeff_one], self.exps[:1])

    def lt(self):
        if self.is_zero():
            return Polynomial.ZERO(self.ring)
        return Polynomial.from_canonical(self.ring, self.coeffs[:1], self.exps[:1])

    leading_coeff = lc
    leading_term = lt

    def leading_monomial(self):
        if self.is_zero():
            return self.ring.mon0
        return Monomial(self.ring, self.exps[0].tolist())

    ####################################################################################################################
    #   Arithmetic
    ####################################################################################################################

    def is_coefficient_of(self, other):
        """
        True when `other` lives in a ring whose coefficients come from this polynomial's ring
        """
        return isinstance(other, Polynomial) and other.ring != self.ring and other.ring.coeff_ring == self.ring

    def add(self, other):
        """
        Merge of two descending term sequences, equal monomials have their coefficients added
        """
        cmp = self.ring.order.cmp
        is_zero = self.ring.coeff_ring.is_zero
        a = self.exps.tolist()
        b = other.exps.tolist()
        L1 = len(a)
        L2 = len(b)
        i = 0
        j = 0
        rows = []
        coeffs = []
        while i < L1 and j < L2:
            c = cmp(a[i], b[j])
            if c == 0:
                # term exists in both polynomials
                s = self.coeffs[i] + other.coeffs[j]
                if not is_zero(s):
                    rows.append(a[i])
                    coeffs.append(s)
                i += 1
                j += 1
            elif c > 0:
                rows.append(a[i])
                coeffs.append(self.coeffs[i])
                i += 1
            else:
                rows.append(b[j])
                coeffs.append(other.coeffs[j])
                j += 1
        rows.extend(a[i:])
        coeffs.extend(self.coeffs[i:])
        rows.extend(b[j:])
        coeffs.extend(other.coeffs[j:])
        return self.ring.from_sorted_terms(coeffs, rows)

    def __add__(self, other):
        if self.is_coefficient_of(other):
            return other.ring(self).add(other)
        return self.add(self.ring(other))

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        if self.is_coefficient_of(other):
            return other.ring(self).add(-other)
        return self.add(-self.ring(other))

    def __rsub__(self, other):
        return self.ring(other).add(-self)

    def __neg__(self):
        """
        Returns the additive inverse of this polynomial
        """
        return Polynomial.from_canonical(self.ring, [-coeff for coeff in self.coeffs], self.exps)

    def scale(self, c):
        """
        Multiplies every coefficient by an element of the coefficient ring
        """
        c = self.ring.coeff_ring(c)
        is_zero = self.ring.coeff_ring.is_zero
        coeffs = [coeff * c for coeff in self.coeffs]
        keep = [i for i,coeff in enumerate(coeffs) if not is_zero(coeff)]
        if len(keep) == len(coeffs):
            return Polynomial.from_canonical(self.ring, coeffs, self.exps)
        return Polynomial.from_canonical(self.ring, [coeffs[i] for i in keep],
                                         self.exps[np.array(keep, dtype=np.intp)])

    def mul_term(self, c, degrees):
        """
        Multiplies by the term c * x^degrees; the ordering is compatible with multiplication so no sorting is needed
        """
        degrees = tuple(int(d) for d in degrees)
        if len(degrees) != self.ring.n_vars:
            raise InvalidArgumentError("Degrees should match number of variables")
        exps = add_exponents(self.exps, pack(degrees, self.ring.bits), self.ring.bits)
        self.ring.check_degree(exps)
        return Polynomial.from_canonical(self.ring, self.coeffs, exps).scale(c)

    def mul(self, other):
        if self.is_zero() or other.is_zero():
            return Polynomial.ZERO(self.ring)
        if other.is_term():
            return self.mul_term(other.coeffs[0], other.exps[0])
        if self.is_term():
            return other.mul_term(self.coeffs[0], self.exps[0])

        # all pairwise products, then a single sort and merge
        n = self.ring.n_vars
        exps = add_exponents(self.exps[:, None, :], other.exps[None, :, :], self.ring.bits).reshape(-1, n)
        coeffs = [a * b for a in self.coeffs for b in other.coeffs]
        return Polynomial.from_canonical(self.ring, *self.ring.canonicalise(coeffs, exps))

    def __mul__(self, other):
        if isinstance(other, Monomial):
            other = self.ring(other)
        if not isinstance(other, Polynomial):
            return self.scale(other)
        if other.ring == self.ring.coeff_ring:
            return self.scale(other)
        if self.is_coefficient_of(other):
            return other.scale(self)
        return self.mul(self.ring(other))

    def __rmul__(self, other):
        # Polynomial rings are commutative
        return self.__mul__(other)

    def __pow__(self, power):
        if not isinstance(power, Integral):
            raise TypeError(f"Polynomials can only be raised to integer powers, got {power!r}")
        if power < 0:
            raise InvalidArgumentError("Polynomials can only be raised to nonnegative powers")
        # includes the zero polynomial to the zero power
        if power == 0:
            return self.ring.one()
        if self.is_term():
            return Polynomial(self.ring, [[d * power for d in self.exps[0].tolist()]], [self.coeffs[0] ** power])

        # binary exponentiation
        result = None
        base = self
        while True:
            if power & 1:
                result = base if result is None else result * base
            power >>= 1
            if power == 0:
                return result
            base = base * base

    ####################################################################################################################
    #   Division
    ####################################################################################################################

    def divide(self, divisors):
        """
        Multivariate division with remainder, returns (quotients, remainder)
        """
        divisors = [self.ring(divisor) for divisor in divisors]
        if any(div.is_zero() for div in divisors):
            raise ZeroDivisionError

        R = self.ring.coeff_ring
        lms = [div.leading_monomial() for div in divisors]
        quots = [([], []) for _ in divisors]
        r_coeffs = []
        r_rows = []

        p = self
        while not p.is_zero():
            LM_p = p.leading_monomial()
            LC_p = p.coeffs[0]

            for i,div in enumerate(divisors):
                if not LM_p.divisible_by(lms[i]):
                    continue
                diff = (LM_p / lms[i]).degrees
                ok, q = R.divides(LC_p, div.coeffs[0])
                if not ok:
                    continue
                quots[i][0].append(q)
                quots[i][1].append(diff)
                p = p - div.mul_term(q, diff)
                break
            else:
                # leading term is not divisible by any divisor
                r_coeffs.append(LC_p)
                r_rows.append(LM_p.degrees)
                p = p.select(range(1, len(p)))

        quots = [self.ring.from_sorted_terms(coeffs, rows) for coeffs,rows in quots]
        return quots, self.ring.from_sorted_terms(r_coeffs, r_rows)

    def divmod(self, other):
        quots, rem = self.divide([other])
        return quots[0], rem

    def __floordiv__(self, other):
        return self.divmod(other)[0]

    def __mod__(self, other):
        return self.divmod(other)[1]

    def divexact(self, other):
        return poly_gcd.divexact(self, self.ring(other))

    def __truediv__(self, other):
        if isinstance(other, Polynomial):
            return self.divexact(other)
        return poly_gcd.scale_divexact(self, self.ring.coeff_ring(other))

    def divisible_by(self, other):
        return self.ring.divides(self, self.ring(other))[0]

    divides = divisible_by

    ####################################################################################################################
    #   GCD
    ####################################################################################################################

    def gcd(self, other):
        return poly_gcd.gcd(self, self.ring(other))

    def lcm(self, other):
        return poly_gcd.lcm(self, self.ring(other))

    def content(self):
        return poly_gcd.content(self)

    def primpart(self):
        return poly_gcd.primpart(self)

    def normalize(self):
        return poly_gcd.normalize(self)

    ####################################################################################################################
    #   Equality
    ####################################################################################################################

    def __eq__(self, other):
        if self.is_coefficient_of(other):
            return other == other.ring(self)
        try:
            other = self.ring(other)
        except (ValueError, TypeError):
            return NotImplemented
        return self.coeffs == other.coeffs and np.array_equal(self.exps, other.exps)

    ####################################################################################################################
    #   Deflation
    ####################################################################################################################

    def deflation(self):
        """
        Per variable, the smallest exponent (shift) and the gcd of the exponents minus the shift (deflation factor).
        A factor is 1 when all exponents of that variable are equal.
        """
        n = self.ring.n_vars
        if self.is_zero():
            return (0,) * n, (1,) * n
        shift = self.exps.min(axis=0)
        defl = np.gcd.reduce((self.exps - shift).astype(np.int64), axis=0)
        defl[defl == 0] = 1
        return tuple(int(s) for s in shift), tuple(int(d) for d in defl)

    def deflation_args(self, shift, defl):
        shift = tuple(int(s) for s in shift)
        defl = tuple(int(d) for d in defl)
        if len(shift) != self.ring.n_vars or len(defl) != self.ring.n_vars:
            raise InvalidArgumentError("Deflation parameters should match number of variables")
        check_degrees(shift, self.ring.bits)
        if any(d <= 0 for d in defl):
            raise InvalidArgumentError(f"Deflation factors must be positive, got {defl}")
        return shift, defl

    def deflate(self, shift=None, defl=None):
        """
        Maps every exponent e to (e - shift) / defl.

        Without arguments, the polynomial's own deflation is used and (deflated, shift, defl) is returned.
        """
        if shift is None and defl is None:
            shift, defl = self.deflation()
            return self.deflate(shift, defl), shift, defl

        shift, defl = self.deflation_args(shift, defl)
        if self.is_zero():
            return self

        e = self.exps.astype(np.int64) - np.array(shift, dtype=np.int64)
        if (e < 0).any():
            raise InvalidArgumentError(f"Shift {shift} exceeds the exponents of the polynomial")
        defl = np.array(defl, dtype=np.int64)
        if (e % defl).any():
            raise InexactDivisionError(f"Deflation factors {tuple(defl.tolist())} do not divide the exponents")
        exps = (e // defl).astype(self.ring.dtype)
        return Polynomial.from_canonical(self.ring, *self.ring.canonicalise(self.coeffs, exps))

    def inflate(self, shift, defl):
        """
        Maps every exponent e to e * defl + shift, the inverse of deflate
        """
        shift, defl = self.deflation_args(shift, defl)
        if self.is_zero():
            return self

        rows = self.exps.astype(object) * np.array(defl, dtype=object) + np.array(shift, dtype=object)
        exps = pack_rows(rows.tolist(), self.ring.n_vars, self.ring.bits)
        return Polynomial.from_canonical(self.ring, *self.ring.canonicalise(self.coeffs, exps))

    ####################################################################################################################
    #   Evaluation
    ####################################################################################################################

    def substitute(self, values, coeff_map=None):
        """
        sum over terms of coeff_map(c) * values[0]^e0 * values[1]^e1 * ...

        Products are formed left to right in variable order with the coefficient on the left, so values only need to
        commute with themselves. Variables with exponent 0 are skipped, no multiplicative identity is needed.
        """
        if self.is_zero():
            return coeff_map(self.ring.coeff_zero) if coeff_map is not None else self.ring.coeff_zero

        total = None
        for c,row in zip(self.coeffs, self.exps.tolist()):
            if coeff_map is not None:
                c = coeff_map(c)
            prod = None
            for v,e in zip(values, row):
                if e == 0:
                    continue
                f = v ** e
                prod = f if prod is None else prod * f
            t = c if prod is None else c * prod
            total = t if total is None else total + t
        return total

    def evaluate(self, values, coeff_map=None):
        values = list(values)
        if len(values) != self.ring.n_vars:
            raise InvalidArgumentError(f"Expected {self.ring.n_vars} values, got {len(values)}")
        return self.substitute(values, coeff_map)

    def __call__(self, *x):
        if len(x) == 1 and isiterable(x[0]):
            x = x[0]
        return self.evaluate(x)

    def evaluate_at(self, variables, values):
        """
        Substitutes coefficient ring values for some of the variables, the result stays in this ring
        """
        if not isiterable(variables):
            variables, values = [variables], [values]
        if len(variables) != len(values):
            raise InvalidArgumentError("Number of variables and values must match")
        idx = [self.ring.var_index(var) for var in variables]
        if len(set(idx)) != len(idx):
            raise InvalidArgumentError("Variables must be distinct")
        values = [self.ring.coeff_ring(v) for v in values]

        coeffs = []
        for c,row in zip(self.coeffs, self.exps.tolist()):
            for i,v in zip(idx, values):
                if row[i] != 0:
                    c = c * v ** row[i]
            coeffs.append(c)
        exps = self.exps.copy()
        exps[:, idx] = 0
        return Polynomial.from_canonical(self.ring, *self.ring.canonicalise(coeffs, exps))

    def eval_some(self, eval_map):
        return self.evaluate_at(list(eval_map.keys()), list(eval_map.values()))

    def subst(self, subst_map, coeff_map=None):
        """
        Substitute variables for values in subst_map, keyed by variable name
        """
        unknown = set(subst_map) - set(self.ring.var_names)
        if unknown:
            raise InvalidArgumentError(f"No variable(s) named {sorted(unknown)} in {self.ring}")
        values = [subst_map.get(name, var) for name,var in zip(self.ring.var_names, self.ring.variables())]
        return self.substitute(values, coeff_map)

    ####################################################################################################################
    #   Change of ring
    ####################################################################################################################

    def change_base_ring(self, coeff_ring : CoefficientRing, coeff_map=None):
        ring = self.ring.to_coeff_ring(coeff_ring)
        coeffs = [coeff_ring(coeff_map(c) if coeff_map is not None else c) for c in self.coeffs]
        keep = [i for i,c in enumerate(coeffs) if not coeff_ring.is_zero(c)]
        return Polynomial.from_canonical(ring, [coeffs[i] for i in keep], self.exps[np.array(keep, dtype=np.intp)])

    def to_univariate(self, var):
        """
        Turns this polynomial into a univariate polynomial in `var`, the coefficients are promoted to elements of a
        polynomial ring containing the remaining variables (or the coefficient ring if there are none).
        """
        i = self.ring.var_index(var)
        rest = [vn for k,vn in enumerate(self.ring.var_names) if k != i]
        if rest:
            coeff_ring, _ = polynomial_ring(self.ring.coeff_ring, rest, self.ring.order, self.ring.bits)
        else:
            coeff_ring = self.ring.coeff_ring
        uni_ring, _ = polynomial_ring(coeff_ring, [self.ring.var_names[i]], self.ring.order, self.ring.bits)

        groups = {}
        others = np.delete(self.exps, i, axis=1).tolist()
        for coeff,deg,row in zip(self.coeffs, self.exps[:, i].tolist(), others):
            coeffs, rows = groups.setdefault(deg, ([], []))
            coeffs.append(coeff)
            rows.append(row)

        degs = sorted(groups, reverse=True)
        if rest:
            coeffs = [Polynomial(coeff_ring, groups[d][1], groups[d][0]) for d in degs]
        else:
            coeffs = [groups[d][0][0] for d in degs]
        return uni_ring.from_sorted_terms(coeffs, [(d,) for d in degs])

    def derivative(self, var):
        i = self.ring.var_index(var)
        col = self.exps[:, i]
        keep = np.flatnonzero(col)
        exps = self.exps[keep]
        exps[:, i] -= 1
        coeffs = [self.coeffs[k] * int(col[k]) for k in keep]
        # lowering one exponent of every remaining term keeps them sorted
        nonzero = [k for k,c in enumerate(coeffs) if not self.ring.coeff_ring.is_zero(c)]
        return Polynomial.from_canonical(self.ring, [coeffs[k] for k in nonzero],
                                         exps[np.array(nonzero, dtype=np.intp)])

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

from libmpoly.basic_types import GF, QQ, ZZ, Mod, Rational
from libmpoly.errors import ExponentOverflowError

def rand_poly(ring, n_terms=4, max_deg=3):
    degrees = [tuple(random.randint(0, max_deg) for _ in range(ring.n_vars)) for _ in range(n_terms)]
    return Polynomial(ring, degrees, [ring.coeff_ring.rand_elem() for _ in degrees])

class Mat2:
    """
    2x2 integer matrices, a noncommutative evaluation target
    """

    def __init__(self, a, b, c, d):
        self.m = (a, b, c, d)

    def __mul__(self, other):
        if isinstance(other, Mat2):
            a, b, c, d = self.m
            e, f, g, h = other.m
            return Mat2(a * e + b * g, a * f + b * h, c * e + d * g, c * f + d * h)
        return Mat2(*(x * other for x in self.m))

    def __rmul__(self, other):
        return Mat2(*(other * x for x in self.m))

    def __add__(self, other):
        if not isinstance(other, Mat2):
            other = Mat2(other, 0, 0, other)
        return Mat2(*(x + y for x,y in zip(self.m, other.m)))

    def __radd__(self, other):
        return self.__add__(other)

    def __pow__(self, e):
        r = Mat2(1, 0, 0, 1)
        for _ in range(e):
            r = r * self
        return r

    def __eq__(self, other):
        return isinstance(other, Mat2) and self.m == other.m

    def __repr__(self):
        return f"Mat2{self.m}"

class TestPolynomial(unittest.TestCase):

    def assertCanonical(self, p):
        rows = p.exps.tolist()
        for i in range(len(rows) - 1):
            self.assertEqual(p.ring.order.cmp(rows[i], rows[i + 1]), 1)
        for c in p.coeffs:
            self.assertFalse(p.ring.coeff_ring.is_zero(c))
        self.assertEqual(len(p.coeffs), p.exps.shape[0])

    def test_construction(self):
        R = PolynomialRing(ZZ, ['x', 'y'], 'lex')
        p = Polynomial(R, [(0, 1), (1, 0), (0, 1), (2, 2)], [1, 2, -1, 0])
        self.assertEqual(len(p), 1)
        self.assertEqual(p.coeffs, [2])
        self.assertEqual(p.exps.tolist(), [[1, 0]])
        self.assertTrue(Polynomial(R, [(1, 1)], [0]).is_zero())
        self.assertTrue(Polynomial.ZERO(R).is_zero())
        with self.assertRaises(InvalidArgumentError):
            Polynomial(R, [(1, 1)], [1, 2])
        with self.assertRaises(InvalidArgumentError):
            Polynomial(R, [(1, 1, 1)], [1])
        with self.assertRaises(InvalidArgumentError):
            PolynomialRing(ZZ, ['x', 'x'])

    def test_identities(self):
        for K in (ZZ, QQ, GF(509)):
            R = PolynomialRing(K, ['x', 'y', 'z'])
            zero = R.zero()
            one = R.one()
            for _ in range(20):
                p = rand_poly(R)
                self.assertEqual(p + zero, p)
                self.assertEqual(p - p, zero)
                self.assertTrue((p - p).is_zero())
                self.assertEqual(p * one, p)
                self.assertEqual(p * zero, zero)
                self.assertEqual(p + 0, p)
                self.assertEqual(p * 1, p)

    def test_ring_laws(self):
        for order in ('lex', 'deglex', 'degrevlex'):
            R = PolynomialRing(ZZ, ['x', 'y'], order)
            for _ in range(20):
                p, q, r = rand_poly(R), rand_poly(R), rand_poly(R)
                self.assertEqual(p + q, q + p)
                self.assertEqual(p * q, q * p)
                self.assertEqual((p + q) + r, p + (q + r))
                self.assertEqual((p * q) * r, p * (q * r))
                self.assertEqual(p * (q + r), p * q + p * r)
                for s in (p + q, p - q, p * q, -p, p * 3, p ** 2):
                    self.assertCanonical(s)

    def test_gf_cancellation(self):
        R = PolynomialRing(GF(7), ['x', 'y'])
        x, y = R.variables()
        p = 3 * x + y
        self.assertTrue((p * 7).is_zero())
        self.assertEqual((x + y) ** 7, x ** 7 + y ** 7)
        self.assertCanonical((x + y) ** 7)

    def test_power(self):
        R = PolynomialRing(ZZ, ['x', 'y'], 'deglex')
        x, y = R.variables()
        self.assertEqual((x + y) ** 3, x ** 3 + 3 * x ** 2 * y + 3 * x * y ** 2 + y ** 3)
        self.assertEqual((2 * x * y) ** 4, 16 * x ** 4 * y ** 4)
        self.assertEqual((x + 1) ** 0, R.one())
        # zero to the zero power is the multiplicative identity
        self.assertEqual(R.zero() ** 0, R.one())
        self.assertEqual(R.zero() ** 3, R.zero())
        with self.assertRaises(InvalidArgumentError):
            x ** -1

    def test_leading_terms(self):
        R = PolynomialRing(ZZ, ['x', 'y'], 'deglex')
        x, y = R.variables()
        f = 2 * x * y + 3 * y ** 3
        self.assertEqual(f.lt(), 3 * y ** 3)
        self.assertEqual(f.lm(), y ** 3)
        self.assertEqual(f.lc(), 3)
        self.assertEqual(f.leading_monomial().degrees, (0, 3))
        zero = R.zero()
        self.assertEqual(zero.lc(), 0)
        self.assertTrue(zero.lm().is_zero())
        self.assertTrue(zero.lt().is_zero())
        for _ in range(20):
            p = rand_poly(R)
            if not p.is_zero():
                self.assertEqual(p.lt(), p.lc() * p.lm())

    def test_orderings(self):
        for order, expected in (('lex', [(2, 0, 0), (1, 0, 2), (0, 2, 1)]),
                                ('deglex', [(1, 0, 2), (0, 2, 1), (2, 0, 0)]),
                                ('degrevlex', [(0, 2, 1), (1, 0, 2), (2, 0, 0)])):
            R = PolynomialRing(QQ, ['x', 'y', 'z'], order)
            x, y, z = R.variables()
            p = x ** 2 + x * z ** 2 + y ** 2 * z
            self.assertEqual([m.degrees for m in p.monomials], expected)

    def test_overflow(self):
        R = PolynomialRing(ZZ, ['x', 'y'], 'lex', bits=8)
        x, y = R.variables()
        p = x ** 100
        self.assertEqual(p.degree(x), 100)
        with self.assertRaises(ExponentOverflowError):
            p * x ** 30
        with self.assertRaises(ExponentOverflowError):
            (x + y) * (x ** 127 + y)
        with self.assertRaises(ExponentOverflowError):
            x ** 128
        S = PolynomialRing(ZZ, ['x', 'y'], 'deglex', bits=8)
        x, y = S.variables()
        with self.assertRaises(ExponentOverflowError):
            x ** 100 * y ** 30
        with self.assertRaises(ExponentOverflowError):
            (x ** 100 + 1) * (y ** 30 + 1)

    def test_degrees(self):
        R = PolynomialRing(ZZ, ['x', 'y', 'z'])
        x, y, z = R.variables()
        p = x ** 3 * y + y ** 2 + 5
        self.assertEqual(p.degree(x), 3)
        self.assertEqual(p.degree('y'), 2)
        self.assertEqual(p.degree(2), 0)
        self.assertEqual(p.degrees(), (3, 2, 0))
        self.assertEqual(p.total_degree(), 4)
        self.assertEqual(p.vars(), [x, y])
        self.assertEqual(R.zero().degree(x), -1)
        self.assertEqual(p[(3, 1, 0)], 1)
        self.assertEqual(p[(0, 0, 0)], 5)
        self.assertEqual(p[(1, 1, 1)], 0)
        self.assertEqual(p.coeff(y ** 2), 1)
        with self.assertRaises(InvalidArgumentError):
            p.degree(3)

    def test_derivative(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        p = x ** 3 * y + 2 * x * y ** 2 + 7
        self.assertEqual(p.derivative(x), 3 * x ** 2 * y + 2 * y ** 2)
        self.assertEqual(p.derivative(y), x ** 3 + 4 * x * y)
        F = PolynomialRing(GF(3), ['x'])
        (t,) = F.variables()
        self.assertEqual((t ** 3 + t).derivative(t), F.one())

    def test_deflation(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        f = x ** 7 * y ** 8 + 3 * x ** 4 * y ** 8 - x ** 4 * y ** 2 + 5 * x * y ** 5 - x * y ** 2
        shift, defl = f.deflation()
        self.assertEqual(shift, (1, 2))
        self.assertEqual(defl, (3, 3))
        g = f.deflate(shift, defl)
        self.assertEqual(g, x ** 2 * y ** 2 + 3 * x * y ** 2 - x + 5 * y - 1)
        self.assertEqual(g.inflate(shift, defl), f)
        self.assertEqual(f.deflate(), (g, shift, defl))
        self.assertEqual((x + 1).deflation(), ((0, 0), (1, 1)))
        self.assertEqual(R.zero().deflation(), ((0, 0), (1, 1)))
        with self.assertRaises(InexactDivisionError):
            f.deflate(shift, (2, 3))
        with self.assertRaises(InvalidArgumentError):
            f.deflate((2, 2), defl)
        with self.assertRaises(InvalidArgumentError):
            f.deflate(shift, (0, 3))

    def test_deflation_round_trip(self):
        for order in ('lex', 'deglex', 'degrevlex'):
            R = PolynomialRing(QQ, ['x', 'y', 'z'], order)
            for _ in range(20):
                f = rand_poly(R, max_deg=9)
                shift, defl = f.deflation()
                g = f.deflate(shift, defl)
                self.assertCanonical(g)
                self.assertEqual(g.inflate(shift, defl), f)

    def test_evaluate(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        f = 2 * x ** 2 * y ** 2 + 3 * x + y + 1
        self.assertEqual(f.evaluate([1, 2]), 14)
        self.assertEqual(f(1, 2), 14)
        self.assertEqual(f((1, 2)), 14)
        self.assertEqual(R.zero()(3, 4), 0)
        # values outside the coefficient ring
        self.assertEqual(f(Rational(1, 2), 0), Rational(5, 2))
        self.assertEqual(f(Mod(1, 5), Mod(2, 5)), Mod(4, 5))
        with self.assertRaises(InvalidArgumentError):
            f.evaluate([1])

    def test_evaluate_coeff_map(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        f = 6 * x * y + 4
        F = GF(5)
        self.assertEqual(f.evaluate([F(2), F(3)], coeff_map=F), F(0))
        self.assertEqual(f.evaluate([1, 1], coeff_map=lambda c: c * 10), 100)

    def test_evaluate_noncommutative(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        A = Mat2(1, 1, 0, 1)
        B = Mat2(1, 0, 1, 1)
        self.assertNotEqual(A * B, B * A)
        # variables are multiplied in index order
        self.assertEqual((x * y)(A, B), A * B)
        self.assertEqual((y * x)(A, B), A * B)
        f = 2 * x ** 2 * y + 3
        self.assertEqual(f(A, B), 2 * (A * A * B) + Mat2(3, 0, 0, 3))

    def test_evaluate_at(self):
        R = PolynomialRing(ZZ, ['x', 'y', 'z'])
        x, y, z = R.variables()
        f = x * y * z + x ** 2 + y
        g = f.evaluate_at([x, 'z'], [2, 3])
        self.assertEqual(g, 6 * y + 4 + y)
        self.assertIsInstance(g, Polynomial)
        self.assertCanonical(g)
        h = f.evaluate_at([0, 1, 2], [1, 1, 1])
        self.assertIsInstance(h, Polynomial)
        self.assertEqual(h, 3)
        self.assertEqual(f.eval_some({1 : 0}), x ** 2)
        with self.assertRaises(InvalidArgumentError):
            f.evaluate_at([0, 3], [1, 1])
        with self.assertRaises(InvalidArgumentError):
            f.evaluate_at([0, 1], [1])
        with self.assertRaises(InvalidArgumentError):
            f.evaluate_at([0, 0], [1, 2])

    def test_subst(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        S, (t,) = polynomial_ring(ZZ, ['t'])
        f = x ** 2 + y
        self.assertEqual(f.subst({'x' : t + 1, 'y' : t}), t ** 2 + 3 * t + 1)
        self.assertEqual(f.subst({'x' : y}), y ** 2 + y)
        with self.assertRaises(InvalidArgumentError):
            f.subst({'w' : 1})

    def test_change_base_ring(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        f = 7 * x ** 2 + 3 * y + 1
        g = f.change_base_ring(GF(7))
        self.assertEqual(g.ring, R.to_coeff_ring(GF(7)))
        self.assertEqual(g, g.ring(3 * y + 1))
        h = f.change_base_ring(QQ, lambda c: Rational(c, 2))
        self.assertEqual(h.lc(), Rational(7, 2))

    def test_univariate(self):
        R = PolynomialRing(ZZ, ['x', 'y', 'z'], 'deglex')
        x, y, z = R.variables()
        f = x ** 2 * y + 3 * x * z ** 2 - y + 4
        u = f.to_univariate(x)
        self.assertEqual(u.ring.var_names, ['x'])
        self.assertEqual(u.ring.coeff_ring.var_names, ['y', 'z'])
        C = u.ring.coeff_ring
        cy, cz = C.variables()
        self.assertEqual(u.degree(0), 2)
        self.assertEqual(u.lc(), cy)
        self.assertEqual(u.coeff(0), 4 - cy)
        self.assertEqual(R.from_univariate(u, x), f)
        for _ in range(10):
            p = rand_poly(R)
            for var in range(3):
                self.assertEqual(R.from_univariate(p.to_univariate(var), var), p)

    def test_coercion(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        S = PolynomialRing(QQ, ['y', 'x', 'z'])
        p = S(x ** 2 + 2 * y)
        self.assertEqual(p, S.variables()[1] ** 2 + 2 * S.variables()[0])
        with self.assertRaises(InvalidArgumentError):
            R(S.variables()[2])
        # polynomials over a polynomial ring
        T = PolynomialRing(R, ['t'])
        (t,) = T.variables()
        q = x * t + y
        self.assertEqual(q.lc(), x)
        self.assertEqual(q - y, x * t)
        self.assertEqual(y + x * t, q)
        self.assertEqual((x * t) * (y * t), (x * y) * t ** 2)

    def test_nested_arithmetic(self):
        R, (y,) = polynomial_ring(ZZ, ['y'])
        T, (x,) = polynomial_ring(R, ['x'])
        # the left operand is a coefficient of the right operand's ring
        self.assertEqual(y + x, x + y)
        self.assertIs((y + x).ring, T)
        self.assertEqual(y - x, -(x - y))
        self.assertEqual(y * x, x * y)
        self.assertIs((y * x).ring, T)
        self.assertEqual((y * x).lc(), y)
        self.assertEqual((y + 1) * (x + y), x * (y + 1) + y ** 2 + y)
        self.assertEqual(y, T(y))
        self.assertEqual(T(y), y)
        self.assertNotEqual(y, x)

    def test_hash(self):
        R, (x, y) = polynomial_ring(ZZ, ['x', 'y'])
        self.assertEqual(R(3), 3)
        self.assertEqual(hash(R(3)), hash(3))
        self.assertEqual(hash(R.zero()), hash(0))
        self.assertIn(3, {R(3)})
        self.assertEqual({x * y + 1 : 'a'}[y * x + 1], 'a')
        Q, _ = polynomial_ring(QQ, ['x'])
        self.assertEqual(hash(Q(Rational(6, 2))), hash(3))
        S, (s,) = polynomial_ring(R, ['s'])
        self.assertEqual(hash(S(x + 1)), hash(x + 1))

    def test_divide(self):
        R = PolynomialRing(QQ, ['x', 'y'], 'lex')
        x, y = R.variables()
        f = x ** 2 * y + x * y ** 2 + y ** 2
        (q1, q2), r = f.divide([x * y - 1, y ** 2 - 1])
        self.assertEqual(q1, x + y)
        self.assertEqual(q2, R.one())
        self.assertEqual(r, x + y + 1)
        self.assertEqual(q1 * (x * y - 1) + q2 * (y ** 2 - 1) + r, f)
        self.assertEqual(f // (x + 1), f.divmod(x + 1)[0])
        self.assertEqual((x ** 2 - 1) % (x + 1), 0)
        with self.assertRaises(ZeroDivisionError):
            f.divide([R.zero()])

    def test_exact_division(self):
        R = PolynomialRing(ZZ, ['x', 'y'])
        x, y = R.variables()
        a = (x + y) * (2 * x - y)
        self.assertEqual(a / (x + y), 2 * x - y)
        self.assertEqual((4 * x + 6) / 2, 2 * x + 3)
        self.assertTrue(a.divisible_by(2 * x - y))
        self.assertFalse(a.divisible_by(x))
        with self.assertRaises(InexactDivisionError):
            a / (x + 2)
        with self.assertRaises(InexactDivisionError):
            (4 * x + 3) / 2

    def test_str(self):
        R = PolynomialRing(ZZ, ['x', 'y'], 'lex')
        x, y = R.variables()
        self.assertEqual(str(2 * x ** 2 * y - y + 1), "2 x^{2} y + -y + 1")
        self.assertEqual(str(R.zero()), "0")

class TestMonomial(unittest.TestCase):

    def test_arithmetic(self):
        R, (x, y) = polynomial_ring(ZZ, ['x', 'y'], 'lex')
        m = Monomial(R, (2, 1))
        self.assertEqual(m * Monomial(R, (0, 3)), Monomial(R, (2, 4)))
        self.assertEqual(m * 3, 3 * x ** 2 * y)
        self.assertEqual(m / Monomial(R, (1, 1)), Monomial(R, (1, 0)))
        with self.assertRaises(InexactDivisionError):
            m / Monomial(R, (3, 0))
        self.assertEqual(m.degree(), 3)
        self.assertEqual(m((2, 3)), 12)
        self.assertEqual(R.mon0((5, 7)), 1)
        self.assertEqual(str(m), "x^{2} y")

    def test_divisibility(self):
        R, _ = polynomial_ring(ZZ, ['x', 'y'], 'lex')
        a = Monomial(R, (2, 1))
        b = Monomial(R, (1, 3))
        self.assertTrue(a.divisible_by(Monomial(R, (1, 1))))
        self.assertFalse(a.divisible_by(b))
        self.assertEqual(a.gcd(b), Monomial(R, (1, 1)))
        self.assertEqual(a.lcm(b), Monomial(R, (2, 3)))

    def test_ordering(self):
        R, _ = polynomial_ring(ZZ, ['x', 'y'], 'lex')
        S, _ = polynomial_ring(ZZ, ['x', 'y'], 'deglex')
        self.assertTrue(Monomial(R, (1, 0)) > Monomial(R, (0, 3)))
        self.assertTrue(Monomial(S, (1, 0)) < Monomial(S, (0, 3)))
        self.assertFalse(Monomial(S, (1, 0)) > Monomial(S, (1, 0)))

class TestPolynomialRing(unittest.TestCase):

    def test_generators(self):
        R = PolynomialRing(ZZ, ['x', 'y', 'z'], 'lex')
        gens = R.generators
        self.assertEqual(len(gens), 3)
        self.assertIs(R.variables(), gens)
        self.assertIs(R.gens(), gens)
        for i,g in enumerate(gens):
            self.assertTrue(g.is_gen())
            self.assertEqual(R.var_index(g), i)
        self.assertEqual(PolynomialRing(ZZ, []).variables(), ())

    def test_equality(self):
        self.assertEqual(PolynomialRing(ZZ, ['x', 'y']), PolynomialRing(ZZ, ['x', 'y']))
        self.assertNotEqual(PolynomialRing(ZZ, ['x', 'y']), PolynomialRing(ZZ, ['y', 'x']))
        self.assertNotEqual(PolynomialRing(ZZ, ['x'], 'lex'), PolynomialRing(ZZ, ['x'], 'deglex'))
        self.assertNotEqual(PolynomialRing(ZZ, ['x']), PolynomialRing(QQ, ['x']))
        self.assertNotEqual(PolynomialRing(ZZ, ['x'], bits=32), PolynomialRing(ZZ, ['x']))

    def test_cache(self):
        R1, (x1, y1) = polynomial_ring(GF(11), ['x', 'y'], 'deglex')
        R2, (x2, y2) = polynomial_ring(GF(11), ['x', 'y'], 'deglex')
        self.assertIs(R1, R2)
        R3, _ = polynomial_ring(GF(11), ['x', 'y'], 'deglex', cached=False)
        self.assertIsNot(R1, R3)
        self.assertEqual(R1, R3)
        self.assertEqual(x1 * y1, x2 * y2)

    def test_cache_threads(self):
        results = []

        def worker():
            results.append(polynomial_ring(ZZ, ['u', 'v', 'w'], 'lex')[0])

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertTrue(all(r is results[0] for r in results))

    def test_var_index(self):
        R, (x, y) = polynomial_ring(ZZ, ['x', 'y'])
        self.assertEqual(R.var_index(y), 1)
        self.assertEqual(R.var_index('x'), 0)
        with self.assertRaises(InvalidArgumentError):
            R.var_index(x * y)
        with self.assertRaises(InvalidArgumentError):
            R.var_index(-1)
