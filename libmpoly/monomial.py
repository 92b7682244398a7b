#!/usr/bin/env python3
#
#   Packed exponent vectors and monomial orderings
#
#   An exponent vector of length n is stored as one row of n unsigned cells. The top bit of every cell is a guard: it
#   is never set in a valid exponent, so the sum of two valid cells cannot wrap and a set guard bit after an addition
#   signals overflow.
#

import numpy as np

from libmpoly.errors import ExponentOverflowError, InexactDivisionError, InvalidArgumentError

CELL_DTYPES = {
    8  : np.uint8,
    16 : np.uint16,
    32 : np.uint32,
    64 : np.uint64,
}

def cell_dtype(bits : int):
    if bits not in CELL_DTYPES:
        raise InvalidArgumentError(f"Unsupported exponent cell width {bits}, expected one of {tuple(CELL_DTYPES)}")
    return CELL_DTYPES[bits]

def guard_bit(bits : int) -> int:
    return 1 << (bits - 1)

########################################################################################################################
#   Codec
########################################################################################################################

def check_degrees(degrees, bits : int = 64):
    guard = guard_bit(bits)
    for d in degrees:
        if d < 0:
            raise InvalidArgumentError(f"Degrees should be nonnegative, got {tuple(degrees)}")
        if d >= guard:
            raise ExponentOverflowError(f"Exponent {d} does not fit in a {bits}-bit cell")

def pack(degrees, bits : int = 64):
    """
    Packs a single exponent vector into a row of cells
    """
    degrees = tuple(int(d) for d in degrees)
    check_degrees(degrees, bits)
    return np.array(degrees, dtype=cell_dtype(bits))

def pack_rows(rows, n_vars : int, bits : int = 64):
    """
    Packs a sequence of exponent vectors into a (len(rows), n_vars) matrix
    """
    rows = [tuple(int(d) for d in row) for row in rows]
    for row in rows:
        if len(row) != n_vars:
            raise InvalidArgumentError("Degrees should match number of variables")
        check_degrees(row, bits)
    return np.array(rows, dtype=cell_dtype(bits)).reshape(len(rows), n_vars)

def unpack(row):
    return tuple(int(d) for d in row)

def check_guard(exps, bits : int = 64):
    if exps.size != 0 and (exps & exps.dtype.type(guard_bit(bits))).any():
        raise ExponentOverflowError(f"Exponent overflow in {bits}-bit cells")

def add_exponents(a, b, bits : int = 64):
    """
    Coordinatewise sum of packed exponents, broadcasting like numpy addition
    """
    s = a + b
    check_guard(s, bits)
    return s

def total_degrees(exps, bits : int = 64):
    """
    Total degree of every row of a packed exponent matrix

    Columns are accumulated one at a time and the guard is checked after each one, so the running sum never wraps.
    """
    deg = np.zeros(exps.shape[0], dtype=exps.dtype)
    for j in range(exps.shape[1]):
        deg = deg + exps[:, j]
        check_guard(deg, bits)
    return deg

def total_degree(degrees, bits : int = 64) -> int:
    d = sum(degrees)
    if d >= guard_bit(bits):
        raise ExponentOverflowError(f"Total degree {d} does not fit in a {bits}-bit cell")
    return d

########################################################################################################################
#   Monomial Orderings
########################################################################################################################

class MonomialOrder:
    """
    A monomial ordering: `cmp` compares two unpacked exponent vectors, `argsort_desc` sorts a packed matrix.
    """
    name = None
    graded = False

    def cmp(self, m1, m2) -> int:
        raise NotImplementedError()

    def sort_keys(self, exps, bits):
        """
        Keys for np.lexsort (last key is the primary one) giving descending order
        """
        raise NotImplementedError()

    def argsort_desc(self, exps, bits : int = 64):
        if exps.shape[0] == 0 or exps.shape[1] == 0:
            return np.arange(exps.shape[0])
        return np.lexsort(self.sort_keys(exps, bits))

    def __eq__(self, other):
        return isinstance(other, MonomialOrder) and self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"MonomialOrder({self.name!r})"

    def __str__(self):
        return self.name

def monomial_cmp_lex(m1, m2):
    for m1d, m2d in zip(m1, m2):
        if m1d > m2d:
            return 1
        if m2d > m1d:
            return -1
    return 0

def monomial_cmp_grlex(m1, m2):
    # first compare total degree
    m1d = sum(m1)
    m2d = sum(m2)
    if m1d > m2d:
        return 1
    if m2d > m1d:
        return -1
    # break ties with lex order
    return monomial_cmp_lex(m1, m2)

def monomial_cmp_grevlex(m1, m2):
    # first compare total degree
    m1d = sum(m1)
    m2d = sum(m2)
    if m1d > m2d:
        return 1
    if m2d > m1d:
        return -1

    # break ties with reverse lex order
    for m1d, m2d in zip(reversed(m1), reversed(m2)):
        if m1d < m2d:
            return 1
        if m2d < m1d:
            return -1
    return 0

class LexOrder(MonomialOrder):
    name = "lex"

    def cmp(self, m1, m2):
        return monomial_cmp_lex(m1, m2)

    def sort_keys(self, exps, bits):
        # ~e reverses the order of unsigned cells
        return [~exps[:, j] for j in reversed(range(exps.shape[1]))]

class DegLexOrder(MonomialOrder):
    name = "deglex"
    graded = True

    def cmp(self, m1, m2):
        return monomial_cmp_grlex(m1, m2)

    def sort_keys(self, exps, bits):
        deg = total_degrees(exps, bits)
        return [~exps[:, j] for j in reversed(range(exps.shape[1]))] + [~deg]

class DegRevLexOrder(MonomialOrder):
    name = "degrevlex"
    graded = True

    def cmp(self, m1, m2):
        return monomial_cmp_grevlex(m1, m2)

    def sort_keys(self, exps, bits):
        deg = total_degrees(exps, bits)
        # within a degree, the smaller exponent in the last variable comes first
        return [exps[:, j] for j in range(exps.shape[1])] + [~deg]

MonomialOrderLex = LexOrder()
MonomialOrderGrLex = MonomialOrderDegLex = DegLexOrder()
MonomialOrderGRevLex = MonomialOrderDegRevLex = DegRevLexOrder()

MONOMIAL_ORDERS = {
    "lex"       : MonomialOrderLex,
    "deglex"    : MonomialOrderDegLex,
    "grlex"     : MonomialOrderDegLex,
    "degrevlex" : MonomialOrderDegRevLex,
    "grevlex"   : MonomialOrderDegRevLex,
}

def monomial_order(order):
    if isinstance(order, MonomialOrder):
        return order
    if isinstance(order, str) and order.lower() in MONOMIAL_ORDERS:
        return MONOMIAL_ORDERS[order.lower()]
    raise InvalidArgumentError(f"Unknown monomial ordering {order!r}, expected one of {tuple(MONOMIAL_ORDERS)}")

########################################################################################################################
#   Monomial
########################################################################################################################

class Monomial:
    """
    Exponent vector bound to a polynomial ring, compared through the ring's ordering
    """

    def __init__(self, ring, degrees : tuple):
        degrees = tuple(int(d) for d in degrees)
        if ring.n_vars != len(degrees):
            raise InvalidArgumentError("Degrees should match number of variables")
        check_degrees(degrees, ring.bits)
        self.degrees = degrees
        self.ring = ring

    def __hash__(self):
        return hash(self.degrees)

    def __call__(self, x : tuple):
        if len(x) != len(self.degrees):
            raise InvalidArgumentError(f"Expected {len(self.degrees)} values, got {len(x)}")
        r = None
        for xi,d in zip(x,self.degrees):
            if d == 0:
                continue
            r = xi ** d if r is None else r * xi ** d
        return 1 if r is None else r

    def __mul__(self, other):
        if not isinstance(other, Monomial):
            return self.ring(self) * other
        if self.ring != other.ring:
            raise InvalidArgumentError("Polynomial rings should match")
        return Monomial(self.ring, add_exponents(pack(self.degrees, self.ring.bits),
                                                 pack(other.degrees, self.ring.bits), self.ring.bits))

    def __truediv__(self, other):
        x = [a - b for a,b in zip(self.degrees, other.degrees)]
        if all(power >= 0 for power in x):
            return Monomial(self.ring, x)
        raise InexactDivisionError("Monomials with negative exponents are not members of the ring")

    def __repr__(self):
        return f"Monomial({repr(self.ring)}, {repr(self.degrees)})"

    def __str__(self):
        if all(deg == 0 for deg in self.degrees):
            return "1"
        return " ".join([f"{name}^{{{degree}}}" if degree != 1 else f"{name}" \
            for name,degree in zip(self.ring.var_names, self.degrees) if degree != 0])

    def degree(self):
        return total_degree(self.degrees, self.ring.bits)

    def __eq__(self, other):
        if not isinstance(other, Monomial):
            return NotImplemented
        return self.degrees == other.degrees

    def __lt__(self, other):
        return self.ring.order.cmp(self.degrees, other.degrees) < 0

    def __gt__(self, other):
        return self.ring.order.cmp(self.degrees, other.degrees) > 0

    def divisible_by(self, other):
        return all(a >= b for a,b in zip(self.degrees, other.degrees))

    def gcd(self, other):
        return Monomial(self.ring, (min(i, j) for i,j in zip(self.degrees, other.degrees)))

    def lcm(self, other):
        return Monomial(self.ring, (max(i, j) for i,j in zip(self.degrees, other.degrees)))

########################################################################################################################
#   Unit Tests
########################################################################################################################

import itertools
import random
import unittest

class TestCodec(unittest.TestCase):

    def test_pack_unpack(self):
        for bits in CELL_DTYPES:
            degrees = (0, 1, guard_bit(bits) - 1)
            self.assertEqual(unpack(pack(degrees, bits)), degrees)

    def test_pack_rejects(self):
        with self.assertRaises(ExponentOverflowError):
            pack((0, 128), 8)
        with self.assertRaises(InvalidArgumentError):
            pack((1, -1))
        with self.assertRaises(InvalidArgumentError):
            pack_rows([(1, 2), (3,)], 2)
        with self.assertRaises(InvalidArgumentError):
            cell_dtype(12)

    def test_add_overflow(self):
        a = pack_rows([(100, 1)], 2, 8)
        b = pack_rows([(27, 1)], 2, 8)
        self.assertEqual(unpack(add_exponents(a, b, 8)[0]), (127, 2))
        with self.assertRaises(ExponentOverflowError):
            add_exponents(a, pack_rows([(28, 0)], 2, 8), 8)
        big = guard_bit(64) - 1
        with self.assertRaises(ExponentOverflowError):
            add_exponents(pack((big,)), pack((1,)))

    def test_total_degree_overflow(self):
        exps = pack_rows([(100, 20), (100, 28)], 2, 8)
        with self.assertRaises(ExponentOverflowError):
            total_degrees(exps, 8)
        self.assertEqual(total_degrees(exps[:1], 8).tolist(), [120])
        with self.assertRaises(ExponentOverflowError):
            total_degree((guard_bit(64) - 1, 1))

class TestOrderings(unittest.TestCase):

    def all_monomials(self, n, d):
        return [m for m in itertools.product(range(d + 1), repeat=n)]

    def test_examples(self):
        # x > y > z
        self.assertEqual(MonomialOrderLex.cmp((1, 0, 0), (0, 5, 5)), 1)
        self.assertEqual(MonomialOrderDegLex.cmp((1, 0, 0), (0, 1, 1)), -1)
        self.assertEqual(MonomialOrderDegLex.cmp((1, 0, 1), (0, 2, 0)), 1)
        # x y^2 vs x^2 z under degrevlex: the one with less z is bigger
        self.assertEqual(MonomialOrderDegRevLex.cmp((1, 2, 0), (2, 0, 1)), 1)
        # degrevlex and deglex differ on these
        self.assertEqual(MonomialOrderDegLex.cmp((1, 0, 2), (0, 2, 1)), 1)
        self.assertEqual(MonomialOrderDegRevLex.cmp((1, 0, 2), (0, 2, 1)), -1)

    def test_strict_total_order(self):
        monomials = self.all_monomials(3, 2)
        for order in (MonomialOrderLex, MonomialOrderDegLex, MonomialOrderDegRevLex):
            for a in monomials:
                for b in monomials:
                    c = order.cmp(a, b)
                    self.assertEqual(c, -order.cmp(b, a))
                    self.assertEqual(c == 0, a == b)

    def test_translation_compatible(self):
        monomials = self.all_monomials(3, 2)
        for order in (MonomialOrderLex, MonomialOrderDegLex, MonomialOrderDegRevLex):
            for _ in range(300):
                a, b, k = random.sample(monomials, 3)
                ak = tuple(x + y for x,y in zip(a, k))
                bk = tuple(x + y for x,y in zip(b, k))
                self.assertEqual(order.cmp(a, b), order.cmp(ak, bk))

    def test_argsort_matches_cmp(self):
        from functools import cmp_to_key

        monomials = self.all_monomials(3, 3)
        random.shuffle(monomials)
        exps = pack_rows(monomials, 3)
        for order in (MonomialOrderLex, MonomialOrderDegLex, MonomialOrderDegRevLex):
            expected = sorted(monomials, key=cmp_to_key(order.cmp), reverse=True)
            perm = order.argsort_desc(exps)
            self.assertEqual([unpack(row) for row in exps[perm]], expected)

    def test_lookup(self):
        self.assertIs(monomial_order("grevlex"), MonomialOrderDegRevLex)
        self.assertIs(monomial_order(MonomialOrderLex), MonomialOrderLex)
        with self.assertRaises(InvalidArgumentError):
            monomial_order("elimination")
