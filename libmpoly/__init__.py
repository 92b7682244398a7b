#
#   libmpoly : LIBrary for sparse Multivariate POLYnomials
#

from libmpoly.basic_types import GF, QQ, ZZ, CoefficientRing, Field, IntegerRing, Mod, Rational, RationalField
from libmpoly.errors import ExponentOverflowError, InexactDivisionError, InvalidArgumentError
from libmpoly.monomial import (Monomial, MonomialOrder, MonomialOrderDegLex, MonomialOrderDegRevLex,
                               MonomialOrderGRevLex, MonomialOrderGrLex, MonomialOrderLex, monomial_order)
from libmpoly.polynomial import Polynomial, PolynomialRing, polynomial_ring
from libmpoly.poly_gcd import content, divexact, gcd, lcm, normalize, primpart
