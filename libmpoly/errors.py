#!/usr/bin/env python3
#
#   Exceptions raised by the polynomial core
#
#   Failures coming from a coefficient ring (e.g. ZeroDivisionError in a field) are not wrapped, they propagate as-is.
#

class ExponentOverflowError(OverflowError):
    """
    An exponent or a total degree would set the guard bit of its storage cell.
    """

class InvalidArgumentError(ValueError):
    """
    Malformed variable/value lists, out of range variable indices, negative powers or deflation parameters that do
    not match the polynomial.
    """

class InexactDivisionError(ArithmeticError):
    """
    An exact division was requested but the divisor does not divide the dividend.
    """
