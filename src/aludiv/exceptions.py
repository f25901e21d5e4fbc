# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information
""" Exceptions raised by the codec, the division engine and the harness.
"""


class DivideError(Exception):
    """ Base class for every error raised by ``aludiv``. """
    pass


class InvalidFormat(DivideError, ValueError):
    """ An operand contains something other than '0' or '1'.

    :attribute operand: the offending operand string.
    :attribute position: index of the first bad character, or None when
        the operand is rejected as a whole (e.g. it is empty).
    """

    def __init__(self, message, operand=None, position=None):
        super().__init__(message)
        self.operand = operand
        self.position = position


class DivideOverflow(DivideError, ArithmeticError):
    """ The quotient would not fit in ``word_size`` bits.

    Raised by the pre-flight check, before any iteration runs.

    :attribute high_half: the dividend magnitude shifted right by
        ``word_size``.
    :attribute divisor: the divisor magnitude.
    """

    def __init__(self, message, high_half=None, divisor=None):
        super().__init__(message)
        self.high_half = high_half
        self.divisor = divisor


class OperandLengthError(DivideError, ValueError):
    """ An operand pair falls outside the lengths the harness accepts. """

    def __init__(self, message, dividend_bits=None, divisor_bits=None):
        super().__init__(message)
        self.dividend_bits = dividend_bits
        self.divisor_bits = divisor_bits
