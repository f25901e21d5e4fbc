# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Restoring and non-restoring division on a bit-packed accumulator.

The accumulator is ``2 * word_size + 1`` bits wide::

    bit  2w        | bits w .. 2w-1      | bits 0 .. w-1
    ebit (test)    | partial remainder   | dividend bits / quotient bits

Subtraction is done by adding the divisor's complement, so each step is a
shift followed by one or two additions. ``ops`` counts those additions.
"""

import logging

from nmigen.hdl.ast import Const

from aludiv.codec import decode, encode, split_sign
from aludiv.exceptions import DivideOverflow, InvalidFormat
from aludiv.op import DivAlgorithm, DivErrorKind, DivMode, SignRule


def mask(width):
    """ All-ones mask ``width`` bits wide. """
    return (1 << width) - 1


class DivResult:
    """ Outcome of one ``divide`` call.

    :attribute quotient: the quotient, negated by the sign rule in
        signed mode. None on error.
    :attribute remainder: the remainder magnitude. None on error.
    :attribute ops: number of additions performed. None on error.
    :attribute word_size: the word size the call ran with, when known.
    :attribute error: a ``DivErrorKind``, or None on success.
    """

    def __init__(self, quotient=None, remainder=None, ops=None,
                 word_size=None, error=None):
        self.quotient = quotient
        self.remainder = remainder
        self.ops = ops
        self.word_size = word_size
        self.error = error

    @classmethod
    def failed(cls, error, word_size=None):
        """ Create a result carrying only an error kind. """
        return cls(word_size=word_size, error=error)

    @property
    def ok(self):
        """ True if a quotient was produced. """
        return self.error is None

    def __repr__(self):
        if not self.ok:
            return f"DivResult(error={self.error}, word_size={self.word_size})"
        return (f"DivResult(quotient={self.quotient}, "
                f"remainder={self.remainder}, ops={self.ops}, "
                f"word_size={self.word_size})")


class BitPackedDivRem:
    """ Shared state and bookkeeping for the bit-serial dividers.

    Construction runs the overflow pre-flight check; nothing is computed
    if it fails. Call ``calculate_stage`` once per quotient bit, or
    ``calculate`` to run them all.

    :attribute word_size: number of magnitude bits in the divisor.
    :attribute dividend_width: width of the dividend register, sign flag
        included.
    :attribute mode: the ``DivMode`` the operands are encoded in.
    :attribute sign_rule: the ``SignRule`` applied in signed mode.
    :attribute dividend_sign: the dividend's sign flag (0 in unsigned mode).
    :attribute divisor_sign: the divisor's sign flag (0 in unsigned mode).
    :attribute dividend_magnitude: the dividend without its sign flag.
    :attribute divisor_magnitude: the divisor without its sign flag.
    :attribute aligned_divisor: divisor magnitude shifted into the
        remainder half of the accumulator.
    :attribute aligned_comp_divisor: the complemented divisor shifted
        into the remainder half, with the ebit forced to 1.
    :attribute accumulator: the working register.
    :attribute ops: additions performed so far.
    :attribute current_step: quotient bits computed so far.
    :attribute quotient: the signed quotient, once finished.
    :attribute remainder: the remainder magnitude, once finished.
    """

    def __init__(self, dividend, divisor, word_size, mode=DivMode.Signed,
                 sign_rule=SignRule.Xor, dividend_width=None):
        """ Create a divider and run the pre-flight overflow check.

        :param dividend: the raw dividend register, sign flag included in
            signed mode.
        :param divisor: the raw divisor register, sign flag (bit
            ``word_size``) included in signed mode.
        :param word_size: number of magnitude bits in the divisor.
        :param mode: a ``DivMode``.
        :param sign_rule: a ``SignRule``, only used in signed mode.
        :param dividend_width: width of the dividend operand in bits.
            Defaults to ``2 * word_size`` plus the sign flag.
        :raises DivideOverflow: if the quotient can't fit in
            ``word_size`` bits.
        """
        assert word_size >= 0
        if dividend_width is None:
            dividend_width = 2 * word_size + mode.sign_bits
        self.word_size = word_size
        self.dividend_width = dividend_width
        self.mode = mode
        self.sign_rule = sign_rule

        dividend = Const.normalize(dividend, (dividend_width, False))
        self.dividend_register = dividend
        mag_width = max(dividend_width - mode.sign_bits, 0)
        if mode is DivMode.Signed:
            self.dividend_sign = dividend >> mag_width
            self.divisor_sign = (divisor >> word_size) & 1
        else:
            self.dividend_sign = 0
            self.divisor_sign = 0
        self.dividend_magnitude = Const.normalize(dividend, (mag_width, False))
        self.divisor_magnitude = Const.normalize(divisor, (word_size, False))

        high_half = self.dividend_magnitude >> word_size
        if high_half >= self.divisor_magnitude:
            raise DivideOverflow(f"divide overflow: high half {high_half} "
                                 f">= divisor {self.divisor_magnitude}",
                                 high_half=high_half,
                                 divisor=self.divisor_magnitude)

        comp_divisor = Const.normalize(~divisor, (word_size + 1, False)) + 1
        self.aligned_divisor = self.divisor_magnitude << word_size
        self.aligned_comp_divisor = ((comp_divisor << word_size)
                                     | (1 << (2 * word_size)))
        self.accumulator = self.dividend_magnitude
        self.ops = 0
        self.current_step = 0
        self.quotient = None
        self.remainder = None

    @property
    def acc_width(self):
        """ Width of the accumulator including the ebit. """
        return 2 * self.word_size + 1

    @property
    def test_bit(self):
        """ The ebit: set when the partial remainder is negative. """
        return (self.accumulator >> (2 * self.word_size)) & 1

    @property
    def done(self):
        """ True once every quotient bit has been computed. """
        return self.quotient is not None

    def negate_quotient(self):
        """ Decide whether the sign rule flips the quotient. """
        if self.mode is not DivMode.Signed:
            return False
        if self.sign_rule is SignRule.Legacy:
            # bits above 2w, xored with a bool
            sign1 = self.dividend_register >> (2 * self.word_size)
            return (sign1 ^ (self.divisor_sign == 1)) != 0
        return (self.dividend_sign ^ self.divisor_sign) == 1

    def step(self):
        """ Compute one quotient bit. Implemented by subclasses. """
        raise NotImplementedError()

    def finish(self):
        """ Split the accumulator into quotient and remainder. """
        w = self.word_size
        self.accumulator = Const.normalize(self.accumulator, (2 * w, False))
        quotient = self.accumulator & mask(w)
        self.remainder = (self.accumulator >> w) & mask(w)
        if self.negate_quotient():
            quotient = -quotient
        self.quotient = quotient

    def calculate_stage(self):
        """ Calculate the next quotient bit.

        :returns bool: True if this was the last stage.
        """
        if self.done:
            return True
        self.step()
        self.current_step += 1
        if self.current_step < self.word_size:
            return False
        self.finish()
        return True

    def calculate(self):
        """ Calculate the results of the division.

        :returns: self
        """
        while not self.calculate_stage():
            pass
        return self

    def result(self):
        """ Package the finished division as a ``DivResult``. """
        assert self.done, "division not calculated yet"
        return DivResult(self.quotient, self.remainder, self.ops,
                         self.word_size)


class RestoringDivRem(BitPackedDivRem):
    """ Restoring division.

    Every step adds the complemented divisor. When that leaves the ebit
    set the divisor is added back, so a step costs 1 or 2 additions and
    ``ops`` ends up in ``[word_size, 2 * word_size]``.
    """

    def step(self):
        w = self.word_size
        acc = Const.normalize(self.accumulator, (self.acc_width, False)) << 1
        acc += self.aligned_comp_divisor  # trial subtraction
        self.ops += 1
        if (acc >> (2 * w)) & 1 == 0:
            self.accumulator = acc | 1
            return
        # quotient bit stays 0
        acc += self.aligned_divisor
        self.ops += 1
        self.accumulator = acc


class NonRestoringDivRem(BitPackedDivRem):
    """ Non-restoring division.

    The addend of each step is picked by the previous step's ebit: the
    complemented divisor while the partial remainder is non-negative, the
    divisor while it is negative. Exactly one addition per step, so
    ``ops == word_size``. A negative final remainder gets one extra,
    uncounted, correction.
    """

    def step(self):
        previous = self.test_bit
        acc = Const.normalize(self.accumulator << 1, (self.acc_width, False))
        if previous == 0:
            acc += self.aligned_comp_divisor
        else:
            acc += self.aligned_divisor
        self.ops += 1
        acc = Const.normalize(acc, (self.acc_width, False))
        if (acc >> (2 * self.word_size)) & 1 == 0:
            acc |= 1
        self.accumulator = acc

    def finish(self):
        if self.test_bit:
            self.accumulator += self.aligned_divisor
        super().finish()


DIVIDERS = {
    DivAlgorithm.Restoring: RestoringDivRem,
    DivAlgorithm.NonRestoring: NonRestoringDivRem,
}


def divide(dividend_bits, divisor_bits, mode=DivMode.Signed,
           algorithm=DivAlgorithm.Restoring, sign_rule=SignRule.Xor):
    """ Divide two binary operand strings.

    The word size is the divisor's length minus its sign flag. Format and
    overflow failures come back as ``DivResult.error`` rather than being
    raised.

    :param dividend_bits: the dividend as a binary string.
    :param divisor_bits: the divisor as a binary string.
    :param mode: a ``DivMode``.
    :param algorithm: a ``DivAlgorithm``.
    :param sign_rule: a ``SignRule``, only used in signed mode.
    :returns DivResult:
    """
    try:
        dividend = decode(dividend_bits)
        divisor = decode(divisor_bits)
        if mode is DivMode.Signed:
            split_sign(dividend_bits)
            split_sign(divisor_bits)
    except InvalidFormat as e:
        logging.debug(f"divide: {e}")
        return DivResult.failed(DivErrorKind.InvalidFormat)

    word_size = max(len(divisor_bits) - mode.sign_bits, 0)
    logging.debug(f"divide: {algorithm.value} {mode.value} "
                  f"{encode(dividend, len(dividend_bits))} / "
                  f"{encode(divisor, len(divisor_bits))} "
                  f"word_size={word_size}")
    try:
        divider = DIVIDERS[algorithm](dividend, divisor, word_size, mode,
                                      sign_rule, len(dividend_bits))
    except DivideOverflow as e:
        logging.debug(f"divide: {e}")
        return DivResult.failed(DivErrorKind.Overflow, word_size)
    return divider.calculate().result()
