# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information
""" Enumerations selecting how the division engine runs.
"""
import enum


class DivMode(enum.Enum):
    """ How operand bit strings are interpreted.

    :attribute Signed: the leading bit is a sign flag ('0' positive,
        '1' negative) and the remaining bits are the magnitude.
    :attribute Unsigned: the whole string is the magnitude.
    """

    Signed = "signed"
    Unsigned = "unsigned"

    @property
    def sign_bits(self):
        """ Number of leading bits that are not magnitude. """
        return 1 if self is DivMode.Signed else 0


class DivAlgorithm(enum.Enum):
    """ The bit-serial division method to run.

    :attribute Restoring: trial subtraction each step, undone when the
        partial remainder goes negative. 1 or 2 additions per step.
    :attribute NonRestoring: alternate between subtracting and adding
        the divisor based on the previous step's sign, with one final
        correction. Exactly 1 addition per step.
    """

    Restoring = "restoring"
    NonRestoring = "non-restoring"

    @property
    def csv_name(self):
        """ File name the harness writes this algorithm's rows to. """
        if self is DivAlgorithm.Restoring:
            return "restore_method.csv"
        return "non_restore_method.csv"


class SignRule(enum.Enum):
    """ When a signed-magnitude quotient gets negated.

    :attribute Xor: negate iff exactly one operand has its sign flag set.
    :attribute Legacy: negate iff ``sign1 ^ (sign2 == 1)`` is non-zero,
        where ``sign1`` is every dividend register bit from position
        ``2 * word_size`` upward. Same as ``Xor`` when the dividend is
        exactly ``2 * word_size + 1`` bits wide.
    """

    Xor = "xor"
    Legacy = "legacy"


class DivErrorKind(enum.Enum):
    """ Reasons a single ``divide`` call produces no quotient. """

    Overflow = "overflow"
    InvalidFormat = "invalid format"
