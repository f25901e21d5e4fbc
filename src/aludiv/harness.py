# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Batch harness: operand pairs in, one CSV row per pair per algorithm out.

Operand pairs are whitespace-separated tokens, dividend first. Rows use the
columns ``dividend,divisor,quotient,remainder,iterations,ops`` with the
operands rendered as decimals (signed in signed-magnitude mode).
"""

import csv
import logging

from aludiv.algorithm import divide
from aludiv.codec import decode, split_sign
from aludiv.exceptions import InvalidFormat, OperandLengthError
from aludiv.op import DivAlgorithm, DivErrorKind, DivMode, SignRule

CSV_HEADER = ("dividend", "divisor", "quotient", "remainder",
              "iterations", "ops")

DIVIDEND_LENGTHS = range(9, 26)
DIVISOR_LENGTHS = range(5, 14)

DEFAULT_REPEAT = 100000


class DivConfig:
    """ Settings for one batch.

    :attribute mode: how operand strings are interpreted.
    :attribute sign_rule: when signed quotients get negated.
    :attribute algorithms: the ``DivAlgorithm`` s to run on every pair.
    :attribute repeat: divisions per benchmark measurement.
    """

    def __init__(self, mode=DivMode.Signed, sign_rule=SignRule.Xor,
                 algorithms=tuple(DivAlgorithm), repeat=DEFAULT_REPEAT):
        """ Create a ``DivConfig`` instance. """
        self.mode = mode
        self.sign_rule = sign_rule
        self.algorithms = tuple(algorithms)
        self.repeat = repeat

    def __repr__(self):
        """ Get repr. """
        names = ", ".join(a.value for a in self.algorithms)
        return (f"DivConfig({self.mode.value}, {self.sign_rule.value}, "
                f"[{names}], repeat={self.repeat})")


class BatchSummary:
    """ Counters for one ``run_batch`` call. """

    def __init__(self):
        self.pairs = 0
        self.rows = 0
        self.overflows = 0
        self.skipped = 0

    def __repr__(self):
        return (f"BatchSummary(pairs={self.pairs}, rows={self.rows}, "
                f"overflows={self.overflows}, skipped={self.skipped})")


def read_operand_pairs(stream):
    """ Yield ``(dividend_bits, divisor_bits)`` pairs from a text stream.

    Tokens may be split across lines in any way. A trailing token without
    a partner is dropped.
    """
    pending = None
    for line in stream:
        for token in line.split():
            if pending is None:
                pending = token
            else:
                yield pending, token
                pending = None
    if pending is not None:
        logging.debug(f"dropping unpaired trailing operand {pending!r}")


def check_operand_lengths(dividend_bits, divisor_bits):
    """ Reject operands the harness doesn't accept.

    :raises OperandLengthError: if the dividend isn't 9-25 characters or
        the divisor isn't 5-13 characters.
    """
    if len(dividend_bits) not in DIVIDEND_LENGTHS:
        raise OperandLengthError(
            f"dividend {dividend_bits!r} must be "
            f"{DIVIDEND_LENGTHS.start}-{DIVIDEND_LENGTHS.stop - 1} bits",
            dividend_bits, divisor_bits)
    if len(divisor_bits) not in DIVISOR_LENGTHS:
        raise OperandLengthError(
            f"divisor {divisor_bits!r} must be "
            f"{DIVISOR_LENGTHS.start}-{DIVISOR_LENGTHS.stop - 1} bits",
            dividend_bits, divisor_bits)


def signed_value(bits, mode):
    """ Decimal value of an operand as it appears in the CSV.

    :raises InvalidFormat: if ``bits`` isn't a binary literal.
    """
    if mode is DivMode.Unsigned:
        return decode(bits)
    sign, magnitude = split_sign(bits)
    value = decode(magnitude)
    return -value if sign else value


def result_row(dividend_bits, divisor_bits, result, mode):
    """ Render one division as a CSV row (a list of fields).

    Overflow rows read ``dividend,divisor,overflow, overflow,null,null``.
    """
    row = [signed_value(dividend_bits, mode), signed_value(divisor_bits, mode)]
    if result.error is DivErrorKind.Overflow:
        return row + ["overflow", " overflow", "null", "null"]
    return row + [result.quotient, result.remainder, result.word_size,
                  result.ops]


def open_writer(f):
    """ Wrap a text file in a CSV writer and emit the header row. """
    writer = csv.writer(f, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    return writer


def run_batch(pairs, writers, config):
    """ Divide every pair with every configured algorithm.

    Pairs with bad lengths or non-binary characters are logged and
    skipped; the batch carries on with the next pair.

    :param pairs: iterable of ``(dividend_bits, divisor_bits)``.
    :param writers: mapping of ``DivAlgorithm`` to a ``csv.writer``.
    :param config: a ``DivConfig``.
    :returns BatchSummary:
    """
    summary = BatchSummary()
    for dividend_bits, divisor_bits in pairs:
        summary.pairs += 1
        try:
            check_operand_lengths(dividend_bits, divisor_bits)
            signed_value(dividend_bits, config.mode)
            signed_value(divisor_bits, config.mode)
        except (OperandLengthError, InvalidFormat) as e:
            logging.warning(f"skipping pair {summary.pairs}: {e}")
            summary.skipped += 1
            continue
        for algorithm in config.algorithms:
            result = divide(dividend_bits, divisor_bits, config.mode,
                            algorithm, config.sign_rule)
            if result.error is DivErrorKind.Overflow:
                summary.overflows += 1
            writers[algorithm].writerow(
                result_row(dividend_bits, divisor_bits, result, config.mode))
            summary.rows += 1
    logging.info(f"batch done: {summary}")
    return summary
