# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Command-line front-end.

Reads dividend/divisor pairs from a file (or stdin) and writes
``restore_method.csv`` and ``non_restore_method.csv``::

    aludiv operands.txt --output-dir out
    aludiv --unsigned --benchmark 1000 < operands.txt
"""

import argparse
import contextlib
import csv
import logging
import os
import sys

from aludiv.bench import BENCHMARK_HEADER, benchmark, benchmark_row
from aludiv.exceptions import InvalidFormat, OperandLengthError
from aludiv.harness import (DEFAULT_REPEAT, DivConfig, check_operand_lengths,
                            open_writer, read_operand_pairs, run_batch,
                            signed_value)
from aludiv.op import DivAlgorithm, DivMode, SignRule

ALGORITHM_CHOICES = {
    "restoring": (DivAlgorithm.Restoring,),
    "non-restoring": (DivAlgorithm.NonRestoring,),
    "both": (DivAlgorithm.Restoring, DivAlgorithm.NonRestoring),
}


def make_parser():
    parser = argparse.ArgumentParser(
        prog="aludiv",
        description="Restoring and non-restoring binary division.")
    parser.add_argument("input", nargs="?",
                        help="file of whitespace-separated dividend/divisor "
                             "pairs (default: stdin)")
    parser.add_argument("-o", "--output-dir", default=".",
                        help="directory the CSV files are written to")
    parser.add_argument("--unsigned", action="store_true",
                        help="operands have no sign flag")
    parser.add_argument("--legacy-sign-rule", action="store_true",
                        help="negate quotients with the sign1 ^ (sign2 == 1) "
                             "rule instead of sign1 ^ sign2")
    parser.add_argument("-a", "--algorithm", choices=ALGORITHM_CHOICES,
                        default="both")
    parser.add_argument("--benchmark", nargs="?", type=int,
                        const=DEFAULT_REPEAT, metavar="N",
                        help="also time N divisions of every pair "
                             f"(default N: {DEFAULT_REPEAT})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log every division")
    return parser


def config_from_args(args):
    return DivConfig(
        mode=DivMode.Unsigned if args.unsigned else DivMode.Signed,
        sign_rule=SignRule.Legacy if args.legacy_sign_rule else SignRule.Xor,
        algorithms=ALGORITHM_CHOICES[args.algorithm],
        repeat=DEFAULT_REPEAT if args.benchmark is None else args.benchmark)


def write_benchmarks(pairs, config, path):
    """ Time every valid pair with every configured algorithm. """
    with open(path, "w", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(BENCHMARK_HEADER)
        for dividend_bits, divisor_bits in pairs:
            try:
                check_operand_lengths(dividend_bits, divisor_bits)
                signed_value(dividend_bits, config.mode)
                signed_value(divisor_bits, config.mode)
            except (OperandLengthError, InvalidFormat):
                continue
            for algorithm in config.algorithms:
                bench = benchmark(dividend_bits, divisor_bits, algorithm,
                                  config)
                writer.writerow(benchmark_row(dividend_bits, divisor_bits,
                                              bench, config.mode))


def run(args):
    config = config_from_args(args)
    logging.debug(f"{config}")
    with contextlib.ExitStack() as stack:
        if args.input is None:
            source = sys.stdin
        else:
            source = stack.enter_context(open(args.input))
        pairs = read_operand_pairs(source)
        if args.benchmark is not None:
            pairs = list(pairs)
        writers = {}
        for algorithm in config.algorithms:
            path = os.path.join(args.output_dir, algorithm.csv_name)
            f = stack.enter_context(open(path, "w", newline=""))
            writers[algorithm] = open_writer(f)
        summary = run_batch(pairs, writers, config)
    if args.benchmark is not None:
        write_benchmarks(pairs, config,
                         os.path.join(args.output_dir, "benchmark.csv"))
    return summary


def main(argv=None):
    args = make_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s")
    if args.benchmark is not None and args.benchmark < 0:
        logging.error("--benchmark needs a non-negative count")
        return 2
    try:
        run(args)
    except OSError as e:
        logging.error(f"{e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
