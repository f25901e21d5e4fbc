# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Timing of repeated divisions.
"""

import logging
import time

from aludiv.algorithm import divide
from aludiv.harness import DivConfig, signed_value

BENCHMARK_HEADER = ("algorithm", "dividend", "divisor", "iterations",
                    "repeat", "total_us", "per_call_ns")


class BenchmarkResult:
    """ Timing of ``repeat`` identical ``divide`` calls.

    :attribute algorithm: the ``DivAlgorithm`` timed.
    :attribute repeat: number of calls.
    :attribute seconds: wall-clock time for all calls.
    :attribute result: the ``DivResult`` every call produced.
    """

    def __init__(self, algorithm, repeat, seconds, result):
        self.algorithm = algorithm
        self.repeat = repeat
        self.seconds = seconds
        self.result = result

    @property
    def per_call_ns(self):
        """ Mean nanoseconds per call. """
        if self.repeat == 0:
            return 0.0
        return self.seconds * 1e9 / self.repeat

    def __repr__(self):
        return (f"BenchmarkResult({self.algorithm.value}, "
                f"repeat={self.repeat}, seconds={self.seconds:.6f})")


def benchmark(dividend_bits, divisor_bits, algorithm, config=None,
              repeat=None):
    """ Time ``repeat`` divisions of the same operand pair.

    Each call is independent; nothing carries over between iterations.

    :param repeat: defaults to ``config.repeat``.
    :returns BenchmarkResult:
    """
    if config is None:
        config = DivConfig()
    if repeat is None:
        repeat = config.repeat
    result = divide(dividend_bits, divisor_bits, config.mode, algorithm,
                    config.sign_rule)
    start = time.perf_counter()
    for _ in range(repeat):
        divide(dividend_bits, divisor_bits, config.mode, algorithm,
               config.sign_rule)
    seconds = time.perf_counter() - start
    logging.debug(f"benchmark {algorithm.value} {dividend_bits} / "
                  f"{divisor_bits}: {repeat} calls in {seconds:.6f}s")
    return BenchmarkResult(algorithm, repeat, seconds, result)


def benchmark_row(dividend_bits, divisor_bits, bench, mode):
    """ Render a ``BenchmarkResult`` as a CSV row. """
    iterations = bench.result.word_size
    return [bench.algorithm.value,
            signed_value(dividend_bits, mode),
            signed_value(divisor_bits, mode),
            "null" if iterations is None else iterations,
            bench.repeat,
            round(bench.seconds * 1e6),
            f"{bench.per_call_ns:.1f}"]
