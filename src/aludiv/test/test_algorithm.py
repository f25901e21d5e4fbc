# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

from aludiv.algorithm import (mask, divide, DivResult, RestoringDivRem,
                              NonRestoringDivRem, DIVIDERS)
from aludiv.exceptions import DivideOverflow
from aludiv.op import DivAlgorithm, DivErrorKind, DivMode, SignRule
import unittest


class TestMask(unittest.TestCase):
    def test_mask(self):
        self.assertEqual(mask(0), 0)
        self.assertEqual(mask(1), 1)
        self.assertEqual(mask(4), 0xF)
        self.assertEqual(mask(53), (1 << 53) - 1)
        self.assertEqual(mask(64), 0xFFFF_FFFF_FFFF_FFFF)
        self.assertEqual(mask(65) + 1, 1 << 65)


class DivRemHelper:
    divider = None

    def check_ops(self, ops, word_size):
        raise NotImplementedError()

    def helper(self, word_size):
        for d in range(1, 1 << word_size):
            for n in range(d << word_size):
                q, r = divmod(n, d)
                with self.subTest(n=n, d=d, q=q, r=r, word_size=word_size):
                    dr = self.divider(n, d, word_size, DivMode.Unsigned)
                    for _ in range(2 * word_size):
                        if dr.calculate_stage():
                            break
                    else:
                        self.fail("infinite loop")
                    self.assertEqual(dr.quotient, q)
                    self.assertEqual(dr.remainder, r)
                    self.assertEqual(dr.quotient * d + dr.remainder, n)
                    self.assertLess(dr.remainder, d)
                    self.check_ops(dr.ops, word_size)

    def test_word_size_1(self):
        self.helper(1)

    def test_word_size_2(self):
        self.helper(2)

    def test_word_size_3(self):
        self.helper(3)

    def test_word_size_4(self):
        self.helper(4)

    def test_word_size_5(self):
        self.helper(5)

    def test_signed_operands(self):
        word_size = 4
        for dividend_sign in 0, 1:
            for divisor_sign in 0, 1:
                for d in range(1, 1 << word_size):
                    for n in range(0, d << word_size, 7):
                        dividend = (dividend_sign << (2 * word_size)) | n
                        divisor = (divisor_sign << word_size) | d
                        q, r = divmod(n, d)
                        if dividend_sign != divisor_sign:
                            q = -q
                        with self.subTest(dividend=bin(dividend),
                                          divisor=bin(divisor)):
                            dr = self.divider(dividend, divisor, word_size,
                                              DivMode.Signed).calculate()
                            self.assertEqual(dr.dividend_sign, dividend_sign)
                            self.assertEqual(dr.divisor_sign, divisor_sign)
                            self.assertEqual(dr.dividend_magnitude, n)
                            self.assertEqual(dr.divisor_magnitude, d)
                            self.assertEqual(dr.quotient, q)
                            self.assertEqual(dr.remainder, r)
                            self.check_ops(dr.ops, word_size)

    def test_overflow_iff_high_half_ge_divisor(self):
        word_size = 3
        for d in range(1 << word_size):
            for n in range(1 << (2 * word_size)):
                expected = ((n >> word_size) & mask(word_size)) >= d
                with self.subTest(n=n, d=d, expected=expected):
                    try:
                        self.divider(n, d, word_size, DivMode.Unsigned)
                    except DivideOverflow as e:
                        self.assertTrue(expected)
                        self.assertEqual(e.high_half, n >> word_size)
                        self.assertEqual(e.divisor, d)
                    else:
                        self.assertFalse(expected)

    def test_zero_divisor_overflows(self):
        self.assertRaises(DivideOverflow, self.divider, 0, 0, 4,
                          DivMode.Unsigned)
        self.assertRaises(DivideOverflow, self.divider, 5, 0b10000, 4,
                          DivMode.Signed)

    def test_stages(self):
        dr = self.divider(13, 3, 4, DivMode.Unsigned)
        self.assertEqual(dr.ops, 0)
        self.assertFalse(dr.done)
        self.assertEqual(dr.accumulator, 13)
        for i in range(3):
            self.assertFalse(dr.calculate_stage())
            self.assertEqual(dr.current_step, i + 1)
            self.assertIsNone(dr.quotient)
        self.assertTrue(dr.calculate_stage())
        self.assertTrue(dr.done)
        ops = dr.ops
        # further stages are no-ops
        self.assertTrue(dr.calculate_stage())
        self.assertEqual(dr.ops, ops)
        self.assertEqual(dr.current_step, 4)
        result = dr.result()
        self.assertIsInstance(result, DivResult)
        self.assertTrue(result.ok)
        self.assertEqual((result.quotient, result.remainder), (4, 1))
        self.assertEqual(result.word_size, 4)

    def test_alignment(self):
        dr = self.divider(13, 3, 4, DivMode.Unsigned)
        self.assertEqual(dr.acc_width, 9)
        self.assertEqual(dr.aligned_divisor, 3 << 4)
        # -3 in 5 bits, ebit forced on
        self.assertEqual(dr.aligned_comp_divisor, 0b11101 << 4)
        dr = self.divider(13, 0b10011, 4, DivMode.Signed)
        self.assertEqual(dr.aligned_divisor, 3 << 4)
        self.assertEqual(dr.aligned_comp_divisor, 0b11101 << 4)


class TestRestoringDivRem(DivRemHelper, unittest.TestCase):
    divider = RestoringDivRem

    def check_ops(self, ops, word_size):
        self.assertGreaterEqual(ops, word_size)
        self.assertLessEqual(ops, 2 * word_size)

    def test_ops_count(self):
        # 13 / 3: quotient bits 0100, one addition per 1 bit and two per 0
        self.assertEqual(RestoringDivRem(13, 3, 4, DivMode.Unsigned)
                         .calculate().ops, 7)
        # 15 / 1: every bit is 1
        self.assertEqual(RestoringDivRem(15, 1, 4, DivMode.Unsigned)
                         .calculate().ops, 4)
        # 0 / 15: every bit is 0
        self.assertEqual(RestoringDivRem(0, 15, 4, DivMode.Unsigned)
                         .calculate().ops, 8)


class TestNonRestoringDivRem(DivRemHelper, unittest.TestCase):
    divider = NonRestoringDivRem

    def check_ops(self, ops, word_size):
        self.assertEqual(ops, word_size)

    def test_final_correction(self):
        # 13 / 3 ends on a negative partial remainder, 15 / 1 doesn't
        for n, d in (12, 3), (13, 3), (15, 1), (0, 15):
            with self.subTest(n=n, d=d):
                dr = NonRestoringDivRem(n, d, 4, DivMode.Unsigned)
                dr.calculate()
                self.assertEqual((dr.quotient, dr.remainder), divmod(n, d))
                self.assertEqual(dr.ops, 4)


class TestAlgorithmsAgree(unittest.TestCase):
    def test_agree(self):
        for word_size in range(1, 7):
            for d in range(1, 1 << word_size):
                step = max(1, (d << word_size) // 97)
                for n in range(0, d << word_size, step):
                    with self.subTest(n=n, d=d, word_size=word_size):
                        rdr = RestoringDivRem(n, d, word_size,
                                              DivMode.Unsigned).calculate()
                        ndr = NonRestoringDivRem(n, d, word_size,
                                                 DivMode.Unsigned).calculate()
                        self.assertEqual(rdr.quotient, ndr.quotient)
                        self.assertEqual(rdr.remainder, ndr.remainder)
                        self.assertLessEqual(ndr.ops, rdr.ops)

    def test_wide(self):
        word_size = 24
        d = 0xABCDEF
        for n in 0, 1, d, 0xABCDEE_FFFFFF, 0x123456_789ABC:
            with self.subTest(n=hex(n)):
                for algorithm, divider in DIVIDERS.items():
                    dr = divider(n, d, word_size, DivMode.Unsigned)
                    dr.calculate()
                    self.assertEqual((dr.quotient, dr.remainder),
                                     divmod(n, d))


class TestDivide(unittest.TestCase):
    def test_example_unsigned(self):
        for algorithm in DivAlgorithm:
            with self.subTest(algorithm=algorithm):
                result = divide("00001101", "0011", DivMode.Unsigned,
                                algorithm)
                self.assertTrue(result.ok)
                self.assertEqual(result.quotient, 4)
                self.assertEqual(result.remainder, 1)
                self.assertEqual(result.word_size, 4)
        result = divide("00001101", "0011", DivMode.Unsigned,
                        DivAlgorithm.NonRestoring)
        self.assertEqual(result.ops, 4)
        result = divide("00001101", "0011", DivMode.Unsigned,
                        DivAlgorithm.Restoring)
        self.assertEqual(result.ops, 7)

    def test_example_signed(self):
        test_cases = [
            # dividend, divisor, quotient, remainder
            ("000001101", "00011", 4, 1),
            ("100001101", "00011", -4, 1),
            ("000001101", "10011", -4, 1),
            ("100001101", "10011", 4, 1),
            ("100000000", "10001", 0, 0),
            ("011101111", "01111", 15, 14),
        ]
        for dividend, divisor, quotient, remainder in test_cases:
            for algorithm in DivAlgorithm:
                with self.subTest(dividend=dividend, divisor=divisor,
                                  algorithm=algorithm):
                    result = divide(dividend, divisor, DivMode.Signed,
                                    algorithm)
                    self.assertTrue(result.ok)
                    self.assertEqual(result.quotient, quotient)
                    self.assertEqual(result.remainder, remainder)
                    self.assertEqual(result.word_size, 4)

    def test_overflow(self):
        for algorithm in DivAlgorithm:
            with self.subTest(algorithm=algorithm):
                result = divide("11111111", "0010", DivMode.Unsigned,
                                algorithm)
                self.assertFalse(result.ok)
                self.assertIs(result.error, DivErrorKind.Overflow)
                self.assertIsNone(result.quotient)
                self.assertIsNone(result.remainder)
                self.assertIsNone(result.ops)
                self.assertEqual(result.word_size, 4)
                result = divide("011111111", "00010", DivMode.Signed,
                                algorithm)
                self.assertIs(result.error, DivErrorKind.Overflow)
                result = divide("000000001", "00000", DivMode.Signed,
                                algorithm)
                self.assertIs(result.error, DivErrorKind.Overflow)

    def test_invalid_format(self):
        for mode in DivMode:
            for dividend, divisor in ("102", "0011"), ("0011", "1a"):
                with self.subTest(mode=mode, dividend=dividend,
                                  divisor=divisor):
                    result = divide(dividend, divisor, mode)
                    self.assertIs(result.error, DivErrorKind.InvalidFormat)
                    self.assertIsNone(result.ops)
        result = divide("", "00011", DivMode.Signed)
        self.assertIs(result.error, DivErrorKind.InvalidFormat)

    def test_mode_changes_word_size(self):
        signed = divide("000001101", "00011", DivMode.Signed)
        unsigned = divide("000001101", "00011", DivMode.Unsigned)
        self.assertEqual(signed.word_size, 4)
        self.assertEqual(unsigned.word_size, 5)
        self.assertEqual((unsigned.quotient, unsigned.remainder), (4, 1))

    def test_unsigned_never_negates(self):
        result = divide("100001101", "10011", DivMode.Unsigned)
        # 269 / 19 with word_size 5
        self.assertEqual((result.quotient, result.remainder), (14, 3))

    def test_repr(self):
        result = divide("00001101", "0011", DivMode.Unsigned)
        self.assertIn("quotient=4", repr(result))
        result = divide("11111111", "0010", DivMode.Unsigned)
        self.assertIn("overflow", repr(result).lower())


class TestSignRule(unittest.TestCase):
    def test_rules_agree_on_full_width_dividend(self):
        for dividend in "000001101", "100001101":
            for divisor in "00011", "10011":
                with self.subTest(dividend=dividend, divisor=divisor):
                    xor = divide(dividend, divisor, DivMode.Signed,
                                 sign_rule=SignRule.Xor)
                    legacy = divide(dividend, divisor, DivMode.Signed,
                                    sign_rule=SignRule.Legacy)
                    self.assertEqual(xor.quotient, legacy.quotient)

    def test_short_dividend(self):
        # word_size 5: the dividend flag sits below bit 2 * word_size,
        # so the legacy rule never sees it
        xor = divide("100000111", "000011", DivMode.Signed,
                     sign_rule=SignRule.Xor)
        legacy = divide("100000111", "000011", DivMode.Signed,
                        sign_rule=SignRule.Legacy)
        self.assertEqual(xor.quotient, -2)
        self.assertEqual(legacy.quotient, 2)
        self.assertEqual(xor.remainder, legacy.remainder)
        self.assertEqual(xor.remainder, 1)

    def test_long_dividend(self):
        # word_size 4: the legacy rule xors 0b100 with True
        xor = divide("10000001101", "10011", DivMode.Signed,
                     sign_rule=SignRule.Xor)
        legacy = divide("10000001101", "10011", DivMode.Signed,
                        sign_rule=SignRule.Legacy)
        self.assertEqual(xor.quotient, 4)
        self.assertEqual(legacy.quotient, -4)

    def test_unsigned_ignores_rule(self):
        for rule in SignRule:
            with self.subTest(rule=rule):
                result = divide("100001101", "10011", DivMode.Unsigned,
                                sign_rule=rule)
                self.assertGreaterEqual(result.quotient, 0)


if __name__ == '__main__':
    unittest.main()
