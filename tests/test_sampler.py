import math
from fractions import Fraction

import gmpy2 as gmp
import numpy as np
import pytest

from f256ref import Float, RC, Kind, BINARY256, sample, P, PM1, EMAX, EMIN, MIN_EXP_SUBNORMAL
from f256ref.arithmetic import evalctx
from f256ref.arithmetic.sampler import random_triple, check_exp_range


def leading(enc):
    return enc.exp + enc.c.bit_length() - 1


class TestSample:

    def test_normal(self):
        rng = np.random.default_rng(1)
        for _ in range(100):
            x = sample((EMIN, EMAX), rng)
            assert x.rc == RC.EQUAL
            enc = x.decode()
            assert enc.c.bit_length() == P
            assert EMIN <= leading(enc) <= EMAX
            assert enc.classify() == Kind.NORMAL

    def test_normal_roundtrip(self):
        rng = np.random.default_rng(2)
        for e in [EMIN, -1, 0, 1, 275, EMAX]:
            x = sample((e, e), rng)
            enc = x.decode()
            assert enc.exp + PM1 == e
            assert enc.c.bit_length() == P

    def test_subnormal(self):
        rng = np.random.default_rng(3)
        for _ in range(100):
            x = sample((MIN_EXP_SUBNORMAL, EMIN - 1), rng)
            assert x.rc == RC.EQUAL
            enc = x.decode()
            assert enc.exp == MIN_EXP_SUBNORMAL
            assert enc.classify() == Kind.SUBNORMAL

    def test_subnormal_roundtrip(self):
        rng = np.random.default_rng(4)
        for e in [MIN_EXP_SUBNORMAL, MIN_EXP_SUBNORMAL + 1, MIN_EXP_SUBNORMAL + 128, EMIN - 1]:
            enc = sample((e, e), rng).decode()
            assert enc.exp == MIN_EXP_SUBNORMAL
            assert enc.c.bit_length() == e - MIN_EXP_SUBNORMAL + 1

    def test_smallest(self):
        x = sample((MIN_EXP_SUBNORMAL, MIN_EXP_SUBNORMAL), np.random.default_rng(5))
        assert abs(x) == Float.from_integer_exp(1, MIN_EXP_SUBNORMAL)

    def test_mixed_range(self):
        rng = np.random.default_rng(6)
        kinds = set()
        for _ in range(200):
            enc = sample((EMIN - 2, EMIN + 1), rng).decode()
            assert EMIN - 2 <= leading(enc) <= EMIN + 1
            kinds.add(enc.classify())
        assert kinds == {Kind.SUBNORMAL, Kind.NORMAL}

    def test_signs(self):
        rng = np.random.default_rng(7)
        signs = {sample((0, 10), rng).decode().sign for _ in range(100)}
        assert signs == {0, 1}

    def test_range_object(self):
        rng = np.random.default_rng(8)
        for _ in range(20):
            x = sample(range(-3, 4), rng)
            assert -3 <= leading(x.decode()) <= 3

    def test_without_rng(self):
        x = sample((0, 0))
        assert 1 <= abs(x) < 2

    def test_classmethod(self):
        a = Float.sample((0, 100), np.random.default_rng(9))
        b = sample((0, 100), np.random.default_rng(9))
        assert a == b


class TestReproducible:

    def test_same_seed(self):
        a = [sample((EMIN, EMAX), np.random.default_rng(42)).decode() for _ in range(3)]
        b = [sample((EMIN, EMAX), np.random.default_rng(42)).decode() for _ in range(3)]
        assert a == b

    def test_stream(self):
        rng1 = np.random.default_rng(42)
        rng2 = np.random.default_rng(42)
        a = [sample((MIN_EXP_SUBNORMAL, EMAX), rng1).decode() for _ in range(20)]
        b = [sample((MIN_EXP_SUBNORMAL, EMAX), rng2).decode() for _ in range(20)]
        assert a == b

    def test_triple_matches_sample(self):
        for seed in range(10):
            negative, c, exp = random_triple((MIN_EXP_SUBNORMAL, EMAX), np.random.default_rng(seed))
            x = sample((MIN_EXP_SUBNORMAL, EMAX), np.random.default_rng(seed))
            expected = Float.from_integer_exp(-c if negative else c, exp)
            assert x == expected
            assert x.is_signed() == negative


class TestRangeChecks:

    @pytest.mark.parametrize('r', [
        (5, 4),
        (MIN_EXP_SUBNORMAL - 1, 0),
        (0, EMAX + 1),
        range(0, 10, 2),
        range(3, 3),
    ])
    def test_rejected(self, r):
        with pytest.raises(ValueError):
            sample(r, np.random.default_rng(0))

    def test_accepted(self):
        assert check_exp_range((MIN_EXP_SUBNORMAL, EMAX)) == (MIN_EXP_SUBNORMAL, EMAX)
        assert check_exp_range(range(-5, 6)) == (-5, 5)

    def test_normal_exponents(self):
        assert BINARY256.is_normal_exp(EMIN)
        assert BINARY256.is_normal_exp(EMAX)
        assert not BINARY256.is_normal_exp(EMIN - 1)
        assert not BINARY256.is_normal_exp(EMAX + 1)

    def test_too_wide_significand(self):
        with pytest.raises(gmp.InexactResultError):
            Float.from_integer_exp((1 << P) + 1, 0)

    def test_split_at_emin(self):
        rng = np.random.default_rng(10)
        _, c, exp = random_triple((EMIN, EMIN), rng)
        assert (c.bit_length(), exp) == (P, EMIN - PM1)
        _, c, exp = random_triple((EMIN - 1, EMIN - 1), rng)
        assert (c.bit_length(), exp) == (PM1, MIN_EXP_SUBNORMAL)

    def test_other_format(self):
        binary64 = evalctx.lookup('binary64')
        with pytest.raises(ValueError):
            check_exp_range((-1075, 0), binary64)
        assert check_exp_range((-1074, 1023), binary64) == (-1074, 1023)


class TestBinary64:
    """The same rounding machinery at binary64 parameters, checked against
    CPython's correctly rounded int/int division.
    """

    binary64 = evalctx.lookup('binary64')

    def expected(self, q):
        f = float(q)
        sign = int(math.copysign(1.0, f) < 0)
        m = abs(Fraction(f)) * 2 ** 1074
        assert m.denominator == 1
        if m == 0:
            return (sign, 0, (0, 0))
        return (sign, -1074, (0, int(m)))

    def check(self, q):
        x = Float(gmp.mpq(q.numerator, q.denominator), ctx=self.binary64)
        assert x.decode() == self.expected(q)

    def test_ties(self):
        rng = np.random.default_rng(64)
        for _ in range(200):
            k = int(rng.integers(0, 1 << 51))
            sign = 1 if rng.integers(0, 2) else -1
            tie = Fraction(sign * (2 * k + 1), 2 ** 1075)
            tiny = Fraction(1, 2 ** 1200)
            self.check(tie)
            self.check(tie + tiny)
            self.check(tie - tiny)

    def test_random_subnormals(self):
        rng = np.random.default_rng(65)
        for _ in range(200):
            num = int(rng.integers(1, 1 << 62))
            shift = int(rng.integers(1084, 1140))
            self.check(Fraction(num, 2 ** shift))
            self.check(Fraction(-num, 3 * 2 ** shift))

    def test_sampled_subnormals(self):
        rng = np.random.default_rng(66)
        for _ in range(100):
            x = sample((-1074, -1023), rng, ctx=self.binary64)
            enc = x.decode()
            assert enc.exp == -1074
            assert float(x) == (-1) ** enc.sign * enc.c * 2.0 ** -1074
