"""
Tests for the butterfly unit: exact integer behaviour and agreement
with the float butterfly.
"""

import numpy as np

from fft_engine.butterfly import ButterflyUnit, Sample


ONE = Sample(32767, 0)
ZERO = Sample(0, 0)
MINUS_J = Sample(0, -32767)


class TestButterflyExact:

    def test_zero_b_halves_a(self):
        bf = ButterflyUnit()
        a = Sample(32767, -32768)
        a_out, b_out = bf.compute(a, ZERO, MINUS_J)
        assert a_out == (16383, -16384)
        assert b_out == (16383, -16384)

    def test_shifts_are_arithmetic(self):
        """Both the product and the halving floor toward minus infinity."""
        bf = ButterflyUnit()
        a_out, b_out = bf.compute(ZERO, Sample(16384, 0), ONE)
        # 32767 * 16384 >> 15 = 16383 ; 16383 >> 1 = 8191 ; -16383 >> 1 = -8192
        assert a_out == (8191, 0)
        assert b_out == (-8192, 0)

    def test_multiply_by_minus_j(self):
        bf = ButterflyUnit()
        # -j * (0.5 + 0.25j) = 0.25 - 0.5j
        assert bf.multiply(MINUS_J, Sample(16384, 8192)) == (8191, -16384)

    def test_product_saturates_to_word(self):
        """A full-scale operand rotated by 45 degrees clips at the word limits."""
        bf = ButterflyUnit()
        w = Sample(23170, -23170)
        # -46340 and +46338 before clipping
        assert bf.multiply(w, Sample(-32768, -32768)) == (-32768, 0)
        assert bf.multiply(w, Sample(32767, 32767)) == (32767, 0)

    def test_saturated_product_keeps_sign(self):
        bf = ButterflyUnit()
        w = Sample(23170, -23170)
        a_out, b_out = bf.compute(ZERO, Sample(-32768, -32768), w)
        assert a_out == (-16384, 0)
        assert b_out == (16384, 0)

    def test_full_scale_sum_fits_word(self):
        bf = ButterflyUnit()
        a = Sample(32767, 32767)
        b = Sample(32767, 32767)
        a_out, b_out = bf.compute(a, b, ONE)
        # (32767 + 32766) >> 1 = 32766, (32767 - 32766) >> 1 = 0
        assert a_out == (32766, 32766)
        assert b_out == (0, 0)

    def test_operation_counter(self):
        bf = ButterflyUnit()
        for _ in range(5):
            bf.compute(ZERO, ZERO, ONE)
        assert bf.operations == 5
        bf.reset()
        assert bf.operations == 0


class TestButterflyFloat:

    def test_matches_float_butterfly(self):
        bf = ButterflyUnit()
        rng = np.random.default_rng(42)
        for _ in range(200):
            a = rng.integers(-16384, 16384, 2)
            b = rng.integers(-16384, 16384, 2)
            theta = rng.uniform(0, 2 * np.pi)
            w = np.round(np.array([np.cos(theta), -np.sin(theta)]) * 32767).astype(int)

            a_out, b_out = bf.compute(Sample(*map(int, a)), Sample(*map(int, b)), Sample(*map(int, w)))

            af = complex(*a) / 32768
            bfl = complex(*b) / 32768
            wf = complex(*w) / 32768
            exp_a = (af + wf * bfl) / 2
            exp_b = (af - wf * bfl) / 2
            tol = 1.5 / 32768
            assert abs(a_out.real / 32768 - exp_a.real) <= tol
            assert abs(a_out.imag / 32768 - exp_a.imag) <= tol
            assert abs(b_out.real / 32768 - exp_b.real) <= tol
            assert abs(b_out.imag / 32768 - exp_b.imag) <= tol
