"""
Tests for the quarter-wave twiddle ROM and table lookup.

Verifies:
1. ROM content is the rounded first quadrant of cos/sin
2. Quadrant sign/swap rules rebuild all N coefficients
3. Every coefficient has unit magnitude within rounding
4. Stage/butterfly -> twiddle exponent mapping
"""

import numpy as np
import pytest

from fft_engine.fixed_point_model import FFTEngineConfig
from fft_engine.twiddle_rom import Quadrant, TwiddleTable, gen_quarter_wave, quadrant_correction


LSB = 1.0 / 32768


@pytest.fixture(scope="module")
def table():
    return TwiddleTable()


class TestQuarterWaveRom:

    def test_depth(self):
        cos_q, sin_q = gen_quarter_wave()
        assert len(cos_q) == 128
        assert len(sin_q) == 128

    def test_known_entries(self):
        cos_q, sin_q = gen_quarter_wave()
        # cos(0) = 1.0 saturates to the largest Q15 value
        assert cos_q[0] == 32767
        assert sin_q[0] == 0
        # pi/4
        assert cos_q[64] == 23170
        assert sin_q[64] == 23170

    def test_matches_analytic(self):
        cos_q, sin_q = gen_quarter_wave()
        theta = np.arange(128) * np.pi / 256
        np.testing.assert_allclose(cos_q / 32768, np.cos(theta), atol=1.0 * LSB)
        np.testing.assert_allclose(sin_q / 32768, np.sin(theta), atol=0.5 * LSB)


class TestQuadrants:

    def test_dispatch_rules(self):
        c, s = 3, 5
        assert quadrant_correction(Quadrant.Q0, c, s) == (3, -5)
        assert quadrant_correction(Quadrant.Q1, c, s) == (-5, -3)
        assert quadrant_correction(Quadrant.Q2, c, s) == (-3, 5)
        assert quadrant_correction(Quadrant.Q3, c, s) == (5, 3)

    def test_quadrant_boundaries(self, table):
        assert table.coefficient(0) == (32767, 0)      # 1
        assert table.coefficient(128) == (0, -32767)   # -j
        assert table.coefficient(256) == (-32767, 0)   # -1
        assert table.coefficient(384) == (0, 32767)    # +j

    def test_all_coefficients_match_exp(self, table):
        k = np.arange(512)
        expected = np.exp(-2j * np.pi * k / 512)
        w = table.as_complex()
        np.testing.assert_allclose(w.real, expected.real, atol=1.0 * LSB)
        np.testing.assert_allclose(w.imag, expected.imag, atol=1.0 * LSB)

    def test_unit_magnitude_for_every_butterfly(self, table):
        for stage in range(9):
            for b in range(256):
                re, im = table.lookup(stage, b)
                mag = np.hypot(re, im) / 32768
                assert abs(mag - 1.0) <= 2 * LSB, (stage, b, re, im)

    def test_inverse_is_conjugate(self, table):
        inv = TwiddleTable(inverse=True)
        for k in range(0, 512, 7):
            re, im = table.coefficient(k)
            assert inv.coefficient(k) == (re, -im)


class TestAngleIndex:

    def test_stage0_is_always_unity(self, table):
        for b in range(256):
            assert table.angle_index(0, b) == 0
            assert table.lookup(0, b) == (32767, 0)

    def test_stage1_alternates(self, table):
        assert [table.angle_index(1, b) for b in range(4)] == [0, 128, 0, 128]

    def test_last_stage_walks_half_circle(self, table):
        assert [table.angle_index(8, b) for b in range(256)] == list(range(256))

    def test_middle_stage(self, table):
        # stage 3: position within a group of 16 is b mod 8, step 2^5
        assert table.angle_index(3, 13) == 5 * 32

    def test_out_of_range(self, table):
        with pytest.raises(ValueError):
            table.lookup(9, 0)
        with pytest.raises(ValueError):
            table.lookup(0, 256)

    def test_small_table(self):
        """A 16-point table keeps 4 ROM entries and the same quadrant rules."""
        t = TwiddleTable(FFTEngineConfig(n_points=16))
        assert len(t.cos_rom) == 4
        expected = np.exp(-2j * np.pi * np.arange(16) / 16)
        np.testing.assert_allclose(t.as_complex(), expected, atol=2 * LSB)
