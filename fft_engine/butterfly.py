"""
butterfly.py

Radix-2 butterfly unit with per-stage scaling:

    A' = (A + W*B) / 2
    B' = (A - W*B) / 2

Integer datapath, bit for bit:
  * W*B is a double-width product, shifted right (arithmetically) by the
    word length minus one and saturated to one word.
  * A +/- W*B is formed one bit wider than a word and halved, so the
    result fits a word again without losing the carry.

The halving is what keeps nine cascaded stages of full-scale input from
overflowing; overall the transform comes out scaled by 1/N.
"""

from __future__ import annotations
from typing import NamedTuple

from .fixed_point_model import FixedPointConfig, saturate_int


class Sample(NamedTuple):
    real: int
    imag: int


class ButterflyUnit:
    """
    The single compute unit the controller reuses for every butterfly.
    `operations` counts invocations since construction or the last reset.
    """

    def __init__(self, cfg: FixedPointConfig | None = None):
        self.cfg = cfg or FixedPointConfig()
        self.operations = 0

    def reset(self) -> None:
        self.operations = 0

    def multiply(self, w: Sample, b: Sample) -> Sample:
        """W*B scaled back to one word, clipped at the word limits."""
        cfg = self.cfg
        shift = cfg.wl - 1
        re = (w.real * b.real - w.imag * b.imag) >> shift
        im = (w.real * b.imag + w.imag * b.real) >> shift
        return Sample(int(saturate_int(re, cfg)), int(saturate_int(im, cfg)))

    def compute(self, a: Sample, b: Sample, w: Sample) -> tuple[Sample, Sample]:
        wb = self.multiply(w, b)
        self.operations += 1
        a_out = Sample((a.real + wb.real) >> 1, (a.imag + wb.imag) >> 1)
        b_out = Sample((a.real - wb.real) >> 1, (a.imag - wb.imag) >> 1)
        return a_out, b_out
