# twiddle_rom.py
#
# Quarter-wave twiddle ROM and the table lookup used by the FFT
# controller:
#
#   W_N^k = cos(2*pi*k/N) - j*sin(2*pi*k/N),   k = 0..N-1
#
# Only N/4 (cos, sin) pairs are stored (first quadrant). The other three
# quadrants are rebuilt from the stored pair by a sign/swap rule, which
# is what the hardware's quadrant case statement does.

from __future__ import annotations
import logging
import os
from enum import IntEnum

import numpy as np

from .fixed_point_model import DEFAULT_CONFIG, FFTEngineConfig, saturate_int
from .memfile import write_mem_hex

logger = logging.getLogger(__name__)


class Quadrant(IntEnum):
    Q0 = 0
    Q1 = 1
    Q2 = 2
    Q3 = 3


# (real from sin?, real sign, imag sign)
_QUADRANT_RULES = {
    Quadrant.Q0: (False, +1, -1),   # ( cos, -sin)
    Quadrant.Q1: (True, -1, -1),    # (-sin, -cos)
    Quadrant.Q2: (False, -1, +1),   # (-cos,  sin)
    Quadrant.Q3: (True, +1, +1),    # ( sin,  cos)
}


def quadrant_correction(quadrant: Quadrant, cos_val: int, sin_val: int) -> tuple[int, int]:
    """Map a first-quadrant (cos, sin) pair onto the requested quadrant."""
    swap, re_sign, im_sign = _QUADRANT_RULES[quadrant]
    if swap:
        return re_sign * sin_val, im_sign * cos_val
    return re_sign * cos_val, im_sign * sin_val


def gen_quarter_wave(cfg: FFTEngineConfig = DEFAULT_CONFIG) -> tuple[np.ndarray, np.ndarray]:
    """
    cos/sin of i*2*pi/N for i = 0..N/4-1, rounded to nearest and
    saturated to the signed word range (cos(0) = 1.0 lands on max_int).
    """
    fp = cfg.fixed_point
    i = np.arange(cfg.rom_depth)
    theta = 2.0 * np.pi * i / cfg.n_points
    cos_q = saturate_int(np.round(np.cos(theta) * fp.scale), fp)
    sin_q = saturate_int(np.round(np.sin(theta) * fp.scale), fp)
    return cos_q, sin_q


class TwiddleTable:
    """
    Twiddle coefficients for a radix-2 DIT schedule of cfg.n_points.

    With inverse=True every coefficient is conjugated, which turns the
    same engine into an inverse transform (still scaled by 1/2 per stage).
    """

    def __init__(self, cfg: FFTEngineConfig = DEFAULT_CONFIG, inverse: bool = False):
        cfg.validate()
        self.cfg = cfg
        self.inverse = inverse
        self.cos_rom, self.sin_rom = gen_quarter_wave(cfg)
        self._quadrant_shift = cfg.rom_depth.bit_length() - 1
        logger.debug(
            "twiddle ROM built: depth=%d wl=%d inverse=%s",
            cfg.rom_depth, cfg.fixed_point.wl, inverse,
        )

    def angle_index(self, stage: int, butterfly_index: int) -> int:
        """
        Exponent k of W_N^k for a butterfly.

        At stage s the butterfly sits at position pos = index mod 2^s of
        its group and needs W_{2^(s+1)}^pos = W_N^(pos * 2^(stages-1-s)).
        """
        cfg = self.cfg
        if not 0 <= stage < cfg.stages:
            raise ValueError(f"stage must be in [0, {cfg.stages}), got {stage}")
        if not 0 <= butterfly_index < cfg.butterflies_per_stage:
            raise ValueError(
                f"butterfly_index must be in [0, {cfg.butterflies_per_stage}), "
                f"got {butterfly_index}"
            )
        pos = butterfly_index & ((1 << stage) - 1)
        return (pos << (cfg.stages - 1 - stage)) & (cfg.n_points - 1)

    def coefficient(self, angle_index: int) -> tuple[int, int]:
        """(real, imag) of W_N^angle_index in fixed point."""
        quadrant = Quadrant(angle_index >> self._quadrant_shift)
        base = angle_index & (self.cfg.rom_depth - 1)
        re, im = quadrant_correction(
            quadrant, int(self.cos_rom[base]), int(self.sin_rom[base])
        )
        if self.inverse:
            im = -im
        return re, im

    def lookup(self, stage: int, butterfly_index: int) -> tuple[int, int]:
        return self.coefficient(self.angle_index(stage, butterfly_index))

    def as_complex(self) -> np.ndarray:
        """All N coefficients as complex floats, for inspection and tests."""
        scale = self.cfg.fixed_point.scale
        vals = [self.coefficient(k) for k in range(self.cfg.n_points)]
        return np.array([complex(re, im) for re, im in vals]) / scale


def write_rom_files(
    out_dir: str = ".",
    cfg: FFTEngineConfig = DEFAULT_CONFIG,
) -> tuple[str, str]:
    """
    Write the quarter-wave ROM as two $readmemh images:
      twiddle_cos_<N>_q<frac>.mem, twiddle_sin_<N>_q<frac>.mem
    """
    fp = cfg.fixed_point
    cos_q, sin_q = gen_quarter_wave(cfg)
    suffix = f"{cfg.n_points}_q{fp.frac}"
    cos_path = os.path.join(out_dir, f"twiddle_cos_{suffix}.mem")
    sin_path = os.path.join(out_dir, f"twiddle_sin_{suffix}.mem")
    write_mem_hex(cos_path, cos_q, fp)
    write_mem_hex(sin_path, sin_q, fp)
    logger.info("wrote %s and %s (%d entries)", cos_path, sin_path, cfg.rom_depth)
    return cos_path, sin_path
