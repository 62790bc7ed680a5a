# fixed_point_model.py
#
# Fixed-point configuration and integer helpers shared by the twiddle
# ROM, the butterfly unit and the FFT controller.
#
# Samples are carried as plain Python / numpy integers holding the
# two's-complement value of a Q(wl-1) word. The input port truncates
# (wraps) to one word; the butterfly product and the quantizers
# (float -> int, used only at the model's edges) saturate.

from __future__ import annotations
import numpy as np
from dataclasses import dataclass, field


# ---------------------------
# Configuration
# ---------------------------

@dataclass(frozen=True)
class FixedPointConfig:
    wl: int = 16      # total word length in bits (including sign)
    frac: int = 15    # fractional bits
    signed: bool = True

    @property
    def scale(self) -> int:
        return 1 << self.frac

    @property
    def min_int(self) -> int:
        if self.signed:
            return -(1 << (self.wl - 1))
        return 0

    @property
    def max_int(self) -> int:
        if self.signed:
            return (1 << (self.wl - 1)) - 1
        return (1 << self.wl) - 1

    @property
    def lsb(self) -> float:
        """Weight of one least significant bit."""
        return 1.0 / self.scale

    def validate(self) -> None:
        if self.wl < 2:
            raise ValueError(f"word length must be >= 2, got {self.wl}")
        if not 0 <= self.frac < self.wl:
            raise ValueError(f"frac must be in [0, {self.wl}), got {self.frac}")


@dataclass(frozen=True)
class FFTEngineConfig:
    """
    Build-time constants of one FFT engine instance.

    Everything the controller needs (stage count, ROM depth, which bank
    ends up holding the result) is derived from the transform size, so a
    different power-of-two size re-derives the bank parity instead of
    assuming nine stages.
    """
    n_points: int = 512
    fixed_point: FixedPointConfig = field(default_factory=FixedPointConfig)

    @property
    def stages(self) -> int:
        return self.n_points.bit_length() - 1

    @property
    def butterflies_per_stage(self) -> int:
        return self.n_points // 2

    @property
    def rom_depth(self) -> int:
        return self.n_points // 4

    @property
    def final_bank(self) -> int:
        # Bank A is written by LOAD and every stage flips the bank, so an
        # odd stage count leaves the result in bank B.
        return self.stages & 1

    @property
    def compute_steps(self) -> int:
        # read/compute + write for every butterfly
        return 2 * self.stages * self.butterflies_per_stage

    def validate(self) -> None:
        self.fixed_point.validate()
        fp = self.fixed_point
        if fp.frac != fp.wl - 1:
            raise ValueError(f"engine words are Q{fp.wl - 1}, got frac={fp.frac}")
        n = self.n_points
        if n < 4 or n & (n - 1) != 0:
            raise ValueError(f"n_points must be a power of 2 and >= 4, got {n}")


DEFAULT_CONFIG = FFTEngineConfig()


# ---------------------------
# Integer helpers
# ---------------------------

def wrap_int(x: int, cfg: FixedPointConfig) -> int:
    """
    Truncate an integer to cfg.wl bits, two's complement, the way a
    narrower register drops the upper bits of a wider result.
    """
    mask = (1 << cfg.wl) - 1
    x &= mask
    if cfg.signed and x > cfg.max_int:
        x -= 1 << cfg.wl
    return x


def saturate_int(x: np.ndarray | int, cfg: FixedPointConfig) -> np.ndarray:
    x = np.asarray(x, dtype=np.int64)
    return np.clip(x, cfg.min_int, cfg.max_int).astype(np.int64)


def to_twos_complement(v: int, cfg: FixedPointConfig) -> int:
    """Signed value -> unsigned wl-bit word."""
    return int(v) & ((1 << cfg.wl) - 1)


def from_twos_complement(word: int, cfg: FixedPointConfig) -> int:
    """Unsigned wl-bit word -> signed value."""
    return wrap_int(int(word), cfg)


# ---------------------------
# Quantization (model edges only)
# ---------------------------

def quantize_real(x: np.ndarray | float, cfg: FixedPointConfig) -> np.ndarray:
    """
    Quantize real values to fixed-point integers using round-to-nearest
    and saturation.
    """
    x = np.asarray(x, dtype=float)
    val = np.round(x * cfg.scale).astype(np.int64)
    return saturate_int(val, cfg)


def dequantize_real(q: np.ndarray | int, cfg: FixedPointConfig) -> np.ndarray:
    """
    Convert fixed-point integers back to float using cfg.frac.
    """
    q = np.asarray(q, dtype=np.int64)
    return q.astype(float) / cfg.scale


def quantize_complex(z: np.ndarray | complex, cfg: FixedPointConfig) -> np.ndarray:
    """
    Quantize complex float(s) to an integer array with a trailing
    (real, imag) axis, i.e. shape z.shape + (2,).
    """
    z = np.asarray(z, dtype=complex)
    return np.stack([quantize_real(z.real, cfg), quantize_real(z.imag, cfg)], axis=-1)


def dequantize_complex(zq: np.ndarray, cfg: FixedPointConfig) -> np.ndarray:
    """
    Inverse of quantize_complex: (..., 2) integers -> complex floats.
    """
    zq = np.asarray(zq, dtype=np.int64)
    return dequantize_real(zq[..., 0], cfg) + 1j * dequantize_real(zq[..., 1], cfg)
