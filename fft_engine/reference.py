# reference.py
#
# Floating-point references and error metrics for the fixed-point engine.
#
# The engine halves at every stage, so its output is compared against
# the DFT scaled by 1/N rather than the plain DFT.

from __future__ import annotations
import numpy as np


def dft_matrix(N: int, inverse: bool = False) -> np.ndarray:
    """N x N DFT matrix, W[k, n] = exp(-+ j*2*pi*k*n/N)."""
    sign = 1.0 if inverse else -1.0
    n = np.arange(N)
    return np.exp(sign * 2j * np.pi * np.outer(n, n) / N)


def dft_reference(x: np.ndarray, inverse: bool = False) -> np.ndarray:
    """
    Direct double-precision DFT of x, scaled by 1/N to match the
    engine's per-stage halving.
    """
    x = np.asarray(x, dtype=complex)
    if x.ndim != 1:
        raise ValueError("x must be a 1-D array")
    N = x.shape[0]
    return dft_matrix(N, inverse=inverse) @ x / N


def max_abs_error(ref: np.ndarray, test: np.ndarray) -> float:
    """Largest per-component (real or imag) deviation."""
    d = np.asarray(test, dtype=complex) - np.asarray(ref, dtype=complex)
    return float(max(np.max(np.abs(d.real)), np.max(np.abs(d.imag))))


def sqnr_db(ref: np.ndarray, test: np.ndarray) -> float:
    """
    Signal-to-quantization-noise ratio of `test` against `ref`, in dB.
    """
    eps = 1e-20
    ref = np.asarray(ref, dtype=complex)
    noise_power = np.mean(np.abs(np.asarray(test, dtype=complex) - ref) ** 2)
    signal_power = np.mean(np.abs(ref) ** 2) + eps
    return float(10 * np.log10(signal_power / (noise_power + eps)))


def random_batch(
    N: int = 512,
    amplitude: float = 0.5,
    seed: int | None = None,
) -> np.ndarray:
    """
    Complex test vector with real and imag uniform in [-amplitude, amplitude).

    Keep amplitude <= 0.5 for the error bounds to hold: a full-scale
    complex operand times a 45-degree twiddle does not fit one word.
    """
    rng = np.random.default_rng(seed)
    re = rng.uniform(-amplitude, amplitude, N)
    im = rng.uniform(-amplitude, amplitude, N)
    return re + 1j * im
