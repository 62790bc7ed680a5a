"""
Bit-accurate software model of a fixed-point radix-2 FFT engine.

Quick start:
    from fft_engine import FFTController, fft_fixed

    y = fft_fixed(x)                   # ~ np.fft.fft(x) / 512

    eng = FFTController()
    eng.start()
    for addr, (re, im) in enumerate(samples_q15):
        eng.load(re, im, addr)
    while not eng.done:
        port = eng.clock()
"""

__version__ = "0.1.0"

from .fixed_point_model import (
    DEFAULT_CONFIG,
    FFTEngineConfig,
    FixedPointConfig,
    dequantize_complex,
    dequantize_real,
    quantize_complex,
    quantize_real,
)
from .twiddle_rom import Quadrant, TwiddleTable, gen_quarter_wave, write_rom_files
from .butterfly import ButterflyUnit, Sample
from .controller import (
    FFTController,
    OutputPort,
    State,
    bit_reverse,
    bit_reverse9,
    butterfly_addresses,
    fft_fixed,
)
from .reference import dft_reference, max_abs_error, sqnr_db

__all__ = [
    "__version__",
    "DEFAULT_CONFIG",
    "FFTEngineConfig",
    "FixedPointConfig",
    "quantize_real",
    "dequantize_real",
    "quantize_complex",
    "dequantize_complex",
    "Quadrant",
    "TwiddleTable",
    "gen_quarter_wave",
    "write_rom_files",
    "ButterflyUnit",
    "Sample",
    "FFTController",
    "OutputPort",
    "State",
    "bit_reverse",
    "bit_reverse9",
    "butterfly_addresses",
    "fft_fixed",
    "dft_reference",
    "max_abs_error",
    "sqnr_db",
]
