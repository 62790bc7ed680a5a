# memfile.py
#
# Verilog $readmemh style files: one hex word per line, two's complement.
#
#   - scalar images (ROM contents): one wl-bit word per line
#   - sample images (engine input/output): one 2*wl-bit word per line,
#     upper half = real, lower half = imag

from __future__ import annotations
import numpy as np

from .fixed_point_model import FixedPointConfig, from_twos_complement, to_twos_complement


def _hex_digits(bits: int) -> int:
    return (bits + 3) // 4


def parse_hex_line(line: str) -> int | None:
    """Parse one hex word, allowing a 0x prefix and // comments."""
    line = line.split("//", 1)[0].strip()
    if not line:
        return None
    if line.lower().startswith("0x"):
        line = line[2:]
    return int(line, 16)


def write_mem_hex(filename: str, vals, cfg: FixedPointConfig) -> None:
    width = _hex_digits(cfg.wl)
    with open(filename, "w") as f:
        for v in vals:
            f.write(f"{to_twos_complement(int(v), cfg):0{width}X}\n")


def read_mem_hex(filename: str, cfg: FixedPointConfig) -> np.ndarray:
    vals = []
    with open(filename) as f:
        for line in f:
            word = parse_hex_line(line)
            if word is not None:
                vals.append(from_twos_complement(word, cfg))
    return np.array(vals, dtype=np.int64)


def pack_sample(real: int, imag: int, cfg: FixedPointConfig) -> int:
    return (to_twos_complement(real, cfg) << cfg.wl) | to_twos_complement(imag, cfg)


def unpack_sample(word: int, cfg: FixedPointConfig) -> tuple[int, int]:
    mask = (1 << cfg.wl) - 1
    return (
        from_twos_complement((word >> cfg.wl) & mask, cfg),
        from_twos_complement(word & mask, cfg),
    )


def read_samples(filename: str, cfg: FixedPointConfig) -> np.ndarray:
    """Load a packed sample image as an (n, 2) int64 array."""
    samples = []
    with open(filename) as f:
        for line in f:
            word = parse_hex_line(line)
            if word is not None:
                samples.append(unpack_sample(word, cfg))
    return np.array(samples, dtype=np.int64).reshape(-1, 2)


def write_samples(filename: str, samples: np.ndarray, cfg: FixedPointConfig) -> None:
    width = _hex_digits(2 * cfg.wl)
    with open(filename, "w") as f:
        for re, im in np.asarray(samples, dtype=np.int64):
            f.write(f"{pack_sample(int(re), int(im), cfg):0{width}X}\n")
