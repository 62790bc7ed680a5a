"""
controller.py

FFT controller: a four-phase state machine that drives one butterfly
unit through every butterfly of a radix-2 decimation-in-time FFT.

    IDLE --start()--> LOAD --address N-1--> COMPUTE --last stage--> OUTPUT --address N-1--> IDLE

  LOAD     input triples are written to bank A at their bit-reversed address
  COMPUTE  stage s reads bank (s & 1) and writes the other bank; each
           butterfly takes two clocks: read + compute, then write
  OUTPUT   one result per clock, natural order, from the final bank;
           the last one carries the `done` pulse

The two banks live in one (2, N, 2) arena indexed by stage parity.

NOTE:
  - Clock-level, not cycle-exact: one `clock()` is one internal step.
  - Sequencing mistakes by the caller (missing or repeated addresses,
    restarting mid-batch) are not detected; results are then undefined.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .butterfly import ButterflyUnit, Sample
from .fixed_point_model import (
    DEFAULT_CONFIG,
    FFTEngineConfig,
    dequantize_complex,
    quantize_complex,
    wrap_int,
)
from .twiddle_rom import TwiddleTable

logger = logging.getLogger(__name__)


class State(Enum):
    IDLE = "idle"
    LOAD = "load"
    COMPUTE = "compute"
    OUTPUT = "output"


@dataclass
class OutputPort:
    """What the output port shows after one clock."""
    real: int = 0
    imag: int = 0
    address: int = 0
    valid: bool = False
    done: bool = False


# ---------------------------------------------------------------------
# Addressing
# ---------------------------------------------------------------------

def bit_reverse(addr: int, bits: int) -> int:
    """Mirror the low `bits` bits of addr: output bit i = input bit bits-1-i."""
    if not 0 <= addr < (1 << bits):
        raise ValueError(f"address {addr} does not fit in {bits} bits")
    rev = 0
    for _ in range(bits):
        rev = (rev << 1) | (addr & 1)
        addr >>= 1
    return rev


def bit_reverse9(addr: int) -> int:
    return bit_reverse(addr, 9)


def butterfly_addresses(stage: int, butterfly_index: int) -> tuple[int, int]:
    """
    Operand addresses of a butterfly. Group size is 2^(stage+1), stride
    2^stage; butterfly_index splits into (group, position in group).
    """
    stride = 1 << stage
    group = butterfly_index >> stage
    pos = butterfly_index & (stride - 1)
    addr_a = group * (stride << 1) + pos
    return addr_a, addr_a + stride


# ---------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------

class FFTController:

    def __init__(self, cfg: FFTEngineConfig = DEFAULT_CONFIG, inverse: bool = False):
        cfg.validate()
        self.cfg = cfg
        self.twiddles = TwiddleTable(cfg, inverse=inverse)
        self.butterfly = ButterflyUnit(cfg.fixed_point)
        self._banks = np.zeros((2, cfg.n_points, 2), dtype=np.int64)
        self.reset()

    # -- control port ---------------------------------------------------

    @property
    def busy(self) -> bool:
        return self.state is not State.IDLE

    @property
    def read_bank(self) -> int:
        return self.stage & 1

    @property
    def write_bank(self) -> int:
        return self.read_bank ^ 1

    def reset(self) -> None:
        """Back to IDLE from anywhere; in-flight data is discarded."""
        self.state = State.IDLE
        self.stage = 0
        self.butterfly_index = 0
        self.out_address = 0
        self.compute_steps = 0
        self.done = False
        self._pending = None
        self._banks[:] = 0
        self.butterfly.reset()

    def start(self) -> bool:
        """Begin a batch. Only effective from IDLE; returns whether it was taken."""
        if self.busy:
            logger.warning("start ignored, engine busy in %s", self.state.name)
            return False
        self.stage = 0
        self.butterfly_index = 0
        self.out_address = 0
        self.done = False
        self.butterfly.reset()
        self._enter(State.LOAD)
        return True

    # -- input port -----------------------------------------------------

    def load(self, real: int, imag: int, natural_address: int) -> bool:
        """
        Write one input sample into bank A at its bit-reversed address.
        The sample with the last address ends LOAD.
        """
        if self.state is not State.LOAD:
            logger.warning(
                "sample for address %d dropped, engine in %s",
                natural_address, self.state.name,
            )
            return False
        fp = self.cfg.fixed_point
        addr = bit_reverse(natural_address, self.cfg.stages)
        self._banks[0, addr, 0] = wrap_int(int(real), fp)
        self._banks[0, addr, 1] = wrap_int(int(imag), fp)
        if natural_address == self.cfg.n_points - 1:
            self.compute_steps = 0
            self._enter(State.COMPUTE)
        return True

    # -- clock ----------------------------------------------------------

    def clock(self) -> OutputPort:
        """Advance one internal step and return the output port."""
        self.done = False
        if self.state is State.COMPUTE:
            self._compute_step()
        elif self.state is State.OUTPUT:
            return self._output_step()
        return OutputPort()

    def _compute_step(self) -> None:
        if self._pending is None:
            addr_a, addr_b = butterfly_addresses(self.stage, self.butterfly_index)
            src = self._banks[self.read_bank]
            a = Sample(int(src[addr_a, 0]), int(src[addr_a, 1]))
            b = Sample(int(src[addr_b, 0]), int(src[addr_b, 1]))
            w = Sample(*self.twiddles.lookup(self.stage, self.butterfly_index))
            a_out, b_out = self.butterfly.compute(a, b, w)
            self._pending = (addr_a, addr_b, a_out, b_out)
        else:
            addr_a, addr_b, a_out, b_out = self._pending
            dst = self._banks[self.write_bank]
            dst[addr_a] = a_out
            dst[addr_b] = b_out
            self._pending = None
            self._next_butterfly()
        self.compute_steps += 1

    def _next_butterfly(self) -> None:
        self.butterfly_index += 1
        if self.butterfly_index < self.cfg.butterflies_per_stage:
            return
        self.butterfly_index = 0
        self.stage += 1
        logger.debug("stage %d finished", self.stage - 1)
        if self.stage == self.cfg.stages:
            self.out_address = 0
            self._enter(State.OUTPUT)

    def _output_step(self) -> OutputPort:
        addr = self.out_address
        bank = self._banks[self.cfg.final_bank]
        port = OutputPort(int(bank[addr, 0]), int(bank[addr, 1]), addr, valid=True)
        self.out_address += 1
        if addr == self.cfg.n_points - 1:
            port.done = True
            self.done = True
            self._enter(State.IDLE)
            logger.debug(
                "batch done after %d compute steps, %d butterflies",
                self.compute_steps, self.butterfly.operations,
            )
        return port

    def _enter(self, state: State) -> None:
        logger.debug("%s -> %s", self.state.name, state.name)
        self.state = state

    # -- batch driver ---------------------------------------------------

    def transform(self, samples: np.ndarray) -> np.ndarray:
        """
        Run one full batch: start, load in natural order, clock until done.

        samples: (N, 2) integer array of (real, imag) words.
        Returns the (N, 2) integer result in natural order.
        """
        n = self.cfg.n_points
        samples = np.asarray(samples, dtype=np.int64)
        if samples.shape != (n, 2):
            raise ValueError(f"expected samples of shape ({n}, 2), got {samples.shape}")
        if not self.start():
            raise RuntimeError("engine is busy with another batch")

        for addr, (re, im) in enumerate(samples):
            self.load(int(re), int(im), addr)

        out = np.zeros((n, 2), dtype=np.int64)
        for _ in range(self.cfg.compute_steps + n):
            port = self.clock()
            if port.valid:
                out[port.address] = (port.real, port.imag)
            if port.done:
                return out
        raise RuntimeError("batch did not complete")  # unreachable for a full load


def fft_fixed(
    x: np.ndarray,
    cfg: FFTEngineConfig = DEFAULT_CONFIG,
    inverse: bool = False,
) -> np.ndarray:
    """
    Float in, float out: quantize x to the engine word, run one batch and
    dequantize.

    Every stage halves, so the forward result approximates
    np.fft.fft(x) / N and the inverse one np.fft.ifft(x).
    """
    fp = cfg.fixed_point
    xq = quantize_complex(np.asarray(x, dtype=complex), fp)
    yq = FFTController(cfg, inverse=inverse).transform(xq)
    return dequantize_complex(yq, fp)
