#!/usr/bin/env python3

'''
Command line front-end for the fixed-point FFT engine model.

  fft-engine rom   --outdir DIR             write the quarter-wave ROM images
  fft-engine run   INPUT.mem OUTPUT.mem     transform a packed sample image
  fft-engine check [--seed S]               compare against the float DFT
'''

from __future__ import annotations
import argparse
import logging

from .controller import FFTController, fft_fixed
from .fixed_point_model import FFTEngineConfig, FixedPointConfig
from .memfile import read_samples, write_samples
from .reference import dft_reference, max_abs_error, random_batch, sqnr_db
from .twiddle_rom import write_rom_files


def _config(args: argparse.Namespace) -> FFTEngineConfig:
    fp = FixedPointConfig(wl=args.width, frac=args.width - 1)
    cfg = FFTEngineConfig(n_points=args.points, fixed_point=fp)
    cfg.validate()
    return cfg


def cmd_rom(args: argparse.Namespace) -> int:
    cos_path, sin_path = write_rom_files(args.outdir, _config(args))
    print(f"Generated {cos_path} and {sin_path}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    cfg = _config(args)
    samples = read_samples(args.input, cfg.fixed_point)
    if len(samples) != cfg.n_points:
        raise SystemExit(
            f"{args.input}: expected {cfg.n_points} samples, found {len(samples)}"
        )
    result = FFTController(cfg, inverse=args.inverse).transform(samples)
    write_samples(args.output, result, cfg.fixed_point)
    print(f"Wrote {cfg.n_points} results to {args.output}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    cfg = _config(args)
    x = random_batch(cfg.n_points, amplitude=args.amplitude, seed=args.seed)
    y = fft_fixed(x, cfg, inverse=args.inverse)
    ref = dft_reference(x, inverse=args.inverse)
    lsb = cfg.fixed_point.lsb
    err = max_abs_error(ref, y)
    print(f"N={cfg.n_points} wl={cfg.fixed_point.wl} inverse={args.inverse}")
    print(f"max error = {err / lsb:.2f} LSB")
    print("SQNR ≈ %.2f dB" % sqnr_db(ref, y))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fft-engine",
        description="Bit-accurate model of a fixed-point radix-2 FFT engine.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for INFO, -vv for DEBUG logging")
    parser.add_argument("--points", type=int, default=512,
                        help="FFT length, power of 2 (default: 512)")
    parser.add_argument("--width", type=int, default=16,
                        help="sample word length in bits, Q(width-1) (default: 16)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_rom = sub.add_parser("rom", help="write twiddle ROM .mem files")
    p_rom.add_argument("--outdir", default=".", help="output directory")
    p_rom.set_defaults(func=cmd_rom)

    p_run = sub.add_parser("run", help="transform a packed sample .mem file")
    p_run.add_argument("input")
    p_run.add_argument("output")
    p_run.add_argument("--inverse", action="store_true", help="conjugate twiddles")
    p_run.set_defaults(func=cmd_run)

    p_check = sub.add_parser("check", help="compare against the float DFT")
    p_check.add_argument("--seed", type=int, default=0)
    p_check.add_argument("--amplitude", type=float, default=0.5)
    p_check.add_argument("--inverse", action="store_true")
    p_check.set_defaults(func=cmd_check)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
