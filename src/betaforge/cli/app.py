"""Command-line interface for betaforge using argparse."""

from __future__ import annotations

import argparse
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from betaforge import __version__
from betaforge.exceptions import BetaForgeError
from betaforge.io.config_files import load_config_file
from betaforge.workflows.generator import SpectrumGenerator


@contextmanager
def run_logger(log_path: Optional[Path], verbose: bool = False) -> Iterator[logging.Logger]:
    """Console (and debug file) handlers on the package logger for one run."""
    log = logging.getLogger("betaforge")
    previous_level = log.level
    log.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter("%(message)s"))
    handlers = [console]
    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"))
        handlers.append(file_handler)
    for handler in handlers:
        log.addHandler(handler)
    try:
        yield log
    finally:
        for handler in handlers:
            log.removeHandler(handler)
            handler.close()
        log.setLevel(previous_level)


def cmd_run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.output:
        overrides["output"] = args.output
    if args.profile:
        overrides["profile"] = args.profile
    if args.domain_policy:
        overrides["domain_policy"] = args.domain_policy
    if args.exchange_data:
        overrides["exchangedata"] = str(args.exchange_data)

    config = load_config_file(args.config, overrides)
    args.output_dir.mkdir(parents=True, exist_ok=True)
    log_path = args.output_dir / f"{config.output}.log"

    with run_logger(log_path, verbose=args.verbose) as log:
        generator = SpectrumGenerator(config, output_dir=args.output_dir, logger=log)
        result = generator.run()

        if args.csv:
            result.spectrum.to_csv(args.csv)
            log.info(f"Spectrum exported to {args.csv}")
        if args.plot:
            from betaforge.plots.spectrum import plot_spectrum

            plot_spectrum(result.spectrum, neutrino=config.spectrum.neutrino, save_path=args.plot)
            log.info(f"Spectrum plot saved to {args.plot}")

    label = "log ft" if config.transition.partial_halflife is not None else "log f"
    print(f"Calculated {len(result.spectrum)} points up to {result.params.endpoint_kev:.3f} keV")
    if result.log_ft is not None:
        print(f"{label}: {result.log_ft:.4f}")
        print(f"Mean energy: {result.mean_energy_keV:.3f} keV")
    for kind, path in result.files.items():
        print(f"Wrote {kind} to {path}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    print(f"betaforge v{__version__}")
    print("Allowed and first-forbidden beta spectrum shapes with spectral corrections")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Beta decay spectrum generator")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Calculate a spectrum from a configuration file")
    run.add_argument("config", type=Path, help="INI, JSON or YAML configuration")
    run.add_argument("-o", "--output", help="Output base name (overrides the configuration)")
    run.add_argument("--output-dir", type=Path, default=Path("."))
    run.add_argument("--profile", choices=["standard", "legacy"])
    run.add_argument("--domain-policy", choices=["propagate", "clamp", "skip", "error"])
    run.add_argument("--exchange-data", type=Path, help="Exchange parameter file")
    run.add_argument("--csv", type=Path, help="Also export the spectrum as CSV")
    run.add_argument("--plot", type=Path, help="Save a spectrum plot")
    run.add_argument("-v", "--verbose", action="store_true")
    run.set_defaults(func=cmd_run)

    info = subparsers.add_parser("info", help="Show version information")
    info.set_defaults(func=cmd_info)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except BetaForgeError as e:
        print(f"error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
