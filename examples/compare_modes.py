"""Example: run every REPET mode on one file and save the backgrounds.

Usage
-----
``uv run python examples/compare_modes.py mixture.wav --output-dir outputs/compare``

Without an input file, a synthetic mixture (looped noise plus a sparse
foreground) is generated and separated instead.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import time
from typing import Sequence

import numpy as np
import soundfile as sf

from repetkit import MODES, load_config, run_separation

LOGGER = logging.getLogger("compare_modes")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Separate one mixture with every REPET mode.",
    )
    parser.add_argument("input_wav", type=Path, nargs="?", help="Path to input WAV.")
    parser.add_argument("--output-dir", type=Path, default=Path("outputs/compare"))
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        help="Config override in key=value form.",
    )
    return parser.parse_args(argv)


def synthetic_mixture(
    sample_rate: int = 16000, seconds: float = 12.0, seed: int = 0
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(mixture, background)`` with a 1.5 s noise loop."""
    rng = np.random.default_rng(seed)
    n_samples = int(seconds * sample_rate)
    loop = rng.standard_normal(int(1.5 * sample_rate))
    background = np.resize(loop, n_samples)
    foreground = np.zeros(n_samples)
    for start in rng.integers(0, n_samples - sample_rate // 4, size=8):
        t = np.arange(sample_rate // 4) / sample_rate
        foreground[start : start + t.size] += np.sin(2 * np.pi * 880.0 * t)
    return 0.3 * (background + foreground), 0.3 * background


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = _parse_args(argv)
    config = load_config(overrides=args.set)

    if args.input_wav is None:
        sample_rate = 16000
        mixture, reference = synthetic_mixture(sample_rate)
    else:
        mixture, sample_rate = sf.read(str(args.input_wav), dtype="float64")
        reference = None

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    for mode in MODES:
        start = time.perf_counter()
        output = run_separation(mixture, sample_rate, mode=mode, config=config)
        elapsed = time.perf_counter() - start
        background = output.estimate_time
        sf.write(str(out_dir / f"{mode}_background.wav"), background, sample_rate)
        if reference is not None:
            error = np.sum((background - reference) ** 2) / np.sum(reference**2)
            LOGGER.info("%-10s %.2fs  relative error %.3f", mode, elapsed, error)
        else:
            LOGGER.info("%-10s %.2fs", mode, elapsed)


if __name__ == "__main__":
    main()
