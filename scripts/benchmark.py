"""
livescope per-block analysis benchmark.

Usage:
    python scripts/benchmark.py [--quick]

Modes:
    default  — block sizes 256…4096, 20 warm-up + 500 timed blocks each
    --quick  — block sizes 512 and 1024, 5 warm-up + 100 timed blocks

Output: timing table printed to stdout, with each block size's share of its
real-time budget (block duration at 44 100 Hz). Exits non-zero if any block
size takes longer to analyse than to play.
"""

import argparse
import os
import sys
import time
from typing import List

import numpy as np

# Make sure the installed package is on the path when run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from livescope.config import AnalysisConfig
from livescope.core.transform import BlockTransform

_SEP = "─" * 72
SAMPLE_RATE = 44100


def _hdr(title: str) -> None:
    print(f"\n{_SEP}")
    print(f"  {title}")
    print(_SEP)


def _timeit(fn, blocks: List[np.ndarray], warmup: int) -> List[float]:
    """Call fn on each block, discard the first ``warmup`` timings."""
    times = []
    for block in blocks:
        t0 = time.perf_counter()
        fn(block, SAMPLE_RATE)
        times.append(time.perf_counter() - t0)
    return times[warmup:]


def _stats(times: List[float]) -> str:
    arr = np.array(times)
    return (
        f"mean={arr.mean()*1e6:.0f} µs  p99={np.percentile(arr, 99)*1e6:.0f} µs"
        f"  max={arr.max()*1e6:.0f} µs"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="livescope block transform benchmark")
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Fewer block sizes and iterations for fast CI runs",
    )
    args = parser.parse_args()

    if args.quick:
        sizes = [512, 1024]
        WARMUP, RUNS = 5, 100
    else:
        sizes = [256, 512, 1024, 2048, 4096]
        WARMUP, RUNS = 20, 500

    print(f"\nlivescope Block Transform Benchmark  —  {SAMPLE_RATE} Hz")
    print(f"Warm-up blocks: {WARMUP}  |  Timed blocks: {RUNS}")

    rng = np.random.default_rng(0)
    results = {}

    for size in sizes:
        _hdr(f"block_size={size}")
        transform = BlockTransform(AnalysisConfig(block_size=size))
        blocks = [rng.uniform(-1, 1, size) for _ in range(WARMUP + RUNS)]
        t = _timeit(transform.apply, blocks, WARMUP)
        budget = size / SAMPLE_RATE
        results[size] = (float(np.mean(t)), budget)
        print(f"  {_stats(t)}")
        print(f"  budget={budget*1e3:.2f} ms  load={np.mean(t)/budget*100:.2f}%")

    _hdr("Summary")
    print(f"  {'Block':<8} {'Mean (µs)':>10} {'Budget (ms)':>12} {'Load':>8}")
    print(f"  {'-'*8} {'-'*10} {'-'*12} {'-'*8}")
    over = False
    for size, (mean, budget) in results.items():
        load = mean / budget
        over = over or load >= 1.0
        print(f"  {size:<8} {mean*1e6:>10.0f} {budget*1e3:>12.2f} {load*100:>7.2f}%")

    print(f"\n{_SEP}\n")
    if over:
        print("  !! Analysis slower than real time for at least one block size !!")
        sys.exit(1)


if __name__ == "__main__":
    main()
