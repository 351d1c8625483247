#!/usr/bin/env python3
"""
Range-operator benchmark.

Times the closed-form range operators against the equivalent brute-force
computation on materialized index arrays (``np.intersect1d`` and friends),
and checks that both agree on every sampled input.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from indexarith import LinearRange, RangeExpression, cap, multi_index, plus, region, stretch


@dataclass
class BenchmarkResult:
    name: str
    closed_form_s: float
    brute_force_s: float
    iterations: int

    @property
    def speedup(self) -> float:
        if self.closed_form_s <= 0:
            return float("inf")
        return self.brute_force_s / self.closed_form_s


def build_ranges(
    *, count: int, span: int, max_step: int, seed: int
) -> List[Tuple[LinearRange, LinearRange]]:
    rng = np.random.default_rng(seed)
    pairs = []
    for _ in range(count):
        parts = []
        for _ in range(2):
            first = int(rng.integers(-span, span))
            last = int(rng.integers(-span, span))
            step = int(rng.integers(1, max_step + 1)) * (1 if rng.random() < 0.5 else -1)
            parts.append(LinearRange(first, step, last))
        pairs.append((parts[0], parts[1]))
    return pairs


def bench(fn: Callable[[], Any], *, iterations: int, warmup: int) -> float:
    timings = []
    for step in range(iterations + warmup):
        start = time.perf_counter()
        fn()
        elapsed = time.perf_counter() - start
        if step >= warmup:
            timings.append(elapsed)
    return min(timings)


def _brute_cap(a: LinearRange, b: LinearRange) -> np.ndarray:
    return np.intersect1d(a.to_array(), b.to_array(), assume_unique=True)


def _brute_shift(a: LinearRange, k: int) -> np.ndarray:
    return np.sort(a.to_array() + k)


def _brute_stretch(a: LinearRange, k: int) -> np.ndarray:
    pts = a.to_array()
    if pts.size == 0:
        return pts
    return np.arange(pts.min() - k, pts.max() + k + 1)


def check_agreement(pairs: Sequence[Tuple[LinearRange, LinearRange]], shift: int) -> None:
    for a, b in pairs:
        if not np.array_equal(cap(a, b).to_array(), _brute_cap(a, b)):
            raise AssertionError(f"cap({a!r}, {b!r}) disagrees with the brute-force result")
        if sorted(plus(a, shift)) != _brute_shift(a, shift).tolist():
            raise AssertionError(f"plus({a!r}, {shift}) disagrees with the brute-force result")
        unit = LinearRange(min(a.first, a.last), 1, max(a.first, a.last))
        if not unit.is_empty and list(stretch(unit, shift)) != _brute_stretch(unit, shift).tolist():
            raise AssertionError(f"stretch({unit!r}, {shift}) disagrees with the brute-force result")


def run_suite(
    pairs: Sequence[Tuple[LinearRange, LinearRange]],
    *,
    shift: int,
    iterations: int,
    warmup: int,
) -> List[BenchmarkResult]:
    cases = [
        (
            "cap",
            lambda: [cap(a, b) for a, b in pairs],
            lambda: [_brute_cap(a, b) for a, b in pairs],
        ),
        (
            "plus",
            lambda: [plus(a, shift) for a, _ in pairs],
            lambda: [_brute_shift(a, shift) for a, _ in pairs],
        ),
    ]

    grid = region(range(512), range(512))
    window = RangeExpression("(I ± k) ∩ R")
    points = [multi_index(i, j) for i in range(0, 512, 37) for j in range(0, 512, 41)]

    def brute_window():
        rows, cols = np.arange(512), np.arange(512)
        for point in points:
            i, j = point.indices
            rows[(rows >= i - shift) & (rows <= i + shift)]
            cols[(cols >= j - shift) & (cols <= j + shift)]

    cases.append(
        (
            "window",
            lambda: [window(I=point, k=shift, R=grid) for point in points],
            brute_window,
        )
    )

    results = []
    for name, closed, brute in cases:
        results.append(
            BenchmarkResult(
                name=name,
                closed_form_s=bench(closed, iterations=iterations, warmup=warmup),
                brute_force_s=bench(brute, iterations=iterations, warmup=warmup),
                iterations=iterations,
            )
        )
    return results


def format_results(results: Iterable[BenchmarkResult]) -> str:
    header = f"{'case':<8} {'closed (ms)':>12} {'brute (ms)':>12} {'iters':>8} {'speedup':>10}"
    rows = [header]
    for result in results:
        rows.append(
            f"{result.name:<8} {result.closed_form_s * 1e3:12.3f} "
            f"{result.brute_force_s * 1e3:12.3f} {result.iterations:8d} {result.speedup:10.2f}"
        )
    return "\n".join(rows)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark closed-form range operators against brute-force index sets."
    )
    parser.add_argument(
        "--count", type=int, default=200, help="Number of range pairs (default: 200)."
    )
    parser.add_argument(
        "--span", type=int, default=100_000, help="Bounds are drawn from [-span, span) (default: 100000)."
    )
    parser.add_argument(
        "--max-step", type=int, default=12, help="Largest absolute step (default: 12)."
    )
    parser.add_argument("--shift", type=int, default=3, help="Shift / stretch amount (default: 3).")
    parser.add_argument(
        "--seed", type=int, default=2024, help="Random seed for inputs (default: 2024)."
    )
    parser.add_argument(
        "--iterations", type=int, default=10, help="Timed iterations per case (default: 10)."
    )
    parser.add_argument(
        "--warmup", type=int, default=2, help="Warmup iterations to discard (default: 2)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    pairs = build_ranges(count=args.count, span=args.span, max_step=args.max_step, seed=args.seed)
    try:
        check_agreement(pairs, args.shift)
    except AssertionError as exc:
        print(f"[mismatch] {exc}", file=sys.stderr)
        return 1
    results = run_suite(pairs, shift=args.shift, iterations=args.iterations, warmup=args.warmup)
    print(format_results(results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
