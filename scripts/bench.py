#!/usr/bin/env python3
"""
Benchmark script for Spherical Blue Noise - Reproducible Performance Testing
============================================================================

Relaxes point sets of several sizes with a deterministic seed and reports:
- Time per iteration (force kernel dominates: N·(N-1) pair evaluations)
- Iterations to terminal state and which terminal state was reached
- Separation quality before/after (min angle, NN-angle coefficient of variation)

Usage:
    python scripts/bench.py [--sizes N [N ...]] [--seed S] [--max-iterations M]

Example:
    python scripts/bench.py --sizes 64 256 1024 --seed 42
"""

import sys
import os
import time
import argparse
import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from analysis import summarize
from blue_noise import BlueNoiseSphere
from config import RelaxationConfig, MAX_ITERATIONS
from runtime import init_taichi


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Benchmark spherical blue noise relaxation')
    parser.add_argument('--sizes', type=int, nargs='+', default=[64, 256, 1024],
                        help='Point counts to benchmark (default: 64 256 1024)')
    parser.add_argument('--seed', type=int, default=42,
                        help='Random seed for reproducibility (default: 42)')
    parser.add_argument('--max-iterations', type=int, default=MAX_ITERATIONS,
                        help=f'Iteration ceiling (default: {MAX_ITERATIONS})')
    parser.add_argument('--repeats', type=int, default=1,
                        help='Runs per size; timings are averaged (default: 1)')
    return parser.parse_args()


def bench_size(n, seed, config, repeats):
    """
    Relax n points `repeats` times and collect timings.

    Args:
        n: point count
        seed: base seed (run k uses seed + k)
        config: RelaxationConfig
        repeats: number of runs

    Returns:
        Dictionary with benchmark results for this size
    """
    times = []
    iters = []
    sphere = None
    for k in range(repeats):
        t0 = time.perf_counter()
        sphere = BlueNoiseSphere(n, rng=seed + k, config=config)
        times.append(time.perf_counter() - t0)
        iters.append(sphere.iterations)

    before = summarize(sphere.initial_points)
    after = summarize(sphere.points)
    avg_time = float(np.mean(times))
    avg_iters = float(np.mean(iters))

    return {
        'n': n,
        'avg_time_s': avg_time,
        'avg_iterations': avg_iters,
        'ms_per_iteration': 1000.0 * avg_time / max(avg_iters, 1.0),
        'state': sphere.state.value,
        'min_angle_before': before['min_angle'],
        'min_angle_after': after['min_angle'],
        'cv_before': before['nn_angle_cv'],
        'cv_after': after['nn_angle_cv'],
    }


def run_benchmark(args):
    """
    Run benchmark over all requested sizes.

    Args:
        args: Parsed command line arguments

    Returns:
        List of per-size result dictionaries
    """
    print(f"\n{'='*70}")
    print(f"SPHERICAL BLUE NOISE BENCHMARK")
    print(f"{'='*70}\n")

    config = RelaxationConfig(max_iterations=args.max_iterations)

    print(f"Configuration:")
    print(f"  Sizes:          {args.sizes}")
    print(f"  Seed:           {args.seed}")
    print(f"  Repeats:        {args.repeats}")
    for key, value in config.as_dict().items():
        print(f"  {key + ':':<16}{value}")
    print(f"\n")

    init_taichi(verbose=True)

    # Warm-up (first launch pays for JIT compilation)
    BlueNoiseSphere(8, rng=args.seed, config=config.replace(max_iterations=2))
    print(f"[Bench] Warm-up complete\n")

    results = []
    for n in args.sizes:
        r = bench_size(n, args.seed, config, args.repeats)
        results.append(r)
        print(f"  N={n:6d}: {r['avg_time_s']:8.3f}s  {r['avg_iterations']:7.1f} iters  "
              f"{r['ms_per_iteration']:8.3f} ms/iter  [{r['state']}]")

    print(f"\n{'='*70}")
    print(f"BENCHMARK RESULTS")
    print(f"{'='*70}\n")

    print(f"Separation quality (white noise → blue noise):")
    for r in results:
        print(f"  N={r['n']:6d}: min angle {r['min_angle_before']:.4f} → {r['min_angle_after']:.4f} rad | "
              f"NN CV {r['cv_before']:.3f} → {r['cv_after']:.3f}")
    print(f"\n")

    return results


def main():
    """Main entry point."""
    args = parse_args()
    run_benchmark(args)

    print(f"Benchmark complete!")
    print(f"{'='*70}\n")

    return 0


if __name__ == '__main__':
    sys.exit(main())
