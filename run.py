#!/usr/bin/env python3
"""
Main entry point for Spherical Blue Noise.

This script:
1. Initializes Taichi (CPU, f64)
2. Samples N white-noise points on the unit sphere
3. Relaxes them into blue noise
4. Prints run telemetry and the points as "x y z" lines

Usage:
    python run.py N [--seed S] [--exponent K] [--step ETA] [--decay R]
                    [--tolerance TOL] [--max-iterations M] [--debug-every D]
                    [--quiet]

Example:
    python run.py 64 --seed 7 --debug-every 100
"""

import argparse
import sys
import time

from analysis import summarize
from blue_noise import BlueNoiseSphere
from config import (
    FORCE_EXPONENT, INITIAL_STEP, DECAY_RATE, SCHEDULE, SCHEDULES, TOLERANCE,
    MAX_ITERATIONS, DEBUG_EVERY, InvalidArgumentError, RelaxationConfig,
)
from runtime import init_taichi


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Generate blue-noise points on the unit sphere')
    parser.add_argument('n', type=int, help='Number of points')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility (default: fresh entropy)')
    parser.add_argument('--exponent', type=float, default=FORCE_EXPONENT,
                        help=f'Force law exponent (default: {FORCE_EXPONENT})')
    parser.add_argument('--step', type=float, default=INITIAL_STEP,
                        help='Initial step size (default: derived from N)')
    parser.add_argument('--decay', type=float, default=DECAY_RATE,
                        help=f'Step decay rate (default: {DECAY_RATE})')
    parser.add_argument('--schedule', choices=SCHEDULES, default=SCHEDULE,
                        help=f'Step schedule (default: {SCHEDULE})')
    parser.add_argument('--tolerance', type=float, default=TOLERANCE,
                        help=f'Displacement tolerance (default: {TOLERANCE})')
    parser.add_argument('--max-iterations', type=int, default=MAX_ITERATIONS,
                        help=f'Iteration ceiling (default: {MAX_ITERATIONS})')
    parser.add_argument('--max-displacement', type=float, default=None,
                        help='Per-iteration displacement cap (default: derived from N)')
    parser.add_argument('--debug-every', type=int, default=DEBUG_EVERY,
                        help='Print relaxation telemetry every N iterations (default: off)')
    parser.add_argument('--quiet', action='store_true',
                        help='Print points only, no telemetry')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = RelaxationConfig(
            force_exponent=args.exponent,
            initial_step=args.step,
            decay_rate=args.decay,
            schedule=args.schedule,
            tolerance=args.tolerance,
            max_iterations=args.max_iterations,
            max_displacement=args.max_displacement,
            debug_every=0 if args.quiet else args.debug_every,
        )
        init_taichi(verbose=not args.quiet)

        t0 = time.perf_counter()
        sphere = BlueNoiseSphere(args.n, rng=args.seed, config=config)
        elapsed = time.perf_counter() - t0
    except InvalidArgumentError as e:
        print(f"[Error] {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        before = summarize(sphere.initial_points)
        after = summarize(sphere.points)
        print(f"[Run] N={sphere.n} state={sphere.state.value} "
              f"iterations={sphere.iterations} time={elapsed:.3f}s")
        print(f"[Run] min angle: {before['min_angle']:.4f} → {after['min_angle']:.4f} rad | "
              f"NN angle CV: {before['nn_angle_cv']:.3f} → {after['nn_angle_cv']:.3f}")

    for x, y, z in sphere:
        print(f"{x:.9f} {y:.9f} {z:.9f}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
