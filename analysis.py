"""
Quality metrics for point sets on the unit sphere.

Blue noise is judged by how well separated the points are:
- nearest-neighbour angle per point (and its minimum over the set)
- Riesz s-energy (the quantity the relaxation lowers)
- unit-norm error (sanity check on the projector)

All pair scans are exact O(N²) Taichi kernels over (N, 3) float64 arrays.
"""

import math

import numpy as np
import taichi as ti

from runtime import init_taichi
from vec3 import load3, norm

Points = ti.types.ndarray(dtype=ti.f64, ndim=2)
Values = ti.types.ndarray(dtype=ti.f64, ndim=1)

# ==============================================================================
# Kernels
# ==============================================================================

@ti.kernel
def nearest_neighbor_kernel(pos: Points, nn_angle: Values, n: ti.i32):
    """Angle (radians) from each point to its closest other point."""
    for i in range(n):
        pi = load3(pos, i)
        best = -1.0  # max cosine seen so far
        for j in range(n):
            if j != i:
                best = ti.max(best, pi.dot(load3(pos, j)))
        nn_angle[i] = ti.acos(ti.min(1.0, ti.max(-1.0, best)))


@ti.kernel
def riesz_energy_kernel(pos: Points, n: ti.i32, s: ti.f64, min_dist: ti.f64) -> ti.f64:
    """
    Sum over pairs i < j of 1/d^s (s > 0) or -log d (s == 0).

    d is the chord distance, clamped at min_dist.
    """
    total = 0.0
    for i in range(n):
        pi = load3(pos, i)
        for j in range(i + 1, n):
            d = ti.max((pi - load3(pos, j)).norm(), min_dist)
            e = 0.0
            if s > 0.0:
                e = 1.0 / ti.pow(d, s)
            else:
                e = -ti.log(d)
            total += e
    return total


# ==============================================================================
# Python-scope wrappers
# ==============================================================================

def nearest_neighbor_angles(points):
    """
    Per-point nearest-neighbour angle.

    Args:
        points: (N, 3) unit vectors

    Returns:
        (N,) array of angles in radians (empty for N < 2)
    """
    points = np.ascontiguousarray(points, dtype=np.float64)
    n = points.shape[0]
    if n < 2:
        return np.zeros(0)
    init_taichi()
    out = np.zeros(n)
    nearest_neighbor_kernel(points, out, n)
    return out


def min_angular_separation(points):
    """Smallest pairwise angle in the set (math.pi for N < 2)."""
    angles = nearest_neighbor_angles(points)
    if angles.size == 0:
        return math.pi
    return float(angles.min())


def riesz_energy(points, s=1.0, min_dist=1e-12):
    """
    Riesz s-energy of the set.

    s = force_exponent - 1 is the energy whose gradient the relaxation follows
    (s = 1 for the default inverse-square force).
    """
    if s < 0.0:
        raise ValueError(f"s must be non-negative, got {s}")
    points = np.ascontiguousarray(points, dtype=np.float64)
    n = points.shape[0]
    if n < 2:
        return 0.0
    init_taichi()
    return float(riesz_energy_kernel(points, n, float(s), float(min_dist)))


def max_norm_error(points):
    """max | |p| - 1 | over the set (0.0 when empty)."""
    points = np.asarray(points, dtype=np.float64)
    if points.shape[0] == 0:
        return 0.0
    return float(np.max(np.abs(norm(points) - 1.0)))


def summarize(points):
    """Dict of headline statistics, used by run.py and bench.py telemetry."""
    angles = nearest_neighbor_angles(points)
    if angles.size == 0:
        return {"n": int(np.asarray(points).shape[0]), "min_angle": math.pi,
                "mean_nn_angle": math.pi, "nn_angle_cv": 0.0,
                "norm_error": max_norm_error(points)}
    mean = float(angles.mean())
    return {
        "n": int(angles.size),
        "min_angle": float(angles.min()),
        "mean_nn_angle": mean,
        "nn_angle_cv": float(angles.std() / mean) if mean > 0.0 else 0.0,
        "norm_error": max_norm_error(points),
    }
