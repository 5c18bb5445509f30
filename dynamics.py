"""
Relaxation kernels for Spherical Blue Noise.

This module provides one relaxation iteration as separate phases:
1. Force field: exact O(N²) Coulomb-like repulsion, tangential component only
2. Integrator: explicit step along the tangential force (displacement capped)
3. Projector: renormalize candidates back onto the unit sphere
4. Displacement reduction: max per-point move (convergence metric)

Every kernel reads one array and writes a different one. No kernel writes an
array it is reading, so the force on point i never sees an already-moved
point j within the same iteration.

Arrays are (N, 3) float64 NumPy arrays passed to Taichi as external ndarrays.
The outer per-point loops run in parallel; inner pair loops are serial, so
results do not depend on thread scheduling.
"""

import numpy as np
import taichi as ti

from runtime import init_taichi
from vec3 import load3, store3, tangential, tie_direction, clamp_length

Points = ti.types.ndarray(dtype=ti.f64, ndim=2)

# ==============================================================================
# Kernel 1: Force field
# ==============================================================================

@ti.kernel
def compute_forces(pos: Points, force: Points, n: ti.i32,
                   exponent: ti.f64, min_dist: ti.f64):
    """
    Net tangential repulsive force on every point.

    For each ordered pair (i, j), i != j:
      d     = p_i - p_j
      F_i  += d / |d|^(exponent + 1)                  → |F_ij| = |d|^-exponent

    Pairs closer than min_dist push along a fixed tangent at p_i instead of
    d (which is zero for coincident samples), with magnitude min_dist^-exponent
    and opposite signs for i < j and i > j. The radial part of F_i is then
    discarded: F_i ← F_i - (F_i · p_i) p_i.
    """
    for i in range(n):
        pi = load3(pos, i)
        acc = ti.math.vec3(0.0, 0.0, 0.0)
        for j in range(n):
            if j != i:
                delta = pi - load3(pos, j)
                dist = delta.norm()
                if dist < min_dist:
                    delta = tie_direction(pi) * min_dist
                    if i > j:
                        delta = -delta
                    dist = min_dist
                if exponent == 2.0:
                    acc += delta / (dist * dist * dist)
                else:
                    acc += delta / ti.pow(dist, exponent + 1.0)
        store3(force, i, tangential(acc, pi))


# ==============================================================================
# Kernel 2: Integrator
# ==============================================================================

@ti.kernel
def integrate(pos: Points, force: Points, candidate: Points, n: ti.i32,
              step: ti.f64, max_move: ti.f64):
    """
    Explicit step: p_i' = p_i + clamp(step · F_i, max_move).

    The per-point move is capped at max_move so a huge clamped force (two
    nearly coincident points) cannot throw a point across the sphere.
    Output is NOT unit length; project() must run next.
    """
    for i in range(n):
        move = clamp_length(step * load3(force, i), max_move)
        store3(candidate, i, load3(pos, i) + move)


# ==============================================================================
# Kernel 3: Projector
# ==============================================================================

@ti.kernel
def project(pos: Points, candidate: Points, new_pos: Points, n: ti.i32,
            norm_floor: ti.f64):
    """
    Renormalize candidates onto the unit sphere: p_i'' = p_i' / |p_i'|.

    A candidate shorter than norm_floor keeps the point at its pre-iteration
    position for this iteration.
    """
    for i in range(n):
        c = load3(candidate, i)
        length = c.norm()
        out = load3(pos, i)
        if length >= norm_floor:
            out = c / length
        store3(new_pos, i, out)


# ==============================================================================
# Kernel 4: Convergence metric
# ==============================================================================

@ti.kernel
def reduce_max_displacement(old_pos: Points, new_pos: Points, n: ti.i32) -> ti.f64:
    """Maximum Euclidean move of any point between two snapshots."""
    global_max = 0.0
    for i in range(n):
        d = (load3(new_pos, i) - load3(old_pos, i)).norm()
        ti.atomic_max(global_max, d)
    return global_max


# ==============================================================================
# Python-scope wrappers
# ==============================================================================

def tangential_forces(pos, exponent, min_dist):
    """
    Wrapper: forces for a snapshot, as a new (N, 3) array.

    Args:
        pos: (N, 3) unit points (read only)
        exponent: force-law exponent
        min_dist: distance clamp

    Returns:
        (N, 3) tangential force array
    """
    init_taichi()
    pos = np.ascontiguousarray(pos, dtype=np.float64)
    n = pos.shape[0]
    force = np.zeros_like(pos)
    if n > 0:
        compute_forces(pos, force, n, float(exponent), float(min_dist))
    return force


def integrate_points(pos, force, step, max_move):
    """Wrapper: un-normalized candidates p + clamp(step · F, max_move)."""
    init_taichi()
    pos = np.ascontiguousarray(pos, dtype=np.float64)
    force = np.ascontiguousarray(force, dtype=np.float64)
    candidate = np.zeros_like(pos)
    if pos.shape[0] > 0:
        integrate(pos, force, candidate, pos.shape[0], float(step), float(max_move))
    return candidate


def project_points(pos, candidate, norm_floor):
    """Wrapper: candidates renormalized onto the sphere (fallback to pos)."""
    init_taichi()
    pos = np.ascontiguousarray(pos, dtype=np.float64)
    candidate = np.ascontiguousarray(candidate, dtype=np.float64)
    new_pos = np.zeros_like(pos)
    if pos.shape[0] > 0:
        project(pos, candidate, new_pos, pos.shape[0], float(norm_floor))
    return new_pos


def relax_step(pos, step, max_move, exponent, min_dist, norm_floor):
    """
    One full iteration: forces → integrate → project → displacement.

    The input snapshot is never modified; a new array is returned.

    Args:
        pos: (N, 3) unit points (snapshot, read only)
        step: step size η for this iteration
        max_move: per-point displacement cap
        exponent, min_dist: force law parameters
        norm_floor: projector fallback threshold

    Returns:
        (new_pos, displacement) where displacement is the max per-point move
    """
    init_taichi()
    pos = np.ascontiguousarray(pos, dtype=np.float64)
    n = pos.shape[0]
    if n == 0:
        return pos.copy(), 0.0

    force = np.empty_like(pos)
    candidate = np.empty_like(pos)
    new_pos = np.empty_like(pos)

    compute_forces(pos, force, n, float(exponent), float(min_dist))
    integrate(pos, force, candidate, n, float(step), float(max_move))
    project(pos, candidate, new_pos, n, float(norm_floor))
    displacement = reduce_max_displacement(pos, new_pos, n)

    return new_pos, float(displacement)
