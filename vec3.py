"""
Unit-vector math for Spherical Blue Noise.

Two flavours of the same operations:
- @ti.func helpers used inside relaxation kernels (one point at a time)
- NumPy row-wise helpers used in Python scope (whole (N, 3) point sets)

Point sets are (N, 3) float64 arrays; row i is point i.
"""

import numpy as np
import taichi as ti

# ==============================================================================
# Kernel-side helpers
# ==============================================================================

@ti.func
def load3(arr: ti.template(), i: ti.i32) -> ti.math.vec3:
    """Read row i of an (N, 3) ndarray as a vector."""
    return ti.math.vec3(arr[i, 0], arr[i, 1], arr[i, 2])


@ti.func
def store3(arr: ti.template(), i: ti.i32, v: ti.math.vec3):
    """Write vector v into row i of an (N, 3) ndarray."""
    for d in ti.static(range(3)):
        arr[i, d] = v[d]


@ti.func
def tangential(v: ti.math.vec3, p: ti.math.vec3) -> ti.math.vec3:
    """
    Component of v in the plane tangent to the unit sphere at p.

    v_t = v - (v · p) p   (p must be unit length)
    """
    return v - v.dot(p) * p


@ti.func
def tie_direction(p: ti.math.vec3) -> ti.math.vec3:
    """
    Fixed unit tangent at p, used to split coincident points.

    p × x̂, or p × ŷ when p is close to the x axis. Equal points get the
    same direction, so the caller decides the sign per pair.
    """
    axis = ti.math.vec3(1.0, 0.0, 0.0)
    if ti.abs(p[0]) > 0.9:
        axis = ti.math.vec3(0.0, 1.0, 0.0)
    return p.cross(axis).normalized()


@ti.func
def clamp_length(v: ti.math.vec3, max_len: ti.f64) -> ti.math.vec3:
    """Rescale v to max_len if it is longer, keeping its direction."""
    out = v
    length = v.norm()
    if length > max_len:
        out = v * (max_len / length)
    return out


# ==============================================================================
# Python-scope helpers (row-wise over point sets)
# ==============================================================================

def dot(a, b):
    """Row-wise dot product of two (N, 3) arrays (or two 3-vectors)."""
    return np.sum(np.asarray(a) * np.asarray(b), axis=-1)


def norm(v):
    """Row-wise Euclidean length."""
    return np.linalg.norm(v, axis=-1)


def normalize(v, floor=1e-12):
    """
    Row-wise normalization.

    Rows shorter than floor are returned unchanged instead of being blown up
    by the division.
    """
    v = np.asarray(v, dtype=np.float64)
    lengths = norm(v)[..., np.newaxis]
    safe = lengths >= floor
    return np.where(safe, v / np.where(safe, lengths, 1.0), v)


def tangential_np(v, p):
    """Row-wise tangential projection of v at unit points p."""
    v = np.asarray(v, dtype=np.float64)
    p = np.asarray(p, dtype=np.float64)
    return v - dot(v, p)[..., np.newaxis] * p


def angle_between(a, b):
    """Angle in radians between unit vectors (row-wise), clamped against rounding."""
    return np.arccos(np.clip(dot(a, b), -1.0, 1.0))
