"""
White-noise sampler on the unit sphere.

Draws independent, identically distributed unit vectors. Uses normalized
standard-normal triples (rotation invariant) rather than uniform spherical
angles, which would cluster points at the poles.
"""

import numbers

import numpy as np

from config import InvalidArgumentError, validate_count

REDRAW_FLOOR = 1e-12        # Gaussian triples shorter than this are redrawn


def to_generator(rng):
    """
    Coerce a randomness source into a numpy Generator.

    Args:
        rng: numpy Generator (used as-is), integer seed, or None (fresh entropy)

    Returns:
        numpy.random.Generator
    """
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is None or (isinstance(rng, numbers.Integral) and not isinstance(rng, bool)):
        return np.random.default_rng(rng)
    raise InvalidArgumentError(
        f"rng must be a numpy Generator, an integer seed or None, got {type(rng).__name__}")


def sample(n, rng=None):
    """
    Sample n uniform points on the unit sphere.

    Args:
        n: number of points (>= 0)
        rng: randomness source accepted by to_generator

    Returns:
        (n, 3) float64 C-contiguous array of unit vectors
    """
    n = validate_count(n)
    gen = to_generator(rng)

    pts = gen.standard_normal((n, 3))
    lengths = np.linalg.norm(pts, axis=1)

    # Redraw (practically never) degenerate triples until all are usable
    bad = lengths < REDRAW_FLOOR
    while np.any(bad):
        pts[bad] = gen.standard_normal((int(bad.sum()), 3))
        lengths[bad] = np.linalg.norm(pts[bad], axis=1)
        bad = lengths < REDRAW_FLOOR

    pts /= lengths[:, np.newaxis]
    return np.ascontiguousarray(pts, dtype=np.float64)
