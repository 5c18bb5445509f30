"""
Configuration parameters for Spherical Blue Noise.

This module defines all relaxation tunables:
- Force law (repulsion exponent, degenerate-distance clamp)
- Step schedule (initial step, decay, schedule shape, displacement cap)
- Convergence (displacement tolerance, iteration ceiling)
- Telemetry (debug print cadence)

The UPPER_CASE values are defaults only. Every run receives an explicit
RelaxationConfig so that runs are reproducible and testable in isolation.
All lengths are on the unit sphere (chord lengths, radians for small angles).
"""

import math
import numbers
import operator
from dataclasses import dataclass, fields, replace as dc_replace
from typing import Optional


class InvalidArgumentError(ValueError):
    """Raised when a point count or configuration value is outside its domain."""


# ==============================================================================
# Force law
# ==============================================================================

FORCE_EXPONENT = 2.0        # |F_ij| = 1 / d^FORCE_EXPONENT (2.0 = Coulomb, 3.0 = inverse cube)
MIN_DISTANCE = 1e-6         # Closer pairs push along a fixed tangent with force 1/MIN_DISTANCE^k

# ==============================================================================
# Step schedule (Integrator)
# ==============================================================================

INITIAL_STEP = None         # η_0: force-to-displacement factor on iteration 0 (None = derive from N)
DECAY_RATE = 0.999          # r: geometric decay per iteration (1.0 = constant step)
SCHEDULE = "geometric"      # "geometric": η_0·r^t | "harmonic": η_0 / (1 + t·(1 - r))
SCHEDULES = ("geometric", "harmonic")

# Derived step (used when INITIAL_STEP is None):
#   η_0(N) = STEP_FACTOR / k · a(N)^(k+1),   a(N) = sqrt(8π / (√3·N))
# a(N) is the neighbour spacing of a hexagonal packing of N points. Pair
# stiffness grows like k / a^(k+1), so η_0 · stiffness stays fixed as N grows.
STEP_FACTOR = 0.04

MAX_DISPLACEMENT = None     # Per-point displacement cap per iteration (None = derive from N)
                            # Near-coincident pairs still produce huge clamped forces;
                            # the cap keeps a single step from throwing a point across the sphere.

# Derived cap (used when MAX_DISPLACEMENT is None):
#   cap(N) = CAP_BASE^N / CAP_DIVISOR + CAP_FLOOR
# Few points → ~0.26 rad, thousands of points → ~0.01 rad.
CAP_BASE = 0.999_383_57
CAP_DIVISOR = 4.0
CAP_FLOOR = 0.01

# ==============================================================================
# Projector
# ==============================================================================

NORM_FLOOR = 1e-12          # Candidates shorter than this keep their previous position

# ==============================================================================
# Convergence controller
# ==============================================================================

TOLERANCE = 1e-6            # Stop when max per-point displacement drops below this
MAX_ITERATIONS = 2000       # Hard iteration ceiling (0 = return the raw samples)

# ==============================================================================
# Telemetry
# ==============================================================================

DEBUG_EVERY = 0             # Print [Relax] telemetry every N iterations (0 = silent)


def derived_displacement_cap(n):
    """
    Default per-iteration displacement cap for a set of n points.

    Args:
        n: number of points on the sphere

    Returns:
        Cap in chord length (≈ radians for small moves)
    """
    return CAP_BASE ** n / CAP_DIVISOR + CAP_FLOOR


def hexagonal_spacing(n):
    """Neighbour chord of a hexagonal packing of n points on the unit sphere (n < 2 → as for 2)."""
    return math.sqrt(8.0 * math.pi / (math.sqrt(3.0) * max(n, 2)))


def derived_initial_step(n, exponent=FORCE_EXPONENT):
    """
    Default initial step for n points under a 1/d^exponent force.

    The force on a point scales like exponent / a^(exponent + 1) with the
    neighbour spacing a, so the step shrinks with the same power of a.

    Args:
        n: number of points on the sphere
        exponent: force-law exponent k

    Returns:
        η_0 for iteration 0
    """
    return STEP_FACTOR / exponent * hexagonal_spacing(n) ** (exponent + 1.0)


def _is_real(value):
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and math.isfinite(value))


def _require_positive(name, value):
    if not _is_real(value) or value <= 0.0:
        raise InvalidArgumentError(f"{name} must be a positive finite number, got {value!r}")


def _as_count(name, value):
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    try:
        value = operator.index(value)
    except TypeError:
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}") from None
    if value < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {value}")
    return value


def validate_count(n, name="point count"):
    """Reject anything that is not a non-negative integer count."""
    return _as_count(name, n)


def validate_positive(value, name="value"):
    """Reject anything that is not a positive finite real number."""
    _require_positive(name, value)
    return float(value)


@dataclass(frozen=True)
class RelaxationConfig:
    """
    Explicit tunables for one relaxation run.

    Defaults mirror the module constants above. Instances validate themselves
    on creation, so an invalid value is rejected before any sampling happens.
    """

    force_exponent: float = FORCE_EXPONENT
    initial_step: Optional[float] = INITIAL_STEP
    decay_rate: float = DECAY_RATE
    schedule: str = SCHEDULE
    tolerance: float = TOLERANCE
    max_iterations: int = MAX_ITERATIONS
    max_displacement: Optional[float] = MAX_DISPLACEMENT
    min_distance: float = MIN_DISTANCE
    norm_floor: float = NORM_FLOOR
    debug_every: int = DEBUG_EVERY

    def __post_init__(self):
        self.validate()

    def validate(self):
        _require_positive("force_exponent", self.force_exponent)
        if self.initial_step is not None:
            _require_positive("initial_step", self.initial_step)
        _require_positive("tolerance", self.tolerance)
        _require_positive("min_distance", self.min_distance)
        _require_positive("norm_floor", self.norm_floor)

        if not _is_real(self.decay_rate) or not 0.0 < self.decay_rate <= 1.0:
            raise InvalidArgumentError(f"decay_rate must be in (0, 1], got {self.decay_rate!r}")
        if self.schedule not in SCHEDULES:
            raise InvalidArgumentError(f"schedule must be one of {SCHEDULES}, got {self.schedule!r}")
        _as_count("max_iterations", self.max_iterations)
        if self.max_displacement is not None:
            _require_positive("max_displacement", self.max_displacement)
        _as_count("debug_every", self.debug_every)

    def replace(self, **changes):
        """Return a validated copy with the given fields changed."""
        return dc_replace(self, **changes)

    def step_for(self, n):
        """Initial step η_0 for n points (explicit or derived)."""
        if self.initial_step is not None:
            return float(self.initial_step)
        return derived_initial_step(n, float(self.force_exponent))

    def displacement_cap(self, n):
        """Per-iteration displacement cap for n points (explicit or derived)."""
        if self.max_displacement is not None:
            return float(self.max_displacement)
        return derived_displacement_cap(n)

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = RelaxationConfig()
