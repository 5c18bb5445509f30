"""
BlueNoiseSphere: points on the unit sphere with a blue-noise distribution.

Pipeline:
1. Sample N white-noise points (sampler.sample)
2. Repeat: forces → integrate → project (dynamics.relax_step)
3. Stop when the convergence controller reaches a terminal state

Based on: Wong, Kin-Ming and Wong, Tien-Tsin. "Spherical Blue Noise",
Pacific Graphics Short Papers, 2018.

Example:
    points = list(BlueNoiseSphere(16, rng=42))     # [(x, y, z), ...]
"""

import numpy as np

from config import (
    DEFAULT_CONFIG, InvalidArgumentError, RelaxationConfig, validate_count, validate_positive,
)
from convergence import ConvergenceController, RelaxationState
from dynamics import relax_step
from sampler import sample, to_generator


def _check_config(config):
    if config is None:
        return DEFAULT_CONFIG
    if not isinstance(config, RelaxationConfig):
        raise InvalidArgumentError(
            f"config must be a RelaxationConfig, got {type(config).__name__}")
    return config


class BlueNoiseSphere:
    """
    Blue-noise point set on the unit sphere.

    Construction samples the initial set and relaxes it. Iterating yields
    (x, y, z) tuples in point-index order; iteration never re-runs the
    relaxation. Build a new instance to get a new point set.
    """

    def __init__(self, n, rng=None, config=None, relax=True):
        n = validate_count(n)
        config = _check_config(config)
        gen = to_generator(rng)

        self._start(sample(n, gen), config)
        if relax:
            self.relax()

    def _start(self, particles, config):
        self.n = particles.shape[0]
        self.config = config
        self._particles = particles
        self._initial = particles.copy()
        self._cap = config.displacement_cap(self.n)
        self._controller = ConvergenceController(config, self.n)

    @classmethod
    def raw(cls, n, rng=None, config=None):
        """White-noise samples only; call advance() or relax() afterwards."""
        return cls(n, rng=rng, config=config, relax=False)

    @classmethod
    def from_points(cls, points, config=None, relax=True):
        """
        Start from caller-supplied points instead of white noise.

        Rows are normalized onto the sphere; zero-length or non-finite rows
        are rejected.

        Args:
            points: (N, 3) array-like
            config: RelaxationConfig
            relax: run the relaxation immediately
        """
        pts = np.array(points, dtype=np.float64, ndmin=2)
        if pts.size == 0:
            pts = np.zeros((0, 3))
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise InvalidArgumentError(f"points must have shape (N, 3), got {pts.shape}")
        if not np.all(np.isfinite(pts)):
            raise InvalidArgumentError("points must be finite")
        lengths = np.linalg.norm(pts, axis=1)
        if np.any(lengths == 0.0):
            raise InvalidArgumentError("points must be non-zero vectors")

        config = _check_config(config)

        sphere = cls.__new__(cls)
        sphere._start(np.ascontiguousarray(pts / lengths[:, np.newaxis]), config)
        if relax:
            sphere.relax()
        return sphere

    # --------------------------------------------------------------------------
    # Relaxation
    # --------------------------------------------------------------------------

    def advance(self, step, max_move=None):
        """
        Run one iteration with an explicit step size.

        Each point moves by step · F along its tangential force, capped at
        max_move. The move therefore depends on the force magnitude; it is
        not a fixed angular move per point. Does not consult or update the
        convergence controller.

        Args:
            step: step size η (> 0), a multiplier on the force
            max_move: per-point displacement cap (default: config cap)

        Returns:
            Max per-point displacement of this iteration
        """
        step = validate_positive(step, "step")
        if max_move is None:
            max_move = self._cap
        else:
            max_move = validate_positive(max_move, "max_move")
        return self._advance(step, max_move)

    def _advance(self, step, max_move):
        if self.n < 2:
            return 0.0

        cfg = self.config
        self._particles, displacement = relax_step(
            self._particles, step, max_move,
            cfg.force_exponent, cfg.min_distance, cfg.norm_floor)
        return displacement

    def advance_multiple(self, iterations, step, decay):
        """
        Run a fixed number of advance() iterations, multiplying the step by
        decay (0 < decay <= 1) after each one. All arguments are checked
        before any point moves.
        """
        iterations = validate_count(iterations, "iterations")
        step = validate_positive(step, "step")
        decay = validate_positive(decay, "decay")
        if decay > 1.0:
            raise InvalidArgumentError(f"decay must be in (0, 1], got {decay!r}")
        for _ in range(iterations):
            self._advance(step, self._cap)
            step *= decay
        return self

    def relax(self):
        """
        Iterate until the controller reaches CONVERGED or ITERATION_LIMIT_REACHED.

        Returns:
            Terminal RelaxationState
        """
        ctrl = self._controller
        debug_every = self.config.debug_every

        while not ctrl.terminal:
            if self.n < 2:
                displacement = 0.0  # no pairs, no forces
            else:
                displacement = self._advance(ctrl.step, self._cap)
            ctrl.update(displacement)

            if debug_every and ctrl.iteration % debug_every == 0:
                print(f"[Relax] iter={ctrl.iteration:5d} step={ctrl.step:.3e} "
                      f"max_disp={displacement:.3e}")

        if debug_every:
            print(f"[Relax] N={self.n} finished: {ctrl.state.value} after "
                  f"{ctrl.iteration} iterations (max_disp={ctrl.metric:.3e})")
        return ctrl.state

    # --------------------------------------------------------------------------
    # Results
    # --------------------------------------------------------------------------

    @property
    def state(self):
        return self._controller.state

    @property
    def converged(self):
        return self._controller.state is RelaxationState.CONVERGED

    @property
    def iterations(self):
        return self._controller.iteration

    @property
    def history(self):
        return list(self._controller.history)

    @property
    def points(self):
        """Copy of the current (N, 3) point array."""
        return self._particles.copy()

    @property
    def initial_points(self):
        """Copy of the white-noise samples the run started from."""
        return self._initial.copy()

    def __len__(self):
        return self.n

    def __iter__(self):
        return ((float(x), float(y), float(z)) for x, y, z in self._particles.copy())

    def __repr__(self):
        return (f"BlueNoiseSphere(n={self.n}, state={self.state.value}, "
                f"iterations={self.iterations})")


def blue_noise_points(n, rng=None, config=None):
    """Convenience: relaxed points as an (N, 3) array."""
    return BlueNoiseSphere(n, rng=rng, config=config).points


def white_noise_points(n, rng=None):
    """Convenience: unrelaxed uniform samples as an (N, 3) array."""
    return np.asarray(sample(n, rng))
