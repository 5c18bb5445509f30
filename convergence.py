"""
Convergence controller for the relaxation loop.

State machine:

    RUNNING ──metric < tolerance──────────▶ CONVERGED
       │
       └──iteration == max_iterations────▶ ITERATION_LIMIT_REACHED

Both terminal states are normal outcomes. The iteration ceiling exists
because the displacement metric can hover around the tolerance for
pathological point counts or step sizes.
"""

import enum

from config import DEFAULT_CONFIG


class RelaxationState(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"


def step_size(config, t, n=0):
    """
    Step size η_t for iteration t (non-increasing in t).

    geometric: η_0 · r^t
    harmonic:  η_0 / (1 + t · (1 - r))

    η_0 is config.initial_step, or derived from the point count n when unset.
    """
    eta0 = config.step_for(n)
    if config.schedule == "harmonic":
        return eta0 / (1.0 + t * (1.0 - config.decay_rate))
    return eta0 * config.decay_rate ** t


class ConvergenceController:
    """Owns the per-run IterationState: iteration index, step size, metric."""

    def __init__(self, config=None, n=0):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.n = n
        self.iteration = 0
        self.step = step_size(self.config, 0, n)
        self.metric = float("inf")
        self.history = []
        self.state = RelaxationState.RUNNING
        if self.config.max_iterations == 0:
            self.state = RelaxationState.ITERATION_LIMIT_REACHED

    @property
    def terminal(self):
        return self.state is not RelaxationState.RUNNING

    def update(self, displacement):
        """
        Record one finished iteration and advance the state machine.

        Args:
            displacement: max per-point displacement of the iteration

        Returns:
            The new state
        """
        if self.terminal:
            raise RuntimeError(f"relaxation already finished ({self.state.value})")

        self.iteration += 1
        self.metric = float(displacement)
        self.history.append(self.metric)

        if self.metric < self.config.tolerance:
            self.state = RelaxationState.CONVERGED
        elif self.iteration >= self.config.max_iterations:
            self.state = RelaxationState.ITERATION_LIMIT_REACHED
        else:
            self.step = step_size(self.config, self.iteration, self.n)
        return self.state
