"""Failure signals for the optional sampling budgets."""

from __future__ import annotations


class PartitionError(RuntimeError):
    """Base class for partgen runtime failures."""


class SamplingBudgetExceeded(PartitionError):
    """An exact sampler used up ``max_rounds`` without accepting a sample."""

    def __init__(self, method: str, target: int, rounds: int):
        self.method = method
        self.target = int(target)
        self.rounds = int(rounds)
        super().__init__(
            f"{method} sampler did not reach target {self.target} "
            f"within {self.rounds} rounds"
        )


class TiltConvergenceError(PartitionError):
    """Bisection hit its iteration cap before the bracket tolerance was met."""

    def __init__(self, solution):
        self.solution = solution
        super().__init__(
            f"tilt solver stopped after {solution.iterations} iterations "
            f"with residual {solution.residual:.3g}"
        )
