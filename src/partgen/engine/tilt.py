"""
Expected partition weight under a tilt, and solvers for the tilt itself.

Under tilt ``x`` the multiplicity of an allowed size ``i`` is geometric with
success probability ``1 - x**i``, so the expected weight of the partition is
``sum(i * x**i / (1 - x**i))`` over the allowed sizes ``i <= n``. The tilt
solver finds the ``x`` for which that expectation equals the target ``n``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..schema import defaults
from ..schema.policies import RestrictionPolicy, Unrestricted, load_policy
from .errors import TiltConvergenceError

# Solutions of the unrestricted equation for n = 0..200, to 5 digits.
_UNRESTRICTED_TILT_TABLE = (
    0, 0.5, 0.54031, 0.57202, 0.59784, 0.61942, 0.63781, 0.65374, 0.6677,
    0.68009, 0.69116, 0.70114, 0.7102, 0.71847, 0.72606, 0.73306, 0.73954,
    0.74555, 0.75117, 0.75641, 0.76134, 0.76597, 0.77033, 0.77445, 0.77836,
    0.78206, 0.78558, 0.78892, 0.79212, 0.79516, 0.79808, 0.80087, 0.80354,
    0.80611, 0.80857, 0.81094, 0.81322, 0.81542, 0.81754, 0.81959, 0.82157,
    0.82348, 0.82533, 0.82712, 0.82885, 0.83054, 0.83217, 0.83375, 0.83529,
    0.83679, 0.83824, 0.83966, 0.84104, 0.84238, 0.84368, 0.84496, 0.8462,
    0.84741, 0.8486, 0.84975, 0.85088, 0.85198, 0.85306, 0.85411, 0.85514,
    0.85615, 0.85714, 0.8581, 0.85905, 0.85998, 0.86089, 0.86178, 0.86265,
    0.86351, 0.86435, 0.86517, 0.86598, 0.86677, 0.86755, 0.86832, 0.86907,
    0.86981, 0.87054, 0.87125, 0.87195, 0.87264, 0.87332, 0.87399, 0.87465,
    0.87529, 0.87593, 0.87656, 0.87717, 0.87778, 0.87838, 0.87897, 0.87955,
    0.88012, 0.88068, 0.88124, 0.88179, 0.88233, 0.88286, 0.88339, 0.8839,
    0.88442, 0.88492, 0.88542, 0.88591, 0.88639, 0.88687, 0.88734, 0.88781,
    0.88827, 0.88872, 0.88917, 0.88962, 0.89005, 0.89049, 0.89091, 0.89134,
    0.89175, 0.89216, 0.89257, 0.89298, 0.89337, 0.89377, 0.89416, 0.89454,
    0.89492, 0.8953, 0.89567, 0.89604, 0.8964, 0.89676, 0.89712, 0.89747,
    0.89782, 0.89817, 0.89851, 0.89885, 0.89918, 0.89952, 0.89984, 0.90017,
    0.90049, 0.90081, 0.90113, 0.90144, 0.90175, 0.90205, 0.90236, 0.90266,
    0.90296, 0.90325, 0.90354, 0.90383, 0.90412, 0.90441, 0.90469, 0.90497,
    0.90524, 0.90552, 0.90579, 0.90606, 0.90633, 0.90659, 0.90685, 0.90712,
    0.90737, 0.90763, 0.90788, 0.90813, 0.90838, 0.90863, 0.90888, 0.90912,
    0.90936, 0.9096, 0.90984, 0.91008, 0.91031, 0.91054, 0.91077, 0.911,
    0.91123, 0.91145, 0.91167, 0.9119, 0.91212, 0.91233, 0.91255, 0.91276,
    0.91298, 0.91319, 0.9134, 0.91361, 0.91382, 0.91402, 0.91422, 0.91443,
)

# Placeholder tilt when no allowed size fits under the target.
_NO_SIZES_TILT = 0.5


@dataclass(frozen=True)
class TiltSolution:
    """Solver output plus the diagnostics needed to judge its accuracy."""

    x: float
    iterations: int
    residual: float
    converged: bool
    method: str

    def __float__(self) -> float:
        return float(self.x)


def allowed_sizes(n: int, policy: RestrictionPolicy | None = None) -> np.ndarray:
    """Return the allowed part sizes ``<= n`` as an int64 array."""

    policy = load_policy(policy)
    return np.fromiter(policy.sizes(int(n)), dtype=np.int64)


def _expected_sum(x: float, sizes: np.ndarray) -> float:
    if sizes.size == 0:
        return 0.0
    xi = np.power(float(x), sizes.astype(np.float64))
    return float(np.sum(sizes * xi / (1.0 - xi)))


def expected_sum(x: float, n: int, policy: RestrictionPolicy | None = None) -> float:
    """Expected weight of a random partition with parts in ``policy`` and <= n."""

    return _expected_sum(x, allowed_sizes(n, policy))


def unrestricted_tilt(n: int) -> float:
    """Fast tilt for the unrestricted policy: table lookup, then asymptotics."""

    n = int(n)
    if n < 0:
        raise ValueError("target must be >= 0")
    if n <= defaults.TILT_TABLE_MAX:
        return float(_UNRESTRICTED_TILT_TABLE[n])
    return 1.0 - defaults.TILT_CONSTANT / math.sqrt(n)


def solve_tilt(
    n: int,
    policy: RestrictionPolicy | None = None,
    tolerance: float = defaults.BISECTION_TOLERANCE,
    max_iters: int = defaults.BISECTION_MAX_ITERS,
    strict: bool = False,
) -> TiltSolution:
    """Bisection for ``expected_sum(x, n) == n`` on ``[1 - c/sqrt(n), 1)``.

    Stops when the bracket residuals differ by less than ``tolerance`` or after
    ``max_iters`` halvings and returns the last midpoint. Hitting the cap is
    reported through ``converged=False``; pass ``strict=True`` to raise
    ``TiltConvergenceError`` instead.
    """

    n = int(n)
    if n < 0:
        raise ValueError("target must be >= 0")
    sizes = allowed_sizes(n, policy)
    if n == 0 or sizes.size == 0:
        return TiltSolution(
            x=_NO_SIZES_TILT,
            iterations=0,
            residual=float(-n),
            converged=n == 0,
            method="bisection",
        )

    target = float(n)
    lo = max(0.0, 1.0 - defaults.TILT_CONSTANT / math.sqrt(n))
    hi = float(np.nextafter(1.0, 0.0))
    r_lo = _expected_sum(lo, sizes) - target
    r_hi = _expected_sum(hi, sizes) - target
    mid, r_mid = lo, r_lo

    iters = 0
    while abs(r_lo - r_hi) > tolerance and iters < max_iters:
        mid = (lo + hi) / 2.0
        r_mid = _expected_sum(mid, sizes) - target
        if r_mid < 0:
            lo, r_lo = mid, r_mid
        else:
            hi, r_hi = mid, r_mid
        iters += 1

    solution = TiltSolution(
        x=float(mid),
        iterations=iters,
        residual=float(r_mid),
        converged=abs(r_lo - r_hi) <= tolerance,
        method="bisection",
    )
    if strict and not solution.converged:
        raise TiltConvergenceError(solution)
    return solution


def find_tilt(
    n: int,
    policy: RestrictionPolicy | None = None,
    method: str = defaults.DEFAULT_TILT_METHOD,
    strict: bool = False,
) -> TiltSolution:
    """Resolve the tilt for target ``n`` with the requested method.

    ``"bisection"`` works for every policy and is what the samplers use by
    default. ``"fast"`` is the unrestricted-only lookup/asymptotic path.
    """

    policy = load_policy(policy)
    key = str(method or "").strip().lower()
    if key == "bisection":
        return solve_tilt(n, policy, strict=strict)
    if key == "fast":
        if not isinstance(policy, Unrestricted):
            raise ValueError(
                f"fast tilt path only supports the unrestricted policy, got {policy!r}"
            )
        n = int(n)
        x = unrestricted_tilt(n)
        residual = expected_sum(x, n, policy) - n if n > 0 else 0.0
        return TiltSolution(
            x=x if n > 0 else _NO_SIZES_TILT,
            iterations=0,
            residual=float(residual),
            converged=True,
            method="fast",
        )
    raise ValueError(
        f"Unknown tilt method '{method}'. "
        f"Available: {', '.join(defaults.VALID_TILT_METHODS)}"
    )
