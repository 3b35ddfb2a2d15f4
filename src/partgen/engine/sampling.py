"""
Random partition samplers.

``sample_expected_size`` draws every multiplicity as an independent geometric
variable (Fristedt's method), so the weight is random with mean ``target``.
The two exact samplers condition on the weight:

* ``sample_exact_by_rejection`` redraws everything until the weight is hit.
* ``sample_exact_by_pdc`` (probabilistic divide-and-conquer, deterministic
  second half) draws every size except the smallest and then fixes the
  smallest multiplicity with a single accept/reject step.

Both exact samplers return each restriction-respecting partition of
``target`` with equal probability. ``sample_exact`` is the recommended entry
point and always delegates to the best available exact method, which may
change between releases; call a specific sampler when the algorithm itself
must stay fixed.
"""

from __future__ import annotations

import math

import numpy as np

from ..runtime.rng import resolve_rng
from ..schema import defaults
from ..schema.policies import load_policy
from .errors import SamplingBudgetExceeded
from .partition import Partition
from .tilt import TiltSolution, allowed_sizes, find_tilt


def _check_target(target) -> int:
    try:
        n = int(target)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"target must be a non-negative integer, got {target!r}") from exc
    if n != target or n < 0:
        raise ValueError(f"target must be a non-negative integer, got {target!r}")
    return n


def _check_max_rounds(max_rounds):
    if max_rounds is None:
        return None
    try:
        parsed = int(max_rounds)
    except (TypeError, ValueError) as exc:
        raise ValueError("max_rounds must be a positive integer or None") from exc
    if parsed < 1:
        raise ValueError("max_rounds must be a positive integer or None")
    return parsed


def _check_policy_sizes(target, policy):
    if target > 0 and policy.smallest() == 0:
        raise ValueError(f"{policy!r} admits no part sizes")


def resolve_tilt(
    target,
    policy,
    tilt=None,
    tilt_method=defaults.DEFAULT_TILT_METHOD,
    strict=False,
    logger=None,
) -> TiltSolution:
    """Return the manual tilt when it is below 1, otherwise solve for it."""

    if tilt is not None and float(tilt) < 1:
        solution = TiltSolution(
            x=float(tilt),
            iterations=0,
            residual=float("nan"),
            converged=True,
            method="manual",
        )
    else:
        solution = find_tilt(target, policy, method=tilt_method, strict=strict)

    if logger is not None:
        logger.info(
            f"[TILT] target={target} method={solution.method} x={solution.x:.10f} "
            f"iterations={solution.iterations} converged={solution.converged}"
        )
        if not solution.converged and target > 0:
            logger.warning(
                f"[TILT] solver hit its iteration cap; residual={solution.residual:.6g}"
            )
    return solution


def _draw_multiplicities(sizes: np.ndarray, log_x: float, rng) -> np.ndarray:
    # Inverse CDF of a geometric variable with success probability 1 - x**i;
    # 1 - U keeps the uniform in (0, 1].
    uniforms = 1.0 - np.asarray(rng.random(sizes.size), dtype=np.float64)
    return np.floor(np.log(uniforms) / (sizes * log_x)).astype(np.int64)


def _to_partition(sizes, counts, rounds, solution, extra=None) -> Partition:
    pairs = [(int(s), int(c)) for s, c in zip(sizes, counts) if c]
    if extra is not None and extra[1]:
        pairs.append((int(extra[0]), int(extra[1])))
        pairs.sort()
    return Partition(tuple(pairs), rounds=rounds, tilt=solution)


def _budget_exhausted(method, target, rounds, logger):
    if logger is not None:
        logger.warning(
            f"[BUDGET EXHAUSTED] method={method} target={target} rounds={rounds}"
        )
    raise SamplingBudgetExceeded(method, target, rounds)


def _log_accepted(logger, method, target, rounds, x):
    if logger is not None:
        logger.info(
            f"[ACCEPTED] method={method} target={target} rounds={rounds} x={x:.10f}"
        )


def sample_expected_size(
    target,
    policy=None,
    tilt=None,
    rng=None,
    tilt_method=defaults.DEFAULT_TILT_METHOD,
    strict_tilt=False,
    logger=None,
) -> Partition:
    """Draw a partition whose weight has expectation ``target``.

    Args:
        target: Expected weight; also the largest part size considered.
        policy: Restriction policy (anything ``load_policy`` accepts).
        tilt: Manual tilt; used verbatim when below 1, bypassing the solver.
        rng: Random source (see ``resolve_rng``).

    Returns:
        A fresh ``Partition``; its weight is usually not ``target``.
    """

    n = _check_target(target)
    policy = load_policy(policy)
    rng = resolve_rng(rng)
    solution = resolve_tilt(n, policy, tilt, tilt_method, strict_tilt, logger)
    sizes = allowed_sizes(n, policy)
    counts = _draw_multiplicities(sizes, math.log(solution.x), rng)
    return _to_partition(sizes, counts, 1, solution)


def sample_exact_by_rejection(
    target,
    policy=None,
    tilt=None,
    rng=None,
    max_rounds=None,
    tilt_method=defaults.DEFAULT_TILT_METHOD,
    strict_tilt=False,
    logger=None,
) -> Partition:
    """Redraw expected-size partitions until one has weight ``target``.

    Every candidate has probability proportional to ``x**weight``, so the
    accepted sample is uniform over the partitions of ``target``. The loop is
    unbounded unless ``max_rounds`` is given, in which case
    ``SamplingBudgetExceeded`` is raised once it is used up.
    """

    n = _check_target(target)
    policy = load_policy(policy)
    _check_policy_sizes(n, policy)
    rng = resolve_rng(rng)
    max_rounds = _check_max_rounds(max_rounds)

    solution = resolve_tilt(n, policy, tilt, tilt_method, strict_tilt, logger)
    sizes = allowed_sizes(n, policy)
    log_x = math.log(solution.x)

    rounds = 0
    while True:
        if max_rounds is not None and rounds >= max_rounds:
            _budget_exhausted("rejection", n, rounds, logger)
        rounds += 1
        counts = _draw_multiplicities(sizes, log_x, rng)
        if int(np.dot(sizes, counts)) == n:
            _log_accepted(logger, "rejection", n, rounds, solution.x)
            return _to_partition(sizes, counts, rounds, solution)


def sample_exact_by_pdc(
    target,
    policy=None,
    tilt=None,
    rng=None,
    max_rounds=None,
    tilt_method=defaults.DEFAULT_TILT_METHOD,
    strict_tilt=False,
    logger=None,
) -> Partition:
    """Exact sampler using the deterministic second half of PDC.

    All sizes above the smallest allowed size ``u1`` are drawn as in
    ``sample_expected_size``. The remainder ``diff = target - partial`` must
    then be filled by ``diff / u1`` copies of ``u1``; the round is accepted
    with probability ``x**diff``, the geometric likelihood of that
    multiplicity relative to its mode at zero. Rejected rounds redraw every
    size, with the tilt solved once per call.
    """

    n = _check_target(target)
    policy = load_policy(policy)
    _check_policy_sizes(n, policy)
    rng = resolve_rng(rng)
    max_rounds = _check_max_rounds(max_rounds)

    solution = resolve_tilt(n, policy, tilt, tilt_method, strict_tilt, logger)
    x = solution.x
    log_x = math.log(x)
    smallest = policy.smallest()
    if smallest == 0:
        # Empty policy; only the empty partition of 0 exists.
        return Partition(rounds=1, tilt=solution)
    sizes = allowed_sizes(n, policy)
    if sizes.size and sizes[0] == smallest:
        sizes = sizes[1:]

    rounds = 0
    while True:
        if max_rounds is not None and rounds >= max_rounds:
            _budget_exhausted("pdc", n, rounds, logger)
        rounds += 1
        counts = _draw_multiplicities(sizes, log_x, rng)
        partial_total = int(np.dot(sizes, counts))
        diff = n - partial_total
        if diff >= 0 and diff % smallest == 0 and rng.random() <= x**diff:
            _log_accepted(logger, "pdc", n, rounds, x)
            return _to_partition(
                sizes, counts, rounds, solution, extra=(smallest, diff // smallest)
            )


def sample_exact(
    target,
    policy=None,
    tilt=None,
    rng=None,
    max_rounds=None,
    tilt_method=defaults.DEFAULT_TILT_METHOD,
    strict_tilt=False,
    logger=None,
) -> Partition:
    """Uniform random partition of ``target`` using the best available method.

    Currently the PDC deterministic-second-half sampler.
    """

    return sample_exact_by_pdc(
        target,
        policy=policy,
        tilt=tilt,
        rng=rng,
        max_rounds=max_rounds,
        tilt_method=tilt_method,
        strict_tilt=strict_tilt,
        logger=logger,
    )


SAMPLERS = {
    "pdc": sample_exact_by_pdc,
    "rejection": sample_exact_by_rejection,
    "expected": sample_expected_size,
}
