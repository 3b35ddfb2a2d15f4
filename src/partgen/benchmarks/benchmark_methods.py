"""
Benchmark the exact samplers against each other.

This compares wall time and mean sampling rounds of rejection sampling and
PDC deterministic second half for the same targets and policy. The tilt is
solved once per target and shared by both methods.

Run:
    python -m partgen.benchmarks.benchmark_methods

Optional env overrides:
    BENCH_TARGETS, BENCH_SAMPLES, BENCH_REPEATS, BENCH_POLICY, BENCH_BASE_SEED

Examples:
    BENCH_TARGETS=50,200 BENCH_POLICY=odd python -m partgen.benchmarks.benchmark_methods
"""

import os
import statistics
import time

from partgen.engine.sampling import sample_exact_by_pdc, sample_exact_by_rejection
from partgen.engine.tilt import solve_tilt
from partgen.runtime.rng import RNG
from partgen.schema.policies import load_policy


def _env_int(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_targets(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    out = []
    for part in raw.split(","):
        token = part.strip()
        if not token:
            continue
        try:
            parsed = int(token)
        except ValueError:
            continue
        if parsed >= 1:
            out.append(parsed)
    return out or default


BENCH_TARGETS = _env_targets("BENCH_TARGETS", [25, 100, 400])
BENCH_SAMPLES = max(1, _env_int("BENCH_SAMPLES", 200))
BENCH_REPEATS = max(1, _env_int("BENCH_REPEATS", 3))
BENCH_POLICY = os.getenv("BENCH_POLICY", "unrestricted")
BENCH_BASE_SEED = _env_int("BENCH_BASE_SEED", 42)

_METHODS = {
    "rejection": sample_exact_by_rejection,
    "pdc": sample_exact_by_pdc,
}


def _run_once(method, target, policy, tilt, seed):
    rng = RNG(seed)
    sampler = _METHODS[method]
    started = time.perf_counter()
    rounds = [
        sampler(target, policy, tilt=tilt, rng=rng).rounds
        for _ in range(BENCH_SAMPLES)
    ]
    return time.perf_counter() - started, statistics.fmean(rounds)


def main():
    policy = load_policy(BENCH_POLICY)
    print(
        f"[BENCH] policy={policy!r} samples={BENCH_SAMPLES} repeats={BENCH_REPEATS} "
        f"targets={BENCH_TARGETS}"
    )
    for target in BENCH_TARGETS:
        tilt = solve_tilt(target, policy).x
        for method in _METHODS:
            timings = []
            mean_rounds = []
            for repeat in range(BENCH_REPEATS):
                seed = RNG.derive_seed(BENCH_BASE_SEED, method, target, repeat)
                elapsed, rounds = _run_once(method, target, policy, tilt, seed)
                timings.append(elapsed)
                mean_rounds.append(rounds)
            print(
                f"  target={target:<6} method={method:<10} "
                f"median_s={statistics.median(timings):.4f} "
                f"mean_rounds={statistics.fmean(mean_rounds):.2f}"
            )


if __name__ == "__main__":
    main()
