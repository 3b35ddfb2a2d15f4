"""
Exact enumeration and empirical frequency tables for sampled partitions.

These helpers make small-``n`` uniformity experiments easy: enumerate every
partition of ``n`` allowed by a policy, tabulate how often a sampler produced
each one, and summarise the deviation from the uniform law.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np
import pandas as pd

from ..engine.partition import Partition
from ..schema.policies import load_policy


def enumerate_partitions(target: int, policy: Any = None) -> Iterator[Partition]:
    """Yield every partition of ``target`` with parts in ``policy``.

    Partitions come out in reverse lexicographic order of their parts, so
    ``[target]`` (when allowed) is first.
    """

    target = int(target)
    if target < 0:
        raise ValueError("target must be >= 0")
    sizes = list(load_policy(policy).sizes(target))
    current: dict[int, int] = {}

    def _walk(remaining, idx):
        if remaining == 0:
            yield Partition.from_multiplicities(current)
            return
        if idx < 0:
            return
        size = sizes[idx]
        for mult in range(remaining // size, -1, -1):
            if mult:
                current[size] = mult
            else:
                current.pop(size, None)
            yield from _walk(remaining - mult * size, idx - 1)
        current.pop(size, None)

    yield from _walk(target, len(sizes) - 1)


def count_partitions(target: int, policy: Any = None) -> int:
    """Exact number of partitions of ``target`` with parts in ``policy``."""

    target = int(target)
    if target < 0:
        raise ValueError("target must be >= 0")
    ways = [1] + [0] * target
    for size in load_policy(policy).sizes(target):
        for total in range(size, target + 1):
            ways[total] += ways[total - size]
    return ways[target]


def _label(partition: Partition) -> str:
    return str(partition)


def partition_frequencies(
    partitions: Iterable[Partition], target: int | None = None, policy: Any = None
) -> pd.DataFrame:
    """Tabulate sampled partitions.

    With ``target`` set, every partition of ``target`` gets a row (unseen ones
    with count 0) plus an ``expected`` column holding the uniform probability.
    """

    counts = Counter(partitions)
    total = sum(counts.values())

    if target is not None:
        universe = list(enumerate_partitions(target, policy))
        known = set(universe)
        extra = [p for p in counts if p not in known]
        rows = universe + extra
    else:
        rows = sorted(counts, key=lambda p: p.parts(), reverse=True)

    frame = pd.DataFrame(
        {
            "partition": [_label(p) for p in rows],
            "weight": [p.weight for p in rows],
            "count": [counts.get(p, 0) for p in rows],
        }
    )
    frame["frequency"] = frame["count"] / total if total else 0.0
    if target is not None:
        n_universe = len(universe)
        expected = 1.0 / n_universe if n_universe else 0.0
        frame["expected"] = [
            expected if i < n_universe else 0.0 for i in range(len(rows))
        ]
    return frame


def uniformity_report(frame: pd.DataFrame) -> dict[str, float]:
    """Chi-square statistic and deviation summary against ``expected``."""

    if "expected" not in frame.columns:
        raise ValueError("frame has no 'expected' column; pass target to build it")

    total = int(frame["count"].sum())
    expected_counts = frame["expected"].to_numpy(dtype=np.float64) * total
    observed = frame["count"].to_numpy(dtype=np.float64)
    support = frame["expected"].to_numpy(dtype=np.float64) > 0
    outside = int(observed[~support].sum())

    chi_square = 0.0
    if total:
        diff = observed[support] - expected_counts[support]
        chi_square = float(np.sum(diff**2 / expected_counts[support]))
    deviation = (frame["frequency"] - frame["expected"]).abs()
    return {
        "samples": total,
        "partitions": int(support.sum()),
        "outside_support": outside,
        "chi_square": chi_square,
        "dof": max(0, int(support.sum()) - 1),
        "max_abs_deviation": float(deviation.max()) if len(frame) else 0.0,
    }
