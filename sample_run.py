"""Quick local sample run for partgen."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists() and str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from partgen import (  # noqa: E402
    Custom,
    IntegerPartition,
    MaxPart,
    MinPart,
    Residue,
    get_policy,
)
from partgen.runtime.rng import RNG  # noqa: E402


def _show(label, ip, n):
    print(f"{label}: {ip}\nhas size {ip.weight} <-- should be exactly {n}")


def main() -> int:
    n = 100
    rng = RNG(2014)

    try:
        ip = IntegerPartition(rng=rng)
        ip(n)
        print(ip)
        print(ip.ferrers())

        ip.random_size(n)
        print(f"Partition: {ip}\nhas size {ip.weight} <-- probably not exactly {n}")

        ip.rejection_sampling(n)
        _show("Partition", ip, n)

        ip.pdc_deterministic_second_half(n)
        _show("Partition", ip, n)

        for label, policy in (
            ("Partition into even parts", get_policy("even")),
            ("Partition into odd parts", get_policy("odd")),
            ("Partition into cubes", Custom(lambda i: i**3, name="cubes")),
            ("Partition into parts at most 10", MaxPart(10)),
            ("Partition into parts at least 4", MinPart(4)),
            ("Partition into parts = 5 mod 7", Residue(j=5, m=7)),
        ):
            restricted = IntegerPartition(policy, rng=rng)
            restricted(n)
            _show(label, restricted, n)
    except Exception as exc:
        print(f"[SAMPLE RUN ERROR] {exc}", file=sys.stderr)
        print("Tip: install dependencies with `pip install -e .`", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
