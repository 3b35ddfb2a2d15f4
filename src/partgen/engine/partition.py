"""
Immutable partition value built fresh by every sampling call.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Partition:
    """A partition stored as sorted ``(size, multiplicity)`` pairs.

    Zero multiplicities are never stored. ``rounds`` and ``tilt`` carry
    diagnostics from the sampler that produced the partition and take no part
    in equality or hashing.
    """

    counts: tuple[tuple[int, int], ...] = ()
    rounds: int = field(default=0, compare=False)
    tilt: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_multiplicities(
        cls, multiplicities: Mapping[int, int], rounds: int = 0, tilt: Any = None
    ) -> Partition:
        counts = []
        for size, mult in sorted(multiplicities.items()):
            size, mult = int(size), int(mult)
            if mult < 0 or size <= 0:
                raise ValueError(f"invalid part entry {size}: {mult}")
            if mult:
                counts.append((size, mult))
        return cls(tuple(counts), rounds=int(rounds), tilt=tilt)

    @classmethod
    def from_parts(cls, parts: Iterable[int]) -> Partition:
        return cls.from_multiplicities(Counter(int(p) for p in parts))

    @property
    def multiplicities(self) -> dict[int, int]:
        return dict(self.counts)

    @property
    def weight(self) -> int:
        return sum(size * mult for size, mult in self.counts)

    def parts(self) -> list[int]:
        """Return the parts in descending order, one entry per copy."""
        out = []
        for size, mult in reversed(self.counts):
            out.extend([size] * mult)
        return out

    def sizes(self) -> list[int]:
        return [size for size, _ in self.counts]

    def __iter__(self) -> Iterator[int]:
        return iter(self.parts())

    def __len__(self) -> int:
        return sum(mult for _, mult in self.counts)

    def __bool__(self) -> bool:
        return bool(self.counts)

    def __str__(self) -> str:
        return "+".join(str(p) for p in self.parts()) or "0"
