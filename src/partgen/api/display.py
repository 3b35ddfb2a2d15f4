"""Text rendering of sampled partitions."""

from __future__ import annotations

from ..engine.partition import Partition


def format_parts(partition: Partition, sep: str = ",") -> str:
    """Parts from largest to smallest joined by ``sep``."""

    return sep.join(str(part) for part in partition.parts())


def ferrers_diagram(
    partition: Partition, symbol: str = "*", largest_first: bool = True
) -> str:
    """One row of ``symbol`` per part.

    Rows run from the largest part down unless ``largest_first`` is False.
    The empty partition renders as an empty string.
    """

    parts = partition.parts()
    if not largest_first:
        parts.reverse()
    return "\n".join(" ".join([symbol] * part) for part in parts)
