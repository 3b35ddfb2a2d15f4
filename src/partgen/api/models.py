"""Public runtime models for the import-first API."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..engine.partition import Partition
from ..engine.tilt import TiltSolution


@dataclass
class SamplerConfig:
    """Top-level options for a partition sampler.

    ``None`` fields fall back to ``partgen.schema.defaults``.
    """

    policy: Any = None
    method: str | None = None
    seed: int | None = None
    tilt: float | None = None
    tilt_method: str | None = None
    max_rounds: int | None = None
    strict_tilt: bool = False
    check_feasibility: bool = True
    log_level: str | None = None
    log_dir: str | None = None
    policy_params: dict[str, Any] = field(default_factory=dict)


@dataclass
class SampleResult:
    """Result payload returned by ``PartitionSampler.generate``."""

    partition: Partition
    target: int
    method: str
    rounds: int
    tilt: TiltSolution
    seed: int
    success: bool
    log_path: Path | None = None
    runtime_notes: list[str] = field(default_factory=list)

    @property
    def weight(self) -> int:
        return self.partition.weight

    def parts(self) -> list[int]:
        """Return the sampled parts in descending order."""

        return self.partition.parts()
