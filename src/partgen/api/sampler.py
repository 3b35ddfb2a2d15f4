"""High-level import-first API for random partition sampling."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

from ..engine.partition import Partition
from ..engine.sampling import (
    resolve_tilt,
    sample_exact,
    sample_exact_by_pdc,
    sample_exact_by_rejection,
    sample_expected_size,
)
from ..runtime.logging_utils import setup_run_logger
from ..runtime.rng import RNG, resolve_rng
from ..schema import defaults
from ..schema.config import (
    check_feasibility,
    load_config,
    resolve_policy,
    validate_config,
)
from ..schema.policies import load_policy
from .display import ferrers_diagram, format_parts
from .models import SampleResult, SamplerConfig


def _normalize_choice(value: Any, allowed, fallback: str) -> str:
    text = str(value).strip().lower() if value is not None else ""
    if text in allowed:
        return text
    return fallback


def _coerce_optional_int(value: Any, minimum: int | None = None) -> int | None:
    if value is None:
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    if minimum is not None:
        parsed = max(minimum, parsed)
    return parsed


def _coerce_tilt(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _coerce_config(config: Any) -> tuple[SamplerConfig, list[str]]:
    if config is None:
        return SamplerConfig(), []
    if isinstance(config, SamplerConfig):
        return replace(config), []
    payload = load_config(config)
    warnings = validate_config(payload)
    known = {item.name for item in fields(SamplerConfig)}
    return SamplerConfig(**{k: v for k, v in payload.items() if k in known}), warnings


class PartitionSampler:
    """Config-driven facade that owns a seeded random stream and a logger."""

    def __init__(self, config: Any = None):
        self.config, config_warnings = _coerce_config(config)
        cfg = self.config

        self.policy = resolve_policy(cfg.policy, cfg.policy_params)
        self.method = _normalize_choice(
            cfg.method, defaults.VALID_METHODS, defaults.DEFAULT_METHOD
        )
        self.tilt_method = _normalize_choice(
            cfg.tilt_method, defaults.VALID_TILT_METHODS, defaults.DEFAULT_TILT_METHOD
        )
        self.log_level = _normalize_choice(
            cfg.log_level, defaults.VALID_LOG_LEVELS, defaults.DEFAULT_LOG_LEVEL
        )
        self.tilt = _coerce_tilt(cfg.tilt)
        self.max_rounds = _coerce_optional_int(cfg.max_rounds, minimum=1)
        self.rng = RNG(_coerce_optional_int(cfg.seed))
        self.seed = self.rng.seed

        self.logger = None
        self.log_path = None
        if self.log_level == "info":
            self.logger, log_path = setup_run_logger(cfg.log_dir, name="partgen")
            self.log_path = Path(log_path)

        self.runtime_notes = [f"Policy: {self.policy!r}", f"Method: {self.method}"]
        if config_warnings and self.logger is not None:
            self.logger.warning("[CONFIG WARNINGS]")
            for warning in config_warnings:
                self.logger.warning(f"  - {warning}")
        self.runtime_notes.extend(f"Config warning: {w}" for w in config_warnings)

    def _check_target(self, target: int) -> None:
        if not self.config.check_feasibility:
            return
        warnings, errors = check_feasibility(target, self.policy)
        if warnings and self.logger is not None:
            self.logger.warning("[FEASIBILITY WARNINGS]")
            for warning in warnings:
                self.logger.warning(f"  - {warning}")
        if errors and self.method != "expected":
            raise ValueError("; ".join(errors))

    def _sample(self, target: int, tilt: float | None, logger=None) -> Partition:
        kwargs = {
            "policy": self.policy,
            "tilt": tilt,
            "rng": self.rng,
            "tilt_method": self.tilt_method,
            "strict_tilt": bool(self.config.strict_tilt),
            "logger": logger,
        }
        if self.method == "expected":
            return sample_expected_size(target, **kwargs)
        if self.method == "rejection":
            return sample_exact_by_rejection(
                target, max_rounds=self.max_rounds, **kwargs
            )
        return sample_exact_by_pdc(target, max_rounds=self.max_rounds, **kwargs)

    def generate(self, target: int) -> SampleResult:
        """Draw one partition of ``target`` with the configured method."""

        self._check_target(target)
        partition = self._sample(target, self.tilt, logger=self.logger)
        success = partition.weight == int(target)

        notes = list(self.runtime_notes)
        if not success:
            notes.append("Expected-size method: weight differs from target")
        if self.logger is not None and self.log_level != "quiet":
            status = "OK" if success else "BEST_EFFORT"
            self.logger.info(
                f"[FINAL] status={status} method={self.method} target={target} "
                f"weight={partition.weight} rounds={partition.rounds} "
                f"parts={format_parts(partition)}"
            )

        return SampleResult(
            partition=partition,
            target=int(target),
            method=self.method,
            rounds=partition.rounds,
            tilt=partition.tilt,
            seed=self.seed,
            success=success,
            log_path=self.log_path,
            runtime_notes=notes,
        )

    def sample_many(self, target: int, count: int) -> list[Partition]:
        """Draw ``count`` partitions, solving the tilt only once."""

        count = int(count)
        if count < 0:
            raise ValueError("count must be >= 0")
        self._check_target(target)
        tilt = self.tilt
        if tilt is None or tilt >= 1:
            solution = resolve_tilt(
                int(target),
                self.policy,
                tilt_method=self.tilt_method,
                strict=bool(self.config.strict_tilt),
                logger=self.logger,
            )
            tilt = solution.x
        out = [self._sample(target, tilt) for _ in range(count)]
        if self.logger is not None:
            total_rounds = sum(p.rounds for p in out)
            self.logger.info(
                f"[BATCH] method={self.method} target={target} count={count} "
                f"rounds={total_rounds}"
            )
        return out


class IntegerPartition:
    """Stateful handle holding the most recent partition for one policy.

    Every sampling call replaces ``partition`` with a freshly built value, so
    a reader never sees a half-filled partition.
    """

    def __init__(self, policy: Any = None, rng: Any = None):
        self.policy = load_policy(policy)
        self.rng = resolve_rng(rng)
        self.partition = Partition()

    def _rng(self, rng):
        return self.rng if rng is None else rng

    def _store(self, partition: Partition) -> Partition:
        self.partition = partition
        return partition

    def random_size(self, target: int, tilt: float | None = None, rng: Any = None):
        return self._store(
            sample_expected_size(target, self.policy, tilt, self._rng(rng))
        )

    def rejection_sampling(
        self, target: int, tilt: float | None = None, rng: Any = None, max_rounds=None
    ):
        return self._store(
            sample_exact_by_rejection(
                target, self.policy, tilt, self._rng(rng), max_rounds=max_rounds
            )
        )

    def pdc_deterministic_second_half(
        self, target: int, tilt: float | None = None, rng: Any = None, max_rounds=None
    ):
        return self._store(
            sample_exact_by_pdc(
                target, self.policy, tilt, self._rng(rng), max_rounds=max_rounds
            )
        )

    def __call__(
        self, target: int, tilt: float | None = None, rng: Any = None, max_rounds=None
    ):
        return self._store(
            sample_exact(
                target, self.policy, tilt, self._rng(rng), max_rounds=max_rounds
            )
        )

    @property
    def weight(self) -> int:
        return self.partition.weight

    @property
    def multiplicities(self) -> dict[int, int]:
        return self.partition.multiplicities

    def parts(self) -> list[int]:
        return self.partition.parts()

    def ferrers(self, symbol: str = "*") -> str:
        return ferrers_diagram(self.partition, symbol=symbol)

    def __str__(self) -> str:
        return format_parts(self.partition)


def generate(
    target: int, config: SamplerConfig | Mapping[str, Any] | str | None = None
) -> SampleResult:
    """Convenience function for one-off sampling calls."""

    return PartitionSampler(config).generate(target)
