"""
Sampler configuration loading, validation and feasibility checks.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from . import defaults
from .policies import RestrictionPolicy, load_policy

_KNOWN_KEYS = (
    "policy",
    "policy_params",
    "method",
    "seed",
    "tilt",
    "tilt_method",
    "max_rounds",
    "strict_tilt",
    "check_feasibility",
    "log_level",
    "log_dir",
)


def load_config(source: Any = None) -> dict[str, Any]:
    """Load a sampler config from a mapping, YAML text or a YAML file path."""

    if source is None:
        return {}
    if isinstance(source, Mapping):
        return {str(k): v for k, v in source.items()}
    if isinstance(source, Path):
        text = source.read_text(encoding="utf-8")
    elif isinstance(source, str):
        text = source
        candidate = Path(source.strip()).expanduser() if source.strip() else None
        if (
            candidate is not None
            and "\n" not in source
            and candidate.suffix in (".yaml", ".yml")
            and candidate.is_file()
        ):
            text = candidate.read_text(encoding="utf-8")
    else:
        raise TypeError(f"Unsupported config type: {type(source).__name__}")

    if not text.strip():
        raise ValueError("Config text is empty")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Could not parse config YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Config did not parse to a dictionary")
    return parsed


def validate_config(config: Mapping[str, Any]) -> list[str]:
    """Validate a config mapping.

    Args:
        config: Parsed config mapping.

    Returns:
        List of warning messages; an empty list means the config is clean.
    """
    warnings = []

    for key in config:
        if key not in _KNOWN_KEYS:
            warnings.append(f"unknown config key '{key}' is ignored")

    method = config.get("method")
    if method is not None and str(method).strip().lower() not in defaults.VALID_METHODS:
        warnings.append(f"method must be one of {', '.join(defaults.VALID_METHODS)}")

    tilt_method = config.get("tilt_method")
    if (
        tilt_method is not None
        and str(tilt_method).strip().lower() not in defaults.VALID_TILT_METHODS
    ):
        warnings.append(
            f"tilt_method must be one of {', '.join(defaults.VALID_TILT_METHODS)}"
        )

    log_level = config.get("log_level")
    if log_level is not None and log_level not in defaults.VALID_LOG_LEVELS:
        warnings.append("log_level must be info or quiet")

    log_dir = config.get("log_dir")
    if log_dir is not None and (not isinstance(log_dir, str) or not log_dir.strip()):
        warnings.append("log_dir must be a non-empty string")

    tilt = config.get("tilt")
    if tilt is not None:
        try:
            numeric = float(tilt)
        except (TypeError, ValueError):
            warnings.append("tilt must be numeric")
        else:
            if numeric >= 1:
                warnings.append("tilt >= 1 is ignored; the solver is used instead")
            elif numeric <= 0:
                warnings.append("tilt must lie in (0, 1)")

    for key in ("seed", "max_rounds"):
        value = config.get(key)
        if value is None:
            continue
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            warnings.append(f"{key} must be an integer")
            continue
        if key == "max_rounds" and parsed < 1:
            warnings.append("max_rounds must be >= 1")

    for key in ("strict_tilt", "check_feasibility"):
        value = config.get(key)
        if value is not None and not isinstance(value, bool):
            warnings.append(f"{key} must be a boolean")

    policy = config.get("policy")
    params = config.get("policy_params") or {}
    if not isinstance(params, Mapping):
        warnings.append("policy_params must be a mapping")
    elif policy is not None and not isinstance(policy, RestrictionPolicy):
        try:
            resolve_policy(policy, params)
        except (TypeError, ValueError) as exc:
            warnings.append(f"policy: {exc}")

    return warnings


def resolve_policy(policy: Any, params: Mapping[str, Any] | None = None):
    """Build a policy from a spec plus optional extra parameters."""

    if params:
        if isinstance(policy, Mapping):
            merged = {**policy, **params}
        elif isinstance(policy, str) or policy is None:
            merged = {"type": policy or defaults.DEFAULT_POLICY, **params}
        else:
            raise ValueError("policy_params need a named policy")
        return load_policy(merged)
    return load_policy(policy if policy is not None else defaults.DEFAULT_POLICY)


def check_feasibility(target: int, policy: Any = None) -> tuple[list[str], list[str]]:
    """Necessary conditions for an exact partition of ``target`` to exist.

    Returns:
        ``(warnings, errors)``. Errors mean the exact samplers would loop
        forever; an empty error list does not prove feasibility.
    """
    warnings = []
    errors = []

    try:
        n = int(target)
    except (TypeError, ValueError):
        return warnings, [f"target must be an integer, got {target!r}"]
    if n < 0:
        return warnings, ["target must be >= 0"]
    if n == 0:
        return warnings, errors

    policy = load_policy(policy)
    smallest = policy.smallest()
    if smallest == 0:
        errors.append(f"{policy!r} admits no part sizes")
        return warnings, errors
    if smallest > n:
        errors.append(f"smallest allowed part {smallest} exceeds target {n}")
        return warnings, errors

    divisor = 0
    for size in policy.sizes(n):
        divisor = math.gcd(divisor, size)
        if divisor == 1:
            break
    if n % divisor != 0:
        errors.append(
            f"every allowed part is a multiple of {divisor}, which does not divide {n}"
        )
    elif n % smallest != 0:
        warnings.append(
            f"target {n} is not a multiple of the smallest part {smallest}; "
            "exact sampling may need many rounds"
        )
    return warnings, errors
