"""Command-line interface for partgen."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .. import __version__
from ..engine.errors import PartitionError
from ..schema import defaults
from ..schema.config import (
    check_feasibility,
    load_config,
    resolve_policy,
    validate_config,
)
from ..schema.policies import available_policies
from ..scoring.frequencies import partition_frequencies, uniformity_report
from .display import ferrers_diagram, format_parts
from .sampler import PartitionSampler


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="partgen",
        description="Generate random integer partitions, optionally restricted.",
    )
    parser.add_argument("--target", type=int, help="Size of the partition")
    parser.add_argument(
        "--policy",
        type=str,
        help="Restriction policy name (use --list-policies to inspect)",
    )
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Policy parameter, e.g. --param j=5 --param m=7 (repeatable)",
    )
    parser.add_argument(
        "--method",
        choices=list(defaults.VALID_METHODS),
        help="Sampling algorithm (default: pdc)",
    )
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument(
        "--tilt", type=float, help="Manual tilt in (0, 1); bypasses the solver"
    )
    parser.add_argument(
        "--tilt-method",
        choices=list(defaults.VALID_TILT_METHODS),
        help="Tilt solver (fast only supports the unrestricted policy)",
    )
    parser.add_argument(
        "--max-rounds", type=int, help="Give up after this many sampling rounds"
    )
    parser.add_argument(
        "--count", type=int, default=defaults.DEFAULT_COUNT, help="Number of samples"
    )
    parser.add_argument(
        "--frequencies",
        action="store_true",
        help="Print a frequency table of the samples against the uniform law",
    )
    parser.add_argument(
        "--ferrers", action="store_true", help="Print the Ferrers diagram"
    )
    parser.add_argument("--config", type=str, help="Path to YAML config file")
    parser.add_argument(
        "--list-policies",
        action="store_true",
        help="Print available restriction policies and exit",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate config and target feasibility only (no sampling)",
    )
    parser.add_argument(
        "--log-level", choices=list(defaults.VALID_LOG_LEVELS), help="Log verbosity"
    )
    parser.add_argument("--log-dir", type=str, help="Directory for run logs")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print package version and exit",
    )
    return parser


def _print_guidance() -> None:
    print("partgen CLI")
    print("No command arguments provided.")
    print()
    print("Quick test paths:")
    print("- Script:   python sample_run.py")
    print()
    print("Direct CLI examples:")
    print("- python -m partgen --list-policies")
    print("- python -m partgen --target 100 --ferrers")
    print("- python -m partgen --target 100 --policy residue --param j=5 --param m=7")
    print("- python -m partgen --target 5 --count 7000 --frequencies")


def _parse_param(text: str) -> tuple[str, Any]:
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"Policy parameter must look like KEY=VALUE, got '{text}'")
    value = value.strip()
    try:
        return key.strip(), int(value)
    except ValueError:
        return key.strip(), value


def _build_config(args: argparse.Namespace) -> dict[str, Any]:
    config: dict[str, Any] = {}
    if args.config:
        config_path = Path(args.config).expanduser()
        if not config_path.exists() or not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config = load_config(config_path.read_text(encoding="utf-8"))

    overrides = {
        "policy": args.policy,
        "method": args.method,
        "seed": args.seed,
        "tilt": args.tilt,
        "tilt_method": args.tilt_method,
        "max_rounds": args.max_rounds,
        "log_level": args.log_level,
        "log_dir": args.log_dir,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    if args.param:
        params = dict(config.get("policy_params") or {})
        params.update(_parse_param(item) for item in args.param)
        config["policy_params"] = params
    return config


def _validate_only(config: dict[str, Any], target: int | None) -> int:
    warnings = validate_config(config)
    policy = resolve_policy(config.get("policy"), config.get("policy_params"))
    feas_warnings, feas_errors = ([], [])
    if target is not None:
        feas_warnings, feas_errors = check_feasibility(target, policy)

    all_warnings = [*warnings, *feas_warnings]
    status = "OK" if not feas_errors else "ERROR"
    print(
        f"[VALIDATION] status={status} policy={policy!r} target={target} "
        f"warnings={len(all_warnings)} errors={len(feas_errors)}"
    )
    for warning in all_warnings:
        print(f"[WARN] {warning}")
    for error in feas_errors:
        print(f"[ERROR] {error}", file=sys.stderr)
    return 0 if not feas_errors else 1


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else sys.argv[1:]
    if not args_list:
        _print_guidance()
        return 0

    parser = _build_parser()
    args = parser.parse_args(args_list)

    if args.version:
        print(__version__)
        return 0

    if args.list_policies:
        print("Available policies:")
        for name in available_policies():
            print(f"- {name}")
        return 0

    if args.target is None and not args.validate_config:
        parser.error(
            "Provide --target <n>. Run without arguments to view guided examples."
        )
    if args.count < 1:
        parser.error("--count must be >= 1")

    try:
        config = _build_config(args)
        if args.validate_config:
            return _validate_only(config, args.target)
        sampler = PartitionSampler(config)
        if args.count == 1:
            result = sampler.generate(args.target)
            partitions = [result.partition]
        else:
            partitions = sampler.sample_many(args.target, args.count)
    except (PartitionError, ValueError, TypeError, FileNotFoundError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if args.frequencies:
        frame = partition_frequencies(partitions, args.target, sampler.policy)
        print(frame.to_string(index=False))
        report = uniformity_report(frame)
        print(
            f"[UNIFORMITY] samples={report['samples']} "
            f"partitions={report['partitions']} chi_square={report['chi_square']:.3f} "
            f"dof={report['dof']} max_abs_deviation={report['max_abs_deviation']:.5f}"
        )
    else:
        for partition in partitions:
            print(f"Partition: {format_parts(partition)}")
            print(f"has size {partition.weight} (rounds={partition.rounds})")
            if args.ferrers:
                print(ferrers_diagram(partition))

    status = "OK" if all(p.weight == args.target for p in partitions) else "BEST_EFFORT"
    print(
        f"[FINAL SUMMARY] status={status} method={sampler.method} "
        f"policy={sampler.policy!r} seed={sampler.seed} count={len(partitions)}"
    )
    if sampler.log_path is not None:
        print(f"[NOTE] log={sampler.log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
