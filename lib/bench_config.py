from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from lib.config_base import ConfigBase, parse_override

BUILD_MODES = ("sequence", "iterable")


@dataclass
class WorkloadConfig(ConfigBase):
    initial_size: int = 1000
    num_ops: int = 20000
    # Small ranges produce many duplicates.
    value_range: int = 500
    value_dtype: str = "int64"
    # Build the initial queue with heapify (sequence) or repeated add (iterable)
    build_mode: str = "sequence"
    # Relative op mix
    add_weight: float = 0.4
    poll_weight: float = 0.2
    remove_weight: float = 0.2
    contains_weight: float = 0.2

    def __post_init__(self) -> None:
        if self.initial_size < 0 or self.num_ops < 0:
            raise ValueError("workload sizes must be non-negative")
        if self.value_range <= 0:
            raise ValueError(f"value_range must be positive, got {self.value_range}")
        if self.build_mode not in BUILD_MODES:
            raise ValueError(f"Unsupported build_mode `{self.build_mode}`. Choices: {list(BUILD_MODES)}")
        weights = self.op_weights()
        if any(w < 0 for w in weights.values()) or sum(weights.values()) <= 0:
            raise ValueError(f"Op weights must be non-negative and not all zero: {weights}")

    def op_weights(self) -> dict[str, float]:
        return {
            "add": self.add_weight,
            "poll": self.poll_weight,
            "remove": self.remove_weight,
            "contains": self.contains_weight,
        }


@dataclass
class LoggingConfig(ConfigBase):
    progress: bool = True
    use_wandb: bool = False
    wandb_project: str = "indexed-priority-queue"
    wandb_run_name: str = "benchmark"
    wandb_entity: str | None = None
    wandb_mode: str = "online"


@dataclass
class OutputConfig(ConfigBase):
    out_dir: str = "runs"
    run_name: str = "benchmark"
    run_id: str | None = None


@dataclass
class BenchConfig(ConfigBase):
    seed: int = 0
    compare_naive: bool = True
    # Audit heap order and index consistency every N ops; 0 disables
    audit_interval: int = 0
    workload: WorkloadConfig = field(default_factory=WorkloadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self) -> None:
        if self.audit_interval < 0:
            raise ValueError(f"audit_interval must be non-negative, got {self.audit_interval}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark the indexed priority queue against a naive heapq queue."
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Path to .toml or .json config."
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override config key(s), e.g. --set workload.num_ops=50000 --set seed=3",
    )
    parser.add_argument(
        "--print-config", action="store_true", help="Print final config and exit."
    )
    return parser.parse_args(argv)


def load_bench_config(args: argparse.Namespace) -> BenchConfig:
    cfg = BenchConfig.load(args.config) if args.config is not None else BenchConfig()
    overrides = dict(parse_override(expression) for expression in args.set)
    if overrides:
        cfg = cfg.with_flat_updates(overrides)
    return cfg
