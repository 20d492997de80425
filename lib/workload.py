from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from lib.bench_config import WorkloadConfig
from lib.bench_utils import resolve_value_dtype

OPS = ("add", "poll", "remove", "contains")


@dataclass
class Workload:
    initial: list[Any]
    ops: list[tuple[str, Any]]

    def __len__(self) -> int:
        return len(self.ops)


def _draw_values(rng: np.random.Generator, cfg: WorkloadConfig, count: int) -> list[Any]:
    dtype = resolve_value_dtype(cfg.value_dtype)
    raw = rng.integers(0, cfg.value_range, size=count)
    if dtype.kind == "f":
        # Half-steps keep floats exactly representable and still collide.
        raw = raw / 2.0
    # Plain Python scalars: numpy scalars hash fine but print noisily.
    return raw.astype(dtype).tolist()


def generate_workload(cfg: WorkloadConfig, seed: int) -> Workload:
    """Draw a reproducible initial population and op sequence.

    ``poll`` carries no operand. The other ops draw their operand from the
    same value range as the initial elements, so ``remove`` and ``contains``
    hit present values often enough to exercise duplicates.
    """
    rng = np.random.default_rng(seed)
    initial = _draw_values(rng, cfg, cfg.initial_size)

    weights = np.array([cfg.op_weights()[op] for op in OPS], dtype=np.float64)
    op_ids = rng.choice(len(OPS), size=cfg.num_ops, p=weights / weights.sum())
    operands = _draw_values(rng, cfg, cfg.num_ops)

    ops: list[tuple[str, Any]] = []
    for op_id, operand in zip(op_ids.tolist(), operands):
        op = OPS[op_id]
        ops.append((op, None if op == "poll" else operand))
    return Workload(initial=initial, ops=ops)


def apply_op(queue: Any, op: str, operand: Any) -> Any:
    if op == "add":
        return queue.add(operand)
    if op == "poll":
        return queue.poll()
    if op == "remove":
        return queue.remove(operand)
    if op == "contains":
        return queue.contains(operand)
    raise ValueError(f"Unknown op `{op}`. Choices: {list(OPS)}")


def replay(workload: Workload, queue: Any) -> list[Any]:
    """Apply every op to ``queue`` and collect the return values."""
    return [apply_op(queue, op, operand) for op, operand in workload.ops]
