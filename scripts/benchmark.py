from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Any

from tqdm import tqdm

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from indexed_pq.priority_queue import PriorityQueue
from lib.bench_config import BenchConfig, load_bench_config, parse_args
from lib.bench_utils import prepare_run_dir, save_resolved_config, write_json
from lib.naive_queue import NaiveQueue
from lib.workload import apply_op, generate_workload


class Benchmark:
    def __init__(self, cfg: BenchConfig, wandb_run: Any | None = None) -> None:
        self.cfg = cfg
        self.run_dir = prepare_run_dir(cfg)
        self.workload = generate_workload(cfg.workload, cfg.seed)
        tqdm.write(
            "Workload: "
            f"initial={len(self.workload.initial):,} ops={len(self.workload):,} "
            f"value_range={cfg.workload.value_range} dtype={cfg.workload.value_dtype} "
            f"build={cfg.workload.build_mode}"
        )
        self.wandb_run = wandb_run if wandb_run is not None else self._init_wandb()
        save_resolved_config(cfg, self.run_dir / "config.resolved.json")

    def run(self) -> dict[str, Any]:
        try:
            indexed_queue, build_sec = self._build_indexed()
            indexed_results, indexed_sec = self._replay(indexed_queue, desc="indexed", audit=True)
            results: dict[str, Any] = {
                "indexed": self._summary(indexed_queue.size(), build_sec, indexed_sec),
            }

            if self.cfg.compare_naive:
                t0 = time.perf_counter()
                naive_queue = NaiveQueue(self.workload.initial)
                naive_build_sec = time.perf_counter() - t0
                naive_results, naive_sec = self._replay(naive_queue, desc="naive", audit=False)
                self._check_agreement(indexed_results, naive_results)
                results["naive"] = self._summary(naive_queue.size(), naive_build_sec, naive_sec)
                results["speedup"] = naive_sec / max(indexed_sec, 1e-9)

            metrics = {"indexed/ops_per_sec": results["indexed"]["ops_per_sec"]}
            if "naive" in results:
                metrics["naive/ops_per_sec"] = results["naive"]["ops_per_sec"]
                metrics["speedup"] = results["speedup"]
            self._log(metrics)
            write_json(results, self.run_dir / "results.json")
            tqdm.write(f"Results: {json.dumps(results, sort_keys=True)}")
            tqdm.write(f"Wrote {self.run_dir / 'results.json'}")
        finally:
            if self.wandb_run is not None:
                self.wandb_run.finish()
        return results

    def _build_indexed(self) -> tuple[PriorityQueue, float]:
        t0 = time.perf_counter()
        if self.cfg.workload.build_mode == "sequence":
            queue = PriorityQueue.from_sequence(self.workload.initial)
        else:
            queue = PriorityQueue.from_iterable(self.workload.initial)
        build_sec = time.perf_counter() - t0
        self._audit(queue, step=0)
        return queue, build_sec

    def _replay(self, queue: PriorityQueue | NaiveQueue, *, desc: str, audit: bool) -> tuple[list[Any], float]:
        results: list[Any] = []
        interval = self.cfg.audit_interval if audit else 0
        progress = tqdm(
            total=len(self.workload),
            dynamic_ncols=True,
            desc=desc,
            disable=not self.cfg.logging.progress,
        )
        elapsed = 0.0
        try:
            for step, (op, operand) in enumerate(self.workload.ops, start=1):
                t0 = time.perf_counter()
                results.append(apply_op(queue, op, operand))
                elapsed += time.perf_counter() - t0
                progress.update(1)
                if interval and step % interval == 0:
                    self._audit(queue, step=step)
        finally:
            progress.close()
        return results, elapsed

    def _audit(self, queue: PriorityQueue, step: int) -> None:
        if not self.cfg.audit_interval:
            return
        if not queue.is_min_heap():
            raise RuntimeError(f"Heap order violated after op {step}")
        if not queue.is_index_consistent():
            raise RuntimeError(f"Position index out of sync after op {step}")

    def _check_agreement(self, indexed: list[Any], naive: list[Any]) -> None:
        for step, (got, expected) in enumerate(zip(indexed, naive), start=1):
            if got != expected:
                op, operand = self.workload.ops[step - 1]
                raise RuntimeError(
                    f"Queues disagree at op {step} ({op} {operand!r}): indexed={got!r} naive={expected!r}"
                )

    def _summary(self, final_size: int, build_sec: float, ops_sec: float) -> dict[str, Any]:
        return {
            "final_size": final_size,
            "build_sec": build_sec,
            "ops_sec": ops_sec,
            "ops_per_sec": len(self.workload) / max(ops_sec, 1e-9),
        }

    def _init_wandb(self):
        if not self.cfg.logging.use_wandb:
            return None

        import wandb  # type: ignore

        return wandb.init(
            dir=self.run_dir,
            project=self.cfg.logging.wandb_project,
            entity=self.cfg.logging.wandb_entity,
            name=self.cfg.logging.wandb_run_name,
            mode=self.cfg.logging.wandb_mode,
            config=self.cfg.to_dict(),
        )

    def _log(self, metrics: dict[str, float]) -> None:
        if self.wandb_run is not None:
            self.wandb_run.log(metrics)


def main() -> None:
    args = parse_args()
    cfg = load_bench_config(args)
    if args.print_config:
        print(json.dumps(cfg.to_dict(), indent=2, sort_keys=True))
        return
    Benchmark(cfg).run()


if __name__ == "__main__":
    main()
