from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lib.bench_config import BenchConfig
from lib.bench_utils import write_json
from lib.sweep_config import expand_grid, load_sweep_config, run_name_for
from scripts.benchmark import Benchmark


def run_sweep(base_config: str | None, sweep_config: str) -> list[dict[str, Any]]:
    base = BenchConfig.load(base_config) if base_config is not None else BenchConfig()
    sweep_cfg = load_sweep_config(sweep_config)
    sweep_name = str(sweep_cfg.get("name") or Path(sweep_config).stem)
    sweep_root = Path(base.output.out_dir) / "sweeps" / sweep_name
    grid = expand_grid(sweep_cfg)
    tqdm.write(f"Sweep `{sweep_name}`: {len(grid)} run(s) under {sweep_root}")

    summary: list[dict[str, Any]] = []
    for point_idx, point in enumerate(grid):
        overrides = {
            **point,
            "output.out_dir": str(sweep_root),
            "output.run_name": run_name_for(point),
            "output.run_id": str(point_idx),
        }
        if "logging.wandb_run_name" not in point:
            overrides["logging.wandb_run_name"] = run_name_for(point)
        cfg = base.with_flat_updates(overrides)
        results = Benchmark(cfg).run()
        summary.append({"overrides": point, "results": results})

    write_json({"name": sweep_name, "runs": summary}, sweep_root / "summary.json")
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a grid of queue benchmarks.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to base .toml or .json benchmark config.",
    )
    parser.add_argument(
        "--sweep-config",
        type=str,
        required=True,
        help="Path to sweep .yaml with a `parameters` grid.",
    )
    args = parser.parse_args()
    run_sweep(args.config, args.sweep_config)


if __name__ == "__main__":
    main()
