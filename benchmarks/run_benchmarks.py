#!/usr/bin/env python3
"""Latency benchmark for the transactional store.

Measures point operations on a populated store and the cost of opening,
committing and rolling back transactions as the visible state grows.
"""

import argparse
import json
import time
from pathlib import Path
from typing import Dict, List

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from txkv import TransactionalStore

_OPERATIONS = ("set", "get", "count", "begin", "commit", "rollback")


class Metrics:
    def __init__(self):
        self.latencies: Dict[str, List[float]] = {op: [] for op in _OPERATIONS}

    def record(self, op: str, started: float):
        self.latencies[op].append((time.perf_counter() - started) * 1000)

    def to_dict(self) -> Dict:
        return {
            op: {
                "p50": float(np.percentile(samples, 50)),
                "p95": float(np.percentile(samples, 95)),
                "p99": float(np.percentile(samples, 99)),
            }
            for op, samples in self.latencies.items()
            if samples
        }

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()
        for op, samples in self.latencies.items():
            fig.add_trace(go.Box(y=samples, name=op, boxpoints="outliers"))
        fig.update_layout(
            title=title,
            yaxis_title="Latency (ms)",
            boxmode="group"
        )
        fig.write_html(output_path)


class BenchmarkSuite:
    def __init__(self, num_entries: int, depth: int):
        self.num_entries = num_entries
        self.depth = depth
        self.metrics = Metrics()
        self._keys = [f"key_{i}" for i in range(num_entries)]
        self._values = [str(i % 100) for i in range(num_entries)]

    def run(self):
        store = TransactionalStore[str, str]()

        for i in tqdm(range(self.num_entries), desc="Set"):
            start = time.perf_counter()
            store.set(self._keys[i], self._values[i])
            self.metrics.record("set", start)

        for i in tqdm(range(self.num_entries), desc="Get"):
            start = time.perf_counter()
            store.get(self._keys[i])
            self.metrics.record("get", start)

        for i in tqdm(range(100), desc="Count"):
            start = time.perf_counter()
            store.count(str(i))
            self.metrics.record("count", start)

        # nested begin, then alternate commit / rollback back down to depth 0
        for _ in tqdm(range(self.depth), desc="Begin"):
            start = time.perf_counter()
            store.begin()
            self.metrics.record("begin", start)
        for level in tqdm(range(self.depth), desc="Commit/Rollback"):
            op = "commit" if level % 2 else "rollback"
            start = time.perf_counter()
            getattr(store, op)()
            self.metrics.record(op, start)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=100000, help="Number of entries")
    parser.add_argument(
        "--depth", type=int, default=50, help="Number of nested transactions"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("benchmark_results"),
        help="Output directory",
    )
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.size, args.depth)
    suite.run()

    suite.metrics.plot_latencies(
        "txkv Latency Distribution",
        args.output / "txkv_latencies.html"
    )

    with open(args.output / "metrics.json", "w") as f:
        json.dump({"txkv": suite.metrics.to_dict()}, f, indent=2)


if __name__ == "__main__":
    main()
