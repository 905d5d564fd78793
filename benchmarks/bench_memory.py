"""Benchmark: memory growth across render/parse round trips."""
from __future__ import annotations

import json
import tracemalloc
from pathlib import Path

import mailblocks

_ITERATIONS: int = 300

_SAMPLE_BLOCKS: list[dict[str, object]] = [
    {"kind": "hero", "headline": "Hello", "ctaText": "Go", "ctaUrl": "https://acme.test"},
    {"kind": "stats", "stats": [{"value": "12k", "label": "Users"}, {"value": "99%", "label": "Uptime"}]},
    {"kind": "footer", "companyName": "Acme", "unsubscribeUrl": "https://acme.test/unsubscribe"},
]


def bench_round_trip_memory(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark memory allocated while rendering and re-parsing a tree.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb.
    """
    tree = mailblocks.compile_email(_SAMPLE_BLOCKS)

    tracemalloc.start()
    snapshot_before = tracemalloc.take_snapshot()

    for _ in range(iterations):
        mailblocks.parse(mailblocks.render(tree).markup)

    snapshot_after = tracemalloc.take_snapshot()
    tracemalloc.stop()

    stats = snapshot_after.compare_to(snapshot_before, "lineno")
    total_bytes = sum(stat.size_diff for stat in stats if stat.size_diff > 0)
    peak_kb = round(total_bytes / 1024, 2)

    result: dict[str, object] = {
        "operation": "mailblocks_round_trip_memory",
        "iterations": iterations,
        "peak_memory_kb": peak_kb,
        "current_memory_kb": peak_kb,
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
    }
    print(f"[bench_memory] {result['operation']}: peak {peak_kb:.2f} KB over {iterations} iterations")
    return result


if __name__ == "__main__":
    result = bench_round_trip_memory()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "memory_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
