"""Benchmark: markup parse latency (p50/p95/mean).

Measures per-call latency for parsing rendered email markup back into a
document tree.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

import mailblocks

_WARMUP: int = 50
_ITERATIONS: int = 1_000

_SAMPLE_BLOCKS: list[dict[str, object]] = [
    {
        "kind": "hero",
        "headline": "Welcome aboard",
        "ctaText": "Get started",
        "ctaUrl": "https://acme.test/start",
        "imageUrl": "https://cdn.acme.test/hero.jpg",
    },
    {
        "kind": "content",
        "headline": "What's new",
        "paragraphs": ["We shipped a faster dashboard.", "Reports now export to CSV."],
        "imageUrl": "https://cdn.acme.test/dashboard.jpg",
        "imagePosition": "left",
    },
    {"kind": "cta", "headline": "Ready?", "buttonText": "Open dashboard", "buttonUrl": "https://acme.test/app"},
    {"kind": "footer", "companyName": "Acme", "unsubscribeUrl": "https://acme.test/unsubscribe"},
]


def bench_parse_latency(iterations: int = _ITERATIONS, warmup: int = _WARMUP) -> dict[str, object]:
    """Benchmark parse latency on rendered markup for a four-block email.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    markup = mailblocks.render(mailblocks.compile_email(_SAMPLE_BLOCKS)).markup

    for _ in range(warmup):
        mailblocks.parse(markup)

    latencies_ms: list[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        mailblocks.parse(markup)
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": "mailblocks_parse_latency",
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


if __name__ == "__main__":
    result = bench_parse_latency()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
