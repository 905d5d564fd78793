"""Benchmark: block compilation and render throughput.

Measures how many compile and render passes complete per second using the
public ``mailblocks.compile_email()`` and ``mailblocks.render()`` APIs.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

import mailblocks

_ITERATIONS: int = 2_000
_RENDER_ITERATIONS: int = 2_000

_SAMPLE_BLOCKS: list[dict[str, object]] = [
    {"kind": "header", "companyName": "Acme", "menuItems": [{"label": "Shop", "url": "https://acme.test/shop"}]},
    {
        "kind": "hero",
        "headline": "Spring collection",
        "subheadline": "Fresh picks for the new season",
        "ctaText": "Shop now",
        "ctaUrl": "https://acme.test/spring",
        "imageKeyword": "spring flowers",
    },
    {
        "kind": "features",
        "features": [
            {"title": "Free shipping", "description": "On every order"},
            {"title": "Easy returns", "description": "Within 30 days"},
            {"title": "Support", "description": "Around the clock"},
        ],
    },
    {"kind": "text", "content": "Thanks for being a **loyal** customer."},
    {"kind": "footer", "companyName": "Acme", "unsubscribeUrl": "https://acme.test/unsubscribe"},
]


def _result(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_compile_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark compiling a five-block email into a document tree.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    for _ in range(iterations):
        mailblocks.compile_email(_SAMPLE_BLOCKS, preview_text="Spring is here")
    return _result("mailblocks_compile_throughput", iterations, time.perf_counter() - start)


def bench_render_throughput(iterations: int = _RENDER_ITERATIONS) -> dict[str, object]:
    """Benchmark rendering a compiled tree to compact markup.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    tree = mailblocks.compile_email(_SAMPLE_BLOCKS, preview_text="Spring is here")

    start = time.perf_counter()
    for _ in range(iterations):
        mailblocks.render(tree)
    return _result("mailblocks_render_throughput", iterations, time.perf_counter() - start)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_compile_throughput, "compile_throughput_baseline.json"),
        (bench_render_throughput, "render_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
