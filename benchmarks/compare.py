"""Comparison visualiser for mailblocks benchmark results."""
from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()

RESULT_FILES: tuple[str, ...] = (
    "compile_throughput_baseline.json",
    "render_throughput_baseline.json",
    "latency_baseline.json",
    "memory_baseline.json",
)


def _load(path: Path) -> dict[str, object] | None:
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)  # type: ignore[return-value]


def build_table(results_dir: Path) -> Table:
    """Collect every saved baseline under ``results_dir`` into a table."""
    table = Table(title="mailblocks Benchmark Results")
    table.add_column("Operation", style="cyan")
    table.add_column("Ops/sec", justify="right")
    table.add_column("Avg Latency", justify="right")
    table.add_column("Peak Mem", justify="right")

    for fname in RESULT_FILES:
        data = _load(results_dir / fname)
        if data is None:
            table.add_row(fname, "[dim]not run[/dim]", "", "")
            continue
        ops_sec = float(data.get("ops_per_second", 0))  # type: ignore[arg-type]
        avg_lat = float(data.get("avg_latency_ms", 0))  # type: ignore[arg-type]
        peak_kb = float(data.get("peak_memory_kb", 0))  # type: ignore[arg-type]
        table.add_row(
            str(data.get("operation", fname)),
            f"{ops_sec:,.0f}" if ops_sec > 0 else "n/a",
            f"{avg_lat:.3f}ms" if avg_lat > 0 else "n/a",
            f"{peak_kb:,.0f}KB" if peak_kb > 0 else "n/a",
        )
    return table


def main() -> None:
    console.print(build_table(Path(__file__).parent / "results"))
    console.print("Run all benchmarks:")
    for script in ("bench_throughput.py", "bench_latency.py", "bench_memory.py"):
        console.print(f"  python benchmarks/{script}")


if __name__ == "__main__":
    main()
