"""Micro-benchmarks for the lease parser on synthetic data."""

from __future__ import annotations

import io
import time

from dhcpleases.data.generator import generate_leases_file
from dhcpleases.parser import parse


def benchmark_parse(leases: int = 5000, runs: int = 3) -> dict[str, float]:
    data, _ = generate_leases_file(count=leases, hosts=leases // 20)
    total_bytes = len(data)
    best = None
    for _ in range(runs):
        start = time.perf_counter()
        parse(io.BytesIO(data))
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    mbps = (total_bytes / 1_000_000) / best if best else 0.0
    return {"leases": leases, "bytes": total_bytes, "best_seconds": best or 0.0, "mbps": mbps}


if __name__ == "__main__":
    result = benchmark_parse()
    print(result)
