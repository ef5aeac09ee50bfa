#!/usr/bin/env python3
"""Benchmark Starlight index loading and as-you-type search.

Loads the real application directories several times, then replays a
query one keystroke at a time against the loaded index, the way a
launcher UI would while the user types.

Usage:
    python3 scripts/bench-index.py [QUERY]
    # Default query: "firefox"
"""

import asyncio
import math
import sys
import time

from loguru import logger

from starlight.services.applications import ApplicationIndex

RUNS = 10
QUERY = sys.argv[1] if len(sys.argv) > 1 else "firefox"


def log(line=""):
    """Print to terminal."""
    print(line)


def stats(values):
    """Compute min, max, avg, median, p95, stddev from a list of floats."""
    s = sorted(values)
    n = len(s)
    avg = sum(s) / n
    variance = sum((x - avg) ** 2 for x in s) / n
    return {
        "min": s[0],
        "max": s[-1],
        "avg": avg,
        "median": s[n // 2] if n % 2 else (s[n // 2 - 1] + s[n // 2]) / 2,
        "p95": s[min(n - 1, int(n * 0.95))],
        "stddev": math.sqrt(variance),
        "n": n,
    }


def fmt_ms(st):
    return (
        f"min {st['min']:7.2f} ms | avg {st['avg']:7.2f} ms | "
        f"p95 {st['p95']:7.2f} ms | max {st['max']:7.2f} ms (n={st['n']})"
    )


async def bench_load(runs=RUNS):
    """Time full refresh() cycles; returns (timings_ms, index)."""
    index = ApplicationIndex()
    timings = []
    for _ in range(runs):
        t0 = time.perf_counter()
        await index.refresh()
        timings.append((time.perf_counter() - t0) * 1000)
    return timings, index


async def bench_typing(index, query, runs=RUNS):
    """Time search() for every prefix of query, repeated runs times."""
    per_prefix = {}
    for _ in range(runs):
        for i in range(1, len(query) + 1):
            prefix = query[:i]
            t0 = time.perf_counter()
            results = await index.search(prefix)
            elapsed = (time.perf_counter() - t0) * 1000
            per_prefix.setdefault(prefix, ([], len(results)))[0].append(elapsed)
    return per_prefix


async def main():
    logger.remove()
    logger.add(sys.stderr, level="ERROR")

    log("=" * 70)
    log(" Starlight index benchmark")
    log("=" * 70)

    load_times, index = await bench_load()
    count = await index.count()
    log(f"\n Load ({count} applications)")
    log(f"   {fmt_ms(stats(load_times))}")

    log(f"\n Typing '{QUERY}'")
    for prefix, (timings, hits) in (await bench_typing(index, QUERY)).items():
        log(f"   {prefix:<16} {hits:4d} hits | {fmt_ms(stats(timings))}")


if __name__ == "__main__":
    asyncio.run(main())
