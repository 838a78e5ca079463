"""Quick start example for prime_sum.

Run this script to try both search strategies and check the installation.
"""

import time


def main():
    print("Prime Sum Sequences - Quick Start Demo")
    print("=" * 50)

    from prime_sum.core.sieve import PrimeSieve
    from prime_sum.graph.hankel import HankelGraph

    print("\n1. Building a prime sieve up to 10M...")
    start = time.perf_counter()
    sieve = PrimeSieve(10_000_000)
    elapsed = time.perf_counter() - start
    print(f"   {sieve.count():,} primes in {elapsed:.3f}s ({sieve.nbytes:,} bytes)")

    print("\n2. The prime sum graph of order 6...")
    graph = HankelGraph(6, sieve)
    print("   " + graph.format_matrix().replace("\n", "\n   "))
    print(f"   Degrees: {graph.vertex_degrees().tolist()}")

    print("\n3. Backtracking search for n = 2..20...")
    from prime_sum.search.backtracking import BacktrackingSearcher

    searcher = BacktrackingSearcher(sieve)
    for n in range(2, 21, 2):
        sequence = searcher.search(n)
        print(f"   n={n:>2}: {'-'.join(str(v) for v in sequence)}")

    print("\n4. Fast criterion and lazy cycle for n = 2,000,000...")
    from prime_sum.search.construction import construct_cycle

    half_size = 1_000_000
    start = time.perf_counter()
    cycle = construct_cycle(half_size, sieve)
    print(f"   Witness: p1={cycle.witness.p1}, p2={cycle.witness.p2}")

    first = previous = next(cycle)
    count = 1
    bad = 0
    for vertex in cycle:
        if not sieve.is_prime(previous + vertex):
            bad += 1
        previous = vertex
        count += 1
    if not sieve.is_prime(previous + first):
        bad += 1
    elapsed = time.perf_counter() - start
    print(f"   Streamed {count:,} vertices, {bad} non-prime sums, in {elapsed:.3f}s")

    print("\n5. Scheduling a fast run over 4..10,000 on 4 threads...")
    from prime_sum.pipeline.scheduler import run_range

    report = run_range(10_000, fast=True, threads=4)
    print(f"   Success: {report.success}, failures: {report.failures}")

    print("\n" + "=" * 50)
    print("Demo complete!")


if __name__ == "__main__":
    main()
