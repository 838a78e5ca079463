"""Command-line interface for prime_sum."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from prime_sum.core.errors import ConfigurationError


def setup_logger(verbose: bool = False, log_path: Path | None = None) -> logging.Logger:
    """Configure the package logger for console and optional file output."""
    logger = logging.getLogger("prime_sum")
    logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def cmd_search(args: argparse.Namespace) -> int:
    """Search every even size in a range."""
    from prime_sum.pipeline.scheduler import SchedulerConfig, WorkScheduler
    from prime_sum.utils.run_manager import RunManager

    config = SchedulerConfig(
        max_size=args.max,
        start=args.start,
        threads=args.threads,
        fast=args.fast,
        lookahead=args.lookahead,
        progress=args.progress,
    )
    try:
        config.validate()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    run = None
    if args.save:
        run_type = "fast" if args.fast else "backtracking"
        run = RunManager(Path(args.output_dir)).create_run(
            run_type, f"{config.start}-{config.max_size}", config.to_dict()
        )

    try:
        report = WorkScheduler(config).run()
    except Exception as exc:
        if run is not None:
            run.log(f"Run aborted: {exc!r}", level="ERROR")
            run.complete("failed", {"error": repr(exc)})
        raise

    for result in report.ordered():
        line = f"n={result.size:<6} {result.outcome.value:<20} {result.elapsed:.3f}s"
        if args.show and result.sequence is not None:
            line += "  " + "-".join(str(v) for v in result.sequence)
        if result.witness is not None:
            line += f"  p1={result.witness.p1} p2={result.witness.p2}"
        print(line)

    sizes = len(report.results)
    print(f"\n{sizes - len(report.failures)}/{sizes} sizes succeeded in {report.total_time:.3f}s "
          f"(sieve {report.sieve_time:.3f}s)")
    if report.failures:
        print(f"Failed sizes: {', '.join(str(n) for n in report.failures)}")

    if run is not None:
        summary = {"success": report.success, "failures": report.failures}
        run.save_results(report.to_dict(), summary=summary)
        run.log(f"{sizes} sizes, success={report.success}")
        run.complete("completed" if report.success else "failed", summary)
        print(f"Results saved to {run.run_dir}/")

    return 0 if report.success else 1


def cmd_path(args: argparse.Namespace) -> int:
    """Backtracking search for a single size."""
    from prime_sum.core.sieve import PrimeSieve
    from prime_sum.search.backtracking import BacktrackingSearcher

    if args.size < 1:
        print(f"Error: size must be >= 1, got {args.size}", file=sys.stderr)
        return 2

    sieve = PrimeSieve(2 * args.size)
    sequence = BacktrackingSearcher(sieve, lookahead=args.lookahead).search(args.size, cycle=args.cycle)
    kind = "cycle" if args.cycle else "path"
    if sequence is None:
        print(f"No prime sum {kind} of size {args.size}")
        return 1

    print("-".join(str(v) for v in sequence))
    return 0


def cmd_cycle(args: argparse.Namespace) -> int:
    """Build a cycle from the fast criterion and stream it."""
    from prime_sum.core.sieve import PrimeSieve
    from prime_sum.search.construction import construct_cycle

    if args.size < 2 or args.size % 2 != 0:
        print(f"Error: size must be even and >= 2, got {args.size}", file=sys.stderr)
        return 2

    sieve = PrimeSieve(2 * args.size)
    cycle = construct_cycle(args.size // 2, sieve)
    if cycle is None:
        print(f"Criterion not satisfied for size {args.size}")
        return 1

    witness = cycle.witness
    print(f"p1={witness.p1} p2={witness.p2}")

    first = previous = None
    count = 0
    bad = 0
    for vertex in cycle:
        if not args.quiet:
            print(vertex)
        if first is None:
            first = vertex
        elif args.verify and not sieve.is_prime(previous + vertex):
            bad += 1
        previous = vertex
        count += 1

    if args.verify:
        if not sieve.is_prime(previous + first):
            bad += 1
        print(f"{count} vertices, {bad} non-prime sums")
        return 0 if bad == 0 and count == args.size else 1
    return 0


def cmd_matrix(args: argparse.Namespace) -> int:
    """Print the Hankel adjacency matrix and vertex degrees."""
    from prime_sum.core.sieve import PrimeSieve
    from prime_sum.graph.hankel import HankelGraph

    if args.size < 1:
        print(f"Error: size must be >= 1, got {args.size}", file=sys.stderr)
        return 2

    graph = HankelGraph(args.size, PrimeSieve(2 * args.size))
    print(graph.format_matrix())
    print(f"\nDegrees: {graph.vertex_degrees().tolist()}")
    return 0


def cmd_runs(args: argparse.Namespace) -> int:
    """List or clean up saved runs."""
    from prime_sum.utils.run_manager import RunManager

    manager = RunManager(Path(args.output_dir))

    if args.cleanup:
        deleted = manager.cleanup_old_runs(keep_count=args.keep, dry_run=not args.force)
        if not deleted:
            print("No runs to clean up")
            return 0
        action = "Deleted" if args.force else "Would delete"
        print(f"{action} {len(deleted)} runs:")
        for run_id in deleted:
            print(f"  - {run_id}")
        return 0

    runs = manager.list_runs(run_type=args.type, limit=args.limit)
    if not runs:
        print("No runs found")
        return 0

    print(f"{'Run ID':<50} {'Type':<14} {'Status':<10}")
    print("-" * 76)
    for run in runs:
        print(f"{run.metadata.run_id:<50} {run.metadata.run_type:<14} {run.metadata.status:<10}")
        summary = run.metadata.summary
        if summary and summary.get("failures"):
            print(f"  -> failed sizes: {summary['failures']}")

    print(f"\nTotal: {len(runs)} runs shown")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from prime_sum.pipeline.scheduler import DEFAULT_START

    parser = argparse.ArgumentParser(
        description="Search for prime sum sequences (Hamiltonian paths in the prime sum graph)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    search_parser = subparsers.add_parser("search", help="Search a range of sizes")
    search_parser.add_argument("--max", "-m", type=int, required=True, help="Maximum sequence length")
    search_parser.add_argument("--start", "-s", type=int, default=DEFAULT_START,
                               help=f"Sequence length to start at (even, default {DEFAULT_START})")
    search_parser.add_argument("--threads", "-t", type=int, default=1, help="Number of threads")
    search_parser.add_argument("--fast", "-f", action="store_true", help="Use the fast sufficient criterion")
    search_parser.add_argument("--lookahead", action="store_true", help="Look-ahead pruning for backtracking")
    search_parser.add_argument("--show", action="store_true", help="Print found sequences")
    search_parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    search_parser.add_argument("--save", action="store_true", help="Save the report as a run")
    search_parser.add_argument("--output-dir", default="output", help="Base directory for saved runs")

    path_parser = subparsers.add_parser("path", help="Backtracking search for one size")
    path_parser.add_argument("--size", "-n", type=int, required=True, help="Sequence length")
    path_parser.add_argument("--cycle", action=argparse.BooleanOptionalAction, default=True,
                             help="Require a cycle (default) or accept a path")
    path_parser.add_argument("--lookahead", action="store_true", help="Look-ahead pruning")

    cycle_parser = subparsers.add_parser("cycle", help="Construct a cycle from the fast criterion")
    cycle_parser.add_argument("--size", "-n", type=int, required=True, help="Cycle length (even)")
    cycle_parser.add_argument("--verify", action="store_true", help="Check every sum while streaming")
    cycle_parser.add_argument("--quiet", "-q", action="store_true", help="Do not print the vertices")

    matrix_parser = subparsers.add_parser("matrix", help="Print the Hankel adjacency matrix")
    matrix_parser.add_argument("--size", "-n", type=int, required=True, help="Graph order")

    runs_parser = subparsers.add_parser("runs", help="List or clean up saved runs")
    runs_parser.add_argument("--output-dir", default="output", help="Base directory for saved runs")
    runs_parser.add_argument("--type", choices=["backtracking", "fast"], default=None, help="Filter by run type")
    runs_parser.add_argument("--limit", type=int, default=20, help="Maximum runs to show")
    runs_parser.add_argument("--cleanup", action="store_true", help="Clean up old runs")
    runs_parser.add_argument("--keep", type=int, default=10, help="Runs to keep when cleaning")
    runs_parser.add_argument("--force", action="store_true", help="Actually delete (default is dry-run)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logger(verbose=args.verbose, log_path=args.log_file)

    commands = {
        "search": cmd_search,
        "path": cmd_path,
        "cycle": cmd_cycle,
        "matrix": cmd_matrix,
        "runs": cmd_runs,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
