"""Distribute a range of sequence sizes over a fixed pool of worker threads.

One sieve is built for the whole run and shared read-only. Tasks (one per
size) go into a queue. Workers pull sizes, run either the exhaustive search
or the fast criterion, and push results onto a second queue. The two queues
are the only points where threads synchronise.

Example:
    >>> report = run_range(20, fast=True, threads=2)
    >>> report.success
    True
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from tqdm import tqdm

from prime_sum.core.errors import ConfigurationError
from prime_sum.core.sieve import PrimeSieve
from prime_sum.search.backtracking import BacktrackingSearcher
from prime_sum.search.criterion import CriterionWitness, check_criterion

logger = logging.getLogger(__name__)

DEFAULT_START = 4

_STOP = None


class Outcome(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    CRITERION_SATISFIED = "criterion_satisfied"
    CRITERION_ABSENT = "criterion_absent"


@dataclass(frozen=True)
class TaskResult:
    """Outcome of the search for one size."""

    size: int
    outcome: Outcome
    sequence: Optional[Tuple[int, ...]] = None
    witness: Optional[CriterionWitness] = None
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.outcome in (Outcome.FOUND, Outcome.CRITERION_SATISFIED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "outcome": self.outcome.value,
            "sequence": list(self.sequence) if self.sequence is not None else None,
            "witness": self.witness.to_dict() if self.witness is not None else None,
            "elapsed": self.elapsed,
        }


@dataclass
class SchedulerConfig:
    """Configuration for a search run.

    Attributes:
        max_size: Largest size to test (inclusive).
        start: Smallest size to test (inclusive, even).
        threads: Number of worker threads.
        fast: Use the fast criterion instead of exhaustive search.
        lookahead: Enable look-ahead pruning in exhaustive search.
        progress: Show a progress bar while tasks complete.
    """

    max_size: int
    start: int = DEFAULT_START
    threads: int = 1
    fast: bool = False
    lookahead: bool = False
    progress: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError if the run cannot be started."""
        if self.start % 2 != 0:
            raise ConfigurationError(f"Start must be even, got {self.start}")
        if self.start < 2:
            raise ConfigurationError(f"Start must be >= 2, got {self.start}")
        if self.start > self.max_size:
            raise ConfigurationError(f"Start ({self.start}) must be <= max ({self.max_size})")
        if self.threads < 1:
            raise ConfigurationError(f"Threads must be >= 1, got {self.threads}")

    def sizes(self) -> Iterator[int]:
        """Even sizes from start up to max_size."""
        return iter(range(self.start, self.max_size + 1, 2))

    @property
    def sieve_limit(self) -> int:
        # Backtracking sums reach 2 * max - 1; the criterion checks p + 2n <= 4n
        # with n = max / 2.
        return 2 * self.max_size

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RunReport:
    """Collected results of a run, keyed by size."""

    config: SchedulerConfig
    results: Dict[int, TaskResult] = field(default_factory=dict)
    sieve_time: float = 0.0
    total_time: float = 0.0

    @property
    def success(self) -> bool:
        """True iff every size in range produced a positive result."""
        expected = list(self.config.sizes())
        return all(n in self.results and self.results[n].succeeded for n in expected)

    @property
    def failures(self) -> List[int]:
        return [n for n in sorted(self.results) if not self.results[n].succeeded]

    def ordered(self) -> List[TaskResult]:
        return [self.results[n] for n in sorted(self.results)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "success": self.success,
            "failures": self.failures,
            "sieve_time": self.sieve_time,
            "total_time": self.total_time,
            "results": [r.to_dict() for r in self.ordered()],
        }


class WorkScheduler:
    """Run one search task per size on a pool of worker threads."""

    def __init__(self, config: SchedulerConfig):
        self.config = config

    def run_task(self, size: int, sieve: PrimeSieve) -> TaskResult:
        """Search a single size. Runs inside a worker thread."""
        start = time.perf_counter()
        if self.config.fast:
            witness = check_criterion(size, sieve)
            outcome = Outcome.CRITERION_SATISFIED if witness else Outcome.CRITERION_ABSENT
            return TaskResult(size, outcome, witness=witness, elapsed=time.perf_counter() - start)

        searcher = BacktrackingSearcher(sieve, lookahead=self.config.lookahead)
        sequence = searcher.search(size, cycle=True)
        outcome = Outcome.FOUND if sequence else Outcome.NOT_FOUND
        return TaskResult(size, outcome, sequence=sequence, elapsed=time.perf_counter() - start)

    def _worker(
        self,
        sieve: PrimeSieve,
        tasks: "queue.Queue[Optional[int]]",
        results: "queue.Queue[Tuple[int, Union[TaskResult, Exception]]]",
    ) -> None:
        while True:
            size = tasks.get()
            if size is _STOP:
                return
            try:
                results.put((size, self.run_task(size, sieve)))
            except Exception as exc:
                results.put((size, exc))

    def run(self) -> RunReport:
        """Validate, build the sieve, dispatch every size and collect results.

        Raises:
            ConfigurationError: If the configuration is invalid. Nothing runs.
        """
        config = self.config
        config.validate()
        run_start = time.perf_counter()

        logger.info("Calculating primes up to %d", config.sieve_limit)
        sieve = PrimeSieve(config.sieve_limit)
        logger.info("Finished calculating primes in %.3fs", sieve.build_time)

        sizes = list(config.sizes())
        tasks: "queue.Queue[Optional[int]]" = queue.Queue()
        results: "queue.Queue[Tuple[int, Union[TaskResult, Exception]]]" = queue.Queue()
        for size in sizes:
            tasks.put(size)
        for _ in range(config.threads):
            tasks.put(_STOP)

        mode = "fast criterion" if config.fast else "backtracking"
        logger.info(
            "Dispatching %d sizes (%d..%d) to %d thread(s) using %s",
            len(sizes), config.start, config.max_size, config.threads, mode,
        )

        workers = [
            threading.Thread(
                target=self._worker,
                args=(sieve, tasks, results),
                name=f"prime-sum-worker-{i}",
                daemon=True,
            )
            for i in range(config.threads)
        ]
        for worker in workers:
            worker.start()

        report = RunReport(config=config, sieve_time=sieve.build_time)
        errors: Dict[int, Exception] = {}
        pbar = tqdm(total=len(sizes), desc="Searching", disable=not config.progress, leave=False)
        for _ in sizes:
            size, result = results.get()
            pbar.update(1)
            if isinstance(result, Exception):
                errors[size] = result
                continue
            report.results[size] = result
            logger.debug("n=%d: %s (%.3fs)", size, result.outcome.value, result.elapsed)
        pbar.close()

        for worker in workers:
            worker.join()

        if errors:
            raise errors[min(errors)]

        report.total_time = time.perf_counter() - run_start
        logger.info(
            "All threads done, total time: %.3fs (%d/%d succeeded)",
            report.total_time, len(sizes) - len(report.failures), len(sizes),
        )
        return report


def run_range(max_size: int, **kwargs: Any) -> RunReport:
    """Convenience wrapper: build a config and run it.

    Args:
        max_size: Largest size to test.
        **kwargs: Additional SchedulerConfig fields.
    """
    return WorkScheduler(SchedulerConfig(max_size=max_size, **kwargs)).run()
