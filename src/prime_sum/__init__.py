"""prime_sum - search and construction of prime sum sequences."""

__version__ = "0.1.0"

from prime_sum.core.sieve import PrimeSieve
from prime_sum.graph.hankel import HankelGraph, adjacent
from prime_sum.search.backtracking import BacktrackingSearcher
from prime_sum.search.criterion import CriterionWitness, find_witness
from prime_sum.search.construction import HamiltonianCycle
from prime_sum.pipeline.scheduler import SchedulerConfig, WorkScheduler, run_range

__all__ = [
    "PrimeSieve",
    "HankelGraph",
    "adjacent",
    "BacktrackingSearcher",
    "CriterionWitness",
    "find_witness",
    "HamiltonianCycle",
    "SchedulerConfig",
    "WorkScheduler",
    "run_range",
]
