"""Search strategies: exhaustive backtracking and the fast criterion."""

from prime_sum.search.backtracking import BacktrackingSearcher, search_sequence
from prime_sum.search.criterion import CriterionWitness, check_criterion, find_witness
from prime_sum.search.construction import HamiltonianCycle, construct_cycle

__all__ = [
    "BacktrackingSearcher",
    "search_sequence",
    "CriterionWitness",
    "check_criterion",
    "find_witness",
    "HamiltonianCycle",
    "construct_cycle",
]
