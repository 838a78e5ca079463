"""Exhaustive depth-first search for prime sum sequences.

The search keeps an explicit stack instead of recursing, so depth is bounded
only by memory. Each level of the stack stores a resume cursor: the next
candidate vertex to try at that position once everything deeper has failed.

Candidates are always tried in ascending order, which makes the returned
sequence (and the running time) a pure function of n and the options.
"""

from __future__ import annotations

import logging
from typing import Sequence

from prime_sum.core.errors import OutOfRange
from prime_sum.core.sieve import PrimeSieve

logger = logging.getLogger(__name__)


def _first_candidate(vertex: int) -> int:
    # An even sum above 2 is never prime, so neighbours alternate parity.
    return 2 if vertex & 1 else 1


class BacktrackingSearcher:
    """Find a Hamiltonian path or cycle in the prime sum graph of order n.

    Attributes:
        sieve: Shared read-only sieve, must cover 2n - 1.
        lookahead: If True, reject states that leave an unused vertex with no
            usable neighbour. Prunes harder at O(n^2) cost per step.
    """

    def __init__(self, sieve: PrimeSieve, lookahead: bool = False):
        self.sieve = sieve
        self.lookahead = lookahead

    def search(
        self,
        n: int,
        cycle: bool = True,
        prefix: Sequence[int] | None = None,
    ) -> tuple[int, ...] | None:
        """Search for a prime sum sequence of length n.

        Args:
            n: Number of vertices.
            cycle: Require the last and first entries to be adjacent too.
            prefix: Fixed leading vertices. The search extends them and never
                backtracks into them.

        Returns:
            The first sequence found, or None if the search space is exhausted.

        Raises:
            ValueError: If n < 1 or prefix is not a valid partial sequence.
            OutOfRange: If the sieve cannot cover the largest sum 2n - 1.
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        if 2 * n - 1 > self.sieve.limit:
            raise OutOfRange(2 * n - 1, self.sieve.limit)
        if cycle and (n < 2 or n % 2 == 1):
            # A cycle alternates parity, so it needs an even number of vertices.
            return None

        if prefix:
            path = list(prefix)
            self._check_prefix(n, path)
            result = self._extend(n, path, cycle)
        else:
            starts = [1] if cycle else range(1, n + 1)
            result = None
            for start in starts:
                result = self._extend(n, [start], cycle)
                if result is not None:
                    break

        logger.debug("Backtracking n=%d cycle=%s -> %s", n, cycle, "found" if result else "not found")
        return result

    def _check_prefix(self, n: int, path: list[int]) -> None:
        if len(path) > n:
            raise ValueError(f"Prefix of length {len(path)} is longer than n={n}")
        if len(set(path)) != len(path):
            raise ValueError("Prefix contains duplicate vertices")
        for v in path:
            if not 1 <= v <= n:
                raise ValueError(f"Prefix vertex {v} is outside 1..{n}")
        for a, b in zip(path, path[1:]):
            if not self.sieve.is_prime(a + b):
                raise ValueError(f"Prefix pair ({a}, {b}) does not sum to a prime")

    def _extend(self, n: int, path: list[int], cycle: bool) -> tuple[int, ...] | None:
        is_prime = self.sieve.is_prime
        used = bytearray(n + 1)
        for v in path:
            used[v] = 1

        base = len(path)
        start = path[0] if cycle else 0
        cursors = [_first_candidate(path[-1])]

        while True:
            candidate = None
            if len(path) == n:
                if not cycle or is_prime(path[-1] + path[0]):
                    return tuple(path)
            else:
                last = path[-1]
                c = cursors[-1]
                while c <= n:
                    if not used[c] and is_prime(last + c):
                        if not self.lookahead or not self._strands_vertex(n, used, c, start):
                            candidate = c
                            break
                    c += 2
                cursors[-1] = c + 2

            if candidate is not None:
                path.append(candidate)
                used[candidate] = 1
                cursors.append(_first_candidate(candidate))
                continue

            cursors.pop()
            if len(path) == base:
                return None
            used[path.pop()] = 0

    def _strands_vertex(self, n: int, used: bytearray, endpoint: int, start: int) -> bool:
        """True if placing endpoint leaves an unused vertex with no way in."""
        is_prime = self.sieve.is_prime
        for w in range(1, n + 1):
            if used[w] or w == endpoint:
                continue
            for x in range(_first_candidate(w), n + 1, 2):
                reachable = x == endpoint or x == start or (not used[x] and x != w)
                if reachable and is_prime(w + x):
                    break
            else:
                return True
        return False


def search_sequence(
    n: int,
    sieve: PrimeSieve | None = None,
    cycle: bool = True,
    lookahead: bool = False,
) -> tuple[int, ...] | None:
    """One-shot search, building a sieve of the right size if none is given."""
    if sieve is None:
        sieve = PrimeSieve(max(2 * n, 2))
    return BacktrackingSearcher(sieve, lookahead=lookahead).search(n, cycle=cycle)
