"""Fast sufficient criterion for Hamiltonian cycles of order 2n.

If there are p1 < p2 <= 2n, with p2 prime and p1 either prime or 1, such that
p1 + 2n and p2 + 2n are both prime and gcd((p2 - p1) / 2, n) = 1, then the
prime sum graph on 1..2n has a Hamiltonian cycle, and the pair describes how
to build it (see ``prime_sum.search.construction``).

Failing to find such a pair says nothing about whether a cycle exists.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from prime_sum.core.errors import OutOfRange
from prime_sum.core.sieve import PrimeSieve

logger = logging.getLogger(__name__)

# p2 is scanned in blocks that start small and double up to the maximum.
_FIRST_BLOCK = 64
_MAX_BLOCK = 1 << 16


@dataclass(frozen=True)
class CriterionWitness:
    """A pair (p1, p2) certifying a Hamiltonian cycle on 1..2 * half_size."""

    half_size: int
    p1: int
    p2: int

    @property
    def order(self) -> int:
        """Number of vertices in the certified cycle."""
        return 2 * self.half_size

    def verify(self, sieve: PrimeSieve) -> bool:
        """Re-check every condition of the criterion against a sieve."""
        n = self.half_size
        return (
            n >= 1
            and 1 <= self.p1 < self.p2 <= 2 * n
            and (self.p1 == 1 or sieve.is_prime(self.p1))
            and sieve.is_prime(self.p2)
            and sieve.is_prime(self.p1 + 2 * n)
            and sieve.is_prime(self.p2 + 2 * n)
            and math.gcd((self.p2 - self.p1) // 2, n) == 1
        )

    def to_dict(self) -> dict[str, int]:
        return {"half_size": self.half_size, "p1": self.p1, "p2": self.p2}


def _p2_blocks(first: int, last: int):
    """Consecutive [lo, hi) windows over first..last, doubling in length."""
    size = _FIRST_BLOCK
    lo = first
    while lo <= last:
        hi = min(lo + size, last + 1)
        yield lo, hi
        lo = hi
        size = min(2 * size, _MAX_BLOCK)


def find_witness(half_size: int, sieve: PrimeSieve) -> CriterionWitness | None:
    """Find the smallest witness (by p1, then p2) for order 2 * half_size.

    The scan stops at the first hit. For each admissible p1 the p2 values
    are checked in small vectorised blocks, so a witness with small primes
    costs only a few lookups however large n is.

    Args:
        half_size: n, half the number of vertices.
        sieve: Sieve covering at least 4n.

    Returns:
        The first witness in ascending order, or None if none exists with
        p2 <= 2n.

    Raises:
        ValueError: If half_size < 1.
        OutOfRange: If the sieve does not reach 4n.
    """
    if half_size < 1:
        raise ValueError(f"half_size must be >= 1, got {half_size}")
    n = half_size
    two_n = 2 * n
    if 2 * two_n > sieve.limit:
        raise OutOfRange(2 * two_n, sieve.limit)

    for p1 in range(1, two_n + 1):
        if p1 != 1 and not sieve.is_prime(p1):
            continue
        if not sieve.is_prime(p1 + two_n):
            continue
        for lo, hi in _p2_blocks(p1 + 1, two_n):
            p2s = np.arange(lo, hi, dtype=np.int64)
            ok = (
                sieve.is_prime_array(p2s)
                & sieve.is_prime_array(p2s + two_n)
                & (np.gcd((p2s - p1) // 2, n) == 1)
            )
            hits = np.flatnonzero(ok)
            if hits.size:
                witness = CriterionWitness(n, p1, int(p2s[hits[0]]))
                logger.debug("Witness for order %d: p1=%d p2=%d", two_n, witness.p1, witness.p2)
                return witness

    logger.debug("No witness for order %d", two_n)
    return None


def check_criterion(size: int, sieve: PrimeSieve) -> CriterionWitness | None:
    """Criterion check keyed by the number of vertices.

    Odd sizes (and sizes below 2) never have a cycle, so they have no witness.
    """
    if size < 2 or size % 2 == 1:
        return None
    return find_witness(size // 2, sieve)
