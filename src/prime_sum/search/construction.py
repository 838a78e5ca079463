"""Lazy construction of the Hamiltonian cycle certified by a witness.

Write n for the half size. The odd vertices are x_j = 2j - 1 and the even
vertices are y_k = 2n - 2(k - 1), for j, k in 1..n. With d1 = (p1 - 1) / 2
and d2 = (p2 - 1) / 2 the cycle alternates:

    x_j -> y_k  where k = j - d1 (mod n), sum is p1 + 2n or p1
    y_k -> x_j  where j = k + d2 (mod n), sum is p2 + 2n or p2

Two steps move j to j + (p2 - p1) / 2 (mod n). That shift is coprime to n,
so the walk visits every vertex once before coming back to 1.
"""

from __future__ import annotations

import math

from prime_sum.core.sieve import PrimeSieve
from prime_sum.search.criterion import CriterionWitness, find_witness


class HamiltonianCycle:
    """Forward-only iterator over the 2n vertices of a constructed cycle.

    Only the last emitted vertex is kept, so memory use does not grow with n.
    The iterator starts at 1 and cannot be restarted; build a new one to
    walk the cycle again.
    """

    def __init__(self, witness: CriterionWitness, sieve: PrimeSieve | None = None):
        """Prepare the walk for a witness.

        Only the structure of the pair is checked here. The primality of
        p1 + 2n and p2 + 2n is checked only when a sieve is given, so a
        witness built by hand should either come with a sieve or have been
        checked with ``CriterionWitness.verify`` beforehand.

        Args:
            witness: Pair describing the cycle.
            sieve: Optional sieve covering 4n, used to verify the witness.

        Raises:
            ValueError: If the witness cannot describe a single cycle, or a
                sieve is given and the witness fails verification.
        """
        n, p1, p2 = witness.half_size, witness.p1, witness.p2
        if n < 1:
            raise ValueError(f"half_size must be >= 1, got {n}")
        if not 1 <= p1 < p2 <= 2 * n:
            raise ValueError(f"Need 1 <= p1 < p2 <= {2 * n}, got p1={p1}, p2={p2}")
        if p1 % 2 == 0 or p2 % 2 == 0:
            raise ValueError(f"p1 and p2 must be odd, got p1={p1}, p2={p2}")
        if math.gcd((p2 - p1) // 2, n) != 1:
            raise ValueError(f"gcd(({p2} - {p1}) / 2, {n}) must be 1")
        if sieve is not None and not witness.verify(sieve):
            raise ValueError(f"Witness p1={p1}, p2={p2} fails the criterion for half_size {n}")

        self.witness = witness
        self._n = n
        self._d1 = (p1 - 1) // 2
        self._d2 = (p2 - 1) // 2
        self._current = 0
        self._emitted = 0
        self._exhausted = False

    def __iter__(self) -> HamiltonianCycle:
        return self

    def __next__(self) -> int:
        if self._exhausted:
            raise StopIteration
        if self._current == 0:
            self._current = 1
            self._emitted = 1
            return 1

        n = self._n
        if self._current % 2 == 1:
            j = (self._current + 1) // 2
            k = (j - self._d1) % n or n
            following = 2 * n - 2 * (k - 1)
        else:
            k = n - self._current // 2 + 1
            j = (k + self._d2) % n or n
            following = 2 * j - 1

        if following == 1:
            self._exhausted = True
            raise StopIteration

        self._current = following
        self._emitted += 1
        return following

    def __length_hint__(self) -> int:
        if self._exhausted:
            return 0
        return 2 * self._n - self._emitted

    def __repr__(self) -> str:
        w = self.witness
        return f"HamiltonianCycle(half_size={w.half_size}, p1={w.p1}, p2={w.p2})"


def construct_cycle(half_size: int, sieve: PrimeSieve) -> HamiltonianCycle | None:
    """Find a witness for order 2 * half_size and return its cycle, if any."""
    witness = find_witness(half_size, sieve)
    if witness is None:
        return None
    return HamiltonianCycle(witness, sieve)
