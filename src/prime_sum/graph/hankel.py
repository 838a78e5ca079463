"""The prime sum (Hankel) graph.

Vertices are 1..n and u, v are adjacent when u + v is prime. Whether two
vertices are adjacent depends only on their sum, so the adjacency matrix is
a Hankel matrix: constant along every anti-diagonal. The whole matrix is
described by its 2n - 1 anti-diagonal values. The same structure is
available for any set of allowed sums through ``HankelGraph.from_sums``.

Example, order 6::

    0 1 0 1 0 1
    1 0 1 0 1 0
    0 1 0 1 0 0
    1 0 1 0 0 0
    0 1 0 0 0 1
    1 0 0 0 1 0
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from prime_sum.core.errors import OutOfRange
from prime_sum.core.sieve import PrimeSieve


def adjacent(u: int, v: int, sieve: PrimeSieve) -> bool:
    """Return True if u + v is prime.

    Raises:
        OutOfRange: If u + v exceeds the sieve limit.
    """
    return sieve.is_prime(u + v)


class HankelGraph:
    """Hankel graph of a fixed order.

    The usual graph is backed by a shared sieve, so u and v are adjacent
    when u + v is prime. ``from_sums`` builds the same structure for any
    set of allowed sums.

    Attributes:
        order: Number of vertices n.
        sieve: Sieve covering at least 2n - 1, or None for a sums graph.
        sums: Allowed sums of a sums graph, or None for a prime sum graph.
    """

    def __init__(
        self,
        order: int,
        sieve: PrimeSieve | None = None,
        *,
        sums: Iterable[int] | None = None,
    ):
        """Bind a sieve (or a set of allowed sums) to a graph order.

        Args:
            order: Number of vertices (>= 1).
            sieve: Sieve whose limit covers the largest sum 2n - 1.
            sums: Allowed sums, used instead of a sieve.

        Raises:
            ValueError: If order < 1, or not exactly one of sieve and sums
                is given.
            OutOfRange: If the sieve is too small for this order.
        """
        if order < 1:
            raise ValueError(f"Order must be >= 1, got {order}")
        if (sieve is None) == (sums is None):
            raise ValueError("Give exactly one of sieve or sums")
        if sieve is not None and 2 * order - 1 > sieve.limit:
            raise OutOfRange(2 * order - 1, sieve.limit)

        self.order = order
        self.sieve = sieve
        self.sums = frozenset(int(s) for s in sums) if sums is not None else None
        self._sum_table = np.array(sorted(self.sums or ()), dtype=np.int64)

    @classmethod
    def from_sums(cls, order: int, sums: Iterable[int]) -> HankelGraph:
        """Graph on 1..order where u, v are adjacent when u + v is in sums.

        Example:
            >>> HankelGraph.from_sums(5, [4, 6, 8]).vertex_degrees().tolist()
            [2, 2, 3, 2, 2]
        """
        return cls(order, sums=sums)

    def _allows(self, total: int) -> bool:
        if self.sieve is not None:
            return self.sieve.is_prime(total)
        return total in self.sums

    def adjacent(self, u: int, v: int) -> bool:
        """Adjacency between two distinct vertices (no self loops)."""
        return u != v and self._allows(u + v)

    def neighbors(self, u: int) -> list[int]:
        """Vertices adjacent to u, ascending."""
        if self.sieve is None:
            return [v for v in range(1, self.order + 1) if v != u and self._allows(u + v)]
        # Only opposite parity can give an odd sum; 1 + 1 is a self loop.
        first = 2 if u % 2 == 1 else 1
        return [v for v in range(first, self.order + 1, 2) if self.sieve.is_prime(u + v)]

    def diagonals(self) -> np.ndarray:
        """Anti-diagonal values: entry i is 1 iff i + 2 is an allowed sum.

        For a prime sum graph, entry 0 (sum 2) is only reachable as the 1-1
        self loop and stays 0. The last entry (sum 2n) is even and stays 0
        as well.
        """
        if self.sieve is None:
            sums = np.arange(2, 2 * self.order + 1, dtype=np.int64)
            return np.isin(sums, self._sum_table).astype(np.uint8)

        diagonals = np.zeros(2 * self.order - 1, dtype=np.uint8)
        sums = np.arange(3, 2 * self.order, dtype=np.int64)
        diagonals[1:-1] = self.sieve.is_prime_array(sums)
        return diagonals

    def adjacency_matrix(self) -> np.ndarray:
        """Dense n x n uint8 adjacency matrix, 0-indexed."""
        idx = np.arange(self.order)
        return self.diagonals()[idx[:, None] + idx[None, :]]

    def vertex_degrees(self) -> np.ndarray:
        """Degree of each vertex 1..n.

        The degree of vertex i is the sum of diagonals[i - 1 : i - 1 + n],
        computed here as a sliding window over the cumulative sum.
        """
        cumulative = np.concatenate(([0], np.cumsum(self.diagonals(), dtype=np.int64)))
        n = self.order
        return cumulative[n:2 * n] - cumulative[:n]

    def _is_permutation(self, sequence: Sequence[int]) -> bool:
        return len(sequence) == self.order and sorted(sequence) == list(range(1, self.order + 1))

    def is_valid_path(self, sequence: Sequence[int]) -> bool:
        """Check that sequence is a Hamiltonian path of this graph."""
        if not self._is_permutation(sequence):
            return False
        return all(self.adjacent(a, b) for a, b in zip(sequence, sequence[1:]))

    def is_valid_cycle(self, sequence: Sequence[int]) -> bool:
        """Check that sequence is a Hamiltonian cycle of this graph."""
        if not self.is_valid_path(sequence):
            return False
        return self.adjacent(sequence[-1], sequence[0])

    def format_matrix(self) -> str:
        """Render the adjacency matrix as comma separated rows."""
        return "\n".join(", ".join(str(v) for v in row) for row in self.adjacency_matrix())

    def __repr__(self) -> str:
        kind = "primes" if self.sieve is not None else f"sums={sorted(self.sums)}"
        return f"HankelGraph(order={self.order}, {kind})"
