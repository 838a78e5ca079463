"""Bit-packed prime sieve shared by every search task.

The table stores only odd numbers, one bit each (bit i represents 2*i + 1),
so a sieve over [0, limit] retains roughly limit / 16 bytes. The packed bits
live in an immutable ``bytes`` object, which makes a built sieve safe to
share between worker threads without locking.
"""

from __future__ import annotations

import logging
import math
import time

import numpy as np

from prime_sum.core.errors import InvalidLimit, OutOfRange

logger = logging.getLogger(__name__)

# Odd values sieved per segment; a multiple of 8 so packed segments line up.
_SEGMENT_ODDS = 1 << 22


def _odd_sieve_flags(limit: int) -> np.ndarray:
    """NumPy Sieve of Eratosthenes over the odd numbers up to limit.

    Args:
        limit: Upper bound (inclusive).

    Returns:
        Boolean array where index i is True iff 2*i + 1 is prime.
    """
    size = (limit + 1) // 2
    flags = np.ones(size, dtype=bool)
    if size == 0:
        return flags
    flags[0] = False

    for i in range(1, (math.isqrt(limit) - 1) // 2 + 1):
        if flags[i]:
            p = 2 * i + 1
            flags[p * p // 2::p] = False

    return flags


def _packed_odd_sieve(limit: int) -> bytes:
    """Segmented odd-only sieve, packed one segment at a time.

    Only one segment of boolean flags exists at any moment, so peak memory
    stays close to the packed table size.

    Args:
        limit: Upper bound (inclusive).

    Returns:
        Packed little-endian bits where bit i is set iff 2*i + 1 is prime.
    """
    size = (limit + 1) // 2
    if size == 0:
        return b""

    base = (2 * np.flatnonzero(_odd_sieve_flags(math.isqrt(limit))) + 1).tolist()
    packed = []

    for low in range(0, size, _SEGMENT_ODDS):
        high = min(low + _SEGMENT_ODDS, size)
        mask = np.ones(high - low, dtype=bool)
        if low == 0:
            mask[0] = False

        for p in base:
            start = p * p // 2
            if start >= high:
                break
            if start < low:
                start += (low - start + p - 1) // p * p
            mask[start - low::p] = False

        packed.append(np.packbits(mask, bitorder="little"))

    return np.concatenate(packed).tobytes()


class PrimeSieve:
    """Immutable primality table over [0, limit].

    Attributes:
        limit: Largest value the sieve can answer for.
        build_time: Seconds spent sieving.
    """

    def __init__(self, limit: int):
        """Sieve all odd numbers up to limit and pack the result.

        Args:
            limit: Upper bound (inclusive) of the table.

        Raises:
            InvalidLimit: If limit < 0.
        """
        if limit < 0:
            raise InvalidLimit(f"Sieve limit must be >= 0, got {limit}")

        start = time.perf_counter()
        self._bits = _packed_odd_sieve(limit)
        self._table = np.frombuffer(self._bits, dtype=np.uint8)
        self.limit = limit
        self.build_time = time.perf_counter() - start

        logger.debug("Sieved [0, %d] in %.3fs (%d bytes)", limit, self.build_time, len(self._bits))

    @classmethod
    def build(cls, limit: int) -> PrimeSieve:
        """Build a sieve covering [0, limit]."""
        return cls(limit)

    def is_prime(self, x: int) -> bool:
        """O(1) primality lookup.

        Raises:
            OutOfRange: If x exceeds the sieve limit.
        """
        if x > self.limit:
            raise OutOfRange(x, self.limit)
        if x < 2:
            return False
        if x & 1 == 0:
            return x == 2
        i = x >> 1
        return bool((self._bits[i >> 3] >> (i & 7)) & 1)

    def __contains__(self, x: int) -> bool:
        return self.is_prime(x)

    def is_prime_array(self, values: np.ndarray) -> np.ndarray:
        """Vectorised primality lookup.

        Args:
            values: Integer array of values to check.

        Returns:
            Boolean array of the same shape.

        Raises:
            OutOfRange: If any value exceeds the sieve limit.
        """
        values = np.asarray(values, dtype=np.int64)
        if values.size == 0:
            return np.zeros(values.shape, dtype=bool)

        largest = int(values.max())
        if largest > self.limit:
            raise OutOfRange(largest, self.limit)

        result = values == 2
        odd = (values > 2) & ((values & 1) == 1)
        if odd.any():
            idx = values[odd] >> 1
            result[odd] = ((self._table[idx >> 3] >> (idx & 7)) & 1).astype(bool)
        return result

    def primes(self, upper: int | None = None) -> np.ndarray:
        """Return all primes <= upper (default: the sieve limit).

        Raises:
            OutOfRange: If upper exceeds the sieve limit.
        """
        if upper is None:
            upper = self.limit
        if upper > self.limit:
            raise OutOfRange(upper, self.limit)
        if upper < 2:
            return np.array([], dtype=np.int64)

        odd_count = (upper + 1) // 2
        flags = np.unpackbits(self._table[: (odd_count + 7) // 8], bitorder="little")[:odd_count]
        odd_primes = 2 * np.flatnonzero(flags).astype(np.int64) + 1

        primes = np.empty(len(odd_primes) + 1, dtype=np.int64)
        primes[0] = 2
        primes[1:] = odd_primes
        return primes

    def count(self) -> int:
        """Number of primes <= limit."""
        if self.limit < 2:
            return 0
        return int(np.unpackbits(self._table).sum()) + 1

    @property
    def nbytes(self) -> int:
        """Size of the packed table in bytes."""
        return len(self._bits)

    def __repr__(self) -> str:
        return f"PrimeSieve(limit={self.limit})"


def generate_primes(limit: int) -> np.ndarray:
    """Generate all prime numbers up to and including limit.

    Args:
        limit: Upper bound for prime generation (inclusive).

    Returns:
        Array of prime numbers up to limit.

    Raises:
        ValueError: If limit is less than 2.
    """
    if limit < 2:
        raise ValueError(f"Limit must be >= 2, got {limit}")

    return PrimeSieve(limit).primes()


def is_prime(n: int) -> bool:
    """Check if a single number is prime by trial division.

    Uses 6k +/- 1 optimization. Independent of the sieve, so it serves as
    the reference test when validating sieve output.

    Args:
        n: Number to check.

    Returns:
        True if n is prime, False otherwise.
    """
    if n < 2:
        return False
    if n == 2:
        return True
    if n == 3:
        return True
    if n % 2 == 0:
        return False
    if n % 3 == 0:
        return False

    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6

    return True
