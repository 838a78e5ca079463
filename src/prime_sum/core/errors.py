"""Exception types raised by the prime sum search engine.

Per-size search failures (no sequence found, criterion not met) are
reported as outcomes, not exceptions. The types below signal caller bugs
or bad configuration and are meant to abort a run.
"""

from __future__ import annotations


class PrimeSumError(Exception):
    """Base class for prime_sum errors."""


class InvalidLimit(PrimeSumError, ValueError):
    """Raised when a sieve is requested with a negative limit."""


class OutOfRange(PrimeSumError, IndexError):
    """Raised when a primality query exceeds the sieve limit."""

    def __init__(self, value: int, limit: int):
        super().__init__(f"{value} is outside the sieve range [0, {limit}]")
        self.value = value
        self.limit = limit


class ConfigurationError(PrimeSumError, ValueError):
    """Raised when a search run is configured inconsistently."""
