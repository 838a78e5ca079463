"""Core prime table and error types."""

from prime_sum.core.errors import ConfigurationError, InvalidLimit, OutOfRange, PrimeSumError
from prime_sum.core.sieve import PrimeSieve, generate_primes, is_prime

__all__ = [
    "PrimeSieve",
    "generate_primes",
    "is_prime",
    "PrimeSumError",
    "InvalidLimit",
    "OutOfRange",
    "ConfigurationError",
]
