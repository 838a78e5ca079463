"""Utility modules for prime_sum."""

from prime_sum.utils.run_manager import Run, RunManager, RunMetadata

__all__ = [
    "RunManager",
    "Run",
    "RunMetadata",
]
