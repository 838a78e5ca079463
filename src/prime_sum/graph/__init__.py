"""Prime sum graph."""

from prime_sum.graph.hankel import HankelGraph, adjacent

__all__ = ["HankelGraph", "adjacent"]
