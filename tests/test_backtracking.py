"""Tests for the exhaustive backtracking search."""

import pytest

from prime_sum.core.errors import OutOfRange
from prime_sum.core.sieve import PrimeSieve
from prime_sum.graph.hankel import HankelGraph
from prime_sum.search.backtracking import BacktrackingSearcher, search_sequence


@pytest.fixture(scope="module")
def sieve():
    return PrimeSieve(200)


@pytest.fixture
def searcher(sieve):
    return BacktrackingSearcher(sieve)


class TestCycleSearch:
    """Tests for cycle mode."""

    def test_first_cycle_of_ten(self, searcher):
        """Ascending candidate order gives the smallest cycle first."""
        assert searcher.search(10) == (1, 2, 3, 4, 7, 6, 5, 8, 9, 10)

    def test_first_cycle_of_six(self, searcher):
        assert searcher.search(6) == (1, 4, 3, 2, 5, 6)

    def test_order_two(self, searcher):
        assert searcher.search(2) == (1, 2)

    @pytest.mark.parametrize("n", range(2, 21, 2))
    def test_found_cycles_are_valid(self, sieve, searcher, n):
        """Found sequences are permutations with prime sums, wrap-around included."""
        sequence = searcher.search(n)
        assert sequence is not None
        assert len(sequence) == n
        assert sorted(sequence) == list(range(1, n + 1))
        assert HankelGraph(n, sieve).is_valid_cycle(sequence)

    @pytest.mark.parametrize("n", [1, 3, 5, 7, 9, 15])
    def test_odd_sizes_have_no_cycle(self, searcher, n):
        assert searcher.search(n) is None

    def test_deterministic(self, sieve):
        """Two independent searches return the same sequence."""
        first = BacktrackingSearcher(sieve).search(18)
        second = BacktrackingSearcher(sieve).search(18)
        assert first == second

    @pytest.mark.parametrize("n", range(2, 21, 2))
    def test_lookahead_finds_same_cycle(self, sieve, searcher, n):
        """Look-ahead only prunes dead subtrees, so the first hit is unchanged."""
        assert BacktrackingSearcher(sieve, lookahead=True).search(n) == searcher.search(n)


class TestPathSearch:
    """Tests for path mode."""

    def test_path_of_ten(self, searcher):
        assert searcher.search(10, cycle=False) == (1, 2, 3, 4, 7, 6, 5, 8, 9, 10)

    def test_odd_path(self, sieve, searcher):
        sequence = searcher.search(5, cycle=False)
        assert sequence == (1, 4, 3, 2, 5)
        assert HankelGraph(5, sieve).is_valid_path(sequence)

    def test_single_vertex(self, searcher):
        assert searcher.search(1, cycle=False) == (1,)

    @pytest.mark.parametrize("n", range(2, 16))
    def test_paths_are_valid(self, sieve, searcher, n):
        sequence = searcher.search(n, cycle=False)
        assert sequence is not None
        assert HankelGraph(n, sieve).is_valid_path(sequence)


class TestPrefix:
    """Tests for extending a fixed prefix."""

    def test_prefix_on_solution(self, searcher):
        assert searcher.search(10, prefix=[1, 2, 3, 4]) == (1, 2, 3, 4, 7, 6, 5, 8, 9, 10)

    def test_prefix_is_kept(self, sieve, searcher):
        sequence = searcher.search(12, prefix=[1, 4, 7])
        assert sequence[:3] == (1, 4, 7)
        assert HankelGraph(12, sieve).is_valid_cycle(sequence)

    def test_dead_end_prefix(self, searcher):
        """The search never backtracks into the prefix."""
        assert searcher.search(6, prefix=[1, 2, 3, 4]) is None

    def test_full_prefix(self, searcher):
        assert searcher.search(6, prefix=[6, 1, 4, 3, 2, 5]) == (6, 1, 4, 3, 2, 5)
        assert searcher.search(5, prefix=[1, 4, 3, 2, 5], cycle=False) == (1, 4, 3, 2, 5)

    @pytest.mark.parametrize("prefix", [[1, 3], [1, 2, 1], [1, 12], [0, 1]])
    def test_invalid_prefix(self, searcher, prefix):
        with pytest.raises(ValueError):
            searcher.search(10, prefix=prefix)


class TestErrors:
    """Tests for argument checking."""

    def test_non_positive_n(self, searcher):
        with pytest.raises(ValueError):
            searcher.search(0)

    def test_sieve_too_small(self):
        with pytest.raises(OutOfRange):
            BacktrackingSearcher(PrimeSieve(10)).search(10)


def test_search_sequence_builds_sieve():
    assert search_sequence(6) == (1, 4, 3, 2, 5, 6)
    assert search_sequence(1, cycle=False) == (1,)
