"""Tests for the fast sufficient criterion."""

import math

import pytest

from prime_sum.core.errors import OutOfRange
from prime_sum.core.sieve import PrimeSieve, is_prime
from prime_sum.search.criterion import CriterionWitness, check_criterion, find_witness


@pytest.fixture(scope="module")
def sieve():
    return PrimeSieve(4000)


class TestFindWitness:
    """Tests for find_witness."""

    def test_known_witness(self, sieve):
        """Half size 10 gives the smallest pair (3, 17)."""
        assert find_witness(10, sieve) == CriterionWitness(10, 3, 17)

    def test_p1_may_be_one(self, sieve):
        """For n = 2, 1 + 4 = 5 is prime so p1 = 1 is admitted."""
        assert find_witness(2, sieve) == CriterionWitness(2, 1, 3)

    def test_absent_for_half_size_one(self, sieve):
        """Order 2: the only candidate p2 = 2 fails since 2 + 2 is not prime."""
        assert find_witness(1, sieve) is None

    @pytest.mark.parametrize("n", range(2, 1000))
    def test_witness_conditions(self, sieve, n):
        """Every returned pair satisfies the criterion."""
        witness = find_witness(n, sieve)
        assert witness is not None
        p1, p2 = witness.p1, witness.p2
        assert p1 < p2 <= 2 * n
        assert p1 == 1 or is_prime(p1)
        assert is_prime(p2)
        assert is_prime(p1 + 2 * n)
        assert is_prime(p2 + 2 * n)
        assert math.gcd((p2 - p1) // 2, n) == 1
        assert witness.verify(sieve)

    def test_smallest_pair_is_returned(self, sieve):
        """No valid pair precedes the returned one in (p1, p2) order."""
        for n in range(2, 60):
            witness = find_witness(n, sieve)
            p1_candidates = [1] + [p for p in range(2, 2 * n + 1) if is_prime(p)]
            for p1 in p1_candidates:
                for p2 in (p for p in range(p1 + 1, 2 * n + 1) if is_prime(p)):
                    if (p1, p2) >= (witness.p1, witness.p2):
                        break
                    assert not CriterionWitness(n, p1, p2).verify(sieve)

    def test_large_half_size_stops_early(self, monkeypatch):
        """A large order is answered without listing every prime below 2n."""
        half_size = 1_000_000
        big_sieve = PrimeSieve(4 * half_size)

        def no_prime_listing(self, upper=None):
            raise AssertionError("find_witness should not list primes")

        monkeypatch.setattr(PrimeSieve, "primes", no_prime_listing)
        witness = find_witness(half_size, big_sieve)
        assert witness is not None
        assert witness.verify(big_sieve)

    def test_sieve_too_small(self):
        with pytest.raises(OutOfRange):
            find_witness(10, PrimeSieve(39))
        find_witness(10, PrimeSieve(40))

    def test_invalid_half_size(self, sieve):
        with pytest.raises(ValueError):
            find_witness(0, sieve)


class TestCheckCriterion:
    """Tests for the size-keyed wrapper."""

    def test_even_size(self, sieve):
        assert check_criterion(20, sieve) == CriterionWitness(10, 3, 17)

    @pytest.mark.parametrize("size", [0, 1, 3, 7, 21, 999])
    def test_odd_sizes_never_satisfied(self, sieve, size):
        assert check_criterion(size, sieve) is None


class TestCriterionWitness:
    """Tests for the witness value type."""

    def test_order(self):
        assert CriterionWitness(10, 3, 17).order == 20

    def test_verify_rejects_bad_pairs(self, sieve):
        assert not CriterionWitness(10, 3, 11).verify(sieve)
        assert not CriterionWitness(10, 17, 3).verify(sieve)
        assert not CriterionWitness(10, 1, 19).verify(sieve)

    def test_to_dict(self):
        assert CriterionWitness(10, 3, 17).to_dict() == {"half_size": 10, "p1": 3, "p2": 17}

    def test_frozen(self):
        witness = CriterionWitness(10, 3, 17)
        with pytest.raises(AttributeError):
            witness.p1 = 5
