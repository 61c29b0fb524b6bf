"""
Unit Tests for the Seeded Permutation Generator

Checks the generator constants, the Fisher-Yates traversal and the
determinism that encoder and decoder rely on.
"""

import math

import pytest

from chaostego.stego.permutation import SeededRandom, generate_permutation, shuffle_in_place


class TestSeededRandom:
    """Test cases for the linear congruential generator."""

    def test_initial_state_is_sum_of_code_points(self):
        """Seed state is the sum of character codes."""
        assert SeededRandom("test").state == sum(map(ord, "test")) == 448

    def test_first_draws_match_lcg_formula(self):
        """Each draw applies (state * 9301 + 49297) % 233280."""
        rng = SeededRandom("test")
        state = 448
        for _ in range(10):
            state = (state * 9301 + 49297) % 233280
            assert rng.next() == state / 233280

    def test_known_first_value(self):
        """First draw for seed 'test'."""
        assert SeededRandom("test").next() == ((448 * 9301 + 49297) % 233280) / 233280

    def test_values_in_unit_interval(self):
        """Draws stay in [0, 1)."""
        rng = SeededRandom("range check")
        for _ in range(1000):
            value = rng.next()
            assert 0.0 <= value < 1.0

    def test_non_ascii_seed_uses_code_points(self):
        """Non-ASCII characters contribute their code point."""
        assert SeededRandom("é😀").state == ord("é") + ord("😀")

    def test_empty_seed_starts_at_zero(self):
        """An empty seed string gives state zero."""
        assert SeededRandom("").state == 0


class TestGeneratePermutation:
    """Test cases for the seeded Fisher-Yates shuffle."""

    def test_no_seed_is_identity(self):
        """Empty or missing seed returns natural order."""
        assert generate_permutation(10, "") == list(range(10))
        assert generate_permutation(10, None) == list(range(10))

    def test_is_a_permutation(self):
        """Every index appears exactly once."""
        perm = generate_permutation(300, "test")
        assert sorted(perm) == list(range(300))
        assert perm != list(range(300))

    def test_deterministic(self):
        """Same seed and size give the same permutation."""
        assert generate_permutation(500, "seed") == generate_permutation(500, "seed")

    def test_different_seeds_differ(self):
        """Seeds with different code point sums shuffle differently."""
        assert generate_permutation(300, "test") != generate_permutation(300, "wrong")

    def test_anagram_seeds_collide(self):
        """Only the code point sum matters, so anagrams share a permutation."""
        assert generate_permutation(100, "abc") == generate_permutation(100, "cba")

    def test_matches_reference_traversal(self):
        """Walks from the last index down to 1 with floor(next() * (i + 1))."""
        n = 25
        expected = list(range(n))
        rng = SeededRandom("reference")
        for i in range(n - 1, 0, -1):
            j = math.floor(rng.next() * (i + 1))
            expected[i], expected[j] = expected[j], expected[i]
        assert generate_permutation(n, "reference") == expected

    def test_small_sizes(self):
        """Sizes 0 and 1 are trivially the identity."""
        assert generate_permutation(0, "x") == []
        assert generate_permutation(1, "x") == [0]

    def test_negative_size_rejected(self):
        """Negative sizes raise ValueError."""
        with pytest.raises(ValueError):
            generate_permutation(-1, "x")


class TestShuffleInPlace:
    """Test cases for shuffling arbitrary slot sequences."""

    def test_shuffle_equals_indexing_by_permutation(self):
        """Shuffling slot values equals picking them by the index permutation."""
        slots = [i for i in range(40) if (i + 1) % 4 != 0]
        perm = generate_permutation(len(slots), "test")

        shuffled = shuffle_in_place(list(slots), "test")

        assert shuffled == [slots[k] for k in perm]

    def test_shuffle_modifies_in_place(self):
        """The given list object is the one shuffled."""
        values = list(range(20))
        result = shuffle_in_place(values, "inplace")
        assert result is values
        assert sorted(values) == list(range(20))

    def test_no_seed_leaves_sequence(self):
        """No seed, no swaps."""
        values = [5, 3, 1]
        assert shuffle_in_place(values, "") == [5, 3, 1]
