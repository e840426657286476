"""Unit tests for pair statistics, max-pair selection and merge application."""

import pytest

from bptok import InvalidInputError, Pair, bpe_freqs, bpe_max_pair, bpe_merge


# Pair
# ---------------------------------------------------------------------------


def test_pair_is_ordered():
    """(a, b) and (b, a) are different keys."""
    assert Pair(1, 2) != Pair(2, 1)
    assert len({Pair(1, 2), Pair(2, 1)}) == 2


def test_pair_matches_plain_tuple():
    """Pair compares and hashes like the equivalent tuple."""
    assert Pair(3, 4) == (3, 4)
    assert hash(Pair(3, 4)) == hash((3, 4))
    assert {Pair(3, 4): 1}[(3, 4)] == 1


# Pair statistics
# ---------------------------------------------------------------------------


def test_freqs_counts_adjacent_pairs():
    """Every adjacent pair is counted across the whole sequence."""
    freqs = bpe_freqs([1, 2, 3, 1, 2])
    assert freqs == {(1, 2): 2, (2, 3): 1, (3, 1): 1}


def test_freqs_counts_overlapping_pairs():
    """[a, a, a] holds two overlapping (a, a) pairs."""
    assert bpe_freqs([7, 7, 7]) == {(7, 7): 2}


def test_freqs_keeps_first_occurrence_order():
    """Pairs are ordered by where they first appear."""
    freqs = bpe_freqs([4, 3, 2, 1, 4, 3])
    assert list(freqs) == [(4, 3), (3, 2), (2, 1), (1, 4)]


def test_freqs_does_not_mutate_input():
    tokens = [1, 2, 1, 2]
    bpe_freqs(tokens)
    assert tokens == [1, 2, 1, 2]


@pytest.mark.parametrize("tokens", [[], [42]])
def test_freqs_rejects_short_sequences(tokens):
    """Fewer than 2 tokens cannot form a pair."""
    with pytest.raises(InvalidInputError):
        bpe_freqs(tokens)


def test_invalid_input_is_value_error():
    """Callers catching ValueError also see InvalidInputError."""
    with pytest.raises(ValueError, match="length: 1"):
        bpe_freqs([1])


# Max-pair selection
# ---------------------------------------------------------------------------


def test_max_pair_picks_highest_count():
    assert bpe_max_pair({(1, 2): 1, (3, 4): 5, (5, 6): 2}) == (3, 4)


def test_max_pair_ties_go_to_first_seen():
    """Equal counts never displace the earlier pair."""
    assert bpe_max_pair({(1, 2): 3, (3, 4): 3, (5, 6): 1}) == (1, 2)


def test_max_pair_tie_break_follows_sequence_order():
    """Ties resolve to the leftmost-discovered pair of the scanned sequence."""
    freqs = bpe_freqs([9, 8, 1, 2, 9, 8, 1, 2])
    assert bpe_max_pair(freqs) == (9, 8)


def test_max_pair_empty_returns_none():
    assert bpe_max_pair({}) is None


# Merge application
# ---------------------------------------------------------------------------


def test_merge_does_not_overlap():
    """[5, 5, 5] merged on (5, 5) leaves the last 5 alone."""
    assert bpe_merge([5, 5, 5], Pair(5, 5), 300) == [300, 5]


def test_merge_replaces_every_occurrence():
    assert bpe_merge([5, 5, 5, 5], Pair(5, 5), 300) == [300, 300]
    assert bpe_merge([1, 2, 3, 1, 2], Pair(1, 2), 256) == [256, 3, 256]


def test_merge_keeps_trailing_token():
    assert bpe_merge([1, 2, 3], Pair(1, 2), 256) == [256, 3]
    assert bpe_merge([3, 1, 2], Pair(1, 2), 256) == [3, 256]


def test_merge_respects_pair_order():
    """The reversed pair is not a match."""
    assert bpe_merge([2, 1], Pair(1, 2), 256) == [2, 1]


def test_merge_accepts_plain_tuple_target():
    assert bpe_merge([1, 2], (1, 2), 256) == [256]


@pytest.mark.parametrize("tokens", [[], [5]])
def test_merge_short_sequences_unchanged(tokens):
    assert bpe_merge(tokens, Pair(5, 5), 300) == tokens


def test_merge_does_not_mutate_input():
    tokens = [5, 5, 5]
    bpe_merge(tokens, Pair(5, 5), 300)
    assert tokens == [5, 5, 5]
