"""Tests for the read pool, k-mer filter and deduplicator."""

import pytest

from contigger_core.exceptions import ConfigError
from contigger_core.filtering import count_kmers, deduplicate, filter_rare_kmers
from contigger_core.reads import Liveness, ReadPool, parse_read_records


def test_rare_kmer_reads_are_filtered_and_duplicates_collapsed():
    """A read whose k-mers are all singletons is dropped; identical survivors collapse."""
    pool = ReadPool(["AAAXX", "AAAXX", "BBBYY"])

    removed = filter_rare_kmers(pool, k=5, merlen=3, threshold=2)

    assert removed == 1
    assert pool[2].state is Liveness.FILTERED
    assert pool.live_indices() == [0, 1]

    assert deduplicate(pool) == 1
    assert pool.live_indices() == [0]
    assert pool[1].state is Liveness.DUPLICATE


def test_threshold_is_strict():
    """A k-mer seen exactly ``threshold`` times keeps its read."""
    pool = ReadPool(["ACGT", "ACGT", "TTTT"])

    filter_rare_kmers(pool, k=4, merlen=4, threshold=2)

    assert pool.live_indices() == [0, 1]
    assert pool[2].state is Liveness.FILTERED


def test_short_reads_never_survive():
    """Reads shorter than k or merlen are filtered regardless of their k-mers."""
    pool = ReadPool(["ACGTA", "ACG", "ACGTA"])

    filter_rare_kmers(pool, k=5, merlen=2, threshold=1)

    assert pool[1].state is Liveness.FILTERED
    assert pool.live_indices() == [0, 2]

    pool = ReadPool(["ACGT", "ACGT"])
    filter_rare_kmers(pool, k=3, merlen=5, threshold=1)
    assert pool.live() == []


def test_non_positive_merlen_is_a_config_error():
    """A k-mer length below one is rejected like any other bad parameter."""
    pool = ReadPool(["ACGT"])

    with pytest.raises(ConfigError):
        filter_rare_kmers(pool, k=4, merlen=0, threshold=1)

    assert pool.live_indices() == [0]


def test_kmer_counts_skip_short_reads_and_keep_multiplicity():
    """K-mers are counted per position over reads at least k long."""
    pool = ReadPool(["AAAA", "AA", "AAAC"])

    counts = count_kmers(pool, k=4, merlen=2)

    assert counts["AA"] == 5
    assert counts["AC"] == 1


def test_deduplication_is_idempotent():
    """A second pass over a deduplicated pool changes nothing."""
    pool = ReadPool(["ACGT", "CGTA", "ACGT", "CGTA", "GTAC"])

    deduplicate(pool)
    first = pool.live_indices()
    assert deduplicate(pool) == 0
    assert pool.live_indices() == first == [0, 1, 4]


def test_deduplication_of_empty_pool():
    """No live reads is not an error."""
    pool = ReadPool(["AC"])
    pool.discard(0, Liveness.FILTERED)

    assert deduplicate(pool) == 0
    assert pool.live() == []


def test_discard_is_monotonic():
    """The first not-live state sticks and reads cannot be revived."""
    pool = ReadPool(["ACGT"])

    assert pool.discard(0, Liveness.FILTERED)
    assert not pool.discard(0, Liveness.DUPLICATE)
    assert pool[0].state is Liveness.FILTERED
    with pytest.raises(ValueError):
        pool.discard(0, Liveness.LIVE)
    assert pool.counts() == {Liveness.LIVE: 0, Liveness.FILTERED: 1, Liveness.DUPLICATE: 0}


def test_parse_records_drops_mates_and_blank_lines():
    """Mate fields after a comma are ignored and sequences are upper-cased."""
    k, reads = parse_read_records(["acgt,TTTT\n", "\n", "CGTA\n"])

    assert k is None
    assert reads == ["ACGT", "CGTA"]


def test_parse_records_with_parameter_line():
    """The first record can carry the k-mer length."""
    k, reads = parse_read_records(["3\n", "ACG\n", "CGT\n"], parameter_line=True)

    assert k == 3
    assert reads == ["ACG", "CGT"]

    with pytest.raises(ConfigError):
        parse_read_records(["ACG\n"], parameter_line=True)


if __name__ == "__main__":
    test_rare_kmer_reads_are_filtered_and_duplicates_collapsed()
    test_threshold_is_strict()
    test_short_reads_never_survive()
    test_non_positive_merlen_is_a_config_error()
    test_kmer_counts_skip_short_reads_and_keep_multiplicity()
    test_deduplication_is_idempotent()
    test_deduplication_of_empty_pool()
    test_discard_is_monotonic()
    test_parse_records_drops_mates_and_blank_lines()
    test_parse_records_with_parameter_line()
    print("All tests passed!")
