"""K-mer frequency filtering and deduplication of the read pool."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterator

from .exceptions import ConfigError
from .reads import Liveness, Read, ReadPool

logger = logging.getLogger(__name__)


def iter_kmers(sequence: str, merlen: int) -> Iterator[str]:
    for start in range(len(sequence) - merlen + 1):
        yield sequence[start : start + merlen]


def count_kmers(pool: ReadPool, k: int, merlen: int) -> Counter:
    """Count every length-``merlen`` substring of the live reads at least ``k`` long.

    Occurrences are counted with multiplicity, so a k-mer repeated inside one
    read contributes once per position.
    """

    counts: Counter = Counter()
    for read in pool.live():
        if len(read) < k:
            continue
        counts.update(iter_kmers(read.sequence, merlen))
    return counts


def _is_short(read: Read, k: int, merlen: int) -> bool:
    return len(read) < k or len(read) < merlen


def filter_rare_kmers(pool: ReadPool, k: int, merlen: int, threshold: int) -> int:
    """Discard short reads and reads carrying any k-mer seen fewer than ``threshold`` times.

    A single sequencing error spoils every k-mer overlapping it, so one rare
    k-mer is enough to drop the whole read. A k-mer whose count equals the
    threshold is kept. Returns the number of reads discarded.
    """

    if merlen < 1:
        raise ConfigError(f"merlen must be positive, got {merlen}")

    counts = count_kmers(pool, k, merlen)
    short = 0
    rare = 0
    for read in pool.live():
        if _is_short(read, k, merlen):
            pool.discard(read.index, Liveness.FILTERED)
            logger.debug("Read %d filtered: length %d is too short", read.index, len(read))
            short += 1
            continue
        for kmer in iter_kmers(read.sequence, merlen):
            if counts[kmer] < threshold:
                pool.discard(read.index, Liveness.FILTERED)
                logger.debug(
                    "Read %d filtered: k-mer %s seen %d times", read.index, kmer, counts[kmer]
                )
                rare += 1
                break

    logger.info(
        "K-mer filter: %d distinct %d-mers, %d short reads and %d reads with rare k-mers removed",
        len(counts),
        merlen,
        short,
        rare,
    )
    return short + rare


def deduplicate(pool: ReadPool) -> int:
    """Keep the first live copy of every sequence and mark later copies as duplicates."""

    first_seen: Dict[str, int] = {}
    removed = 0
    for read in pool.live():
        if read.sequence in first_seen:
            pool.discard(read.index, Liveness.DUPLICATE)
            removed += 1
        else:
            first_seen[read.sequence] = read.index
    logger.info("Deduplication: %d unique reads, %d duplicates removed", len(first_seen), removed)
    return removed
