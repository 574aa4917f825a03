"""End-to-end assembly: filter, deduplicate, build the graph and extract contigs."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .chains import Path, contract_chains, find_isolated_cycles
from .config import AssemblyConfig
from .debruijn import build_kmer_graph, reconstruct_eulerian
from .degrees import analyse_degrees
from .exceptions import AssemblyTimeout, ReconstructionFailure
from .filtering import deduplicate, filter_rare_kmers
from .overlap import OverlapGraph, build_overlap_graph
from .reads import Liveness, ReadPool
from .render import render_contigs, render_path

logger = logging.getLogger(__name__)


@dataclass
class AssemblyResult:
    contigs: List[str] = field(default_factory=list)
    paths: List[Path] = field(default_factory=list)
    failures: List[ReconstructionFailure] = field(default_factory=list)
    pool: Optional[ReadPool] = None
    graph: Optional[OverlapGraph] = None
    stats: Dict[str, int] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)


class _Deadline:
    def __init__(self, limit: Optional[float]) -> None:
        self.limit = limit
        self.start = time.time()

    def check(self, phase: str) -> None:
        if self.limit is None:
            return
        elapsed = time.time() - self.start
        if elapsed > self.limit:
            raise AssemblyTimeout(phase, elapsed, self.limit)


def assemble(reads: Sequence[str], config: Optional[AssemblyConfig] = None) -> AssemblyResult:
    """Assemble ``reads`` into contigs.

    In ``chain`` mode every maximal non-branching path, isolated cycle and
    dead-end read becomes a contig. In ``eulerian`` mode every weakly
    connected component is walked edge by edge into a single sequence;
    components that cannot be walked are reported in ``failures``.
    With ``config.kmerize`` the graph is built over the distinct k-mers of
    the surviving reads instead of the reads themselves.
    """

    config = (config or AssemblyConfig()).resolve(reads)
    deadline = _Deadline(config.time_limit)
    pool = ReadPool(reads)
    result = AssemblyResult(pool=pool)
    result.stats["reads"] = len(pool)

    if config.k is None:
        logger.info("No reads supplied; nothing to assemble")
        return result

    phase_start = time.time()
    filter_rare_kmers(pool, config.k, config.merlen, config.threshold)
    result.timings["filter"] = time.time() - phase_start

    if config.deduplicate:
        deadline.check("deduplication")
        phase_start = time.time()
        deduplicate(pool)
        result.timings["deduplicate"] = time.time() - phase_start

    counts = pool.counts()
    result.stats["filtered"] = counts[Liveness.FILTERED]
    result.stats["duplicates"] = counts[Liveness.DUPLICATE]

    deadline.check("graph construction")
    phase_start = time.time()
    if config.kmerize:
        graph = build_kmer_graph((read.sequence for read in pool.live()), config.k)
    else:
        graph = build_overlap_graph(
            pool, config.k, use_threads=config.use_threads, max_workers=config.max_workers
        )
    analyse_degrees(graph)
    result.graph = graph
    result.timings["graph"] = time.time() - phase_start
    result.stats["nodes"] = len(graph)
    result.stats["edges"] = graph.edge_count()

    deadline.check("path extraction")
    phase_start = time.time()
    if config.mode == "chain":
        result.paths = contract_chains(graph) + find_isolated_cycles(graph)
        result.contigs = render_contigs(graph, result.paths)
    else:
        assembly = reconstruct_eulerian(graph)
        result.paths = assembly.paths
        result.failures = assembly.failures
        result.contigs = [render_path(graph, path) for path in assembly.paths]
        result.stats["edges_consumed"] = assembly.edges_consumed
    result.timings["extract"] = time.time() - phase_start

    result.stats["contigs"] = len(result.contigs)
    result.stats["failures"] = len(result.failures)
    result.stats["longest_contig"] = max((len(c) for c in result.contigs), default=0)
    result.stats["total_length"] = sum(len(c) for c in result.contigs)
    logger.info(
        "Assembly complete: %d contigs from %d reads (%s mode)",
        len(result.contigs),
        len(pool),
        config.mode,
    )
    return result
