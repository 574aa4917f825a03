"""Overlap graph construction for the Contigger assembler.

Two reads overlap when the window ``a[1:k]`` equals ``b[:k-1]``: read ``b``
continues read ``a`` shifted by one base. Only the first ``k`` bases of each
read take part in the comparison.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

import networkx as nx

from .exceptions import ConfigError, GraphInvariantError
from .reads import ReadPool

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]  # (source index, slot in the source's successor list)


def suffix_key(sequence: str, k: int) -> str:
    return sequence[1:k]


def prefix_key(sequence: str, k: int) -> str:
    return sequence[: k - 1]


def overlaps(a: str, b: str, k: int) -> bool:
    """Return whether ``b`` follows ``a`` in the overlap graph."""

    return suffix_key(a, k) == prefix_key(b, k)


@dataclass
class GraphNode:
    index: int
    sequence: str
    successors: List[int] = field(default_factory=list)
    in_degree: int = 0
    out_degree: int = 0
    visited: bool = False

    @property
    def pass_through(self) -> bool:
        return self.in_degree == 1 and self.out_degree == 1

    @property
    def branching(self) -> bool:
        return not self.pass_through


class OverlapGraph:
    """Directed (multi)graph of overlapping reads keyed by read pool index.

    ``size`` is the length of the pool the nodes were drawn from, so that
    per-read arrays built from the graph stay aligned with the input.
    """

    def __init__(self, k: int, size: int) -> None:
        self.k = k
        self.size = size
        self.nodes: Dict[int, GraphNode] = {}
        # k-mer transition counts, set only on graphs built from raw k-mers
        self.edge_weights: Dict[Tuple[int, int], int] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, index: object) -> bool:
        return index in self.nodes

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.nodes.values())

    def __getitem__(self, index: int) -> GraphNode:
        return self.nodes[index]

    def add_node(self, index: int, sequence: str) -> GraphNode:
        node = GraphNode(index, sequence)
        self.nodes[index] = node
        return node

    def edges(self) -> Iterator[Tuple[Edge, int]]:
        """Yield every ``((source, slot), target)`` pair in index order."""

        for node in self.nodes.values():
            for slot, target in enumerate(node.successors):
                yield (node.index, slot), target

    def edge_count(self) -> int:
        return sum(len(node.successors) for node in self.nodes.values())

    def target(self, edge: Edge) -> int:
        source, slot = edge
        return self.nodes[source].successors[slot]

    def unvisited(self) -> List[int]:
        return [node.index for node in self.nodes.values() if not node.visited]

    def reset_traversal(self) -> None:
        """Clear visited flags before an independent run over the same graph."""

        for node in self.nodes.values():
            node.visited = False

    def to_networkx(self) -> nx.MultiDiGraph:
        graph = nx.MultiDiGraph()
        for node in self.nodes.values():
            graph.add_node(node.index, sequence=node.sequence)
        for (source, slot), target in self.edges():
            graph.add_edge(source, target, key=slot)
        return graph

    @classmethod
    def from_adjacency(
        cls,
        sequences: Mapping[int, str],
        adjacency: Mapping[int, Sequence[int]],
        k: int,
        *,
        size: int | None = None,
    ) -> "OverlapGraph":
        """Build a generalized graph from explicit, possibly repeated, adjacency lists.

        Every listed edge must still satisfy the overlap predicate.
        """

        graph = cls(k, size if size is not None else (max(sequences, default=-1) + 1))
        for index in sorted(sequences):
            graph.add_node(index, sequences[index])
        for source, targets in adjacency.items():
            if source not in graph.nodes:
                raise GraphInvariantError(f"edge source {source} is not a node")
            for target in targets:
                if target not in graph.nodes:
                    raise GraphInvariantError(f"edge target {target} is not a node")
                if not overlaps(graph[source].sequence, graph[target].sequence, k):
                    raise GraphInvariantError(
                        f"edge {source} -> {target} does not satisfy the overlap predicate"
                    )
                graph[source].successors.append(target)
        return graph


def index_prefixes(reads: Iterable[Tuple[int, str]], k: int) -> Dict[str, List[int]]:
    """Group read indices by their ``k - 1`` prefix, preserving index order."""

    lookup: Dict[str, List[int]] = defaultdict(list)
    for index, sequence in reads:
        lookup[prefix_key(sequence, k)].append(index)
    return lookup


def build_overlap_graph(
    pool: ReadPool,
    k: int,
    *,
    use_threads: bool = False,
    max_workers: int = 16,
) -> OverlapGraph:
    """Build the overlap graph over the live reads of ``pool``.

    Parameters
    ----------
    pool
        Read pool after filtering and deduplication. Reads shorter than ``k``
        are never turned into nodes even if still live.
    k
        Overlap window; successors share ``k - 1`` bases with their source.
    use_threads / max_workers
        Resolve suffix lookups on a thread pool. Lookups are read-only and
        results are collected in submission order, so the adjacency is the
        same as the sequential build.
    """

    if k < 2:
        raise ConfigError(f"k must be at least 2, got {k}")

    graph = OverlapGraph(k, len(pool))
    live = [(read.index, read.sequence) for read in pool.live() if len(read) >= k]
    for index, sequence in live:
        graph.add_node(index, sequence)

    lookup = index_prefixes(live, k)

    def successors_of(item: Tuple[int, str]) -> List[int]:
        return list(lookup.get(suffix_key(item[1], k), ()))

    if use_threads and len(live) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            adjacency = list(executor.map(successors_of, live))
    else:
        adjacency = [successors_of(item) for item in live]

    for (index, _), targets in zip(live, adjacency):
        graph[index].successors = targets

    logger.info(
        "Overlap graph: %d nodes, %d edges (k=%d)", len(graph), graph.edge_count(), k
    )
    return graph
