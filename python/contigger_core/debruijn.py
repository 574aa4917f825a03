"""Eulerian circuit reconstruction over a k-mer overlap graph.

The k-mer graph itself can be built straight from reads, one node per
distinct k-mer.

Cycles are found with a backtracking depth-first search and spliced into the
growing walk until every edge of a component has been used exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx

from .chains import Path
from .exceptions import EulerianReconstructionError, ReconstructionFailure
from .overlap import Edge, OverlapGraph

logger = logging.getLogger(__name__)


@dataclass
class Walk:
    found: bool
    nodes: List[int] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


@dataclass
class EulerianAssembly:
    paths: List[Path] = field(default_factory=list)
    failures: List[ReconstructionFailure] = field(default_factory=list)
    edges_consumed: int = 0


def kmerize(sequences: Iterable[str], k: int) -> List[str]:
    """Chop each sequence into its overlapping k-mers, in order."""

    kmers: List[str] = []
    for sequence in sequences:
        if len(sequence) < k:
            continue
        kmers.extend(sequence[i : i + k] for i in range(len(sequence) - k + 1))
    return kmers


def build_kmer_graph(sequences: Iterable[str], k: int) -> OverlapGraph:
    """Build a de Bruijn multigraph with one node per distinct k-mer.

    Every pair of consecutive k-mers seen in a read is an edge. Coverage from
    different reads only raises ``edge_weights``; an edge is repeated in the
    successor list as many times as a single read walks it, which is how a
    repeat inside the sequence shows up.
    """

    node_of: Dict[str, int] = {}
    weights: Counter = Counter()
    multiplicity: Dict[Tuple[int, int], int] = {}
    for sequence in sequences:
        kmers = kmerize([sequence], k)
        for kmer in kmers:
            node_of.setdefault(kmer, len(node_of))
        in_read = Counter(
            (node_of[left], node_of[right]) for left, right in zip(kmers, kmers[1:])
        )
        for pair, count in in_read.items():
            weights[pair] += count
            multiplicity[pair] = max(multiplicity.get(pair, 0), count)

    adjacency: Dict[int, List[int]] = {}
    for (source, target), count in sorted(multiplicity.items()):
        adjacency.setdefault(source, []).extend([target] * count)

    graph = OverlapGraph.from_adjacency(
        {index: kmer for kmer, index in node_of.items()}, adjacency, k
    )
    graph.edge_weights = dict(weights)
    logger.info(
        "K-mer graph: %d distinct %d-mers, %d edges from %d k-mer transitions",
        len(graph),
        k,
        graph.edge_count(),
        sum(weights.values()),
    )
    return graph


def _next_edge(
    graph: OverlapGraph, index: int, consumed: Set[Edge], tried: Set[Edge]
) -> Optional[Edge]:
    for slot in range(len(graph[index].successors)):
        edge = (index, slot)
        if edge not in consumed and edge not in tried:
            return edge
    return None


def find_walk(graph: OverlapGraph, source: int, goal: int, consumed: Set[Edge]) -> Walk:
    """Search for a trail of at least one edge from ``source`` to ``goal``.

    Only edges missing from ``consumed`` are followed. Edges on the current
    trail are added to ``consumed`` and released again on backtrack, so on
    failure ``consumed`` is left as it was. ``tried`` belongs to this search
    alone: an edge that led to a dead end is never retried.
    """

    tried: Set[Edge] = set()
    nodes = [source]
    edges: List[Edge] = []
    while nodes:
        edge = _next_edge(graph, nodes[-1], consumed, tried)
        if edge is None:
            nodes.pop()
            if edges:
                consumed.discard(edges.pop())
            continue
        tried.add(edge)
        consumed.add(edge)
        edges.append(edge)
        target = graph.target(edge)
        nodes.append(target)
        if target == goal:
            return Walk(True, nodes, edges)
    return Walk(False)


def _endpoints(graph: OverlapGraph, component: Sequence[int]) -> Tuple[int, int]:
    start = max(component, key=lambda i: (graph[i].out_degree - graph[i].in_degree, -i))
    end = max(component, key=lambda i: (graph[i].in_degree - graph[i].out_degree, -i))
    if graph[start].out_degree - graph[start].in_degree <= 0:
        start = min(i for i in component if graph[i].out_degree > 0)
        end = start
    return start, end


def eulerian_circuit(graph: OverlapGraph, component: Sequence[int]) -> Path:
    """Walk every edge of one weakly connected component exactly once.

    Degrees must already be set. Raises :class:`EulerianReconstructionError`
    when some edges cannot be spliced into the walk.
    """

    component = sorted(component)
    total = sum(len(graph[i].successors) for i in component)
    if total == 0:
        graph[component[0]].visited = True
        return Path([component[0]])

    def fail(reason: str, used: int) -> EulerianReconstructionError:
        return EulerianReconstructionError(
            ReconstructionFailure(tuple(component), reason, total, used)
        )

    start, end = _endpoints(graph, component)
    consumed: Set[Edge] = set()
    walk = find_walk(graph, start, end, consumed)
    if not walk.found:
        raise fail(f"no walk from node {start} to node {end}", 0)
    path = walk.nodes

    while len(consumed) < total:
        spliced = False
        position = 0
        while position < len(path):
            index = path[position]
            cycle = find_walk(graph, index, index, consumed)
            if cycle.found:
                path[position : position + 1] = cycle.nodes
                spliced = True
            else:
                position += 1
        if not spliced:
            raise fail("unused edges are unreachable from the assembled walk", len(consumed))

    for index in path:
        graph[index].visited = True
    logger.debug("Component at node %d: %d edges in one walk", component[0], total)
    return Path(path)


def reconstruct_eulerian(graph: OverlapGraph) -> EulerianAssembly:
    """Reconstruct every weakly connected component independently.

    A component that cannot be completed is recorded as a failure and does
    not stop the others.
    """

    assembly = EulerianAssembly()
    components = sorted(
        (sorted(component) for component in nx.weakly_connected_components(graph.to_networkx())),
        key=lambda component: component[0],
    )
    for component in components:
        try:
            path = eulerian_circuit(graph, component)
        except EulerianReconstructionError as exc:
            logger.warning("Eulerian reconstruction failed: %s", exc)
            assembly.failures.append(exc.failure)
            continue
        assembly.paths.append(path)
        assembly.edges_consumed += len(path) - 1

    logger.info(
        "Eulerian reconstruction: %d components walked, %d failed",
        len(assembly.paths),
        len(assembly.failures),
    )
    return assembly
