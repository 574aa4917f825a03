"""Non-branching path contraction and isolated cycle recovery."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .exceptions import GraphInvariantError
from .overlap import OverlapGraph

logger = logging.getLogger(__name__)


@dataclass
class Path:
    """Ordered node indices of one contig.

    A circular path links its last node back to its first; the closing
    repetition of the first node is not stored.
    """

    nodes: List[int] = field(default_factory=list)
    circular: bool = False

    def __len__(self) -> int:
        return len(self.nodes)


def _unique_successor(graph: OverlapGraph, index: int) -> int:
    successors = graph[index].successors
    if len(successors) != 1:
        raise GraphInvariantError(
            f"node {index} was treated as pass-through but has {len(successors)} successors"
        )
    return successors[0]


def contract_chains(graph: OverlapGraph) -> List[Path]:
    """Emit one maximal non-branching path per out-edge of every branching node.

    Degrees must already be set (see :func:`analyse_degrees`). Walks follow
    pass-through nodes until a branching node, which may be a dead end, is
    appended as the last element.
    """

    paths: List[Path] = []
    for node in graph:
        if node.pass_through:
            continue
        node.visited = True
        if node.out_degree == 0:
            continue
        for successor in node.successors:
            walk = [node.index, successor]
            seen = {successor}
            current = graph[successor]
            while current.pass_through:
                current.visited = True
                following = _unique_successor(graph, current.index)
                if following in seen:
                    raise GraphInvariantError(
                        f"chain from node {node.index} loops through pass-through node {following}"
                    )
                seen.add(following)
                walk.append(following)
                current = graph[following]
            current.visited = True
            paths.append(Path(walk))

    logger.info("Chain contraction: %d paths", len(paths))
    return paths


def find_isolated_cycles(graph: OverlapGraph) -> List[Path]:
    """Recover cycles of pass-through nodes that no branching node reaches.

    Every node is visited once this returns.
    """

    cycles: List[Path] = []
    for node in graph:
        if node.visited:
            continue
        node.visited = True
        walk = [node.index]
        following = _unique_successor(graph, node.index)
        while not graph[following].visited:
            graph[following].visited = True
            walk.append(following)
            following = _unique_successor(graph, following)
        cycles.append(Path(walk, circular=following == node.index))

    leftover = graph.unvisited()
    if leftover:
        raise GraphInvariantError(f"{len(leftover)} nodes left unvisited: {leftover[:10]}")
    logger.info("Isolated cycles: %d found", len(cycles))
    return cycles
