"""Turn node paths back into nucleotide sequences."""

from __future__ import annotations

import logging
from typing import Iterable, List

from .chains import Path
from .exceptions import GraphInvariantError
from .overlap import OverlapGraph, overlaps

logger = logging.getLogger(__name__)


def render_path(graph: OverlapGraph, path: Path) -> str:
    """Spell a path through the overlap windows of its reads.

    Only the first ``k`` bases of a read take part in an overlap, so a path
    spells the window of its first read, one base per later read and finally
    whatever the last read carries past its window. A single-node path is
    the read itself.
    """

    if not path.nodes:
        return ""
    k = graph.k
    first = graph[path.nodes[0]].sequence
    if len(path.nodes) == 1:
        return first
    parts = [first[:k]]
    previous = first
    for index in path.nodes[1:]:
        sequence = graph[index].sequence
        if not overlaps(previous, sequence, k):
            raise GraphInvariantError(f"path steps onto node {index} without an overlap")
        parts.append(sequence[k - 1])
        previous = sequence
    parts.append(previous[k:])
    return "".join(parts)


def render_contigs(
    graph: OverlapGraph,
    paths: Iterable[Path],
    *,
    unique: bool = True,
) -> List[str]:
    """Render every path, then every dead-end read as a contig of its own.

    With ``unique`` set, a contig identical to one already emitted is dropped.
    """

    contigs: List[str] = []
    emitted = set()

    def emit(contig: str) -> None:
        if unique and contig in emitted:
            return
        emitted.add(contig)
        contigs.append(contig)

    for path in paths:
        emit(render_path(graph, path))

    dead_ends = [node for node in graph if node.out_degree == 0]
    for node in dead_ends:
        emit(node.sequence)

    logger.info("Rendered %d contigs (%d dead-end reads)", len(contigs), len(dead_ends))
    return contigs
