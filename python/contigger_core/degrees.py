"""Degree analysis of the overlap graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np
from scipy.sparse import coo_matrix

from .overlap import OverlapGraph

logger = logging.getLogger(__name__)


@dataclass
class DegreeSummary:
    pass_through: int
    branching: int
    sources: int  # in-degree 0
    sinks: int  # out-degree 0


def adjacency_to_sparse(graph: OverlapGraph) -> coo_matrix:
    """Convert the graph into a COO matrix sized to the read pool.

    Rows are sources, columns are targets and each entry holds the edge
    multiplicity (duplicate coordinates are summed).
    """

    rows: List[int] = []
    cols: List[int] = []
    for (source, _), target in graph.edges():
        rows.append(source)
        cols.append(target)

    shape = (graph.size, graph.size)
    if not rows:
        return coo_matrix(shape, dtype=int)
    data = np.ones(len(rows), dtype=int)
    matrix = coo_matrix((data, (np.array(rows), np.array(cols))), shape=shape)
    matrix.sum_duplicates()
    return matrix


def analyse_degrees(graph: OverlapGraph) -> DegreeSummary:
    """Store in/out degrees on every node, counted with multiplicity."""

    matrix = adjacency_to_sparse(graph)
    out_degrees = np.asarray(matrix.sum(axis=1)).ravel()
    in_degrees = np.asarray(matrix.sum(axis=0)).ravel()

    summary = DegreeSummary(0, 0, 0, 0)
    for node in graph:
        node.out_degree = int(out_degrees[node.index])
        node.in_degree = int(in_degrees[node.index])
        if node.pass_through:
            summary.pass_through += 1
        else:
            summary.branching += 1
        if node.in_degree == 0:
            summary.sources += 1
        if node.out_degree == 0:
            summary.sinks += 1

    logger.info(
        "Degrees: %d pass-through, %d branching, %d sources, %d sinks",
        summary.pass_through,
        summary.branching,
        summary.sources,
        summary.sinks,
    )
    return summary
