"""Core engine of the Contigger de novo assembler."""

from .reads import (
    Liveness,
    Read,
    ReadPool,
    parse_read_records,
)
from .filtering import (
    count_kmers,
    filter_rare_kmers,
    deduplicate,
)
from .overlap import (
    GraphNode,
    OverlapGraph,
    build_overlap_graph,
    overlaps,
)
from .degrees import (
    DegreeSummary,
    adjacency_to_sparse,
    analyse_degrees,
)
from .chains import (
    Path,
    contract_chains,
    find_isolated_cycles,
)
from .debruijn import (
    EulerianAssembly,
    Walk,
    build_kmer_graph,
    eulerian_circuit,
    find_walk,
    kmerize,
    reconstruct_eulerian,
)
from .render import (
    render_path,
    render_contigs,
)
from .config import (
    AssemblyConfig,
    load_config,
)
from .exceptions import (
    AssemblyTimeout,
    ConfigError,
    ContiggerError,
    EulerianReconstructionError,
    GraphInvariantError,
    ReconstructionFailure,
)
from .pipeline import (
    AssemblyResult,
    assemble,
)

__all__ = [
    "Liveness",
    "Read",
    "ReadPool",
    "parse_read_records",
    "count_kmers",
    "filter_rare_kmers",
    "deduplicate",
    "GraphNode",
    "OverlapGraph",
    "build_overlap_graph",
    "overlaps",
    "DegreeSummary",
    "adjacency_to_sparse",
    "analyse_degrees",
    "Path",
    "contract_chains",
    "find_isolated_cycles",
    "EulerianAssembly",
    "Walk",
    "build_kmer_graph",
    "eulerian_circuit",
    "find_walk",
    "kmerize",
    "reconstruct_eulerian",
    "render_path",
    "render_contigs",
    "AssemblyConfig",
    "load_config",
    "AssemblyTimeout",
    "ConfigError",
    "ContiggerError",
    "EulerianReconstructionError",
    "GraphInvariantError",
    "ReconstructionFailure",
    "AssemblyResult",
    "assemble",
]
