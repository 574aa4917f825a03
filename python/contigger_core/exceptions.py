"""Exceptions raised by the Contigger assembly engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


class ContiggerError(Exception):
    """Base class for every error raised by ``contigger_core``."""


class ConfigError(ContiggerError):
    """Raised when assembly parameters are missing or inconsistent."""


class GraphInvariantError(ContiggerError):
    """Raised when the overlap graph breaks a structural invariant.

    Seeing this means a bug in graph construction or traversal, not bad input.
    """


class AssemblyTimeout(ContiggerError):
    """Raised between phases once the configured time limit has elapsed."""

    def __init__(self, phase: str, elapsed: float, limit: float) -> None:
        super().__init__(
            f"time limit of {limit:.3f}s exceeded before {phase} "
            f"({elapsed:.3f}s elapsed)"
        )
        self.phase = phase
        self.elapsed = elapsed
        self.limit = limit


@dataclass(frozen=True)
class ReconstructionFailure:
    """A connected component that could not be walked as a single circuit."""

    component: Tuple[int, ...]
    reason: str
    edges_total: int
    edges_consumed: int

    @property
    def edges_remaining(self) -> int:
        return self.edges_total - self.edges_consumed


class EulerianReconstructionError(ContiggerError):
    """Raised when cycle splicing cannot consume every edge of a component."""

    def __init__(self, failure: ReconstructionFailure) -> None:
        super().__init__(
            f"component starting at node {failure.component[0]}: {failure.reason} "
            f"({failure.edges_remaining} of {failure.edges_total} edges unused)"
        )
        self.failure = failure
