"""Assembly parameters and their YAML configuration file."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

MODES = ("chain", "eulerian")
DEFAULT_MERLEN = 30


@dataclass
class AssemblyConfig:
    """Parameters of one assembly run.

    ``k`` is the overlap window, ``merlen`` the k-mer length used by the
    frequency filter and ``threshold`` the minimum count a k-mer needs for
    its reads to survive. With ``kmerize`` set the reads are chopped into
    ``k``-mers and each distinct k-mer becomes one graph node. Fields left as
    ``None`` are filled in from the mode and the reads by :meth:`resolve`.
    """

    k: Optional[int] = None
    merlen: Optional[int] = None
    threshold: Optional[int] = None
    mode: str = "chain"
    deduplicate: bool = True
    use_threads: bool = False
    max_workers: int = 16
    time_limit: Optional[float] = None
    kmerize: bool = False

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ConfigError(f"mode must be one of {', '.join(MODES)}, got {self.mode!r}")
        if self.threshold is None:
            self.threshold = 2 if self.mode == "chain" else 1
        if self.kmerize and self.mode != "eulerian":
            raise ConfigError("kmerize needs eulerian mode")
        if self.k is not None and self.k < 2:
            raise ConfigError(f"k must be at least 2, got {self.k}")
        if self.merlen is not None and self.merlen < 1:
            raise ConfigError(f"merlen must be positive, got {self.merlen}")
        if self.threshold < 1:
            raise ConfigError(f"threshold must be at least 1, got {self.threshold}")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be positive, got {self.max_workers}")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ConfigError(f"time_limit must be positive, got {self.time_limit}")

    def resolve(self, reads: Sequence[str]) -> "AssemblyConfig":
        """Return a copy with ``k`` and ``merlen`` filled in.

        ``k`` defaults to the length of the first read; ``merlen`` defaults to
        30, capped at ``k``. ``k`` stays ``None`` when there are no reads.
        """

        k = self.k
        if k is None and self.kmerize:
            raise ConfigError("kmerize needs an explicit k")
        if k is None and reads:
            k = len(reads[0])
            if k < 2:
                raise ConfigError(f"cannot infer k from a first read of length {k}")
        merlen = self.merlen
        if merlen is None and k is not None:
            merlen = min(DEFAULT_MERLEN, k)
        return dataclasses.replace(self, k=k, merlen=merlen)


def load_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> AssemblyConfig:
    """Load an :class:`AssemblyConfig` from YAML and apply non-``None`` overrides."""

    values: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"configuration file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path} must contain a mapping of parameters")
        values.update(loaded)

    values.update({key: value for key, value in overrides.items() if value is not None})

    known = {f.name for f in dataclasses.fields(AssemblyConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
    try:
        config = AssemblyConfig(**values)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
    logger.debug("Loaded configuration: %s", config)
    return config
