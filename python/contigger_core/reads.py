"""Read pool holding the raw reads and their liveness."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


class Liveness(Enum):
    LIVE = "live"
    FILTERED = "filtered"
    DUPLICATE = "duplicate"


@dataclass
class Read:
    """One input read. ``index`` is its position in the pool for the whole run."""

    index: int
    sequence: str
    state: Liveness = Liveness.LIVE

    @property
    def live(self) -> bool:
        return self.state is Liveness.LIVE

    def __len__(self) -> int:
        return len(self.sequence)


class ReadPool:
    """Indexed collection of reads.

    Reads are never removed; discarding one only flips its state, so indices
    stay aligned with the input for every later phase.
    """

    def __init__(self, sequences: Iterable[str]) -> None:
        self._reads: List[Read] = [
            Read(index, sequence) for index, sequence in enumerate(sequences)
        ]

    def __len__(self) -> int:
        return len(self._reads)

    def __getitem__(self, index: int) -> Read:
        return self._reads[index]

    def __iter__(self) -> Iterator[Read]:
        return iter(self._reads)

    def live(self) -> List[Read]:
        return [read for read in self._reads if read.live]

    def live_indices(self) -> List[int]:
        return [read.index for read in self._reads if read.live]

    def discard(self, index: int, state: Liveness) -> bool:
        """Mark a live read as not-live. Returns ``False`` if it already was."""

        if state is Liveness.LIVE:
            raise ValueError("discard() cannot revive a read")
        read = self._reads[index]
        if not read.live:
            return False
        read.state = state
        return True

    def counts(self) -> Dict[Liveness, int]:
        tally = Counter(read.state for read in self._reads)
        return {state: tally.get(state, 0) for state in Liveness}


def parse_read_records(
    lines: Iterable[str],
    *,
    parameter_line: bool = False,
) -> Tuple[Optional[int], List[str]]:
    """Parse plain-text read records.

    Each non-blank line holds one read, optionally followed by a comma and a
    mate sequence which is dropped. When ``parameter_line`` is set the first
    record is the overlap length ``K`` instead of a read.
    """

    k: Optional[int] = None
    reads: List[str] = []
    expecting_parameter = parameter_line
    for number, line in enumerate(lines, start=1):
        record = line.strip()
        if not record:
            continue
        if expecting_parameter:
            try:
                k = int(record.split(",")[0])
            except ValueError:
                raise ConfigError(
                    f"line {number}: expected an integer k-mer length, got {record!r}"
                ) from None
            expecting_parameter = False
            continue
        reads.append(record.split(",")[0].strip().upper())
    logger.debug("Parsed %d read records", len(reads))
    return k, reads
