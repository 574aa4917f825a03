"""Command line entrypoint for the Contigger assembler."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from contigger_core import (
    AssemblyConfig,
    AssemblyResult,
    ContiggerError,
    assemble,
    load_config,
    parse_read_records,
)

SEQIO_FORMATS = {
    ".fa": "fasta",
    ".fasta": "fasta",
    ".fna": "fasta",
    ".fq": "fastq",
    ".fastq": "fastq",
}

METRICS_HEADER = (
    "mode",
    "k",
    "reads",
    "filtered",
    "duplicates",
    "nodes",
    "edges",
    "contigs",
    "failures",
    "longest_contig",
    "total_length",
    "graph_time",
    "extract_time",
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Contigger de novo assembler")
    parser.add_argument(
        "reads",
        type=Path,
        help="Reads as FASTA/FASTQ or plain text, one read per line",
    )
    parser.add_argument(
        "--mode",
        choices=("chain", "eulerian"),
        default=None,
        help="Contract non-branching chains or walk an Eulerian circuit",
    )
    parser.add_argument("-k", type=int, default=None, help="Overlap window length")
    parser.add_argument("--merlen", type=int, default=None, help="K-mer length for the frequency filter")
    parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Minimum k-mer count for a read to be kept",
    )
    parser.add_argument(
        "--no-dedup",
        dest="deduplicate",
        action="store_false",
        default=None,
        help="Keep duplicate reads",
    )
    parser.add_argument(
        "--kmerize",
        action="store_true",
        help="Build the graph over the distinct k-mers of the reads (eulerian mode, needs k)",
    )
    parser.add_argument("--config", type=Path, help="YAML file with assembly parameters")
    parser.add_argument("--output", type=Path, help="Write contigs one per line to this file")
    parser.add_argument("--output-fasta", type=Path, help="Write contigs as FASTA to this file")
    parser.add_argument(
        "--metrics-csv",
        type=Path,
        help="Optional CSV file to append assembly metrics",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=1,
        help="Worker threads for overlap construction (1 disables threading)",
    )
    parser.add_argument("--time-limit", type=float, default=None, help="Abort after this many seconds")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return parser.parse_args(argv)


def load_reads(path: Path, *, parameter_line: bool = False) -> Tuple[Optional[int], List[str]]:
    file_format = SEQIO_FORMATS.get(path.suffix.lower())
    if file_format is not None:
        return None, [str(record.seq.upper()) for record in SeqIO.parse(path, file_format)]
    with path.open("r", encoding="utf-8") as handle:
        return parse_read_records(handle, parameter_line=parameter_line)


def build_config(args: argparse.Namespace) -> AssemblyConfig:
    return load_config(
        args.config,
        k=args.k,
        merlen=args.merlen,
        threshold=args.threshold,
        mode=args.mode,
        deduplicate=args.deduplicate,
        use_threads=True if args.threads > 1 else None,
        max_workers=args.threads if args.threads > 1 else None,
        time_limit=args.time_limit,
        kmerize=True if args.kmerize else None,
    )


def ensure_header(csv_path: Path, header: Sequence[str]) -> None:
    if not csv_path.exists() or csv_path.stat().st_size == 0:
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        with csv_path.open("w", encoding="utf-8") as handle:
            handle.write(",".join(header) + "\n")


def append_metrics(csv_path: Path, row: Sequence[str], header: Sequence[str]) -> None:
    ensure_header(csv_path, header)
    with csv_path.open("a", encoding="utf-8") as handle:
        handle.write(",".join(row) + "\n")


def write_contigs(result: AssemblyResult, args: argparse.Namespace) -> None:
    if args.output_fasta is not None:
        SeqIO.write(
            [
                SeqRecord(Seq(contig), id=f"contig_{number}", description=f"length={len(contig)}")
                for number, contig in enumerate(result.contigs, start=1)
            ],
            args.output_fasta,
            "fasta",
        )
    if args.output is not None:
        with args.output.open("w", encoding="utf-8") as handle:
            for contig in result.contigs:
                handle.write(contig + "\n")
    elif args.output_fasta is None:
        for contig in result.contigs:
            print(contig)


def report(result: AssemblyResult, config: AssemblyConfig) -> None:
    stats = result.stats
    err = sys.stderr
    print("Contigger assembly complete", file=err)
    print(f"Mode                  : {config.mode}", file=err)
    print(f"Reads processed       : {stats.get('reads', 0)}", file=err)
    print(f"Reads filtered        : {stats.get('filtered', 0)}", file=err)
    print(f"Duplicates removed    : {stats.get('duplicates', 0)}", file=err)
    print(f"Graph nodes / edges   : {stats.get('nodes', 0)} / {stats.get('edges', 0)}", file=err)
    print(f"Contigs               : {stats.get('contigs', 0)}", file=err)
    print(f"Longest contig        : {stats.get('longest_contig', 0)}", file=err)
    print(f"Graph time            : {result.timings.get('graph', 0.0):.3f}s", file=err)
    print(f"Extraction time       : {result.timings.get('extract', 0.0):.3f}s", file=err)
    for failure in result.failures:
        print(
            f"Reconstruction failed : component at node {failure.component[0]} "
            f"({len(failure.component)} nodes): {failure.reason}",
            file=err,
        )


def run(args: argparse.Namespace) -> int:
    config = build_config(args)
    expects_k = config.mode == "eulerian" and config.k is None
    parameter_k, reads = load_reads(args.reads, parameter_line=expects_k)
    if config.k is None and parameter_k is not None:
        config = dataclasses.replace(config, k=parameter_k)
    if not reads:
        raise ContiggerError(f"no reads were parsed from {args.reads}")

    result = assemble(reads, config)
    write_contigs(result, args)
    resolved = config.resolve(reads)
    report(result, resolved)

    if args.metrics_csv is not None:
        timings = result.timings
        row = (
            resolved.mode,
            str(resolved.k),
            *(
                str(result.stats.get(key, 0))
                for key in METRICS_HEADER[2:11]
            ),
            f"{timings.get('graph', 0.0):.6f}",
            f"{timings.get('extract', 0.0):.6f}",
        )
        append_metrics(args.metrics_csv, row, METRICS_HEADER)

    return 1 if result.failures else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        return run(args)
    except ContiggerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
