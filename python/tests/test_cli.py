"""Tests for the command line entrypoint."""

from Bio import SeqIO

import contigger


def test_chain_assembly_to_text_file(tmp_path):
    """Plain-text reads with mate fields assemble into a contig file."""
    reads = tmp_path / "reads.txt"
    reads.write_text("ABCDE\nBCDEF,TTTTT\nCDEFG\n")
    output = tmp_path / "contigs.txt"

    code = contigger.main([str(reads), "-k", "4", "--threshold", "1", "--output", str(output)])

    assert code == 0
    assert output.read_text().splitlines() == ["ABCDEFG", "CDEFG"]


def test_eulerian_reads_parameter_line(tmp_path, capsys):
    """In Eulerian mode the first record of a text file is k."""
    reads = tmp_path / "kmers.txt"
    reads.write_text("3\nACG\nCGT\nGTA\nTAC\n")

    code = contigger.main([str(reads), "--mode", "eulerian"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.splitlines() == ["ACGTACG"]
    assert "Contigger assembly complete" in captured.err


def test_fasta_input_and_output(tmp_path):
    """FASTA in, FASTA out with numbered contig records."""
    reads = tmp_path / "reads.fasta"
    reads.write_text(">r1\nacgtt\n>r2\nCGTTG\n>r3\nGTTGC\n")
    output = tmp_path / "contigs.fasta"

    code = contigger.main(
        [str(reads), "--threshold", "1", "--output-fasta", str(output)]
    )

    records = list(SeqIO.parse(output, "fasta"))
    assert code == 0
    assert [record.id for record in records] == ["contig_1", "contig_2"]
    assert [str(record.seq) for record in records] == ["ACGTTGC", "GTTGC"]


def test_kmerize_and_metrics(tmp_path, capsys):
    """A read chopped into k-mers is walked and metrics rows accumulate."""
    reads = tmp_path / "reads.txt"
    reads.write_text("ACGTTGCA\n")
    metrics = tmp_path / "out" / "metrics.csv"
    args = [str(reads), "--mode", "eulerian", "-k", "3", "--kmerize", "--metrics-csv", str(metrics)]

    assert contigger.main(args) == 0
    assert contigger.main(args) == 0

    assert capsys.readouterr().out.splitlines() == ["ACGTTGCA", "ACGTTGCA"]
    lines = metrics.read_text().splitlines()
    assert lines[0] == ",".join(contigger.METRICS_HEADER)
    assert len(lines) == 3
    assert lines[1].split(",")[:3] == ["eulerian", "3", "1"]


def test_reconstruction_failure_exit_code(tmp_path, capsys):
    """Unwalkable components are reported and flip the exit code."""
    reads = tmp_path / "kmers.txt"
    reads.write_text("2\nAB\nCB\nBD\nXY\nYX\n")

    code = contigger.main([str(reads), "--mode", "eulerian"])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out.splitlines() == ["XYXY"]
    assert "Reconstruction failed" in captured.err


def test_errors_are_reported(tmp_path, capsys):
    """Empty input and bad configuration exit with status 2."""
    empty = tmp_path / "empty.txt"
    empty.write_text("\n")
    assert contigger.main([str(empty)]) == 2

    reads = tmp_path / "reads.txt"
    reads.write_text("ACGT\n")
    assert contigger.main([str(reads), "-k", "1"]) == 2
    assert "error:" in capsys.readouterr().err
