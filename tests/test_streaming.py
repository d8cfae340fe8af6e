"""
Tests for the record source.

Validates FASTA/FASTQ decoding, gzip handling, format detection and
decode failures.
"""

import gzip
import io

import pytest
from pathlib import Path


FASTA_TEXT = b""">read1 first
ACGTACGT
ACGT
>read2
TTTT

>read3 empty
>read4
GG
"""

FASTQ_TEXT = b"""@read1
ACGTACGT
+
IIIIIIII
@read2
NNAC
+read2
####
"""


def buffered(data: bytes) -> io.BufferedReader:
    return io.BufferedReader(io.BytesIO(data))


class TestDetectFormat:
    """Test first-byte format detection."""

    def test_fasta(self) -> None:
        from kmerscan.streaming import detect_format
        stream = buffered(b">x\nACGT\n")
        assert detect_format(stream) == 'fasta'
        # Peek does not consume
        assert stream.read(1) == b">"

    def test_fastq(self) -> None:
        from kmerscan.streaming import detect_format
        assert detect_format(buffered(FASTQ_TEXT)) == 'fastq'

    def test_empty(self) -> None:
        from kmerscan.streaming import detect_format
        assert detect_format(buffered(b"")) is None

    def test_unknown(self) -> None:
        from kmerscan.streaming import RecordDecodeError, detect_format
        with pytest.raises(RecordDecodeError, match="Unknown file format"):
            detect_format(buffered(b"ACGT\n"))


class TestIterFasta:
    """Test FASTA decoding."""

    def test_records(self) -> None:
        """Multi-line records are joined; empty records yield b''."""
        from kmerscan.streaming import iter_fasta
        records = list(iter_fasta(buffered(FASTA_TEXT)))
        assert records == [b"ACGTACGTACGT", b"TTTT", b"", b"GG"]

    def test_crlf(self) -> None:
        from kmerscan.streaming import iter_fasta
        records = list(iter_fasta(buffered(b">a\r\nAC\r\nGT\r\n")))
        assert records == [b"ACGT"]

    def test_data_before_header(self) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_fasta
        with pytest.raises(RecordDecodeError, match="before first header"):
            list(iter_fasta(buffered(b"ACGT\n>a\nAC\n")))


class TestIterFastq:
    """Test FASTQ decoding."""

    def test_records(self) -> None:
        from kmerscan.streaming import iter_fastq
        assert list(iter_fastq(buffered(FASTQ_TEXT))) == [b"ACGTACGT", b"NNAC"]

    def test_trailing_blank_lines(self) -> None:
        from kmerscan.streaming import iter_fastq
        assert list(iter_fastq(buffered(FASTQ_TEXT + b"\n\n"))) == [b"ACGTACGT", b"NNAC"]

    def test_length_mismatch(self) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_fastq
        data = b"@r\nACGT\n+\nIII\n"
        with pytest.raises(RecordDecodeError, match="record 1"):
            list(iter_fastq(buffered(data)))

    def test_missing_separator(self) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_fastq
        data = FASTQ_TEXT + b"@r3\nACGT\nIIII\nIIII\n"
        with pytest.raises(RecordDecodeError, match="record 3: expected '\\+'"):
            list(iter_fastq(buffered(data)))

    def test_truncated(self) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_fastq
        with pytest.raises(RecordDecodeError, match="truncated"):
            list(iter_fastq(buffered(b"@r\nACGT\n+\n")))

    def test_bad_header(self) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_fastq
        data = FASTQ_TEXT + b"r3\nACGT\n+\nIIII\n"
        with pytest.raises(RecordDecodeError, match="expected '@'"):
            list(iter_fastq(buffered(data)))

    def test_records_yielded_before_error(self) -> None:
        """Valid records before a malformed one are still delivered."""
        from kmerscan.streaming import RecordDecodeError, iter_fastq
        data = FASTQ_TEXT + b"@r3\nAC\n+\nI\n"
        reader = iter_fastq(buffered(data))
        assert next(reader) == b"ACGTACGT"
        assert next(reader) == b"NNAC"
        with pytest.raises(RecordDecodeError):
            next(reader)


class TestIterRecords:
    """Test file-level record iteration."""

    def test_fasta_file(self, tmp_path: Path) -> None:
        from kmerscan.streaming import iter_records
        path = tmp_path / "reads.fa"
        path.write_bytes(FASTA_TEXT)
        assert list(iter_records(path)) == [b"ACGTACGTACGT", b"TTTT", b"", b"GG"]

    def test_gzip_fastq(self, tmp_path: Path) -> None:
        from kmerscan.streaming import iter_records
        path = tmp_path / "reads.fq.gz"
        with gzip.open(path, "wb") as f:
            f.write(FASTQ_TEXT)
        assert list(iter_records(path)) == [b"ACGTACGT", b"NNAC"]

    def test_multi_member_gzip(self, tmp_path: Path) -> None:
        """Concatenated gzip members are read as one stream."""
        from kmerscan.streaming import iter_records
        path = tmp_path / "reads.fa.gz"
        path.write_bytes(gzip.compress(b">a\nAC\n") + gzip.compress(b">b\nGT\n"))
        assert list(iter_records(path)) == [b"AC", b"GT"]

    def test_empty_file(self, tmp_path: Path) -> None:
        """Empty input is a clean end of stream."""
        from kmerscan.streaming import iter_records
        path = tmp_path / "empty.fa"
        path.write_bytes(b"")
        assert list(iter_records(path)) == []

    def test_missing_file(self, tmp_path: Path) -> None:
        from kmerscan.streaming import iter_records
        with pytest.raises(FileNotFoundError):
            list(iter_records(tmp_path / "missing.fa"))

    def test_unknown_format(self, tmp_path: Path) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_records
        path = tmp_path / "reads.txt"
        path.write_bytes(b"hello\n")
        with pytest.raises(RecordDecodeError, match="got 'h'"):
            list(iter_records(path))

    def test_corrupt_gzip(self, tmp_path: Path) -> None:
        from kmerscan.streaming import RecordDecodeError, iter_records
        path = tmp_path / "reads.fa.gz"
        path.write_bytes(b"not gzip at all")
        with pytest.raises(RecordDecodeError, match="Cannot read"):
            list(iter_records(path))

    def test_decode_error_is_value_error(self) -> None:
        from kmerscan.streaming import RecordDecodeError
        assert issubclass(RecordDecodeError, ValueError)
