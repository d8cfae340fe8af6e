"""
Sequence record source for FASTA and FASTQ input.

This module provides generators that yield one record's symbol sequence at a
time, so the scan never holds more than a single record in memory.

Design Principles:
    - Stream one record at a time (bytes, line endings stripped)
    - Format detected from the first byte: '>' FASTA, '@' FASTQ
    - Transparent gzip decompression (multi-member) for '.gz' paths
    - Malformed input raises RecordDecodeError; empty input yields nothing

Functions:
    open_input: Open a path (or '-' for stdin) as a binary stream
    detect_format: Peek the first byte of a stream
    iter_fasta: Iterate over FASTA sequences
    iter_fastq: Iterate over FASTQ sequences
    iter_records: Open, detect and decode in one call
"""

import gzip
import io
import sys
from pathlib import Path
from typing import BinaryIO, Generator, List, Optional, Union

BUFFER_SIZE = 1024 * 1024  # 1MiB buffered reads

FASTA = 'fasta'
FASTQ = 'fastq'

PathLike = Union[str, Path]


class RecordDecodeError(ValueError):
    """Raised when the input cannot be decoded into sequence records."""


def open_input(path: PathLike) -> BinaryIO:
    """
    Open an input file as a buffered binary stream.
    
    Args:
        path: File path; '.gz' files are decompressed, '-' reads stdin
    
    Returns:
        Buffered binary stream (caller closes it)
    
    Raises:
        FileNotFoundError: If the path doesn't exist
    """
    if str(path) == '-':
        return sys.stdin.buffer
    
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    
    if path.suffix == '.gz':
        return io.BufferedReader(gzip.open(path, 'rb'), buffer_size=BUFFER_SIZE)
    return open(path, 'rb', buffering=BUFFER_SIZE)


def detect_format(stream: BinaryIO) -> Optional[str]:
    """
    Detect record format from the first byte without consuming it.
    
    Args:
        stream: Buffered binary stream supporting peek()
    
    Returns:
        'fasta', 'fastq', or None for empty input
    
    Raises:
        RecordDecodeError: If the first byte is neither '>' nor '@'
    """
    head = stream.peek(1)[:1]
    if not head:
        return None
    if head == b'>':
        return FASTA
    if head == b'@':
        return FASTQ
    raise RecordDecodeError(
        f"Unknown file format: expected '>' or '@', got {head.decode('latin1')!r}"
    )


def iter_fasta(stream: BinaryIO) -> Generator[bytes, None, None]:
    """
    Iterate over FASTA records, yielding each sequence.
    
    Multi-line sequences are joined. Blank lines are ignored.
    
    Args:
        stream: Binary stream positioned at a '>' header
    
    Yields:
        Sequence bytes of each record, in file order
    
    Raises:
        RecordDecodeError: If sequence data appears before the first header
    """
    chunks: Optional[List[bytes]] = None
    for line_no, line in enumerate(stream, start=1):
        line = line.rstrip(b'\r\n')
        if line.startswith(b'>'):
            if chunks is not None:
                yield b''.join(chunks)
            chunks = []
        elif chunks is None:
            if line.strip():
                raise RecordDecodeError(
                    f"FASTA line {line_no}: sequence data before first header"
                )
        else:
            chunks.append(line.strip())
    if chunks is not None:
        yield b''.join(chunks)


def iter_fastq(stream: BinaryIO) -> Generator[bytes, None, None]:
    """
    Iterate over FASTQ records, yielding each sequence.
    
    Each record is four lines: '@' header, sequence, '+' separator, quality.
    
    Args:
        stream: Binary stream positioned at an '@' header
    
    Yields:
        Sequence bytes of each record, in file order
    
    Raises:
        RecordDecodeError: On a bad header, missing separator, truncated
            record, or sequence/quality length mismatch
    """
    record_no = 0
    while True:
        header = stream.readline()
        if not header:
            return
        header = header.rstrip(b'\r\n')
        if not header:
            # Trailing blank lines
            continue
        record_no += 1
        if not header.startswith(b'@'):
            raise RecordDecodeError(
                f"FASTQ record {record_no}: expected '@' at start of header"
            )
        
        sequence = stream.readline()
        separator = stream.readline()
        quality = stream.readline()
        if not quality:
            raise RecordDecodeError(f"FASTQ record {record_no}: truncated record")
        
        if not separator.startswith(b'+'):
            raise RecordDecodeError(
                f"FASTQ record {record_no}: expected '+' separator line"
            )
        
        sequence = sequence.rstrip(b'\r\n')
        quality = quality.rstrip(b'\r\n')
        if len(sequence) != len(quality):
            raise RecordDecodeError(
                f"FASTQ record {record_no}: sequence length {len(sequence)} "
                f"!= quality length {len(quality)}"
            )
        
        yield sequence


def iter_records(path: PathLike) -> Generator[bytes, None, None]:
    """
    Iterate over the sequences of a FASTA/FASTQ file (optionally gzipped).
    
    This is the primary record access pattern: one record at a time.
    
    Args:
        path: Input file path, or '-' for stdin
    
    Yields:
        Sequence bytes of each record
    
    Raises:
        FileNotFoundError: If the path doesn't exist
        RecordDecodeError: If the content is not valid FASTA/FASTQ
    
    Example:
        >>> for seq in iter_records(Path("reads.fastq.gz")):
        ...     print(len(seq))
    """
    stream = open_input(path)
    try:
        try:
            fmt = detect_format(stream)
        except (OSError, EOFError) as e:
            raise RecordDecodeError(f"Cannot read {path}: {e}") from e
        
        if fmt is None:
            return
        
        reader = iter_fasta(stream) if fmt == FASTA else iter_fastq(stream)
        try:
            yield from reader
        except (OSError, EOFError) as e:
            # Corrupt or truncated gzip stream
            raise RecordDecodeError(f"Cannot read {path}: {e}") from e
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()
