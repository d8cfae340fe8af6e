"""
Streaming scan of sequence records.

Provides record-by-record iteration over FASTA/FASTQ input and the scan
driver that feeds the solid k-mer tracker and convergence monitor, plus the
progress channel and websocket broadcast used to observe a running scan.

Design Principles:
    - Memory-efficient: one record in memory at a time
    - Format-agnostic: FASTA or FASTQ, plain or gzip
    - Explicit lifecycle: the progress channel is passed in, never global

Usage:
    >>> from kmerscan.streaming import scan_file, ProgressChannel, ProgressServer
    >>> 
    >>> # Plain scan
    >>> result = scan_file(Path("reads.fastq.gz"), k=31)
    >>> print(f"Solid: {result.solid_kmers:,}")
    >>> 
    >>> # Scan with live websocket progress on ws://127.0.0.1:3030/ws
    >>> with ProgressChannel() as channel, ProgressServer(channel):
    ...     result = scan_file(Path("reads.fastq.gz"), k=31, sink=channel)

Memory Budget:
    - Dominated by the solid set: one entry per distinct canonical k-mer
"""

from kmerscan.streaming.records import (
    RecordDecodeError,
    open_input,
    detect_format,
    iter_fasta,
    iter_fastq,
    iter_records,
)

from kmerscan.streaming.progress import (
    ProgressSinkError,
    ProgressSnapshot,
    ProgressChannel,
)

from kmerscan.streaming.scan import (
    SinkErrorPolicy,
    ScanResult,
    scan_records,
    scan_file,
)

from kmerscan.streaming.broadcast import (
    create_app,
    ProgressServer,
)

__all__ = [
    # Records
    "RecordDecodeError",
    "open_input",
    "detect_format",
    "iter_fasta",
    "iter_fastq",
    "iter_records",
    # Progress
    "ProgressSinkError",
    "ProgressSnapshot",
    "ProgressChannel",
    # Scan
    "SinkErrorPolicy",
    "ScanResult",
    "scan_records",
    "scan_file",
    # Broadcast
    "create_app",
    "ProgressServer",
]
