"""
kmerscan - Online solid k-mer discovery with early stopping.

Scans a stream of sequencing reads, counts distinct canonical k-mers seen at
least twice ("solid"), and stops once the discovery rate of new solid k-mers
has plateaued.

Modules:
    constants: Sampling cadence and oracle thresholds
    kmers: Canonicalization and solid k-mer tracking
    analysis: Convergence monitor and online statistics
    streaming: Record input, scan driver, progress channel and broadcast

Quick Start:
    >>> from kmerscan import scan_file, canonical
    >>> 
    >>> canonical(b"TTT")
    b'AAA'
    >>> result = scan_file(Path("reads.fastq.gz"), k=31)
    >>> print(f"{result.solid_kmers:,} solid k-mers, early stop: {result.stopped_early}")
"""

__version__ = "0.1.0"

from kmerscan.constants import (
    SAMPLE_STRIDE,
    WINDOW_CAPACITY,
    MIN_RECORDS_BEFORE_STOP,
    ACCEL_THRESHOLD,
)

from kmerscan.kmers import (
    canonical,
    reverse_complement,
    SolidityTracker,
)

from kmerscan.analysis import (
    ConvergenceConfig,
    ConvergenceMonitor,
    StatusEvent,
)

from kmerscan.streaming import (
    RecordDecodeError,
    ProgressSinkError,
    ProgressChannel,
    ScanResult,
    scan_records,
    scan_file,
)

__all__ = [
    # Version
    "__version__",
    # Constants
    "SAMPLE_STRIDE",
    "WINDOW_CAPACITY",
    "MIN_RECORDS_BEFORE_STOP",
    "ACCEL_THRESHOLD",
    # Core
    "canonical",
    "reverse_complement",
    "SolidityTracker",
    "ConvergenceConfig",
    "ConvergenceMonitor",
    "StatusEvent",
    # Scan
    "RecordDecodeError",
    "ProgressSinkError",
    "ProgressChannel",
    "ScanResult",
    "scan_records",
    "scan_file",
]
