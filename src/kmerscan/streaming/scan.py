"""
Single-pass scan of a record stream for solid k-mers.

Drives the three core components in order, one record at a time:

    records -> k-length windows -> canonical form -> SolidityTracker
            -> every sample_stride records -> ConvergenceMonitor.sample
            -> status line / progress snapshot -> continue | stop

Design Principles:
    - Strictly sequential: records in input order, windows left to right
    - O(distinct k-mers) memory: one record held at a time
    - Stops only at a sampling boundary (STOP decision) or end of stream
    - Decode failures propagate; sink failures follow SinkErrorPolicy

Usage:
    >>> from kmerscan.streaming import scan_file
    >>> result = scan_file(Path("reads.fastq.gz"), k=31)
    >>> print(f"{result.solid_kmers:,} solid k-mers in {result.records_processed:,} reads")
"""

import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from kmerscan.constants import SAMPLE_STRIDE
from kmerscan.kmers import SolidityTracker, SolidSetStore
from kmerscan.analysis import (
    ConvergenceConfig,
    ConvergenceMonitor,
    ReadLengthStats,
    StatusEvent,
)
from kmerscan.streaming.progress import (
    ProgressChannel,
    ProgressSinkError,
    ProgressSnapshot,
)
from kmerscan.streaming.records import PathLike, iter_records


class SinkErrorPolicy(str, Enum):
    """What the scan does when a progress snapshot cannot be delivered."""
    CONTINUE = 'continue'  # warn once, detach the sink, keep scanning
    ABORT = 'abort'        # re-raise ProgressSinkError


@dataclass
class ScanResult:
    """
    Outcome of one scan.
    
    Attributes:
        k: k-mer length
        records_processed: Records consumed (including skipped ones)
        kmers_observed: Total windows observed
        distinct_kmers: Distinct canonical k-mers seen at least once
        solid_kmers: Distinct canonical k-mers seen at least twice
        stopped_early: True if the convergence oracle ended the scan
        events: StatusEvent per sampling point, in order
        read_lengths: Length summary of the consumed records
    """
    k: int
    records_processed: int = 0
    kmers_observed: int = 0
    distinct_kmers: int = 0
    solid_kmers: int = 0
    stopped_early: bool = False
    events: List[StatusEvent] = field(default_factory=list)
    read_lengths: ReadLengthStats = field(default_factory=ReadLengthStats)
    
    @property
    def records_skipped(self) -> int:
        """Records shorter than k (no k-mers)."""
        return self.read_lengths.short_reads
    
    @property
    def final_event(self) -> Optional[StatusEvent]:
        return self.events[-1] if self.events else None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict (JSON-serialisable)."""
        return {
            'k': self.k,
            'records_processed': self.records_processed,
            'records_skipped': self.records_skipped,
            'kmers_observed': self.kmers_observed,
            'distinct_kmers': self.distinct_kmers,
            'solid_kmers': self.solid_kmers,
            'stopped_early': self.stopped_early,
            'n_events': len(self.events),
            'read_lengths': self.read_lengths.to_dict(),
            'events': [e.to_dict() for e in self.events],
        }
    
    def to_dataframe(self) -> pd.DataFrame:
        """
        Trajectory of the scan, one row per sampling point.
        
        Returns:
            DataFrame with columns reads, solid_kmers, growth, acceleration,
            avg_growth, avg_accel, should_stop
        """
        columns = [
            'reads', 'solid_kmers', 'growth', 'acceleration',
            'avg_growth', 'avg_accel', 'should_stop',
        ]
        return pd.DataFrame([e.to_dict() for e in self.events], columns=columns)


def scan_records(
    records: Iterable[bytes],
    k: int,
    *,
    config: Optional[ConvergenceConfig] = None,
    sample_stride: int = SAMPLE_STRIDE,
    store: Optional[SolidSetStore] = None,
    sink: Optional[ProgressChannel] = None,
    sink_policy: SinkErrorPolicy = SinkErrorPolicy.CONTINUE,
    verbose: bool = True,
    on_status: Optional[Callable[[StatusEvent], None]] = None,
) -> ScanResult:
    """
    Scan records for solid k-mers, stopping early once discovery plateaus.
    
    Args:
        records: Iterable of record sequences (bytes), consumed in order
        k: k-mer length (>= 1)
        config: Convergence oracle thresholds (default: ConvergenceConfig())
        sample_stride: Records between convergence samples
        store: Solid-set storage strategy (default: exact dict-backed set)
        sink: Progress channel receiving one snapshot per sample
        sink_policy: Behaviour when the sink rejects a snapshot
        verbose: Print status lines and the stop message
        on_status: Callback invoked with each StatusEvent
    
    Returns:
        ScanResult with counts and the status trajectory
    
    Raises:
        ValueError: If k < 1 or sample_stride < 1
        RecordDecodeError: If the record source fails to decode (fatal)
        ProgressSinkError: If the sink fails and sink_policy is ABORT
        ValueError: If a count leaves the 32-bit snapshot range and
            sink_policy is ABORT
    
    Example:
        >>> result = scan_records([b"AAATTT"], k=3, verbose=False)
        >>> result.solid_kmers
        2
    """
    if sample_stride < 1:
        raise ValueError(f"sample_stride must be >= 1, got {sample_stride}")
    
    tracker = SolidityTracker(k, store=store)
    monitor = ConvergenceMonitor(config)
    result = ScanResult(k=k, read_lengths=ReadLengthStats(k=k))
    
    for sequence in records:
        result.records_processed += 1
        result.read_lengths.add(len(sequence))
        tracker.observe_sequence(sequence)
        
        if result.records_processed % sample_stride != 0:
            continue
        
        event = monitor.sample(result.records_processed, tracker.solid_count)
        result.events.append(event)
        
        if verbose:
            print(event.status_line)
        if on_status is not None:
            on_status(event)
        
        if sink is not None:
            try:
                sink.send(ProgressSnapshot(event.reads, event.solid_kmers))
            except (ProgressSinkError, ValueError) as e:
                if sink_policy == SinkErrorPolicy.ABORT:
                    raise
                warnings.warn(f"Progress sink detached: {e}")
                sink = None
        
        if event.should_stop:
            if verbose:
                print(event.stop_message)
            result.stopped_early = True
            break
    
    result.kmers_observed = tracker.observations
    result.distinct_kmers = tracker.distinct_count
    result.solid_kmers = tracker.solid_count
    return result


def scan_file(path: PathLike, k: int, **kwargs: Any) -> ScanResult:
    """
    Scan a FASTA/FASTQ file (optionally gzipped) for solid k-mers.
    
    Args:
        path: Input file path, or '-' for stdin
        k: k-mer length
        **kwargs: Forwarded to scan_records()
    
    Returns:
        ScanResult
    
    Raises:
        FileNotFoundError: If the input doesn't exist
        RecordDecodeError: If the input is malformed
    """
    records = iter_records(path)
    try:
        return scan_records(records, k, **kwargs)
    finally:
        records.close()
