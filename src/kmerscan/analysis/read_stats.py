"""
Read-length summary collected during a scan.

The scan sees each record exactly once and keeps none of them, so the
length distribution is summarised online (Welford's update):

    mean_n = mean_{n-1} + (len_n - mean_{n-1}) / n
    m2_n   = m2_{n-1} + (len_n - mean_{n-1}) * (len_n - mean_n)

Reads shorter than k are counted separately: they are part of the input but
contribute no k-mers.
"""

import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ReadLengthStats:
    """
    Online length distribution of the reads consumed by a scan.
    
    Attributes:
        k: k-mer length; reads shorter than this are counted in short_reads
        reads: Number of reads seen
        total_bases: Sum of read lengths
        mean_length: Running mean read length
        m2: Sum of squared deviations from the mean
        shortest: Shortest read length (None before the first read)
        longest: Longest read length (None before the first read)
        short_reads: Reads shorter than k
    """
    k: int = 1
    reads: int = 0
    total_bases: int = 0
    mean_length: float = 0.0
    m2: float = 0.0
    shortest: Optional[int] = None
    longest: Optional[int] = None
    short_reads: int = 0
    
    def add(self, length: int) -> None:
        """Account for one read of the given length."""
        self.reads += 1
        self.total_bases += length
        delta = length - self.mean_length
        self.mean_length += delta / self.reads
        self.m2 += delta * (length - self.mean_length)
        
        if self.shortest is None or length < self.shortest:
            self.shortest = length
        if self.longest is None or length > self.longest:
            self.longest = length
        if length < self.k:
            self.short_reads += 1
    
    @property
    def length_std(self) -> float:
        """Population standard deviation of read length."""
        if self.reads == 0:
            return 0.0
        return float(np.sqrt(self.m2 / self.reads))
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict."""
        return {
            'reads': self.reads,
            'total_bases': self.total_bases,
            'mean_length': self.mean_length,
            'length_std': self.length_std,
            'shortest': self.shortest,
            'longest': self.longest,
            'short_reads': self.short_reads,
        }
