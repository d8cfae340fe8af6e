"""
Convergence monitor for solid k-mer discovery.

Decides when the discovery rate of new solid k-mers has plateaued, using the
first and second differences of the solid count over sampling points.

Per sample (every SAMPLE_STRIDE records):
    growth       = solid_count - previous_solid_count
    acceleration = growth[-1] - growth[-2]         (from the 2nd sample on)
    avg_growth   = mean(growth window)
    avg_accel    = mean(acceleration window), or 0.0 while empty

Both windows are strict FIFO sliding windows of WINDOW_CAPACITY entries.

Stop rule:
    reads > min_records  and  abs(avg_accel) < accel_threshold

The statistics are defined over the traversal order of the stream; feeding
the same records in a different order gives a different trajectory.
"""

import numpy as np
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from kmerscan.constants import (
    WINDOW_CAPACITY,
    MIN_RECORDS_BEFORE_STOP,
    ACCEL_THRESHOLD,
)


@dataclass
class ConvergenceConfig:
    """
    Tunable thresholds of the early-stop oracle.
    
    Attributes:
        window_capacity: Entries kept in the growth and acceleration windows
        min_records: Record count that must be exceeded before stopping
        accel_threshold: Stop once |avg acceleration| falls below this
    """
    window_capacity: int = WINDOW_CAPACITY
    min_records: int = MIN_RECORDS_BEFORE_STOP
    accel_threshold: float = ACCEL_THRESHOLD
    
    def __post_init__(self) -> None:
        if self.window_capacity < 1:
            raise ValueError(
                f"window_capacity must be >= 1, got {self.window_capacity}"
            )
        if self.min_records < 0:
            raise ValueError(f"min_records must be >= 0, got {self.min_records}")
        if self.accel_threshold < 0:
            raise ValueError(
                f"accel_threshold must be >= 0, got {self.accel_threshold}"
            )


class SlidingWindow:
    """
    Bounded FIFO of integers; appending past capacity evicts the oldest entry.
    
    Example:
        >>> window = SlidingWindow(capacity=3)
        >>> for x in [1, 2, 3, 4]:
        ...     window.append(x)
        >>> window.values
        [2, 3, 4]
    """
    
    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._items: Deque[int] = deque(maxlen=capacity)
    
    def append(self, value: int) -> None:
        self._items.append(value)
    
    def mean(self) -> float:
        """Arithmetic mean, 0.0 for an empty window."""
        if not self._items:
            return 0.0
        return float(np.mean(self._items))
    
    def clear(self) -> None:
        self._items.clear()
    
    @property
    def values(self) -> List[int]:
        """Window contents, oldest first."""
        return list(self._items)
    
    @property
    def last(self) -> int:
        return self._items[-1]
    
    @property
    def second_to_last(self) -> int:
        return self._items[-2]
    
    def __len__(self) -> int:
        return len(self._items)


@dataclass
class StatusEvent:
    """
    Outcome of one convergence sample.
    
    Attributes:
        reads: Records processed at the sampling point
        solid_kmers: Cumulative solid k-mer count
        growth: Solid k-mers gained since the previous sample
        acceleration: Change in growth (None on the first sample)
        avg_growth: Mean of the growth window
        avg_accel: Mean of the acceleration window (0.0 while empty)
        should_stop: Early-stop decision
        accel_threshold: Threshold the decision was taken against
    """
    reads: int
    solid_kmers: int
    growth: int
    acceleration: Optional[int]
    avg_growth: float
    avg_accel: float
    should_stop: bool
    accel_threshold: float = ACCEL_THRESHOLD
    
    @property
    def status_line(self) -> str:
        """Human-facing progress line."""
        return (
            f"Processed {self.reads} reads, unique k-mers: {self.solid_kmers}, "
            f"Δ_avg: {self.avg_growth:.1f}, Δ²_avg: {self.avg_accel:.1f}"
        )
    
    @property
    def stop_message(self) -> str:
        """Explanation printed when the oracle fires."""
        return (
            f"Stopping early: acceleration average {self.avg_accel:.1f} "
            f"< {self.accel_threshold:.1f} after {self.reads} reads."
        )
    
    def to_dict(self) -> dict:
        """Convert to dict."""
        return {
            'reads': self.reads,
            'solid_kmers': self.solid_kmers,
            'growth': self.growth,
            'acceleration': self.acceleration,
            'avg_growth': self.avg_growth,
            'avg_accel': self.avg_accel,
            'should_stop': self.should_stop,
        }


class ConvergenceMonitor:
    """
    Online second-difference monitor used as a termination oracle.
    
    Attributes:
        config: Oracle thresholds
        growth: Sliding window of growth deltas
        acceleration: Sliding window of growth changes
        previous_solid: Solid count at the previous sample
    
    Example:
        >>> monitor = ConvergenceMonitor()
        >>> event = monitor.sample(10000, 500)
        >>> event.status_line
        'Processed 10000 reads, unique k-mers: 500, Δ_avg: 500.0, Δ²_avg: 0.0'
    """
    
    def __init__(self, config: Optional[ConvergenceConfig] = None) -> None:
        self.config = config if config is not None else ConvergenceConfig()
        self.growth = SlidingWindow(self.config.window_capacity)
        self.acceleration = SlidingWindow(self.config.window_capacity)
        self.previous_solid = 0
    
    def sample(self, record_index: int, solid_count: int) -> StatusEvent:
        """
        Take one sample of the solid count and decide whether to stop.
        
        Args:
            record_index: Records processed so far
            solid_count: Cumulative solid k-mer count
        
        Returns:
            StatusEvent with averages and the stop decision
        """
        growth = solid_count - self.previous_solid
        self.growth.append(growth)
        
        acceleration = None
        if len(self.growth) >= 2:
            acceleration = self.growth.last - self.growth.second_to_last
            self.acceleration.append(acceleration)
        
        # growth window is non-empty here, so the mean is well defined
        avg_growth = self.growth.mean()
        avg_accel = self.acceleration.mean()
        
        should_stop = (
            record_index > self.config.min_records
            and abs(avg_accel) < self.config.accel_threshold
        )
        
        self.previous_solid = solid_count
        
        return StatusEvent(
            reads=record_index,
            solid_kmers=solid_count,
            growth=growth,
            acceleration=acceleration,
            avg_growth=avg_growth,
            avg_accel=avg_accel,
            should_stop=should_stop,
            accel_threshold=self.config.accel_threshold,
        )
    
    def reset(self) -> None:
        """Forget all samples."""
        self.growth.clear()
        self.acceleration.clear()
        self.previous_solid = 0
