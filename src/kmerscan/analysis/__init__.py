"""
Online analysis of the solid k-mer trajectory.

Modules:
    - convergence: Growth/acceleration windows and the early-stop oracle
    - read_stats: Online read-length summary

Usage:
    >>> from kmerscan.analysis import ConvergenceMonitor, ReadLengthStats
    >>> 
    >>> monitor = ConvergenceMonitor()
    >>> event = monitor.sample(10000, 1234)
    >>> print(event.status_line)
    >>> 
    >>> lengths = ReadLengthStats(k=31)
    >>> lengths.add(150)
"""

from kmerscan.analysis.convergence import (
    ConvergenceConfig,
    SlidingWindow,
    StatusEvent,
    ConvergenceMonitor,
)

from kmerscan.analysis.read_stats import (
    ReadLengthStats,
)

__all__ = [
    # Convergence
    "ConvergenceConfig",
    "SlidingWindow",
    "StatusEvent",
    "ConvergenceMonitor",
    # Read summary
    "ReadLengthStats",
]
