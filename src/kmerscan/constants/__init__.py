"""
Scan constants: nucleotide alphabet, sampling cadence, oracle thresholds.

Usage:
    >>> from kmerscan.constants import SAMPLE_STRIDE, ACCEL_THRESHOLD
    >>> print(f"Sampling every {SAMPLE_STRIDE:,} reads")
"""

from kmerscan.constants.scan_params import (
    # Alphabet
    NUCLEOTIDES,
    COMPLEMENTS,
    # Sampling
    SAMPLE_STRIDE,
    # Oracle
    WINDOW_CAPACITY,
    MIN_RECORDS_BEFORE_STOP,
    ACCEL_THRESHOLD,
    # Progress
    CHANNEL_CAPACITY,
    SEND_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    WEBSOCKET_PATH,
    get_default_config,
)

__all__ = [
    "NUCLEOTIDES",
    "COMPLEMENTS",
    "SAMPLE_STRIDE",
    "WINDOW_CAPACITY",
    "MIN_RECORDS_BEFORE_STOP",
    "ACCEL_THRESHOLD",
    "CHANNEL_CAPACITY",
    "SEND_TIMEOUT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "WEBSOCKET_PATH",
    "get_default_config",
]
