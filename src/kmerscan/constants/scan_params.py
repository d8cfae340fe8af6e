"""
Scan Parameters for Solid k-mer Discovery.

These constants define the cadence and thresholds of the early-stop oracle.
They are tunable, but changing them changes the meaning of every status line
and stop decision, so they are kept in one place.

Oracle Overview:
    | Constant                  | Default | Role                               |
    |---------------------------|---------|------------------------------------|
    | SAMPLE_STRIDE             | 10000   | Records between monitor samples    |
    | WINDOW_CAPACITY           | 10      | Growth / acceleration window size  |
    | MIN_RECORDS_BEFORE_STOP   | 50000   | Record-count gate for stopping     |
    | ACCEL_THRESHOLD           | 20.0    | |avg acceleration| stop threshold  |

Stop rule:
    reads > MIN_RECORDS_BEFORE_STOP and abs(avg_accel) < ACCEL_THRESHOLD
"""

from typing import Final, Dict

# =============================================================================
# Nucleotide Alphabet
# =============================================================================

NUCLEOTIDES: Final[bytes] = b"ACGT"
"""Symbols with a base-pairing partner. Everything else complements to itself."""

COMPLEMENTS: Final[bytes] = b"TGCA"
"""Base-pairing partners, position-aligned with NUCLEOTIDES."""

# =============================================================================
# Sampling
# =============================================================================

SAMPLE_STRIDE: Final[int] = 10_000
"""
Records consumed between two convergence samples.

Coupled to record count, not sequence length: the growth dynamics depend on
the record-length distribution of the input.
"""

# =============================================================================
# Convergence Oracle
# =============================================================================

WINDOW_CAPACITY: Final[int] = 10
"""Number of growth deltas (and acceleration values) kept in each window."""

MIN_RECORDS_BEFORE_STOP: Final[int] = 50_000
"""The oracle never stops at or below this many records."""

ACCEL_THRESHOLD: Final[float] = 20.0
"""Stop once the mean acceleration magnitude drops below this value."""

# =============================================================================
# Progress Channel / Broadcast
# =============================================================================

CHANNEL_CAPACITY: Final[int] = 100
"""Snapshots buffered between the scan and the broadcast consumer."""

SEND_TIMEOUT: Final[float] = 30.0
"""Seconds a full channel may hold back the scan before the send fails."""

DEFAULT_HOST: Final[str] = "127.0.0.1"
"""Bind address of the websocket broadcast."""

DEFAULT_PORT: Final[int] = 3030
"""Port of the websocket broadcast."""

WEBSOCKET_PATH: Final[str] = "/ws"
"""Route serving progress frames."""


def get_default_config() -> Dict[str, object]:
    """
    Get the recommended scan configuration.
    
    Returns:
        Dict with configuration values:
            - sample_stride: Records between samples (10000)
            - window_capacity: Sliding window size (10)
            - min_records: Record gate for early stop (50000)
            - accel_threshold: Acceleration stop threshold (20.0)
            - channel_capacity: Progress channel size (100)
            - send_timeout: Backpressure limit in seconds (30.0)
    
    Example:
        >>> config = get_default_config()
        >>> print(f"Sampling every {config['sample_stride']:,} reads")
    """
    return {
        'sample_stride': SAMPLE_STRIDE,
        'window_capacity': WINDOW_CAPACITY,
        'min_records': MIN_RECORDS_BEFORE_STOP,
        'accel_threshold': ACCEL_THRESHOLD,
        'channel_capacity': CHANNEL_CAPACITY,
        'send_timeout': SEND_TIMEOUT,
    }
