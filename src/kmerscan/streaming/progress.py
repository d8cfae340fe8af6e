"""
Bounded progress channel between the scan and its observers.

The scan pushes one ProgressSnapshot per sampling point; a consumer (the
websocket broadcast) drains them. The channel is passed explicitly to the
scan and has a defined lifecycle:

    with ProgressChannel() as channel:     # open
        scan_records(records, k, sink=channel)
                                           # closed on exit; consumers drain
                                           # what is left, then see None

Backpressure:
    A full channel suspends the producer instead of dropping snapshots. The
    wait is bounded by send_timeout so that a scan with no attached consumer
    does not hang forever; on timeout the send fails with ProgressSinkError.
"""

import queue
import threading
import time
from dataclasses import dataclass
from typing import Optional

from kmerscan.constants import CHANNEL_CAPACITY, SEND_TIMEOUT

# Granularity of blocking waits, so close() is noticed promptly
_POLL_INTERVAL = 0.1

# Largest value a snapshot field may carry
U32_MAX = 2**32 - 1


class ProgressSinkError(RuntimeError):
    """Raised when a snapshot cannot be delivered to the progress channel."""


@dataclass(frozen=True)
class ProgressSnapshot:
    """
    One progress sample as seen by external observers.
    
    Attributes:
        reads: Records processed (unsigned 32-bit on the wire)
        solid_kmers: Solid k-mer count (unsigned 32-bit on the wire)
    """
    reads: int
    solid_kmers: int
    
    def __post_init__(self) -> None:
        for name in ("reads", "solid_kmers"):
            value = getattr(self, name)
            if not 0 <= value <= U32_MAX:
                raise ValueError(f"{name} must be in 0..{U32_MAX}, got {value}")
    
    def to_frame(self) -> str:
        """Wire text: two space-separated integers."""
        return f"{self.reads} {self.solid_kmers}"


class ProgressChannel:
    """
    Thread-safe bounded FIFO of ProgressSnapshot.
    
    Attributes:
        capacity: Maximum buffered snapshots
        send_timeout: Seconds send() may block on a full channel
    """
    
    def __init__(
        self,
        capacity: int = CHANNEL_CAPACITY,
        send_timeout: Optional[float] = SEND_TIMEOUT,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.send_timeout = send_timeout
        self._queue: "queue.Queue[ProgressSnapshot]" = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()
    
    @property
    def closed(self) -> bool:
        return self._closed.is_set()
    
    def qsize(self) -> int:
        return self._queue.qsize()
    
    def send(self, snapshot: ProgressSnapshot) -> None:
        """
        Push a snapshot, waiting while the channel is full.
        
        Raises:
            ProgressSinkError: If the channel is closed, or still full after
                send_timeout seconds
        """
        if self.closed:
            raise ProgressSinkError("progress channel is closed")
        try:
            self._queue.put_nowait(snapshot)
            return
        except queue.Full:
            pass
        
        deadline = None
        if self.send_timeout is not None:
            deadline = time.monotonic() + self.send_timeout
        
        while True:
            wait = _POLL_INTERVAL
            if deadline is not None:
                wait = min(wait, deadline - time.monotonic())
                if wait <= 0:
                    raise ProgressSinkError(
                        f"progress channel full ({self.capacity} snapshots) "
                        f"for {self.send_timeout}s; no consumer is draining it"
                    )
            try:
                self._queue.put(snapshot, timeout=wait)
                return
            except queue.Full:
                if self.closed:
                    raise ProgressSinkError("progress channel is closed") from None
    
    def receive(self, timeout: Optional[float] = None) -> Optional[ProgressSnapshot]:
        """
        Pop the oldest snapshot, waiting for one if necessary.
        
        Args:
            timeout: Maximum seconds to wait (None waits until close)
        
        Returns:
            The next snapshot, or None once the channel is closed and drained
            (or the timeout elapsed)
        """
        remaining = timeout
        while True:
            try:
                return self._queue.get_nowait()
            except queue.Empty:
                pass
            if self.closed:
                return None
            if remaining is not None and remaining <= 0:
                return None
            
            wait = _POLL_INTERVAL if remaining is None else min(_POLL_INTERVAL, remaining)
            try:
                return self._queue.get(timeout=wait)
            except queue.Empty:
                if remaining is not None:
                    remaining -= wait
    
    def close(self) -> None:
        """Mark end of stream. Buffered snapshots remain receivable."""
        self._closed.set()
    
    def __enter__(self) -> "ProgressChannel":
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
