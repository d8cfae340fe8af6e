"""
Solid k-mer tracking.

A canonical k-mer becomes "solid" at its second occurrence. Single
occurrences are treated as noise (e.g. sequencing errors) and never count.

State transitions per canonical k-mer:
    absent --1st--> seen (False) --2nd--> solid (True) --3rd+--> solid (no-op)

The set itself sits behind SolidSetStore so that the storage strategy is
chosen at construction time. ExactSolidSet is the only strategy shipped;
its memory grows with the number of distinct canonical k-mers.

Memory Budget:
    ExactSolidSet: O(distinct canonical k-mers) - one dict entry each
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from kmerscan.kmers.canonical import BytesLike, canonical, iter_windows


class SolidSetStore(ABC):
    """
    Storage strategy for the first/second-occurrence flags.
    
    Implementations must make mark() amortised O(1).
    """
    
    @abstractmethod
    def mark(self, kmer: bytes) -> bool:
        """
        Record one occurrence of a canonical k-mer.
        
        Returns:
            True exactly when this occurrence made the k-mer solid
        """
    
    @abstractmethod
    def __len__(self) -> int:
        """Number of distinct k-mers stored."""
    
    @abstractmethod
    def __contains__(self, kmer: object) -> bool:
        ...
    
    @abstractmethod
    def is_solid(self, kmer: bytes) -> bool:
        ...


class ExactSolidSet(SolidSetStore):
    """
    Exact hash-based store: canonical k-mer -> already counted as solid.
    """
    
    def __init__(self) -> None:
        self._flags: Dict[bytes, bool] = {}
    
    def mark(self, kmer: bytes) -> bool:
        seen = self._flags.get(kmer)
        if seen is None:
            self._flags[kmer] = False
            return False
        if not seen:
            self._flags[kmer] = True
            return True
        return False
    
    def __len__(self) -> int:
        return len(self._flags)
    
    def __contains__(self, kmer: object) -> bool:
        return kmer in self._flags
    
    def is_solid(self, kmer: bytes) -> bool:
        return self._flags.get(kmer, False)


class SolidityTracker:
    """
    Counts distinct canonical k-mers that have occurred at least twice.
    
    Attributes:
        k: k-mer length
        store: Storage strategy for occurrence flags
        solid_count: Distinct canonical k-mers seen at least twice
        observations: Total windows observed
    
    Example:
        >>> tracker = SolidityTracker(k=3)
        >>> tracker.observe_sequence(b"AAATTT")
        4
        >>> tracker.solid_count
        2
    """
    
    def __init__(self, k: int, store: Optional[SolidSetStore] = None) -> None:
        if k < 1:
            raise ValueError(f"k must be a positive integer, got {k}")
        self.k = k
        self.store = store if store is not None else ExactSolidSet()
        self._solid = 0
        self._observations = 0
    
    @property
    def solid_count(self) -> int:
        """Distinct canonical k-mers that reached their second occurrence."""
        return self._solid
    
    @property
    def distinct_count(self) -> int:
        """Distinct canonical k-mers seen at least once."""
        return len(self.store)
    
    @property
    def observations(self) -> int:
        """Total number of windows observed."""
        return self._observations
    
    def observe(self, window: BytesLike) -> None:
        """
        Observe one k-mer window.
        
        Increments solid_count by at most one, and only on the second
        occurrence of the window's canonical form.
        """
        self._observations += 1
        if self.store.mark(canonical(window)):
            self._solid += 1
    
    def observe_sequence(self, sequence: BytesLike) -> int:
        """
        Observe every k-mer of a record, left to right.
        
        Args:
            sequence: One record's symbol sequence
        
        Returns:
            Number of windows observed (0 if the record is shorter than k)
        """
        n_windows = 0
        for window in iter_windows(sequence, self.k):
            self.observe(window)
            n_windows += 1
        return n_windows
    
    def is_solid(self, window: BytesLike) -> bool:
        """True if the window's canonical form has occurred at least twice."""
        return self.store.is_solid(canonical(window))
