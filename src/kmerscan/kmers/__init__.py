"""
K-mer canonicalization and solid k-mer tracking.

Usage:
    >>> from kmerscan.kmers import canonical, SolidityTracker
    >>> canonical(b"TTT")
    b'AAA'
    >>> tracker = SolidityTracker(k=3)
    >>> for window in (b"AAA", b"AAT", b"ATT", b"TTT"):
    ...     tracker.observe(window)
    >>> tracker.solid_count
    2
"""

from kmerscan.kmers.canonical import (
    complement,
    reverse_complement,
    canonical,
    iter_windows,
)

from kmerscan.kmers.solidity import (
    SolidSetStore,
    ExactSolidSet,
    SolidityTracker,
)

__all__ = [
    # Canonicalization
    "complement",
    "reverse_complement",
    "canonical",
    "iter_windows",
    # Solidity
    "SolidSetStore",
    "ExactSolidSet",
    "SolidityTracker",
]
