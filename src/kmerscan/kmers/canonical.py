"""
Strand-invariant canonicalization of k-mers.

A double-stranded region can be read from either strand, so a k-mer and its
reverse complement describe the same locus. The canonical form picks one of
the two as the representative:

    canonical(w) = min(w, revcomp(w))   (byte-lexicographic, ties -> w)

Properties:
    - Idempotent: canonical(canonical(w)) == canonical(w)
    - Symmetric: canonical(w) == canonical(revcomp(w))
    - Palindromes (w == revcomp(w)) map to themselves

Only A/C/G/T are complemented. Any other byte (lowercase, N, IUPAC ambiguity
codes) passes through unchanged rather than raising.
"""

from typing import Iterator, Union

from kmerscan.constants import NUCLEOTIDES, COMPLEMENTS

BytesLike = Union[bytes, bytearray, memoryview]

_COMPLEMENT_TABLE = bytes.maketrans(NUCLEOTIDES, COMPLEMENTS)


def complement(symbols: BytesLike) -> bytes:
    """
    Complement each symbol (A<->T, C<->G), leaving other bytes as they are.
    
    Args:
        symbols: Symbol sequence
    
    Returns:
        Complemented sequence, same length and order
    
    Example:
        >>> complement(b"ACGTN")
        b'TGCAN'
    """
    return bytes(symbols).translate(_COMPLEMENT_TABLE)


def reverse_complement(window: BytesLike) -> bytes:
    """
    Reverse complement of a symbol window.
    
    Example:
        >>> reverse_complement(b"AAT")
        b'ATT'
    """
    return bytes(window)[::-1].translate(_COMPLEMENT_TABLE)


def canonical(window: BytesLike) -> bytes:
    """
    Return the canonical k-mer: the smaller of window and its reverse complement.
    
    Args:
        window: k-length symbol window
    
    Returns:
        Owned bytes of the same length
    
    Example:
        >>> canonical(b"TTT")
        b'AAA'
        >>> canonical(b"ACGT")  # palindrome
        b'ACGT'
    """
    kmer = bytes(window)
    rc = kmer[::-1].translate(_COMPLEMENT_TABLE)
    return kmer if kmer <= rc else rc


def iter_windows(sequence: BytesLike, k: int) -> Iterator[memoryview]:
    """
    Yield every k-length window of a sequence, left to right.
    
    Windows are zero-copy views into the sequence and must not outlive it.
    
    Args:
        sequence: Symbol sequence of one record
        k: Window length (>= 1)
    
    Yields:
        memoryview of each window; nothing if len(sequence) < k
    
    Raises:
        ValueError: If k < 1
    """
    if k < 1:
        raise ValueError(f"k must be a positive integer, got {k}")
    
    view = memoryview(sequence)
    for start in range(len(view) - k + 1):
        yield view[start:start + k]
