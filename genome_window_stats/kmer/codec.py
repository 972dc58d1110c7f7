"""2-bit packing of nucleotide k-mers into integers, with canonical forms."""

from typing import Iterator

from Bio.Seq import reverse_complement as _bio_reverse_complement

BASE_MAP = {'A': 0, 'C': 1, 'G': 2, 'T': 3}
INT_TO_BASE = {0: 'A', 1: 'C', 2: 'G', 3: 'T'}
MAX_K = 32


def encode_kmer(kmer: str) -> int:
    """Encode a k-mer string to a 2k-bit integer (A=0, C=1, G=2, T=3)."""
    val = 0
    for base in kmer.upper():
        try:
            val = (val << 2) | BASE_MAP[base]
        except KeyError:
            raise ValueError(f"Cannot encode k-mer '{kmer}': invalid base '{base}'")
    return val


def decode_kmer(val: int, k: int) -> str:
    """Decode a 2k-bit integer back to a k-mer string."""
    bases = []
    for _ in range(k):
        bases.append(INT_TO_BASE[val & 3])
        val >>= 2
    return ''.join(reversed(bases))


def reverse_complement(kmer: str) -> str:
    return _bio_reverse_complement(kmer.upper())


def canonical_code(kmer: str) -> int:
    """
    Return the smaller of the codes of a k-mer and of its reverse complement,
    so both strands map to the same key.
    """
    return min(encode_kmer(kmer), encode_kmer(reverse_complement(kmer)))


def iter_canonical_kmers(sequence: str, k: int) -> Iterator[int]:
    """
    Yield the canonical code of every k-mer in `sequence`, left to right.

    Forward and reverse-complement codes are updated incrementally. A k-mer
    overlapping a non-ACGT symbol is skipped.
    """
    if k < 1 or k > MAX_K:
        raise ValueError(f"k must be between 1 and {MAX_K}, got {k}")
    mask = (1 << (2 * k)) - 1
    shift = 2 * (k - 1)
    fwd = rev = 0
    valid = 0
    for base in sequence.upper():
        code = BASE_MAP.get(base)
        if code is None:
            valid = 0
            fwd = rev = 0
            continue
        fwd = ((fwd << 2) | code) & mask
        rev = (rev >> 2) | ((3 - code) << shift)
        valid += 1
        if valid >= k:
            yield fwd if fwd < rev else rev
