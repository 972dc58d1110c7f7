"""Canonical k-mer profiles and distances between them."""

from .codec import (
    encode_kmer,
    decode_kmer,
    canonical_code,
    iter_canonical_kmers
)
from .profile import (
    KmerProfile,
    seq_kmer_div
)
from .reference import (
    build_reference_profiles,
    fasta_to_kmers
)

__all__ = [
    'encode_kmer',
    'decode_kmer',
    'canonical_code',
    'iter_canonical_kmers',
    'KmerProfile',
    'seq_kmer_div',
    'build_reference_profiles',
    'fasta_to_kmers'
]
