import math
from collections import defaultdict
from typing import Dict

import numpy as np

from ..exceptions import KmerProfileError
from ..utils.logging_utils import get_logger
from .codec import MAX_K, decode_kmer, iter_canonical_kmers

logger = get_logger(__name__)


class KmerProfile:
    """
    Canonical k-mer composition of one or more sequences.

    Values in `profile` are raw counts until `counts_to_freqs` is called,
    frequencies afterwards. Keys are canonical integer codes.
    """

    def __init__(self, k: int):
        if not 1 <= k <= MAX_K:
            raise KmerProfileError(f"k must be between 1 and {MAX_K}, got {k}")
        self.k = k
        self.profile: Dict[int, float] = defaultdict(float)
        self.normalized = False

    def __len__(self) -> int:
        return len(self.profile)

    def __repr__(self) -> str:
        state = "freqs" if self.normalized else "counts"
        return f"KmerProfile(k={self.k}, kmers={len(self.profile)}, {state})"

    def count(self, sequence: str) -> "KmerProfile":
        """Add the canonical k-mer counts of `sequence` to the profile."""
        if self.normalized:
            raise KmerProfileError("Cannot add counts to a profile already converted to frequencies")
        profile = self.profile
        for code in iter_canonical_kmers(sequence, self.k):
            profile[code] += 1
        return self

    def counts_to_freqs(self) -> "KmerProfile":
        """Convert counts to frequencies. Must be called exactly once."""
        if self.normalized:
            raise KmerProfileError("Profile counts were already converted to frequencies")
        total = sum(self.profile.values())
        if total:
            for code in self.profile:
                self.profile[code] /= total
        else:
            logger.debug(f"No {self.k}-mers counted, profile left empty")
        self.normalized = True
        return self

    def kmer_dist(self, other: "KmerProfile", metric: str = "tvd") -> float:
        """
        Distance between two normalized profiles of the same k.

        "tvd" is the total variation distance: half the sum of absolute
        frequency differences over the union of k-mers, in [0, 1].
        "euclidean" is the L2 distance between the frequency vectors.
        Returns NaN when either profile is empty.
        """
        if self.k != other.k:
            raise KmerProfileError(f"Cannot compare profiles with different k ({self.k} vs {other.k})")
        if not (self.normalized and other.normalized):
            raise KmerProfileError("Profiles must be converted to frequencies before computing distances")
        if not self.profile or not other.profile:
            return math.nan

        keys = self.profile.keys() | other.profile.keys()
        if metric == "tvd":
            return sum(
                abs(self.profile.get(code, 0.0) - other.profile.get(code, 0.0))
                for code in keys
            ) / 2
        if metric == "euclidean":
            keys = list(keys)
            ours = np.fromiter((self.profile.get(code, 0.0) for code in keys), dtype=float, count=len(keys))
            theirs = np.fromiter((other.profile.get(code, 0.0) for code in keys), dtype=float, count=len(keys))
            return float(np.linalg.norm(ours - theirs))
        raise KmerProfileError(f"Unknown distance metric: {metric}")

    def as_kmers(self) -> Dict[str, float]:
        """Profile keyed by decoded canonical k-mer strings, for display."""
        return {decode_kmer(code, self.k): value for code, value in self.profile.items()}


def seq_kmer_div(sequence: str, ref_profile: KmerProfile, metric: str = "tvd") -> float:
    """Distance between the k-mer profile of `sequence` and a reference profile."""
    profile = KmerProfile(ref_profile.k)
    profile.count(sequence)
    profile.counts_to_freqs()
    return profile.kmer_dist(ref_profile, metric)
