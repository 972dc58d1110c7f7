from typing import Dict, Iterable

from tqdm import tqdm

from ..pipeline.reader import iter_fasta_records
from ..utils.logging_utils import get_logger, log_tqdm_summary
from .profile import KmerProfile

logger = get_logger(__name__)


def build_reference_profiles(fasta: str, ks: Iterable[int], progress: bool = False) -> Dict[int, KmerProfile]:
    """
    Compute genome-wide k-mer frequency profiles for several k in a single
    pass over every record of a FASTA file.
    """
    profiles = {k: KmerProfile(k) for k in ks}
    if not profiles:
        return profiles

    with tqdm(desc="Reference k-mer profiles", unit="record", disable=not progress) as pbar:
        for record in iter_fasta_records(fasta):
            for profile in profiles.values():
                profile.count(record.seq)
            pbar.update(1)
    if progress:
        log_tqdm_summary(pbar, logger)

    for k, profile in profiles.items():
        profile.counts_to_freqs()
        if not profile.profile:
            logger.warning(f"No {k}-mers found in {fasta}, reference profile is empty")
        else:
            logger.info(f"Reference {k}-mer profile: {len(profile):,} canonical {k}-mers")
    return profiles


def fasta_to_kmers(fasta: str, k: int) -> KmerProfile:
    """Reads all records in a FASTA file and returns their normalized k-mer profile."""
    return build_reference_profiles(fasta, [k])[k]
