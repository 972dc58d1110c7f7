import os
import logging
from pathlib import Path

import pysam

from ..exceptions import InputError

def ensure_directory(path) -> Path:
    """Create `path` (and parents) if needed and return it."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path

def check_fasta_input(fasta_path: str) -> bool:
    """
    Check that a sequence file can be opened and holds at least one record.
    Returns False (with a warning) for a readable file without records.
    """
    logger = logging.getLogger()

    if not os.path.isfile(fasta_path):
        logger.error(f"Sequence file not found: {fasta_path}")
        raise InputError(f"Sequence file not found: {fasta_path}")

    try:
        with pysam.FastxFile(fasta_path) as fastx:
            first = next(iter(fastx), None)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to open or parse sequence file {fasta_path}: {e}")
        raise InputError(f"Failed to open or parse sequence file {fasta_path}: {e}")

    if first is None:
        logger.warning(f"No sequences found in {fasta_path}.")
        return False

    logger.info(f"First sequence in {fasta_path}: {first.name} ({len(first.sequence or ''):,} bp)")
    return True
