"""
Pytest configuration and shared fixtures.
"""

import gzip
import random

import pytest


@pytest.fixture
def write_fasta(tmp_path):
    """Write (id, sequence) pairs to a FASTA file and return its path."""
    def _write(records, name="genome.fa", line_width=60, compress=False):
        path = tmp_path / name
        lines = []
        for seq_id, seq in records:
            lines.append(f">{seq_id}")
            for i in range(0, len(seq), line_width):
                lines.append(seq[i:i + line_width])
        text = "\n".join(lines) + "\n"
        if compress:
            with gzip.open(path, "wt") as f:
                f.write(text)
        else:
            path.write_text(text)
        return str(path)
    return _write


@pytest.fixture
def random_sequence():
    """Reproducible random DNA sequence generator."""
    def _generate(length, seed=0):
        rng = random.Random(seed)
        return "".join(rng.choice("ACGT") for _ in range(length))
    return _generate


@pytest.fixture
def simple_fasta():
    """Raw FASTA text with two short records."""
    return ">chr1 first\nACGTACGTAC\nGTACGT\n>chr2\nacgtnnacgt\n"
