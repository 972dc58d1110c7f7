"""Streaming per-window statistics and k-mer divergence over genomic sequences."""

from .config import Config
from . import kmer
from . import metrics
from . import pipeline
from . import utils

__version__ = '0.1.0'
