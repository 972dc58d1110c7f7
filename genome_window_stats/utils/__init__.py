"""Utility functions for file handling and logging."""

from .file_utils import (
    ensure_directory,
    check_fasta_input
)
from .logging_utils import (
    setup_logging,
    get_logger,
    log_step
)

__all__ = [
    'ensure_directory',
    'check_fasta_input',
    'setup_logging',
    'get_logger',
    'log_step'
]
