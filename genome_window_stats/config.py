import os
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import ConfigError
from .utils.file_utils import ensure_directory

DIST_METRICS = ("tvd", "euclidean")

@dataclass
class Config:
    """Configuration for the pipeline"""
    fasta: str
    output: str = "-"
    fields: List[str] = field(default_factory=lambda: ["GC"])
    window_size: int = 100
    window_stride: int = 100
    chunk_size: int = 1000
    ref_fasta: Optional[str] = None
    dist_metric: str = "tvd"
    buffer_size: int = 1

    def __post_init__(self):
        """Validate inputs and create output directory"""
        if not os.path.exists(self.fasta):
            raise FileNotFoundError(f"Input FASTA not found: {self.fasta}")
        if self.ref_fasta is None:
            self.ref_fasta = self.fasta
        elif not os.path.exists(self.ref_fasta):
            raise FileNotFoundError(f"Reference FASTA not found: {self.ref_fasta}")

        for name in ("window_size", "window_stride", "chunk_size", "buffer_size"):
            value = getattr(self, name)
            if value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value}")
        if not self.fields:
            raise ConfigError("At least one field must be requested")
        if self.dist_metric not in DIST_METRICS:
            raise ConfigError(
                f"Unknown distance metric '{self.dist_metric}', expected one of {', '.join(DIST_METRICS)}"
            )

        if self.output != "-":
            ensure_directory(os.path.dirname(os.path.abspath(self.output)))
