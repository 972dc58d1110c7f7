import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import pandas as pd

from ..exceptions import ConfigError, MetricError, ReferenceProfileError
from ..kmer.profile import KmerProfile, seq_kmer_div
from ..metrics.registry import MetricFunc, MetricRegistry, default_registry
from ..utils.logging_utils import get_logger
from .chunker import Chunk
from .coords import build_2d_table, window_end
from .stream import AbortSignal, BoundedStream

logger = get_logger(__name__)

KMER_REGEX = re.compile(r"([0-9]+)MER")
COORD_COLUMNS = ["chrom", "start", "end"]


@dataclass
class ChunkResult:
    """Statistics of the windows of one chunk: one row per window, one column per feature."""
    header: List[str]
    data: List[List[str]]

    def __len__(self) -> int:
        return len(self.data)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.data, columns=self.header)


@dataclass
class MetricPlan:
    """Metric columns resolved once, before any chunk is processed."""
    header: List[str]
    metric_cols: Dict[int, MetricFunc]
    kmer_cols: Dict[int, KmerProfile]

    @property
    def n_features(self) -> int:
        return len(self.header)


def parse_kmer_field(name: str) -> Optional[int]:
    """Return k for a k-mer divergence field such as "4MER", None otherwise."""
    match = KMER_REGEX.fullmatch(name)
    if not match:
        return None
    return int(match.group(1))


def required_kmer_sizes(metrics: List[str], registry: Optional[MetricRegistry] = None) -> Tuple[int, ...]:
    """
    Check that every name is a registry metric or a "<k>MER" field with
    k >= 1. Returns the k values the k-mer fields need, in request order.
    """
    if registry is None:
        registry = default_registry()
    sizes = []
    for name in metrics:
        if name in registry:
            continue
        k = parse_kmer_field(name)
        if k is None:
            raise MetricError(
                f"Unknown metric '{name}'. Available: {', '.join(registry.names())} or <k>MER"
            )
        if k < 1:
            raise MetricError(f"Invalid k-mer size in metric '{name}'")
        if k not in sizes:
            sizes.append(k)
    return tuple(sizes)


def classify_metrics(metrics: List[str], registry: Optional[MetricRegistry] = None,
                     ref_profiles: Optional[Mapping[int, KmerProfile]] = None) -> MetricPlan:
    """
    Map each requested column to a registry metric or to a reference k-mer
    profile. Unknown names are errors, and so is a reference profile that is
    missing, built for another k, or not normalized.
    """
    if registry is None:
        registry = default_registry()
    required_kmer_sizes(metrics, registry)
    ref_profiles = ref_profiles or {}
    metric_cols: Dict[int, MetricFunc] = {}
    kmer_cols: Dict[int, KmerProfile] = {}
    # 3 coordinate columns come first
    for idx, name in enumerate(metrics, start=len(COORD_COLUMNS)):
        if name in registry:
            metric_cols[idx] = registry[name]
            continue
        k = parse_kmer_field(name)
        if k not in ref_profiles:
            raise ReferenceProfileError(f"No reference {k}-mer profile available for metric '{name}'")
        ref_profile = ref_profiles[k]
        if ref_profile.k != k:
            raise ReferenceProfileError(
                f"Reference profile for metric '{name}' holds {ref_profile.k}-mers, expected {k}-mers"
            )
        if not ref_profile.normalized:
            raise ReferenceProfileError(f"Reference {k}-mer profile for metric '{name}' is not normalized")
        kmer_cols[idx] = ref_profile
    return MetricPlan(COORD_COLUMNS + list(metrics), metric_cols, kmer_cols)


def format_stat(value: float) -> str:
    return "%f" % value


def compute_chunk(chunk: Chunk, plan: MetricPlan, dist_metric: str = "tvd") -> ChunkResult:
    """Compute every requested feature for each window of a chunk."""
    results = ChunkResult(plan.header, build_2d_table(chunk.n_windows, plan.n_features))
    for win_id, start in enumerate(chunk.starts):
        row = results.data[win_id]
        row[0] = chunk.id
        row[1] = str(chunk.bp_start + start)
        row[2] = str(window_end(chunk.bp_start, start, chunk.w_size, chunk.bp_end))
        win_seq = chunk.window_seq(start)
        for col, func in plan.metric_cols.items():
            row[col] = format_stat(func(win_seq))
        for col, ref_profile in plan.kmer_cols.items():
            row[col] = format_stat(seq_kmer_div(win_seq, ref_profile, dist_metric))
    return results


def iter_results(chunks: Iterable[Chunk], plan: MetricPlan, dist_metric: str = "tvd") -> Iterator[ChunkResult]:
    for chunk in chunks:
        yield compute_chunk(chunk, plan, dist_metric)


def consume_chunks(chunks: Iterable[Chunk], metrics: List[str],
                   ref_profiles: Optional[Mapping[int, KmerProfile]] = None,
                   registry: Optional[MetricRegistry] = None,
                   dist_metric: str = "tvd", buf_size: int = 5,
                   signal: Optional[AbortSignal] = None) -> BoundedStream:
    """
    Compute window statistics for a stream of chunks. Metric names are
    validated here, before the worker thread starts.
    """
    if signal is None:
        signal = getattr(chunks, "signal", None)
    try:
        plan = classify_metrics(metrics, registry, ref_profiles)
    except ConfigError as e:
        # Upstream stages may already be running
        if signal is not None:
            signal.abort(e)
        raise
    logger.debug(
        f"Window metrics: {len(plan.metric_cols)} registry field(s), {len(plan.kmer_cols)} k-mer field(s)"
    )
    return BoundedStream(
        "window-consumer",
        lambda: iter_results(chunks, plan, dist_metric),
        maxsize=buf_size,
        signal=signal,
    )
