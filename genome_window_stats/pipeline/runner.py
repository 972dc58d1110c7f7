from typing import List, Mapping, Optional

from ..kmer.profile import KmerProfile
from ..metrics.registry import MetricRegistry
from ..utils.logging_utils import get_logger
from .chunker import check_chunk_params, chunk_genome
from .consumer import classify_metrics, consume_chunks
from .reader import stream_genome
from .stream import AbortSignal, BoundedStream

logger = get_logger(__name__)


def run_pipeline(fasta: str, metrics: List[str],
                 ref_profiles: Optional[Mapping[int, KmerProfile]] = None,
                 win_size: int = 100, win_stride: int = 100, chunk_size: int = 1000,
                 registry: Optional[MetricRegistry] = None, dist_metric: str = "tvd",
                 buf_size: int = 1, chunk_buf_size: int = 5, result_buf_size: int = 5,
                 signal: Optional[AbortSignal] = None) -> BoundedStream:
    """
    Start the reader, chunker and window consumer and return the stream of
    result tables.

    Configuration errors are raised before any thread starts. A failure in
    any stage aborts the others and is re-raised while iterating the
    returned stream; closing the stream early cancels the pipeline.
    """
    check_chunk_params(win_size, win_stride, chunk_size)
    classify_metrics(metrics, registry, ref_profiles)
    if signal is None:
        signal = AbortSignal()

    logger.debug(
        f"Pipeline on {fasta}: window={win_size}, stride={win_stride}, chunk={chunk_size} windows"
    )
    records = stream_genome(fasta, buf_size=buf_size, signal=signal)
    chunks = chunk_genome(records, win_size, win_stride, chunk_size,
                          buf_size=chunk_buf_size, signal=signal)
    return consume_chunks(chunks, metrics, ref_profiles, registry=registry,
                          dist_metric=dist_metric, buf_size=result_buf_size, signal=signal)
