"""Streaming reader -> chunker -> window consumer pipeline."""

from .stream import AbortSignal, BoundedStream
from .reader import (
    SequenceRecord,
    iter_fasta_records,
    stream_genome,
    stream_records
)
from .chunker import (
    Chunk,
    split_record,
    chunk_genome
)
from .consumer import (
    ChunkResult,
    classify_metrics,
    compute_chunk,
    consume_chunks
)
from .runner import run_pipeline
from .writer import write_results

__all__ = [
    'AbortSignal',
    'BoundedStream',
    'SequenceRecord',
    'iter_fasta_records',
    'stream_genome',
    'stream_records',
    'Chunk',
    'split_record',
    'chunk_genome',
    'ChunkResult',
    'classify_metrics',
    'compute_chunk',
    'consume_chunks',
    'run_pipeline',
    'write_results'
]
