from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from ..exceptions import ConfigError
from ..utils.logging_utils import get_logger
from .coords import chunk_length, make_range, min_int
from .reader import SequenceRecord
from .stream import AbortSignal, BoundedStream

logger = get_logger(__name__)


@dataclass
class Chunk:
    """
    A piece of a record's sequence, with its genomic coordinates
    (1-based, inclusive) and the offsets of the windows it holds.
    """
    id: str
    bp_start: int
    bp_end: int
    w_size: int
    w_stride: int
    seq: str
    starts: List[int] = field(default_factory=list)

    @property
    def n_windows(self) -> int:
        return len(self.starts)

    def window_seq(self, offset: int) -> str:
        return self.seq[offset:offset + self.w_size]


def check_chunk_params(w_size: int, w_stride: int, chunk_size: int):
    for name, value in (("window size", w_size), ("window stride", w_stride), ("chunk size", chunk_size)):
        if value < 1:
            raise ConfigError(f"{name.capitalize()} must be a positive integer, got {value}")


def split_record(record: SequenceRecord, w_size: int, w_stride: int, chunk_size: int) -> Iterator[Chunk]:
    """
    Cut one record into chunks of `chunk_size` windows.

    Consecutive chunks overlap so that windows keep the same stride across
    chunk boundaries. Truncated windows at the end of the sequence are never
    produced; a record shorter than one window yields no chunk.
    """
    chunk_len = chunk_length(w_size, w_stride, chunk_size)
    step = chunk_size * w_stride
    seq_len = len(record)
    bp_start = 1
    while seq_len - bp_start + 1 >= w_size:
        bp_end = min_int(bp_start + chunk_len - 1, seq_len)
        yield Chunk(
            id=record.id,
            bp_start=bp_start,
            bp_end=bp_end,
            w_size=w_size,
            w_stride=w_stride,
            seq=record.subseq(bp_start, bp_end),
            starts=make_range(0, bp_end - bp_start - (w_size - 1), w_stride),
        )
        bp_start += step


def iter_chunks(records: Iterable[SequenceRecord], w_size: int, w_stride: int,
                chunk_size: int) -> Iterator[Chunk]:
    for record in records:
        n_chunks = 0
        for chunk in split_record(record, w_size, w_stride, chunk_size):
            n_chunks += 1
            yield chunk
        if not n_chunks:
            logger.warning(f"Sequence {record.id} ({len(record)} bp) is shorter than one window, skipped")


def chunk_genome(records: Iterable[SequenceRecord], w_size: int, w_stride: int,
                 chunk_size: int, buf_size: int = 5,
                 signal: Optional[AbortSignal] = None) -> BoundedStream:
    """
    Turn a stream of records into a stream of chunks. `chunk_size` is given
    in windows, `w_size` and `w_stride` in basepairs.
    """
    check_chunk_params(w_size, w_stride, chunk_size)
    if signal is None:
        signal = getattr(records, "signal", None)
    return BoundedStream(
        "chunker",
        lambda: iter_chunks(records, w_size, w_stride, chunk_size),
        maxsize=buf_size,
        signal=signal,
    )
