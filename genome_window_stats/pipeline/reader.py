from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

import pysam

from ..exceptions import InputError, SequenceReadError
from ..utils.logging_utils import get_logger
from .stream import AbortSignal, BoundedStream

logger = get_logger(__name__)


@dataclass
class SequenceRecord:
    id: str
    seq: str

    def __len__(self) -> int:
        return len(self.seq)

    def subseq(self, start: int, end: int) -> str:
        """Return bases start..end, 1-based and inclusive."""
        return self.seq[start - 1:end]

    @classmethod
    def from_entry(cls, entry) -> "SequenceRecord":
        """Copy a reader entry (pysam FastxProxy or similar) into an independent record."""
        return cls(id=str(entry.name), seq=str(entry.sequence or "").upper())


def open_fastx(path: str) -> pysam.FastxFile:
    """Open a FASTA/FASTQ file (plain or gzipped) for streaming."""
    try:
        return pysam.FastxFile(str(path), persist=False)
    except (OSError, ValueError) as e:
        raise InputError(f"Failed to open sequence file {path}: {e}")


def read_records(entries: Iterable, source: str = "input") -> Iterator[SequenceRecord]:
    """
    Yield a copied `SequenceRecord` for each reader entry, in order.
    Any reader failure other than end of input becomes a `SequenceReadError`.
    """
    n_records = 0
    iterator = iter(entries)
    while True:
        try:
            entry = next(iterator)
        except StopIteration:
            break
        except (OSError, ValueError) as e:
            raise SequenceReadError(f"Failed to read record {n_records + 1} from {source}: {e}")
        n_records += 1
        yield SequenceRecord.from_entry(entry)
    logger.debug(f"Read {n_records} record(s) from {source}")


def iter_fasta_records(path: str) -> Iterator[SequenceRecord]:
    """Read all records of a sequence file in the current thread."""
    with open_fastx(path) as fastx:
        yield from read_records(fastx, source=str(path))


def stream_records(entries: Iterable, buf_size: int = 1,
                   signal: Optional[AbortSignal] = None,
                   source: str = "input") -> BoundedStream:
    """Publish reader entries as records on a bounded queue fed by a reader thread."""
    return BoundedStream(
        "sequence-reader",
        lambda: read_records(entries, source=source),
        maxsize=buf_size,
        signal=signal,
    )


def stream_genome(fasta: str, buf_size: int = 1,
                  signal: Optional[AbortSignal] = None) -> BoundedStream:
    """
    Stream the records of a FASTA/FASTQ file one at a time.

    The file is opened immediately so an unreadable path fails before any
    output is produced; records are then read in a background thread and
    delivered in file order through a queue holding at most `buf_size`
    records.
    """
    fastx = open_fastx(fasta)

    def produce():
        with fastx:
            yield from read_records(fastx, source=str(fasta))

    return BoundedStream("sequence-reader", produce, maxsize=buf_size, signal=signal)
