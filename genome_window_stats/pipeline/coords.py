"""Coordinate helpers shared by the chunker and the window consumer."""

from typing import List


def min_int(x: int, y: int) -> int:
    """Smallest of two integers. If both are equal, the second is returned."""
    if x < y:
        return x
    return y


def make_range(start: int, end: int, step: int) -> List[int]:
    """Values from start to end (inclusive), spaced by step."""
    if step < 1:
        raise ValueError(f"step must be a positive integer, got {step}")
    return list(range(start, end + 1, step))


def chunk_length(w_size: int, w_stride: int, chunk_size: int) -> int:
    """Number of basepairs spanned by `chunk_size` consecutive windows."""
    return w_size + (chunk_size - 1) * w_stride


def window_end(bp_start: int, offset: int, w_size: int, bp_end: int) -> int:
    """1-based inclusive end of the window starting `offset` bases into a chunk."""
    return min_int(bp_start + offset + w_size - 1, bp_end)


def build_2d_table(rows: int, cols: int) -> List[List[str]]:
    return [[""] * cols for _ in range(rows)]
