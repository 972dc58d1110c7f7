import math
from typing import Callable, Dict, List, Optional

import numpy as np
from Bio.SeqUtils import gc_fraction

from ..exceptions import MetricError

MetricFunc = Callable[[str], float]


def gc_content(seq: str) -> float:
    """Fraction of G/C among unambiguous bases."""
    return gc_fraction(seq, ambiguous="remove")


def gc_skew(seq: str) -> float:
    """(G - C) / (G + C), NaN if the window has neither."""
    g = seq.count("G")
    c = seq.count("C")
    if g + c == 0:
        return math.nan
    return (g - c) / (g + c)


def at_skew(seq: str) -> float:
    """(A - T) / (A + T), NaN if the window has neither."""
    a = seq.count("A")
    t = seq.count("T")
    if a + t == 0:
        return math.nan
    return (a - t) / (a + t)


def base_entropy(seq: str) -> float:
    """Shannon entropy (bits) of the A/C/G/T composition of the window."""
    counts = np.array([seq.count(base) for base in "ACGT"], dtype=float)
    total = counts.sum()
    if total == 0:
        return math.nan
    freqs = counts[counts > 0] / total
    return float(-(freqs * np.log2(freqs)).sum()) + 0.0


class MetricRegistry:
    """Per-window metrics by name. Each metric maps a window sequence to a number."""

    def __init__(self, metrics: Optional[Dict[str, MetricFunc]] = None):
        self._metrics: Dict[str, MetricFunc] = dict(metrics or {})

    def register(self, name: str, func: MetricFunc):
        if not callable(func):
            raise MetricError(f"Metric '{name}' must be callable")
        self._metrics[name] = func

    def __contains__(self, name: str) -> bool:
        return name in self._metrics

    def __getitem__(self, name: str) -> MetricFunc:
        try:
            return self._metrics[name]
        except KeyError:
            raise MetricError(f"Unknown metric: {name}")

    def names(self) -> List[str]:
        return list(self._metrics)


def default_registry() -> MetricRegistry:
    return MetricRegistry({
        "GC": gc_content,
        "GCSKEW": gc_skew,
        "ATSKEW": at_skew,
        "ENTRO": base_entropy,
    })
