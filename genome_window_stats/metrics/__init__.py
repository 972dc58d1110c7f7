"""Per-window sequence metrics looked up by name."""

from .registry import (
    MetricRegistry,
    default_registry,
    gc_content,
    gc_skew,
    at_skew,
    base_entropy
)

__all__ = [
    'MetricRegistry',
    'default_registry',
    'gc_content',
    'gc_skew',
    'at_skew',
    'base_entropy'
]
