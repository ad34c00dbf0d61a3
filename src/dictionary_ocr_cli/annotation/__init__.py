"""Annotation normalization, text reconstruction, and statistics."""

from .normalizer import AnnotationShape, normalize, unwrap_annotation
from .walker import (
    AnnotationStats,
    TextSource,
    WordTally,
    aggregate_stats,
    extract_text,
    iter_words,
    reconstruct_text,
    tally_words,
)

__all__ = [
    "AnnotationShape",
    "AnnotationStats",
    "TextSource",
    "WordTally",
    "aggregate_stats",
    "extract_text",
    "iter_words",
    "normalize",
    "reconstruct_text",
    "tally_words",
    "unwrap_annotation",
]
