"""
Scanned dictionary page digitization package.

The package exposes the `DictionaryDigitizer` batch entry point alongside the
annotation normalizer, text reconstruction and statistics walker, and the
quality auditor that work offline on persisted OCR results.
"""

from .annotation import TextSource, aggregate_stats, extract_text, normalize
from .pipeline import DictionaryDigitizer
from .schema import AnnotationDocument
from .validation import AuditReport, audit

__all__ = [
    "AnnotationDocument",
    "AuditReport",
    "DictionaryDigitizer",
    "TextSource",
    "aggregate_stats",
    "audit",
    "extract_text",
    "normalize",
]
