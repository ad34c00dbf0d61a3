from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List

from ..errors import DivisionByZeroError, NoStructuralDataError
from ..schema import AnnotationDocument, Block, BreakType, Word
from ..utils.logging import get_logger

logger = get_logger("annotation.walker")

DEFAULT_FLAG_THRESHOLD = 0.8

_BREAK_WHITESPACE = {
    BreakType.LINE_BREAK: "\n",
    BreakType.EOL_SURE_SPACE: "\n",
    BreakType.SPACE: " ",
    BreakType.SURE_SPACE: " ",
}


class TextSource(str, Enum):
    """Which representation of the page text `extract_text` trusts."""

    # Rebuild from pages; use the flattened text only when there are no pages.
    HIERARCHY = "hierarchy"
    # Use the flattened text whenever it is non-empty; rebuild otherwise.
    FLATTENED = "flattened"


@dataclass(frozen=True)
class WordTally:
    word_count: int
    confidence_total: float
    flagged_word_count: int
    block_count: int


@dataclass(frozen=True)
class AnnotationStats:
    word_count: int
    mean_confidence: float
    flagged_word_count: int
    block_count: int


def iter_blocks(document: AnnotationDocument) -> Iterator[Block]:
    for page in document.pages:
        yield from page.blocks


def iter_words(document: AnnotationDocument) -> Iterator[Word]:
    for block in iter_blocks(document):
        for paragraph in block.paragraphs:
            yield from paragraph.words


def reconstruct_text(document: AnnotationDocument) -> str:
    """
    Rebuild plain text from the symbol hierarchy.

    Each symbol is followed by the whitespace its detected break implies, and
    every block ends on a newline so layout regions stay separate even when
    the provider left the final break off a block.
    """
    parts: List[str] = []
    for block in iter_blocks(document):
        for paragraph in block.paragraphs:
            for word in paragraph.words:
                for symbol in word.symbols:
                    if symbol.text:
                        parts.append(symbol.text)
                    whitespace = _BREAK_WHITESPACE.get(symbol.break_type)
                    if whitespace:
                        parts.append(whitespace)
        if not parts or not parts[-1].endswith("\n"):
            parts.append("\n")
    return "".join(parts).rstrip()


def extract_text(
    document: AnnotationDocument, source: TextSource = TextSource.HIERARCHY
) -> str:
    source = TextSource(source)
    if source is TextSource.FLATTENED and document.text:
        return document.text
    if not document.pages:
        logger.debug("No layout hierarchy; using flattened text")
        return document.text or ""
    return reconstruct_text(document)


def tally_words(
    document: AnnotationDocument, flag_threshold: float = DEFAULT_FLAG_THRESHOLD
) -> WordTally:
    if not document.pages:
        raise NoStructuralDataError("Annotation contains no structural 'pages' data")

    word_count = 0
    confidence_total = 0.0
    flagged = 0
    for word in iter_words(document):
        score = word.confidence or 0.0
        if not math.isfinite(score):
            # JSON parsers accept NaN/Infinity; score them like a missing value.
            score = 0.0
        word_count += 1
        confidence_total += score
        if score < flag_threshold:
            flagged += 1

    # Pages are scanned one image at a time, so layout is measured on the first.
    block_count = len(document.pages[0].blocks)
    return WordTally(
        word_count=word_count,
        confidence_total=confidence_total,
        flagged_word_count=flagged,
        block_count=block_count,
    )


def aggregate_stats(
    document: AnnotationDocument, flag_threshold: float = DEFAULT_FLAG_THRESHOLD
) -> AnnotationStats:
    tally = tally_words(document, flag_threshold)
    if tally.word_count == 0:
        raise DivisionByZeroError(
            "Cannot compute mean confidence over zero words", tally=tally
        )
    stats = AnnotationStats(
        word_count=tally.word_count,
        mean_confidence=tally.confidence_total / tally.word_count,
        flagged_word_count=tally.flagged_word_count,
        block_count=tally.block_count,
    )
    logger.debug("Aggregated stats: %s", stats)
    return stats
