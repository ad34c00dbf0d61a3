import json
import logging
from typing import List, Optional

import pytest

from dictionary_ocr_cli.utils.logging import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def symbol(text: str, break_type: Optional[str] = None) -> dict:
    payload = {"text": text}
    if break_type:
        payload["property"] = {"detectedBreak": {"type": break_type}}
    return payload


def word(text: str, confidence: Optional[float] = None, break_type: Optional[str] = None) -> dict:
    """Build a word whose last symbol carries ``break_type``."""
    symbols = [symbol(char) for char in text]
    if symbols and break_type:
        symbols[-1] = symbol(text[-1], break_type)
    payload = {"symbols": symbols}
    if confidence is not None:
        payload["confidence"] = confidence
    return payload


def block(*words: dict) -> dict:
    return {"paragraphs": [{"words": list(words)}]}


def page(*blocks: dict) -> dict:
    return {"blocks": list(blocks)}


def annotation(*pages: dict, text: Optional[str] = None) -> dict:
    payload: dict = {"pages": list(pages)}
    if text is not None:
        payload["text"] = text
    return payload


@pytest.fixture
def dictionary_page() -> dict:
    """One page, two layout blocks: an English headword and its Farsi gloss."""
    return annotation(
        page(
            block(
                word("abandon", 0.98, "SPACE"),
                word("(v.)", 0.95, "LINE_BREAK"),
            ),
            block(
                word("رها", 0.91, "SPACE"),
                word("کردن", 0.62),
            ),
        ),
        text="abandon (v.)\nرها کردن\n",
    )


def write_json(path, payload) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def words_with_confidences(values: List[Optional[float]]) -> dict:
    return annotation(page(block(*[word("x", value, "SPACE") for value in values])))
