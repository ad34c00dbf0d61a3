from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BreakType(str, Enum):
    """Whitespace that follows a recognized symbol."""

    UNKNOWN = "UNKNOWN"
    SPACE = "SPACE"
    SURE_SPACE = "SURE_SPACE"
    EOL_SURE_SPACE = "EOL_SURE_SPACE"
    HYPHEN = "HYPHEN"
    LINE_BREAK = "LINE_BREAK"


# Protobuf JSON written with integer enums uses these ordinals.
_BREAK_ORDINALS: Tuple[BreakType, ...] = (
    BreakType.UNKNOWN,
    BreakType.SPACE,
    BreakType.SURE_SPACE,
    BreakType.EOL_SURE_SPACE,
    BreakType.HYPHEN,
    BreakType.LINE_BREAK,
)


class AnnotationModel(BaseModel):
    # Provider fields we do not model (bounding boxes, languages, ...) are
    # kept so a persisted annotation loses nothing.
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    @field_validator(
        "symbols", "words", "paragraphs", "blocks", "pages", mode="before", check_fields=False
    )
    @classmethod
    def empty_when_null(cls, value: Any) -> Any:
        return () if value is None else value


class DetectedBreak(AnnotationModel):
    type: Optional[Union[str, int]] = None
    is_prefix: Optional[bool] = Field(None, alias="isPrefix")


class TextProperty(AnnotationModel):
    detected_break: Optional[DetectedBreak] = Field(None, alias="detectedBreak")


class Symbol(AnnotationModel):
    text: Optional[str] = None
    properties: Optional[TextProperty] = Field(None, alias="property")
    confidence: Optional[float] = None

    @property
    def break_type(self) -> Optional[BreakType]:
        if self.properties is None or self.properties.detected_break is None:
            return None
        raw = self.properties.detected_break.type
        if raw is None:
            return None
        if isinstance(raw, int):
            return _BREAK_ORDINALS[raw] if 0 <= raw < len(_BREAK_ORDINALS) else None
        try:
            return BreakType(raw)
        except ValueError:
            return None


class Word(AnnotationModel):
    symbols: Tuple[Symbol, ...] = ()
    confidence: Optional[float] = None

    @property
    def text(self) -> str:
        return "".join(symbol.text or "" for symbol in self.symbols)


class Paragraph(AnnotationModel):
    words: Tuple[Word, ...] = ()
    confidence: Optional[float] = None


class Block(AnnotationModel):
    paragraphs: Tuple[Paragraph, ...] = ()
    block_type: Optional[Union[str, int]] = Field(None, alias="blockType")
    confidence: Optional[float] = None


class Page(AnnotationModel):
    blocks: Tuple[Block, ...] = ()
    width: Optional[int] = None
    height: Optional[int] = None
    confidence: Optional[float] = None


class AnnotationDocument(AnnotationModel):
    """Canonical OCR annotation for one scanned page.

    ``text`` is the provider's flattened page text and may be missing or
    truncated. ``pages`` holds the layout hierarchy; when it is empty only
    ``text`` is usable.
    """

    text: Optional[str] = None
    pages: Tuple[Page, ...] = ()

    @property
    def has_structure(self) -> bool:
        return bool(self.pages)

    def to_json_dict(self) -> Dict[str, Any]:
        """Return the provider-shaped (camelCase) JSON payload."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
