from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Tuple

from pydantic import ValidationError

from ..errors import EmptyResponseListError, NormalizationError
from ..schema import AnnotationDocument
from ..utils.logging import get_logger

logger = get_logger("annotation.normalizer")

RESPONSES_KEY = "responses"
FULL_TEXT_KEY = "fullTextAnnotation"


class AnnotationShape(str, Enum):
    """Wrapper around the canonical annotation in a persisted OCR result."""

    CANONICAL = "canonical"
    FULL_TEXT_ANNOTATION = "full_text_annotation"
    RESPONSE = "response"
    RESPONSE_FULL_TEXT_ANNOTATION = "response_full_text_annotation"


def unwrap_annotation(raw: Any) -> Tuple[AnnotationShape, Mapping[str, Any]]:
    """
    Peel the known wrappers off a parsed OCR payload.

    Raw API responses keep the annotation under ``responses[0]``; client
    libraries and the gcloud CLI wrap it in ``fullTextAnnotation`` or write it
    at the root. Wrappers are tried in that order and anything left over is
    treated as already canonical.
    """
    if not isinstance(raw, Mapping):
        raise NormalizationError(
            f"Annotation payload must be a JSON object, got {type(raw).__name__}"
        )

    working: Mapping[str, Any] = raw
    from_response = False
    responses = raw.get(RESPONSES_KEY)
    if isinstance(responses, list):
        if not responses:
            raise EmptyResponseListError("Annotation payload has an empty 'responses' list")
        first = responses[0]
        if not isinstance(first, Mapping):
            raise NormalizationError("First entry of 'responses' is not a JSON object")
        working = first
        from_response = True

    wrapped = working.get(FULL_TEXT_KEY)
    if wrapped is not None:
        if not isinstance(wrapped, Mapping):
            raise NormalizationError(f"'{FULL_TEXT_KEY}' is not a JSON object")
        shape = (
            AnnotationShape.RESPONSE_FULL_TEXT_ANNOTATION
            if from_response
            else AnnotationShape.FULL_TEXT_ANNOTATION
        )
        return shape, wrapped

    return (AnnotationShape.RESPONSE if from_response else AnnotationShape.CANONICAL), working


def normalize(raw: Any) -> AnnotationDocument:
    """Return the canonical annotation document for any supported payload shape."""
    shape, payload = unwrap_annotation(raw)
    logger.debug("Detected annotation shape: %s", shape.value)
    try:
        return AnnotationDocument.model_validate(dict(payload))
    except ValidationError as exc:
        raise NormalizationError(f"Annotation payload is malformed: {exc}") from exc
