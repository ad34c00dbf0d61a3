from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from ..config import VisionConfig
from ..errors import EmptyAnnotationError, OCRProviderError
from ..schema import AnnotationDocument
from .base import BaseOCREngine

logger = logging.getLogger("dictionary_ocr_cli.ocr.vision")

try:
    from google.api_core import exceptions as google_exceptions  # type: ignore
    from google.cloud import vision  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    google_exceptions = None  # type: ignore
    vision = None  # type: ignore


def _is_transient(exc: BaseException) -> bool:
    if google_exceptions is None:
        return False
    return isinstance(
        exc,
        (
            google_exceptions.ServiceUnavailable,
            google_exceptions.DeadlineExceeded,
            google_exceptions.ResourceExhausted,
        ),
    )


@dataclass(frozen=True)
class ImageDiagnostics:
    """What the provider saw in an image, used to explain empty OCR results."""

    error: Optional[str]
    dominant_colors: int
    sample_rgb: Optional[Tuple[float, float, float]]
    text_length: int

    @property
    def looks_blank(self) -> bool:
        return self.dominant_colors == 0

    @property
    def has_text(self) -> bool:
        return self.text_length > 0


def diagnostics_from_response(response: Any) -> ImageDiagnostics:
    error = response.error.message if response.error and response.error.message else None
    colors = list(response.image_properties_annotation.dominant_colors.colors)
    sample_rgb = None
    if colors and colors[0].color:
        first = colors[0].color
        sample_rgb = (first.red, first.green, first.blue)
    text = response.full_text_annotation.text or ""
    return ImageDiagnostics(
        error=error,
        dominant_colors=len(colors),
        sample_rgb=sample_rgb,
        text_length=len(text),
    )


@dataclass
class VisionOCREngine(BaseOCREngine):
    """Dense document OCR through Google Cloud Vision.

    The engine owns one ``ImageAnnotatorClient`` for its whole lifetime; use it
    as a context manager so the gRPC channel is closed on every exit path.
    """

    name: str = "google-vision"
    language_hints: Sequence[str] = ("en", "fa")
    timeout_seconds: float = 120.0
    max_retries: int = 3
    client: Any = None
    _closed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if vision is None:
            raise ImportError(
                "google-cloud-vision is not available. Install google-cloud-vision to use this backend."
            )
        if self.client is None:
            self.client = vision.ImageAnnotatorClient()

    @classmethod
    def from_config(cls, config: VisionConfig) -> "VisionOCREngine":
        return cls(
            language_hints=tuple(config.language_hints),
            timeout_seconds=config.timeout_seconds,
            max_retries=max(1, config.max_retries),
        )

    def annotate(
        self, image_bytes: bytes, language_hints: Optional[Sequence[str]] = None
    ) -> AnnotationDocument:
        response = self._annotate_image(
            image_bytes,
            language_hints,
            [vision.Feature.Type.DOCUMENT_TEXT_DETECTION],
        )
        if response.error and response.error.message:
            raise OCRProviderError(f"Vision API error: {response.error.message}")

        payload = json.loads(
            vision.TextAnnotation.to_json(
                response.full_text_annotation, use_integers_for_enums=False
            )
        )
        # A successful call can still carry no annotation when no text is seen.
        if not payload.get("text") and not payload.get("pages"):
            raise EmptyAnnotationError("The OCR engine returned an empty result")
        try:
            return AnnotationDocument.model_validate(payload)
        except ValidationError as exc:
            raise OCRProviderError(f"Vision annotation could not be parsed: {exc}") from exc

    def diagnose(
        self, image_bytes: bytes, language_hints: Optional[Sequence[str]] = None
    ) -> ImageDiagnostics:
        response = self._annotate_image(
            image_bytes,
            language_hints,
            [
                vision.Feature.Type.DOCUMENT_TEXT_DETECTION,
                vision.Feature.Type.IMAGE_PROPERTIES,
            ],
        )
        return diagnostics_from_response(response)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing Vision client transport")
        self.client.transport.close()

    def _annotate_image(
        self,
        image_bytes: bytes,
        language_hints: Optional[Sequence[str]],
        feature_types: List[Any],
    ) -> Any:
        if self._closed:
            raise OCRProviderError("Vision client has already been closed")
        hints = list(language_hints or self.language_hints)
        request = vision.AnnotateImageRequest(
            image=vision.Image(content=image_bytes),
            features=[vision.Feature(type_=feature_type) for feature_type in feature_types],
            image_context=vision.ImageContext(language_hints=hints),
        )
        retryer = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential_jitter(initial=1, max=6),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        try:
            batch = retryer(self._send, request)
        except OCRProviderError:
            raise
        except Exception as exc:
            raise OCRProviderError(f"Vision request failed: {exc}") from exc
        return batch.responses[0]

    def _send(self, request: Any) -> Any:
        logger.debug("Sending %d feature request(s) to Vision", len(request.features))
        return self.client.batch_annotate_images(
            requests=[request], timeout=self.timeout_seconds
        )
