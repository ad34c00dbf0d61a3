"""OCR engine abstractions."""

from .base import BaseOCREngine
from .vision_client import ImageDiagnostics, VisionOCREngine, diagnostics_from_response

__all__ = ["BaseOCREngine", "ImageDiagnostics", "VisionOCREngine", "diagnostics_from_response"]
