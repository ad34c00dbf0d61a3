from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..schema import AnnotationDocument


class BaseOCREngine(Protocol):
    name: str

    def annotate(
        self, image_bytes: bytes, language_hints: Optional[Sequence[str]] = None
    ) -> AnnotationDocument:
        """Run dense document OCR on one encoded image.

        Per-image failures must be raised as ``DigitizationError`` subclasses;
        a batch records those and moves on. Anything else aborts the batch.
        """
        ...

    def close(self) -> None:
        """Release the connection to the provider."""
        ...

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
