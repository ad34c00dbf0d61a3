from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .annotation.walker import WordTally


class DigitizationError(Exception):
    """Base class for every failure raised by the digitization pipeline."""


class NormalizationError(DigitizationError, ValueError):
    pass


class EmptyResponseListError(NormalizationError):
    pass


class StatisticsError(DigitizationError):
    """Statistics could not be measured for a document."""


class NoStructuralDataError(StatisticsError):
    pass


class DivisionByZeroError(StatisticsError, ZeroDivisionError):
    """Raised when a mean is requested over zero words.

    The partial tally is kept so counts that do not depend on the division
    (such as the layout block count) can still be reported.
    """

    def __init__(self, message: str, tally: Optional["WordTally"] = None) -> None:
        super().__init__(message)
        self.tally = tally


class EmptyAnnotationError(DigitizationError):
    pass


class OCRProviderError(DigitizationError):
    pass


class FileAccessError(DigitizationError, OSError):
    pass
