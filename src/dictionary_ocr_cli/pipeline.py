from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .config import DigitizerConfig, load_config
from .errors import DigitizationError
from .ocr.base import BaseOCREngine
from .utils.files import ensure_directories, iter_scan_files, read_image_bytes, save_annotation
from .utils.logging import get_logger

logger = get_logger("pipeline")


@dataclass
class FileOutcome:
    source: Path
    output: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchSummary:
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def processed(self) -> List[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> List[FileOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class DictionaryDigitizer:
    """Send each scan to the OCR engine and persist one JSON annotation per image.

    The engine is owned by the caller, which opens it before the batch and
    closes it afterwards.
    """

    def __init__(self, ocr_engine: BaseOCREngine, config: Optional[DigitizerConfig] = None) -> None:
        self.config = config or load_config()
        self.ocr_engine = ocr_engine

    def run(self, image_path: Path) -> Path:
        logger.info("Starting OCR for: %s", image_path.name)
        image_bytes = read_image_bytes(image_path)
        document = self.ocr_engine.annotate(image_bytes, self.config.vision.language_hints)
        output = save_annotation(image_path, self.config.output_dir, document.to_json_dict())
        logger.info("Successfully processed and saved JSON for: %s", image_path.name)
        return output

    def run_batch(self, paths: Optional[Iterable[Path]] = None) -> BatchSummary:
        ensure_directories(self.config.scans_dir, self.config.output_dir)
        if paths is None:
            paths = iter_scan_files(self.config.scans_dir, self.config.image_extensions)
        paths = list(paths)
        summary = BatchSummary()
        if not paths:
            logger.info("No scan files found in %s", self.config.scans_dir)
            return summary

        for path in paths:
            try:
                output = self.run(path)
            except (DigitizationError, OSError) as exc:
                logger.error("Error encountered while processing %s: %s", path.name, exc)
                summary.outcomes.append(FileOutcome(source=path, error=str(exc)))
                continue
            summary.outcomes.append(FileOutcome(source=path, output=output))

        logger.info(
            "Batch complete: %d processed, %d failed",
            len(summary.processed),
            len(summary.failed),
        )
        return summary
