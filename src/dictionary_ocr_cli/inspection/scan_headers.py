from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..utils.logging import get_logger

logger = get_logger("inspection.scan_headers")

HEADER_BYTES = 4

MAGIC_NUMBERS: Dict[str, Tuple[str, ...]] = {
    "JPEG": ("ffd8",),
    "PNG": ("89504e47",),
    "TIFF": ("49492a00", "4d4d002a"),
    "PDF": ("25504446",),
}

EXTENSION_FORMATS: Dict[str, str] = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


@dataclass(frozen=True)
class ScanInspection:
    path: Path
    header_hex: str
    size_mb: float
    expected_format: Optional[str]
    detected_format: Optional[str]
    decoded_format: Optional[str] = None
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        if self.error or self.expected_format is None:
            return False
        return self.detected_format == self.expected_format == self.decoded_format


def detect_format(header_hex: str) -> Optional[str]:
    for fmt, prefixes in MAGIC_NUMBERS.items():
        if any(header_hex.startswith(prefix) for prefix in prefixes):
            return fmt
    return None


def _decoded_format(path: Path) -> Optional[str]:
    try:
        with Image.open(path) as image:
            fmt = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        logger.debug("Pillow could not decode %s: %s", path.name, exc)
        return None
    return fmt


def inspect_scan(path: Path) -> ScanInspection:
    """
    Compare a scan's leading bytes with the format its extension claims.

    Mislabeled files (a PDF or PNG saved as ``.jpg``, an HTML error page from
    a download) are a common cause of empty OCR results.
    """
    expected = EXTENSION_FORMATS.get(path.suffix.lower())
    try:
        with path.open("rb") as handle:
            header = handle.read(HEADER_BYTES)
        size_mb = path.stat().st_size / (1024 * 1024)
    except OSError as exc:
        return ScanInspection(
            path=path,
            header_hex="",
            size_mb=0.0,
            expected_format=expected,
            detected_format=None,
            error=f"Could not read file: {exc}",
        )

    header_hex = header.hex()
    return ScanInspection(
        path=path,
        header_hex=header_hex,
        size_mb=round(size_mb, 2),
        expected_format=expected,
        detected_format=detect_format(header_hex),
        decoded_format=_decoded_format(path),
    )


def inspect_scans(paths: Iterable[Path]) -> List[ScanInspection]:
    return [inspect_scan(path) for path in paths]


def format_inspection(inspection: ScanInspection) -> str:
    lines = [f"FILE: {inspection.path.name}"]
    if inspection.error:
        lines.append(f"- [!] CRITICAL: {inspection.error}")
        lines.append("---")
        return "\n".join(lines)
    lines.append(f"- Detected Hex Header: {inspection.header_hex}")
    lines.append(f"- File Size: {inspection.size_mb:.2f} MB")
    if inspection.valid:
        lines.append(f"- [VALID] This is a legitimate {inspection.expected_format} binary.")
    else:
        actual = inspection.detected_format or "unknown"
        lines.append(
            f"- [INVALID] Header {inspection.header_hex} is {actual}, "
            f"expected {inspection.expected_format or 'a supported image'}."
        )
    lines.append("---")
    return "\n".join(lines)
