from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from ..errors import FileAccessError, NormalizationError

SUPPORTED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".tiff")


def ensure_directories(*directories: Path) -> None:
    """Create any missing working directories."""
    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def iter_scan_files(
    scans_dir: Path, extensions: Iterable[str] = SUPPORTED_IMAGE_EXTENSIONS
) -> List[Path]:
    """
    Return the scan images in a directory, sorted by name.

    Only files whose suffix is in the allow-list are returned; an unreadable or
    missing directory yields an empty list.
    """
    allowed = {ext.lower() for ext in extensions}
    scans_dir = scans_dir.expanduser()
    try:
        entries = sorted(scans_dir.iterdir())
    except OSError:
        return []
    return [path for path in entries if path.is_file() and path.suffix.lower() in allowed]


def output_path_for(image_path: Path, output_dir: Path) -> Path:
    return output_dir / f"{image_path.stem}.json"


def save_annotation(image_path: Path, output_dir: Path, payload: Mapping[str, Any]) -> Path:
    """
    Write an OCR payload to ``<output_dir>/<image stem>.json``.

    Non-ASCII text (Farsi entries) is written as-is in UTF-8.
    """
    target = output_path_for(image_path, output_dir)
    target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return target


def read_image_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FileAccessError(f"Unable to read image: {path} ({exc})") from exc


def load_json_file(path: Path) -> Any:
    """Read and parse one JSON file, raising typed errors for the CLI boundary."""
    path = path.expanduser()
    if not path.is_file():
        raise FileAccessError(f"File not found: {path}")
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileAccessError(f"Unable to read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise NormalizationError(f"{path.name} is not UTF-8 encoded: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise NormalizationError(f"{path.name} is not valid JSON: {exc}") from exc
