"""Utility helpers for logging and file IO."""

from .files import (
    ensure_directories,
    iter_scan_files,
    load_json_file,
    output_path_for,
    read_image_bytes,
    save_annotation,
)
from .logging import configure_logging, get_logger, set_verbosity

__all__ = [
    "ensure_directories",
    "iter_scan_files",
    "load_json_file",
    "output_path_for",
    "read_image_bytes",
    "save_annotation",
    "configure_logging",
    "get_logger",
    "set_verbosity",
]
