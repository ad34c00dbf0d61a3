"""Scan file integrity checks."""

from .scan_headers import ScanInspection, detect_format, format_inspection, inspect_scan, inspect_scans

__all__ = ["ScanInspection", "detect_format", "format_inspection", "inspect_scan", "inspect_scans"]
