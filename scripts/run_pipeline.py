#!/usr/bin/env python3
"""Run Vision OCR over data/scans and save one JSON annotation per image."""
from __future__ import annotations

from dictionary_ocr_cli.cli import digitize_main


if __name__ == "__main__":
    raise SystemExit(digitize_main())
