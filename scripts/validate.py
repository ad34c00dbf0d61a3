#!/usr/bin/env python3
"""Audit confidence and layout blocks for every JSON file in data/output."""
from __future__ import annotations

from dictionary_ocr_cli.cli import validate_main


if __name__ == "__main__":
    raise SystemExit(validate_main())
