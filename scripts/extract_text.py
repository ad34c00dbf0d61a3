#!/usr/bin/env python3
"""
Print the plain text of a Vision output JSON file.

    python scripts/extract_text.py data/output/05.json
"""
from __future__ import annotations

from dictionary_ocr_cli.cli import extract_text_main


if __name__ == "__main__":
    raise SystemExit(extract_text_main())
