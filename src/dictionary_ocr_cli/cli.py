from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv

from .annotation import TextSource, extract_text, normalize
from .config import DigitizerConfig, VisionConfig, load_config
from .errors import DigitizationError
from .inspection import format_inspection, inspect_scans
from .ocr.base import BaseOCREngine
from .ocr.vision_client import VisionOCREngine
from .pipeline import DictionaryDigitizer
from .utils.files import iter_scan_files, load_json_file, read_image_bytes
from .utils.logging import get_logger, set_verbosity
from .validation import audit_directory, format_failure, format_report

logger = get_logger("cli")

EngineFactory = Callable[[VisionConfig], BaseOCREngine]


def _base_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to config.yaml",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )
    return parser


def _setup(args: argparse.Namespace) -> DigitizerConfig:
    load_dotenv()
    set_verbosity(args.verbose)
    return load_config(args.config)


def extract_text_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Print the plain text of a Vision OCR JSON file.")
    parser.add_argument("path", type=Path, help="Path to a Vision output JSON file.")
    parser.add_argument(
        "--text-source",
        choices=[source.value for source in TextSource],
        default=None,
        help="Rebuild text from the layout hierarchy or trust the flattened text field.",
    )
    args = parser.parse_args(argv)
    config = _setup(args)

    if not args.path.expanduser().is_file():
        parser.error(f"file not found: {args.path}")

    try:
        document = normalize(load_json_file(args.path))
    except DigitizationError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1

    source = TextSource(args.text_source) if args.text_source else config.text_source
    text = extract_text(document, source)
    sys.stdout.write(text)
    if text:
        sys.stdout.write("\n")
    return 0


def validate_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Audit OCR confidence and layout of every JSON file in the output directory.")
    args = parser.parse_args(argv)
    config = _setup(args)

    output_dir = config.output_dir
    if not output_dir.is_dir():
        print(f'Failure: The "{output_dir}" directory does not exist.', file=sys.stderr)
        return 0

    outcomes = audit_directory(output_dir, config)
    if not outcomes:
        print(f"Empty: No JSON files found in {output_dir}.", file=sys.stderr)
        return 0

    print(f"Auditing {len(outcomes)} files...\n")
    for outcome in outcomes:
        if outcome.report is not None:
            print(format_report(outcome.report, config.flag_threshold))
        else:
            print(format_failure(outcome))
    return 0 if all(outcome.measured for outcome in outcomes) else 1


def digitize_main(
    argv: Optional[List[str]] = None, engine_factory: Optional[EngineFactory] = None
) -> int:
    parser = _base_parser("Run OCR on every scan and save one JSON annotation per image.")
    args = parser.parse_args(argv)
    config = _setup(args)
    factory = engine_factory or VisionOCREngine.from_config

    try:
        with factory(config.vision) as engine:
            summary = DictionaryDigitizer(engine, config).run_batch()
    except Exception as exc:
        logger.error("The digitization process encountered a fatal error: %s", exc)
        return 1

    print(
        f"All tasks complete. {len(summary.processed)} processed, "
        f"{len(summary.failed)} failed. Connection closed."
    )
    return 1 if summary.failed else 0


def inspect_scans_main(argv: Optional[List[str]] = None) -> int:
    parser = _base_parser("Check that each scan's header bytes match its file extension.")
    args = parser.parse_args(argv)
    config = _setup(args)

    files = iter_scan_files(config.scans_dir, config.image_extensions)
    print(f"Inspecting {len(files)} file headers...\n")
    inspections = inspect_scans(files)
    for inspection in inspections:
        print(format_inspection(inspection))
    return 0 if all(inspection.valid for inspection in inspections) else 1


def debug_scan_main(
    argv: Optional[List[str]] = None, engine_factory: Optional[EngineFactory] = None
) -> int:
    parser = _base_parser("Ask Vision what it sees in one scan (text and image properties).")
    parser.add_argument("image", help="Scan file name in the scans directory, or a path.")
    args = parser.parse_args(argv)
    config = _setup(args)

    path = Path(args.image).expanduser()
    if not path.is_file():
        path = config.scans_dir / args.image
    if not path.is_file():
        print(f"[!] Error: File not found at {path}", file=sys.stderr)
        return 1

    factory = engine_factory or VisionOCREngine.from_config
    print(f"--- DEBUGGING: {path.name} ---")
    try:
        with factory(config.vision) as engine:
            diagnostics = engine.diagnose(read_image_bytes(path))
    except Exception as exc:
        print(f"- Request Failed: {exc}", file=sys.stderr)
        return 1

    if diagnostics.error:
        print(f"API Error: {diagnostics.error}", file=sys.stderr)
        return 1
    if diagnostics.looks_blank:
        print("- [!] WARNING: No dominant colors detected. Vision might be seeing a blank image.")
    else:
        print(f"- Dominant Colors Found: {diagnostics.dominant_colors}")
        if diagnostics.sample_rgb is not None:
            red, green, blue = diagnostics.sample_rgb
            print(f"- Sample Color (RGB): R:{red:g}, G:{green:g}, B:{blue:g}")
    if diagnostics.has_text:
        print(f"- [!] SUCCESS: Found {diagnostics.text_length} characters.")
    else:
        print("- [!] RESULT: No text detected in fullTextAnnotation.")
    return 0
