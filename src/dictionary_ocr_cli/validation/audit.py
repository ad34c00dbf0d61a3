from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..annotation.normalizer import normalize
from ..annotation.walker import AnnotationStats, aggregate_stats, extract_text
from ..config import DigitizerConfig
from ..errors import DigitizationError, DivisionByZeroError, NoStructuralDataError
from ..utils.files import load_json_file
from ..utils.logging import get_logger

logger = get_logger("validation.audit")

DEFAULT_PASS_THRESHOLD = 0.9
DEFAULT_SAMPLE_LENGTH = 80


@dataclass(frozen=True)
class AuditReport:
    word_count: int
    mean_confidence: float
    flagged_word_count: int
    block_count: int
    passed: bool
    text_sample: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class AuditOutcome:
    """Result of auditing one file: a report, or the reason none was measured."""

    source: str
    report: Optional[AuditReport] = None
    error: Optional[DigitizationError] = None

    @property
    def measured(self) -> bool:
        return self.report is not None


def sample_text(text: Optional[str], length: int = DEFAULT_SAMPLE_LENGTH) -> Optional[str]:
    if not text:
        return None
    return text[:length].replace("\n", " ")


def audit(
    stats: AnnotationStats,
    text_sample: Optional[str] = None,
    pass_threshold: float = DEFAULT_PASS_THRESHOLD,
    source: Optional[str] = None,
) -> AuditReport:
    return AuditReport(
        word_count=stats.word_count,
        mean_confidence=stats.mean_confidence,
        flagged_word_count=stats.flagged_word_count,
        block_count=stats.block_count,
        passed=stats.mean_confidence > pass_threshold,
        text_sample=text_sample,
        source=source,
    )


def format_report(report: AuditReport, flag_threshold: float = 0.8) -> str:
    lines = [
        f"FILE AUDIT: {report.source or '<unknown>'}",
        f"- Avg Confidence: {report.mean_confidence:.4f}",
        f"- Flagged Words: {report.flagged_word_count} (Under {flag_threshold:.2f})",
        f"- Layout Blocks: {report.block_count}",
        f"- Status: {'PASS' if report.passed else 'FAIL'}",
    ]
    if report.text_sample:
        lines.append(f"- Content Sample: {report.text_sample}...")
    lines.append("---")
    return "\n".join(lines)


def format_failure(outcome: AuditOutcome) -> str:
    error = outcome.error
    if isinstance(error, NoStructuralDataError):
        message = f"[!] CRITICAL: {outcome.source} contains no structural 'pages' data."
    elif isinstance(error, DivisionByZeroError):
        blocks = error.tally.block_count if error.tally is not None else 0
        message = (
            f"[!] CRITICAL: {outcome.source} contains no words to score "
            f"(Layout Blocks: {blocks})."
        )
    else:
        message = f"[!] CRITICAL: {outcome.source} could not be audited: {error}"
    return f"{message}\n---"


def audit_file(path: Path, config: Optional[DigitizerConfig] = None) -> AuditReport:
    config = config or DigitizerConfig()
    document = normalize(load_json_file(path))
    stats = aggregate_stats(document, config.flag_threshold)
    # Sample the provider's flattened text when present.
    sample = sample_text(
        document.text or extract_text(document, config.text_source), config.sample_length
    )
    return audit(stats, sample, config.pass_threshold, source=path.name)


def audit_directory(directory: Path, config: Optional[DigitizerConfig] = None) -> List[AuditOutcome]:
    """Audit every JSON file in a directory; one file's failure never stops the rest."""
    config = config or DigitizerConfig()
    outcomes: List[AuditOutcome] = []
    for path in sorted(directory.glob("*.json")):
        try:
            report = audit_file(path, config)
        except DigitizationError as exc:
            logger.debug("Audit of %s failed: %s", path.name, exc)
            outcomes.append(AuditOutcome(source=path.name, error=exc))
            continue
        outcomes.append(AuditOutcome(source=path.name, report=report))
    return outcomes
