"""Quality auditing of persisted OCR annotations."""

from .audit import (
    AuditOutcome,
    AuditReport,
    audit,
    audit_directory,
    audit_file,
    format_failure,
    format_report,
    sample_text,
)

__all__ = [
    "AuditOutcome",
    "AuditReport",
    "audit",
    "audit_directory",
    "audit_file",
    "format_failure",
    "format_report",
    "sample_text",
]
