import json

import pytest

from conftest import annotation, block, page, word, words_with_confidences, write_json
from dictionary_ocr_cli.annotation import AnnotationStats
from dictionary_ocr_cli.config import DigitizerConfig
from dictionary_ocr_cli.errors import DivisionByZeroError, NoStructuralDataError, NormalizationError
from dictionary_ocr_cli.validation import (
    audit,
    audit_directory,
    audit_file,
    format_failure,
    format_report,
    sample_text,
)


def _stats(mean: float) -> AnnotationStats:
    return AnnotationStats(word_count=10, mean_confidence=mean, flagged_word_count=2, block_count=4)


@pytest.mark.parametrize(
    "mean, passed",
    [(0.90, False), (0.9001, True), (0.5, False), (1.0, True)],
)
def test_pass_threshold_is_strict(mean, passed):
    assert audit(_stats(mean)).passed is passed


def test_report_carries_stats_fields():
    report = audit(_stats(0.95), text_sample="abandon", source="05.json")
    assert report.word_count == 10
    assert report.mean_confidence == 0.95
    assert report.flagged_word_count == 2
    assert report.block_count == 4
    assert report.text_sample == "abandon"
    assert report.source == "05.json"


def test_custom_pass_threshold():
    assert audit(_stats(0.85), pass_threshold=0.8).passed


def test_sample_text_truncates_and_flattens_newlines():
    assert sample_text("a\nb" * 50, length=5) == "a ba "
    assert sample_text(None) is None
    assert sample_text("") is None


def test_format_report_lines():
    rendered = format_report(audit(_stats(0.93126), "abandon (v.)", source="05.json"))
    assert rendered.splitlines() == [
        "FILE AUDIT: 05.json",
        "- Avg Confidence: 0.9313",
        "- Flagged Words: 2 (Under 0.80)",
        "- Layout Blocks: 4",
        "- Status: PASS",
        "- Content Sample: abandon (v.)...",
        "---",
    ]


def test_format_report_without_sample():
    rendered = format_report(audit(_stats(0.5), source="x.json"))
    assert "Content Sample" not in rendered
    assert "- Status: FAIL" in rendered


def test_audit_file_uses_flattened_text_for_sample(tmp_path, dictionary_page):
    path = tmp_path / "05.json"
    write_json(path, {"fullTextAnnotation": dictionary_page})
    report = audit_file(path)
    assert report.source == "05.json"
    assert report.word_count == 4
    assert report.block_count == 2
    assert report.flagged_word_count == 1
    assert report.text_sample == "abandon (v.) رها کردن "
    assert report.passed is False


def test_audit_file_samples_reconstruction_without_text(tmp_path):
    path = tmp_path / "07.json"
    write_json(path, annotation(page(block(word("entry", 0.99)))))
    report = audit_file(path)
    assert report.text_sample == "entry"
    assert report.passed is True


def test_audit_directory_isolates_failures(tmp_path):
    write_json(tmp_path / "01.json", words_with_confidences([0.95, 0.97]))
    write_json(tmp_path / "02.json", {"text": "no structure"})
    write_json(tmp_path / "03.json", {"pages": [{"blocks": []}]})
    (tmp_path / "04.json").write_text("{not json", encoding="utf-8")
    write_json(tmp_path / "05.json", words_with_confidences([0.2]))
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    outcomes = audit_directory(tmp_path, DigitizerConfig())

    assert [outcome.source for outcome in outcomes] == [
        "01.json",
        "02.json",
        "03.json",
        "04.json",
        "05.json",
    ]
    assert outcomes[0].report.passed is True
    assert isinstance(outcomes[1].error, NoStructuralDataError)
    assert isinstance(outcomes[2].error, DivisionByZeroError)
    assert isinstance(outcomes[3].error, NormalizationError)
    # measured and bad is not the same as could not measure
    assert outcomes[4].measured and outcomes[4].report.passed is False
    assert not outcomes[1].measured


def test_format_failure_messages(tmp_path):
    write_json(tmp_path / "02.json", {"text": "no structure"})
    write_json(tmp_path / "03.json", {"pages": [{"blocks": [{"paragraphs": []}]}]})
    outcomes = audit_directory(tmp_path)
    assert "contains no structural 'pages' data" in format_failure(outcomes[0])
    assert "Layout Blocks: 1" in format_failure(outcomes[1])


def test_audit_directory_on_empty_directory(tmp_path):
    assert audit_directory(tmp_path) == []


def test_audit_file_round_trips_saved_payload(tmp_path, dictionary_page):
    path = tmp_path / "page.json"
    path.write_text(json.dumps(dictionary_page), encoding="utf-8")
    assert audit_file(path).word_count == 4


def test_audit_directory_isolates_undecodable_file(tmp_path):
    (tmp_path / "01.json").write_bytes(b'{"text": "\xff\xfe"}')
    write_json(tmp_path / "02.json", words_with_confidences([0.95]))

    outcomes = audit_directory(tmp_path)

    assert [outcome.source for outcome in outcomes] == ["01.json", "02.json"]
    assert isinstance(outcomes[0].error, NormalizationError)
    assert "not UTF-8" in str(outcomes[0].error)
    assert outcomes[1].report.passed is True
