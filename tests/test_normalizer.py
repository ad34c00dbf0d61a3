import pytest

from conftest import annotation, block, page, word
from dictionary_ocr_cli.annotation import AnnotationShape, normalize, unwrap_annotation
from dictionary_ocr_cli.errors import EmptyResponseListError, NormalizationError


@pytest.fixture
def canonical():
    return annotation(page(block(word("lexicon", 0.97))), text="lexicon")


def test_all_wrapper_shapes_normalize_identically(canonical):
    shapes = [
        canonical,
        {"fullTextAnnotation": canonical},
        {"responses": [canonical]},
        {"responses": [{"fullTextAnnotation": canonical}]},
    ]
    documents = [normalize(raw) for raw in shapes]
    assert all(document == documents[0] for document in documents)
    assert documents[0].text == "lexicon"
    assert len(documents[0].pages) == 1


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"text": "a"}, AnnotationShape.CANONICAL),
        ({"fullTextAnnotation": {"text": "a"}}, AnnotationShape.FULL_TEXT_ANNOTATION),
        ({"responses": [{"text": "a"}]}, AnnotationShape.RESPONSE),
        (
            {"responses": [{"fullTextAnnotation": {"text": "a"}}]},
            AnnotationShape.RESPONSE_FULL_TEXT_ANNOTATION,
        ),
    ],
)
def test_unwrap_reports_detected_shape(raw, expected):
    shape, payload = unwrap_annotation(raw)
    assert shape is expected
    assert payload == {"text": "a"}


def test_text_only_document_has_no_pages():
    document = normalize({"text": "hello"})
    assert document.text == "hello"
    assert document.pages == ()
    assert not document.has_structure


def test_null_full_text_annotation_falls_back_to_root():
    document = normalize({"fullTextAnnotation": None, "text": "root"})
    assert document.text == "root"


def test_response_with_empty_page_list():
    raw = {"responses": [{"fullTextAnnotation": {"pages": [{"blocks": []}]}}]}
    document = normalize(raw)
    assert len(document.pages) == 1
    assert document.pages[0].blocks == ()


def test_empty_responses_list_fails():
    with pytest.raises(EmptyResponseListError):
        normalize({"responses": []})


def test_empty_responses_is_a_normalization_error():
    with pytest.raises(NormalizationError):
        normalize({"responses": []})


@pytest.mark.parametrize("raw", [None, [], "text", 3, [{"text": "a"}]])
def test_non_object_input_fails(raw):
    with pytest.raises(NormalizationError):
        normalize(raw)


def test_non_object_response_entry_fails():
    with pytest.raises(NormalizationError):
        normalize({"responses": ["oops"]})


def test_non_object_full_text_annotation_fails():
    with pytest.raises(NormalizationError):
        normalize({"fullTextAnnotation": "oops"})


def test_malformed_hierarchy_fails():
    with pytest.raises(NormalizationError):
        normalize({"pages": [{"blocks": [{"paragraphs": [{"words": [{"confidence": "high"}]}]}]}]})


def test_non_list_responses_is_ignored():
    document = normalize({"responses": "not-a-list", "text": "kept"})
    assert document.text == "kept"


def test_unknown_provider_fields_are_kept(canonical):
    canonical["pages"][0]["width"] = 2480
    canonical["pages"][0]["blocks"][0]["boundingBox"] = {"vertices": [{"x": 1, "y": 2}]}
    document = normalize(canonical)
    dumped = document.to_json_dict()
    assert dumped["pages"][0]["width"] == 2480
    assert dumped["pages"][0]["blocks"][0]["boundingBox"] == {"vertices": [{"x": 1, "y": 2}]}
