import pytest

from infra.llm.parsing import extract_json_payload, parse_evaluation_payload

FENCED = '```json\n{"score":80,"summary":"Solid"}\n```'


def test_fenced_block_extracts_inner_object():
    assert extract_json_payload(FENCED) == '{"score":80,"summary":"Solid"}'


def test_untagged_fence_and_surrounding_prose():
    assert extract_json_payload('```\n{"a": 1}\n```') == '{"a": 1}'
    assert extract_json_payload('Here you go: {"a": {"b": 2}} thanks') == '{"a": {"b": 2}}'


def test_text_without_object_is_returned_trimmed():
    assert extract_json_payload("  not json  ") == "not json"
    assert extract_json_payload("} before {") == "} before {"


@pytest.mark.parametrize("text", [
    FENCED,
    '{"score": 1}',
    "prefix {x} suffix",
    "```json\n```",
    "plain",
    "",
    '```json\n  noise {"score": 5} tail\n```',
])
def test_extraction_is_idempotent(text):
    once = extract_json_payload(text)
    assert extract_json_payload(once) == once


def test_payload_coerces_and_defaults():
    payload = parse_evaluation_payload(
        '{"score": "82.5", "summary": "  Good fit  ", "strengths": "Clear writing",'
        ' "risks": null, "keywordMatches": ['
        '{"keyword": "react", "matched": "TRUE", "source": "resume"},'
        '{"keyword": "sql", "matched": false, "source": "elsewhere"},'
        '{"keyword": "  ", "matched": true}, "junk"]}'
    )
    assert payload.rounded_score() == 83
    assert payload.summary == "Good fit"
    assert payload.strengths == ["Clear writing"]
    assert payload.risks == []
    assert [(m.keyword, m.matched, m.source) for m in payload.keyword_matches] == [
        ("react", True, "resume"),
        ("sql", False, "answers"),
    ]


def test_keyword_matches_absent_when_missing_or_empty():
    assert parse_evaluation_payload('{"score": 70, "summary": "ok"}').keyword_matches is None
    assert parse_evaluation_payload(
        '{"score": 70, "summary": "ok", "keywordMatches": []}').keyword_matches is None


def test_out_of_range_scores_are_clamped():
    assert parse_evaluation_payload('{"score": 130, "summary": "x"}').rounded_score() == 100
    assert parse_evaluation_payload('{"score": -4, "summary": "x"}').rounded_score() == 0


@pytest.mark.parametrize("raw", [
    "",
    "   ",
    "not json at all",
    "[1, 2, 3]",
    '{"summary": "missing score"}',
    '{"score": "high", "summary": "x"}',
    '{"score": "NaN", "summary": "x"}',
    '{"score": null, "summary": "x"}',
    '{"score": "", "summary": "x"}',
    '{"score": [80], "summary": "x"}',
    '{"score": 70, "summary": "   "}',
    '{"score": 70}',
])
def test_invalid_payloads_raise_value_error(raw):
    with pytest.raises(ValueError):
        parse_evaluation_payload(raw)
