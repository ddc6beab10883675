"""Tests for parsing agent replies into speak/stay-silent decisions."""

import pytest

from arena_engine.response_handler import parse_agent_response, strip_json_code_fence


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        '{"should_respond": true, "content": "x"}',
        '```json\n{"should_respond": true, "content": "x"}\n```',
        '```\n{"should_respond": true, "content": "x"}\n```',
        '   {"should_respond": true, "content": "x"}\n',
    ],
)
def test_structured_reply_is_decoded(raw: str) -> None:
    parsed = parse_agent_response(raw)

    assert parsed.should_respond is True
    assert parsed.content == "x"


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["I think you are all wrong.", "  plain text with padding  ", "{not json", "[1, 2, 3]", "42", '"quoted"'],
)
def test_unstructured_reply_falls_back_to_raw_text(raw: str) -> None:
    """Anything that is not a JSON object is treated as something to say."""
    parsed = parse_agent_response(raw)

    assert parsed.should_respond is True
    assert parsed.content == raw.strip()


@pytest.mark.unit
def test_silence_with_non_string_content_defaults_to_empty() -> None:
    parsed = parse_agent_response('{"should_respond": false, "content": 123}')

    assert parsed.should_respond is False
    assert parsed.content == ""


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        '{"content": "hello"}',
        '{"should_respond": "true", "content": "hello"}',
        '{"should_respond": 1, "content": "hello"}',
    ],
)
def test_only_boolean_true_means_respond(raw: str) -> None:
    parsed = parse_agent_response(raw)

    assert parsed.should_respond is False
    assert parsed.content == "hello"


@pytest.mark.unit
def test_deeply_nested_json_does_not_raise() -> None:
    raw = "[" * 100000 + "]" * 100000

    parsed = parse_agent_response(raw)

    assert parsed.should_respond is True


@pytest.mark.unit
def test_strip_json_code_fence_removes_every_marker() -> None:
    assert strip_json_code_fence("```json\n{}\n``` ```") == "{}"


@pytest.mark.unit
@pytest.mark.parametrize("raw", ['"hello"', "42", "null", "true"])
def test_json_scalar_reply_is_spoken_as_raw_text(raw: str) -> None:
    """A valid JSON value that is not an object carries no decision, so the text is spoken."""
    parsed = parse_agent_response(raw)

    assert parsed.should_respond is True
    assert parsed.content == raw
