import pytest

from header_injector.events import EventKind, EventPublisher, InMemoryEventSink
from header_injector.extractor import (
    InvalidPatternError,
    TokenExtractor,
    compile_pattern,
    read_token,
)
from header_injector.types import CapturedResponse, ExtractionRule, MatchKind


def _regex(pattern: str) -> ExtractionRule:
    return ExtractionRule(pattern=pattern, match_kind=MatchKind.REGEX)


def _literal(pattern: str) -> ExtractionRule:
    return ExtractionRule(pattern=pattern, match_kind=MatchKind.LITERAL)


def _responses(*bodies):
    return [CapturedResponse(body=body) for body in bodies]


def _extractor():
    sink = InMemoryEventSink()
    return TokenExtractor(EventPublisher(sinks=[sink])), sink


def test_regex_returns_match_from_later_response_when_first_misses():
    extractor, _ = _extractor()

    token = extractor.extract(_regex(r"token=(\w+)"), _responses("nothing here", "token=beta"))

    assert token == "beta"


def test_regex_first_matching_response_wins():
    extractor, _ = _extractor()

    token = extractor.extract(_regex(r"token=(\w+)"), _responses("token=alpha", "token=beta"))

    assert token == "alpha"


def test_regex_prefers_first_capture_group():
    extractor, _ = _extractor()

    assert extractor.extract(_regex(r"id:(\d+)"), _responses("id:42")) == "42"


def test_regex_without_group_returns_whole_match():
    extractor, _ = _extractor()

    assert extractor.extract(_regex(r"id:\d+"), _responses("id:42")) == "id:42"


def test_regex_dot_matches_newlines():
    extractor, _ = _extractor()
    body = '<input name="csrf"\n       value="s3cr3t">'

    token = extractor.extract(_regex(r'name="csrf".*?value="([^"]+)"'), _responses(body))

    assert token == "s3cr3t"


def test_regex_empty_match_keeps_searching():
    extractor, _ = _extractor()

    token = extractor.extract(_regex(r"token=(\w*)"), _responses("token=", "token=later"))

    assert token == "later"


def test_regex_unmatched_optional_group_keeps_searching():
    extractor, _ = _extractor()

    token = extractor.extract(_regex(r"sid(?:=(\w+))?"), _responses("sid", "sid=abc"))

    assert token == "abc"


def test_regex_no_match_returns_none():
    extractor, _ = _extractor()

    assert extractor.extract(_regex(r"token=(\w+)"), _responses("a", "b")) is None


def test_invalid_regex_reports_error_and_returns_none():
    extractor, sink = _extractor()

    token = extractor.extract(_regex("token=(\\w+"), _responses("token=abc"), header="X-Token")

    assert token is None
    assert sink.kinds() == [EventKind.PATTERN_INVALID]
    assert sink.events[0].header == "X-Token"


def test_compile_pattern_raises_invalid_pattern_error():
    with pytest.raises(InvalidPatternError) as excinfo:
        compile_pattern("[unclosed")

    assert excinfo.value.pattern == "[unclosed"
    assert isinstance(excinfo.value, ValueError)


def test_literal_stops_at_delimiter():
    extractor, _ = _extractor()

    token = extractor.extract(_literal('"token":"'), _responses('{"token":"abc123","user":1}'))

    assert token == "abc123"


@pytest.mark.parametrize(
    "body, expected",
    [
        ("key=abc def", "abc"),
        ("key=abc\nrest", "abc"),
        ("key=abc}", "abc"),
        ("key=abc]", "abc"),
        ("key=abc", "abc"),
    ],
)
def test_literal_delimiters(body, expected):
    extractor, _ = _extractor()

    assert extractor.extract(_literal("key="), _responses(body)) == expected


def test_literal_match_at_end_of_body_returns_empty_string():
    extractor, _ = _extractor()

    token = extractor.extract(_literal("x="), _responses("x=", "x=later"))

    assert token == ""


def test_literal_empty_token_before_delimiter_keeps_searching():
    extractor, _ = _extractor()

    token = extractor.extract(_literal("x="), _responses("x=,y", "x=found"))

    assert token == "found"


def test_literal_is_case_sensitive():
    extractor, _ = _extractor()

    assert extractor.extract(_literal("Token="), _responses("token=abc")) is None


def test_missing_bodies_are_skipped():
    extractor, sink = _extractor()
    responses = [None, CapturedResponse(body=None), CapturedResponse(body=b"token=bytes")]

    token = extractor.extract(_regex(r"token=(\w+)"), responses)

    assert token == "bytes"
    assert sink.events == []


def test_all_bodies_missing_reports_once():
    extractor, sink = _extractor()

    token = extractor.extract(_literal("x="), [None, CapturedResponse(body=None), None])

    assert token is None
    assert sink.kinds() == [EventKind.RESPONSE_MISSING_BODY]


def test_read_token_helper():
    assert read_token('abc"def', 0) == "abc"
    assert read_token("abc", 3) == ""


@pytest.mark.parametrize("space", ["\u00a0", "\u2007", "\u202f"])
def test_literal_keeps_non_breaking_spaces_in_token(space):
    extractor, _ = _extractor()

    token = extractor.extract(_literal("key="), _responses(f"key=ab{space}cd next"))

    assert token == f"ab{space}cd"


def test_literal_stops_at_other_unicode_whitespace():
    extractor, _ = _extractor()

    assert extractor.extract(_literal("key="), _responses("key=ab\u2003cd")) == "ab"
