from header_injector.events import EventConfig, EventKind, EventPublisher, InMemoryEventSink
from header_injector.resolver import HeaderResolver
from header_injector.types import CapturedResponse, HeaderRule, MatchKind, ResolvedHeader


def _resolver(**config):
    sink = InMemoryEventSink()
    publisher = EventPublisher(EventConfig(**config), sinks=[sink])
    return HeaderResolver(events=publisher), sink


def test_static_rules_resolve_verbatim_in_order():
    resolver, _ = _resolver()
    rules = [HeaderRule.static("X-B", "2"), HeaderRule.static("X-A", "1")]

    resolved = resolver.resolve(rules)

    assert resolved == [ResolvedHeader(name="X-B", value="2"), ResolvedHeader(name="X-A", value="1")]


def test_static_empty_value_is_kept():
    resolver, _ = _resolver()

    resolved = resolver.resolve([HeaderRule.static("X-Empty", "")])

    assert resolved == [ResolvedHeader(name="X-Empty", value="")]


def test_disabled_and_blank_rules_are_skipped():
    resolver, sink = _resolver()
    rules = [
        HeaderRule.static("X-Off", "1", enabled=False),
        HeaderRule.dynamic("X-Bad", "(", enabled=False),
        HeaderRule.static("   ", "1"),
        HeaderRule.static("", "1"),
    ]

    resolved = resolver.resolve(rules, [CapturedResponse(body="anything")])

    assert resolved == []
    assert sink.events == []


def test_dynamic_rule_without_responses_is_skipped():
    resolver, sink = _resolver()

    resolved = resolver.resolve([HeaderRule.dynamic("X-Token", r"t=(\w+)")], [])

    assert resolved == []
    assert sink.events == []


def test_dynamic_rule_resolves_extracted_token():
    resolver, sink = _resolver()
    rules = [HeaderRule.dynamic("X-Token", '"token":"', match_kind=MatchKind.LITERAL)]

    resolved = resolver.resolve(rules, [CapturedResponse(body='{"token":"abc"}')])

    assert resolved == [ResolvedHeader(name="X-Token", value="abc")]
    assert sink.kinds() == [EventKind.TOKEN_EXTRACTED]
    assert "value" not in sink.events[0].payload
    assert sink.events[0].payload["length"] == 3


def test_token_value_included_when_configured():
    resolver, sink = _resolver(include_values=True)

    resolver.resolve([HeaderRule.dynamic("X-Token", r"t=(\w+)")], [CapturedResponse(body="t=xyz")])

    assert sink.events[0].payload["value"] == "xyz"


def test_dynamic_rule_without_match_contributes_nothing():
    resolver, sink = _resolver()

    resolved = resolver.resolve(
        [HeaderRule.dynamic("X-Token", r"t=(\w+)")],
        [CapturedResponse(body="nothing")],
    )

    assert resolved == []
    assert sink.kinds() == [EventKind.TOKEN_NOT_FOUND]


def test_invalid_pattern_does_not_block_other_rules():
    resolver, sink = _resolver()
    rules = [
        HeaderRule.dynamic("X-Bad", "token=(\\w+"),
        HeaderRule.static("X-Good", "ok"),
        HeaderRule.dynamic("X-Token", r"t=(\w+)"),
    ]

    resolved = resolver.resolve(rules, [CapturedResponse(body="t=abc")])

    assert resolved == [
        ResolvedHeader(name="X-Good", value="ok"),
        ResolvedHeader(name="X-Token", value="abc"),
    ]
    assert EventKind.PATTERN_INVALID in sink.kinds()
