from __future__ import annotations

import pytest

from conftest import FakeTransport, transport_failure
from quadrant_planner.domain import Intent
from quadrant_planner.errors import IntentParseError, TransportError
from quadrant_planner.orchestrator import IntentClassifier
from quadrant_planner.orchestrator.intent import parse_intent


def test_parses_plain_json():
    result = parse_intent('{"intent": "help"}')

    assert result.intent == "help"
    assert result.known_intent is Intent.HELP
    assert result.missing_info is None


def test_strips_fenced_block():
    content = '```json\n{"intent": "modify_without_info", "missing_info": "the event time"}\n```'

    result = parse_intent(content)

    assert result.known_intent is Intent.MODIFY_WITHOUT_INFO
    assert result.missing_info == "the event time"


def test_unknown_intent_is_preserved():
    result = parse_intent('{"intent": "dance"}')

    assert result.intent == "dance"
    assert result.known_intent is None


@pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"missing_info": "x"}', '{"intent": ""}'])
def test_rejects_malformed_replies(content):
    with pytest.raises(IntentParseError) as excinfo:
        parse_intent(content)

    assert excinfo.value.raw == content
    assert "Failed to parse intent" in str(excinfo.value)


def test_classify_sends_system_and_user_prompt():
    transport = FakeTransport(['{"intent": "suggest_with_info"}'])
    classifier = IntentClassifier(transport)

    result = classifier.classify("I have 4 free hours today", "1. [Gym]")

    assert result.known_intent is Intent.SUGGEST_WITH_INFO
    [messages] = transport.calls
    assert [message["role"] for message in messages] == ["system", "user"]
    assert "I have 4 free hours today" in messages[1]["content"]
    assert "1. [Gym]" in messages[1]["content"]


def test_transport_errors_surface_as_transport_error():
    classifier = IntentClassifier(FakeTransport([transport_failure()]))

    with pytest.raises(TransportError) as excinfo:
        classifier.classify("hello")

    assert "rate_limit_exceeded" in str(excinfo.value)
