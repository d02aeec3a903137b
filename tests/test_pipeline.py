from __future__ import annotations

from datetime import date

import pytest

from conftest import NOW, FakeTransport, transport_failure
from quadrant_planner.core import EventStore
from quadrant_planner.domain import CommandStatus
from quadrant_planner.orchestrator import CommandExecutor, CommandPipeline


@pytest.fixture
def pipeline(store, fake_transport):
    return CommandPipeline(
        fake_transport,
        store,
        executor=CommandExecutor(store, clock=lambda: NOW),
        today=lambda: date(2025, 6, 18),
    )


def _records(store: EventStore):
    return [event.to_record() for event in store.list_all()]


def test_help_request_returns_model_answer(pipeline, fake_transport):
    fake_transport.queue({"intent": "help"}, "Drag events between quadrants or type a command.")

    outcome = pipeline.process_command("如何使用本应用")

    assert outcome.status is CommandStatus.SUCCESS
    assert outcome.message == "Drag events between quadrants or type a command."
    assert len(fake_transport.calls) == 2
    assert "如何使用本应用" in fake_transport.calls[1][1]["content"]


def test_delete_command_end_to_end(pipeline, fake_transport, store, weekly_sync):
    fake_transport.queue(
        '```json\n{"intent": "modify_with_info"}\n```',
        [{"operation": "delete", "event": {"id": "evt_x"}}],
    )

    outcome = pipeline.process_command("删除周报会议")

    assert outcome.status is CommandStatus.SUCCESS
    assert outcome.data == [{"operation": "delete", "event": {"id": "evt_x"}}]
    assert outcome.events == []
    assert store.get("evt_x") is None
    # The schedule sent to the model is rendered from the store when not supplied.
    assert "[Weekly report meeting]" in fake_transport.calls[0][1]["content"]


def test_malformed_intent_reply_is_an_error(pipeline, fake_transport, store, weekly_sync):
    before = _records(store)
    fake_transport.queue("not json")

    outcome = pipeline.process_command("删除周报会议")

    assert outcome.status is CommandStatus.ERROR
    assert "Failed to parse intent" in outcome.message
    assert _records(store) == before


def test_invalid_batch_reports_error_with_listing(pipeline, fake_transport, store, weekly_sync):
    fake_transport.queue({"intent": "modify_with_info"}, [{"operation": "add", "event": {}}])

    outcome = pipeline.process_command("add something")

    assert outcome.status is CommandStatus.ERROR
    assert outcome.message.startswith("Execution failed")
    assert [event.id for event in outcome.events] == ["evt_x"]


def test_suggestion_without_free_time_needs_more_info(pipeline, fake_transport):
    fake_transport.queue({"intent": "suggest_without_info"})

    outcome = pipeline.process_command("What should I do today?")

    assert outcome.status is CommandStatus.NEED_MORE_INFO
    assert outcome.missing_info == "free time"
    assert len(fake_transport.calls) == 1


def test_modification_without_info_carries_missing_field(pipeline, fake_transport):
    fake_transport.queue({"intent": "modify_without_info", "missing_info": "the meeting time"})

    outcome = pipeline.process_command("Add a meeting")

    assert outcome.status is CommandStatus.NEED_MORE_INFO
    assert outcome.missing_info == "the meeting time"
    assert outcome.to_dict()["missingInfo"] == "the meeting time"


def test_suggestion_with_free_time_uses_schedule(pipeline, fake_transport):
    fake_transport.queue({"intent": "suggest_with_info"}, "Start with the report.")

    outcome = pipeline.process_command("I have 4 free hours today", schedule_text="1. [Report]")

    assert outcome.status is CommandStatus.SUCCESS
    assert outcome.message == "Start with the report."
    prompt = fake_transport.calls[1][1]["content"]
    assert "1. [Report]" in prompt
    assert "2025-06-18" in prompt


def test_unknown_intent_is_an_error(pipeline, fake_transport):
    fake_transport.queue({"intent": "dance"})

    outcome = pipeline.process_command("Let's dance")

    assert outcome.status is CommandStatus.ERROR
    assert outcome.message == "Unrecognized intent: dance"


@pytest.mark.parametrize("replies", [[transport_failure()], [{"intent": "help"}, transport_failure()]])
def test_transport_errors_short_circuit(pipeline, fake_transport, replies):
    fake_transport.queue(*replies)

    outcome = pipeline.process_command("help me")

    assert outcome.status is CommandStatus.ERROR
    assert "rate_limit_exceeded" in outcome.message


def test_unexpected_exceptions_never_escape(store):
    class _ExplodingTransport(FakeTransport):
        def send(self, messages):
            raise KeyError("boom")

    outcome = CommandPipeline(_ExplodingTransport(), store).process_command("hello")

    assert outcome.status is CommandStatus.ERROR
    assert outcome.message == "Something went wrong while processing the command."


def test_empty_command_is_rejected_without_calling_the_model(pipeline, fake_transport):
    outcome = pipeline.process_command("   ")

    assert outcome.status is CommandStatus.ERROR
    assert fake_transport.calls == []
