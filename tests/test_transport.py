from __future__ import annotations

from dataclasses import replace
from types import SimpleNamespace

import httpx
import openai
import pytest

from quadrant_planner.llm import ChatTransport, TransportErrorKind
from quadrant_planner.llm.transport import KIND_MESSAGES

REQUEST = httpx.Request("POST", "https://api.example.com/v1/chat/completions")
MESSAGES = [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}]


def _completion(content="Hello!"):
    return SimpleNamespace(
        id="chatcmpl-1",
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=3, completion_tokens=2, total_tokens=5),
    )


class FakeClient:
    def __init__(self, outcome):
        self.outcome = outcome
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _transport(settings, outcome):
    clients = []

    def factory(config):
        client = FakeClient(outcome)
        clients.append((config, client))
        return client

    return ChatTransport(settings, client_factory=factory), clients


def _status_error(status, body=None):
    response = httpx.Response(status, request=REQUEST)
    return openai.APIStatusError("upstream said no", response=response, body=body)


def test_successful_call_returns_content_and_sends_payload(app_settings):
    transport, clients = _transport(app_settings.llm, _completion("Sure."))

    result = transport.send(MESSAGES)

    assert result.error is False
    assert result.content == "Sure."
    [(_, client)] = clients
    assert client.requests == [
        {"model": "deepseek-chat", "messages": MESSAGES, "temperature": 0.7, "top_p": 1.0}
    ]


@pytest.mark.parametrize(
    "status,kind",
    [
        (400, TransportErrorKind.BAD_REQUEST),
        (401, TransportErrorKind.AUTH_FAILED),
        (402, TransportErrorKind.INSUFFICIENT_BALANCE),
        (422, TransportErrorKind.INVALID_PARAMS),
        (429, TransportErrorKind.RATE_LIMITED),
        (500, TransportErrorKind.SERVER_ERROR),
        (503, TransportErrorKind.OVERLOADED),
    ],
)
def test_status_codes_map_to_taxonomy(app_settings, status, kind):
    transport, _ = _transport(app_settings.llm, _status_error(status))

    result = transport.send(MESSAGES)

    assert result.error is True
    assert result.kind is kind
    assert result.content == f"unknown: {KIND_MESSAGES[kind]}"


def test_provider_error_code_prefixes_message(app_settings):
    body = {"error": {"code": "rate_limit_exceeded", "message": "Slow down"}}
    transport, _ = _transport(app_settings.llm, _status_error(429, body))

    result = transport.send(MESSAGES)

    assert result.content.startswith("rate_limit_exceeded: ")
    assert result.error_detail == "Slow down"


def test_unmapped_status_is_unknown(app_settings):
    transport, _ = _transport(app_settings.llm, _status_error(418))

    result = transport.send(MESSAGES)

    assert result.kind is TransportErrorKind.UNKNOWN
    assert result.content == "unknown: upstream said no"


@pytest.mark.parametrize(
    "exc,kind",
    [
        (openai.APITimeoutError(request=REQUEST), TransportErrorKind.TIMEOUT),
        (openai.APIConnectionError(request=REQUEST), TransportErrorKind.CONNECTION),
        (RuntimeError("socket on fire"), TransportErrorKind.UNKNOWN),
    ],
)
def test_network_failures_never_raise(app_settings, exc, kind):
    transport, _ = _transport(app_settings.llm, exc)

    result = transport.send(MESSAGES)

    assert result.error is True
    assert result.kind is kind


def test_missing_api_key_short_circuits(app_settings):
    transport, clients = _transport(replace(app_settings.llm, api_key=None), _completion())

    result = transport.send(MESSAGES)

    assert result.kind is TransportErrorKind.NOT_CONFIGURED
    assert "OPENAI_API_KEY" in result.error_detail
    assert clients == []
    assert transport.has_api_key() is False


def test_config_changes_rebuild_the_client(app_settings):
    transport, clients = _transport(app_settings.llm, _completion())

    transport.send(MESSAGES)
    transport.send(MESSAGES)
    transport.update_config(model="deepseek-reasoner", temperature="0.2")
    transport.send(MESSAGES)

    assert len(clients) == 2
    config, client = clients[1]
    assert config.model == "deepseek-reasoner"
    assert client.requests[0]["temperature"] == 0.2


def test_refresh_config_reloads_from_loader(app_settings):
    current = {"settings": app_settings.llm}
    transport = ChatTransport(config_loader=lambda: current["settings"], client_factory=FakeClient)

    current["settings"] = replace(app_settings.llm, model="other-model")

    assert transport.current_config().model == "deepseek-chat"
    assert transport.refresh_config().model == "other-model"


def test_default_client_has_no_retries_and_bounded_timeout(app_settings):
    client = ChatTransport._build_client(app_settings.llm)

    assert client.max_retries == 0
    assert client.timeout == 30.0
    assert "api.example.com" in str(client.base_url)


def test_malformed_messages_are_reported_not_raised(app_settings):
    transport, clients = _transport(app_settings.llm, _completion())

    result = transport.send([{"content": "no role"}])

    assert result.error is True
    assert result.kind is TransportErrorKind.UNKNOWN
    assert clients == []
