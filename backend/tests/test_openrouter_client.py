import json

import pytest
import requests

from backend.caption_service.config import CaptionSettings
from backend.caption_service.errors import (
    ConfigurationError,
    UpstreamResponseError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from backend.caption_service.openrouter_client import OpenRouterClient
from backend.caption_service.prompts import SYSTEM_PROMPT

POST_TARGET = "backend.caption_service.openrouter_client.requests.post"


@pytest.fixture
def or_client(settings):
    return OpenRouterClient(settings)


def test_generate_returns_message_content(or_client, mocker, upstream_response):
    mocker.patch(POST_TARGET, return_value=upstream_response('{"choices":[{"message":{"content":"Hello"}}]}'))
    assert or_client.generate("prompt") == "Hello"


def test_generate_sends_expected_request(or_client, mocker, upstream_response):
    mock_post = mocker.patch(POST_TARGET, return_value=upstream_response('{"choices":[{"content":"x"}]}'))

    or_client.generate("my prompt")

    args, kwargs = mock_post.call_args
    assert args[0] == "https://openrouter.ai/api/v1/chat/completions"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["headers"]["Authorization"] == "Bearer test-key"
    assert "HTTP-Referer" not in kwargs["headers"]
    assert kwargs["timeout"] is None

    payload = json.loads(kwargs["data"])
    assert payload["model"] == "openrouter/auto"
    assert payload["temperature"] == 0.9
    assert payload["max_tokens"] == 400
    assert payload["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "my prompt"},
    ]


def test_generate_sends_attribution_headers_and_timeout(mocker, upstream_response):
    settings = CaptionSettings(
        api_key="k", site_url="https://captions.example", app_title="Caption Generator", timeout=12.5
    )
    mock_post = mocker.patch(POST_TARGET, return_value=upstream_response('{"choices":[{"content":"x"}]}'))

    OpenRouterClient(settings).generate("p")

    kwargs = mock_post.call_args.kwargs
    assert kwargs["headers"]["HTTP-Referer"] == "https://captions.example"
    assert kwargs["headers"]["X-Title"] == "Caption Generator"
    assert kwargs["timeout"] == 12.5


def test_generate_without_key_skips_network(mocker):
    mock_post = mocker.patch(POST_TARGET)
    with pytest.raises(ConfigurationError, match="not configured"):
        OpenRouterClient(CaptionSettings(api_key="")).generate("p")
    mock_post.assert_not_called()


def test_generate_transport_failure(settings, mocker):
    session = mocker.Mock()
    session.post.side_effect = requests.ConnectionError("dns lookup failed")

    with pytest.raises(UpstreamTransportError, match="dns lookup failed"):
        OpenRouterClient(settings, session=session).generate("p")
    session.post.assert_called_once()


def test_generate_error_status_includes_status_and_body(or_client, mocker, upstream_response):
    mocker.patch(
        POST_TARGET,
        return_value=upstream_response('{"error":"boom"}', status_code=500, reason="Internal Server Error"),
    )
    with pytest.raises(UpstreamStatusError) as exc_info:
        or_client.generate("p")

    message = str(exc_info.value)
    assert "500 Internal Server Error" in message
    assert '{"error":"boom"}' in message
    assert exc_info.value.status_code == 500


def test_generate_logs_raw_body(or_client, mocker, upstream_response, caplog):
    mocker.patch(POST_TARGET, return_value=upstream_response('{"error":"boom"}', status_code=502, reason="Bad Gateway"))
    with caplog.at_level("INFO", logger="backend.caption_service.openrouter_client"):
        with pytest.raises(UpstreamStatusError):
            or_client.generate("p")
    assert '{"error":"boom"}' in caplog.text


def test_empty_body(or_client, mocker, upstream_response):
    mocker.patch(POST_TARGET, return_value=upstream_response(""))
    with pytest.raises(UpstreamResponseError, match="empty response"):
        or_client.generate("p")


def test_non_json_body(or_client, mocker, upstream_response):
    mocker.patch(POST_TARGET, return_value=upstream_response("<html>error</html>"))
    with pytest.raises(UpstreamResponseError, match="non-JSON") as exc_info:
        or_client.generate("p")
    assert "<html>error</html>" in str(exc_info.value)


def test_malformed_json_body(or_client):
    with pytest.raises(UpstreamResponseError, match="failed to parse JSON") as exc_info:
        or_client.parse_body('{"choices": [')
    assert exc_info.value.body == '{"choices": ['


def test_no_choices(or_client):
    with pytest.raises(UpstreamResponseError, match="no choices"):
        or_client.parse_body('{"choices":[]}')


def test_null_choice_has_no_content(or_client):
    with pytest.raises(UpstreamResponseError, match="no content field"):
        or_client.parse_body('{"choices":[null]}')


def test_top_level_array_has_no_choices(or_client):
    with pytest.raises(UpstreamResponseError, match="no choices"):
        or_client.parse_body("[1, 2, 3]")


def test_all_candidate_fields_empty(or_client):
    body = '{"choices":[{"message":{"content":""},"delta":{},"content":""}]}'
    with pytest.raises(UpstreamResponseError, match="no content field") as exc_info:
        or_client.parse_body(body)
    assert body in str(exc_info.value)


@pytest.mark.parametrize("body, expected", [
    ('{"choices":[{"message":{"content":"Hello"}}]}', "Hello"),
    ('{"choices":[{"delta":{"content":"World"}}]}', "World"),
    ('{"choices":[{"content":"Flat"}]}', "Flat"),
])
def test_parse_body_shapes(or_client, body, expected):
    assert or_client.parse_body(body) == expected
