# tests/test_reasoner.py
import httpx
import openai
import pytest
from openai import OpenAI
from openai.types.chat import ChatCompletion

from newsbubble.reasoner import ReasonerUnavailable, ReasoningClient


def _completion(content, choices=True):
    return ChatCompletion.model_validate({
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "test-model",
        "choices": [{
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": content},
        }] if choices else [],
    })


def _client_returning(mocker, content):
    client = mocker.MagicMock()
    client.chat.completions.create.return_value = _completion(content)
    return client


def _openai_serving(status, body, content_type):
    def handler(request):
        return httpx.Response(status, content=body.encode(), headers={"content-type": content_type})
    return OpenAI(
        api_key="test",
        base_url="https://gateway.example/v1",
        max_retries=0,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _status_error(code):
    req = httpx.Request("POST", "https://gateway.example/v1/chat/completions")
    resp = httpx.Response(code, request=req, json={"error": {"message": "nope"}})
    return openai.APIStatusError("nope", response=resp, body=None)


def test_complete_returns_message_content(mocker):
    client = _client_returning(mocker, '{"articles": {}}')
    rc = ReasoningClient(model="test-model", timeout=5, client=client)
    assert rc.complete("sys", "usr") == '{"articles": {}}'

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["timeout"] == 5
    assert kwargs["messages"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "usr"}]


def test_empty_content_becomes_empty_string(mocker):
    rc = ReasoningClient(client=_client_returning(mocker, None))
    assert rc.complete("s", "u") == ""


def test_no_choices_becomes_empty_string(mocker):
    client = mocker.MagicMock()
    client.chat.completions.create.return_value = _completion("x", choices=False)
    assert ReasoningClient(client=client).complete("s", "u") == ""


def test_json_completion_over_http_is_read():
    body = _completion('{"articles": {"Sport": []}}').model_dump_json()
    rc = ReasoningClient(client=_openai_serving(200, body, "application/json"))
    assert rc.complete("s", "u") == '{"articles": {"Sport": []}}'


def test_html_page_with_200_is_unavailable():
    rc = ReasoningClient(client=_openai_serving(200, "<html>Bad gateway</html>", "text/html"))
    with pytest.raises(ReasonerUnavailable) as exc:
        rc.complete("s", "u")
    assert "unreadable" in str(exc.value)


@pytest.mark.parametrize("code", [402, 429, 500, 503])
def test_status_errors_become_unavailable(mocker, code):
    client = mocker.MagicMock()
    client.chat.completions.create.side_effect = _status_error(code)
    with pytest.raises(ReasonerUnavailable) as exc:
        ReasoningClient(client=client).complete("s", "u")
    assert exc.value.status_code == code


def test_timeout_becomes_unavailable(mocker):
    client = mocker.MagicMock()
    client.chat.completions.create.side_effect = openai.APITimeoutError(
        request=httpx.Request("POST", "https://gateway.example/v1/chat/completions")
    )
    with pytest.raises(ReasonerUnavailable) as exc:
        ReasoningClient(client=client).complete("s", "u")
    assert exc.value.status_code is None


def test_missing_api_key_is_unavailable_without_network():
    with pytest.raises(ReasonerUnavailable):
        ReasoningClient(api_key="").complete("s", "u")
