"""Chat proxy: request shape, reply extraction and error passthrough."""

import json

import httpx
import pytest

from cognicanvas.services.chat_service import extract_content


def _reply(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


async def test_forwards_exact_request(client, chat_upstream):
    requests = chat_upstream(lambda request: _reply("A limit describes..."))

    response = await client.post("/api/chat", json={"message": "What is a limit?"})

    assert response.status_code == 200
    assert response.json() == {"content": "A limit describes..."}
    assert len(requests) == 1
    sent = requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://api.groq.com/openai/v1/chat/completions"
    assert sent.headers["Authorization"] == "Bearer test-key"
    assert sent.headers["Content-Type"] == "application/json"
    assert json.loads(sent.content) == {
        "model": "llama-3.3-70b-versatile",
        "messages": [{"role": "user", "content": "What is a limit?"}],
    }


async def test_each_message_is_sent_alone(client, chat_upstream):
    requests = chat_upstream(lambda request: _reply("ok"))

    await client.post("/api/chat", json={"message": "first"})
    await client.post("/api/chat", json={"message": "second"})

    assert [json.loads(r.content)["messages"] for r in requests] == [
        [{"role": "user", "content": "first"}],
        [{"role": "user", "content": "second"}],
    ]


async def test_upstream_error_status_passes_through(client, chat_upstream):
    requests = chat_upstream(lambda request: httpx.Response(429, text="rate limited"))

    response = await client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 429
    assert response.json() == {"error": "API error 429: rate limited"}
    assert len(requests) == 1


async def test_missing_api_key(client, chat_upstream):
    requests = chat_upstream(lambda request: _reply("never"), api_key=None)

    response = await client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Groq API key is not configured on the server."}
    assert requests == []


async def test_transport_failure(client, chat_upstream):
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    chat_upstream(fail)

    response = await client.post("/api/chat", json={"message": "hi"})

    assert response.status_code == 500
    assert "error" in response.json()


async def test_empty_message_rejected(client, chat_upstream):
    requests = chat_upstream(lambda request: _reply("never"))

    response = await client.post("/api/chat", json={"message": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Message is required and must be a string."}
    assert requests == []


async def test_non_string_message_rejected(client, chat_upstream):
    requests = chat_upstream(lambda request: _reply("never"))

    response = await client.post("/api/chat", json={"message": 42})

    assert response.status_code == 400
    assert requests == []


async def test_missing_key_checked_before_message(client, chat_upstream):
    chat_upstream(lambda request: _reply("never"), api_key=None)

    response = await client.post("/api/chat", json={})

    assert response.status_code == 500
    assert response.json() == {"error": "Groq API key is not configured on the server."}


async def test_fallback_shape_over_http(client, chat_upstream):
    chat_upstream(lambda request: httpx.Response(200, json={"output": ["line one", "line two"]}))

    response = await client.post("/api/chat", json={"message": "hi"})

    assert response.json() == {"content": "line one\nline two"}


@pytest.mark.parametrize(
    "data,expected",
    [
        (
            {"choices": [{"message": {"content": "first"}}], "output": "second"},
            "first",
        ),
        ({"choices": [], "output": "plain"}, "plain"),
        ({"output": ["a", "b"]}, "a\nb"),
        ({"completions": [{"data": {"text": "third"}}]}, "third"),
        ({"unexpected": 1, "\u00e9": [1, 2]}, '{"unexpected":1,"\u00e9":[1,2]}'),
        ({"output": []}, ""),
        ({"output": {}}, "[object Object]"),
        ({"output": 0, "completions": [{"data": {"text": "third"}}]}, "third"),
        ({"output": [None, True, 3]}, "\ntrue\n3"),
    ],
)
def test_extract_content_order(data, expected):
    assert extract_content(data) == expected
