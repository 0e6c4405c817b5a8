"""Chat assistant: a stateless proxy to an OpenAI-compatible completion API."""

import json
import logging
from typing import Any

import httpx

from cognicanvas.config import get_settings, sanitize_error

logger = logging.getLogger(__name__)
settings = get_settings()


class ChatError(Exception):
    """Chat request failed; status_code is what the client should see."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _present(value: Any) -> bool:
    """Truthiness as a JSON consumer sees it: empty lists and objects count."""
    return value is not None and value is not False and value != "" and value != 0


def _text(value: Any) -> str:
    """String form of a decoded JSON value, as a JavaScript client would print it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(_text(part) for part in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def extract_content(data: Any) -> str:
    """
    Pull the reply text out of a completion response.

    Accepted shapes, first match wins:
    1. {"choices": [{"message": {"content": ...}}]}   (OpenAI-compatible)
    2. {"output": [...] | ...}                          (list joined by newlines)
    3. {"completions": [{"data": {"text": ...}}]}
    Anything else is returned as compact JSON text, non-ASCII kept as is.
    """
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            if isinstance(message, dict) and _present(message.get("content")):
                return _text(message["content"])

        output = data.get("output")
        if _present(output):
            if isinstance(output, list):
                return "\n".join(_text(part) for part in output)
            return _text(output)

        completions = data.get("completions")
        if isinstance(completions, list) and completions and isinstance(completions[0], dict):
            inner = completions[0].get("data")
            if isinstance(inner, dict) and _present(inner.get("text")):
                return _text(inner["text"])

    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class ChatService:
    """Forwards single-turn messages to the completion endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        api_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_url = api_url or settings.groq_api_url
        self.model = model or settings.groq_model
        self.transport = transport

    def build_payload(self, message: str) -> dict:
        """Request body. Only the current message is sent; there is no history."""
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": message}],
        }

    async def complete(self, message: Any) -> str:
        """
        Send one message and return the reply text.

        Raises ChatError for a missing key (checked first), a missing or
        non-string message, a non-2xx upstream status (which is passed
        through), or a transport failure. Nothing is retried.
        """
        if not self.api_key:
            raise ChatError("Groq API key is not configured on the server.", 500)
        if not message or not isinstance(message, str):
            raise ChatError("Message is required and must be a string.", 400)

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=settings.groq_timeout_seconds
            ) as client:
                response = await client.post(
                    self.api_url, headers=headers, json=self.build_payload(message)
                )
        except httpx.HTTPError as e:
            logger.exception("Chat completion request failed")
            raise ChatError(
                sanitize_error(e, generic_message="Failed to process chat message"), 500
            ) from e

        if not response.is_success:
            logger.error("Completion API error: %s %s", response.status_code, response.text)
            raise ChatError(
                f"API error {response.status_code}: {response.text}", response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.exception("Completion API returned invalid JSON")
            raise ChatError(
                sanitize_error(e, generic_message="Failed to process chat message"), 500
            ) from e
        return extract_content(data)


# Singleton instance
chat_service = ChatService(api_key=settings.groq_api_key)


def get_chat_service() -> ChatService:
    """FastAPI dependency; overridden in tests."""
    return chat_service
