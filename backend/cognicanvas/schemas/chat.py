"""Pydantic schemas for the chat assistant."""

from typing import Any

from pydantic import BaseModel


class ChatRequest(BaseModel):
    """
    A single user message. No history is sent with it.

    The message is checked by the chat service, after the API key, so a
    server without a key answers 500 whatever the body holds.
    """

    message: Any = None


class ChatResponse(BaseModel):
    """Assistant reply text."""

    content: str


class ChatErrorResponse(BaseModel):
    """Error payload shown as a chat bubble."""

    error: str
