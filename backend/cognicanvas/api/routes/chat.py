"""Chat assistant route."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cognicanvas.schemas.chat import ChatErrorResponse, ChatRequest, ChatResponse
from cognicanvas.services.chat_service import ChatService, get_chat_service

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "",
    response_model=ChatResponse,
    responses={
        400: {"model": ChatErrorResponse},
        500: {"model": ChatErrorResponse},
    },
)
async def chat(
    data: ChatRequest,
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """
    Send one message to the assistant and return its reply.

    Upstream failures come back as {"error": ...} with the upstream status.
    """
    content = await service.complete(data.message)
    return ChatResponse(content=content)
