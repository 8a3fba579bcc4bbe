from fastapi import APIRouter, Depends, HTTPException, Query, status
import logging

from mindful_chat.errors import NotAuthenticatedError, PersistenceError, UsageLimitExceeded
from mindful_chat.routes.chat.dependencies import (
    get_request_context,
    get_session_orchestrator,
)
from mindful_chat.routes.chat.schemas import (
    ClearHistoryResponse,
    ErrorResponse,
    HistoryMessage,
    HistoryResponse,
    MessageRequest,
    MessageResponse,
)
from mindful_chat.services.schema import RequestContext
from mindful_chat.services.session import SessionOrchestrator
from mindful_chat.settings import config

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter()


# --- ROUTES ---


@router.post(
    "/chat",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Send a message",
    description="Send a message to the assistant. A reply is always returned, "
    "falling back to a canned one when the AI service is unavailable.",
)
def send_message(
    request: MessageRequest,
    context: RequestContext = Depends(get_request_context),
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
):
    """
    Send a message and get the assistant's reply.

    Args:
        request: MessageRequest containing the message and optional language

    Returns:
        MessageResponse with the reply, its language and whether it is a fallback
    """
    try:
        reply = orchestrator.reply(context, request.message, request.language)
    except PersistenceError as e:
        logger.error(f"Error saving user message: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not save your message",
        )
    except UsageLimitExceeded as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
        )

    return MessageResponse(
        response=reply.text,
        success=True,
        language=reply.language,
        fallback=reply.fallback,
    )


@router.get(
    "/chat/history",
    response_model=HistoryResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get chat history",
    description="Retrieve the signed-in user's recent messages, oldest first",
)
def get_history(
    limit: int = Query(default=config.chat_history_limit, ge=1, le=200),
    context: RequestContext = Depends(get_request_context),
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
):
    try:
        messages = orchestrator.history_for(context, limit)
    except PersistenceError as e:
        logger.error(f"Error fetching chat history: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load chat history",
        )

    return HistoryResponse(
        messages=[
            HistoryMessage(
                id=msg.id,
                role=msg.role.value,
                content=msg.content,
                language=msg.language,
                created_at=msg.created_at,
            )
            for msg in messages
        ]
    )


@router.delete(
    "/chat/history",
    response_model=ClearHistoryResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Clear chat history",
    description="Delete every stored message of the signed-in user",
)
def clear_history(
    context: RequestContext = Depends(get_request_context),
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
):
    try:
        deleted = orchestrator.clear_history(context)
    except NotAuthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )
    except PersistenceError as e:
        logger.error(f"Error clearing chat history: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear chat history",
        )

    return ClearHistoryResponse(success=True, deleted=deleted)
