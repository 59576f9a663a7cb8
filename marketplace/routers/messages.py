"""
Private messages between users. Clients poll these endpoints.
"""

from fastapi import APIRouter, Depends, Path, status
from uuid import UUID

from marketplace.models.user import User
from marketplace.services.message import MessageService
from marketplace.services.error_handler import error_responses
from marketplace.schemas.message import (
    MessageCreate,
    MessageResponse,
    MessageListResponse,
    UnreadCountResponse,
    ConversationDeleteResponse
)
from marketplace.utils.dependencies import get_current_active_user, get_message_service


router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
    description="Optionally about a listing. The receiver gets a notification.",
    responses=error_responses(400, 401, 404, 422)
)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> MessageResponse:
    message = await message_service.send_message(data, current_user)
    return MessageResponse.model_validate(message)


@router.get(
    "/inbox",
    response_model=MessageListResponse,
    summary="Received messages",
    responses=error_responses(401)
)
async def inbox(
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> MessageListResponse:
    messages = await message_service.inbox(current_user)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.get(
    "/sent",
    response_model=MessageListResponse,
    summary="Sent messages",
    responses=error_responses(401)
)
async def sent(
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> MessageListResponse:
    messages = await message_service.sent(current_user)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Unread message count",
    responses=error_responses(401)
)
async def unread_count(
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=await message_service.unread_count(current_user))


@router.get(
    "/conversation/{contact_id}",
    response_model=MessageListResponse,
    summary="Conversation with a user",
    description="Both directions, oldest first",
    responses=error_responses(401)
)
async def conversation(
    contact_id: UUID = Path(..., description="The other user's ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> MessageListResponse:
    messages = await message_service.conversation(current_user, contact_id)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])


@router.delete(
    "/conversation/{contact_id}",
    response_model=ConversationDeleteResponse,
    summary="Delete a conversation",
    description="Hides the conversation for the caller only; the other user keeps their copy.",
    responses=error_responses(401)
)
async def delete_conversation(
    contact_id: UUID = Path(..., description="The other user's ID"),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> ConversationDeleteResponse:
    result = await message_service.delete_conversation(current_user, contact_id)
    return ConversationDeleteResponse(**result)


@router.put(
    "/{message_id}/read",
    response_model=MessageResponse,
    summary="Mark a message read",
    responses=error_responses(401, 404)
)
async def mark_read(
    message_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service)
) -> MessageResponse:
    message = await message_service.mark_read(message_id, current_user)
    return MessageResponse.model_validate(message)
