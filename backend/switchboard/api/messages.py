# switchboard/api/messages.py

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session

from switchboard.api.deps import get_current_user
from switchboard.core.rate_limit import SEND_MESSAGE_LIMIT, limiter
from switchboard.infra.database import get_db
from switchboard.models import User
from switchboard.schemas.messages import ConversationOut, SendMessageResponse
from switchboard.services.message_service import MessageService, get_message_service

router = APIRouter(prefix="/message")


@router.api_route(
    "/send/{receiver_id}",
    methods=["PUT", "POST"],
    status_code=status.HTTP_201_CREATED,
    response_model=SendMessageResponse,
)
@limiter.limit(SEND_MESSAGE_LIMIT)
async def send_message(
    request: Request,
    receiver_id: str,
    payload: Any = Body(None),
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    # Raw JSON so a missing or mistyped body is reported as our 400, not a 422
    body = payload.get("message") if isinstance(payload, dict) else None
    result = await service.send_message(current_user.id, receiver_id, body)
    return SendMessageResponse(message="Message successfuly sent", new_message=result.message)


@router.get("/", response_model=List[ConversationOut])
def list_my_conversations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: MessageService = Depends(get_message_service),
):
    return service.list_conversations(db, current_user.id)


@router.get("/with/{user_id}")
def get_conversation_with_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: MessageService = Depends(get_message_service),
):
    conversation = service.get_conversation_with(db, current_user.id, user_id)
    if conversation is None:
        return {"message": "No conversation found between these users", "messages": []}
    return conversation.model_dump(mode="json", by_alias=True)


@router.get("/{conversation_id}", response_model=ConversationOut)
def get_conversation(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: MessageService = Depends(get_message_service),
):
    return service.get_conversation(db, current_user.id, conversation_id)
