# switchboard/schemas/messages.py

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PublicUser(CamelModel):
    """Participant projection: the only user fields that ever leave the store."""

    id: str
    username: Optional[str] = None
    icon_url: Optional[str] = None


class MessageOut(CamelModel):
    id: str
    conversation_id: str
    sender_id: str
    receiver_id: str
    message: str
    created_at: datetime


class ConversationOut(CamelModel):
    id: str
    participants: List[PublicUser]
    messages: List[MessageOut] = []
    created_at: datetime
    updated_at: datetime


class SendMessageResponse(CamelModel):
    message: str
    new_message: MessageOut


class RealtimeEvent(BaseModel):
    """Server to client frame on the real-time channel."""

    event: str  # newMessage | newConversation
    data: Dict[str, Any] = {}
