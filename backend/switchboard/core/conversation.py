# switchboard/core/conversation.py
"""
Conversation and message store.

Plain functions over a SQLAlchemy session. Everything that leaves this
module for a response or an event goes through the ``to_*_out``
projections, which only carry public participant fields.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, selectinload

from switchboard.models import Conversation, Message, User
from switchboard.models.base import utcnow
from switchboard.models.conversation import make_pair_key
from switchboard.schemas.messages import ConversationOut, MessageOut, PublicUser


def find_by_participants(db: Session, user_a: str, user_b: str) -> Optional[Conversation]:
    """Return the conversation between two users, in either order, or None."""
    return (
        db.query(Conversation)
        .filter(Conversation.pair_key == make_pair_key(user_a, user_b))
        .first()
    )


def find_by_id(db: Session, conversation_id: str) -> Optional[Conversation]:
    return (
        db.query(Conversation)
        .options(selectinload(Conversation.messages))
        .filter(Conversation.id == conversation_id)
        .first()
    )


def find_by_user(db: Session, user_id: str) -> List[Conversation]:
    """All conversations the user takes part in, most recently active first. Messages stay unloaded."""
    return (
        db.query(Conversation)
        .filter(
            or_(
                Conversation.participant_one_id == user_id,
                Conversation.participant_two_id == user_id,
            )
        )
        .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
        .all()
    )


def find_message(db: Session, message_id: str) -> Optional[Message]:
    return db.query(Message).filter(Message.id == message_id).first()


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def add_message(db: Session, conversation: Conversation, message: Message) -> Message:
    """Persist a message at the end of the conversation (inserting a new conversation too)."""
    if conversation not in db:
        db.add(conversation)
    conversation.messages.append(message)
    db.flush()
    return message


def save_conversation(db: Session, conversation: Conversation) -> Conversation:
    conversation.updated_at = utcnow()
    db.add(conversation)
    db.flush()
    return conversation


def find_latest_messages(db: Session, conversation_ids: Sequence[str]) -> Dict[str, Message]:
    """The last appended message of each conversation, one row per conversation."""
    if not conversation_ids:
        return {}

    last_position = (
        db.query(Message.conversation_id, func.max(Message.position).label("position"))
        .filter(Message.conversation_id.in_(conversation_ids))
        .group_by(Message.conversation_id)
        .subquery()
    )
    rows = (
        db.query(Message)
        .join(
            last_position,
            and_(
                Message.conversation_id == last_position.c.conversation_id,
                Message.position == last_position.c.position,
            ),
        )
        .all()
    )
    return {message.conversation_id: message for message in rows}


def find_inbox(db: Session, user_id: str) -> List[Tuple[Conversation, Optional[Message]]]:
    """Inbox summary: each conversation of the user paired with only its latest message."""
    conversations = find_by_user(db, user_id)
    latest = find_latest_messages(db, [c.id for c in conversations])
    return [(conversation, latest.get(conversation.id)) for conversation in conversations]


# =========================
# PROJECTIONS
# =========================


def to_message_out(message: Message) -> MessageOut:
    return MessageOut.model_validate(message)


def to_conversation_out(
    conversation: Conversation, messages: Optional[Sequence[Message]] = None
) -> ConversationOut:
    if messages is None:
        messages = list(conversation.messages)

    participants = [
        PublicUser.model_validate(user) if user is not None else PublicUser(id=user_id)
        for user_id, user in zip(conversation.participants, conversation.participant_users)
    ]

    return ConversationOut(
        id=conversation.id,
        participants=participants,
        messages=[to_message_out(m) for m in messages],
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )
