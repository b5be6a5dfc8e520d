# switchboard/services/message_service.py
"""
Message service: the single entry point for sending a direct message.

The send path runs one transaction that finds or creates the pair's
conversation, inserts the message and appends it to the conversation.
Any failure rolls the whole unit back. Real-time fanout runs after the
commit and never affects the result returned to the sender.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from switchboard.core import conversation as store
from switchboard.core.errors import AuthenticationError, DatabaseError, NotFoundError, ValidationError
from switchboard.infra.database import SessionLocal, db_session
from switchboard.models import Conversation, Message
from switchboard.schemas.messages import ConversationOut, MessageOut
from switchboard.services.fanout import FanoutBroadcaster, broadcaster

logger = logging.getLogger(__name__)

# One retry covers a lost race on conversation creation or on the append slot
MAX_SEND_ATTEMPTS = 2


@dataclass
class SendResult:
    message: MessageOut
    conversation: ConversationOut
    created: bool


class MessageService:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        fanout: Optional[FanoutBroadcaster] = None,
    ) -> None:
        self.session_factory = session_factory
        self.fanout = fanout or broadcaster

    # =========================
    # SEND
    # =========================

    async def send_message(self, sender_id: str, receiver_id: str, body: Any) -> SendResult:
        """Persist a message, then push it to the participants' live connections."""
        result = await run_in_threadpool(self.create_message, sender_id, receiver_id, body)
        await self.publish(result)
        return result

    def create_message(self, sender_id: str, receiver_id: str, body: Any) -> SendResult:
        if not isinstance(body, str) or not body.strip():
            raise ValidationError("Incomplete input, message is required")
        if sender_id == receiver_id:
            raise ValidationError("Cannot send a message to yourself")

        for attempt in range(1, MAX_SEND_ATTEMPTS + 1):
            try:
                with db_session(self.session_factory) as session:
                    return self._create_in_transaction(session, sender_id, receiver_id, body)
            except IntegrityError as e:
                if attempt < MAX_SEND_ATTEMPTS:
                    logger.info(
                        "Concurrent write for pair %s/%s, retrying lookup", sender_id, receiver_id
                    )
                    continue
                logger.error("Send failed after %d attempts: %s", attempt, e)
                raise DatabaseError() from e
            except SQLAlchemyError as e:
                logger.error("Send transaction rolled back: %s", e)
                raise DatabaseError() from e

        raise DatabaseError()

    def _create_in_transaction(
        self, session: Session, sender_id: str, receiver_id: str, body: str
    ) -> SendResult:
        if store.get_user(session, receiver_id) is None:
            raise NotFoundError(f"User not found: {receiver_id}")

        conversation = store.find_by_participants(session, sender_id, receiver_id)
        created = conversation is None
        if created:
            conversation = Conversation(participant_one_id=sender_id, participant_two_id=receiver_id)

        message = Message(sender_id=sender_id, receiver_id=receiver_id, message=body)

        store.add_message(session, conversation, message)
        store.save_conversation(session, conversation)

        # Payloads are built before the commit: a failure here still rolls back,
        # so a DatabaseError always means nothing was stored
        result = SendResult(
            message=store.to_message_out(message),
            conversation=store.to_conversation_out(conversation),
            created=created,
        )
        session.commit()

        if created:
            logger.info(
                "Created conversation %s for %s/%s", result.conversation.id, sender_id, receiver_id
            )
        logger.info("Message %s stored in conversation %s", result.message.id, result.conversation.id)
        return result

    async def publish(self, result: SendResult) -> None:
        """Best effort: the commit already happened, so failures are only logged."""
        try:
            if result.created:
                await self.fanout.broadcast_new_conversation(result.conversation)
            await self.fanout.broadcast_message(result.message, result.conversation.id)
        except Exception:
            logger.exception("Fanout failed for message %s", result.message.id)

    # =========================
    # READ
    # =========================

    def get_conversation(self, db: Session, user_id: str, conversation_id: str) -> ConversationOut:
        """Full conversation, only for one of its participants."""
        try:
            conversation = store.find_by_id(db, conversation_id)
            # Same error whether missing or foreign, so existence is not leaked
            if conversation is None or not conversation.is_participant(user_id):
                raise AuthenticationError()
            return store.to_conversation_out(conversation)
        except SQLAlchemyError as e:
            logger.error("Failed to load conversation %s: %s", conversation_id, e)
            raise DatabaseError() from e

    def get_conversation_with(self, db: Session, user_id: str, other_user_id: str) -> Optional[ConversationOut]:
        try:
            conversation = store.find_by_participants(db, user_id, other_user_id)
            if conversation is None:
                return None
            return store.to_conversation_out(conversation)
        except SQLAlchemyError as e:
            logger.error("Failed to load conversation %s/%s: %s", user_id, other_user_id, e)
            raise DatabaseError() from e

    def list_conversations(self, db: Session, user_id: str) -> List[ConversationOut]:
        """Inbox summary: every conversation with only its latest message."""
        try:
            return [
                store.to_conversation_out(conversation, [latest] if latest is not None else [])
                for conversation, latest in store.find_inbox(db, user_id)
            ]
        except SQLAlchemyError as e:
            logger.error("Failed to list conversations for %s: %s", user_id, e)
            raise DatabaseError() from e


message_service = MessageService()


def get_message_service() -> MessageService:
    return message_service
