# switchboard/services/fanout.py
"""
Fanout of committed messages to live connections.

Delivery is scoped to the conversation's participants and is
fire-and-forget: no acknowledgement, no retry, nothing queued for
offline users. Pushes run concurrently and each one is bounded by a
timeout, so a stalled socket cannot hold up the sender or the other
recipients. A connection whose push fails or times out is dropped from
the registry; the failure is never reported back to the sender.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

from switchboard.core.config import settings
from switchboard.core.presence import PresenceEntry, PresenceRegistry, registry
from switchboard.schemas.messages import ConversationOut, MessageOut, RealtimeEvent

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "newMessage"
NEW_CONVERSATION_EVENT = "newConversation"


class FanoutBroadcaster:
    def __init__(self, presence: PresenceRegistry, timeout: Optional[float] = None) -> None:
        self.presence = presence
        self.timeout = settings.fanout_timeout if timeout is None else timeout

    async def broadcast_message(self, message: MessageOut, conversation_id: str) -> int:
        event = RealtimeEvent(
            event=NEW_MESSAGE_EVENT,
            data={
                "newMessage": message.model_dump(mode="json", by_alias=True),
                "conversationId": conversation_id,
            },
        )
        return await self._emit(event, (message.sender_id, message.receiver_id))

    async def broadcast_new_conversation(self, conversation: ConversationOut) -> int:
        event = RealtimeEvent(
            event=NEW_CONVERSATION_EVENT,
            data={"newConversation": conversation.model_dump(mode="json", by_alias=True)},
        )
        return await self._emit(event, (p.id for p in conversation.participants))

    async def _emit(self, event: RealtimeEvent, user_ids: Iterable[str]) -> int:
        """Push to every connection of the given users. Returns the delivered count."""
        payload: Dict[str, Any] = event.model_dump(mode="json")
        entries = self.presence.lookup(user_ids)

        results = await asyncio.gather(
            *(self._push(entry, event.event, payload) for entry in entries)
        )
        delivered = sum(results)

        logger.debug("%s delivered to %d of %d connection(s)", event.event, delivered, len(entries))
        return delivered

    async def _push(self, entry: PresenceEntry, event_name: str, payload: Dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(entry.connection.send_json(payload), timeout=self.timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(
                "Dropping connection for user %s: %s push timed out after %.1fs",
                entry.user_id,
                event_name,
                self.timeout,
            )
        except Exception as e:
            logger.warning(
                "Dropping connection for user %s after failed %s push: %s",
                entry.user_id,
                event_name,
                e,
            )
        self.presence.deregister(entry.user_id, entry.connection)
        return False


broadcaster = FanoutBroadcaster(registry)
