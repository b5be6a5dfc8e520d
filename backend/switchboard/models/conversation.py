# switchboard/models/conversation.py

from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from switchboard.models.base import Base, new_id, utcnow


def make_pair_key(user_a: str, user_b: str) -> str:
    """Order-independent key for a participant pair."""
    low, high = sorted((str(user_a), str(user_b)))
    return f"{low}:{high}"


class Conversation(Base):
    """
    One conversation per unordered pair of users.

    Participants keep their insertion order (first sender first). The
    normalized ``pair_key`` carries the uniqueness constraint, so two
    concurrent first messages cannot both create a conversation.
    """

    __tablename__ = "conversations"

    id = Column(String(26), primary_key=True, default=new_id)
    participant_one_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    participant_two_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    pair_key = Column(String(64), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    participant_one = relationship("User", foreign_keys=[participant_one_id], lazy="joined")
    participant_two = relationship("User", foreign_keys=[participant_two_id], lazy="joined")

    # Append order is commit order; position is assigned on append
    messages = relationship(
        "Message",
        back_populates="conversation",
        order_by="Message.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    def __init__(self, participant_one_id: str, participant_two_id: str, **kwargs) -> None:
        super().__init__(
            participant_one_id=participant_one_id,
            participant_two_id=participant_two_id,
            pair_key=make_pair_key(participant_one_id, participant_two_id),
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, participants={self.participants})>"

    @property
    def participants(self) -> List[str]:
        return [self.participant_one_id, self.participant_two_id]

    @property
    def participant_users(self) -> list:
        return [self.participant_one, self.participant_two]

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participants
