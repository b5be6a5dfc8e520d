# switchboard/models/message.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from switchboard.models.base import Base, new_id, utcnow


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(26), primary_key=True, default=new_id)
    conversation_id = Column(
        String(26), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Index inside the conversation; two racing appends collide here
    position = Column(Integer, nullable=False)

    sender_id = Column(String(26), ForeignKey("users.id"), nullable=False)
    receiver_id = Column(String(26), ForeignKey("users.id"), nullable=False)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")

    __table_args__ = (
        UniqueConstraint("conversation_id", "position", name="uq_messages_conversation_position"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, sender={self.sender_id}, receiver={self.receiver_id})>"
