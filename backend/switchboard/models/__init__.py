from switchboard.models.base import Base
from switchboard.models.conversation import Conversation
from switchboard.models.message import Message
from switchboard.models.user import User

__all__ = ["Base", "Conversation", "Message", "User"]
