# switchboard/models/user.py - owned by the auth service, read here for identity

from sqlalchemy import Column, DateTime, String

from switchboard.models.base import Base, new_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=new_id)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    # Never leaves the store; see PublicUser
    password_hash = Column(String(255), nullable=True)
    icon_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
