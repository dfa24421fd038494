"""User ORM model."""
import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventflow.database import Base


class UserRole(str, enum.Enum):
    user = "USER"
    admin = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)  # null for Google-only accounts
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.user)
    is_banned = Column(Boolean, nullable=False, default=False)
    banned_at = Column(DateTime(timezone=True), nullable=True)
    banned_until = Column(DateTime(timezone=True), nullable=True)
    ban_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    events = relationship("Event", back_populates="owner")
    penalties = relationship(
        "Penalty", back_populates="user", foreign_keys="Penalty.user_id", order_by="Penalty.created_at.desc()"
    )
