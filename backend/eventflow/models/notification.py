"""Notification and PushSubscription ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventflow.database import Base, utcnow


class NotificationType(str, enum.Enum):
    event_invite = "EVENT_INVITE"
    event_reminder = "EVENT_REMINDER"
    event_update = "EVENT_UPDATE"
    event_cancelled = "EVENT_CANCELLED"
    rsvp_response = "RSVP_RESPONSE"
    new_message = "NEW_MESSAGE"
    announcement = "ANNOUNCEMENT"
    system = "SYSTEM"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(SAEnum(NotificationType), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=True)
    data = Column(JSON, nullable=True)
    action_url = Column(String(500), nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    push_sent = Column(Boolean, nullable=False, default=False)
    push_sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    event = relationship("Event")


class PushSubscription(Base):
    __tablename__ = "push_subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    fcm_token = Column(String(500), nullable=False, unique=True)
    device_type = Column(String(50), nullable=True)
    device_name = Column(String(150), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    last_used = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
