"""Guest ORM model: one invitation/RSVP row per (event, email)."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventflow.database import Base, utcnow


class RSVPStatus(str, enum.Enum):
    pending = "PENDING"
    yes = "YES"
    no = "NO"
    maybe = "MAYBE"
    waitlisted = "WAITLISTED"


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_guests_event_email"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    status = Column(SAEnum(RSVPStatus), nullable=False, default=RSVPStatus.pending)
    decline_reason = Column(String(500), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    event = relationship("Event", back_populates="guests")
