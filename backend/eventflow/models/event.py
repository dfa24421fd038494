"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, Numeric, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventflow.database import Base


class EventState(str, enum.Enum):
    draft = "DRAFT"
    published = "PUBLISHED"
    cancelled = "CANCELLED"
    completed = "COMPLETED"
    archived = "ARCHIVED"


TERMINAL_STATES = frozenset({EventState.cancelled, EventState.completed, EventState.archived})


class EventVisibility(str, enum.Enum):
    public = "PUBLIC"
    private = "PRIVATE"


class EventCategory(str, enum.Enum):
    conferencia = "CONFERENCIA"
    workshop = "WORKSHOP"
    palestra = "PALESTRA"
    festa = "FESTA"
    esportivo = "ESPORTIVO"
    cultural = "CULTURAL"
    educacional = "EDUCACIONAL"
    networking = "NETWORKING"
    corporativo = "CORPORATIVO"
    beneficente = "BENEFICENTE"
    outro = "OUTRO"


class EventType(str, enum.Enum):
    presencial = "PRESENCIAL"
    online = "ONLINE"
    hibrido = "HIBRIDO"


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    time = Column(String(10), nullable=False, default="")
    end_date = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(String(10), nullable=True)
    location = Column(String(500), nullable=False, default="")
    timezone = Column(String(50), nullable=True)  # IANA tz
    rsvp_deadline = Column(DateTime(timezone=True), nullable=True)
    visibility = Column(SAEnum(EventVisibility), nullable=False, default=EventVisibility.private)
    state = Column(SAEnum(EventState), nullable=False, default=EventState.draft, index=True)
    cancelled_reason = Column(String(500), nullable=True)
    capacity = Column(Integer, nullable=True)
    waitlist_enabled = Column(Boolean, nullable=False, default=False)
    show_guest_list = Column(Boolean, nullable=False, default=False)
    category = Column(SAEnum(EventCategory), nullable=False, default=EventCategory.outro)
    event_type = Column(SAEnum(EventType), nullable=False, default=EventType.presencial)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    min_age = Column(Integer, nullable=True)
    image_url = Column(String(1000), nullable=True)
    online_url = Column(String(1000), nullable=True)
    tags = Column(String(500), nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    report_count = Column(Integer, nullable=False, default=0)
    is_hidden = Column(Boolean, nullable=False, default=False)
    hidden_reason = Column(String(255), nullable=True)
    hidden_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="events")
    guests = relationship("Guest", back_populates="event", order_by="Guest.created_at")
