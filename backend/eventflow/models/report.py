"""Report ORM model: a user's complaint about an event."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventflow.database import Base, utcnow


class ReportReason(str, enum.Enum):
    spam = "SPAM"
    inappropriate = "INAPPROPRIATE"
    fraud = "FRAUD"
    scam = "SCAM"
    misleading = "MISLEADING"
    harassment = "HARASSMENT"
    other = "OTHER"


class ReportStatus(str, enum.Enum):
    pending = "PENDING"
    accepted = "ACCEPTED"
    rejected = "REJECTED"


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (UniqueConstraint("event_id", "reported_by", name="uq_reports_event_reporter"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    reported_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    reason = Column(SAEnum(ReportReason), nullable=False)
    details = Column(String(500), nullable=True)
    status = Column(SAEnum(ReportStatus), nullable=False, default=ReportStatus.pending)
    reviewed_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    event = relationship("Event")
    reporter = relationship("User", foreign_keys=[reported_by])
