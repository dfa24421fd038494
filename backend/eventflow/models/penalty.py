"""Penalty ORM model: moderation action taken against a user."""
import uuid
import enum
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from eventflow.database import Base, utcnow


class PenaltyType(str, enum.Enum):
    warning = "WARNING"
    suspension = "SUSPENSION"
    ban = "BAN"


class Penalty(Base):
    __tablename__ = "penalties"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(SAEnum(PenaltyType), nullable=False)
    reason = Column(String(200), nullable=False)
    details = Column(String(500), nullable=True)
    duration = Column(Integer, nullable=True)  # days
    expires_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User", foreign_keys=[user_id], back_populates="penalties")
