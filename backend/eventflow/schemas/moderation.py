"""Pydantic schemas for reports, penalties and moderation stats."""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from eventflow.models.penalty import PenaltyType
from eventflow.models.report import ReportReason, ReportStatus
from eventflow.schemas.common import UserSummary


class ReportCreate(BaseModel):
    event_id: str
    reason: ReportReason
    details: Optional[str] = Field(default=None, max_length=500)


class ReportedEvent(BaseModel):
    id: str
    title: str
    owner_id: str
    is_hidden: bool
    report_count: int

    model_config = {"from_attributes": True}


class ReportOut(BaseModel):
    id: str
    event_id: str
    reported_by: str
    reason: ReportReason
    details: Optional[str] = None
    status: ReportStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: datetime
    event: Optional[ReportedEvent] = None
    reporter: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class ReportCreated(BaseModel):
    message: str
    report: ReportOut
    auto_hidden: bool


class ReportReview(BaseModel):
    status: Literal["ACCEPTED", "REJECTED"]
    review_notes: Optional[str] = Field(default=None, max_length=500)


class PenaltyCreate(BaseModel):
    user_id: str
    type: PenaltyType
    reason: str = Field(min_length=1, max_length=200)
    details: Optional[str] = Field(default=None, max_length=500)
    duration: Optional[int] = Field(default=None, ge=1, le=365)  # days


class PenaltyOut(BaseModel):
    id: str
    user_id: str
    type: PenaltyType
    reason: str
    details: Optional[str] = None
    duration: Optional[int] = None
    expires_at: Optional[datetime] = None
    is_active: bool
    created_by: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BannedUserOut(BaseModel):
    id: str
    name: str
    email: str
    is_banned: bool
    banned_at: Optional[datetime] = None
    banned_until: Optional[datetime] = None
    ban_reason: Optional[str] = None
    latest_penalty: Optional[PenaltyOut] = None


class ModerationStats(BaseModel):
    pending_reports: int
    total_reports: int
    banned_users: int
    hidden_events: int
    active_penalties: int
