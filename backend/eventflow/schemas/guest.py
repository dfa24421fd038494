"""Pydantic schemas for Guests (invitations and RSVPs)."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from eventflow.models.guest import RSVPStatus


class GuestsAdd(BaseModel):
    emails: list[EmailStr] = Field(min_length=1)


class GuestUpdate(BaseModel):
    status: Optional[RSVPStatus] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    decline_reason: Optional[str] = Field(default=None, max_length=500)


class GuestOut(BaseModel):
    id: str
    name: str
    email: str
    status: RSVPStatus
    decline_reason: Optional[str] = None
    responded_at: Optional[datetime] = None
    event_id: str
    user_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class GuestsAdded(BaseModel):
    message: str
    guests: list[GuestOut]
