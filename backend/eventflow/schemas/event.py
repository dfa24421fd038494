"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, Field, field_validator, model_validator

from eventflow.models.event import EventCategory, EventState, EventType, EventVisibility
from eventflow.schemas.common import to_utc
from eventflow.schemas.guest import GuestOut

# Columns that cannot be cleared with an explicit null on update.
NON_NULLABLE_FIELDS = (
    "title", "date", "time", "location", "visibility", "state",
    "waitlist_enabled", "show_guest_list", "category", "event_type", "price",
)


def _check_timezone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    try:
        pytz.timezone(value)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Fuso horário inválido: {value}")
    return value


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    date: datetime
    time: str = ""
    end_date: Optional[datetime] = None
    end_time: Optional[str] = None
    location: str = ""
    timezone: Optional[str] = None
    rsvp_deadline: Optional[datetime] = None
    visibility: EventVisibility = EventVisibility.private
    state: EventState = EventState.draft
    capacity: Optional[int] = Field(default=None, gt=0)
    waitlist_enabled: bool = False
    show_guest_list: bool = False
    category: EventCategory = EventCategory.outro
    event_type: EventType = EventType.presencial
    price: float = Field(default=0, ge=0)
    min_age: Optional[int] = Field(default=None, ge=0, le=120)
    image_url: Optional[str] = None
    online_url: Optional[str] = None
    tags: Optional[str] = None

    @field_validator("date", "end_date", "rsvp_deadline")
    @classmethod
    def utc_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    @field_validator("timezone")
    @classmethod
    def valid_timezone(cls, value: Optional[str]) -> Optional[str]:
        return _check_timezone(value)

    @field_validator("state")
    @classmethod
    def initial_state(cls, value: EventState) -> EventState:
        if value not in (EventState.draft, EventState.published):
            raise ValueError("Eventos só podem ser criados como DRAFT ou PUBLISHED")
        return value


class EventUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    end_date: Optional[datetime] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    timezone: Optional[str] = None
    rsvp_deadline: Optional[datetime] = None
    visibility: Optional[EventVisibility] = None
    state: Optional[EventState] = None
    cancelled_reason: Optional[str] = None
    capacity: Optional[int] = None
    waitlist_enabled: Optional[bool] = None
    show_guest_list: Optional[bool] = None
    category: Optional[EventCategory] = None
    event_type: Optional[EventType] = None
    price: Optional[float] = Field(default=None, ge=0)
    min_age: Optional[int] = Field(default=None, ge=0, le=120)
    image_url: Optional[str] = None
    online_url: Optional[str] = None
    tags: Optional[str] = None
    notify_guests: bool = False

    @field_validator("date", "end_date", "rsvp_deadline")
    @classmethod
    def utc_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    @field_validator("timezone")
    @classmethod
    def valid_timezone(cls, value: Optional[str]) -> Optional[str]:
        return _check_timezone(value)

    @model_validator(mode="after")
    def no_null_for_required_columns(self) -> "EventUpdate":
        cleared = [f for f in NON_NULLABLE_FIELDS if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"Campos não podem ser nulos: {', '.join(cleared)}")
        return self

    def changes(self) -> dict:
        """Fields the client actually sent, minus request-only flags."""
        return self.model_dump(exclude_unset=True, exclude={"notify_guests"})


class EventOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    date: datetime
    time: str
    end_date: Optional[datetime] = None
    end_time: Optional[str] = None
    location: str
    timezone: Optional[str] = None
    rsvp_deadline: Optional[datetime] = None
    visibility: EventVisibility
    state: EventState
    cancelled_reason: Optional[str] = None
    capacity: Optional[int] = None
    waitlist_enabled: bool
    show_guest_list: bool
    category: EventCategory
    event_type: EventType
    price: float
    min_age: Optional[int] = None
    image_url: Optional[str] = None
    online_url: Optional[str] = None
    tags: Optional[str] = None
    owner_id: str
    is_hidden: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventDetailOut(EventOut):
    guests: list[GuestOut] = []


class InviteOut(EventOut):
    my_guest_status: str
    my_guest_id: str
