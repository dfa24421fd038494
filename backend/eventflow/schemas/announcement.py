"""Pydantic schemas for Announcements."""
from datetime import datetime
from pydantic import BaseModel, field_validator


class AnnouncementIn(BaseModel):
    message: str

    @field_validator("message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Mensagem é obrigatória")
        return value


class AnnouncementOut(BaseModel):
    id: str
    message: str
    event_id: str
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}
