"""Pydantic schemas for organizer/guest Messages."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from eventflow.schemas.common import UserSummary


class MessageCreate(BaseModel):
    content: str
    receiver_id: Optional[str] = None

    @field_validator("content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Conteúdo da mensagem é obrigatório")
        return value


class MessageOut(BaseModel):
    id: str
    content: str
    sender_id: str
    receiver_id: str
    event_id: str
    read: bool
    created_at: datetime
    sender: UserSummary
    receiver: UserSummary

    model_config = {"from_attributes": True}


class ConversationOut(BaseModel):
    user_id: str
    user_name: str
    user_email: str
    last_message: str
    last_message_at: datetime
    unread_count: int
