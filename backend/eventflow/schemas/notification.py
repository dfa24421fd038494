"""Pydantic schemas for in-app notifications and push subscriptions."""
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field

from eventflow.models.notification import NotificationType


class NotificationOut(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    event_id: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    action_url: Optional[str] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationPage(BaseModel):
    notifications: list[NotificationOut]
    total: int
    unread_count: int


class SubscribeRequest(BaseModel):
    fcm_token: str = Field(min_length=1)
    device_type: Optional[str] = None
    device_name: Optional[str] = None


class UnsubscribeRequest(BaseModel):
    fcm_token: str = Field(min_length=1)


class SubscriptionOut(BaseModel):
    id: str
    fcm_token: str
    device_type: Optional[str] = None
    device_name: Optional[str] = None
    is_active: bool
    last_used: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
