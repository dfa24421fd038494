"""Shared schema helpers."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an incoming datetime to UTC; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserSummary(BaseModel):
    id: str
    name: str
    email: str

    model_config = {"from_attributes": True}
