"""Pydantic schemas for authentication and the user's own profile."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from eventflow.models.user import UserRole


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(BaseModel):
    email: str
    password: str


class GoogleLoginRequest(BaseModel):
    credential: str = Field(min_length=1)


class AuthResponse(BaseModel):
    id: str
    name: str
    email: str
    token: str


class ProfileOut(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    email: Optional[EmailStr] = None


class PasswordUpdate(BaseModel):
    current_password: str = Field(min_length=6)
    new_password: str = Field(min_length=6)
