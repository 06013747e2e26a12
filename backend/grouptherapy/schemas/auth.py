"""
Admin user, login attempt and session schemas.
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel

from grouptherapy.schemas.base import RecordBase

AdminRole = Literal["admin", "editor", "contributor"]


class AdminUserCreate(BaseModel):
    username: str
    password_hash: str
    role: AdminRole = "admin"
    is_active: bool = True


class AdminUserUpdate(BaseModel):
    """Out-of-band edits (CLI); logins only touch last_login_at."""
    password_hash: Optional[str] = None
    role: Optional[AdminRole] = None
    is_active: Optional[bool] = None


class AdminUser(RecordBase):
    id: int
    username: str
    password_hash: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class LoginAttemptCreate(BaseModel):
    username: str
    ip_address: Optional[str] = None
    successful: bool
    attempted_at: Optional[datetime] = None  # storage fills in now when omitted


class LoginAttempt(RecordBase):
    id: int
    username: str
    ip_address: Optional[str] = None
    successful: bool
    attempted_at: datetime


class SessionRecord(RecordBase):
    id: str
    username: str
    expires_at: datetime


class CredentialCheck(BaseModel):
    """Outcome of a login attempt."""
    valid: bool
    message: Optional[str] = None
