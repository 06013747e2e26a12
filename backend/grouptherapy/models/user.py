"""
Admin user and authentication models.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from grouptherapy.database import Base
from grouptherapy.utils.time import utcnow


class AdminUser(Base):
    """Dashboard account."""

    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="admin")  # admin, editor, contributor
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class LoginAttempt(Base):
    """Append-only audit record, one row per login call."""

    __tablename__ = "login_attempts"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, index=True)
    ip_address = Column(String(64), nullable=True)
    successful = Column(Boolean, nullable=False, default=False)
    attempted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class AdminSession(Base):
    """Bearer session issued on login."""

    __tablename__ = "sessions"

    id = Column(String(128), primary_key=True)
    username = Column(String(100), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
