"""
Service layer for GroupTherapy business logic.
"""
from grouptherapy.services.auth_service import AuthService
from grouptherapy.services.session_cleanup import SessionCleanupService

__all__ = [
    "AuthService",
    "SessionCleanupService",
]
