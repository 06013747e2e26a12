"""
Admin authentication: password hashing, credential checks and sessions.
"""
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

import bcrypt
from loguru import logger

from grouptherapy.constants import (
    BCRYPT_MAX_PASSWORD_BYTES,
    DEFAULT_BCRYPT_ROUNDS,
    LOGIN_LOCKOUT_DURATION_MINUTES,
    LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
    LOGIN_RATE_LIMIT_WINDOW_MINUTES,
    SESSION_TIMEOUT_SECONDS,
    SESSION_TOKEN_BYTES,
)
from grouptherapy.schemas.auth import CredentialCheck, LoginAttemptCreate, SessionRecord
from grouptherapy.storage.base import StorageBackend
from grouptherapy.utils.rate_limit import LoginRateLimiter
from grouptherapy.utils.time import utcnow

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_INACTIVE = "Account is inactive"
LOCKED_OUT = (
    f"Too many failed login attempts. Please try again in {LOGIN_LOCKOUT_DURATION_MINUTES} minutes."
)


def _password_bytes(password: str) -> bytes:
    # bcrypt rejects or ignores anything past 72 bytes depending on version
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Salted bcrypt hash of password using the given work factor."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a bcrypt hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def generate_session_id() -> str:
    """Unguessable session token (256 bits from the OS CSPRNG)."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)


class AuthService:
    """
    Login and session operations against one storage backend.

    Every validate_credentials() call writes exactly one LoginAttempt row,
    including calls refused by the rate limiter.
    """

    def __init__(
        self,
        storage: StorageBackend,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        max_attempts: int = LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
        window_minutes: int = LOGIN_RATE_LIMIT_WINDOW_MINUTES,
        session_lifetime: timedelta = timedelta(seconds=SESSION_TIMEOUT_SECONDS),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage
        self.bcrypt_rounds = bcrypt_rounds
        self.session_lifetime = session_lifetime
        self._clock = clock
        self.rate_limiter = LoginRateLimiter(
            storage,
            max_attempts=max_attempts,
            window_minutes=window_minutes,
            clock=clock,
        )

    def hash_password(self, password: str) -> str:
        return hash_password(password, rounds=self.bcrypt_rounds)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return verify_password(plain_password, hashed_password)

    async def _record_attempt(self, username: str, ip_address: Optional[str], successful: bool):
        await self.storage.record_login_attempt(
            LoginAttemptCreate(
                username=username,
                ip_address=ip_address,
                successful=successful,
                attempted_at=self._clock(),
            )
        )

    async def validate_credentials(
        self,
        username: str,
        password: str,
        ip_address: Optional[str] = None,
    ) -> CredentialCheck:
        """Check a username/password pair, applying the login rate limit."""
        if await self.rate_limiter.is_limited(username):
            await self._record_attempt(username, ip_address, successful=False)
            return CredentialCheck(valid=False, message=LOCKED_OUT)

        user = await self.storage.get_admin_user_by_username(username)

        if user is None:
            await self._record_attempt(username, ip_address, successful=False)
            return CredentialCheck(valid=False, message=INVALID_CREDENTIALS)

        if not user.is_active:
            await self._record_attempt(username, ip_address, successful=False)
            logger.info(f"Login refused for inactive account '{username}'")
            return CredentialCheck(valid=False, message=ACCOUNT_INACTIVE)

        is_valid = self.verify_password(password, user.password_hash)
        await self._record_attempt(username, ip_address, successful=is_valid)

        if not is_valid:
            return CredentialCheck(valid=False, message=INVALID_CREDENTIALS)

        logged_in_at = self._clock()
        # last_login_at must move forward even if the clock has not ticked
        if user.last_login_at is not None and logged_in_at <= user.last_login_at:
            logged_in_at = user.last_login_at + timedelta(microseconds=1)
        await self.storage.update_admin_last_login(username, logged_in_at)

        logger.info(f"Admin '{username}' logged in")
        return CredentialCheck(valid=True)

    async def create_session(self, username: str) -> str:
        """Persist a new session for username and return its token."""
        session = SessionRecord(
            id=generate_session_id(),
            username=username,
            expires_at=self._clock() + self.session_lifetime,
        )
        await self.storage.create_session(session)
        return session.id

    async def validate_session(self, session_id: str) -> Optional[str]:
        """Username for a live session, None if unknown or expired (expired ones are deleted)."""
        session = await self.storage.get_session(session_id)
        if session is None:
            return None

        if self._clock() >= session.expires_at:
            await self.storage.delete_session(session_id)
            logger.debug(f"Expired session for '{session.username}' removed")
            return None

        return session.username

    async def delete_session(self, session_id: str) -> None:
        await self.storage.delete_session(session_id)
