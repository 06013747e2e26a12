"""
Sliding-window login rate limiter backed by stored login attempts.

The decision is a pure function of the LoginAttempt rows for a username in
the trailing window, so it survives restarts and is shared by every worker
that talks to the same database. Checking and recording are separate calls:
two concurrent logins can both pass the check before either is recorded.
"""
from datetime import datetime, timedelta
from typing import Callable
from loguru import logger

from grouptherapy.constants import (
    LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
    LOGIN_RATE_LIMIT_WINDOW_MINUTES,
)
from grouptherapy.storage.base import StorageBackend
from grouptherapy.utils.time import utcnow


class LoginRateLimiter:
    """
    Counts failed login attempts per username.

    A username is limited once it has max_attempts failures inside the window.
    """

    def __init__(
        self,
        storage: StorageBackend,
        max_attempts: int = LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
        window_minutes: int = LOGIN_RATE_LIMIT_WINDOW_MINUTES,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize rate limiter.

        Args:
            storage: Backend holding the login attempt audit trail
            max_attempts: Failed attempts allowed in the window
            window_minutes: Trailing window length in minutes
            clock: Source of "now" (UTC)
        """
        self.storage = storage
        self.max_attempts = max_attempts
        self.window = timedelta(minutes=window_minutes)
        self._clock = clock

    async def failed_attempts(self, username: str) -> int:
        """Number of failed attempts for username inside the trailing window."""
        since = self._clock() - self.window
        attempts = await self.storage.get_recent_login_attempts(username, since)
        return sum(1 for attempt in attempts if not attempt.successful)

    async def is_limited(self, username: str) -> bool:
        """Check whether further login attempts for username must be refused."""
        failed = await self.failed_attempts(username)
        if failed >= self.max_attempts:
            logger.warning(f"Login rate limit reached for '{username}' ({failed} failed attempts)")
            return True
        return False
