"""
Opportunistic sweep of expired admin sessions.
"""
import asyncio
from loguru import logger

from grouptherapy.constants import SESSION_CLEANUP_INTERVAL_SECONDS
from grouptherapy.storage.base import StorageBackend
from grouptherapy.utils.time import utcnow


class SessionCleanupService:
    """
    Deletes sessions past their expiry.

    Sessions already expire lazily when they are presented, so this only keeps
    the table from collecting tokens that are never used again.
    """

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    async def cleanup_expired_sessions(self) -> int:
        """Delete expired sessions once and return how many were removed."""
        deleted = await self.storage.delete_expired_sessions(utcnow())
        if deleted > 0:
            logger.info(f"Deleted {deleted} expired session(s)")
        return deleted

    async def run_forever(self, interval_seconds: float = SESSION_CLEANUP_INTERVAL_SECONDS):
        """Background loop; cancelled on shutdown."""
        while True:
            try:
                await asyncio.sleep(interval_seconds)
                await self.cleanup_expired_sessions()
            except asyncio.CancelledError:
                logger.debug("Session cleanup task cancelled")
                raise  # Re-raise to properly signal cancellation
            except Exception as e:
                logger.error(f"Error in session cleanup task: {e}")
                # Continue loop to retry on next interval
