"""
Storage interface shared by the in-memory and database backends.

Both backends implement every method here and nothing else; route handlers
and services only ever talk to this interface, so the two are
interchangeable.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union
from pydantic import BaseModel

from grouptherapy.schemas.auth import (
    AdminUser,
    AdminUserCreate,
    AdminUserUpdate,
    LoginAttempt,
    LoginAttemptCreate,
    SessionRecord,
)
from grouptherapy.schemas.radio import RadioSettings, RadioSettingsUpdate, RadioListener, RadioListenerCreate
from grouptherapy.schemas.analytics import AnalyticsOverview, PageView, PageViewCreate, PlayCount, PlayCountCreate

RecordT = TypeVar("RecordT", bound=BaseModel)

# Fields a caller may never overwrite through update()
PROTECTED_FIELDS = frozenset({"id", "created_at"})


class StorageError(Exception):
    """Base class for storage failures raised on purpose by a backend."""


class RecordNotFoundError(StorageError, LookupError):
    """Raised when updating a record that does not exist."""


class DuplicateRecordError(StorageError):
    """Raised when a unique field (admin username) is already taken."""


def changes_to_dict(changes: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """Normalise a PATCH payload to the fields that were actually sent."""
    if isinstance(changes, BaseModel):
        changes = changes.model_dump(exclude_unset=True)
    return {k: v for k, v in changes.items() if k not in PROTECTED_FIELDS}


class ContentCollection(ABC, Generic[RecordT]):
    """CRUD over one content entity type."""

    # Human readable entity name used in "<label> not found" messages
    label: str

    @abstractmethod
    async def list_all(self) -> List[RecordT]:
        """Return every record in creation order."""

    @abstractmethod
    async def get(self, record_id: str) -> Optional[RecordT]:
        """Return the record or None when the id is unknown."""

    @abstractmethod
    async def create(self, data: BaseModel) -> RecordT:
        """Assign an id and created_at, persist and return the stored record."""

    @abstractmethod
    async def update(self, record_id: str, changes: Union[BaseModel, Dict[str, Any]]) -> RecordT:
        """Merge the given fields into the record; RecordNotFoundError if unknown."""

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Remove the record. Unknown ids are ignored."""


class StorageBackend(ABC):
    """
    Capability set the application depends on.

    Content collections are exposed as attributes:
    releases, events, posts, contacts, artists, radio_shows, playlists, videos.
    """

    releases: ContentCollection
    events: ContentCollection
    posts: ContentCollection
    contacts: ContentCollection
    artists: ContentCollection
    radio_shows: ContentCollection
    playlists: ContentCollection
    videos: ContentCollection

    # --- Lifecycle ---

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create tables)."""

    @abstractmethod
    async def ping(self) -> bool:
        """Round-trip to the backend; raises if it is unreachable."""

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""

    # --- Admin users ---

    @abstractmethod
    async def get_admin_user_by_username(self, username: str) -> Optional[AdminUser]:
        pass

    @abstractmethod
    async def create_admin_user(self, user: AdminUserCreate) -> AdminUser:
        """Insert an admin; DuplicateRecordError when the username exists."""

    @abstractmethod
    async def update_admin_user(self, username: str, changes: AdminUserUpdate) -> AdminUser:
        """Apply role/active/password edits; RecordNotFoundError if unknown."""

    @abstractmethod
    async def update_admin_last_login(self, username: str, logged_in_at: datetime) -> None:
        """Set last_login_at and updated_at. Unknown usernames are ignored."""

    # --- Login attempts ---

    @abstractmethod
    async def record_login_attempt(self, attempt: LoginAttemptCreate) -> LoginAttempt:
        pass

    @abstractmethod
    async def get_recent_login_attempts(self, username: str, since: datetime) -> List[LoginAttempt]:
        """Attempts for username with attempted_at >= since."""

    # --- Sessions ---

    @abstractmethod
    async def create_session(self, session: SessionRecord) -> SessionRecord:
        pass

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        pass

    @abstractmethod
    async def delete_session(self, session_id: str) -> None:
        """Idempotent."""

    @abstractmethod
    async def delete_expired_sessions(self, now: datetime) -> int:
        """Remove sessions with expires_at <= now, return how many went."""

    # --- Radio settings ---

    @abstractmethod
    async def get_radio_settings(self) -> Optional[RadioSettings]:
        pass

    @abstractmethod
    async def init_radio_settings(self) -> RadioSettings:
        """Create the settings row unless one exists; return the row either way."""

    @abstractmethod
    async def update_radio_settings(self, changes: RadioSettingsUpdate) -> RadioSettings:
        """StorageError if init_radio_settings never ran."""

    # --- Analytics ---

    @abstractmethod
    async def record_page_view(self, view: PageViewCreate) -> PageView:
        pass

    @abstractmethod
    async def record_play_count(self, play: PlayCountCreate) -> PlayCount:
        pass

    @abstractmethod
    async def record_radio_listener(self, listener: RadioListenerCreate) -> RadioListener:
        pass

    @abstractmethod
    async def end_radio_listener(self, listener_id: str) -> Optional[RadioListener]:
        """Stamp ended_at and duration; None (no-op) for unknown ids."""

    @abstractmethod
    async def get_analytics_overview(self, top_releases: int) -> AnalyticsOverview:
        pass
