"""
Volatile in-process storage.

Records live in plain dicts for the lifetime of the process. Nothing here is
guarded against concurrent mutation, so use it for tests and single-process
demos only.
"""
import uuid
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union
from pydantic import BaseModel

from grouptherapy.constants import ANALYTICS_RECENT_PAGE_VIEWS, DEFAULT_RADIO_STATION_NAME
from grouptherapy.schemas import content
from grouptherapy.schemas.auth import (
    AdminUser,
    AdminUserCreate,
    AdminUserUpdate,
    LoginAttempt,
    LoginAttemptCreate,
    SessionRecord,
)
from grouptherapy.schemas.radio import RadioSettings, RadioSettingsUpdate, RadioListener, RadioListenerCreate
from grouptherapy.schemas.analytics import (
    AnalyticsOverview,
    PageView,
    PageViewCreate,
    PlayCount,
    PlayCountCreate,
    ReleasePlays,
)
from grouptherapy.storage.base import (
    ContentCollection,
    DuplicateRecordError,
    RecordNotFoundError,
    StorageBackend,
    StorageError,
    changes_to_dict,
)
from grouptherapy.utils.time import utcnow


class MemoryCollection(ContentCollection):
    """Dict-backed collection keyed by record id."""

    def __init__(self, record_cls: Type[BaseModel], label: str):
        self.label = label
        self._record_cls = record_cls
        self._records: Dict[str, BaseModel] = {}

    async def list_all(self) -> List[BaseModel]:
        return [r.model_copy(deep=True) for r in self._records.values()]

    async def get(self, record_id: str) -> Optional[BaseModel]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record else None

    async def create(self, data: BaseModel) -> BaseModel:
        record = self._record_cls.model_validate({
            **data.model_dump(),
            "id": str(uuid.uuid4()),
            "created_at": utcnow(),
        })
        self._records[record.id] = record
        return record.model_copy(deep=True)

    async def update(self, record_id: str, changes: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
        existing = self._records.get(record_id)
        if existing is None:
            raise RecordNotFoundError(f"{self.label} not found")
        updated = self._record_cls.model_validate({**existing.model_dump(), **changes_to_dict(changes)})
        self._records[record_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, record_id: str) -> None:
        self._records.pop(record_id, None)


class MemoryStorage(StorageBackend):
    """In-memory implementation of the storage interface."""

    def __init__(self):
        self.releases = MemoryCollection(content.Release, "Release")
        self.events = MemoryCollection(content.Event, "Event")
        self.posts = MemoryCollection(content.Post, "Post")
        self.contacts = MemoryCollection(content.Contact, "Contact")
        self.artists = MemoryCollection(content.Artist, "Artist")
        self.radio_shows = MemoryCollection(content.RadioShow, "Radio show")
        self.playlists = MemoryCollection(content.Playlist, "Playlist")
        self.videos = MemoryCollection(content.Video, "Video")

        self._admin_users: Dict[str, AdminUser] = {}  # username -> user
        self._login_attempts: List[LoginAttempt] = []
        self._sessions: Dict[str, SessionRecord] = {}
        self._radio_settings: Optional[RadioSettings] = None
        self._page_views: List[PageView] = []
        self._play_counts: List[PlayCount] = []
        self._radio_listeners: Dict[str, RadioListener] = {}

    async def initialize(self) -> None:
        pass

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass

    # --- Admin users ---

    async def get_admin_user_by_username(self, username: str) -> Optional[AdminUser]:
        user = self._admin_users.get(username)
        return user.model_copy() if user else None

    async def create_admin_user(self, user: AdminUserCreate) -> AdminUser:
        if user.username in self._admin_users:
            raise DuplicateRecordError(f"Admin user '{user.username}' already exists")
        now = utcnow()
        admin = AdminUser(
            id=len(self._admin_users) + 1,
            username=user.username,
            password_hash=user.password_hash,
            role=user.role,
            is_active=user.is_active,
            last_login_at=None,
            created_at=now,
            updated_at=now,
        )
        self._admin_users[admin.username] = admin
        return admin.model_copy()

    async def update_admin_user(self, username: str, changes: AdminUserUpdate) -> AdminUser:
        existing = self._admin_users.get(username)
        if existing is None:
            raise RecordNotFoundError("Admin user not found")
        fields = changes.model_dump(exclude_none=True)
        updated = existing.model_copy(update={**fields, "updated_at": utcnow()})
        self._admin_users[username] = updated
        return updated.model_copy()

    async def update_admin_last_login(self, username: str, logged_in_at: datetime) -> None:
        existing = self._admin_users.get(username)
        if existing is not None:
            self._admin_users[username] = existing.model_copy(
                update={"last_login_at": logged_in_at, "updated_at": logged_in_at}
            )

    # --- Login attempts ---

    async def record_login_attempt(self, attempt: LoginAttemptCreate) -> LoginAttempt:
        record = LoginAttempt(
            id=len(self._login_attempts) + 1,
            username=attempt.username,
            ip_address=attempt.ip_address,
            successful=attempt.successful,
            attempted_at=attempt.attempted_at or utcnow(),
        )
        self._login_attempts.append(record)
        return record

    async def get_recent_login_attempts(self, username: str, since: datetime) -> List[LoginAttempt]:
        return [
            a for a in self._login_attempts
            if a.username == username and a.attempted_at >= since
        ]

    # --- Sessions ---

    async def create_session(self, session: SessionRecord) -> SessionRecord:
        self._sessions[session.id] = session.model_copy()
        return session

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        session = self._sessions.get(session_id)
        return session.model_copy() if session else None

    async def delete_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def delete_expired_sessions(self, now: datetime) -> int:
        expired = [sid for sid, s in self._sessions.items() if s.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    # --- Radio settings ---

    async def get_radio_settings(self) -> Optional[RadioSettings]:
        return self._radio_settings.model_copy() if self._radio_settings else None

    async def init_radio_settings(self) -> RadioSettings:
        if self._radio_settings is None:
            self._radio_settings = RadioSettings(
                id=1,
                station_name=DEFAULT_RADIO_STATION_NAME,
                is_live=False,
                listener_count=0,
                updated_at=utcnow(),
            )
        return self._radio_settings.model_copy()

    async def update_radio_settings(self, changes: RadioSettingsUpdate) -> RadioSettings:
        if self._radio_settings is None:
            raise StorageError("Radio settings not initialized")
        fields = changes.model_dump(exclude_unset=True)
        self._radio_settings = self._radio_settings.model_copy(update={**fields, "updated_at": utcnow()})
        return self._radio_settings.model_copy()

    # --- Analytics ---

    async def record_page_view(self, view: PageViewCreate) -> PageView:
        record = PageView(id=len(self._page_views) + 1, viewed_at=utcnow(), **view.model_dump())
        self._page_views.append(record)
        return record

    async def record_play_count(self, play: PlayCountCreate) -> PlayCount:
        record = PlayCount(id=len(self._play_counts) + 1, played_at=utcnow(), **play.model_dump())
        self._play_counts.append(record)
        return record

    async def record_radio_listener(self, listener: RadioListenerCreate) -> RadioListener:
        record = RadioListener(id=str(uuid.uuid4()), started_at=utcnow(), **listener.model_dump())
        self._radio_listeners[record.id] = record
        return record

    async def end_radio_listener(self, listener_id: str) -> Optional[RadioListener]:
        listener = self._radio_listeners.get(listener_id)
        if listener is None:
            return None
        ended_at = utcnow()
        duration = int((ended_at - listener.started_at).total_seconds())
        listener = listener.model_copy(update={"ended_at": ended_at, "duration": duration})
        self._radio_listeners[listener_id] = listener
        return listener

    async def get_analytics_overview(self, top_releases: int) -> AnalyticsOverview:
        recent = sorted(self._page_views, key=lambda v: v.viewed_at, reverse=True)
        # Counter.most_common keeps first-seen order for equal counts
        plays = Counter(p.release_id for p in self._play_counts if p.release_id)
        return AnalyticsOverview(
            total_page_views=len(self._page_views),
            total_play_counts=len(self._play_counts),
            total_radio_listeners=len(self._radio_listeners),
            recent_page_views=recent[:ANALYTICS_RECENT_PAGE_VIEWS],
            top_releases_by_plays=[
                ReleasePlays(release_id=release_id, play_count=count)
                for release_id, count in plays.most_common(top_releases)
            ],
        )
