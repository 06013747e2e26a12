"""
SQLAlchemy (async) implementation of the storage interface.

Each call opens its own session from the storage's session factory and
commits before returning. Database errors propagate to the caller untouched
apart from unique-username violations, which become DuplicateRecordError.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union
from pydantic import BaseModel
from sqlalchemy import select, delete, func, desc, text
from sqlalchemy.exc import IntegrityError
from loguru import logger

from grouptherapy import models
from grouptherapy.constants import ANALYTICS_RECENT_PAGE_VIEWS, DEFAULT_RADIO_STATION_NAME
from grouptherapy.database import build_engine, build_sessionmaker, init_db, close_db
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
from grouptherapy.utils.time import utcnow, ensure_utc


class DatabaseCollection(ContentCollection):
    """Table-backed collection for one content model."""

    def __init__(self, sessionmaker, model, record_cls: Type[BaseModel], label: str):
        self.label = label
        self._sessionmaker = sessionmaker
        self._model = model
        self._record_cls = record_cls

    async def list_all(self) -> List[BaseModel]:
        async with self._sessionmaker() as db:
            result = await db.execute(select(self._model).order_by(self._model.created_at))
            return [self._record_cls.model_validate(row) for row in result.scalars().all()]

    async def get(self, record_id: str) -> Optional[BaseModel]:
        async with self._sessionmaker() as db:
            row = await db.get(self._model, record_id)
            return self._record_cls.model_validate(row) if row else None

    async def create(self, data: BaseModel) -> BaseModel:
        async with self._sessionmaker() as db:
            row = self._model(id=str(uuid.uuid4()), created_at=utcnow(), **data.model_dump())
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return self._record_cls.model_validate(row)

    async def update(self, record_id: str, changes: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
        async with self._sessionmaker() as db:
            row = await db.get(self._model, record_id)
            if row is None:
                raise RecordNotFoundError(f"{self.label} not found")
            fields = changes_to_dict(changes)
            # Validate the merged record before anything reaches the row
            current = self._record_cls.model_validate(row).model_dump()
            merged = self._record_cls.model_validate({**current, **fields})
            for field in fields:
                if field in self._record_cls.model_fields:
                    setattr(row, field, getattr(merged, field))
            await db.commit()
            await db.refresh(row)
            return self._record_cls.model_validate(row)

    async def delete(self, record_id: str) -> None:
        async with self._sessionmaker() as db:
            await db.execute(delete(self._model).where(self._model.id == record_id))
            await db.commit()


class DatabaseStorage(StorageBackend):
    """Relational storage over an async SQLAlchemy engine."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = build_engine(database_url, echo=echo)
        self._sessionmaker = build_sessionmaker(self.engine)

        self.releases = DatabaseCollection(self._sessionmaker, models.Release, content.Release, "Release")
        self.events = DatabaseCollection(self._sessionmaker, models.Event, content.Event, "Event")
        self.posts = DatabaseCollection(self._sessionmaker, models.Post, content.Post, "Post")
        self.contacts = DatabaseCollection(self._sessionmaker, models.Contact, content.Contact, "Contact")
        self.artists = DatabaseCollection(self._sessionmaker, models.Artist, content.Artist, "Artist")
        self.radio_shows = DatabaseCollection(self._sessionmaker, models.RadioShow, content.RadioShow, "Radio show")
        self.playlists = DatabaseCollection(self._sessionmaker, models.Playlist, content.Playlist, "Playlist")
        self.videos = DatabaseCollection(self._sessionmaker, models.Video, content.Video, "Video")

    async def initialize(self) -> None:
        await init_db(self.engine)
        logger.info("Database initialized")

    async def ping(self) -> bool:
        async with self._sessionmaker() as db:
            await db.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        await close_db(self.engine)

    # --- Admin users ---

    async def _admin_row(self, db, username: str):
        result = await db.execute(select(models.AdminUser).where(models.AdminUser.username == username))
        return result.scalar_one_or_none()

    async def get_admin_user_by_username(self, username: str) -> Optional[AdminUser]:
        async with self._sessionmaker() as db:
            row = await self._admin_row(db, username)
            return AdminUser.model_validate(row) if row else None

    async def create_admin_user(self, user: AdminUserCreate) -> AdminUser:
        async with self._sessionmaker() as db:
            now = utcnow()
            row = models.AdminUser(**user.model_dump(), created_at=now, updated_at=now)
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise DuplicateRecordError(f"Admin user '{user.username}' already exists") from e
            await db.refresh(row)
            return AdminUser.model_validate(row)

    async def update_admin_user(self, username: str, changes: AdminUserUpdate) -> AdminUser:
        async with self._sessionmaker() as db:
            row = await self._admin_row(db, username)
            if row is None:
                raise RecordNotFoundError("Admin user not found")
            for field, value in changes.model_dump(exclude_none=True).items():
                setattr(row, field, value)
            row.updated_at = utcnow()
            await db.commit()
            await db.refresh(row)
            return AdminUser.model_validate(row)

    async def update_admin_last_login(self, username: str, logged_in_at: datetime) -> None:
        async with self._sessionmaker() as db:
            row = await self._admin_row(db, username)
            if row is not None:
                row.last_login_at = logged_in_at
                row.updated_at = logged_in_at
                await db.commit()

    # --- Login attempts ---

    async def record_login_attempt(self, attempt: LoginAttemptCreate) -> LoginAttempt:
        async with self._sessionmaker() as db:
            row = models.LoginAttempt(
                username=attempt.username,
                ip_address=attempt.ip_address,
                successful=attempt.successful,
                attempted_at=attempt.attempted_at or utcnow(),
            )
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return LoginAttempt.model_validate(row)

    async def get_recent_login_attempts(self, username: str, since: datetime) -> List[LoginAttempt]:
        async with self._sessionmaker() as db:
            result = await db.execute(
                select(models.LoginAttempt)
                .where(
                    models.LoginAttempt.username == username,
                    models.LoginAttempt.attempted_at >= since,
                )
                .order_by(models.LoginAttempt.id)
            )
            return [LoginAttempt.model_validate(row) for row in result.scalars().all()]

    # --- Sessions ---

    async def create_session(self, session: SessionRecord) -> SessionRecord:
        async with self._sessionmaker() as db:
            row = models.AdminSession(id=session.id, username=session.username, expires_at=session.expires_at)
            db.add(row)
            await db.commit()
            return session

    async def get_session(self, session_id: str) -> Optional[SessionRecord]:
        async with self._sessionmaker() as db:
            row = await db.get(models.AdminSession, session_id)
            return SessionRecord.model_validate(row) if row else None

    async def delete_session(self, session_id: str) -> None:
        async with self._sessionmaker() as db:
            await db.execute(delete(models.AdminSession).where(models.AdminSession.id == session_id))
            await db.commit()

    async def delete_expired_sessions(self, now: datetime) -> int:
        async with self._sessionmaker() as db:
            result = await db.execute(delete(models.AdminSession).where(models.AdminSession.expires_at <= now))
            await db.commit()
            return result.rowcount or 0

    # --- Radio settings ---

    async def _settings_row(self, db):
        result = await db.execute(select(models.RadioSettings).order_by(models.RadioSettings.id).limit(1))
        return result.scalar_one_or_none()

    async def get_radio_settings(self) -> Optional[RadioSettings]:
        async with self._sessionmaker() as db:
            row = await self._settings_row(db)
            return RadioSettings.model_validate(row) if row else None

    async def init_radio_settings(self) -> RadioSettings:
        async with self._sessionmaker() as db:
            row = await self._settings_row(db)
            if row is None:
                row = models.RadioSettings(
                    station_name=DEFAULT_RADIO_STATION_NAME,
                    is_live=False,
                    listener_count=0,
                    updated_at=utcnow(),
                )
                db.add(row)
                await db.commit()
                await db.refresh(row)
                logger.info("Radio settings initialized")
            return RadioSettings.model_validate(row)

    async def update_radio_settings(self, changes: RadioSettingsUpdate) -> RadioSettings:
        async with self._sessionmaker() as db:
            row = await self._settings_row(db)
            if row is None:
                raise StorageError("Radio settings not initialized")
            for field, value in changes.model_dump(exclude_unset=True).items():
                setattr(row, field, value)
            row.updated_at = utcnow()
            await db.commit()
            await db.refresh(row)
            return RadioSettings.model_validate(row)

    # --- Analytics ---

    async def record_page_view(self, view: PageViewCreate) -> PageView:
        async with self._sessionmaker() as db:
            row = models.PageView(**view.model_dump(), viewed_at=utcnow())
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return PageView.model_validate(row)

    async def record_play_count(self, play: PlayCountCreate) -> PlayCount:
        async with self._sessionmaker() as db:
            row = models.PlayCount(**play.model_dump(), played_at=utcnow())
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return PlayCount.model_validate(row)

    async def record_radio_listener(self, listener: RadioListenerCreate) -> RadioListener:
        async with self._sessionmaker() as db:
            row = models.RadioListener(id=str(uuid.uuid4()), started_at=utcnow(), **listener.model_dump())
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return RadioListener.model_validate(row)

    async def end_radio_listener(self, listener_id: str) -> Optional[RadioListener]:
        async with self._sessionmaker() as db:
            row = await db.get(models.RadioListener, listener_id)
            if row is None:
                return None
            ended_at = utcnow()
            row.ended_at = ended_at
            row.duration = int((ended_at - ensure_utc(row.started_at)).total_seconds())
            await db.commit()
            await db.refresh(row)
            return RadioListener.model_validate(row)

    async def get_analytics_overview(self, top_releases: int) -> AnalyticsOverview:
        async with self._sessionmaker() as db:
            total_page_views = await db.scalar(select(func.count()).select_from(models.PageView))
            total_play_counts = await db.scalar(select(func.count()).select_from(models.PlayCount))
            total_radio_listeners = await db.scalar(select(func.count()).select_from(models.RadioListener))

            recent = await db.execute(
                select(models.PageView)
                .order_by(desc(models.PageView.viewed_at))
                .limit(ANALYTICS_RECENT_PAGE_VIEWS)
            )

            plays = func.count(models.PlayCount.id).label("plays")
            top = await db.execute(
                select(models.PlayCount.release_id, plays)
                .where(models.PlayCount.release_id.is_not(None))
                .group_by(models.PlayCount.release_id)
                .order_by(desc(plays))
                .limit(top_releases)
            )

            return AnalyticsOverview(
                total_page_views=total_page_views or 0,
                total_play_counts=total_play_counts or 0,
                total_radio_listeners=total_radio_listeners or 0,
                recent_page_views=[PageView.model_validate(row) for row in recent.scalars().all()],
                top_releases_by_plays=[
                    ReleasePlays(release_id=release_id, play_count=count)
                    for release_id, count in top.all()
                ],
            )
