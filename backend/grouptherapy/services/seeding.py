"""
First-run data: the initial admin account and optional demo content.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from loguru import logger

from grouptherapy.schemas.auth import AdminUserCreate
from grouptherapy.schemas.content import ArtistCreate, EventCreate, RadioShowCreate, ReleaseCreate
from grouptherapy.services.auth_service import AuthService
from grouptherapy.storage.base import StorageBackend
from grouptherapy.utils.time import utcnow


async def ensure_initial_admin(
    storage: StorageBackend,
    auth_service: AuthService,
    username: Optional[str],
    password: Optional[str],
) -> bool:
    """
    Create the configured admin if it does not exist yet.

    Returns True when an account was created. Existing accounts are left alone,
    including their password.
    """
    if not username or not password:
        return False
    if await storage.get_admin_user_by_username(username) is not None:
        return False

    await storage.create_admin_user(
        AdminUserCreate(
            username=username,
            password_hash=auth_service.hash_password(password),
            role="admin",
            is_active=True,
        )
    )
    logger.info(f"Seeded initial admin user '{username}'")
    return True


async def seed_demo_content(storage: StorageBackend) -> None:
    """Populate an empty store with a few releases, artists, events and shows."""
    if await storage.releases.list_all():
        logger.debug("Content already present, skipping demo seed")
        return

    for name, slug, bio, featured in (
        ("Luna Wave", "luna-wave", "Electronic music producer from Berlin", True),
        ("Neon Pulse", "neon-pulse", "Techno artist pushing boundaries", True),
        ("Aqua Dreams", "aqua-dreams", "Deep house specialist", False),
    ):
        await storage.artists.create(ArtistCreate(name=name, slug=slug, bio=bio, featured=featured))

    for title, slug, artist, kind, genres, released in (
        ("Midnight Sessions", "midnight-sessions", "Luna Wave", "album", ["Electronic", "House"], "2024-01-15"),
        ("Echoes of Tomorrow", "echoes-of-tomorrow", "Neon Pulse", "single", ["Techno"], "2024-02-01"),
        ("Deep Waters", "deep-waters", "Aqua Dreams", "ep", ["Deep House"], "2024-02-10"),
    ):
        await storage.releases.create(
            ReleaseCreate(
                title=title,
                slug=slug,
                artist_name=artist,
                type=kind,
                genres=genres,
                release_date=datetime.fromisoformat(released).replace(tzinfo=timezone.utc),
                published=True,
            )
        )

    await storage.events.create(
        EventCreate(
            title="GroupTherapy Sessions Vol. 1",
            slug="grouptherapy-sessions-vol-1",
            venue="Warehouse 23",
            city="London",
            country="UK",
            date=utcnow() + timedelta(days=7),
            ticket_price="25",
            published=True,
            featured=True,
        )
    )

    for title, slug, host, day, start, end, live in (
        ("Morning Therapy", "morning-therapy", "DJ Luna", 1, "07:00", "10:00", False),
        ("Peak Time Sessions", "peak-time-sessions", "Neon Pulse", 2, "20:00", "23:00", True),
    ):
        await storage.radio_shows.create(
            RadioShowCreate(
                title=title,
                slug=slug,
                host_name=host,
                day_of_week=day,
                start_time=start,
                end_time=end,
                timezone="UTC",
                is_live=live,
                published=True,
            )
        )

    logger.info("Demo content seeded")
