"""
Content collection API routes.

Every content type gets the same five routes (list, get, create, patch,
delete) built by build_content_router(); only who may read or create
differs between them.
"""
from typing import List, Type
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from loguru import logger

from grouptherapy.api.auth import require_auth
from grouptherapy.api.deps import get_storage
from grouptherapy.schemas import content
from grouptherapy.storage.base import StorageBackend


def build_content_router(
    prefix: str,
    collection: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    record_schema: Type[BaseModel],
    label: str,
    public_read: bool = True,
    public_create: bool = False,
    featured_listing: bool = False,
) -> APIRouter:
    """
    Build CRUD routes for one storage collection.

    Args:
        prefix: URL prefix, e.g. "/api/releases"
        collection: Attribute name of the collection on the storage backend
        create_schema: Request body for POST
        update_schema: Request body for PATCH (all fields optional)
        record_schema: Response model
        label: Entity name used in messages ("Release not found")
        public_read: Whether list/get work without a session
        public_create: Whether POST works without a session
        featured_listing: Add GET {prefix}/featured
    """
    router = APIRouter(prefix=prefix, tags=[collection])
    read_deps = [] if public_read else [Depends(require_auth)]
    create_deps = [] if public_create else [Depends(require_auth)]

    @router.get("", response_model=List[record_schema], dependencies=read_deps)
    async def list_records(storage: StorageBackend = Depends(get_storage)):
        return await getattr(storage, collection).list_all()

    if featured_listing:
        @router.get("/featured", response_model=List[record_schema], dependencies=read_deps)
        async def list_featured(storage: StorageBackend = Depends(get_storage)):
            records = await getattr(storage, collection).list_all()
            return [r for r in records if r.featured]

    @router.get("/{record_id}", response_model=record_schema, dependencies=read_deps)
    async def get_record(record_id: str, storage: StorageBackend = Depends(get_storage)):
        record = await getattr(storage, collection).get(record_id)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return record

    @router.post("", response_model=record_schema, dependencies=create_deps)
    async def create_record(
        data: create_schema,
        request: Request,
        storage: StorageBackend = Depends(get_storage),
    ):
        record = await getattr(storage, collection).create(data)
        logger.info(f"{label} {record.id} created by {getattr(request.state, 'username', 'public form')}")
        return record

    @router.patch("/{record_id}", response_model=record_schema)
    async def update_record(
        record_id: str,
        changes: update_schema,
        username: str = Depends(require_auth),
        storage: StorageBackend = Depends(get_storage),
    ):
        # RecordNotFoundError is rendered as 404 by the exception handlers
        record = await getattr(storage, collection).update(record_id, changes)
        logger.info(f"{label} {record_id} updated by {username}")
        return record

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        username: str = Depends(require_auth),
        storage: StorageBackend = Depends(get_storage),
    ):
        await getattr(storage, collection).delete(record_id)
        logger.info(f"{label} {record_id} deleted by {username}")
        return {"message": f"{label} deleted"}

    return router


releases_router = build_content_router(
    "/api/releases", "releases",
    content.ReleaseCreate, content.ReleaseUpdate, content.Release, "Release",
)
events_router = build_content_router(
    "/api/events", "events",
    content.EventCreate, content.EventUpdate, content.Event, "Event",
)
posts_router = build_content_router(
    "/api/posts", "posts",
    content.PostCreate, content.PostUpdate, content.Post, "Post",
)
# Contact form: anyone may submit, only the dashboard may read
contacts_router = build_content_router(
    "/api/contacts", "contacts",
    content.ContactCreate, content.ContactUpdate, content.Contact, "Contact",
    public_read=False, public_create=True,
)
artists_router = build_content_router(
    "/api/artists", "artists",
    content.ArtistCreate, content.ArtistUpdate, content.Artist, "Artist",
    featured_listing=True,
)
radio_shows_router = build_content_router(
    "/api/radio/shows", "radio_shows",
    content.RadioShowCreate, content.RadioShowUpdate, content.RadioShow, "Radio show",
)
playlists_router = build_content_router(
    "/api/playlists", "playlists",
    content.PlaylistCreate, content.PlaylistUpdate, content.Playlist, "Playlist",
)
videos_router = build_content_router(
    "/api/videos", "videos",
    content.VideoCreate, content.VideoUpdate, content.Video, "Video",
)

routers = [
    releases_router,
    events_router,
    posts_router,
    contacts_router,
    artists_router,
    radio_shows_router,
    playlists_router,
    videos_router,
]
