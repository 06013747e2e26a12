"""
Radio station API routes: now-playing metadata, settings and listener tracking.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger

from grouptherapy.api.auth import require_auth, get_client_ip
from grouptherapy.api.deps import get_storage
from grouptherapy.schemas.radio import RadioSettings, RadioSettingsUpdate, RadioListener, RadioListenerCreate
from grouptherapy.storage.base import StorageBackend

router = APIRouter(prefix="/api/radio", tags=["radio"])


async def _settings(storage: StorageBackend) -> RadioSettings:
    settings = await storage.get_radio_settings()
    if settings is None:
        settings = await storage.init_radio_settings()
    return settings


@router.get("/metadata")
async def get_metadata(storage: StorageBackend = Depends(get_storage)):
    """Now-playing card for the site player, with fallbacks for empty fields."""
    settings = await _settings(storage)
    return {
        "title": settings.current_track or settings.station_name,
        "artist": settings.current_artist or "Various Artists",
        "show_name": settings.current_show_name or "Live Radio",
        "host_name": settings.current_host_name or "GroupTherapy",
        "cover_url": settings.current_cover_url,
        "listener_count": settings.listener_count or 0,
        "is_live": settings.is_live or False,
        "stream_url": settings.stream_url,
    }


@router.get("/settings", response_model=RadioSettings, dependencies=[Depends(require_auth)])
async def get_settings(storage: StorageBackend = Depends(get_storage)):
    return await _settings(storage)


@router.patch("/settings", response_model=RadioSettings)
async def update_settings(
    changes: RadioSettingsUpdate,
    username: str = Depends(require_auth),
    storage: StorageBackend = Depends(get_storage),
):
    """Update station settings, initialising them on first use."""
    await _settings(storage)
    settings = await storage.update_radio_settings(changes)
    logger.info(f"Radio settings updated by {username}")
    return settings


@router.post("/listeners", response_model=RadioListener)
async def start_listening(
    data: RadioListenerCreate,
    request: Request,
    storage: StorageBackend = Depends(get_storage),
):
    """Record the start of a listening session."""
    if not data.ip_address:
        data = data.model_copy(update={"ip_address": get_client_ip(request)})
    return await storage.record_radio_listener(data)


@router.post("/listeners/{listener_id}/end", response_model=RadioListener)
async def stop_listening(listener_id: str, storage: StorageBackend = Depends(get_storage)):
    listener = await storage.end_radio_listener(listener_id)
    if listener is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Listener not found")
    return listener
