from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.settings_controller import get_audio_settings, update_audio_settings

router = APIRouter(prefix="/settings", tags=["settings"])


class AudioPayload(BaseModel):
    volume: Optional[float] = None
    muted: Optional[bool] = None
    toggle_mute: bool = False


@router.get("/audio")
async def get_audio_route(request: Request):
    try:
        return await get_audio_settings(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.put("/audio")
async def update_audio_route(request: Request, payload: AudioPayload):
    """Update the ambient music volume and mute flag."""
    try:
        return await update_audio_settings(request, payload.volume, payload.muted, payload.toggle_mute)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
