from dataclasses import replace
from typing import Any, Dict, Optional

from fastapi import Request

from dal.audio_settings_dal import AudioSettingsDAL
from models.audio_settings import AudioSettings
from services.view.view_model import render_audio


async def get_audio_settings(request: Request) -> Dict[str, Any]:
    """Return the settings loaded at startup (and kept current since)."""
    settings: AudioSettings = request.app.state.audio_settings
    return render_audio(settings)


async def update_audio_settings(
    request: Request,
    volume: Optional[float] = None,
    muted: Optional[bool] = None,
    toggle_mute: bool = False,
) -> Dict[str, Any]:
    """Apply a volume/mute change and persist it.

    The volume is applied first, so a non-zero level unmutes unless the
    same request also sets `muted` explicitly. The in-memory settings are
    only replaced once the change is stored.
    """
    settings = replace(request.app.state.audio_settings)
    if volume is not None:
        settings.set_volume(volume)
    if toggle_mute:
        settings.toggle_mute()
    if muted is not None:
        settings.muted = muted

    await AudioSettingsDAL(request.app.state.db_initializer).save(settings)
    request.app.state.audio_settings = settings
    return render_audio(settings)
