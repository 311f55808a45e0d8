"""Pure rendering of session state into view models.

`render_view` is a function of SessionState, the saved library, and the
audio settings only; it performs no I/O. Each control carries the name of
the single operation it triggers under `action` so that the frontend can
dispatch it to the matching route.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from models.audio_settings import AudioSettings
from models.poem_types import THEME_CLASSES, PoemStyle, VisualTheme
from models.saved_poem import SavedPoemRecord
from models.session_models import Screen, SessionState
from services.export.document_export import format_display_date

LOADING_MESSAGES = (
    "Observing the light...",
    "Finding the hidden rhythm...",
    "Weaving visual threads into verse...",
    "Almost there...",
)
LOADING_INTERVAL_SECONDS = 2


def _control(label: str, action: str, **extra: Any) -> Dict[str, Any]:
    return {"label": label, "action": action, **extra}


def render_audio(audio: AudioSettings) -> Dict[str, Any]:
    """Describe the floating volume controller."""
    effective = audio.effective_volume
    if audio.muted or audio.volume == 0:
        icon = "mute"
    elif audio.volume < 0.5:
        icon = "low"
    else:
        icon = "high"
    return {
        "volume": audio.volume,
        "muted": audio.muted,
        "effective_volume": effective,
        "percent": round(effective * 100),
        "icon": icon,
        "mute_toggle": _control("Unmute" if audio.muted else "Mute", "toggle_mute"),
    }


def render_theme(state: SessionState) -> Dict[str, Any]:
    return {
        "name": state.theme.value,
        "class": THEME_CLASSES[state.theme],
        "options": [
            {"name": theme.value, "selected": theme == state.theme, "action": "select_theme"}
            for theme in VisualTheme
        ],
    }


def render_compose(state: SessionState) -> Dict[str, Any]:
    """Describe the compose screen for the current phase."""
    has_image = state.image is not None
    choosing = has_image and state.screen in (Screen.IDLE, Screen.IMAGE_SELECTED)
    ready = state.screen == Screen.READY

    inspiration: Dict[str, Any] = {
        "visible": choosing or (ready and bool(state.inspiration_text)),
        "text": state.inspiration_text,
        "button": None,
    }
    if state.inspiration_text is None:
        inspiration["button"] = _control(
            "Reading the scene..." if state.inspiration_loading else "Reveal Inspiration",
            "request_inspiration",
            disabled=state.inspiration_loading,
        )

    error: Optional[Dict[str, Any]] = None
    if state.error_message:
        error = {
            "title": "Something went wrong",
            "message": state.error_message,
            "retry": _control("Try Again", "start_generation"),
        }

    poem: Optional[Dict[str, Any]] = None
    if ready:
        poem = {
            "text": state.poem_text or "",
            "inspiration": state.inspiration_text,
            "style_label": f"Style: {state.selected_style.value}",
            "edit": _control("Edit Poem", "update_poem_text"),
            "regenerate": _control("Regenerate", "start_generation"),
            "save": _control("Save Poem", "save_poem", disabled=not (state.poem_text or "").strip()),
            "export": _control("Export as .doc", "export_document"),
            "share": _control("Share", "share"),
        }

    return {
        "uploader": {
            "has_image": has_image,
            "preview": state.image.preview_reference if state.image else None,
            "pick": _control("Change Photo" if has_image else "Upload Photo", "select_image"),
        },
        "inspiration": inspiration,
        "styles": {
            "visible": choosing,
            "options": [
                {"name": style.value, "selected": style == state.selected_style, "action": "select_style"}
                for style in PoemStyle
            ],
        },
        "generate": dict(_control(f"Write {state.selected_style.value}", "start_generation"), visible=choosing),
        "loading": {
            "visible": state.screen == Screen.GENERATING,
            "messages": list(LOADING_MESSAGES),
            "interval_seconds": LOADING_INTERVAL_SECONDS,
        },
        "error": error,
        "poem": poem,
        "reset": dict(
            _control("Create Another Poem" if ready else "Start Over", "reset"),
            visible=choosing or ready,
        ),
    }


def render_library_entry(record: SavedPoemRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "title": record.title,
        "poem": record.poem,
        "inspiration": record.inspiration,
        "image_preview": record.image_preview,
        "display_date": format_display_date(record.created_at),
        "delete": _control("Delete Poem", "delete_poem", poem_id=record.id),
        "export": _control("Export as .doc", "export_saved_poem", poem_id=record.id),
    }


def render_library(saved_poems: Sequence[SavedPoemRecord]) -> Dict[str, Any]:
    entries: List[Dict[str, Any]] = [render_library_entry(record) for record in saved_poems]
    return {
        "entries": entries,
        "empty": not entries,
        "back": _control("Back to Compose", "navigate", view="compose"),
    }


def render_view(
    state: SessionState,
    saved_poems: Sequence[SavedPoemRecord],
    audio: AudioSettings,
) -> Dict[str, Any]:
    """Return the full view model for one session."""
    in_library = state.screen == Screen.LIBRARY
    view: Dict[str, Any] = {
        "screen": state.screen.value,
        "header": {
            "current_view": "library" if in_library else "compose",
            "compose": _control("Compose", "navigate", view="compose"),
            "library": _control("Library", "navigate", view="library"),
        },
        "theme": render_theme(state),
        "audio": render_audio(audio),
    }
    if in_library:
        view["library"] = render_library(saved_poems)
    else:
        view["compose"] = render_compose(state)
    return view
