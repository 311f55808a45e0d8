import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import Response

from controllers.session_controller import get_state
from dal.poem_library_dal import PoemLibraryDAL
from models.session_models import Screen, SessionState
from services.export.document_export import (
    DOC_MEDIA_TYPE,
    build_document,
    content_disposition,
    document_filename,
)
from services.export.share_links import build_share_links
from services.thumbnail_generator import ThumbnailGenerator

LOGGER = logging.getLogger(__name__)


def _require_poem(state: SessionState) -> str:
    if state.poem_text is None:
        raise HTTPException(status_code=409, detail="No poem has been composed yet.")
    return state.poem_text


async def _library_preview(state: SessionState) -> Optional[str]:
    """Return a thumbnail data URI for the library, or the raw preview if Pillow cannot read it."""
    if state.image is None:
        return None
    try:
        # Pillow work is blocking -> run in thread
        return await asyncio.to_thread(ThumbnailGenerator().create_preview_data_uri, state.image.encoded_bytes)
    except ValueError as exc:
        LOGGER.warning("Storing full-size preview, thumbnail failed: %s", exc)
        return state.image.preview_reference


def _document_response(content: bytes, title: Optional[str]) -> Response:
    return Response(
        content=content,
        media_type=DOC_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(document_filename(title))},
    )


async def save_current_poem(request: Request, session_id: str, title: Optional[str]) -> Dict[str, Any]:
    """Persist the session's poem to the library.

    Args:
        request: FastAPI Request (to access app.state.db_initializer).
        session_id: Compose session holding the poem.
        title: Optional title entered by the user.

    Returns:
        A dict with the created record under `poem`.

    Raises:
        HTTPException(409) if the session is not showing a ready poem.
        HTTPException(400) if the poem is empty.
    """
    state = get_state(request, session_id)
    if state.screen != Screen.READY:
        raise HTTPException(status_code=409, detail="Only a ready poem can be saved.")
    poem = _require_poem(state)

    library = PoemLibraryDAL(request.app.state.db_initializer)
    try:
        record = await library.create_poem(
            poem,
            title=title,
            inspiration=state.inspiration_text,
            image_preview=await _library_preview(state),
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"poem": record.to_storage()}


async def export_current_poem(request: Request, session_id: str, title: Optional[str]) -> Response:
    """Return the session's composition as a downloadable `.doc`."""
    state = get_state(request, session_id)
    poem = _require_poem(state)
    content = build_document(poem, title=title, inspiration=state.inspiration_text)
    return _document_response(content, title)


async def share_current_poem(request: Request, session_id: str, title: Optional[str]) -> Dict[str, Any]:
    """Return clipboard text, the native share payload, and provider links."""
    state = get_state(request, session_id)
    poem = _require_poem(state)
    return build_share_links(poem, title=title, inspiration=state.inspiration_text)


async def list_library(request: Request) -> Dict[str, Any]:
    library = PoemLibraryDAL(request.app.state.db_initializer)
    records = await library.list_saved_poems()
    return {"poems": [r.to_storage() for r in records]}


async def delete_saved_poem(request: Request, poem_id: int) -> Dict[str, Any]:
    """Delete a saved poem; unknown ids report `deleted: False`."""
    library = PoemLibraryDAL(request.app.state.db_initializer)
    deleted = await library.delete_poem(int(poem_id))
    return {"id": poem_id, "deleted": deleted}


async def export_saved_poem(request: Request, poem_id: int) -> Response:
    """Return a saved poem as a downloadable `.doc`.

    Raises:
        HTTPException(404) if the poem does not exist.
    """
    library = PoemLibraryDAL(request.app.state.db_initializer)
    record = await library.get_poem(int(poem_id))
    if record is None:
        raise HTTPException(status_code=404, detail=f"Poem {poem_id} not found")
    content = build_document(
        record.poem,
        title=record.title,
        inspiration=record.inspiration,
        created_at=record.created_at,
    )
    return _document_response(content, record.title)
