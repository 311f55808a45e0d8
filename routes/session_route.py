"""FastAPI routes for compose sessions."""

from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.library_controller import export_current_poem, save_current_poem, share_current_poem
from controllers.session_controller import (
	end_session,
	get_session,
	get_view,
	navigate,
	request_inspiration,
	reset_session,
	select_image,
	select_style,
	select_theme,
	start_generation,
	start_session,
	update_poem,
)

router = APIRouter(prefix="/sessions")


class PoemPayload(BaseModel):
	text: str


class StylePayload(BaseModel):
	style: str


class ThemePayload(BaseModel):
	theme: str


class NavigatePayload(BaseModel):
	view: str


class SavePayload(BaseModel):
	title: Optional[str] = None


def _internal_error(exc: Exception) -> HTTPException:
	return HTTPException(status_code=500, detail=str(exc))


@router.post("")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.delete("/{session_id}")
async def end_session_route(request: Request, session_id: str):
	try:
		return await end_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.get("/{session_id}/view")
async def get_view_route(request: Request, session_id: str):
	"""Return the rendered view model for the session's current screen."""
	try:
		return await get_view(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.post("/{session_id}/image")
async def select_image_route(request: Request, session_id: str, image: UploadFile = File(...)):
	try:
		return await select_image(request, session_id, image)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.post("/{session_id}/inspiration")
async def request_inspiration_route(request: Request, session_id: str):
	try:
		return await request_inspiration(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.post("/{session_id}/generate")
async def start_generation_route(request: Request, session_id: str):
	try:
		return await start_generation(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.put("/{session_id}/poem")
async def update_poem_route(request: Request, session_id: str, payload: PoemPayload):
	try:
		return await update_poem(request, session_id, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.put("/{session_id}/style")
async def select_style_route(request: Request, session_id: str, payload: StylePayload):
	try:
		return await select_style(request, session_id, payload.style)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.put("/{session_id}/theme")
async def select_theme_route(request: Request, session_id: str, payload: ThemePayload):
	try:
		return await select_theme(request, session_id, payload.theme)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.post("/{session_id}/reset")
async def reset_session_route(request: Request, session_id: str):
	try:
		return await reset_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.post("/{session_id}/navigate")
async def navigate_route(request: Request, session_id: str, payload: NavigatePayload):
	try:
		return await navigate(request, session_id, payload.view)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.post("/{session_id}/save")
async def save_poem_route(request: Request, session_id: str, payload: SavePayload):
	"""Save the ready poem to the library."""
	try:
		return await save_current_poem(request, session_id, payload.title)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.get("/{session_id}/export")
async def export_poem_route(request: Request, session_id: str, title: Optional[str] = None):
	"""Download the current composition as a .doc file."""
	try:
		return await export_current_poem(request, session_id, title)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)


@router.get("/{session_id}/share")
async def share_poem_route(request: Request, session_id: str, title: Optional[str] = None):
	try:
		return await share_current_poem(request, session_id, title)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error(exc)
