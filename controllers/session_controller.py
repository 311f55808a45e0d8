"""Compose session lifecycle and state-machine operations."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request, UploadFile

from dal.poem_library_dal import PoemLibraryDAL
from models.session_models import Screen, SessionState
from services.compose.poem_composer import PoemComposer
from services.compose.session_store import SessionStore
from services.errors import InvalidTransitionError
from services.openai.poem_generator import PoemGenerator
from services.view.view_model import render_view
from utils.media_validation import read_image_selection


def get_state(request: Request, session_id: str) -> SessionState:
	"""Return the session state or raise 404."""
	store: SessionStore = request.app.state.session_store
	try:
		return store.get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc


def _composer(request: Request) -> PoemComposer:
	return PoemComposer(PoemGenerator(request.app.state.openai_client))


def _conflict(exc: InvalidTransitionError) -> HTTPException:
	return HTTPException(status_code=409, detail=str(exc))


def _session_payload(state: SessionState) -> Dict[str, Any]:
	return {"session": state.to_dict()}


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new compose session and return its id."""
	store: SessionStore = request.app.state.session_store
	state = store.create()
	return {"session_id": state.session_id, **_session_payload(state)}


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	return _session_payload(get_state(request, session_id))


async def end_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Drop a session, e.g. when its tab is closed."""
	get_state(request, session_id)
	request.app.state.session_store.discard(session_id)
	return {"session_id": session_id, "closed": True}


async def get_view(request: Request, session_id: str) -> Dict[str, Any]:
	"""Render the view model; the library is only read while it is on screen."""
	state = get_state(request, session_id)
	saved = []
	if state.screen == Screen.LIBRARY:
		saved = await PoemLibraryDAL(request.app.state.db_initializer).list_saved_poems()
	return render_view(state, saved, request.app.state.audio_settings)


async def select_image(request: Request, session_id: str, image: UploadFile) -> Dict[str, Any]:
	state = get_state(request, session_id)
	selection = await read_image_selection(image)
	return _session_payload(_composer(request).select_image(state, selection))


async def request_inspiration(request: Request, session_id: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	try:
		await _composer(request).request_inspiration(state)
	except InvalidTransitionError as exc:
		raise _conflict(exc) from exc
	return _session_payload(state)


async def start_generation(request: Request, session_id: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	try:
		await _composer(request).start_generation(state)
	except InvalidTransitionError as exc:
		raise _conflict(exc) from exc
	return _session_payload(state)


async def update_poem(request: Request, session_id: str, text: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	try:
		_composer(request).update_poem_text(state, text)
	except InvalidTransitionError as exc:
		raise _conflict(exc) from exc
	return _session_payload(state)


async def select_style(request: Request, session_id: str, style: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	try:
		_composer(request).select_style(state, style)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=f"Unknown poem style: {style}") from exc
	return _session_payload(state)


async def select_theme(request: Request, session_id: str, theme: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	try:
		_composer(request).select_theme(state, theme)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=f"Unknown visual theme: {theme}") from exc
	return _session_payload(state)


async def reset_session(request: Request, session_id: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	return _session_payload(_composer(request).reset(state))


async def navigate(request: Request, session_id: str, view: str) -> Dict[str, Any]:
	state = get_state(request, session_id)
	try:
		_composer(request).navigate(state, view)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=f"Unknown view: {view}") from exc
	return _session_payload(state)
