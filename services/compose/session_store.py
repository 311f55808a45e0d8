"""Simple in-memory store for compose sessions."""

from __future__ import annotations

from typing import Dict
from uuid import uuid4

from models.session_models import SessionState


class SessionStore:
	"""Hold one SessionState per browser tab for the process lifetime."""

	def __init__(self) -> None:
		self._sessions: Dict[str, SessionState] = {}

	def create(self) -> SessionState:
		"""Create a new session in its initial Idle state."""
		session_id = uuid4().hex
		state = SessionState(session_id=session_id)
		self._sessions[session_id] = state
		return state

	def get(self, session_id: str) -> SessionState:
		"""Return a session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	def discard(self, session_id: str) -> None:
		"""Forget a session; unknown ids are ignored."""
		self._sessions.pop(session_id, None)
