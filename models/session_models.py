"""Session domain models for the compose workflow."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from models.image_selection import ImageSelection
from models.poem_types import DEFAULT_STYLE, DEFAULT_THEME, PoemStyle, VisualTheme


class Screen(str, Enum):
	"""Discrete UI phase governing which operations are valid."""

	IDLE = "Idle"
	IMAGE_SELECTED = "ImageSelected"
	GENERATING = "Generating"
	READY = "Ready"
	LIBRARY = "Library"


class ViewName(str, Enum):
	"""Navigation targets exposed by the header."""

	COMPOSE = "compose"
	LIBRARY = "library"


@dataclass
class SessionState:
	"""In-memory state for a single compose session (one browser tab)."""

	session_id: str
	image: Optional[ImageSelection] = None
	poem_text: Optional[str] = None
	inspiration_text: Optional[str] = None
	screen: Screen = Screen.IDLE
	error_message: Optional[str] = None
	selected_style: PoemStyle = DEFAULT_STYLE
	theme: VisualTheme = DEFAULT_THEME
	inspiration_loading: bool = False
	epoch: int = 0
	generation_token: int = 0
	generation_pending: bool = False
	created_at: float = field(default_factory=lambda: time.time())

	def to_dict(self) -> Dict[str, Any]:
		"""Return the client-facing representation (image bytes omitted)."""
		return {
			"session_id": self.session_id,
			"screen": self.screen.value,
			"has_image": self.image is not None,
			"image_preview": self.image.preview_reference if self.image else None,
			"mime_type": self.image.mime_type if self.image else None,
			"poem_text": self.poem_text,
			"inspiration_text": self.inspiration_text,
			"error_message": self.error_message,
			"selected_style": self.selected_style.value,
			"theme": self.theme.value,
			"inspiration_loading": self.inspiration_loading,
			"generation_pending": self.generation_pending,
		}
