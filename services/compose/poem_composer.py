"""Compose-session state machine.

Every mutation of a SessionState goes through one PoemComposer method.
Screens move Idle -> ImageSelected -> Generating -> Ready, with Library as
an orthogonal mode that is left by recomputing the compose screen from the
state.

Remote calls are never cancelled. Instead each async operation captures the
session epoch (and, for generation, the dispatch token) before awaiting and
drops its result if either has moved on by the time it resolves.
"""

import logging

from models.image_selection import ImageSelection
from models.poem_types import DEFAULT_STYLE, PoemStyle, VisualTheme
from models.session_models import Screen, SessionState, ViewName
from services.errors import InvalidTransitionError, PhotoPoetError
from services.openai.poem_generator import PoemGenerator

LOGGER = logging.getLogger(__name__)
GENERATION_FAILURE_FALLBACK = "Failed to generate poem."


class PoemComposer:
    """Apply compose operations to a SessionState."""

    def __init__(self, generator: PoemGenerator) -> None:
        if generator is None:
            raise ValueError("PoemGenerator must be provided.")
        self.generator = generator

    def select_image(self, state: SessionState, image: ImageSelection) -> SessionState:
        """Replace the photo and start over from ImageSelected."""
        state.image = image
        state.poem_text = None
        state.inspiration_text = None
        state.error_message = None
        state.screen = Screen.IMAGE_SELECTED
        self._advance_epoch(state)
        return state

    async def request_inspiration(self, state: SessionState) -> SessionState:
        """Fetch a description of the photo. Never changes the screen."""
        image = self._require_image(state, "requesting inspiration")
        if state.inspiration_loading:
            raise InvalidTransitionError("Inspiration is already being requested.")

        epoch = state.epoch
        state.inspiration_loading = True
        state.error_message = None

        try:
            text = await self.generator.describe_image(image.encoded_bytes, image.mime_type)
            error = None
        except PhotoPoetError as exc:
            text, error = None, str(exc)
        except Exception:
            if state.epoch == epoch:
                state.inspiration_loading = False
            raise

        if state.epoch != epoch:
            LOGGER.debug("Discarding stale inspiration result for session %s", state.session_id)
            return state

        state.inspiration_loading = False
        if error is None:
            state.inspiration_text = text
        else:
            state.error_message = error
        return state

    async def start_generation(self, state: SessionState) -> SessionState:
        """Generate a poem in the selected style.

        Success moves Generating -> Ready. Failure moves Generating ->
        ImageSelected with `error_message` set and any earlier poem cleared.
        """
        image = self._require_image(state, "generating a poem")
        if state.screen == Screen.LIBRARY:
            raise InvalidTransitionError("Return to compose before generating a poem.")

        epoch = state.epoch
        state.generation_token += 1
        token = state.generation_token
        style = state.selected_style

        state.screen = Screen.GENERATING
        state.generation_pending = True
        state.error_message = None

        try:
            poem = await self.generator.compose_poem(image.encoded_bytes, image.mime_type, style)
            error = None
        except PhotoPoetError as exc:
            poem, error = None, str(exc) or GENERATION_FAILURE_FALLBACK
        except Exception:
            if state.epoch == epoch and state.generation_token == token:
                state.generation_pending = False
                self._settle(state, Screen.IMAGE_SELECTED)
            raise

        if state.epoch != epoch or state.generation_token != token:
            LOGGER.debug("Discarding stale %s poem for session %s", style.value, state.session_id)
            return state

        state.generation_pending = False
        if error is None:
            state.poem_text = poem
            self._settle(state, Screen.READY)
        else:
            state.poem_text = None
            state.error_message = error
            self._settle(state, Screen.IMAGE_SELECTED)
        return state

    def update_poem_text(self, state: SessionState, text: str) -> SessionState:
        """Replace the poem with the user's edit."""
        if state.screen != Screen.READY:
            raise InvalidTransitionError("The poem can only be edited once it is ready.")
        state.poem_text = text
        return state

    def select_style(self, state: SessionState, style: str) -> SessionState:
        state.selected_style = PoemStyle(style)
        return state

    def select_theme(self, state: SessionState, theme: str) -> SessionState:
        state.theme = VisualTheme(theme)
        return state

    def reset(self, state: SessionState) -> SessionState:
        """Return to Idle, dropping the photo and everything derived from it."""
        state.image = None
        state.poem_text = None
        state.inspiration_text = None
        state.error_message = None
        state.screen = Screen.IDLE
        state.selected_style = DEFAULT_STYLE
        self._advance_epoch(state)
        return state

    def navigate(self, state: SessionState, view: str) -> SessionState:
        """Switch between the library and the compose screens."""
        if ViewName(view) == ViewName.LIBRARY:
            state.screen = Screen.LIBRARY
        else:
            state.screen = self._compose_screen(state)
        return state

    @staticmethod
    def _compose_screen(state: SessionState) -> Screen:
        if state.generation_pending:
            return Screen.GENERATING
        if state.poem_text is not None:
            return Screen.READY
        if state.image is not None:
            return Screen.IMAGE_SELECTED
        return Screen.IDLE

    @staticmethod
    def _settle(state: SessionState, screen: Screen) -> None:
        # Results landing during a library excursion update fields only.
        if state.screen != Screen.LIBRARY:
            state.screen = screen

    @staticmethod
    def _advance_epoch(state: SessionState) -> None:
        state.epoch += 1
        state.inspiration_loading = False
        state.generation_pending = False

    @staticmethod
    def _require_image(state: SessionState, action: str) -> ImageSelection:
        if state.image is None:
            raise InvalidTransitionError(f"Select an image before {action}.")
        return state.image
