"""Shared fixtures: a tiny PNG, a stub generator, and a temp database."""
import asyncio
import io
from typing import Optional

import pytest
from PIL import Image

from models.poem_types import PoemStyle
from services.errors import GenerationError
from utils.database_init import AsyncDatabaseInitializer
from utils.media_validation import build_image_selection

HAIKU = "Still water wakes slow\nA heron folds the morning\nLight settles like dust"
INSPIRATION = "A quiet dawn over still water."


def make_png(size=(12, 8), color=(30, 120, 200, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class StubGenerator:
    """Stands in for PoemGenerator; optional gates hold calls open until set."""

    def __init__(
        self,
        inspiration: str = INSPIRATION,
        poem: str = HAIKU,
        inspiration_error: Optional[Exception] = None,
        poem_error: Optional[Exception] = None,
    ):
        self.inspiration = inspiration
        self.poem = poem
        self.inspiration_error = inspiration_error
        self.poem_error = poem_error
        self.inspiration_gate: Optional[asyncio.Event] = None
        self.poem_gate: Optional[asyncio.Event] = None
        self.styles = []

    async def describe_image(self, image_b64: str, mime_type: str) -> str:
        inspiration = self.inspiration
        if self.inspiration_gate is not None:
            await self.inspiration_gate.wait()
        if self.inspiration_error is not None:
            raise self.inspiration_error
        return inspiration

    async def compose_poem(self, image_b64: str, mime_type: str, style: PoemStyle) -> str:
        self.styles.append(style)
        poem = self.poem
        if self.poem_gate is not None:
            await self.poem_gate.wait()
        if self.poem_error is not None:
            raise self.poem_error
        return poem


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def image_selection(png_bytes):
    return build_image_selection(png_bytes, "image/png")


@pytest.fixture
def stub_generator():
    return StubGenerator()


@pytest.fixture
def failing_generator():
    return StubGenerator(
        inspiration_error=GenerationError("Could not glean inspiration from this image."),
        poem_error=GenerationError("The muses are silent. Please try again."),
    )


@pytest.fixture
def db_dir(tmp_path, monkeypatch):
    path = tmp_path / "database"
    monkeypatch.setenv("DATABASE_DIR", str(path))
    monkeypatch.delenv("RESET_DATABASE_ON_START", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return path


@pytest.fixture
def db_initializer(db_dir):
    return AsyncDatabaseInitializer()
