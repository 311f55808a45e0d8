import inspect
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from dal.audio_settings_dal import AudioSettingsDAL
from routes.library_route import router as library_router
from routes.session_route import router as session_router
from routes.settings_route import router as settings_router
from services.compose.session_store import SessionStore
from utils.database_init import AsyncDatabaseInitializer

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite key-value store (at DATABASE_DIR/app.db)
      - the persisted audio settings (read once here, written on every change)
      - the in-memory compose session store
      - the OpenAI async client, when OPENAI_API_KEY is set
    and attach them to `app.state`.
    """
    db_initializer = AsyncDatabaseInitializer()
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    app.state.audio_settings = await AudioSettingsDAL(db_initializer).load()
    app.state.session_store = SessionStore()

    # A missing key is not fatal: generation calls report it to the user instead.
    openai_client = None
    if os.getenv("OPENAI_API_KEY"):
        try:
            openai_client = AsyncOpenAI()
        except Exception as exc:
            raise RuntimeError("Failed to initialize OpenAI Async client") from exc
    else:
        LOGGER.warning("OPENAI_API_KEY is not set; poem generation is disabled.")
    app.state.openai_client = openai_client

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    result = aclose()
                    if inspect.isawaitable(result):
                        await result
                except Exception as exc:
                    LOGGER.warning("Error while closing OpenAI client: %s", exc)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(title="PhotoPoet", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies DB initializer and OpenAI client presence.
        """
        has_db = hasattr(request.app.state, "db_initializer")
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {"ok": True, "db_initialized": has_db, "openai_available": has_openai}

    # Register application routers
    app.include_router(session_router)
    app.include_router(library_router)
    app.include_router(settings_router)

    return app


app = create_app()
