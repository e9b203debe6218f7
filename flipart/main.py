import inspect
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from openai import AsyncOpenAI

# Importing config loads .env before any getenv below.
from flipart.config import LOG_LEVEL
from flipart.dal.kv_dal import KeyValueDAL
from flipart.routes.assistant_route import router as assistant_router
from flipart.routes.audio_route import router as audio_router
from flipart.routes.auth_route import router as auth_router
from flipart.routes.generation_route import router as generation_router
from flipart.services.gateway.openai_gateway import AIGateway, OpenAIGateway
from flipart.services.persistent_store import PersistentStore
from flipart.services.studio import Studio
from flipart.utils.database_init import AsyncDatabaseInitializer

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


async def _close_client(client) -> None:
    """Close the OpenAI client if it exposes a close/aclose method."""
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception:
        LOGGER.warning("Error while closing the OpenAI client", exc_info=True)


def create_app(gateway: Optional[AIGateway] = None, db_dir: Optional[Path] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    `gateway` replaces the OpenAI-backed gateway (no API key is needed then);
    `db_dir` overrides DATABASE_DIR.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Initialize the SQLite store (existing data is kept), the AI gateway
        and the Studio, restore persisted state, and attach them to `app.state`.
        """
        db_initializer = AsyncDatabaseInitializer(db_dir)
        await db_initializer.ensure_database()
        app.state.db_initializer = db_initializer

        openai_client = None
        active_gateway = gateway
        if active_gateway is None:
            if not os.getenv("OPENAI_API_KEY"):
                raise RuntimeError("OPENAI_API_KEY environment variable is not set")
            try:
                openai_client = AsyncOpenAI()
            except Exception as exc:
                raise RuntimeError("Failed to initialize OpenAI Async client") from exc
            active_gateway = OpenAIGateway(openai_client)
        app.state.openai_client = openai_client

        studio = Studio(active_gateway, PersistentStore(KeyValueDAL(db_initializer)))
        await studio.load()
        app.state.studio = studio

        try:
            yield
        finally:
            if openai_client is not None:
                await _close_client(openai_client)

    app = FastAPI(title="FlipArt Studio", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies the store and gateway are ready.
        """
        has_db = hasattr(request.app.state, "db_initializer")
        has_studio = getattr(request.app.state, "studio", None) is not None
        return {"ok": True, "db_initialized": has_db, "studio_ready": has_studio}

    app.include_router(auth_router)
    app.include_router(generation_router)
    app.include_router(assistant_router)
    app.include_router(audio_router)

    return app


app = create_app()
