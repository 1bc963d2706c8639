"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.database import async_session_factory, init_db
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging
from app.core.seed import seed_demo_data
from app.services.note_store import NoteStore

logger = logging.getLogger(__name__)

_settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(_settings.log_level)
    # Startup: ensure tables exist, then optionally load the demo tenants
    if _settings.create_tables_on_startup:
        await init_db()
    if _settings.seed_demo_data:
        async with async_session_factory() as session:
            await seed_demo_data(session)
    logger.info("Tenant Notes API ready")
    yield


app = FastAPI(
    title="Tenant Notes",
    version="0.1.0",
    description="Multi-tenant notes API with per-plan quotas",
    lifespan=lifespan,
)

# One store per process; holds the per-tenant create locks
app.state.note_store = NoteStore(free_plan_note_limit=_settings.free_plan_note_limit)

# ── Errors ───────────────────────────────────────────────────
register_error_handlers(app)

# ── CORS (added last, so it wraps error responses too) ───────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── API routes ───────────────────────────────────────────────
app.include_router(api_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
