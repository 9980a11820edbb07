import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import close_remote_probe, get_settings
from src.app_shell.config import validate_ops_rules
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings.data_dir)
    except Exception:
        logger.critical("Rules load failed (%s)", settings.rules_path, exc_info=True)
        raise
    logger.info("Rules loaded from %s", settings.rules_path)

    if settings.migrations_dir.is_dir():
        SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()

    yield

    close_remote_probe()


app = FastAPI(
    title="CMS HTML Editor API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import editor  # noqa: E402

app.include_router(editor.router, prefix="/admin/editor", tags=["Editor"])

# Stored files, including resampled thumbnails
app.mount(
    "/assets",
    StaticFiles(directory=str(get_settings().assets_dir), check_dir=False),
    name="assets",
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "editor"}
