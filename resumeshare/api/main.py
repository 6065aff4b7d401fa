import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from resumeshare.adapters.sqlite.migrator import SQLiteMigrator
from resumeshare.api.deps import get_settings
from resumeshare.app_shell.config import validate_ops_rules
from resumeshare.rules.loader import load_rules

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)

    validate_ops_rules(rules, settings.data_dir)
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)

    applied = SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))

    logger.info("Database ready at %s", settings.db_path)
    yield


app = FastAPI(
    title="Resume Share API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from resumeshare.api.routes import analytics, resumes, uploads  # noqa: E402

app.include_router(analytics.router, prefix="/api", tags=["Analytics"])
app.include_router(resumes.router, prefix="/api/resume", tags=["Resumes"])
app.include_router(uploads.router, prefix="", tags=["Uploads"])

app.mount(
    "/uploads",
    StaticFiles(directory=settings.uploads_dir, check_dir=False),
    name="uploads",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root() -> str:
    return "Resume Share API is running"


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
