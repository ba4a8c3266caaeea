"""FastAPI application entry point."""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cli.logging_config import setup_logging
from journal.errors import JournalError
from web.deps import get_config, shutdown_queue
from web.routes import analytics, analyze, categories, entries

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(json_mode=True, level=config.logging.level, log_file=config.paths.log_file)
    if not os.getenv("NEXTAUTH_SECRET"):
        logger.warning("web.nextauth_secret_missing")
    logger.info("web.startup", db_path=str(config.paths.db_path))
    yield
    shutdown_queue()
    logger.info("web.shutdown")


app = FastAPI(
    title="Reflect",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow frontend origin
frontend_origin = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JournalError)
async def journal_error_handler(request: Request, exc: JournalError):
    if exc.status_code >= 500:
        logger.error("web.journal_error", path=request.url.path, code=exc.code, error=str(exc))
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "code": exc.code},
    )


# Mount routes
app.include_router(entries.router)
app.include_router(categories.router)
app.include_router(analytics.router)
app.include_router(analyze.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
