# api/app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.app.config import get_settings
from api.app.middleware.request_logging import RequestLoggingMiddleware
from api.app.routes import health, profiles
from db.engine import dispose_engine, init_db
from db.session import reset_session_factory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.database_auto_create:
        await init_db()
    logger.info("Profile intake API ready on port %d", settings.api_port)
    yield
    await dispose_engine()
    reset_session_factory()
    logger.info("Database engine disposed")


app = FastAPI(
    title="Profile Intake API",
    description="Profile submissions with background AI enrichment",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    logger.info("Invalid request on %s %s: %s", request.method, request.url.path, problems)
    return JSONResponse(status_code=422, content={"message": "Invalid request: " + "; ".join(problems)})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Database error while processing the request"})


app.include_router(health.router)
app.include_router(profiles.router, prefix="/api")

if settings.media_backend == "local":
    app.mount(settings.media_url_prefix, StaticFiles(directory=settings.media_dir), name="uploads")

if settings.frontend_dist_path and Path(settings.frontend_dist_path).is_dir():
    app.mount("/", StaticFiles(directory=settings.frontend_dist_path, html=True), name="frontend")
