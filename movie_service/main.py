"""FastAPI application entry point with lifespan, logging, and middleware."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_service.config import settings
from movie_service.errors import ErrorCode
from movie_service.models import HealthResponse
from movie_service.routers import movies
from movie_service.services.database import MovieRepository
from movie_service.services.movies import MovieService

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = MovieRepository(
        settings.db_path, case_sensitive_titles=settings.title_case_sensitive
    ).open()
    movies.init_router(MovieService(repo))
    app.state.repo = repo

    logger.info(
        "Application started: db=%s  title_case_sensitive=%s",
        settings.db_path, settings.title_case_sensitive,
    )
    try:
        yield
    finally:
        logger.info("Application shutting down")
        repo.close()


app = FastAPI(
    title="Movie API",
    description=(
        "CRUD REST API over a movie catalogue with filtering, pagination "
        "and duplicate-title protection."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d  (%.0f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({
            "code": int(ErrorCode.VALIDATION_ERROR),
            "error": "Validation error",
            "details": exc.errors(),
        }),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.get("/health", response_model=HealthResponse, tags=["system"])
def health():
    """Check database connectivity."""
    repo: MovieRepository = app.state.repo
    db_ok = repo.health_check()
    return HealthResponse(
        status="ok" if db_ok else "degraded",
        database=db_ok,
        timestamp=datetime.now(timezone.utc),
    )


app.include_router(movies.router)
