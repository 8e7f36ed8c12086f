from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import Database
from .errors import BulkLogError
from .logging_config import setup_logging
from .schemas import Health
from .services.auth import router as auth_router
from .services.profile import router as profile_router
from .services.workouts import router as workouts_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("/health", response_model=Health)
async def health() -> Health:
    return Health(ok=True)


async def bulklog_error_handler(_request: Request, exc: BulkLogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    # answered with 400, not FastAPI's default 422
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = "Invalid request body."
    if fields:
        message = f"Invalid value for: {', '.join(fields)}."
    return JSONResponse(status_code=400, content={"message": message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    database = Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await database.init_db()
        logger.info("bulklog: schema ready")
        yield
        await database.dispose()

    app = FastAPI(title="BulkLog", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BulkLogError, bulklog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(workouts_router, prefix="/api")
    return app

