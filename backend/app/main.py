from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.errors import AppError
from app.core.logging import configure_logging, get_logger
from app.core.middleware import PublicCORSMiddleware
from app.db.session import engine
import app.models  # noqa: F401  # force model registration

from app.api.v1.admin import router as admin_router
from app.api.v1.auth import router as auth_router
from app.api.v1.companies import router as companies_router
from app.api.v1.contact import router as contact_router
from app.api.v1.health import router as health_router
from app.api.v1.invites import router as invites_router
from app.api.v1.job_listings import router as job_listings_router
from app.api.v1.media import router as media_router
from app.api.v1.pages import router as pages_router
from app.api.v1.public import router as public_router
from app.api.v1.site_features import router as site_features_router
from app.api.v1.sites import router as sites_router
from app.api.v1.social_media import router as social_media_router
from app.api.v1.sponsors import router as sponsors_router
from app.api.v1.users import router as users_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    configure_logging()
    logger.info(
        "startup",
        service=settings.SERVICE_NAME,
        env=settings.ENVIRONMENT,
        debug=settings.DEBUG,
    )
    yield
    logger.info("shutdown")
    await engine.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, method=request.method, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("integrity_conflict", path=request.url.path, method=request.method, error=str(exc.orig))
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Conflict"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_application() -> FastAPI:
    app = FastAPI(title="SiteHub API", lifespan=lifespan)

    # authenticated dashboard origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # added last so it wraps everything else
    app.add_middleware(PublicCORSMiddleware)

    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {
            "status": "ok",
            "service": settings.SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Routers
    app.include_router(health_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(invites_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(sites_router, prefix="/api")
    app.include_router(site_features_router, prefix="/api")
    app.include_router(pages_router, prefix="/api")
    app.include_router(media_router, prefix="/api")
    app.include_router(sponsors_router, prefix="/api")
    app.include_router(contact_router, prefix="/api")
    app.include_router(companies_router, prefix="/api")
    app.include_router(job_listings_router, prefix="/api")
    app.include_router(social_media_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(public_router, prefix="/api")

    return app


app = create_application()
